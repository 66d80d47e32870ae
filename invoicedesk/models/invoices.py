# invoicedesk/models/invoices.py

from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel

InvoiceStatus = Literal["pending", "paid"]


class InvoiceForm(BaseModel):
    id: str
    customer_id: str
    amount: Decimal
    status: InvoiceStatus

    class Config:
        from_attributes = True


class InvoiceTableRow(BaseModel):
    id: str
    customer_id: str
    name: str
    email: str
    image_url: Optional[str] = None
    date: date
    amount: str
    status: InvoiceStatus


class InvoicesPage(BaseModel):
    items: List[InvoiceTableRow]
    page: int
    total_pages: int


class LatestInvoice(BaseModel):
    id: str
    name: str
    image_url: Optional[str] = None
    email: str
    amount: str


class PagesOut(BaseModel):
    total_pages: int
