# invoicedesk/models/customers.py

from typing import List, Optional

from pydantic import BaseModel


class CustomerField(BaseModel):
    id: str
    name: str


class CustomerTableRow(BaseModel):
    id: str
    name: str
    email: str
    image_url: Optional[str] = None
    total_invoices: int
    total_pending: str
    total_paid: str


class CustomersPage(BaseModel):
    items: List[CustomerTableRow]
    page: int
    total_pages: int
