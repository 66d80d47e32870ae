# invoicedesk/models/dashboard.py

from pydantic import BaseModel


class CardData(BaseModel):
    number_of_invoices: int
    number_of_customers: int
    total_paid_invoices: str
    total_pending_invoices: str


class Revenue(BaseModel):
    month: str
    revenue: float
