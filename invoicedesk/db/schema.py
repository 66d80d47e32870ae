# invoicedesk/db/schema.py

import uuid

from sqlalchemy import (
    MetaData, Table, Column, Integer, String,
    Numeric, Date, ForeignKey, CheckConstraint, Text
)

INVOICE_STATUSES = ("pending", "paid")

metadata = MetaData()


def _new_id() -> str:
    return str(uuid.uuid4())


customers = Table(
    "customers",
    metadata,
    Column("id", String(36), primary_key=True, default=_new_id),
    Column("name", String, nullable=False),
    Column("email", String, nullable=False),
    Column("image_url", Text, nullable=True),
)

invoices = Table(
    "invoices",
    metadata,
    Column("id", String(36), primary_key=True, default=_new_id),
    Column("customer_id", String(36), ForeignKey("customers.id"), nullable=False),
    Column("amount", Integer, nullable=False),
    Column("status", String, nullable=False, default="pending"),
    Column("date", Date, nullable=False),
    CheckConstraint("amount > 0", name="ck_invoices_amount_positive"),
    CheckConstraint(
        "status IN ('pending', 'paid')", name="ck_invoices_status_enum"
    ),
)

revenue = Table(
    "revenue",
    metadata,
    Column("id", String(36), primary_key=True, default=_new_id),
    Column("month", String, nullable=False, unique=True),
    Column("revenue", Numeric(18, 2), nullable=False),
)
