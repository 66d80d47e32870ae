# invoicedesk/store/sql.py

from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import String, case, cast, func, or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from invoicedesk.db.schema import customers, invoices, revenue
from invoicedesk.errors import StoreError
from invoicedesk.store.base import Row


@contextmanager
def _translate_errors():
    try:
        yield
    except SQLAlchemyError as exc:
        raise StoreError(str(exc)) from exc


def _customer_filter(query: str):
    return or_(
        customers.c.name.icontains(query, autoescape=True),
        customers.c.email.icontains(query, autoescape=True),
    )


def _invoice_filter(query: str):
    return or_(
        customers.c.name.icontains(query, autoescape=True),
        customers.c.email.icontains(query, autoescape=True),
        cast(invoices.c.amount, String).icontains(query, autoescape=True),
        cast(invoices.c.date, String).icontains(query, autoescape=True),
        invoices.c.status.icontains(query, autoescape=True),
    )


def _status_sum(status: str):
    return func.coalesce(
        func.sum(case((invoices.c.status == status, invoices.c.amount), else_=0)),
        0,
    )


def _storable(values: Mapping[str, Any]) -> Dict[str, Any]:
    row = dict(values)
    if isinstance(row.get("date"), str):
        row["date"] = date.fromisoformat(row["date"])
    return row


class SqlStore:
    """Store adapter issuing SQLAlchemy Core statements against an Engine."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def _all(self, stmt) -> List[Row]:
        with _translate_errors(), self.engine.connect() as conn:
            return [dict(row) for row in conn.execute(stmt).mappings().all()]

    def _scalar(self, stmt) -> Any:
        with _translate_errors(), self.engine.connect() as conn:
            return conn.execute(stmt).scalar_one()

    # ---- Reads ----

    def list_customers(self) -> List[Row]:
        stmt = select(customers.c.id, customers.c.name).order_by(customers.c.name.asc())
        return self._all(stmt)

    def filtered_customers(self, query: str, limit: int, offset: int) -> List[Row]:
        stmt = (
            select(
                customers.c.id,
                customers.c.name,
                customers.c.email,
                customers.c.image_url,
                func.count(invoices.c.id).label("total_invoices"),
                _status_sum("pending").label("total_pending"),
                _status_sum("paid").label("total_paid"),
            )
            .select_from(customers.outerjoin(invoices))
            .where(_customer_filter(query))
            .group_by(
                customers.c.id,
                customers.c.name,
                customers.c.email,
                customers.c.image_url,
            )
            .order_by(customers.c.name.asc(), customers.c.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return self._all(stmt)

    def count_filtered_customers(self, query: str) -> int:
        stmt = (
            select(func.count())
            .select_from(customers)
            .where(_customer_filter(query))
        )
        return self._scalar(stmt)

    def latest_invoices(self, limit: int) -> List[Row]:
        stmt = (
            select(
                invoices.c.id,
                invoices.c.amount,
                customers.c.name,
                customers.c.image_url,
                customers.c.email,
            )
            .select_from(invoices.join(customers))
            .order_by(invoices.c.date.desc(), invoices.c.id.asc())
            .limit(limit)
        )
        return self._all(stmt)

    def filtered_invoices(self, query: str, limit: int, offset: int) -> List[Row]:
        stmt = (
            select(
                invoices.c.id,
                invoices.c.customer_id,
                customers.c.name,
                customers.c.email,
                customers.c.image_url,
                invoices.c.date,
                invoices.c.amount,
                invoices.c.status,
            )
            .select_from(invoices.join(customers))
            .where(_invoice_filter(query))
            .order_by(invoices.c.date.desc(), invoices.c.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return self._all(stmt)

    def count_filtered_invoices(self, query: str) -> int:
        stmt = (
            select(func.count())
            .select_from(invoices.join(customers))
            .where(_invoice_filter(query))
        )
        return self._scalar(stmt)

    def invoices_by_id(self, invoice_id: str) -> List[Row]:
        stmt = select(
            invoices.c.id,
            invoices.c.customer_id,
            invoices.c.amount,
            invoices.c.status,
        ).where(invoices.c.id == invoice_id)
        return self._all(stmt)

    def card_totals(self) -> Row:
        invoice_stmt = select(
            func.count(invoices.c.id).label("invoices_count"),
            _status_sum("paid").label("total_paid"),
            _status_sum("pending").label("total_pending"),
        )
        customer_stmt = select(func.count()).select_from(customers)

        with _translate_errors(), self.engine.connect() as conn:
            totals = dict(conn.execute(invoice_stmt).mappings().one())
            totals["customers_count"] = conn.execute(customer_stmt).scalar_one()

        return totals

    def revenue(self) -> List[Row]:
        stmt = select(revenue.c.month, revenue.c.revenue)
        return self._all(stmt)

    # ---- Writes ----

    def insert_invoice(self, values: Mapping[str, Any]) -> Optional[str]:
        with _translate_errors(), self.engine.begin() as conn:
            result = conn.execute(invoices.insert().values(**_storable(values)))
            return result.inserted_primary_key[0]

    def update_invoice(self, invoice_id: str, values: Mapping[str, Any]) -> int:
        stmt = (
            invoices.update()
            .where(invoices.c.id == invoice_id)
            .values(**_storable(values))
        )
        with _translate_errors(), self.engine.begin() as conn:
            return conn.execute(stmt).rowcount

    def delete_invoice(self, invoice_id: str) -> int:
        stmt = invoices.delete().where(invoices.c.id == invoice_id)
        with _translate_errors(), self.engine.begin() as conn:
            return conn.execute(stmt).rowcount
