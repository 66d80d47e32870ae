# invoicedesk/store/base.py
"""
Storage-access contract shared by the SQL and PostgREST adapters.

Every method returns plain dicts with amounts in integer cents; the
query layer decides how values are presented.
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol

Row = Dict[str, Any]


class Store(Protocol):
    def list_customers(self) -> List[Row]:
        ...

    def filtered_customers(self, query: str, limit: int, offset: int) -> List[Row]:
        ...

    def count_filtered_customers(self, query: str) -> int:
        ...

    def latest_invoices(self, limit: int) -> List[Row]:
        ...

    def filtered_invoices(self, query: str, limit: int, offset: int) -> List[Row]:
        ...

    def count_filtered_invoices(self, query: str) -> int:
        ...

    def invoices_by_id(self, invoice_id: str) -> List[Row]:
        ...

    def card_totals(self) -> Row:
        ...

    def revenue(self) -> List[Row]:
        ...

    def insert_invoice(self, values: Mapping[str, Any]) -> Optional[str]:
        ...

    def update_invoice(self, invoice_id: str, values: Mapping[str, Any]) -> int:
        ...

    def delete_invoice(self, invoice_id: str) -> int:
        ...
