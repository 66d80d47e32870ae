# invoicedesk/store/rest.py
"""
Store adapter for a PostgREST endpoint (e.g. a Supabase project).

Aggregating reads go through three database functions exposed as RPCs,
each taking a single ``query`` argument:

    fetch_filtered_customers(query) -> id, name, email, image_url,
                                       total_invoices, total_pending, total_paid
    fetch_filtered_invoices(query)  -> id, customer_id, name, email, image_url,
                                       date, amount, status
    get_card_data()                 -> invoices_count, customers_count,
                                       total_invoices_paid, total_invoices_pending

The caller's access token is passed in explicitly; without one the anon
key is used as the bearer.
"""

from contextlib import contextmanager
from typing import Any, Dict, List, Mapping, Optional

import httpx

from invoicedesk.errors import StoreError
from invoicedesk.store.base import Row

DEFAULT_TIMEOUT = 10.0


@contextmanager
def _translate_errors():
    try:
        yield
    except (httpx.HTTPError, ValueError) as exc:
        raise StoreError(str(exc)) from exc


class RestStore:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        access_token: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ):
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=DEFAULT_TIMEOUT)
        self.base_url = base_url.rstrip("/") + "/rest/v1"
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
        }

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def _send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> httpx.Response:
        headers = dict(self.headers)
        if prefer:
            headers["Prefer"] = prefer

        response = self.client.request(
            method,
            f"{self.base_url}/{path}",
            params=params,
            json=json,
            headers=headers,
        )
        response.raise_for_status()
        return response

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> Any:
        with _translate_errors():
            response = self._send(method, path, params=params, json=json, prefer=prefer)
            if not response.content:
                return None
            return response.json()

    def _rpc(self, name: str, args: Dict[str, Any], **params) -> List[Row]:
        return self._request("POST", f"rpc/{name}", params=params or None, json=args) or []

    def _count_rpc(self, name: str, args: Dict[str, Any]) -> int:
        """Row count of an RPC result, read from the Content-Range total."""
        with _translate_errors():
            response = self._send(
                "POST",
                f"rpc/{name}",
                params={"select": "id", "limit": 0},
                json=args,
                prefer="count=exact",
            )
            # "0-5/13", or "*/13" for an empty window
            return int(response.headers.get("content-range", "").rpartition("/")[2])

    # ---- Reads ----

    def list_customers(self) -> List[Row]:
        return self._request(
            "GET", "customers", params={"select": "id,name", "order": "name.asc"}
        )

    def filtered_customers(self, query: str, limit: int, offset: int) -> List[Row]:
        return self._rpc(
            "fetch_filtered_customers",
            {"query": query},
            order="name.asc,id.asc",
            limit=limit,
            offset=offset,
        )

    def count_filtered_customers(self, query: str) -> int:
        return self._count_rpc("fetch_filtered_customers", {"query": query})

    def latest_invoices(self, limit: int) -> List[Row]:
        rows = self._request(
            "GET",
            "invoices",
            params={
                "select": "id,amount,customers(name,image_url,email)",
                "order": "date.desc,id.asc",
                "limit": limit,
            },
        )

        latest = []
        for row in rows:
            customer = row.get("customers") or {}
            latest.append(
                {
                    "id": row["id"],
                    "amount": row["amount"],
                    "name": customer.get("name"),
                    "image_url": customer.get("image_url"),
                    "email": customer.get("email"),
                }
            )
        return latest

    def filtered_invoices(self, query: str, limit: int, offset: int) -> List[Row]:
        return self._rpc(
            "fetch_filtered_invoices",
            {"query": query},
            order="date.desc,id.asc",
            limit=limit,
            offset=offset,
        )

    def count_filtered_invoices(self, query: str) -> int:
        return self._count_rpc("fetch_filtered_invoices", {"query": query})

    def invoices_by_id(self, invoice_id: str) -> List[Row]:
        return self._request(
            "GET",
            "invoices",
            params={"select": "id,customer_id,amount,status", "id": f"eq.{invoice_id}"},
        )

    def card_totals(self) -> Row:
        rows = self._rpc("get_card_data", {})
        if not rows:
            raise StoreError("get_card_data returned no rows")

        row = rows[0]
        return {
            "invoices_count": row["invoices_count"],
            "customers_count": row["customers_count"],
            "total_paid": row["total_invoices_paid"],
            "total_pending": row["total_invoices_pending"],
        }

    def revenue(self) -> List[Row]:
        return self._request("GET", "revenue", params={"select": "month,revenue"})

    # ---- Writes ----

    def insert_invoice(self, values: Mapping[str, Any]) -> Optional[str]:
        created = self._request(
            "POST", "invoices", json=dict(values), prefer="return=representation"
        )
        return created[0]["id"] if created else None

    def update_invoice(self, invoice_id: str, values: Mapping[str, Any]) -> int:
        updated = self._request(
            "PATCH",
            "invoices",
            params={"id": f"eq.{invoice_id}"},
            json=dict(values),
            prefer="return=representation",
        )
        return len(updated or [])

    def delete_invoice(self, invoice_id: str) -> int:
        deleted = self._request(
            "DELETE",
            "invoices",
            params={"id": f"eq.{invoice_id}"},
            prefer="return=representation",
        )
        return len(deleted or [])
