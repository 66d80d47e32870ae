# invoicedesk/api/customers.py

from typing import List

from fastapi import APIRouter, Depends, Query

from invoicedesk.models.customers import CustomerField, CustomersPage
from invoicedesk.models.invoices import PagesOut
from invoicedesk.services import queries
from invoicedesk.store.base import Store
from invoicedesk.api.deps import get_store

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=List[CustomerField])
def list_customers(store: Store = Depends(get_store)) -> List[CustomerField]:
    """
    Return all customers (id, name) sorted by name.
    """
    return queries.fetch_customers(store)


@router.get("/names", response_model=List[str])
def customer_names(store: Store = Depends(get_store)) -> List[str]:
    return queries.fetch_customer_names(store)


@router.get("/table", response_model=CustomersPage)
def customers_table(
    query: str = Query("", description="Case-insensitive match on name or email"),
    page: int = Query(1, ge=1),
    store: Store = Depends(get_store),
) -> CustomersPage:
    """
    Customers matching the query with their invoice count and pending/paid totals.
    """
    return CustomersPage(
        items=queries.fetch_filtered_customers(store, query, page),
        page=page,
        total_pages=queries.fetch_customers_pages(store, query),
    )


@router.get("/pages", response_model=PagesOut)
def customer_pages(query: str = Query(""), store: Store = Depends(get_store)) -> PagesOut:
    return PagesOut(total_pages=queries.fetch_customers_pages(store, query))
