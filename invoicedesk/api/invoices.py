# invoicedesk/api/invoices.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Response, status
from fastapi.responses import RedirectResponse

from invoicedesk.api.deps import get_store, get_view_cache, state_response
from invoicedesk.models.actions import Redirect
from invoicedesk.models.invoices import InvoiceForm, InvoicesPage, LatestInvoice, PagesOut
from invoicedesk.services import mutations, queries
from invoicedesk.services.revalidation import ViewCache
from invoicedesk.store.base import Store

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _form_fields(customer_id, amount, status_):
    return {"customerId": customer_id, "amount": amount, "status": status_}


def _action_response(result):
    if isinstance(result, Redirect):
        return RedirectResponse(url=result.location, status_code=status.HTTP_303_SEE_OTHER)
    return state_response(result, status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("", response_model=InvoicesPage)
def list_invoices(
    response: Response,
    query: str = Query("", description="Matches customer name, email, amount, date or status"),
    page: int = Query(1, ge=1),
    store: Store = Depends(get_store),
):
    response.headers["Cache-Control"] = "no-store"
    return InvoicesPage(
        items=queries.fetch_filtered_invoices(store, query, page),
        page=page,
        total_pages=queries.fetch_invoices_pages(store, query),
    )


@router.get("/pages", response_model=PagesOut)
def invoice_pages(query: str = Query(""), store: Store = Depends(get_store)) -> PagesOut:
    return PagesOut(total_pages=queries.fetch_invoices_pages(store, query))


@router.get("/latest", response_model=List[LatestInvoice])
def latest_invoices(response: Response, store: Store = Depends(get_store)):
    response.headers["Cache-Control"] = "no-store"
    return queries.fetch_latest_invoices(store)


@router.get("/{invoice_id}", response_model=InvoiceForm)
def get_invoice(invoice_id: str, response: Response, store: Store = Depends(get_store)) -> InvoiceForm:
    """
    Look up a single invoice by id; the amount is in dollars.
    """
    invoice = queries.fetch_invoice_by_id(store, invoice_id)
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")

    response.headers["Cache-Control"] = "no-store"
    return invoice


@router.post("")
def create_invoice(
    customer_id: Optional[str] = Form(None, alias="customerId"),
    amount: Optional[str] = Form(None),
    status_: Optional[str] = Form(None, alias="status"),
    store: Store = Depends(get_store),
    cache: ViewCache = Depends(get_view_cache),
):
    result = mutations.create_invoice(
        store,
        _form_fields(customer_id, amount, status_),
        revalidate=cache.revalidate_path,
    )
    return _action_response(result)


@router.put("/{invoice_id}")
def update_invoice(
    invoice_id: str,
    customer_id: Optional[str] = Form(None, alias="customerId"),
    amount: Optional[str] = Form(None),
    status_: Optional[str] = Form(None, alias="status"),
    store: Store = Depends(get_store),
    cache: ViewCache = Depends(get_view_cache),
):
    result = mutations.update_invoice(
        store,
        invoice_id,
        _form_fields(customer_id, amount, status_),
        revalidate=cache.revalidate_path,
    )
    return _action_response(result)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(
    invoice_id: str,
    store: Store = Depends(get_store),
    cache: ViewCache = Depends(get_view_cache),
):
    failure = mutations.delete_invoice(store, invoice_id, revalidate=cache.revalidate_path)
    if failure is not None:
        return state_response(failure, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
