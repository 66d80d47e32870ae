# invoicedesk/api/dashboard.py

from typing import List

from fastapi import APIRouter, Depends, Response

from invoicedesk.api.deps import get_store
from invoicedesk.models.dashboard import CardData, Revenue
from invoicedesk.services import queries
from invoicedesk.store.base import Store

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/cards", response_model=CardData)
def card_data(response: Response, store: Store = Depends(get_store)) -> CardData:
    """
    Invoice and customer counts plus collected and pending totals.
    """
    response.headers["Cache-Control"] = "no-store"
    return queries.fetch_card_data(store)


@router.get("/revenue", response_model=List[Revenue])
def revenue(store: Store = Depends(get_store)) -> List[Revenue]:
    return queries.fetch_revenue(store)
