# invoicedesk/api/deps.py

from functools import lru_cache
from typing import Iterator, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from invoicedesk.config import get_settings
from invoicedesk.db.engine import get_engine
from invoicedesk.models.actions import ActionState
from invoicedesk.services.identity import GoTrueIdentityProvider, IdentityProvider
from invoicedesk.services.revalidation import ViewCache, view_cache
from invoicedesk.store.base import Store
from invoicedesk.store.rest import RestStore
from invoicedesk.store.sql import SqlStore


def _supabase_credentials():
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
    return settings.supabase_url, settings.supabase_anon_key


def get_session_token(request: Request) -> Optional[str]:
    return request.cookies.get(get_settings().session_cookie)


def require_session(token: Optional[str] = Depends(get_session_token)) -> Optional[str]:
    if get_settings().require_login and not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return token


def get_store(token: Optional[str] = Depends(require_session)) -> Iterator[Store]:
    """One store per request, carrying the caller's session token."""
    if get_settings().store_backend == "rest":
        url, key = _supabase_credentials()
        store = RestStore(url, key, access_token=token)
        try:
            yield store
        finally:
            store.close()
    else:
        yield SqlStore(get_engine())


@lru_cache(maxsize=1)
def get_identity_provider() -> IdentityProvider:
    url, key = _supabase_credentials()
    return GoTrueIdentityProvider(url, key)


def get_view_cache() -> ViewCache:
    return view_cache


def state_response(state: ActionState, failure_status: int) -> JSONResponse:
    # field errors are the caller's to fix; anything else is on our side
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY if state.errors else failure_status
    return JSONResponse(status_code=status_code, content=state.model_dump())
