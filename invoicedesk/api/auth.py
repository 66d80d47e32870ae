# invoicedesk/api/auth.py

from typing import Optional

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import RedirectResponse

from invoicedesk.api.deps import get_identity_provider, get_session_token, state_response
from invoicedesk.config import get_settings
from invoicedesk.models.actions import LoginSuccess, Redirect
from invoicedesk.services import auth
from invoicedesk.services.identity import IdentityProvider

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    result = auth.login(provider, {"email": email, "password": password})
    if not isinstance(result, LoginSuccess):
        return state_response(result, status.HTTP_401_UNAUTHORIZED)

    response = RedirectResponse(url=result.location, status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        get_settings().session_cookie,
        result.session.access_token,
        max_age=result.session.expires_in,
        httponly=True,
        samesite="lax",
    )
    return response


@router.post("/logout")
def logout(
    token: Optional[str] = Depends(get_session_token),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    result = auth.logout(provider, token)
    if not isinstance(result, Redirect):
        return state_response(result, status.HTTP_502_BAD_GATEWAY)

    response = RedirectResponse(url=result.location, status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(get_settings().session_cookie)
    return response
