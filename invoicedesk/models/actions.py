# invoicedesk/models/actions.py
"""
Results handed back by form actions: either an error state the form can
render inline, or a place to send the user next.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ActionState(BaseModel):
    errors: Dict[str, List[str]] = Field(default_factory=dict)
    message: Optional[str] = None


class InvoiceActionState(ActionState):
    pass


class IdentityState(ActionState):
    pass


class Redirect(BaseModel):
    location: str


class AuthSession(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None


class LoginSuccess(Redirect):
    session: AuthSession
