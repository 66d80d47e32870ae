# invoicedesk/services/identity.py

from typing import Optional, Protocol

import httpx

from invoicedesk.errors import IdentityError
from invoicedesk.models.actions import AuthSession


class IdentityProvider(Protocol):
    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        ...

    def sign_out(self, access_token: Optional[str]) -> None:
        ...


class GoTrueIdentityProvider:
    """Password sign-in against a Supabase (GoTrue) auth endpoint."""

    def __init__(self, base_url: str, api_key: str, client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/") + "/auth/v1"
        self.api_key = api_key
        self.client = client or httpx.Client(timeout=10.0)

    def _post(self, path: str, token: Optional[str] = None, **kwargs) -> httpx.Response:
        headers = {"apikey": self.api_key}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            response = self.client.post(f"{self.base_url}/{path}", headers=headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise IdentityError(str(exc)) from exc
        return response

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        response = self._post(
            "token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        try:
            return AuthSession.model_validate(response.json())
        except ValueError as exc:
            raise IdentityError("Malformed sign-in response") from exc

    def sign_out(self, access_token: Optional[str]) -> None:
        if not access_token:
            return
        self._post("logout", token=access_token)
