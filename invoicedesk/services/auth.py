# invoicedesk/services/auth.py

import logging
from typing import Any, Mapping, Optional, Union

from invoicedesk.errors import IdentityError
from invoicedesk.models.actions import IdentityState, LoginSuccess, Redirect
from invoicedesk.services.identity import IdentityProvider
from invoicedesk.services.validation import validate_login_form

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"
LANDING_PATH = "/"

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials. Failed to login."
LOGOUT_FAILED_MESSAGE = "Failed to logout."


def login(
    provider: IdentityProvider,
    fields: Mapping[str, Any],
    prev_state: Optional[IdentityState] = None,
) -> Union[LoginSuccess, IdentityState]:
    data, errors = validate_login_form(fields)
    if errors is not None:
        return errors

    try:
        session = provider.sign_in_with_password(data.email, data.password)
    except IdentityError:
        # wrong password and unknown user look the same to the caller
        logger.warning("Sign-in failed")
        return IdentityState(message=INVALID_CREDENTIALS_MESSAGE)

    logger.info("Signed in")
    return LoginSuccess(location=DASHBOARD_PATH, session=session)


def logout(
    provider: IdentityProvider, access_token: Optional[str]
) -> Union[Redirect, IdentityState]:
    try:
        provider.sign_out(access_token)
    except IdentityError:
        logger.exception("Sign-out failed")
        return IdentityState(message=LOGOUT_FAILED_MESSAGE)

    return Redirect(location=LANDING_PATH)
