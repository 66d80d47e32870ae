# invoicedesk/services/validation.py
"""
Form validation for invoices and login.

Both validators take the raw submitted fields (strings, possibly missing)
and return either the parsed input or an error state keyed by form field
name. They never raise.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Tuple, Type, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from invoicedesk.db.schema import INVOICE_STATUSES
from invoicedesk.models.actions import ActionState, IdentityState, InvoiceActionState
from invoicedesk.models.invoices import InvoiceStatus
from invoicedesk.services.formatting import amount_to_cents

CUSTOMER_MESSAGE = "Please select a customer."
AMOUNT_MESSAGE = "Please enter an amount greater than $0."
STATUS_MESSAGE = "Please select an invoice status."
EMAIL_REQUIRED_MESSAGE = "Email is required."
EMAIL_INVALID_MESSAGE = "Please enter a valid email."
PASSWORD_MESSAGE = "Password is required."
LOGIN_FAILED_MESSAGE = "Incomplete submission. Failed to login."

# Largest value of a Postgres integer, the type of invoices.amount
MAX_AMOUNT_CENTS = 2**31 - 1

INVOICE_FIELDS = ("customerId", "amount", "status")
LOGIN_FIELDS = ("email", "password")


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class InvoiceInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_id: str = Field(alias="customerId")
    amount: Decimal
    status: InvoiceStatus

    @field_validator("customer_id", mode="before")
    @classmethod
    def _require_customer(cls, value):
        if _blank(value) or not isinstance(value, str):
            raise PydanticCustomError("customer_required", CUSTOMER_MESSAGE)
        return value.strip()

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value):
        # blank coerces to zero and fails the same check as zero
        try:
            amount = Decimal(str(value).strip()) if not _blank(value) else Decimal(0)
        except (InvalidOperation, ValueError):
            raise PydanticCustomError("amount_invalid", AMOUNT_MESSAGE)
        if not amount.is_finite() or amount <= 0:
            raise PydanticCustomError("amount_not_positive", AMOUNT_MESSAGE)
        # the rounded cents value must fit invoices.amount
        try:
            cents = amount_to_cents(amount)
        except InvalidOperation:
            raise PydanticCustomError("amount_out_of_range", AMOUNT_MESSAGE)
        if cents <= 0 or cents > MAX_AMOUNT_CENTS:
            raise PydanticCustomError("amount_out_of_range", AMOUNT_MESSAGE)
        return amount

    @field_validator("status", mode="before")
    @classmethod
    def _check_status(cls, value):
        if value not in INVOICE_STATUSES:
            raise PydanticCustomError("status_invalid", STATUS_MESSAGE)
        return value


class LoginInput(BaseModel):
    email: str
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value):
        if _blank(value) or not isinstance(value, str):
            raise PydanticCustomError("email_required", EMAIL_REQUIRED_MESSAGE)
        try:
            return validate_email(value.strip(), check_deliverability=False).normalized
        except EmailNotValidError:
            raise PydanticCustomError("email_invalid", EMAIL_INVALID_MESSAGE)

    @field_validator("password", mode="before")
    @classmethod
    def _require_password(cls, value):
        if not isinstance(value, str) or value == "":
            raise PydanticCustomError("password_required", PASSWORD_MESSAGE)
        return value


M = TypeVar("M", bound=BaseModel)
S = TypeVar("S", bound=ActionState)


def _field_errors(exc: ValidationError):
    errors = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "__root__"
        errors.setdefault(field, []).append(error["msg"])
    return errors


def _validate(
    model: Type[M],
    state: Type[S],
    fields: Mapping[str, Any],
    names: Tuple[str, ...],
    message: str,
) -> Tuple[Optional[M], Optional[S]]:
    raw = {name: fields.get(name) for name in names}
    try:
        return model.model_validate(raw), None
    except ValidationError as exc:
        return None, state(errors=_field_errors(exc), message=message)


def validate_invoice_form(
    fields: Mapping[str, Any], action: str = "create"
) -> Tuple[Optional[InvoiceInput], Optional[InvoiceActionState]]:
    """
    Validate the ``customerId``/``amount``/``status`` fields of an invoice form.

    Returns ``(InvoiceInput, None)`` on success or ``(None, state)`` where
    ``state.errors`` maps each failing field to its messages and
    ``state.message`` reads "Missing fields. Failed to <action> invoice."
    """
    return _validate(
        InvoiceInput,
        InvoiceActionState,
        fields,
        INVOICE_FIELDS,
        f"Missing fields. Failed to {action} invoice.",
    )


def validate_login_form(
    fields: Mapping[str, Any],
) -> Tuple[Optional[LoginInput], Optional[IdentityState]]:
    return _validate(LoginInput, IdentityState, fields, LOGIN_FIELDS, LOGIN_FAILED_MESSAGE)
