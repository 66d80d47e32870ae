# invoicedesk/errors.py


class StoreError(Exception):
    """Raised by a storage adapter when the backing database call fails."""


class DataAccessError(Exception):
    """
    Raised by the query layer. The message names the failed operation
    ("Failed to fetch invoices") and is safe to show to a user.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class IdentityError(Exception):
    """Raised by an identity provider when a sign-in or sign-out call fails."""
