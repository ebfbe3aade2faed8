"""Domain error taxonomy shared by every app.

Services raise these; the operation boundary (``common.results.run_action``)
turns them into failed results. Messages are shown to end users, so they name
the concrete limiting factor.
"""

from typing import Optional


class StorefrontError(Exception):
    """Base class for recoverable domain failures."""

    code = "error"
    default_message = "Something went wrong."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StorefrontError):
    """Input has the wrong shape (e.g. a non-integer quantity)."""

    code = "validation"
    default_message = "Invalid input."


class NotFoundError(StorefrontError):
    code = "not_found"
    default_message = "Not found."


class AuthorizationError(StorefrontError):
    """Caller is not signed in, not an admin, or not the resource owner."""

    code = "authorization"
    default_message = "Unauthorized"


class StateConflictError(StorefrontError):
    """The request is well formed but the current state forbids it."""

    code = "conflict"
    default_message = "The request conflicts with the current state."


class PaymentIntegrityError(StorefrontError):
    code = "integrity"
    default_message = "Payment verification failed. Please contact support."
