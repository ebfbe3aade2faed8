"""Uniform operation results.

Every public operation reports ``{success, message, data?}`` to its caller.
``run_action`` is the boundary where domain exceptions stop propagating.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from django.db import DatabaseError

from .errors import StorefrontError

logger = logging.getLogger("storefront")

INTERNAL_ERROR = "internal"


@dataclass
class ActionResult:
    success: bool
    message: str
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "ActionResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, error: str = INTERNAL_ERROR) -> "ActionResult":
        return cls(success=False, message=message, error=error)

    def as_dict(self) -> dict:
        payload = {"success": self.success, "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        return payload


def run_action(
    fn: Callable[[], Any],
    *,
    success_message: str,
    failure_message: str = "Something went wrong. Please try again.",
    data: Optional[Callable[[Any], Any]] = None,
) -> ActionResult:
    """Run ``fn`` and wrap its outcome.

    Domain errors become failed results carrying their own message. Database
    errors are fatal for the operation: the enclosing transaction has already
    rolled back, so the caller only gets ``failure_message``.
    """

    try:
        value = fn()
    except StorefrontError as exc:
        return ActionResult.fail(exc.message, error=exc.code)
    except DatabaseError:
        logger.exception("action.database_error", extra={"event": "action.database_error"})
        return ActionResult.fail(failure_message)
    payload = data(value) if data is not None else None
    return ActionResult.ok(success_message, payload)
