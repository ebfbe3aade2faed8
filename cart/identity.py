"""Explicit cart ownership.

A cart belongs to exactly one of a signed-in user or an anonymous session.
Callers build a ``CartOwner`` and pass it to every cart operation.
"""

from dataclasses import dataclass
from typing import Optional

from common.errors import ValidationError

MAX_SESSION_ID_LENGTH = 64


@dataclass(frozen=True)
class CartOwner:
    user_id: Optional[int] = None
    session_id: Optional[str] = None

    def __post_init__(self):
        if (self.user_id is None) == (not self.session_id):
            raise ValidationError("User or session identifier required")
        if self.session_id is not None and len(self.session_id) > MAX_SESSION_ID_LENGTH:
            raise ValidationError("Session identifier is too long")

    @classmethod
    def for_user(cls, user_id: int) -> "CartOwner":
        return cls(user_id=user_id)

    @classmethod
    def for_session(cls, session_id: str) -> "CartOwner":
        return cls(session_id=session_id)

    @classmethod
    def of_cart(cls, cart) -> "CartOwner":
        if cart.user_id is not None:
            return cls.for_user(cart.user_id)
        return cls.for_session(cart.session_id)

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    def lookup(self) -> dict:
        """ORM filter kwargs selecting this owner's cart."""

        if self.is_guest:
            return {"user__isnull": True, "session_id": self.session_id}
        return {"user_id": self.user_id}

    def log_extra(self) -> dict:
        if self.is_guest:
            return {"session_id": self.session_id, "guest": True}
        return {"user_id": self.user_id, "guest": False}
