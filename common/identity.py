"""Identity checks shared by services.

The identity provider is Django auth: services receive the caller's user (or
``None`` / ``AnonymousUser`` for guests) explicitly and never read request
state themselves.
"""

from .errors import AuthorizationError


def is_authenticated(user) -> bool:
    return bool(user is not None and getattr(user, "is_authenticated", False))


def require_user(user, message: str = "Unauthorized"):
    """Return ``user`` if signed in, otherwise raise ``AuthorizationError``."""

    if not is_authenticated(user):
        raise AuthorizationError(message)
    return user


def require_admin(user):
    """Binary role check: staff users are administrators."""

    require_user(user)
    if not getattr(user, "is_staff", False):
        raise AuthorizationError("Admin access required")
    return user
