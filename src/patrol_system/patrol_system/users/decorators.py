from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import g, request

from ..common.http import fail, fail_from, fail_unexpected
from ..core.exceptions import AuthenticationError, AuthorizationError
from .service import AuthService
from .tokens import TokenClaims


def bearer_token() -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def current_user() -> TokenClaims:
    return g.current_user


def token_required(auth: AuthService):
    """Require a valid bearer token for a still-active account; sets g.current_user."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            token = bearer_token()
            if not token:
                return fail("Please log in", 401)
            try:
                g.current_user = auth.verify(token)
            except AuthenticationError as e:
                return fail_from(e)
            except Exception as e:
                return fail_unexpected(e, "checking a session")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def permission_required(auth: AuthService, permission: str):
    """token_required plus a permission check on the account's current role grants."""
    required = str(getattr(permission, "value", permission))

    def decorator(view):
        @wraps(view)
        def check(*args, **kwargs):
            if not current_user().can(required):
                return fail_from(AuthorizationError("You do not have permission for this action"))
            return view(*args, **kwargs)

        return token_required(auth)(check)

    return decorator
