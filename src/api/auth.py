"""
Caller identity.

Credentials are handled upstream (identity proxy / auth provider); by the
time a request reaches this service the verified identity travels in
``X-User-Id`` and ``X-User-Email`` headers.  The service only ever reads
the id and e-mail.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from fastapi import HTTPException, Request

USER_ID_HEADER = "X-User-Id"
USER_EMAIL_HEADER = "X-User-Email"


@dataclass(frozen=True)
class AuthenticatedUser:
    id: str
    email: str = ""


class AuthProvider(Protocol):
    def current_user(self, request: Request) -> Optional[AuthenticatedUser]: ...


class HeaderAuthProvider:
    def current_user(self, request: Request) -> Optional[AuthenticatedUser]:
        user_id = request.headers.get(USER_ID_HEADER, "").strip()
        if not user_id:
            return None
        email = request.headers.get(USER_EMAIL_HEADER, "").strip()
        return AuthenticatedUser(id=user_id, email=email)


auth_provider: AuthProvider = HeaderAuthProvider()


def require_user(request: Request) -> AuthenticatedUser:
    """FastAPI dependency: the signed-in caller, or 401."""
    user = auth_provider.current_user(request)
    if user is None:
        raise HTTPException(status_code=401, detail="Please log in to continue")
    return user
