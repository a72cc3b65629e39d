from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from carlot.core.security import AccessToken, decode_access_token
from carlot.db.session import get_db
from carlot.models.revoked_token import RevokedTokenORM
from carlot.models.user import User

# Bearer token from Authorization: Bearer <token>
# auto_error=False so every auth failure gets the same 401 below
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_token(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> AccessToken:
    """Decoded, non-revoked access token of the request."""
    if creds is None or not creds.credentials:
        raise _unauthorized("Not authenticated")

    token = decode_access_token(creds.credentials)
    if token is None:
        raise _unauthorized()

    if db.get(RevokedTokenORM, token["jti"]) is not None:
        raise _unauthorized("Session has ended, please sign in again")

    return token


def get_current_user(
    token: AccessToken = Depends(get_current_token),
    db: Session = Depends(get_db),
) -> User:
    """
    Authentication dependency (single source of truth).
    - Verify bearer JWT (signature, expiry, revocation)
    - Load the active User by UUID
    """
    try:
        user_id = UUID(token["sub"])
    except ValueError:
        raise _unauthorized() from None

    user = db.get(User, user_id)
    if user is None or not user.is_active:
        raise _unauthorized()

    return user
