from __future__ import annotations

"""
security.py

JWT authentication and password hashing.

- pbkdf2_sha256 hashing (no native build deps)
- every access token carries a jti so it can be revoked on sign-out
- decoding never raises: invalid tokens come back as None
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Final, Optional, TypedDict

from jose import JWTError, jwt
from passlib.context import CryptContext

from carlot.core.config import settings


SECRET_KEY: Final[str] = settings.SECRET_KEY
ALGORITHM: Final[str] = settings.JWT_ALGORITHM or "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: Final[int] = int(settings.ACCESS_TOKEN_EXPIRE_MINUTES)


# =========================
# Password hashing
# =========================

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    if not isinstance(password, str) or not password:
        raise ValueError("Password cannot be empty")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


class TokenPayload(TypedDict):
    sub: str
    exp: int  # UNIX timestamp
    iat: int  # UNIX timestamp
    jti: str
    type: str


class AccessToken(TypedDict):
    sub: str
    jti: str
    exp: datetime


# =========================
# JWT create
# =========================

def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Build a signed access token.

    Args:
        subject: user id (string)
        expires_delta: lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        encoded JWT
    """
    if not subject:
        raise ValueError("Subject cannot be empty")

    now = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    payload: TokenPayload = {
        "sub": subject,
        "exp": int((now + lifetime).timestamp()),
        "iat": int(now.timestamp()),
        "jti": uuid.uuid4().hex,
        "type": "access",
    }

    token: str = jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)
    return token


# =========================
# JWT verify
# =========================

def decode_access_token(token: str) -> Optional[AccessToken]:
    """
    Verify a token.

    Returns:
        {"sub", "jti", "exp"} or None when the token is invalid/expired
    """
    if not token:
        return None

    try:
        payload: Dict[str, Any] = jwt.decode(
            token,
            key=SECRET_KEY,
            algorithms=[ALGORITHM],
        )
    except JWTError:
        return None

    if not isinstance(payload, dict):
        return None

    subject = payload.get("sub")
    jti = payload.get("jti")
    if not isinstance(subject, str) or not subject:
        return None
    if not isinstance(jti, str) or not jti:
        return None

    if payload.get("type", "access") != "access":
        return None

    exp = datetime.fromtimestamp(int(payload.get("exp", 0)), tz=timezone.utc)
    return {"sub": subject, "jti": jti, "exp": exp}
