from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carlot.core.security import AccessToken, create_access_token, hash_password, verify_password
from carlot.db.session import get_db
from carlot.dependencies.auth import get_current_token, get_current_user
from carlot.models.revoked_token import RevokedTokenORM
from carlot.models.user import User
from carlot.schemas.auth import CredentialsIn, LoginIn, LoginOut, MeOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _login_response(user: User) -> LoginOut:
    return LoginOut(
        access_token=create_access_token(subject=str(user.id)),
        user_id=user.id,
        email=user.email,
    )


# ============================================================
# sign up
# ============================================================

@router.post("/signup", response_model=LoginOut, status_code=status.HTTP_201_CREATED)
def sign_up(
    body: CredentialsIn,
    db: Session = Depends(get_db),
) -> LoginOut:
    existing = db.execute(select(User).where(User.email == body.email)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=400, detail="Email already exists")

    try:
        hashed = hash_password(body.password)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from None

    user = User(email=body.email, password_hash=hashed, is_active=True)

    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email already exists") from None

    logger.info("user signed up: %s", user.id)
    return _login_response(user)


# ============================================================
# sign in
# ============================================================

@router.post("/login", response_model=LoginOut)
def sign_in(
    body: LoginIn,
    db: Session = Depends(get_db),
) -> LoginOut:
    email = body.email.strip().lower()
    user = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if not user or not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid login credentials")
    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account is disabled")

    return _login_response(user)


# ============================================================
# sign out / session
# ============================================================

@router.post("/logout")
def sign_out(
    token: AccessToken = Depends(get_current_token),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    db.add(
        RevokedTokenORM(
            jti=token["jti"],
            user_id=user.id,
            expires_at=token["exp"],
            revoked_at=_utcnow(),
        )
    )
    try:
        db.commit()
    except IntegrityError:
        # already revoked by a concurrent sign-out
        db.rollback()

    return {"ok": True}


@router.get("/me", response_model=MeOut)
def get_me(user: User = Depends(get_current_user)) -> User:
    return user
