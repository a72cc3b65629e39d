from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from carlot.db.session import get_db
from carlot.dependencies.auth import get_current_user
from carlot.models.user import User
from carlot.models.user_setting import DARK_MODE_KEY, UserSettingORM
from carlot.schemas.settings import DarkModeIn, SettingsOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _load_dark_mode(db: Session, user: User) -> bool:
    row = db.get(UserSettingORM, (user.id, DARK_MODE_KEY))
    return bool(row.value) if row is not None else False


def _save_dark_mode(db: Session, user: User, enabled: bool) -> bool:
    row = db.get(UserSettingORM, (user.id, DARK_MODE_KEY))
    if row is None:
        row = UserSettingORM(user_id=user.id, key=DARK_MODE_KEY)
        db.add(row)
    row.value = bool(enabled)
    row.updated_at = _utcnow()

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("saving dark mode failed for %s", user.id)
        raise HTTPException(
            status_code=500,
            detail="Failed to save settings. Please try again.",
        ) from None
    return bool(row.value)


@router.get("", response_model=SettingsOut)
def get_settings(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> SettingsOut:
    return SettingsOut(dark_mode=_load_dark_mode(db, user))


@router.put("/dark-mode", response_model=SettingsOut)
def set_dark_mode(
    body: DarkModeIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> SettingsOut:
    return SettingsOut(dark_mode=_save_dark_mode(db, user, body.enabled))


@router.post("/dark-mode/toggle", response_model=SettingsOut)
def toggle_dark_mode(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> SettingsOut:
    return SettingsOut(dark_mode=_save_dark_mode(db, user, not _load_dark_mode(db, user)))
