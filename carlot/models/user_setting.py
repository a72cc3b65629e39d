from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Uuid

from carlot.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


DARK_MODE_KEY = "darkMode"


class UserSettingORM(Base):
    __tablename__ = "user_settings"

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # e.g. key="darkMode"
    key = Column(String(64), primary_key=True)

    # e.g. true
    value = Column(JSON, nullable=False)

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )
