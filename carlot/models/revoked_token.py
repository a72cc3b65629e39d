from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid

from carlot.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RevokedTokenORM(Base):
    """Access tokens invalidated by sign-out (looked up by jti)."""

    __tablename__ = "revoked_tokens"

    jti = Column(String(64), primary_key=True)

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # rows past expires_at can be purged; the JWT itself is expired by then
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    revoked_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
