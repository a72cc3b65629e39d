from __future__ import annotations

from carlot.core.config import settings
from carlot.services.storage import LocalBlobStorage


def get_storage() -> LocalBlobStorage:
    """Blob storage dependency (overridden in tests with a temp dir)."""
    return LocalBlobStorage(
        root=settings.STORAGE_DIR,
        public_base_url=settings.PUBLIC_BASE_URL,
        max_size=settings.MAX_UPLOAD_SIZE,
    )
