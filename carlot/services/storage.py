"""
Blob storage for car photos and invoice PDFs.

Files live on local disk under <root>/<bucket>/<user_id>/<car_id>/<name> and
are served by the app under /storage, so the public URL of a blob is
<public_base_url>/storage/<bucket>/<user_id>/<car_id>/<name>.
The database only keeps the URL.
"""

from __future__ import annotations

import logging
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from carlot.services.errors import (
    AttachmentMissing,
    EmptyFile,
    FileTooLarge,
    StorageError,
    UnsupportedFileType,
)

logger = logging.getLogger(__name__)

IMAGE_BUCKET = "car-photos"
INVOICE_BUCKET = "invoices"

PUBLIC_PREFIX = "/storage"

IMAGE_TYPES: Dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}
INVOICE_TYPES: Dict[str, str] = {
    "application/pdf": ".pdf",
}


@dataclass(frozen=True)
class StoredBlob:
    bucket: str
    key: str
    path: Path
    url: str
    size: int


class LocalBlobStorage:
    def __init__(self, root: Path, public_base_url: str, max_size: int):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")
        self.max_size = int(max_size)

    # ----------------------------
    # write
    # ----------------------------
    def _save(self, *, bucket: str, key: str, data: bytes) -> StoredBlob:
        path = self.root / bucket / key
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.exception("blob write failed: %s/%s", bucket, key)
            raise StorageError(f"Could not store file: {e.strerror or e}") from e

        return StoredBlob(
            bucket=bucket,
            key=key,
            path=path,
            url=f"{self.public_base_url}{PUBLIC_PREFIX}/{bucket}/{key}",
            size=len(data),
        )

    def _check_size(self, data: bytes) -> None:
        if not data:
            raise EmptyFile("File is empty")
        if len(data) > self.max_size:
            raise FileTooLarge(f"File is too large (max {self.max_size // (1024 * 1024)}MB)")

    def upload_car_image(self, user_id: str, car_id: str, data: bytes, content_type: str) -> StoredBlob:
        ext = IMAGE_TYPES.get((content_type or "").lower())
        if ext is None:
            raise UnsupportedFileType(f"Unsupported image type: {content_type}")
        self._check_size(data)

        name = f"{int(time.time() * 1000)}{ext}"
        return self._save(bucket=IMAGE_BUCKET, key=f"{user_id}/{car_id}/{name}", data=data)

    def upload_invoice(self, user_id: str, car_id: str, data: bytes, content_type: str) -> StoredBlob:
        if (content_type or "").lower() not in INVOICE_TYPES:
            raise UnsupportedFileType(f"Unsupported invoice type: {content_type}")
        self._check_size(data)
        if not data.startswith(b"%PDF"):
            raise UnsupportedFileType("File is not a valid PDF")

        name = f"invoice_{int(time.time() * 1000)}.pdf"
        return self._save(bucket=INVOICE_BUCKET, key=f"{user_id}/{car_id}/{name}", data=data)

    # ----------------------------
    # read / delete
    # ----------------------------
    def _resolve(self, url: str, base: Path) -> Path:
        marker = f"{PUBLIC_PREFIX}/"
        if not url or marker not in url:
            raise AttachmentMissing("No file is attached")

        relative = url.split(marker, 1)[1]
        path = (self.root / relative).resolve()
        if base.resolve() not in path.parents:
            raise AttachmentMissing("No file is attached")
        if not path.is_file():
            raise AttachmentMissing("The attached file is missing")
        return path

    def path_for_url(self, url: str) -> Path:
        """Map a public URL back to its file. Raises AttachmentMissing."""
        return self._resolve(url, self.root)

    def invoice_path(self, user_id: str, car_id: str, url: str) -> Path:
        """
        File behind a car's invoice_url.

        Only PDFs in the car's own invoice folder qualify; anything else is
        reported as AttachmentMissing.
        """
        path = self._resolve(url, self.root / INVOICE_BUCKET / user_id / car_id)
        with path.open("rb") as f:
            if f.read(4) != b"%PDF":
                raise AttachmentMissing("The attached file is not a valid PDF")
        return path

    def discard(self, bucket: str, user_id: str, car_id: str, url: str) -> bool:
        """Remove a replaced blob of one car. Returns False when there was nothing to remove."""
        try:
            path = self._resolve(url, self.root / bucket / user_id / car_id)
        except AttachmentMissing:
            return False
        try:
            path.unlink()
        except OSError:
            logger.warning("could not remove replaced blob %s", path)
            return False
        return True

    def delete_car_files(self, user_id: str, car_id: str) -> None:
        for bucket in (IMAGE_BUCKET, INVOICE_BUCKET):
            folder = self.root / bucket / user_id / car_id
            if folder.is_dir():
                shutil.rmtree(folder, ignore_errors=True)
