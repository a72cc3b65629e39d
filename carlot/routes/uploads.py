import logging
from typing import Any, Dict
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from carlot.db.session import get_db
from carlot.dependencies.auth import get_current_user
from carlot.dependencies.storage import get_storage
from carlot.models.user import User
from carlot.routes.cars import commit_car, get_car_owned, to_read
from carlot.services.errors import AttachmentMissing, EmptyFile, FileTooLarge, StorageError, UnsupportedFileType
from carlot.services.storage import IMAGE_BUCKET, INVOICE_BUCKET, LocalBlobStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cars", tags=["uploads"])


def _storage_http_error(e: StorageError) -> HTTPException:
    if isinstance(e, FileTooLarge):
        return HTTPException(status_code=413, detail=str(e))
    if isinstance(e, UnsupportedFileType):
        return HTTPException(status_code=415, detail=str(e))
    if isinstance(e, AttachmentMissing):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, EmptyFile):
        return HTTPException(status_code=400, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


@router.post("/{car_id}/image")
async def upload_car_image(
    car_id: UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    storage: LocalBlobStorage = Depends(get_storage),
) -> Dict[str, Any]:
    """
    Car photo upload (JPEG / PNG / WebP).

    Stores the file, points car.image_url at its public URL and returns
        {"url": "...", "car": {...}}
    """
    car = get_car_owned(db, car_id, user)
    contents = await file.read()

    try:
        blob = storage.upload_car_image(str(user.id), str(car.id), contents, file.content_type or "")
    except StorageError as e:
        raise _storage_http_error(e) from None

    previous = car.image_url
    car.image_url = blob.url
    car = commit_car(db, car, "save car image")
    logger.info("image stored for car %s (%d bytes)", car.id, blob.size)

    if previous and previous != blob.url:
        storage.discard(IMAGE_BUCKET, str(user.id), str(car.id), previous)
    return {"url": blob.url, "car": to_read(car).model_dump(mode="json")}


@router.post("/{car_id}/invoice")
async def upload_invoice(
    car_id: UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    storage: LocalBlobStorage = Depends(get_storage),
) -> Dict[str, Any]:
    """Invoice upload (PDF only). Same response shape as the image upload."""
    car = get_car_owned(db, car_id, user)
    contents = await file.read()

    try:
        blob = storage.upload_invoice(str(user.id), str(car.id), contents, file.content_type or "")
    except StorageError as e:
        raise _storage_http_error(e) from None

    previous = car.invoice_url
    car.invoice_url = blob.url
    car = commit_car(db, car, "save invoice")
    logger.info("invoice stored for car %s (%d bytes)", car.id, blob.size)

    if previous and previous != blob.url:
        storage.discard(INVOICE_BUCKET, str(user.id), str(car.id), previous)
    return {"url": blob.url, "car": to_read(car).model_dump(mode="json")}


@router.get("/{car_id}/invoice")
def open_invoice(
    car_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    storage: LocalBlobStorage = Depends(get_storage),
):
    """
    Stream the attached invoice.
    A missing reference, a missing file or a non-PDF file is a 404; the car
    itself is untouched.
    """
    car = get_car_owned(db, car_id, user)
    if not car.invoice_url:
        raise HTTPException(status_code=404, detail="There is no invoice PDF attached to this car.")

    try:
        path = storage.invoice_path(str(user.id), str(car.id), car.invoice_url)
    except AttachmentMissing:
        logger.warning("invoice file missing for car %s: %s", car.id, car.invoice_url)
        raise HTTPException(
            status_code=404,
            detail="Failed to open the invoice PDF. The file may be corrupted or missing.",
        ) from None

    return FileResponse(path, media_type="application/pdf", filename=path.name)
