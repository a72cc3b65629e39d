"""Domain errors. Routes translate these into HTTP responses."""

from __future__ import annotations


class InventoryError(Exception):
    """Base class; str(exc) is the message shown to the user."""


class VehicleAlreadySold(InventoryError):
    def __init__(self, vehicle_id: str):
        super().__init__(f"Car {vehicle_id} is already sold")
        self.vehicle_id = vehicle_id


class InvalidSalePrice(InventoryError):
    pass


class StorageError(InventoryError):
    pass


class UnsupportedFileType(StorageError):
    pass


class FileTooLarge(StorageError):
    pass


class AttachmentMissing(StorageError):
    pass


class EmptyFile(StorageError):
    pass
