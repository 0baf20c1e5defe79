"""
Cart errors.

Exceptions raised by the cart's collaborators (inventory, storage, snapshot
codec) plus centralized error messages to avoid string duplication.
CartStore converts all of them into notices at its operation boundary.
"""

# Inventory errors
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_INVENTORY_UNAVAILABLE = "Inventory service unavailable"
ERROR_INVALID_INVENTORY_DATA = "Invalid inventory data"

# Storage errors
ERROR_STORAGE_UNAVAILABLE = "Cart storage unavailable"
ERROR_CORRUPT_SNAPSHOT = "Corrupted cart snapshot"


class CartError(Exception):
    """Base class for cart errors."""


class InventoryError(CartError):
    """Inventory lookup failed."""

    def __init__(self, message: str, product_id: int | None = None) -> None:
        super().__init__(message)
        self.product_id = product_id


class InventoryNotFoundError(InventoryError):
    """Product or stock record does not exist."""


class InventoryTransportError(InventoryError):
    """Inventory call could not complete or returned malformed data."""


class CartStorageError(CartError):
    """Reading or writing the cart snapshot failed."""


class CartSnapshotError(CartError):
    """Stored snapshot cannot be decoded into a valid cart."""
