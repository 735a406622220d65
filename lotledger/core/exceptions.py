"""
Domain exceptions for the lot ledger.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(LedgerError):
    """Base exception for storage operations."""

    pass


class BatchNotFoundError(StorageError):
    """Batch not found by id or batch number."""

    def __init__(self, identifier: int | str):
        super().__init__(
            f"Batch not found: {identifier}",
            code="BATCH_NOT_FOUND",
            details={"batch": identifier},
        )


class ProductNotFoundError(StorageError):
    """Product reference not found."""

    def __init__(self, product_id: str):
        super().__init__(
            f"Product not found: {product_id}",
            code="PRODUCT_NOT_FOUND",
            details={"product_id": product_id},
        )


class DuplicateProductError(StorageError):
    """Product id or barcode already registered."""

    def __init__(self, product_id: str, barcode: str | None = None):
        super().__init__(
            f"Product already exists: {product_id}",
            code="DUPLICATE_PRODUCT",
            details={"product_id": product_id, "barcode": barcode},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class SequenceUnavailableError(StorageError):
    """The counter store could not issue a sequence value."""

    def __init__(self, key: str, reason: str):
        super().__init__(
            f"Sequence '{key}' unavailable: {reason}",
            code="SEQUENCE_UNAVAILABLE",
            details={"key": key, "reason": reason},
        )


# Validation Exceptions
class ValidationError(LedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidStatusTransitionError(ValidationError):
    """Batch status change (or quantity change) not allowed from the current status."""

    def __init__(self, batch_number: str, current: str, target: str, reason: str):
        super().__init__(
            field="status",
            message=f"Batch {batch_number} cannot go from '{current}' to '{target}': {reason}",
            value=target,
        )
        self.code = "INVALID_STATUS_TRANSITION"
        self.details.update(
            {
                "batch_number": batch_number,
                "current": current,
                "target": target,
            }
        )


# Stock Exceptions
class StockError(LedgerError):
    """Base exception for quantity shortfalls."""

    pass


class InsufficientStockError(StockError):
    """Requested product quantity exceeds what is allocatable."""

    def __init__(self, product_id: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for product {product_id}. "
            f"Available: {available}, Requested: {requested}",
            code="INSUFFICIENT_STOCK",
            details={
                "product_id": product_id,
                "requested": requested,
                "available": available,
                "shortfall": requested - available,
            },
        )


class InsufficientQuantityError(StockError):
    """Reduction exceeds a batch's available quantity."""

    def __init__(self, batch_number: str, requested: int, available: int):
        super().__init__(
            f"Insufficient quantity in batch {batch_number}. "
            f"Available: {available}, Requested: {requested}",
            code="INSUFFICIENT_QUANTITY",
            details={
                "batch_number": batch_number,
                "requested": requested,
                "available": available,
            },
        )


class InsufficientAvailableError(StockError):
    """Reservation exceeds a batch's available quantity."""

    def __init__(self, batch_number: str, requested: int, available: int):
        super().__init__(
            f"Cannot reserve {requested} units in batch {batch_number}. "
            f"Only {available} available",
            code="INSUFFICIENT_AVAILABLE",
            details={
                "batch_number": batch_number,
                "requested": requested,
                "available": available,
            },
        )


class OverReleaseError(StockError):
    """Release exceeds a batch's reserved quantity."""

    def __init__(self, batch_number: str, requested: int, reserved: int):
        super().__init__(
            f"Cannot release {requested} units in batch {batch_number}. "
            f"Only {reserved} reserved",
            code="OVER_RELEASE",
            details={
                "batch_number": batch_number,
                "requested": requested,
                "reserved": reserved,
            },
        )


# Consistency Exceptions
class ConcurrentModificationError(LedgerError):
    """A conditional batch update was rejected because the batch changed since it was read."""

    def __init__(self, batch_id: int, expected_version: int):
        super().__init__(
            f"Batch {batch_id} was modified concurrently (expected version {expected_version})",
            code="CONCURRENT_MODIFICATION",
            details={"batch_id": batch_id, "expected_version": expected_version},
        )


class ConservationViolationError(LedgerError):
    """A stock movement's snapshot does not match its quantity delta."""

    def __init__(
        self,
        product_id: str,
        previous_stock: int,
        quantity: int,
        new_stock: int,
    ):
        super().__init__(
            f"Stock calculation mismatch for product {product_id}: "
            f"{previous_stock} + {quantity} != {new_stock}",
            code="CONSERVATION_VIOLATION",
            details={
                "product_id": product_id,
                "previous_stock": previous_stock,
                "quantity": quantity,
                "new_stock": new_stock,
            },
        )


class ConfigurationError(LedgerError):
    """Configuration error."""

    pass
