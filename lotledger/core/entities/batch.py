"""
Inventory batch (lot) domain entity.

A batch is one discrete purchase of a product with its own fixed cost and
selling price. Quantity rules live here; persistence and concurrency are the
ledger service's concern.
"""

import math
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from lotledger.core.exceptions import (
    InsufficientAvailableError,
    InsufficientQuantityError,
    InvalidStatusTransitionError,
    OverReleaseError,
    ValidationError,
)


class BatchStatus(str, Enum):
    """Lifecycle states of a batch. Only ACTIVE is allocatable."""

    ACTIVE = "active"
    DEPLETED = "depleted"
    EXPIRED = "expired"
    DAMAGED = "damaged"
    RETURNED = "returned"


# Statuses an administrator may set explicitly. DEPLETED follows from quantity.
SETTABLE_STATUSES = frozenset(
    {
        BatchStatus.ACTIVE,
        BatchStatus.EXPIRED,
        BatchStatus.DAMAGED,
        BatchStatus.RETURNED,
    }
)


class Batch(BaseModel):
    """A purchase lot of a single product."""

    id: int | None = None
    batch_number: str
    product_id: str  # FK → products.id
    supplier_id: str | None = None
    purchase_order_id: str | None = None

    initial_quantity: int = Field(ge=1)
    current_quantity: int = Field(ge=0)
    reserved_quantity: int = Field(default=0, ge=0)

    cost_price: float = Field(ge=0)
    selling_price: float = Field(ge=0)

    purchase_date: datetime = Field(default_factory=datetime.now)
    expiry_date: date | None = None

    status: BatchStatus = BatchStatus.ACTIVE
    notes: str | None = None

    version: int = 0  # optimistic concurrency token, bumped on every write
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("purchase_date")
    @classmethod
    def normalize_purchase_date(cls, value: datetime) -> datetime:
        return to_local_naive(value)

    @model_validator(mode="after")
    def check_quantities(self) -> "Batch":
        """Enforce 0 <= reserved <= current <= initial."""
        if self.reserved_quantity > self.current_quantity:
            raise ValueError("Reserved quantity cannot exceed current quantity")
        if self.current_quantity > self.initial_quantity:
            raise ValueError("Current quantity cannot exceed initial quantity")
        return self

    # --- Derived reads (never persisted) ---

    @property
    def available_quantity(self) -> int:
        """Quantity eligible for new allocation."""
        return self.current_quantity - self.reserved_quantity

    @property
    def is_depleted(self) -> bool:
        return self.current_quantity == 0

    @property
    def profit_margin(self) -> float:
        """Margin on selling price, in percent."""
        if not self.selling_price:
            return 0.0
        return (self.selling_price - self.cost_price) / self.selling_price * 100

    @property
    def batch_value(self) -> float:
        """Cost value of the remaining units."""
        return self.current_quantity * self.cost_price

    @property
    def potential_revenue(self) -> float:
        return self.current_quantity * self.selling_price

    def is_expired(self, as_of: datetime | None = None) -> bool:
        """True once the expiry day has fully passed."""
        if self.expiry_date is None:
            return False
        today = to_local_naive(as_of or datetime.now()).date()
        return today > self.expiry_date

    def days_until_expiry(self, as_of: datetime | None = None) -> int | None:
        if self.expiry_date is None:
            return None
        now = to_local_naive(as_of or datetime.now())
        expires_at = datetime.combine(self.expiry_date, datetime.min.time())
        return math.ceil((expires_at - now).total_seconds() / 86400)

    def effective_status(self, as_of: datetime | None = None) -> BatchStatus:
        """Stored status with lazy expiry applied."""
        if self.status == BatchStatus.ACTIVE and self.is_expired(as_of):
            return BatchStatus.EXPIRED
        return self.status

    def is_allocatable(self, as_of: datetime | None = None) -> bool:
        return (
            self.status == BatchStatus.ACTIVE
            and self.available_quantity > 0
            and not self.is_expired(as_of)
        )

    def stock_contribution(self) -> int:
        """Units this batch contributes to the product's cached stock."""
        return self.current_quantity if self.status == BatchStatus.ACTIVE else 0

    # --- Quantity rules (mutate in place, raise before changing anything) ---

    def reduce_quantity(self, quantity: int) -> None:
        """Debit sold units. Reservations are left untouched."""
        _require_positive("quantity", quantity)
        available = self.available_quantity if self.status == BatchStatus.ACTIVE else 0
        if quantity > available:
            raise InsufficientQuantityError(self.batch_number, quantity, available)

        self.current_quantity -= quantity
        if self.is_depleted:
            self.status = BatchStatus.DEPLETED

    def reserve_quantity(self, quantity: int) -> None:
        _require_positive("quantity", quantity)
        if self.status != BatchStatus.ACTIVE:
            raise ValidationError(
                "status", f"Batch {self.batch_number} is not active", self.status.value
            )
        if quantity > self.available_quantity:
            raise InsufficientAvailableError(
                self.batch_number, quantity, self.available_quantity
            )
        self.reserved_quantity += quantity

    def release_reserved_quantity(self, quantity: int) -> None:
        _require_positive("quantity", quantity)
        if quantity > self.reserved_quantity:
            raise OverReleaseError(self.batch_number, quantity, self.reserved_quantity)
        self.reserved_quantity -= quantity

    def adjust_quantity(self, delta: int) -> None:
        """Administrative correction of current quantity, positive or negative."""
        if delta == 0:
            raise ValidationError("delta", "Adjustment must be non-zero", delta)
        if self.status not in (BatchStatus.ACTIVE, BatchStatus.DEPLETED):
            raise InvalidStatusTransitionError(
                self.batch_number,
                self.status.value,
                self.status.value,
                "quantity of a retired batch cannot be adjusted",
            )

        new_quantity = self.current_quantity + delta
        if new_quantity < self.reserved_quantity:
            raise ValidationError(
                "delta",
                f"Adjustment would leave {new_quantity} units, "
                f"below the {self.reserved_quantity} reserved",
                delta,
            )
        if new_quantity > self.initial_quantity:
            raise ValidationError(
                "delta",
                f"Adjustment would leave {new_quantity} units, "
                f"above the initial {self.initial_quantity}",
                delta,
            )

        self.current_quantity = new_quantity
        if self.is_depleted:
            self.status = BatchStatus.DEPLETED
        elif self.status == BatchStatus.DEPLETED:
            self.status = BatchStatus.ACTIVE

    def change_status(self, target: BatchStatus) -> None:
        """Explicit administrative status change. Quantities are not touched."""
        if target not in SETTABLE_STATUSES:
            raise InvalidStatusTransitionError(
                self.batch_number,
                self.status.value,
                target.value,
                "depleted is reached only by quantity reaching zero",
            )
        if self.is_depleted and (
            self.status == BatchStatus.DEPLETED or target == BatchStatus.ACTIVE
        ):
            raise InvalidStatusTransitionError(
                self.batch_number,
                self.status.value,
                target.value,
                "adjust the quantity above zero first",
            )
        self.status = target


def _require_positive(field: str, value: int) -> None:
    if value <= 0:
        raise ValidationError(field, "Must be a positive quantity", value)


def to_local_naive(value: datetime) -> datetime:
    """
    Express a datetime as naive local time.

    Lots are ordered and compared by purchase date, so aware values (e.g. an
    ISO string ending in Z) are converted to the local clock and stripped of
    their offset. Naive values are taken as local already.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
