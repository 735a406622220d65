"""Stock movement (audit trail) domain entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from lotledger.core.exceptions import ConservationViolationError


class MovementType(str, Enum):
    """Types of stock movements."""

    PURCHASE = "purchase"
    SALE = "sale"
    ADJUSTMENT = "adjustment"
    RETURN = "return"
    DAMAGE = "damage"
    TRANSFER = "transfer"
    EXPIRED = "expired"


class ReferenceType(str, Enum):
    """What kind of operation caused a movement."""

    PURCHASE_ORDER = "purchase_order"
    SALE = "sale"
    ADJUSTMENT = "adjustment"
    RETURN = "return"
    TRANSFER = "transfer"


DEFAULT_REFERENCE_TYPES: dict[MovementType, ReferenceType] = {
    MovementType.PURCHASE: ReferenceType.PURCHASE_ORDER,
    MovementType.SALE: ReferenceType.SALE,
    MovementType.ADJUSTMENT: ReferenceType.ADJUSTMENT,
    MovementType.RETURN: ReferenceType.RETURN,
    MovementType.DAMAGE: ReferenceType.ADJUSTMENT,
    MovementType.TRANSFER: ReferenceType.TRANSFER,
    MovementType.EXPIRED: ReferenceType.ADJUSTMENT,
}


class StockMovement(BaseModel):
    """
    Immutable record of one signed quantity delta against a product.

    previous_stock/new_stock snapshot the product's aggregate (cached) stock
    and are filled in by the store at commit time.
    """

    id: int | None = None
    product_id: str  # FK → products.id
    batch_id: int | None = None
    batch_number: str | None = None
    movement_type: MovementType
    quantity: int  # signed: negative for stock leaving the sellable pool
    previous_stock: int = 0
    new_stock: int = 0
    unit_cost: float | None = None
    total_cost: float | None = None
    reference_type: ReferenceType | None = None
    reference_number: str | None = None
    reason: str | None = None
    notes: str | None = None
    expiry_date: date | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def direction(self) -> str:
        return "in" if self.quantity >= 0 else "out"

    @property
    def resolved_reference_type(self) -> ReferenceType:
        return self.reference_type or DEFAULT_REFERENCE_TYPES[self.movement_type]

    def apply_snapshot(self, previous_stock: int) -> int:
        """Record the product stock before and after this movement; returns the new stock."""
        self.previous_stock = previous_stock
        self.new_stock = previous_stock + self.quantity
        self.check_conservation()
        return self.new_stock

    def check_conservation(self) -> None:
        """Raise if new_stock != previous_stock + quantity."""
        if self.new_stock != self.previous_stock + self.quantity:
            raise ConservationViolationError(
                self.product_id,
                self.previous_stock,
                self.quantity,
                self.new_stock,
            )
