"""FIFO allocation plan and sale result entities."""

from dataclasses import dataclass

from pydantic import BaseModel, Field, model_validator

from lotledger.core.entities.batch import Batch
from lotledger.core.entities.stock_movement import StockMovement


@dataclass(frozen=True)
class AllocationLine:
    """One step of a FIFO plan: take `quantity` units from `batch`."""

    batch: Batch
    quantity: int


class SaleLine(BaseModel):
    """Units sold from a single batch at that batch's prices."""

    batch_id: int
    batch_number: str
    quantity: int
    unit_cost: float
    unit_price: float
    total_cost: float = 0.0
    total_revenue: float = 0.0

    @model_validator(mode="after")
    def compute_line(self) -> "SaleLine":
        self.total_cost = self.quantity * self.unit_cost
        self.total_revenue = self.quantity * self.unit_price
        return self


class SaleAllocationResult(BaseModel):
    """Outcome of a committed FIFO sale. Transient, not persisted."""

    product_id: str
    reference_number: str
    lines: list[SaleLine] = Field(default_factory=list)
    movements: list[StockMovement] = Field(default_factory=list)
    attempts: int = 1

    quantity_sold: int = 0
    total_cost: float = 0.0
    total_revenue: float = 0.0
    profit: float = 0.0
    profit_margin: float = 0.0  # percent of revenue
    average_cost_price: float = 0.0
    average_selling_price: float = 0.0

    @model_validator(mode="after")
    def compute_totals(self) -> "SaleAllocationResult":
        """Aggregate totals and quantity-weighted averages from lines."""
        self.quantity_sold = sum(line.quantity for line in self.lines)
        self.total_cost = sum(line.total_cost for line in self.lines)
        self.total_revenue = sum(line.total_revenue for line in self.lines)
        self.profit = self.total_revenue - self.total_cost
        self.profit_margin = (
            round(self.profit / self.total_revenue * 100, 2) if self.total_revenue else 0.0
        )
        if self.quantity_sold:
            self.average_cost_price = self.total_cost / self.quantity_sold
            self.average_selling_price = self.total_revenue / self.quantity_sold
        return self
