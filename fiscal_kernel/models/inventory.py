"""
Module: fiscal_kernel.models.inventory
Responsibility: ORM persistence for stocked inventory items that belong to a
    fiscal year until they are sold.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Only items whose status counts as available (configuration) move to
      the next year during carry-forward.  Sold items stay with the year
      they were sold in.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from fiscal_kernel.db.base import TrackedBase, UUIDString


class InventoryStatus(str, Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    SOLD = "sold"
    RETURNED = "returned"
    TRANSFERRED = "transferred"


class InventoryItem(TrackedBase):
    """A single stocked item (e.g. a vehicle) assigned to a fiscal year."""

    __tablename__ = "inventory_items"

    __table_args__ = (
        Index("idx_inventory_company_year_status", "company_id", "fiscal_year_id", "status"),
    )

    company_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    fiscal_year_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("fiscal_years.id", ondelete="SET NULL"),
        nullable=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # Chassis / serial / SKU
    reference_number: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    purchase_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    purchase_price: Mapped[Decimal] = mapped_column(
        Numeric(38, 9),
        default=Decimal("0"),
        nullable=False,
    )

    status: Mapped[InventoryStatus] = mapped_column(
        String(20),
        default=InventoryStatus.AVAILABLE,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<InventoryItem {self.name} {InventoryStatus(self.status).value}>"
