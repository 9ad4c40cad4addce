"""
Module: fiscal_kernel.models.party
Responsibility: ORM persistence for customers and suppliers whose running
    balances are rolled into a new fiscal year.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from enum import Enum
from uuid import UUID

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from fiscal_kernel.db.base import TrackedBase, UUIDString


class PartyType(str, Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"


class Party(TrackedBase):
    """Customer or supplier of one company."""

    __tablename__ = "parties"

    __table_args__ = (
        UniqueConstraint("company_id", "party_type", "code", name="uq_party_company_code"),
        Index("idx_party_company_type", "company_id", "party_type"),
    )

    company_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    party_type: Mapped[PartyType] = mapped_column(
        String(20),
        nullable=False,
    )

    code: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Party {PartyType(self.party_type).value} {self.code}: {self.name}>"
