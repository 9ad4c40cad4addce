"""
Module: fiscal_kernel.models.account
Responsibility: ORM persistence for the per-company chart of accounts, the
    target of every journal line.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - (company_id, code) is unique.
    - The leading digit of code encodes the account type:
      1 assets, 2 liabilities, 3 equity, 4 revenue, 5 expenses.
    - System accounts are neither editable nor deletable; an account with
      children is not deletable.  Enforcement lives in the chart-of-accounts
      maintenance layer, which uses the helpers below.
"""

from enum import Enum
from uuid import UUID

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from fiscal_kernel.db.base import TrackedBase, UUIDString


class AccountType(str, Enum):
    """Types of accounts in the chart of accounts."""

    ASSETS = "assets"
    LIABILITIES = "liabilities"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSES = "expenses"


class Account(TrackedBase):
    """
    Chart of Accounts entry for one company.

    Contract:
        Accounts are identified by id; code is the human-facing hierarchical
        number.  parent_id links a child to its parent account.

    Non-goals:
        - No CRUD rules are enforced here (system/children checks are
          exposed as helpers only).
    """

    __tablename__ = "accounts"

    __table_args__ = (
        UniqueConstraint("company_id", "code", name="uq_account_company_code"),
        Index("idx_account_company", "company_id"),
        Index("idx_account_type", "account_type"),
    )

    company_id: Mapped[UUID] = mapped_column(
        UUIDString(),
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

    account_type: Mapped[AccountType] = mapped_column(
        String(20),
        nullable=False,
    )

    parent_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )

    is_system: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    description: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Account {self.code}: {self.name}>"

    @property
    def is_editable(self) -> bool:
        return not self.is_system

    def is_deletable(self, has_children: bool) -> bool:
        """System accounts and accounts with children cannot be deleted."""
        return not self.is_system and not has_children
