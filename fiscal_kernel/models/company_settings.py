"""
Module: fiscal_kernel.models.company_settings
Responsibility: Per-company accounting settings.  Holds the explicit
    retained-earnings account used by the closing and opening generators.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from uuid import UUID

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from fiscal_kernel.db.base import TrackedBase, UUIDString


class CompanySettings(TrackedBase):
    """
    Accounting settings of one company.

    Contract:
        When retained_earnings_account_id is unset the legacy code-prefix
        convention is used instead (see AccountSelector).
    """

    __tablename__ = "company_accounting_settings"

    company_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
        unique=True,
    )

    retained_earnings_account_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("accounts.id"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<CompanySettings {self.company_id}>"
