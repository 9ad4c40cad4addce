"""
Module: fiscal_kernel.selectors.account_selector
Responsibility: Read-only access to the chart of accounts and to the
    retained-earnings account resolution rules.
Architecture position: Kernel > Selectors.

Retained earnings resolution:
    1. CompanySettings.retained_earnings_account_id, when set.
    2. Otherwise the account whose code starts with the configured legacy
       prefix (lowest code wins).
    3. Otherwise None; the generators raise only if they need a
       retained-earnings line.

Failure modes:
    - FetchError on any database read failure.
    - AccountNotFoundError when settings point at an account that does not
      exist for the company.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fiscal_kernel.domain.dtos import AccountInfo
from fiscal_kernel.exceptions import AccountNotFoundError, FetchError
from fiscal_kernel.logging_config import get_logger
from fiscal_kernel.models.account import Account
from fiscal_kernel.models.company_settings import CompanySettings
from fiscal_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.account")


class AccountSelector(BaseSelector[Account]):
    """Selector for accounts of one company."""

    def __init__(self, session: Session):
        super().__init__(session)

    def accounts_for_company(self, company_id: UUID) -> list[AccountInfo]:
        """All accounts of the company ordered by code."""
        try:
            rows = self.session.scalars(
                select(Account)
                .where(Account.company_id == company_id)
                .order_by(Account.code)
            ).all()
        except SQLAlchemyError as exc:
            logger.error("account_fetch_failed", extra={"error": str(exc)})
            raise FetchError("accounts", str(exc)) from exc
        return [AccountInfo.from_model(row) for row in rows]

    def get(self, account_id: UUID) -> AccountInfo | None:
        try:
            row = self.session.get(Account, account_id)
        except SQLAlchemyError as exc:
            raise FetchError("account", str(exc)) from exc
        return AccountInfo.from_model(row) if row is not None else None

    def find_by_code_prefix(self, company_id: UUID, prefix: str) -> AccountInfo | None:
        """Account with the lowest code starting with prefix, or None."""
        try:
            row = self.session.scalars(
                select(Account)
                .where(Account.company_id == company_id)
                .where(Account.code.startswith(prefix, autoescape=True))
                .order_by(Account.code)
                .limit(1)
            ).first()
        except SQLAlchemyError as exc:
            raise FetchError("account by code prefix", str(exc)) from exc
        return AccountInfo.from_model(row) if row is not None else None

    def retained_earnings_account(
        self,
        company_id: UUID,
        code_prefix: str | None,
    ) -> AccountInfo | None:
        """Resolve the company's retained-earnings account (see module doc)."""
        try:
            settings = self.session.scalars(
                select(CompanySettings).where(CompanySettings.company_id == company_id)
            ).first()
        except SQLAlchemyError as exc:
            raise FetchError("company settings", str(exc)) from exc

        if settings is not None and settings.retained_earnings_account_id is not None:
            account = self.get(settings.retained_earnings_account_id)
            if account is None or account.company_id != company_id:
                raise AccountNotFoundError(str(settings.retained_earnings_account_id))
            return account

        if code_prefix:
            return self.find_by_code_prefix(company_id, code_prefix)
        return None
