"""
fiscal_services._opening_entry -- Opening-entry draft assembly shared by the
year-open and carry-forward refresh paths.

Reads the cumulative ledger through the previous year's end date, without
the opening entries generated for earlier years, derives balances and the
unclosed net income, and asks the Opening Entry Generator for a draft.
Writes nothing.
"""

from collections.abc import Collection
from uuid import UUID

from sqlalchemy.orm import Session

from fiscal_config import LedgerConfig
from fiscal_engines import (
    LineDescriptions,
    aggregate_balances,
    build_opening_entry,
    calculate_net_income,
)
from fiscal_kernel.domain.dtos import DraftEntry, FiscalYearInfo
from fiscal_kernel.logging_config import get_logger
from fiscal_kernel.selectors.account_selector import AccountSelector
from fiscal_kernel.selectors.ledger_selector import LedgerSelector

logger = get_logger("services.opening_entry")


def line_descriptions(config: LedgerConfig) -> LineDescriptions:
    d = config.descriptions
    return LineDescriptions(
        closing_line=d.closing_line,
        net_profit=d.net_profit,
        net_loss=d.net_loss,
        opening_line=d.opening_line,
    )


def build_opening_draft(
    session: Session,
    config: LedgerConfig,
    target: FiscalYearInfo,
    previous: FiscalYearInfo,
    exclude_entry_ids: Collection[UUID] = (),
) -> DraftEntry | None:
    """Opening draft for target carried from previous, or None."""
    accounts = AccountSelector(session).accounts_for_company(target.company_id)
    accounts_by_id = {a.id: a for a in accounts}

    lines = LedgerSelector(session).lines_through(
        target.company_id,
        previous.end_date,
        exclude_entry_ids=exclude_entry_ids,
        include_generated_openings=False,
    )
    balances = aggregate_balances(lines=lines, accounts_by_id=accounts_by_id)
    income = calculate_net_income(balances=balances, accounts=accounts)

    retained_earnings = AccountSelector(session).retained_earnings_account(
        target.company_id, config.retained_earnings.code_prefix
    )

    logger.info(
        "opening_balances_computed",
        extra={
            "previous_fiscal_year_id": str(previous.id),
            "cutoff_date": str(previous.end_date),
            "line_count": len(lines),
            "unclosed_net_income": str(income.net_income),
        },
    )

    return build_opening_entry(
        target_year=target,
        balances=balances,
        balance_sheet_accounts=[a for a in accounts if a.is_balance_sheet],
        retained_earnings_account=retained_earnings,
        net_income=income.net_income,
        description=config.descriptions.opening_entry.format(
            fiscal_year_name=target.name
        ),
        line_descriptions=line_descriptions(config),
        decimal_places=config.money.decimal_places,
    )
