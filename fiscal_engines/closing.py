"""
fiscal_engines.closing -- Closing Entry Generator.

Responsibility:
    Build the year-end entry that zeroes every revenue and expense account
    of a fiscal year into retained earnings.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  The orchestrator persists
    the draft and closes the year in the same transaction.

Line rules (amounts rounded with round_money):
    revenue, balance > 0   -> debit  = balance
    revenue, balance < 0   -> credit = |balance|
    expense, balance != 0  -> credit = |balance|
    retained earnings      -> credit = net income (profit)
                              debit  = |net income| (loss)
                              omitted when net income is zero

Invariants enforced:
    - Sum(debit) == Sum(credit), verified before the draft is returned.
    - Every line has exactly one nonzero side.

Failure modes:
    - UnbalancedEntryError if the lines do not balance.
    - RetainedEarningsAccountNotFoundError if a retained-earnings line is
      needed and no account was resolved.
    - Returns None when no revenue or expense account has a nonzero
      balance; the year still closes, without an entry.
"""

from collections.abc import Mapping, Sequence
from decimal import Decimal
from uuid import UUID

from fiscal_engines.balances import ZERO, balance_of
from fiscal_engines.descriptions import DEFAULT_LINE_DESCRIPTIONS, LineDescriptions
from fiscal_engines.tracer import traced_engine
from fiscal_kernel.db.types import MONEY_DECIMAL_PLACES, round_money
from fiscal_kernel.domain.dtos import (
    AccountInfo,
    DraftEntry,
    EntryLine,
    FiscalYearInfo,
    ReferenceType,
    generated_entry_key,
)
from fiscal_kernel.exceptions import (
    RetainedEarningsAccountNotFoundError,
    UnbalancedEntryError,
)


def _describe(template: str, account: AccountInfo, fiscal_year: FiscalYearInfo) -> str:
    return template.format(
        account_name=account.name,
        account_code=account.code,
        fiscal_year_name=fiscal_year.name,
    )


@traced_engine("closing_entry", "1.0", fingerprint_fields=("description",))
def build_closing_entry(
    fiscal_year: FiscalYearInfo,
    balances: Mapping[UUID, Decimal],
    revenue_accounts: Sequence[AccountInfo],
    expense_accounts: Sequence[AccountInfo],
    retained_earnings_account: AccountInfo | None,
    description: str,
    line_descriptions: LineDescriptions = DEFAULT_LINE_DESCRIPTIONS,
    decimal_places: int = MONEY_DECIMAL_PLACES,
) -> DraftEntry | None:
    """
    Closing draft for one fiscal year, or None when there is nothing to close.

    Args:
        fiscal_year: Year being closed; supplies the entry date (end_date).
        balances: Signed balances over the year's window.
        revenue_accounts: Revenue accounts, in line order.
        expense_accounts: Expense accounts, in line order.
        retained_earnings_account: Plug account, if one was resolved.
        description: Entry header description.
        line_descriptions: Templates for the line descriptions.
        decimal_places: Money precision for the lines.
    """
    lines: list[EntryLine] = []
    total_revenue = ZERO
    total_expenses = ZERO

    for account in revenue_accounts:
        amount = round_money(balance_of(balances, account.id), decimal_places)
        if amount == 0:
            continue
        total_revenue += amount
        text = _describe(line_descriptions.closing_line, account, fiscal_year)
        if amount > 0:
            lines.append(EntryLine(account_id=account.id, debit=amount, description=text))
        else:
            lines.append(EntryLine(account_id=account.id, credit=-amount, description=text))

    for account in expense_accounts:
        amount = abs(round_money(balance_of(balances, account.id), decimal_places))
        if amount == 0:
            continue
        total_expenses += amount
        lines.append(
            EntryLine(
                account_id=account.id,
                credit=amount,
                description=_describe(line_descriptions.closing_line, account, fiscal_year),
            )
        )

    if not lines:
        return None

    net_income = total_revenue - total_expenses
    if net_income != 0:
        if retained_earnings_account is None:
            raise RetainedEarningsAccountNotFoundError(str(fiscal_year.company_id))
        if net_income > 0:
            lines.append(
                EntryLine(
                    account_id=retained_earnings_account.id,
                    credit=net_income,
                    description=line_descriptions.net_profit,
                )
            )
        else:
            lines.append(
                EntryLine(
                    account_id=retained_earnings_account.id,
                    debit=-net_income,
                    description=line_descriptions.net_loss,
                )
            )

    draft = DraftEntry(
        company_id=fiscal_year.company_id,
        fiscal_year_id=fiscal_year.id,
        entry_date=fiscal_year.end_date,
        reference_type=ReferenceType.CLOSING.value,
        description=description,
        lines=tuple(lines),
        idempotency_key=generated_entry_key(ReferenceType.CLOSING, fiscal_year.id),
    )
    if not draft.is_balanced:
        raise UnbalancedEntryError(
            ReferenceType.CLOSING.value, str(draft.total_debit), str(draft.total_credit)
        )
    return draft
