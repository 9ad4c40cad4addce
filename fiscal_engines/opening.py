"""
fiscal_engines.opening -- Opening Entry Generator.

Responsibility:
    Build the entry that carries balance-sheet balances (cumulative through
    the previous year's end date) into a new fiscal year.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Line rules (amounts rounded with round_money):
    assets, balance > 0               -> debit  = balance
    assets, balance < 0               -> credit = |balance|
    liabilities/equity, balance > 0   -> credit = balance
    liabilities/equity, balance < 0   -> debit  = |balance|

    net_income is the profit or loss still held in revenue and expense
    accounts at the cut-off date.  It is added to the retained-earnings
    balance (creating its line if it had none) so that an opening drawn
    from an unclosed year still balances.  It is zero when the previous
    year was closed.

    The retained-earnings line is written as the balancing amount of the
    rounded lines, so sub-cent balances that round apart do not unbalance
    the entry.  A gap larger than one rounding step per line is left in
    place for the balance check to reject.

Invariants enforced:
    - Sum(debit) == Sum(credit), verified before the draft is returned.

Failure modes:
    - UnbalancedEntryError if the lines do not balance.
    - RetainedEarningsAccountNotFoundError if net_income is nonzero and no
      retained-earnings account was resolved.
    - Returns None when there are no nonzero balances to carry.
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
    AccountType,
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


def _opening_line(account: AccountInfo, amount: Decimal, description: str) -> EntryLine:
    if account.account_type == AccountType.ASSETS:
        if amount > 0:
            return EntryLine(account_id=account.id, debit=amount, description=description)
        return EntryLine(account_id=account.id, credit=-amount, description=description)
    if amount > 0:
        return EntryLine(account_id=account.id, credit=amount, description=description)
    return EntryLine(account_id=account.id, debit=-amount, description=description)


def _describe(template: str, account: AccountInfo, target_year: FiscalYearInfo) -> str:
    return template.format(
        account_name=account.name,
        account_code=account.code,
        fiscal_year_name=target_year.name,
    )


@traced_engine("opening_entry", "1.0", fingerprint_fields=("description", "net_income"))
def build_opening_entry(
    target_year: FiscalYearInfo,
    balances: Mapping[UUID, Decimal],
    balance_sheet_accounts: Sequence[AccountInfo],
    retained_earnings_account: AccountInfo | None,
    net_income: Decimal = ZERO,
    description: str = "",
    line_descriptions: LineDescriptions = DEFAULT_LINE_DESCRIPTIONS,
    decimal_places: int = MONEY_DECIMAL_PLACES,
) -> DraftEntry | None:
    """
    Opening draft for target_year, or None when nothing is carried.

    Args:
        target_year: Year being opened; supplies the entry date (start_date).
        balances: Signed cumulative balances through the previous end date.
        balance_sheet_accounts: Asset, liability and equity accounts, in
            line order.
        retained_earnings_account: Receives net_income, if one was resolved.
        net_income: Unclosed profit (positive) or loss (negative).
        description: Entry header description.
        line_descriptions: Templates for the line descriptions.
        decimal_places: Money precision for the lines.
    """
    net_income = round_money(net_income, decimal_places)
    retained = retained_earnings_account
    if net_income != 0 and retained is None:
        raise RetainedEarningsAccountNotFoundError(str(target_year.company_id))

    lines: list[EntryLine] = []
    net_debit = ZERO
    retained_position = None
    for account in balance_sheet_accounts:
        if retained is not None and account.id == retained.id:
            retained_position = len(lines)
            continue
        amount = round_money(balance_of(balances, account.id), decimal_places)
        if amount == 0:
            continue
        line = _opening_line(
            account, amount, _describe(line_descriptions.opening_line, account, target_year)
        )
        net_debit += line.debit - line.credit
        lines.append(line)

    if retained is not None:
        expected = round_money(balance_of(balances, retained.id), decimal_places) + net_income
        carried = -net_debit if retained.account_type == AccountType.ASSETS else net_debit
        # absorbs at most one rounding step per line
        quantum = Decimal(1).scaleb(-decimal_places)
        if abs(carried - expected) > quantum * len(lines):
            carried = expected
        if carried != 0:
            if retained_position is None:
                retained_position = len(lines)
            lines.insert(
                retained_position,
                _opening_line(
                    retained,
                    carried,
                    _describe(line_descriptions.opening_line, retained, target_year),
                ),
            )

    if not lines:
        return None

    draft = DraftEntry(
        company_id=target_year.company_id,
        fiscal_year_id=target_year.id,
        entry_date=target_year.start_date,
        reference_type=ReferenceType.OPENING.value,
        description=description,
        lines=tuple(lines),
        idempotency_key=generated_entry_key(ReferenceType.OPENING, target_year.id),
    )
    if not draft.is_balanced:
        raise UnbalancedEntryError(
            ReferenceType.OPENING.value, str(draft.total_debit), str(draft.total_credit)
        )
    return draft
