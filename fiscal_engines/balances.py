"""
fiscal_engines.balances -- Balance Aggregator and Income Calculator.

Responsibility:
    Turn ledger lines into signed per-account balances using each account's
    normal side, and summarize revenue and expense balances into net
    income.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Sign convention:
    liabilities, equity, revenue   -> credit - debit
    assets, expenses, and unknown  -> debit - credit

Failure modes:
    - None for missing lookups: an unknown account is treated as
      debit-normal and a missing balance reads as zero.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from fiscal_engines.tracer import traced_engine
from fiscal_kernel.domain.dtos import AccountInfo, AccountType, LedgerLine

ZERO = Decimal("0")


@traced_engine("balance_aggregator", "1.0")
def aggregate_balances(
    lines: Iterable[LedgerLine],
    accounts_by_id: Mapping[UUID, AccountInfo],
) -> dict[UUID, Decimal]:
    """
    Signed balance per account over the given lines.

    Args:
        lines: Ledger lines (any window).
        accounts_by_id: Account directory; missing ids are debit-normal.

    Returns:
        Mapping account_id -> balance.  Accounts without lines are absent.
    """
    balances: dict[UUID, Decimal] = {}
    for line in lines:
        account = accounts_by_id.get(line.account_id)
        if account is not None and account.is_credit_normal:
            delta = line.credit - line.debit
        else:
            delta = line.debit - line.credit
        balances[line.account_id] = balances.get(line.account_id, ZERO) + delta
    return balances


def balance_of(balances: Mapping[UUID, Decimal], account_id: UUID) -> Decimal:
    """Balance of one account; zero when it has none."""
    return balances.get(account_id, ZERO)


@dataclass(frozen=True)
class IncomeSummary:
    """Revenue, expense and net income totals for one window."""

    total_revenue: Decimal
    total_expenses: Decimal
    net_income: Decimal

    @property
    def is_profit(self) -> bool:
        return self.net_income > 0

    @property
    def is_loss(self) -> bool:
        return self.net_income < 0


@traced_engine("income_calculator", "1.0")
def calculate_net_income(
    balances: Mapping[UUID, Decimal],
    accounts: Iterable[AccountInfo],
) -> IncomeSummary:
    """
    Net income = sum of revenue balances - sum of |expense balances|.

    Returns zeros when there are no revenue or expense accounts.
    """
    total_revenue = ZERO
    total_expenses = ZERO
    for account in accounts:
        if account.account_type == AccountType.REVENUE:
            total_revenue += balance_of(balances, account.id)
        elif account.account_type == AccountType.EXPENSES:
            total_expenses += abs(balance_of(balances, account.id))
    return IncomeSummary(
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        net_income=total_revenue - total_expenses,
    )
