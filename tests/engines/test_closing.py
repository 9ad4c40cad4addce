"""
Tests for the Closing Entry Generator.

Covers:
- Profit and loss years
- Contra-balance revenue and expense accounts
- Rounding of line amounts
- No-activity years
- Missing retained-earnings account
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from fiscal_engines.closing import build_closing_entry
from fiscal_engines.descriptions import LineDescriptions
from fiscal_kernel.domain.dtos import (
    AccountInfo,
    AccountType,
    FiscalYearInfo,
    FiscalYearStatus,
    ReferenceType,
)
from fiscal_kernel.exceptions import RetainedEarningsAccountNotFoundError


def _account(code: str, name: str, account_type: AccountType) -> AccountInfo:
    return AccountInfo(id=uuid4(), code=code, name=name, account_type=account_type)


def _by_account(draft):
    return {line.account_id: (line.debit, line.credit) for line in draft.lines}


@pytest.fixture
def fiscal_year():
    return FiscalYearInfo(
        id=uuid4(),
        company_id=uuid4(),
        name="FY2024",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        status=FiscalYearStatus.OPEN,
    )


@pytest.fixture
def accounts():
    return {
        "sales": _account("4001", "Sales", AccountType.REVENUE),
        "rent": _account("5001", "Rent", AccountType.EXPENSES),
        "retained": _account("3301", "Retained earnings", AccountType.EQUITY),
    }


def _build(fiscal_year, accounts, balances, retained="default", **kwargs):
    return build_closing_entry(
        fiscal_year=fiscal_year,
        balances=balances,
        revenue_accounts=[accounts["sales"]],
        expense_accounts=[accounts["rent"]],
        retained_earnings_account=accounts["retained"] if retained == "default" else retained,
        description="Closing entry for fiscal year FY2024",
        **kwargs,
    )


class TestProfitYear:

    def test_lines(self, fiscal_year, accounts):
        draft = _build(
            fiscal_year,
            accounts,
            {accounts["sales"].id: Decimal("10000"), accounts["rent"].id: Decimal("4000")},
        )

        assert _by_account(draft) == {
            accounts["sales"].id: (Decimal("10000.00"), Decimal("0")),
            accounts["rent"].id: (Decimal("0"), Decimal("4000.00")),
            accounts["retained"].id: (Decimal("0"), Decimal("6000.00")),
        }
        assert draft.is_balanced

    def test_header(self, fiscal_year, accounts):
        draft = _build(
            fiscal_year,
            accounts,
            {accounts["sales"].id: Decimal("10000"), accounts["rent"].id: Decimal("4000")},
        )

        assert draft.entry_date == date(2024, 12, 31)
        assert draft.reference_type == ReferenceType.CLOSING.value
        assert draft.fiscal_year_id == fiscal_year.id
        assert draft.company_id == fiscal_year.company_id
        assert draft.idempotency_key == f"closing:{fiscal_year.id}"
        assert draft.description == "Closing entry for fiscal year FY2024"

    def test_line_descriptions(self, fiscal_year, accounts):
        draft = _build(
            fiscal_year,
            accounts,
            {accounts["sales"].id: Decimal("10000"), accounts["rent"].id: Decimal("4000")},
        )

        descriptions = [line.description for line in draft.lines]
        assert descriptions == ["Closing Sales", "Closing Rent", "Net profit for the year"]

    def test_custom_line_descriptions(self, fiscal_year, accounts):
        draft = _build(
            fiscal_year,
            accounts,
            {accounts["sales"].id: Decimal("100")},
            line_descriptions=LineDescriptions(
                closing_line="Close {account_code} ({fiscal_year_name})",
                net_profit="Profit",
            ),
        )

        assert [line.description for line in draft.lines] == ["Close 4001 (FY2024)", "Profit"]


class TestLossYear:

    def test_retained_earnings_debited(self, fiscal_year, accounts):
        draft = _build(
            fiscal_year,
            accounts,
            {accounts["sales"].id: Decimal("1000"), accounts["rent"].id: Decimal("3000")},
        )

        lines = _by_account(draft)
        assert lines[accounts["retained"].id] == (Decimal("2000.00"), Decimal("0"))
        assert draft.lines[-1].description == "Net loss for the year"
        assert draft.is_balanced


class TestContraBalances:

    def test_negative_revenue_is_credited(self, fiscal_year, accounts):
        draft = _build(
            fiscal_year,
            accounts,
            {accounts["sales"].id: Decimal("-500")},
        )

        lines = _by_account(draft)
        assert lines[accounts["sales"].id] == (Decimal("0"), Decimal("500.00"))
        assert lines[accounts["retained"].id] == (Decimal("500.00"), Decimal("0"))
        assert draft.is_balanced

    def test_negative_expense_is_still_credited(self, fiscal_year, accounts):
        draft = _build(
            fiscal_year,
            accounts,
            {accounts["sales"].id: Decimal("1000"), accounts["rent"].id: Decimal("-200")},
        )

        lines = _by_account(draft)
        assert lines[accounts["rent"].id] == (Decimal("0"), Decimal("200.00"))
        assert lines[accounts["retained"].id] == (Decimal("0"), Decimal("800.00"))
        assert draft.is_balanced


class TestRounding:

    def test_amounts_rounded_half_up(self, fiscal_year, accounts):
        draft = _build(
            fiscal_year,
            accounts,
            {accounts["sales"].id: Decimal("100.005"), accounts["rent"].id: Decimal("40.004")},
        )

        lines = _by_account(draft)
        assert lines[accounts["sales"].id][0] == Decimal("100.01")
        assert lines[accounts["rent"].id][1] == Decimal("40.00")
        assert lines[accounts["retained"].id][1] == Decimal("60.01")
        assert draft.is_balanced

    def test_balance_rounding_to_zero_is_skipped(self, fiscal_year, accounts):
        draft = _build(
            fiscal_year,
            accounts,
            {accounts["sales"].id: Decimal("0.004")},
        )

        assert draft is None


class TestNothingToClose:

    def test_no_balances(self, fiscal_year, accounts):
        assert _build(fiscal_year, accounts, {}) is None

    def test_zero_net_income_omits_retained_earnings_line(self, fiscal_year, accounts):
        draft = _build(
            fiscal_year,
            accounts,
            {accounts["sales"].id: Decimal("700"), accounts["rent"].id: Decimal("700")},
            retained=None,
        )

        assert {line.account_id for line in draft.lines} == {
            accounts["sales"].id,
            accounts["rent"].id,
        }
        assert draft.is_balanced


class TestRetainedEarningsRequired:

    def test_missing_account_raises(self, fiscal_year, accounts):
        with pytest.raises(RetainedEarningsAccountNotFoundError) as exc_info:
            _build(
                fiscal_year,
                accounts,
                {accounts["sales"].id: Decimal("10")},
                retained=None,
            )

        assert exc_info.value.code == "RETAINED_EARNINGS_NOT_CONFIGURED"

    def test_missing_account_is_fine_without_activity(self, fiscal_year, accounts):
        assert _build(fiscal_year, accounts, {}, retained=None) is None
