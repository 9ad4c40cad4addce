"""
Tests for FiscalYearService.

Covers the lifecycle rules on the rows themselves: range and overlap
validation, current-year exclusivity, one-way close, and the delete and
update guards.
"""

from datetime import date, datetime, timezone
from uuid import uuid4

import pytest

from fiscal_kernel.exceptions import (
    FiscalYearAlreadyClosedError,
    FiscalYearClosedError,
    FiscalYearImmutableError,
    FiscalYearNotEmptyError,
    FiscalYearNotFoundError,
    FiscalYearOverlapError,
    InvalidFiscalYearRangeError,
)
from fiscal_kernel.models.fiscal_year import FiscalYear
from fiscal_kernel.models.inventory import InventoryItem
from fiscal_kernel.selectors.fiscal_year_selector import FiscalYearSelector


class TestCreateYear:

    def test_creates_open_year(self, fiscal_year_service, company_id, test_actor_id):
        year = fiscal_year_service.create_year(
            company_id, "FY2024", date(2024, 1, 1), date(2024, 12, 31), test_actor_id,
            notes="first year",
        )

        assert year.is_open
        assert not year.is_current
        assert year.notes == "first year"
        assert year.opening_balance_entry_id is None

    @pytest.mark.parametrize("end", [date(2024, 1, 1), date(2023, 12, 31)])
    def test_end_must_follow_start(self, fiscal_year_service, company_id, test_actor_id, end):
        with pytest.raises(InvalidFiscalYearRangeError):
            fiscal_year_service.create_year(
                company_id, "Bad", date(2024, 1, 1), end, test_actor_id
            )

    def test_overlap_rejected(self, fiscal_year_service, create_fiscal_year, company_id, test_actor_id):
        create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))

        with pytest.raises(FiscalYearOverlapError) as exc_info:
            fiscal_year_service.create_year(
                company_id, "Broken", date(2024, 7, 1), date(2025, 6, 30), test_actor_id
            )

        assert exc_info.value.existing_name == "FY2024"
        assert exc_info.value.overlap_start == "2024-07-01"
        assert exc_info.value.overlap_end == "2024-12-31"

    def test_shared_boundary_day_overlaps(
        self, fiscal_year_service, create_fiscal_year, company_id, test_actor_id
    ):
        create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))

        with pytest.raises(FiscalYearOverlapError):
            fiscal_year_service.create_year(
                company_id, "FY2025", date(2024, 12, 31), date(2025, 12, 30), test_actor_id
            )

    def test_other_company_does_not_overlap(
        self, fiscal_year_service, create_fiscal_year, test_actor_id
    ):
        create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))

        year = fiscal_year_service.create_year(
            uuid4(), "FY2024", date(2024, 1, 1), date(2024, 12, 31), test_actor_id
        )

        assert year.is_open


class TestCurrentYear:

    def test_single_current_year(
        self, session, fiscal_year_service, create_fiscal_year, company_id, test_actor_id
    ):
        fy2024 = create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31), is_current=True)
        fy2025 = create_fiscal_year("FY2025", date(2025, 1, 1), date(2025, 12, 31))

        fiscal_year_service.set_current(fy2025.id, test_actor_id)
        session.commit()
        session.expire_all()

        selector = FiscalYearSelector(session)
        assert selector.get(fy2025.id).is_current
        assert not selector.get(fy2024.id).is_current
        assert selector.current_for_company(company_id).id == fy2025.id

    def test_closed_year_cannot_be_current(
        self, session, fiscal_year_service, create_fiscal_year, test_actor_id
    ):
        fy = create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))
        fiscal_year_service.close_year(fy.id, test_actor_id, None)

        with pytest.raises(FiscalYearClosedError):
            fiscal_year_service.set_current(fy.id, test_actor_id)

    def test_unknown_year(self, fiscal_year_service, test_actor_id):
        with pytest.raises(FiscalYearNotFoundError):
            fiscal_year_service.set_current(uuid4(), test_actor_id)


class TestCloseYear:

    def test_close_records_actor_and_clock(
        self, fiscal_year_service, create_fiscal_year, deterministic_clock, test_actor_id
    ):
        deterministic_clock.set_time(datetime(2025, 1, 15, 9, 30, tzinfo=timezone.utc))
        fy = create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31), is_current=True)
        entry_id = uuid4()

        closed = fiscal_year_service.close_year(fy.id, test_actor_id, entry_id)

        assert closed.is_closed
        assert closed.closed_by == test_actor_id
        assert closed.closed_at == datetime(2025, 1, 15, 9, 30, tzinfo=timezone.utc)
        assert closed.closing_balance_entry_id == entry_id
        assert closed.is_current

    def test_close_twice(self, fiscal_year_service, create_fiscal_year, test_actor_id):
        fy = create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))
        fiscal_year_service.close_year(fy.id, test_actor_id, None)

        with pytest.raises(FiscalYearAlreadyClosedError):
            fiscal_year_service.close_year(fy.id, test_actor_id, None)

    def test_reopen_refused(self, fiscal_year_service, create_fiscal_year, test_actor_id):
        fy = create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))
        fiscal_year_service.close_year(fy.id, test_actor_id, None)

        with pytest.raises(FiscalYearImmutableError):
            fiscal_year_service.reopen_year(fy.id, test_actor_id)

    def test_reopen_of_open_year_is_noop(
        self, fiscal_year_service, create_fiscal_year, test_actor_id
    ):
        fy = create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))

        assert fiscal_year_service.reopen_year(fy.id, test_actor_id).is_open


class TestUpdateYear:

    def test_update_name_and_notes(self, fiscal_year_service, create_fiscal_year, test_actor_id):
        fy = create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))

        updated = fiscal_year_service.update_year(
            fy.id, test_actor_id, name="Year 2024", notes="renamed"
        )

        assert updated.name == "Year 2024"
        assert updated.notes == "renamed"
        assert updated.start_date == date(2024, 1, 1)

    def test_update_dates_checks_overlap(
        self, fiscal_year_service, create_fiscal_year, test_actor_id
    ):
        create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))
        fy2025 = create_fiscal_year("FY2025", date(2025, 1, 1), date(2025, 12, 31))

        with pytest.raises(FiscalYearOverlapError):
            fiscal_year_service.update_year(
                fy2025.id, test_actor_id, start_date=date(2024, 12, 1)
            )

    def test_update_dates_own_range_ok(
        self, fiscal_year_service, create_fiscal_year, test_actor_id
    ):
        fy = create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))

        updated = fiscal_year_service.update_year(
            fy.id, test_actor_id, end_date=date(2024, 6, 30)
        )

        assert updated.end_date == date(2024, 6, 30)

    def test_update_dates_checks_range(
        self, fiscal_year_service, create_fiscal_year, test_actor_id
    ):
        fy = create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))

        with pytest.raises(InvalidFiscalYearRangeError):
            fiscal_year_service.update_year(fy.id, test_actor_id, end_date=date(2023, 1, 1))

    def test_closed_year_is_immutable(
        self, fiscal_year_service, create_fiscal_year, test_actor_id
    ):
        fy = create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))
        fiscal_year_service.close_year(fy.id, test_actor_id, None)

        with pytest.raises(FiscalYearImmutableError):
            fiscal_year_service.update_year(fy.id, test_actor_id, notes="late edit")


class TestDeleteYear:

    def test_delete_empty_year(self, session, fiscal_year_service, create_fiscal_year):
        fy = create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))

        fiscal_year_service.delete_year(fy.id)
        session.commit()

        assert session.get(FiscalYear, fy.id) is None

    def test_delete_detaches_inventory(
        self, session, fiscal_year_service, create_fiscal_year, create_inventory_item
    ):
        fy = create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))
        item = create_inventory_item(fy, "Sedan")

        fiscal_year_service.delete_year(fy.id)
        session.commit()
        session.expire_all()

        assert session.get(InventoryItem, item.id).fiscal_year_id is None

    def test_year_with_entries(self, fiscal_year_service, standard_ledger):
        with pytest.raises(FiscalYearNotEmptyError) as exc_info:
            fiscal_year_service.delete_year(standard_ledger.fy2024.id)

        assert exc_info.value.entry_count == 3

    def test_closed_year(self, fiscal_year_service, create_fiscal_year, test_actor_id):
        fy = create_fiscal_year("FY2024", date(2024, 1, 1), date(2024, 12, 31))
        fiscal_year_service.close_year(fy.id, test_actor_id, None)

        with pytest.raises(FiscalYearClosedError):
            fiscal_year_service.delete_year(fy.id)
