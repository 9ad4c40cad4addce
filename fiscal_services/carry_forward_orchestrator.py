"""
CarryForwardOrchestrator -- Carry-Forward Refresh Orchestrator.

Responsibility:
    Re-derive a fiscal year's opening entry from the current state of the
    ledger, then move unsold inventory and run the customer/supplier
    roll-forward hooks.  Safe to re-run: each run replaces the previous
    opening entry, so exactly one exists afterwards and an unchanged
    ledger yields identical totals.

Architecture position:
    Services -- stateful orchestration over engines + kernel.  Owns the
    transaction boundary.

Refresh steps (one transaction, under the year lock):
    1. lock the target year; it must be open;
    2. find the existing opening entry (stamped id, else idempotency key);
    3. compute the new draft from the cumulative ledger through the
       previous year's end date, excluding the entry being replaced;
    4. delete the old entry and its lines;
    5. write the new entry and re-stamp the year (cleared when nothing is
       carried);
    6. inventory carry-forward from the previous year;
    7. customer and supplier roll-forward hooks.

Failure modes:
    - Never raises across this boundary; see FiscalYearOrchestrator.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from fiscal_config import LedgerConfig, get_active_config
from fiscal_kernel.domain.clock import Clock, SystemClock
from fiscal_kernel.domain.dtos import FiscalYearInfo, ReferenceType
from fiscal_kernel.exceptions import (
    FiscalKernelError,
    FiscalYearClosedError,
    FiscalYearNotFoundError,
)
from fiscal_kernel.logging_config import LogContext, get_logger
from fiscal_kernel.selectors.fiscal_year_selector import FiscalYearSelector
from fiscal_kernel.selectors.ledger_selector import LedgerSelector
from fiscal_kernel.services.balance_forward_service import BalanceForwardService
from fiscal_kernel.services.fiscal_year_service import FiscalYearService
from fiscal_kernel.services.inventory_service import InventoryService
from fiscal_kernel.services.journal_writer import JournalWriter
from fiscal_kernel.services.year_lock import YearLockRegistry, default_year_locks
from fiscal_services._lifecycle_types import InventoryResult, RefreshResult
from fiscal_services._opening_entry import build_opening_draft

logger = get_logger("services.carry_forward_orchestrator")


class CarryForwardOrchestrator:
    """
    Carry-forward refresh and inventory reassignment.

    Contract:
        Both public methods run in one transaction on the given session
        and return a result object instead of raising.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: LedgerConfig | None = None,
        year_locks: YearLockRegistry | None = None,
    ):
        self._session = session
        self._config = config or get_active_config()
        self._year_locks = year_locks or default_year_locks
        self._years = FiscalYearService(session, clock or SystemClock())
        self._year_selector = FiscalYearSelector(session)
        self._ledger = LedgerSelector(session)
        self._writer = JournalWriter(session)
        self._inventory = InventoryService(
            session, self._config.inventory.carry_forward_statuses
        )
        self._balance_forward = BalanceForwardService(session)

    def refresh_all_carry_forward_balances(
        self,
        fiscal_year_id: UUID,
        previous_year_id: UUID,
        company_id: UUID,
        actor_id: UUID,
    ) -> RefreshResult:
        """Regenerate the opening entry of fiscal_year_id from previous_year_id."""
        with LogContext.bind(company_id=company_id, fiscal_year_id=fiscal_year_id,
                             actor_id=actor_id, operation="refresh_carry_forward"):
            logger.info(
                "carry_forward_refresh_started",
                extra={"previous_fiscal_year_id": str(previous_year_id)},
            )
            try:
                with self._year_locks.hold(company_id, fiscal_year_id):
                    result = self._refresh(
                        fiscal_year_id, previous_year_id, company_id, actor_id
                    )
                    self._session.commit()
            except FiscalKernelError as exc:
                self._session.rollback()
                logger.warning(
                    "carry_forward_refresh_failed",
                    extra={"error_code": exc.code, "error": str(exc)},
                )
                return RefreshResult.failed(exc)
            except Exception as exc:
                self._session.rollback()
                logger.exception("carry_forward_refresh_error")
                return RefreshResult.failed(exc)

            logger.info(
                "carry_forward_refresh_committed",
                extra={
                    "opening_entry_id": str(result.opening_entry_id)
                    if result.opening_entry_id else None,
                    "inventory_count": result.inventory_count,
                    "customer_count": result.customer_count,
                    "supplier_count": result.supplier_count,
                },
            )
            return result

    def _refresh(
        self,
        fiscal_year_id: UUID,
        previous_year_id: UUID,
        company_id: UUID,
        actor_id: UUID,
    ) -> RefreshResult:
        year_row = self._years.lock_year(fiscal_year_id)
        if year_row.company_id != company_id:
            raise FiscalYearNotFoundError(str(fiscal_year_id))
        if year_row.is_closed:
            raise FiscalYearClosedError(str(fiscal_year_id), "refresh carry-forward of")
        target = FiscalYearInfo.from_model(year_row)
        previous = self._require_year(previous_year_id, company_id)

        old_entry_id = target.opening_balance_entry_id or self._ledger.generated_entry_id(
            ReferenceType.OPENING, fiscal_year_id
        )
        excluded = (old_entry_id,) if old_entry_id is not None else ()
        draft = build_opening_draft(
            self._session, self._config, target, previous, exclude_entry_ids=excluded
        )

        if old_entry_id is not None:
            self._writer.delete_entry(old_entry_id)

        new_entry_id = self._writer.write(draft, actor_id) if draft is not None else None
        self._years.stamp_opening_entry(fiscal_year_id, new_entry_id, actor_id)

        inventory_count = self._inventory.carry_forward(
            previous.id, fiscal_year_id, company_id
        )
        customer_count = self._balance_forward.roll_forward_customers(
            previous.id, fiscal_year_id, company_id
        )
        supplier_count = self._balance_forward.roll_forward_suppliers(
            previous.id, fiscal_year_id, company_id
        )

        return RefreshResult(
            success=True,
            opening_balances_updated=True,
            opening_entry_id=new_entry_id,
            inventory_count=inventory_count,
            customer_count=customer_count,
            supplier_count=supplier_count,
        )

    def carry_forward_inventory(
        self,
        from_year_id: UUID,
        to_year_id: UUID,
        company_id: UUID,
    ) -> InventoryResult:
        """Move in-stock items of from_year_id to to_year_id."""
        with LogContext.bind(company_id=company_id, fiscal_year_id=to_year_id,
                             operation="carry_forward_inventory"):
            try:
                self._require_year(from_year_id, company_id)
                self._require_year(to_year_id, company_id)
                count = self._inventory.carry_forward(from_year_id, to_year_id, company_id)
                self._session.commit()
            except FiscalKernelError as exc:
                self._session.rollback()
                logger.warning(
                    "inventory_carry_forward_failed",
                    extra={"error_code": exc.code, "error": str(exc)},
                )
                return InventoryResult.failed(exc)
            except Exception as exc:
                self._session.rollback()
                logger.exception("inventory_carry_forward_error")
                return InventoryResult.failed(exc)
            return InventoryResult(success=True, count=count)

    def _require_year(self, fiscal_year_id: UUID, company_id: UUID) -> FiscalYearInfo:
        year = self._year_selector.get(fiscal_year_id)
        if year is None or year.company_id != company_id:
            raise FiscalYearNotFoundError(str(fiscal_year_id))
        return year
