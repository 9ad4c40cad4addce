"""
InventoryService -- reassignment of unsold inventory between fiscal years.

Responsibility:
    Moves every item of a company that is still in stock (status in the
    configured carry-forward statuses, "available" by default) from one
    fiscal year to another.  No accounting side effect.

Architecture position:
    Kernel > Services -- imperative shell, flush-only.

Failure modes:
    - PersistError wrapping any SQLAlchemyError.
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fiscal_kernel.exceptions import PersistError
from fiscal_kernel.logging_config import get_logger
from fiscal_kernel.models.inventory import InventoryItem, InventoryStatus
from fiscal_kernel.services.base import BaseService

logger = get_logger("services.inventory")


class InventoryService(BaseService[InventoryItem]):
    """Bulk fiscal-year reassignment of inventory items."""

    def __init__(
        self,
        session: Session,
        carry_forward_statuses: Iterable[str] = (InventoryStatus.AVAILABLE.value,),
    ):
        super().__init__(session)
        self._statuses = tuple(str(s) for s in carry_forward_statuses)

    def carry_forward(
        self,
        from_year_id: UUID,
        to_year_id: UUID,
        company_id: UUID,
    ) -> int:
        """
        Reassign in-stock items of from_year_id to to_year_id.

        Returns:
            Number of items moved.

        Raises:
            PersistError: If the update fails.
        """
        try:
            result = self.session.execute(
                update(InventoryItem)
                .where(InventoryItem.company_id == company_id)
                .where(InventoryItem.fiscal_year_id == from_year_id)
                .where(InventoryItem.status.in_(self._statuses))
                .values(fiscal_year_id=to_year_id)
            )
            self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistError("inventory carry-forward", str(exc)) from exc

        count = result.rowcount or 0
        logger.info(
            "inventory_carried_forward",
            extra={
                "from_fiscal_year_id": str(from_year_id),
                "to_fiscal_year_id": str(to_year_id),
                "item_count": count,
            },
        )
        return count

    def detach_year(self, fiscal_year_id: UUID) -> int:
        """Clear fiscal_year_id on every item of a year that is being deleted."""
        try:
            result = self.session.execute(
                update(InventoryItem)
                .where(InventoryItem.fiscal_year_id == fiscal_year_id)
                .values(fiscal_year_id=None)
            )
            self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistError("inventory detach", str(exc)) from exc
        return result.rowcount or 0
