"""
BalanceForwardService -- customer and supplier roll-forward hooks.

Responsibility:
    Extension point run at the end of a carry-forward refresh.  Customer
    and supplier running balances already live in the ledger, so the
    cumulative opening entry carries them; the hooks only report how many
    active parties were considered.

Architecture position:
    Kernel > Services -- read-mostly, flush-only.
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fiscal_kernel.exceptions import FetchError
from fiscal_kernel.logging_config import get_logger
from fiscal_kernel.models.party import Party, PartyType
from fiscal_kernel.services.base import BaseService

logger = get_logger("services.balance_forward")


class BalanceForwardService(BaseService[Party]):
    """
    Roll-forward hooks for customer and supplier balances.

    Non-goals:
        - Posts nothing.
    """

    def __init__(self, session: Session):
        super().__init__(session)

    def roll_forward_customers(
        self,
        from_year_id: UUID,
        to_year_id: UUID,
        company_id: UUID,
    ) -> int:
        return self._roll_forward(PartyType.CUSTOMER, from_year_id, to_year_id, company_id)

    def roll_forward_suppliers(
        self,
        from_year_id: UUID,
        to_year_id: UUID,
        company_id: UUID,
    ) -> int:
        return self._roll_forward(PartyType.SUPPLIER, from_year_id, to_year_id, company_id)

    def _roll_forward(
        self,
        party_type: PartyType,
        from_year_id: UUID,
        to_year_id: UUID,
        company_id: UUID,
    ) -> int:
        # TODO: post customer_balance_forward / supplier_balance_forward entries
        # once per-party opening balances are split out of the control accounts.
        try:
            count = self.session.execute(
                select(func.count(Party.id))
                .where(Party.company_id == company_id)
                .where(Party.party_type == party_type.value)
                .where(Party.is_active.is_(True))
            ).scalar_one()
        except SQLAlchemyError as exc:
            raise FetchError(f"{party_type.value} parties", str(exc)) from exc

        logger.info(
            "party_balances_rolled_forward",
            extra={
                "party_type": party_type.value,
                "from_fiscal_year_id": str(from_year_id),
                "to_fiscal_year_id": str(to_year_id),
                "party_count": count,
            },
        )
        return count
