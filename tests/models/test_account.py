"""
ORM model tests for the chart of accounts.

Tests: Account edit/delete guards -- system accounts are neither editable
nor deletable, and an account with children cannot be deleted.
"""

from sqlalchemy import func, select

from fiscal_kernel.models.account import Account, AccountType


def _has_children(session, account: Account) -> bool:
    return session.scalar(
        select(func.count(Account.id)).where(Account.parent_id == account.id)
    ) > 0


class TestAccountGuards:

    def test_ordinary_account_editable_and_deletable(self, session, create_account):
        cash = create_account("1001", "Cash", AccountType.ASSETS)

        assert cash.is_editable
        assert cash.is_deletable(has_children=_has_children(session, cash))

    def test_system_account_locked(self, session, create_account):
        retained = create_account(
            "3301", "Retained Earnings", AccountType.EQUITY, is_system=True
        )

        assert not retained.is_editable
        assert not retained.is_deletable(has_children=_has_children(session, retained))

    def test_parent_with_children_not_deletable(
        self, session, create_account, company_id, test_actor_id
    ):
        assets = create_account("1000", "Current Assets", AccountType.ASSETS)
        session.add(
            Account(
                company_id=company_id,
                code="1001",
                name="Cash",
                account_type=AccountType.ASSETS.value,
                parent_id=assets.id,
                created_by_id=test_actor_id,
            )
        )
        session.flush()

        assert assets.is_editable
        assert not assets.is_deletable(has_children=_has_children(session, assets))
