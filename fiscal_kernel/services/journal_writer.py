"""
JournalWriter -- persistence of generated journal entries.

Responsibility:
    Writes a DraftEntry as a journal entry plus its lines, and deletes an
    entry together with its lines when a carry-forward is regenerated.

Architecture position:
    Kernel > Services -- imperative shell.  Called by the fiscal_services
    orchestrators with drafts produced by fiscal_engines.

Invariants enforced:
    - Balance: Sum(debit) == Sum(credit) is re-checked before anything is
      written; header totals equal the line sums.
    - Order: the entry header is flushed before its lines reference it.
    - Idempotency: the draft's idempotency_key is stored on the header; a
      duplicate key fails the flush at the database.
    - Flush-only.

Failure modes:
    - UnbalancedEntryError if the draft does not balance.
    - PersistError wrapping any SQLAlchemyError (including a duplicate
      idempotency key).  The session must be rolled back by the caller.
"""

from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fiscal_kernel.domain.dtos import DraftEntry
from fiscal_kernel.exceptions import PersistError, UnbalancedEntryError
from fiscal_kernel.logging_config import get_logger
from fiscal_kernel.models.journal import JournalEntry, JournalLine
from fiscal_kernel.services.base import BaseService

logger = get_logger("services.journal_writer")


class JournalWriter(BaseService[JournalEntry]):
    """
    Writes and removes journal entries.

    Non-goals:
        - Does NOT decide what to post; fiscal_engines builds the drafts.
    """

    def __init__(self, session: Session):
        super().__init__(session)

    def write(self, draft: DraftEntry, actor_id: UUID) -> UUID:
        """
        Persist a draft as a posted journal entry.

        Args:
            draft: Balanced DraftEntry.
            actor_id: Recorded as created_by_id on the entry and its lines.

        Returns:
            Id of the new journal entry.

        Raises:
            UnbalancedEntryError: If debits != credits.
            PersistError: If the insert fails.
        """
        total_debit = draft.total_debit
        total_credit = draft.total_credit
        if total_debit != total_credit:
            raise UnbalancedEntryError(
                draft.reference_type, str(total_debit), str(total_credit)
            )

        entry = JournalEntry(
            company_id=draft.company_id,
            description=draft.description,
            entry_date=draft.entry_date,
            total_debit=total_debit,
            total_credit=total_credit,
            is_posted=True,
            reference_type=draft.reference_type,
            fiscal_year_id=draft.fiscal_year_id,
            idempotency_key=draft.idempotency_key,
            created_by_id=actor_id,
        )
        try:
            self.session.add(entry)
            self.session.flush()

            self.session.add_all(
                JournalLine(
                    journal_entry_id=entry.id,
                    account_id=line.account_id,
                    debit=line.debit,
                    credit=line.credit,
                    description=line.description,
                    line_seq=seq,
                    created_by_id=actor_id,
                )
                for seq, line in enumerate(draft.lines)
            )
            self.session.flush()
        except SQLAlchemyError as exc:
            logger.error(
                "journal_entry_write_failed",
                extra={
                    "reference_type": draft.reference_type,
                    "idempotency_key": draft.idempotency_key,
                    "error": str(exc),
                },
            )
            raise PersistError(f"{draft.reference_type} journal entry", str(exc)) from exc

        logger.info(
            "journal_entry_written",
            extra={
                "journal_entry_id": str(entry.id),
                "reference_type": draft.reference_type,
                "entry_date": str(draft.entry_date),
                "line_count": len(draft.lines),
                "total_debit": str(total_debit),
                "total_credit": str(total_credit),
            },
        )
        return entry.id

    def delete_entry(self, journal_entry_id: UUID) -> int:
        """
        Delete an entry's lines, then the entry itself.

        Returns:
            Number of lines deleted.

        Raises:
            PersistError: If a delete fails.
        """
        try:
            result = self.session.execute(
                delete(JournalLine).where(JournalLine.journal_entry_id == journal_entry_id)
            )
            self.session.execute(
                delete(JournalEntry).where(JournalEntry.id == journal_entry_id)
            )
            self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistError("journal entry delete", str(exc)) from exc

        line_count = result.rowcount or 0
        logger.info(
            "journal_entry_deleted",
            extra={"journal_entry_id": str(journal_entry_id), "line_count": line_count},
        )
        return line_count
