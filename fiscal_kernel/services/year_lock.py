"""
YearLockRegistry -- in-process serialization of close and refresh.

Responsibility:
    Hands out one lock per (company_id, fiscal_year_id) so two threads of
    the same process cannot close or refresh the same year at once.  The
    row lock taken by FiscalYearService.lock_year() does the same across
    processes on PostgreSQL; SQLite ignores FOR UPDATE, which makes this
    registry the only guard there.

Failure modes:
    - FiscalYearBusyError when the lock is not obtained within the timeout.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID

from fiscal_kernel.exceptions import FiscalYearBusyError
from fiscal_kernel.logging_config import get_logger

logger = get_logger("services.year_lock")


class _YearLock:
    """A year's lock plus the number of threads holding or waiting on it."""

    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class YearLockRegistry:
    """
    Registry of per-year locks.

    Contract:
        hold() is a context manager.  With timeout=0 (default) it fails fast
        when another holder is active; with timeout > 0 it waits up to that
        many seconds.  A year's entry is dropped once no thread holds or
        waits on it, so the registry only tracks years in use.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[tuple[str, str], _YearLock] = {}

    def tracked_years(self) -> int:
        """Number of years some thread currently holds or waits on."""
        with self._guard:
            return len(self._locks)

    def _checkout(self, key: tuple[str, str]) -> _YearLock:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = _YearLock()
                self._locks[key] = entry
            entry.users += 1
            return entry

    def _checkin(self, key: tuple[str, str], entry: _YearLock) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    def is_held(self, company_id: UUID, fiscal_year_id: UUID) -> bool:
        with self._guard:
            entry = self._locks.get((str(company_id), str(fiscal_year_id)))
            return entry is not None and entry.lock.locked()

    @contextmanager
    def hold(
        self,
        company_id: UUID,
        fiscal_year_id: UUID,
        timeout: float = 0,
    ) -> Iterator[None]:
        key = (str(company_id), str(fiscal_year_id))
        entry = self._checkout(key)
        try:
            if timeout > 0:
                acquired = entry.lock.acquire(timeout=timeout)
            else:
                acquired = entry.lock.acquire(blocking=False)

            if not acquired:
                logger.warning(
                    "fiscal_year_busy",
                    extra={
                        "company_id": str(company_id),
                        "fiscal_year_id": str(fiscal_year_id),
                    },
                )
                raise FiscalYearBusyError(str(company_id), str(fiscal_year_id))

            try:
                yield
            finally:
                entry.lock.release()
        finally:
            self._checkin(key, entry)


# Shared by every orchestrator in the process unless one is injected.
default_year_locks = YearLockRegistry()
