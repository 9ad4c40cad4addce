"""
Typed Exception Hierarchy for the Fiscal Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Year close and carry-forward are multi-step operations; callers (the
orchestrators in ``fiscal_services``) must tell apart "the year is already
closed", "the store could not be read" and "the generated entry would not
balance" without parsing message strings.  Every error therefore has:

  1. a TYPED exception class (catch by type, not message)
  2. a CODE class attribute (machine-readable, returned in results)
  3. structured DATA attributes (ids, dates, amounts)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    FiscalKernelError (base)
    |
    +-- NotFoundError
    |   +-- FiscalYearNotFoundError
    |   +-- AccountNotFoundError
    |   +-- RetainedEarningsAccountNotFoundError
    |
    +-- FetchError                  (store read failure)
    +-- PersistError                (insert / update / delete failure)
    |
    +-- InvariantViolation
    |   +-- UnbalancedEntryError
    |
    +-- FiscalYearError
    |   +-- FiscalYearClosedError
    |   +-- FiscalYearAlreadyClosedError
    |   +-- FiscalYearOverlapError
    |   +-- FiscalYearImmutableError
    |   +-- FiscalYearNotEmptyError
    |   +-- InvalidFiscalYearRangeError
    |
    +-- ConcurrencyError
        +-- FiscalYearBusyError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                             | When Raised
-------------|----------------------------------|--------------------------------
Not found    | FISCAL_YEAR_NOT_FOUND            | Fiscal year id doesn't exist
             | ACCOUNT_NOT_FOUND                | Account id doesn't exist
             | RETAINED_EARNINGS_NOT_CONFIGURED | No retained-earnings account
-------------|----------------------------------|--------------------------------
Store        | FETCH_FAILED                     | Ledger/account read failed
             | PERSIST_FAILED                   | Write failed
-------------|----------------------------------|--------------------------------
Invariant    | UNBALANCED_ENTRY                 | Generated debits != credits
-------------|----------------------------------|--------------------------------
Fiscal year  | FISCAL_YEAR_CLOSED               | Operation needs an open year
             | FISCAL_YEAR_ALREADY_CLOSED       | Close on a closed year
             | FISCAL_YEAR_OVERLAP              | Date range conflicts
             | FISCAL_YEAR_IMMUTABLE            | Reopen / edit of a closed year
             | FISCAL_YEAR_NOT_EMPTY            | Delete with journal entries
             | INVALID_FISCAL_YEAR_RANGE        | end_date <= start_date
-------------|----------------------------------|--------------------------------
Concurrency  | FISCAL_YEAR_BUSY                 | Close/refresh already running

===============================================================================
"""


class FiscalKernelError(Exception):
    """
    Base exception for all fiscal kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "FISCAL_KERNEL_ERROR"


# Not-found exceptions


class NotFoundError(FiscalKernelError):
    """Base exception for missing records."""

    code: str = "NOT_FOUND"


class FiscalYearNotFoundError(NotFoundError):
    """Fiscal year with given ID was not found."""

    code: str = "FISCAL_YEAR_NOT_FOUND"

    def __init__(self, fiscal_year_id: str):
        self.fiscal_year_id = fiscal_year_id
        super().__init__(f"Fiscal year not found: {fiscal_year_id}")


class AccountNotFoundError(NotFoundError):
    """Account with given ID was not found."""

    code: str = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}")


class RetainedEarningsAccountNotFoundError(NotFoundError):
    """
    No retained-earnings account could be resolved for the company.

    Raised only when a closing or opening entry actually needs a
    retained-earnings line; a company without one can still close a year
    that has no income activity.
    """

    code: str = "RETAINED_EARNINGS_NOT_CONFIGURED"

    def __init__(self, company_id: str, code_prefix: str | None = None):
        self.company_id = company_id
        self.code_prefix = code_prefix
        hint = f" (no account code starts with '{code_prefix}')" if code_prefix else ""
        super().__init__(
            f"No retained earnings account configured for company {company_id}{hint}"
        )


# Store exceptions


class FetchError(FiscalKernelError):
    """
    Reading from the store failed.

    Callers must abort the containing operation rather than proceed with
    partial data.
    """

    code: str = "FETCH_FAILED"

    def __init__(self, what: str, reason: str):
        self.what = what
        self.reason = reason
        super().__init__(f"Failed to fetch {what}: {reason}")


class PersistError(FiscalKernelError):
    """Writing to the store failed."""

    code: str = "PERSIST_FAILED"

    def __init__(self, what: str, reason: str):
        self.what = what
        self.reason = reason
        super().__init__(f"Failed to persist {what}: {reason}")


# Invariant exceptions


class InvariantViolation(FiscalKernelError):
    """Base exception for broken bookkeeping invariants."""

    code: str = "INVARIANT_VIOLATION"


class UnbalancedEntryError(InvariantViolation):
    """Generated journal entry debits do not equal credits."""

    code: str = "UNBALANCED_ENTRY"

    def __init__(self, reference_type: str, debits: str, credits: str):
        self.reference_type = reference_type
        self.debits = debits
        self.credits = credits
        super().__init__(
            f"Unbalanced {reference_type} entry: debits={debits}, credits={credits}"
        )


# Fiscal-year exceptions


class FiscalYearError(FiscalKernelError):
    """Base exception for fiscal-year lifecycle errors."""

    code: str = "FISCAL_YEAR_ERROR"


class FiscalYearClosedError(FiscalYearError):
    """Operation requires an open fiscal year."""

    code: str = "FISCAL_YEAR_CLOSED"

    def __init__(self, fiscal_year_id: str, operation: str):
        self.fiscal_year_id = fiscal_year_id
        self.operation = operation
        super().__init__(
            f"Cannot {operation} fiscal year {fiscal_year_id}: year is closed"
        )


class FiscalYearAlreadyClosedError(FiscalYearError):
    """Fiscal year is already closed."""

    code: str = "FISCAL_YEAR_ALREADY_CLOSED"

    def __init__(self, fiscal_year_id: str):
        self.fiscal_year_id = fiscal_year_id
        super().__init__(f"Fiscal year {fiscal_year_id} is already closed")


class FiscalYearOverlapError(FiscalYearError):
    """New fiscal year date range overlaps an existing year of the company."""

    code: str = "FISCAL_YEAR_OVERLAP"

    def __init__(
        self,
        new_name: str,
        existing_name: str,
        overlap_start: str,
        overlap_end: str,
    ):
        self.new_name = new_name
        self.existing_name = existing_name
        self.overlap_start = overlap_start
        self.overlap_end = overlap_end
        super().__init__(
            f"Fiscal year {new_name} overlaps with {existing_name} "
            f"({overlap_start} to {overlap_end})"
        )


class FiscalYearImmutableError(FiscalYearError):
    """Attempted to modify or reopen a closed fiscal year."""

    code: str = "FISCAL_YEAR_IMMUTABLE"

    def __init__(self, fiscal_year_id: str, operation: str):
        self.fiscal_year_id = fiscal_year_id
        self.operation = operation
        super().__init__(
            f"Cannot {operation} closed fiscal year {fiscal_year_id}"
        )


class FiscalYearNotEmptyError(FiscalYearError):
    """Fiscal year still has journal entries and cannot be deleted."""

    code: str = "FISCAL_YEAR_NOT_EMPTY"

    def __init__(self, fiscal_year_id: str, entry_count: int):
        self.fiscal_year_id = fiscal_year_id
        self.entry_count = entry_count
        super().__init__(
            f"Fiscal year {fiscal_year_id} has {entry_count} journal "
            "entries and cannot be deleted"
        )


class InvalidFiscalYearRangeError(FiscalYearError):
    """end_date must be after start_date."""

    code: str = "INVALID_FISCAL_YEAR_RANGE"

    def __init__(self, start_date: str, end_date: str):
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"end_date ({end_date}) must be after start_date ({start_date})"
        )


# Concurrency exceptions


class ConcurrencyError(FiscalKernelError):
    """Base exception for concurrency conflicts."""

    code: str = "CONCURRENCY_ERROR"


class FiscalYearBusyError(ConcurrencyError):
    """
    Another close or refresh already holds the fiscal year.

    The caller may retry once the running operation finishes.
    """

    code: str = "FISCAL_YEAR_BUSY"

    def __init__(self, company_id: str, fiscal_year_id: str):
        self.company_id = company_id
        self.fiscal_year_id = fiscal_year_id
        super().__init__(
            f"Fiscal year {fiscal_year_id} of company {company_id} is locked "
            "by another close or refresh"
        )
