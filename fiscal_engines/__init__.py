"""
Module: fiscal_engines
Responsibility:
    Package entrypoint re-exporting the pure calculation engines used by
    the year close and carry-forward orchestrators.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May import fiscal_kernel.domain, fiscal_kernel.db.types and
    fiscal_kernel.exceptions.  MUST NOT import fiscal_services.

Invariants enforced:
    - Purity: engines never read the clock or the database.
    - Decimal-only arithmetic.
    - Determinism: identical inputs always produce identical drafts.

Usage:
    from fiscal_engines import aggregate_balances, build_closing_entry
"""

from fiscal_engines.balances import (
    IncomeSummary,
    aggregate_balances,
    balance_of,
    calculate_net_income,
)
from fiscal_engines.closing import build_closing_entry
from fiscal_engines.descriptions import DEFAULT_LINE_DESCRIPTIONS, LineDescriptions
from fiscal_engines.opening import build_opening_entry
from fiscal_engines.tracer import traced_engine

__all__ = [
    "aggregate_balances",
    "balance_of",
    "calculate_net_income",
    "IncomeSummary",
    "build_closing_entry",
    "build_opening_entry",
    "LineDescriptions",
    "DEFAULT_LINE_DESCRIPTIONS",
    "traced_engine",
]
