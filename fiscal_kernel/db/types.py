"""
Module: fiscal_kernel.db.types
Responsibility: Annotated column type aliases and the single sanctioned
    rounding helper for monetary values.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/, selectors/ and fiscal_engines.

Invariants enforced:
    - No floats: all amounts are Decimal with explicit precision.
    - round_money() is the only rounding function used when journal lines
      are built.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated

from sqlalchemy import Numeric, String


# 38 digits total, 9 decimal places
Money = Annotated[Decimal, Numeric(38, 9)]

# Account codes, statuses, reference types
ShortCode = Annotated[str, String(50)]

# Names and descriptions
LongText = Annotated[str, String(4000)]


MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO = Decimal("0")


def money_from_str(value: str) -> Decimal:
    """Create a money value from its string form (not rounded)."""
    return Decimal(value)


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to the given number of decimal places.

    Args:
        value: The Decimal value to round.
        decimal_places: Number of decimal places to round to.
        rounding: Rounding mode (default: ROUND_HALF_UP).

    Returns:
        Rounded Decimal value.
    """
    quantum = Decimal(1).scaleb(-decimal_places)
    return value.quantize(quantum, rounding=rounding)
