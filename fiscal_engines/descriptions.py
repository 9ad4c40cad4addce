"""
fiscal_engines.descriptions -- Line description templates for generated entries.

Templates use ``str.format`` fields: ``{account_name}``, ``{account_code}``
and ``{fiscal_year_name}``.  The defaults mirror fiscal_config's default set.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LineDescriptions:
    closing_line: str = "Closing {account_name}"
    net_profit: str = "Net profit for the year"
    net_loss: str = "Net loss for the year"
    opening_line: str = "Opening balance {account_name}"


DEFAULT_LINE_DESCRIPTIONS = LineDescriptions()
