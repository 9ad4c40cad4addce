"""
Configuration schema (``fiscal_config.schema``).

Frozen dataclasses describing one loaded ledger configuration.  Every
field has the default of ``sets/default.yaml`` so a partial YAML file only
overrides what it names.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MoneyConfig:
    decimal_places: int = 2


@dataclass(frozen=True)
class RetainedEarningsConfig:
    # None disables the code-prefix fallback
    code_prefix: str | None = "33"


@dataclass(frozen=True)
class InventoryConfig:
    carry_forward_statuses: tuple[str, ...] = ("available",)


@dataclass(frozen=True)
class DescriptionsConfig:
    closing_entry: str = "Closing entry for fiscal year {fiscal_year_name}"
    opening_entry: str = "Opening balances for fiscal year {fiscal_year_name}"
    closing_line: str = "Closing {account_name}"
    net_profit: str = "Net profit for the year"
    net_loss: str = "Net loss for the year"
    opening_line: str = "Opening balance {account_name}"


@dataclass(frozen=True)
class DatabaseConfig:
    url: str = "sqlite://"
    echo: bool = False
    pool_size: int = 20


@dataclass(frozen=True)
class LedgerConfig:
    """
    The active configuration.

    Contract:
        Immutable.  checksum identifies the YAML content it was built from.
    """

    config_id: str = "default"
    version: int = 1
    money: MoneyConfig = field(default_factory=MoneyConfig)
    retained_earnings: RetainedEarningsConfig = field(default_factory=RetainedEarningsConfig)
    inventory: InventoryConfig = field(default_factory=InventoryConfig)
    descriptions: DescriptionsConfig = field(default_factory=DescriptionsConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    checksum: str = ""
    source_path: str | None = None
