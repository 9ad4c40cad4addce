"""
Configuration Loader (``fiscal_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the frozen
``fiscal_config.schema`` dataclasses.  Runtime callers use
``fiscal_config.get_active_config()`` instead of this module.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid values (negative precision, empty status list, non-mapping
  sections)  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from fiscal_config.schema import (
    DatabaseConfig,
    DescriptionsConfig,
    InventoryConfig,
    LedgerConfig,
    MoneyConfig,
    RetainedEarningsConfig,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration root must be a mapping: {path}")
    return data


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Configuration section '{name}' must be a mapping")
    return value


def parse_money(data: dict[str, Any]) -> MoneyConfig:
    decimal_places = int(data.get("decimal_places", MoneyConfig.decimal_places))
    if decimal_places < 0:
        raise ValueError(f"money.decimal_places must be >= 0, got {decimal_places}")
    return MoneyConfig(decimal_places=decimal_places)


def parse_retained_earnings(data: dict[str, Any]) -> RetainedEarningsConfig:
    if "code_prefix" not in data:
        return RetainedEarningsConfig()
    prefix = data["code_prefix"]
    return RetainedEarningsConfig(code_prefix=str(prefix) if prefix else None)


def parse_inventory(data: dict[str, Any]) -> InventoryConfig:
    statuses = data.get("carry_forward_statuses", list(InventoryConfig.carry_forward_statuses))
    if isinstance(statuses, str):
        statuses = [statuses]
    if not statuses:
        raise ValueError("inventory.carry_forward_statuses must not be empty")
    return InventoryConfig(carry_forward_statuses=tuple(str(s) for s in statuses))


def parse_descriptions(data: dict[str, Any]) -> DescriptionsConfig:
    defaults = DescriptionsConfig()
    return DescriptionsConfig(
        **{
            name: str(data.get(name, getattr(defaults, name)))
            for name in DescriptionsConfig.__dataclass_fields__
        }
    )


def parse_database(data: dict[str, Any]) -> DatabaseConfig:
    return DatabaseConfig(
        url=str(data.get("url", DatabaseConfig.url)),
        echo=bool(data.get("echo", DatabaseConfig.echo)),
        pool_size=int(data.get("pool_size", DatabaseConfig.pool_size)),
    )


def parse_config(data: dict[str, Any], source_path: str | None = None) -> LedgerConfig:
    """Parse a full ``LedgerConfig`` from a loaded YAML dict."""
    return LedgerConfig(
        config_id=str(data.get("config_id", "default")),
        version=int(data.get("version", 1)),
        money=parse_money(_section(data, "money")),
        retained_earnings=parse_retained_earnings(_section(data, "retained_earnings")),
        inventory=parse_inventory(_section(data, "inventory")),
        descriptions=parse_descriptions(_section(data, "descriptions")),
        database=parse_database(_section(data, "database")),
        checksum=compute_checksum(data),
        source_path=source_path,
    )


def load_config(path: Path) -> LedgerConfig:
    """Load and parse one configuration file."""
    return parse_config(load_yaml_file(path), source_path=str(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
