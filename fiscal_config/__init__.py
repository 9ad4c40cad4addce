"""
fiscal_config -- single public entrypoint for ledger configuration.

Responsibility:
    ``get_active_config()`` is the only way services obtain configuration.
    It loads a YAML set with PyYAML and returns a frozen ``LedgerConfig``.

Resolution order:
    1. the ``config_path`` argument;
    2. the ``FISCAL_CONFIG_PATH`` environment variable;
    3. ``fiscal_config/sets/default.yaml``.

Audit relevance:
    Every call emits a ``FISCAL_CONFIG_TRACE`` log entry with the config id,
    version, checksum and source path.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from fiscal_config.loader import compute_checksum, load_config, parse_config
from fiscal_config.schema import (
    DatabaseConfig,
    DescriptionsConfig,
    InventoryConfig,
    LedgerConfig,
    MoneyConfig,
    RetainedEarningsConfig,
)

_logger = logging.getLogger("fiscal_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

CONFIG_PATH_ENV = "FISCAL_CONFIG_PATH"


def get_active_config(config_path: Path | str | None = None) -> LedgerConfig:
    """The public configuration entrypoint.

    Args:
        config_path: Explicit YAML file; overrides the environment.

    Returns:
        Frozen LedgerConfig.

    Raises:
        FileNotFoundError: If the resolved file does not exist.
        ValueError: If the file contains invalid values.
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_PATH_ENV) or _DEFAULT_CONFIG_PATH
    config = load_config(Path(config_path))

    _logger.info(
        "FISCAL_CONFIG_TRACE",
        extra={
            "trace_type": "FISCAL_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "source_path": config.source_path,
        },
    )
    return config


__all__ = [
    "get_active_config",
    "load_config",
    "parse_config",
    "compute_checksum",
    "CONFIG_PATH_ENV",
    "LedgerConfig",
    "MoneyConfig",
    "RetainedEarningsConfig",
    "InventoryConfig",
    "DescriptionsConfig",
    "DatabaseConfig",
]
