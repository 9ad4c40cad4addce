"""
Config -> Kernel bridges.

Turns the ``database`` section of a LedgerConfig into an initialized kernel
engine.  This lives in fiscal_config because the kernel never imports
fiscal_config.

Usage:
    from fiscal_config import get_active_config
    from fiscal_config.bridges import init_engine_from_config

    engine = init_engine_from_config(get_active_config())
"""

from __future__ import annotations

from sqlalchemy.engine import Engine

from fiscal_config.schema import LedgerConfig
from fiscal_kernel.db.engine import init_engine_from_url


def init_engine_from_config(
    config: LedgerConfig,
    database_url: str | None = None,
) -> Engine:
    """Initialize the kernel engine from ``config.database``.

    Args:
        config: Active ledger configuration.
        database_url: Overrides ``config.database.url`` when given
            (e.g. a DATABASE_URL taken from the environment).

    Returns:
        The engine now held by ``fiscal_kernel.db.engine``.
    """
    database = config.database
    return init_engine_from_url(
        database_url or database.url,
        echo=database.echo,
        pool_size=database.pool_size,
    )
