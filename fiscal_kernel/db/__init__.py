"""Database layer - engine, base classes, and column types."""

from fiscal_kernel.db.base import UUID, Base, TrackedBase, UUIDString
from fiscal_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from fiscal_kernel.db.types import LongText, Money, ShortCode, round_money

__all__ = [
    "init_engine_from_url",
    "get_engine",
    "get_session",
    "get_session_factory",
    "session_scope",
    "create_tables",
    "drop_tables",
    "reset_engine",
    "Base",
    "TrackedBase",
    "UUIDString",
    "UUID",
    "Money",
    "ShortCode",
    "LongText",
    "round_money",
]
