"""
Fiscal Kernel

Fiscal-year lifecycle and closing-entry engine for a multi-company,
append-only double-entry ledger:
- Balance aggregation over posted journal lines
- Balanced closing and opening (carry-forward) entries
- Atomic, serialized year close / open / refresh
- Decimal money throughout
"""

__version__ = "0.1.0"
