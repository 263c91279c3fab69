"""
History Ledger for panelscore.

Append-only per-subject evaluation history:
- HistoryLedger: JSON document per subject with sequential evaluation numbers
- compute_history_statistics: per-dimension statistics over a history
- convergence_statistics / token_statistics: convergence and cost across evaluations
"""

from .types import EvaluationSnapshot, HistoryEntry, TokenSnapshot
from .ledger import HistoryLedger, get_history_ledger, reset_history_ledger
from .statistics import (
    DimensionStatistics,
    TokenStatistics,
    compute_history_statistics,
    convergence_statistics,
    dimension_statistics,
    fill_missing_dimensions,
    token_statistics,
    trend_direction,
)

__all__ = [
    # Types
    "EvaluationSnapshot",
    "HistoryEntry",
    "TokenSnapshot",
    # Ledger
    "HistoryLedger",
    "get_history_ledger",
    "reset_history_ledger",
    # Statistics
    "DimensionStatistics",
    "TokenStatistics",
    "compute_history_statistics",
    "convergence_statistics",
    "dimension_statistics",
    "fill_missing_dimensions",
    "token_statistics",
    "trend_direction",
]
