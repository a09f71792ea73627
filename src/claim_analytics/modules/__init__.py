"""
Analysis modules for the Claim Analytics Engine.
"""

from .aggregation import AggregationEngine
from .filtering import FilterEngine, recompute
from .sorting import TableSorter
from .trends import TrendConsolidator

__all__ = [
    "AggregationEngine",
    "FilterEngine",
    "TableSorter",
    "TrendConsolidator",
    "recompute",
]
