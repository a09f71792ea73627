"""
Claims Analytics Engine.

Turns a batch of insurance-claim records into pivot tables, KPIs and
month-over-month trends that can be recomputed as filters change.
"""

from .config import AnalyticsSettings, PivotDimension
from .core.exceptions import ClaimAnalyticsError, EmptyBatchError
from .core.models import (
    AnalysisResult,
    ClaimRecord,
    FilterResult,
    FilterSpec,
    KPIData,
    ProcessedData,
    SortDirection,
    SortState,
    TrendMetric,
    TrendSeries,
)
from .engine import ClaimAnalyticsEngine, RecomputeTicket, analyze_claims
from .reporting.summary import SummaryFormatter
from .utils.file_loader import load_rows

__version__ = "0.1.0"

__all__ = [
    # Main Engine
    "ClaimAnalyticsEngine",
    "RecomputeTicket",
    "analyze_claims",
    # Settings
    "AnalyticsSettings",
    # Models
    "AnalysisResult",
    "ClaimRecord",
    "FilterResult",
    "FilterSpec",
    "KPIData",
    "PivotDimension",
    "ProcessedData",
    "SortDirection",
    "SortState",
    "TrendMetric",
    "TrendSeries",
    # Errors
    "ClaimAnalyticsError",
    "EmptyBatchError",
    # Reporting
    "SummaryFormatter",
    # Utils
    "load_rows",
]
