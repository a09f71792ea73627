"""
Core components for the Claim Analytics Engine.
"""

from .classifier import BucketRule, Classifier
from .exceptions import (
    ClaimAnalyticsError,
    EmptyBatchError,
    FileDecodeError,
    UnknownDimensionError,
    UnsupportedFileTypeError,
)
from .models import (
    MISSING_VALUE,
    TOTAL_MARKER,
    AggregationResult,
    AnalysisResult,
    ClaimRecord,
    FilterResult,
    FilterSpec,
    KPIData,
    PivotDict,
    PivotRow,
    PivotTable,
    ProcessedData,
    SortDirection,
    SortState,
    TrendMetric,
    TrendPoint,
    TrendSeries,
)
from .normalizer import RecordNormalizer

__all__ = [
    # Models
    "MISSING_VALUE",
    "TOTAL_MARKER",
    "AggregationResult",
    "AnalysisResult",
    "ClaimRecord",
    "FilterResult",
    "FilterSpec",
    "KPIData",
    "PivotDict",
    "PivotRow",
    "PivotTable",
    "ProcessedData",
    "SortDirection",
    "SortState",
    "TrendMetric",
    "TrendPoint",
    "TrendSeries",
    # Exceptions
    "ClaimAnalyticsError",
    "EmptyBatchError",
    "FileDecodeError",
    "UnknownDimensionError",
    "UnsupportedFileTypeError",
    # Normalization and classification
    "BucketRule",
    "Classifier",
    "RecordNormalizer",
]
