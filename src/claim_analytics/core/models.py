"""
Core data models for the Claim Analytics Engine.
Uses Pydantic for validation and serialization.
"""

import math
from datetime import date
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MISSING_VALUE = "N/A"
TOTAL_MARKER = "TOTAL"

REGISTERED_BUCKET = "registered"
UNREGISTERED_BUCKET = "unregistered"

# Pivot tables are plain rows so they can be handed to any table widget
PivotValue = Union[str, int, float]
PivotRow = dict[str, PivotValue]
PivotTable = list[PivotRow]
PivotDict = dict[str, PivotTable]


def is_blank(value: Any) -> bool:
    """True for None, NaN and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def category_label(value: Any) -> str:
    """Stringify a raw categorical value, resolving blanks to ``N/A``."""
    if is_blank(value):
        return MISSING_VALUE
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_total_row(row: PivotRow) -> bool:
    """A row is the TOTAL row when its first column holds the TOTAL marker."""
    if not row:
        return False
    return next(iter(row.values())) == TOTAL_MARKER


class TrendMetric(str, Enum):
    """Metric plotted by the trend consolidator."""

    COUNT = "count"
    CLAIM = "claim"
    SETTLED = "settled"


class SortDirection(str, Enum):
    """Direction of a pivot table sort."""

    ASC = "asc"
    DESC = "desc"
    NONE = "none"


class ClaimRecord(BaseModel):
    """One normalized insurance claim."""

    model_config = ConfigDict(frozen=True)

    raw: dict[str, Any] = Field(default_factory=dict)
    parsed_claim_intimation_date: date | None = None
    claim_amount: float = 0.0
    settled_amount: float = 0.0
    tat: float | None = None  # None when the raw TAT is not a number

    def get(self, field: str, default: Any = None) -> Any:
        """Return the raw value of a field."""
        return self.raw.get(field, default)

    def category(self, field: str) -> str:
        """Return the grouping value of a categorical field."""
        return category_label(self.raw.get(field))

    def metric_value(self, metric: TrendMetric) -> float:
        """Return this record's contribution to a trend metric."""
        if metric == TrendMetric.CLAIM:
            return self.claim_amount
        if metric == TrendMetric.SETTLED:
            return self.settled_amount
        return 1


class ProcessedData(BaseModel):
    """Records partitioned into named buckets, each in input order."""

    buckets: dict[str, list[ClaimRecord]] = Field(default_factory=dict)

    def __getitem__(self, bucket: str) -> list[ClaimRecord]:
        return self.buckets.get(bucket, [])

    @property
    def registered(self) -> list[ClaimRecord]:
        return self[REGISTERED_BUCKET]

    @property
    def unregistered(self) -> list[ClaimRecord]:
        return self[UNREGISTERED_BUCKET]

    @property
    def total_records(self) -> int:
        return sum(len(records) for records in self.buckets.values())


class KPIData(BaseModel):
    """Headline metrics with raw values and their display strings."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_rows: str = "0"
    sum_claim: str = "0"
    sum_settled: str = "0"
    avg_tat: str = "0.0"
    total_rows_raw: int = 0
    sum_claim_raw: float = 0.0
    sum_settled_raw: float = 0.0
    avg_tat_raw: float = 0.0


class FilterSpec(BaseModel):
    """
    Complete filter state.

    Date bounds are inclusive; an empty allowed-value set places no
    restriction on its dimension.
    """

    model_config = ConfigDict(frozen=True)

    date_from: date | None = None
    date_to: date | None = None
    categories: dict[str, frozenset[str]] = Field(default_factory=dict)

    def allowed(self, dimension: str) -> frozenset[str]:
        """Get the allowed values for a dimension (empty means any)."""
        return self.categories.get(dimension, frozenset())

    @property
    def has_date_bounds(self) -> bool:
        return self.date_from is not None or self.date_to is not None

    @property
    def is_unrestricted(self) -> bool:
        return not self.has_date_bounds and not any(self.categories.values())


class AggregationResult(BaseModel):
    """Pivot tables and KPIs computed for one population."""

    pivots: PivotDict = Field(default_factory=dict)
    kpis: KPIData = Field(default_factory=KPIData)


class FilterResult(BaseModel):
    """A filtered population with its recomputed aggregates."""

    spec: FilterSpec
    records: list[ClaimRecord] = Field(default_factory=list)
    pivots: PivotDict = Field(default_factory=dict)
    kpis: KPIData = Field(default_factory=KPIData)


class TrendPoint(BaseModel):
    """Metric totals for a single month."""

    month: str  # display label, e.g. "Jan 2024"
    period: date  # first day of the month
    values: dict[str, float] = Field(default_factory=dict)


class TrendSeries(BaseModel):
    """Month-over-month series for one breakdown category."""

    category: str
    metric: TrendMetric
    points: list[TrendPoint] = Field(default_factory=list)
    keys: list[str] = Field(default_factory=list)

    def to_rows(self) -> list[dict[str, Any]]:
        """Flatten into chart rows keyed by ``month`` plus one column per value."""
        return [{"month": point.month, **point.values} for point in self.points]


class SortState(BaseModel):
    """Current sort column and direction of a displayed pivot table."""

    model_config = ConfigDict(frozen=True)

    column: str | None = None
    direction: SortDirection = SortDirection.NONE

    def toggle(self, column: str) -> "SortState":
        """Return the state after a click on ``column``."""
        if column == self.column and self.direction != SortDirection.NONE:
            flipped = (
                SortDirection.DESC
                if self.direction == SortDirection.ASC
                else SortDirection.ASC
            )
            return SortState(column=column, direction=flipped)
        return SortState(column=column, direction=SortDirection.DESC)


class AnalysisResult(BaseModel):
    """Everything computed when a batch is loaded."""

    processed: ProcessedData
    pivots: PivotDict = Field(default_factory=dict)
    kpis: KPIData = Field(default_factory=KPIData)
    filter_options: dict[str, list[str]] = Field(default_factory=dict)

    @property
    def base(self) -> list[ClaimRecord]:
        """The population every aggregate is computed over."""
        return self.processed.registered
