"""
Settings for the Claim Analytics Engine.
"""

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PIVOT_DIMENSIONS: tuple[str, ...] = (
    "Region",
    "State",
    "Filed By",
    "Product",
    "Aging Days Bucketing",
    "Registered to Insurer",
    "TAT Group",
    "Customer Gender",
    "Construct Type",
)

DEFAULT_FILTER_DIMENSIONS: tuple[str, ...] = (
    "Region",
    "State",
    "Filed By",
    "Product",
    "Registered to Insurer",
    "Customer Gender",
)

DEFAULT_TREND_CATEGORIES: tuple[str, ...] = (
    "Registered to Insurer",
    "Aging Days Bucketing",
    "TAT Group",
    "Customer Gender",
    "Construct Type",
    "State",
    "Product",
)


class PivotDimension(BaseModel):
    """A categorical field pivoted into its own summary table."""

    model_config = ConfigDict(frozen=True)

    name: str
    extra_sums: tuple[str, ...] = ()  # additional numeric fields to roll up

    @property
    def extra_columns(self) -> list[str]:
        return [field.replace(" ", "_") for field in self.extra_sums]


# Day-first layouts are tried before month-first ones
DEFAULT_DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%d-%m-%Y %H:%M",
    "%d/%m/%Y %H:%M",
    "%d-%b-%Y",
    "%d-%b-%y",
    "%d %b %Y",
    "%d %B %Y",
    "%m/%d/%Y",
)


class AnalyticsSettings(BaseModel):
    """Field names, dimension lists and display options used by the engine."""

    # Source columns
    date_field: str = "Claim Intimation Date"
    claim_amount_field: str = "Claim Amount"
    settled_amount_field: str = "Settled Amount"
    tat_field: str = "TAT"
    registration_field: str = "Registered to Insurer"
    aging_days_field: str = "Aging Days"
    aging_bucket_field: str = "Aging Days Bucketing"
    tat_group_field: str = "TAT Group"
    date_formats: tuple[str, ...] = DEFAULT_DATE_FORMATS

    # Dimensions
    pivot_dimensions: list[PivotDimension] = Field(
        default_factory=lambda: [
            PivotDimension(name=name) for name in DEFAULT_PIVOT_DIMENSIONS
        ]
    )
    filter_dimensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FILTER_DIMENSIONS)
    )
    trend_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TREND_CATEGORIES)
    )

    # Trend consolidation
    top_n: int = Field(default=6, ge=1)
    other_label: str = "Other"

    # Display
    currency_symbol: str = "₹"
    digit_grouping: Literal["indian", "international"] = "indian"

    @property
    def pivot_dimension_names(self) -> list[str]:
        return [dimension.name for dimension in self.pivot_dimensions]

    @property
    def numeric_columns(self) -> list[str]:
        """Pivot columns compared numerically when sorting."""
        columns = ["Rows", "Claim_Amount", "Settled_Amount"]
        for dimension in self.pivot_dimensions:
            for column in dimension.extra_columns:
                if column not in columns:
                    columns.append(column)
        return columns

    @classmethod
    def from_json_file(cls, path: str | Path) -> "AnalyticsSettings":
        """Load settings from a JSON file; missing keys keep their defaults."""
        data: dict[str, Any] = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)
