"""
Filter engine.
Narrows the base population by date range and categorical selections,
then re-runs the aggregation over the surviving records.
"""

from collections.abc import Iterable, Sequence

from ..config import AnalyticsSettings
from ..core.models import ClaimRecord, FilterResult, FilterSpec
from .aggregation import AggregationEngine


class FilterEngine:
    """
    Applies a complete FilterSpec to a fixed base population.

    Stateless: every call recomputes from the base records, so the result
    depends only on the arguments.
    """

    def __init__(
        self,
        settings: AnalyticsSettings | None = None,
        aggregation: AggregationEngine | None = None,
    ) -> None:
        self.settings = settings or AnalyticsSettings()
        self.aggregation = aggregation or AggregationEngine(self.settings)

    def matches(self, record: ClaimRecord, spec: FilterSpec) -> bool:
        """Check a single record against every clause of the spec."""
        if spec.has_date_bounds:
            record_date = record.parsed_claim_intimation_date
            if record_date is None:
                return False
            if spec.date_from is not None and record_date < spec.date_from:
                return False
            if spec.date_to is not None and record_date > spec.date_to:
                return False

        for dimension in spec.categories:
            allowed = spec.allowed(dimension)
            if allowed and record.category(dimension) not in allowed:
                return False
        return True

    def apply(self, records: Iterable[ClaimRecord], spec: FilterSpec) -> list[ClaimRecord]:
        """Return the matching records in their original order."""
        return [record for record in records if self.matches(record, spec)]

    def recompute(self, base: Sequence[ClaimRecord], spec: FilterSpec) -> FilterResult:
        """Filter the base population and aggregate the result from scratch."""
        filtered = self.apply(base, spec)
        result = self.aggregation.aggregate(filtered)
        return FilterResult(
            spec=spec,
            records=filtered,
            pivots=result.pivots,
            kpis=result.kpis,
        )

    def filter_options(
        self,
        records: Iterable[ClaimRecord],
        dimensions: Sequence[str] | None = None,
    ) -> dict[str, list[str]]:
        """
        Distinct values per filter dimension, sorted.

        Blank values appear as ``N/A`` and can be selected like any other value.
        """
        if dimensions is None:
            dimensions = self.settings.filter_dimensions
        values: dict[str, set[str]] = {dimension: set() for dimension in dimensions}
        for record in records:
            for dimension in dimensions:
                values[dimension].add(record.category(dimension))
        return {dimension: sorted(found) for dimension, found in values.items()}


def recompute(
    base: Sequence[ClaimRecord],
    spec: FilterSpec,
    settings: AnalyticsSettings | None = None,
) -> FilterResult:
    """Convenience wrapper: filter ``base`` by ``spec`` and re-aggregate."""
    return FilterEngine(settings).recompute(base, spec)
