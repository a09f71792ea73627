"""
Claim Analytics Engine - Main Orchestrator.
Coordinates normalization, classification, aggregation, filtering,
trend consolidation and table sorting for one uploaded batch.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .config import AnalyticsSettings
from .core.classifier import Classifier
from .core.exceptions import EmptyBatchError, UnknownDimensionError
from .core.models import (
    AnalysisResult,
    ClaimRecord,
    FilterResult,
    FilterSpec,
    PivotTable,
    SortDirection,
    TrendMetric,
    TrendSeries,
)
from .core.normalizer import RecordNormalizer
from .modules.aggregation import AggregationEngine
from .modules.filtering import FilterEngine
from .modules.sorting import TableSorter
from .modules.trends import TrendConsolidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecomputeTicket:
    """Handle for one requested filter recomputation."""

    generation: int
    spec: FilterSpec


class ClaimAnalyticsEngine:
    """
    Main orchestrator for the Claim Analytics Engine.

    Holds the loaded batch and the latest filtered view. All computation
    is delegated to the stateless components, so any result can be
    reproduced from the base population and a FilterSpec.
    """

    def __init__(self, settings: AnalyticsSettings | None = None) -> None:
        """
        Initialize the Claim Analytics Engine.

        Args:
            settings: Field names, dimensions and display options
        """
        self.settings = settings or AnalyticsSettings()

        # Initialize components lazily
        self._normalizer: RecordNormalizer | None = None
        self._classifier: Classifier | None = None
        self._aggregation: AggregationEngine | None = None
        self._filter_engine: FilterEngine | None = None
        self._trends: TrendConsolidator | None = None
        self._sorter: TableSorter | None = None

        self._analysis: AnalysisResult | None = None
        self._current: FilterResult | None = None
        self._generation: int = 0

    @property
    def normalizer(self) -> RecordNormalizer:
        """Get or create the record normalizer."""
        if self._normalizer is None:
            self._normalizer = RecordNormalizer(self.settings)
        return self._normalizer

    @property
    def classifier(self) -> Classifier:
        """Get or create the classifier."""
        if self._classifier is None:
            self._classifier = Classifier(self.settings)
        return self._classifier

    @property
    def aggregation(self) -> AggregationEngine:
        """Get or create the aggregation engine."""
        if self._aggregation is None:
            self._aggregation = AggregationEngine(self.settings)
        return self._aggregation

    @property
    def filter_engine(self) -> FilterEngine:
        """Get or create the filter engine."""
        if self._filter_engine is None:
            self._filter_engine = FilterEngine(self.settings, self.aggregation)
        return self._filter_engine

    @property
    def trend_consolidator(self) -> TrendConsolidator:
        """Get or create the trend consolidator."""
        if self._trends is None:
            self._trends = TrendConsolidator(self.settings)
        return self._trends

    @property
    def sorter(self) -> TableSorter:
        """Get or create the table sorter."""
        if self._sorter is None:
            self._sorter = TableSorter(self.settings)
        return self._sorter

    @property
    def analysis(self) -> AnalysisResult | None:
        """Result of the last successful load."""
        return self._analysis

    @property
    def current(self) -> FilterResult | None:
        """The latest committed filtered view."""
        return self._current

    @property
    def base(self) -> list[ClaimRecord]:
        return self._analysis.base if self._analysis is not None else []

    def load(self, rows: Sequence[Mapping[Any, Any]] | None) -> AnalysisResult:
        """
        Ingest a decoded batch and compute the unfiltered view.

        Args:
            rows: Raw rows from the file decoder

        Returns:
            Buckets, pivots, KPIs and filter options for the batch

        Raises:
            EmptyBatchError: If no rows were supplied
        """
        if not rows:
            raise EmptyBatchError()

        records = self.normalizer.normalize_all(rows)
        processed = self.classifier.classify(records)
        base = processed.registered
        aggregated = self.aggregation.aggregate(base)

        self._analysis = AnalysisResult(
            processed=processed,
            pivots=aggregated.pivots,
            kpis=aggregated.kpis,
            filter_options=self.filter_engine.filter_options(base),
        )
        self._generation += 1
        self._current = FilterResult(
            spec=FilterSpec(),
            records=base,
            pivots=aggregated.pivots,
            kpis=aggregated.kpis,
        )

        logger.info(
            "Loaded %d rows: %s",
            len(records),
            {name: len(members) for name, members in processed.buckets.items()},
        )
        return self._analysis

    def submit_filters(self, spec: FilterSpec) -> RecomputeTicket:
        """
        Register a new filter request, superseding any pending one.

        The returned ticket is passed to ``recompute`` and ``commit``; only
        the most recently issued ticket can be committed.
        """
        self._generation += 1
        return RecomputeTicket(generation=self._generation, spec=spec)

    def recompute(self, ticket: RecomputeTicket) -> FilterResult:
        """Compute the filtered view for a ticket without installing it."""
        return self.filter_engine.recompute(self.base, ticket.spec)

    def commit(self, ticket: RecomputeTicket, result: FilterResult) -> bool:
        """
        Install a recomputed view if its ticket is still the latest.

        Returns:
            False when a newer request was submitted in the meantime
        """
        if ticket.generation != self._generation:
            logger.debug(
                "Discarding superseded recompute %d (latest %d)",
                ticket.generation,
                self._generation,
            )
            return False
        self._current = result
        return True

    def apply_filters(self, spec: FilterSpec) -> FilterResult:
        """Synchronously filter the base population and re-aggregate."""
        ticket = self.submit_filters(spec)
        result = self.recompute(ticket)
        self.commit(ticket, result)
        return result

    def trends(
        self,
        metric: TrendMetric | str = TrendMetric.COUNT,
        categories: Sequence[str] | None = None,
    ) -> dict[str, TrendSeries]:
        """Trend series over the current filtered view."""
        records = self._current.records if self._current is not None else self.base
        return self.trend_consolidator.consolidate_all(records, metric, categories)

    def sorted_pivot(
        self,
        dimension: str,
        column: str | None,
        direction: SortDirection | str = SortDirection.DESC,
    ) -> PivotTable:
        """
        Sort one pivot table of the current view.

        Raises:
            UnknownDimensionError: If the view has no table for ``dimension``
        """
        pivots = self._current.pivots if self._current is not None else {}
        if dimension not in pivots:
            raise UnknownDimensionError(
                message=f"Unknown pivot dimension: {dimension}",
                details={"dimension": dimension, "dimensions": list(pivots)},
            )
        return self.sorter.sort(pivots[dimension], column, direction)

    def configure(
        self,
        settings: AnalyticsSettings | None = None,
        **overrides: Any,
    ) -> "ClaimAnalyticsEngine":
        """
        Configure the engine settings.

        Args:
            settings: Replacement settings object
            **overrides: Individual settings fields to change

        Returns:
            Self for method chaining
        """
        base = settings or self.settings
        self.settings = base.model_copy(update=overrides) if overrides else base

        # Components are rebuilt with the new settings on next use
        self._normalizer = None
        self._classifier = None
        self._aggregation = None
        self._filter_engine = None
        self._trends = None
        self._sorter = None
        return self


# Convenience function for one-shot analysis
def analyze_claims(
    rows: Sequence[Mapping[Any, Any]] | None,
    settings: AnalyticsSettings | None = None,
) -> AnalysisResult:
    """
    Convenience function to load a batch and return its analysis.

    Args:
        rows: Raw decoded rows
        settings: Optional engine settings

    Returns:
        Buckets, pivots, KPIs and filter options for the batch
    """
    engine = ClaimAnalyticsEngine(settings)
    return engine.load(rows)
