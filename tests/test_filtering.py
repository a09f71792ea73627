"""
Tests for the filter engine.
"""

from datetime import date

import pytest

from claim_analytics.core.models import FilterSpec
from claim_analytics.core.normalizer import RecordNormalizer
from claim_analytics.modules.filtering import FilterEngine, recompute


@pytest.fixture
def engine() -> FilterEngine:
    return FilterEngine()


@pytest.fixture
def base():
    """Registered claims across two regions and three months."""
    return RecordNormalizer().normalize_all(
        [
            {"id": "1", "Region": "North", "Product": "Motor", "Claim Intimation Date": "2024-01-10", "Claim Amount": "1,000"},
            {"id": "2", "Region": "South", "Product": "Health", "Claim Amount": "500"},
            {"id": "3", "Region": "South", "Product": "Motor", "Claim Intimation Date": "2024-02-01", "Claim Amount": "250"},
            {"id": "4", "Region": "", "Product": "Fire", "Claim Intimation Date": "2024-02-29", "Claim Amount": "100"},
            {"id": "5", "Region": "North", "Product": "Health", "Claim Intimation Date": "2024-03-15", "Claim Amount": "75"},
            {"id": "6", "Region": "East", "Zone": 5.0, "Claim Intimation Date": "garbage"},
        ]
    )


def ids(records) -> list[str]:
    return [record.get("id") for record in records]


class TestMatching:
    """Tests for individual filter clauses."""

    def test_unrestricted_keeps_everything(self, engine: FilterEngine, base) -> None:
        """Test the empty filter keeps undated records too."""
        assert ids(engine.apply(base, FilterSpec())) == ["1", "2", "3", "4", "5", "6"]

    def test_date_bound_excludes_undated(self, engine: FilterEngine, base) -> None:
        """Test records without a parsed date fail any date bound."""
        result = engine.apply(base, FilterSpec(date_from=date(2024, 1, 1)))
        assert ids(result) == ["1", "3", "4", "5"]

    def test_bounds_are_inclusive(self, engine: FilterEngine, base) -> None:
        """Test records on either bound are kept."""
        spec = FilterSpec(date_from=date(2024, 2, 1), date_to=date(2024, 2, 29))
        assert ids(engine.apply(base, spec)) == ["3", "4"]

    def test_upper_bound_only(self, engine: FilterEngine, base) -> None:
        spec = FilterSpec(date_to=date(2024, 1, 31))
        assert ids(engine.apply(base, spec)) == ["1"]

    def test_category_selection(self, engine: FilterEngine, base) -> None:
        """Test allowed-value sets per dimension."""
        spec = FilterSpec(categories={"Region": {"North"}})
        assert ids(engine.apply(base, spec)) == ["1", "5"]

    def test_dimensions_combine_with_and(self, engine: FilterEngine, base) -> None:
        """Test every dimension clause must match."""
        spec = FilterSpec(categories={"Region": {"North", "South"}, "Product": {"Motor"}})
        assert ids(engine.apply(base, spec)) == ["1", "3"]

    def test_empty_selection_is_no_restriction(self, engine: FilterEngine, base) -> None:
        spec = FilterSpec(categories={"Region": set()})
        assert len(engine.apply(base, spec)) == len(base)

    def test_na_is_selectable(self, engine: FilterEngine, base) -> None:
        """Test blank values are matched by selecting N/A."""
        spec = FilterSpec(categories={"Region": {"N/A"}})
        assert ids(engine.apply(base, spec)) == ["4"]

    def test_numeric_values_compared_as_text(self, engine: FilterEngine, base) -> None:
        """Test spreadsheet numbers match their stringified form."""
        spec = FilterSpec(categories={"Zone": {"5"}})
        assert ids(engine.apply(base, spec)) == ["6"]

    def test_adding_restrictions_never_grows(self, engine: FilterEngine, base) -> None:
        """Test tightening a filter can only shrink the result."""
        loose = FilterSpec(categories={"Region": {"North", "South"}})
        tight = FilterSpec(
            date_from=date(2024, 1, 1), categories={"Region": {"North", "South"}}
        )
        tighter = FilterSpec(
            date_from=date(2024, 1, 1), categories={"Region": {"North"}}
        )
        sizes = [len(engine.apply(base, spec)) for spec in (FilterSpec(), loose, tight, tighter)]
        assert sizes == sorted(sizes, reverse=True)


class TestRecompute:
    """Tests for filtered re-aggregation."""

    def test_aggregates_filtered_subset(self, engine: FilterEngine, base) -> None:
        """Test pivots and KPIs reflect only surviving records."""
        spec = FilterSpec(categories={"Region": {"South"}})
        result = engine.recompute(base, spec)

        assert result.spec == spec
        assert ids(result.records) == ["2", "3"]
        assert result.kpis.total_rows == "2"
        assert result.kpis.sum_claim == "₹750"
        assert result.pivots["Region"][-1]["Rows"] == 2

    def test_empty_result(self, engine: FilterEngine, base) -> None:
        """Test a filter matching nothing gives empty tables and zero KPIs."""
        result = engine.recompute(base, FilterSpec(categories={"Region": {"Nowhere"}}))
        assert result.records == []
        assert all(table == [] for table in result.pivots.values())
        assert result.kpis.sum_claim == "₹0"

    def test_does_not_modify_base(self, engine: FilterEngine, base) -> None:
        before = list(base)
        engine.recompute(base, FilterSpec(categories={"Region": {"North"}}))
        assert base == before

    def test_module_level_recompute(self, base) -> None:
        """Test the convenience wrapper matches the engine."""
        spec = FilterSpec(date_from=date(2024, 2, 1))
        assert recompute(base, spec) == FilterEngine().recompute(base, spec)


class TestFilterOptions:
    """Tests for distinct filter values."""

    def test_sorted_distinct_values(self, engine: FilterEngine, base) -> None:
        options = engine.filter_options(base, ["Region", "Product"])
        assert options["Region"] == ["East", "N/A", "North", "South"]
        assert options["Product"] == ["Fire", "Health", "Motor", "N/A"]

    def test_default_dimensions(self, engine: FilterEngine, base) -> None:
        options = engine.filter_options(base)
        assert list(options) == engine.settings.filter_dimensions
        assert options["Customer Gender"] == ["N/A"]
