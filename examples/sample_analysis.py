#!/usr/bin/env python3
"""
Sample Analysis Script.
Demonstrates usage of the Claim Analytics Engine.
"""

from datetime import date

from claim_analytics import (
    ClaimAnalyticsEngine,
    FilterSpec,
    SortDirection,
    SummaryFormatter,
    TrendMetric,
)


def create_sample_rows() -> list[dict[str, str]]:
    """Create a small claims batch for demonstration."""
    return [
        {
            "Claim Intimation Date": "2024-01-05",
            "Region": "North",
            "State": "Punjab",
            "Product": "Motor",
            "Filed By": "Customer",
            "Registered to Insurer": "Yes",
            "Customer Gender": "Male",
            "Claim Amount": "1,20,000",
            "Settled Amount": "95,000",
            "TAT": "6",
            "Aging Days": "12",
        },
        {
            "Claim Intimation Date": "14/02/2024",
            "Region": "South",
            "State": "Kerala",
            "Product": "Health",
            "Filed By": "Agent",
            "Registered to Insurer": "Yes",
            "Customer Gender": "Female",
            "Claim Amount": "45,500",
            "Settled Amount": "45,500",
            "TAT": "18",
            "Aging Days": "75",
        },
        {
            "Claim Intimation Date": "",
            "Region": "South",
            "State": "Tamil Nadu",
            "Product": "Motor",
            "Filed By": "Customer",
            "Registered to Insurer": "Yes",
            "Customer Gender": "",
            "Claim Amount": "8,000",
            "Settled Amount": "",
            "TAT": "pending",
        },
        {
            "Claim Intimation Date": "2024-02-20",
            "Region": "West",
            "Product": "Home",
            "Registered to Insurer": "",
            "Claim Amount": "60,000",
        },
    ]


def main() -> None:
    """Run a sample analysis."""
    print("Claim Analytics Engine - Sample Analysis")
    print("=" * 50)

    engine = ClaimAnalyticsEngine()
    analysis = engine.load(create_sample_rows())

    print(f"Registered claims: {len(analysis.processed.registered)}")
    print(f"Unregistered claims: {len(analysis.processed.unregistered)}")
    print()

    SummaryFormatter(analysis.kpis, {"Region": analysis.pivots["Region"]}).print_full()

    # Narrow to 2024 claims from the South region
    view = engine.apply_filters(
        FilterSpec(
            date_from=date(2024, 1, 1),
            categories={"Region": frozenset({"South"})},
        )
    )
    print()
    print(f"Filtered claims: {view.kpis.total_rows} ({view.kpis.sum_claim})")

    print()
    print("Products by claim amount:")
    for row in engine.sorted_pivot("Product", "Claim_Amount", SortDirection.DESC):
        print(f"  {row['Product']}: {row['Claim_Amount']:,.0f}")

    print()
    print("Monthly claim counts by product:")
    series = engine.trends(TrendMetric.COUNT, ["Product"])["Product"]
    for row in series.to_rows():
        print(f"  {row}")


if __name__ == "__main__":
    main()
