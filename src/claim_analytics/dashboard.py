"""
Claim Analytics Engine - Streamlit Dashboard.
Upload a claims file, narrow it with filters, and explore pivots and trends.

Run with:
    streamlit run src/claim_analytics/dashboard.py
"""

import logging

import pandas as pd
import streamlit as st

from claim_analytics import (
    AnalyticsSettings,
    ClaimAnalyticsEngine,
    FilterSpec,
    SortDirection,
    SortState,
    SummaryFormatter,
    TrendMetric,
    TrendSeries,
    load_rows,
)
from claim_analytics.core.exceptions import ClaimAnalyticsError
from claim_analytics.core.models import PivotTable, is_total_row
from claim_analytics.reporting.formatting import format_number

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")


# =============================================================================
# Page Configuration
# =============================================================================
st.set_page_config(
    page_title="Claims Analytics Dashboard",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown(
    """
    <style>
    .main-header {
        font-size: 2.5rem;
        font-weight: 700;
        color: #1E3A5F;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1rem;
        color: #6B7280;
        margin-bottom: 2rem;
    }
    .stMetric > div {
        background-color: #F8FAFC;
        padding: 1rem;
        border-radius: 8px;
        border: 1px solid #E2E8F0;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

METRIC_LABELS = {
    TrendMetric.COUNT: "Claim Count",
    TrendMetric.CLAIM: "Claim Amount",
    TrendMetric.SETTLED: "Settled Amount",
}

SORT_ARROWS = {
    SortDirection.ASC: " ▲",
    SortDirection.DESC: " ▼",
    SortDirection.NONE: "",
}


# =============================================================================
# Helper Functions
# =============================================================================
def get_engine() -> ClaimAnalyticsEngine:
    """Get or create the session's engine."""
    if "engine" not in st.session_state:
        st.session_state.engine = ClaimAnalyticsEngine(AnalyticsSettings())
    return st.session_state.engine


def reset_session() -> None:
    """Forget the loaded batch and all table/sort state."""
    for key in ["engine", "file_name", "error", "sort_states"]:
        st.session_state.pop(key, None)
    for key in [k for k in st.session_state if str(k).startswith("filter-")]:
        del st.session_state[key]


def process_upload(uploaded_file) -> None:
    """Decode and load an uploaded file, recording any failure."""
    reset_session()
    st.session_state.file_name = uploaded_file.name
    try:
        rows = load_rows(uploaded_file.getvalue(), uploaded_file.name)
        get_engine().load(rows)
    except ClaimAnalyticsError as e:
        st.session_state.pop("engine", None)
        st.session_state.error = e.message


def table_to_frame(table: PivotTable, grouping: str) -> pd.DataFrame:
    """Render a pivot table with display-formatted numbers."""
    display = []
    for row in table:
        display.append(
            {
                key.replace("_", " "): (
                    format_number(value, 0 if float(value).is_integer() else 2, grouping)
                    if isinstance(value, (int, float))
                    else value
                )
                for key, value in row.items()
            }
        )
    return pd.DataFrame(display)


def trend_to_frame(series: TrendSeries) -> pd.DataFrame:
    """Chart data indexed by month start so months plot in order."""
    return pd.DataFrame(
        [point.values for point in series.points],
        index=pd.to_datetime([point.period for point in series.points]),
        columns=series.keys,
    ).fillna(0)


def render_pivot(dimension: str, table: PivotTable, grouping: str) -> None:
    """Render one sortable pivot table."""
    st.markdown(f"#### By {dimension}")
    if not table:
        st.info("No data to display.")
        return

    sort_states: dict[str, SortState] = st.session_state.setdefault("sort_states", {})
    state = sort_states.get(dimension, SortState())
    headers = list(table[0])

    header_cols = st.columns(len(headers))
    for col, header in zip(header_cols, headers):
        arrow = SORT_ARROWS[state.direction] if header == state.column else ""
        if col.button(
            f"{header.replace('_', ' ')}{arrow}",
            key=f"sort-{dimension}-{header}",
            use_container_width=True,
        ):
            sort_states[dimension] = state.toggle(header)
            st.rerun()

    rows = get_engine().sorted_pivot(dimension, state.column, state.direction)
    frame = table_to_frame(rows, grouping)
    total_index = [i for i, row in enumerate(rows) if is_total_row(row)]
    st.dataframe(
        frame.style.apply(
            lambda r: ["font-weight: bold" if r.name in total_index else "" for _ in r],
            axis=1,
        ),
        use_container_width=True,
        hide_index=True,
    )


# =============================================================================
# Sidebar
# =============================================================================
with st.sidebar:
    st.title("Claims Analytics")
    st.markdown("---")

    st.subheader("📁 Upload Claims Data")
    uploaded_file = st.file_uploader(
        "CSV or XLSX file",
        type=["csv", "xlsx"],
        help="Drag & drop or select a claims export to begin analysis",
    )

    process_btn = st.button(
        "Process File",
        type="primary",
        use_container_width=True,
        disabled=uploaded_file is None,
    )
    if process_btn and uploaded_file is not None:
        with st.spinner("Processing claims..."):
            process_upload(uploaded_file)

    if st.button("Reset", use_container_width=True):
        reset_session()
        st.rerun()


# =============================================================================
# Main Content
# =============================================================================
st.markdown('<p class="main-header">📊 Claims Analytics Dashboard</p>', unsafe_allow_html=True)
st.markdown(
    '<p class="sub-header">Pivot tables, KPIs and monthly trends for registered claims</p>',
    unsafe_allow_html=True,
)

if "error" in st.session_state:
    st.error(st.session_state.error)

engine = st.session_state.get("engine")
analysis = engine.analysis if engine is not None else None

if analysis is not None:
    settings = engine.settings

    # ==========================================================================
    # Filters
    # ==========================================================================
    with st.sidebar:
        st.markdown("---")
        st.subheader("🔎 Filters")
        use_dates = st.checkbox("Filter by intimation date", value=False)
        date_from = date_to = None
        if use_dates:
            dates = [r.parsed_claim_intimation_date for r in analysis.base if r.parsed_claim_intimation_date]
            if dates:
                picked = st.date_input("Intimation date range", value=(min(dates), max(dates)))
                if isinstance(picked, tuple) and len(picked) == 2:
                    date_from, date_to = picked

        selections = {
            dimension: frozenset(st.multiselect(dimension, options, key=f"filter-{dimension}"))
            for dimension, options in analysis.filter_options.items()
        }

    view = engine.apply_filters(
        FilterSpec(date_from=date_from, date_to=date_to, categories=selections)
    )

    st.caption(
        f"File: {st.session_state.get('file_name', '')} • "
        + " • ".join(
            f"{name}: {len(records):,}" for name, records in analysis.processed.buckets.items()
        )
    )

    # ==========================================================================
    # KPI Section
    # ==========================================================================
    st.markdown("### 📊 Key Performance Indicators")
    kpi1, kpi2, kpi3, kpi4 = st.columns(4)
    kpi1.metric("Total Claims", view.kpis.total_rows)
    kpi2.metric("Total Claim Amount", view.kpis.sum_claim)
    kpi3.metric("Total Settled Amount", view.kpis.sum_settled)
    kpi4.metric("Average TAT (days)", view.kpis.avg_tat)

    st.markdown("---")

    # ==========================================================================
    # Pivot Tables
    # ==========================================================================
    tab_pivots, tab_trends = st.tabs(["📋 Pivot Tables", "📈 Month-over-Month Trends"])

    with tab_pivots:
        left, right = st.columns(2)
        for index, (dimension, table) in enumerate(view.pivots.items()):
            with left if index % 2 == 0 else right:
                render_pivot(dimension, table, settings.digit_grouping)

    # ==========================================================================
    # Trend Analysis
    # ==========================================================================
    with tab_trends:
        metric = st.selectbox(
            "Metric",
            options=list(METRIC_LABELS),
            format_func=lambda m: METRIC_LABELS[m],
        )
        trend_cols = st.columns(2)
        charts = [s for s in engine.trends(metric).values() if s.points]
        if not charts:
            st.info("No dated claims to chart.")
        for index, series in enumerate(charts):
            with trend_cols[index % 2]:
                st.markdown(f"#### Monthly Trend: {series.category}")
                st.line_chart(trend_to_frame(series), height=350)

    # ==========================================================================
    # Export Options
    # ==========================================================================
    st.markdown("### 📤 Export Results")
    formatter = SummaryFormatter(
        view.kpis, view.pivots, engine.trends(metric), settings.digit_grouping
    )
    exp1, exp2 = st.columns(2)
    with exp1:
        st.download_button(
            label="📄 Download JSON",
            data=formatter.to_json(),
            file_name="claims_summary.json",
            mime="application/json",
        )
    with exp2:
        st.download_button(
            label="📝 Download Text Report",
            data=formatter.to_text(),
            file_name="claims_summary.txt",
            mime="text/plain",
        )

elif "error" not in st.session_state:
    # ==========================================================================
    # Welcome Screen
    # ==========================================================================
    st.markdown("---")
    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        st.markdown(
            """
            ### 👋 Upload Your Claims Data

            Drag & drop or select a CSV or Excel file in the sidebar, then click
            **Process File** to build pivots, KPIs and monthly trends.
            """
        )


# =============================================================================
# Footer
# =============================================================================
st.markdown("---")
st.caption("Claims Analytics Engine v0.1.0 | Built with Streamlit")
