from __future__ import annotations

from pathlib import Path

import altair as alt
import pandas as pd
import streamlit as st

from sales_pipeline.aggregate import (
    aggregate_monthly,
    derive_filter_domain,
    filter_options,
    generate_date_options,
    is_range_valid,
    series_to_frame,
    series_totals,
)
from sales_pipeline.config import get_settings
from sales_pipeline.display import (
    ChartState,
    format_date_option,
    placeholder_message,
    resolve_chart_state,
    should_hint_search,
)
from sales_pipeline.ingest.load_csv import DataLoadError, load_sales
from sales_pipeline.models import DateCursor, FilterDomain, FilterKind

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="Warehouse & Retail Sales", layout="wide")
st.title("📊 Sales Data Analysis")
st.caption("Explore warehouse and retail sales trends")
st.markdown(
    "[Data Source: Montgomery County, MD (Data.gov)]"
    "(https://catalog.data.gov/dataset/warehouse-and-retail-sales)"
)

settings = get_settings()

SERIES_LABELS = {
    "retail_sales": "Retail Sales",
    "warehouse_sales": "Warehouse Sales",
    "retail_transfers": "Retail Transfers",
}
SERIES_COLORS = ["#c41e3a", "#d4af37", "#4a9eff"]


# =====================================================
# Cached loaders (recomputed only when the CSV changes)
# =====================================================
@st.cache_data(show_spinner="Loading sales data...")
def load_frame(path: str, blocksize: str) -> pd.DataFrame:
    """Load and clean the sales CSV once per path."""
    return load_sales(Path(path), blocksize)


@st.cache_data
def load_domain(path: str, blocksize: str, fallback: tuple[int, int]) -> FilterDomain:
    """Filter domain for the loaded record set."""
    return derive_filter_domain(load_frame(path, blocksize), fallback)


def _reset_selection() -> None:
    st.session_state["selected_value"] = ""
    st.session_state["search_term"] = ""


# =====================================================
# Data load (blocking error, no partial data)
# =====================================================
csv_path = str(settings.sales_csv_path)
try:
    df = load_frame(csv_path, settings.csv_blocksize)
    domain = load_domain(
        csv_path,
        settings.csv_blocksize,
        (settings.fallback_min_year, settings.fallback_max_year),
    )
except DataLoadError as exc:
    st.error(placeholder_message(ChartState.LOAD_ERROR, FilterKind.SUPPLIER))
    st.caption(str(exc))
    st.stop()

# =====================================================
# Filters
# =====================================================
kind_value = st.radio(
    "Filter By",
    [k.value for k in FilterKind],
    format_func=lambda v: v.title(),
    horizontal=True,
    key="filter_kind",
    on_change=_reset_selection,
)
kind = FilterKind(kind_value)

search_term = st.text_input(
    f"Search {kind.value.title()}",
    placeholder=f"Type to search {kind.value}s...",
    key="search_term",
)
options = filter_options(domain, kind, search_term, settings.option_limit)

selected_value = st.selectbox(
    f"Select {kind.value.title()}",
    [""] + options,
    format_func=lambda v: v or "-- Select --",
    key="selected_value",
)
if should_hint_search(options, settings.option_limit):
    st.caption("Use search to narrow results")

date_options = generate_date_options(domain)
default_start = DateCursor(year=domain.min_year, month=1)
default_end = DateCursor(year=domain.max_year, month=12)

c1, c2 = st.columns(2)
with c1:
    start = st.selectbox(
        "Start Date",
        date_options,
        index=date_options.index(default_start),
        format_func=format_date_option,
    )
with c2:
    end = st.selectbox(
        "End Date",
        date_options,
        index=date_options.index(default_end),
        format_func=format_date_option,
    )

st.divider()

# =====================================================
# Chart
# =====================================================
range_valid = is_range_valid(start, end)
series = aggregate_monthly(df, kind, selected_value, start, end)
state = resolve_chart_state(
    loaded=True,
    error=None,
    range_valid=range_valid,
    selected_value=selected_value,
    series=series,
)

if state is ChartState.INVALID_RANGE:
    st.warning(f"⚠️ {placeholder_message(state, kind)}")
elif state is ChartState.NOT_SELECTED:
    st.info(f"📊 {placeholder_message(state, kind)}")
elif state is ChartState.NO_DATA:
    st.info(f"🔍 {placeholder_message(state, kind)}")
else:
    df_series = series_to_frame(series)
    df_long = df_series.melt(
        id_vars="month", var_name="measure", value_name="value"
    )
    df_long["measure"] = df_long["measure"].map(SERIES_LABELS)

    chart = (
        alt.Chart(df_long)
        .mark_line(point=True)
        .encode(
            x=alt.X("month:O", title="Month", axis=alt.Axis(labelAngle=-45)),
            y=alt.Y("value:Q", title=None),
            color=alt.Color(
                "measure:N",
                title=None,
                scale=alt.Scale(domain=list(SERIES_LABELS.values()), range=SERIES_COLORS),
            ),
            tooltip=["month:O", "measure:N", alt.Tooltip("value:Q", format=",.2f")],
        )
        .properties(height=400)
    )
    st.altair_chart(chart, width="stretch")

    totals = series_totals(series)
    m1, m2, m3 = st.columns(3)
    with m1:
        st.metric("Total Retail Sales", f"{totals.retail_sales:,.2f}")
    with m2:
        st.metric("Total Warehouse Sales", f"{totals.warehouse_sales:,.2f}")
    with m3:
        st.metric("Total Transfers", f"{totals.retail_transfers:,.2f}")

# =====================================================
# Footer
# =====================================================
st.caption(
    f"{len(df):,} records • {len(domain.suppliers):,} suppliers • "
    f"{len(domain.items):,} items • {domain.min_year}-{domain.max_year}"
)
