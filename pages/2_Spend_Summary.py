"""
Spend Summary page — descriptive analytics on the baseline spend.

Sections:
  1. ABC classification: Pareto classes by cumulative spend share
  2. Spend by category: a part counts in every category it maps to
  3. Supplier mix: top supplier countries and suppliers-per-part distribution
  4. Parts table with annual spend

Data flow: data_loader → valuation.parts_with_spend() → analytics → UI display
"""

import streamlit as st
import pandas as pd
import plotly.graph_objects as go

from spendwise.analytics import (
    abc_classification,
    abc_summary,
    spend_by_category,
    supplier_count_by_country,
    supplier_count_distribution,
)
from spendwise.config import get_settings
from spendwise.data_loader import SpendData
from spendwise.valuation import parts_with_spend


@st.cache_resource
def load_data(data_dir):
    return SpendData(data_dir)


st.set_page_config(page_title="Spend Summary — SpendWise", layout="wide")

settings = get_settings()
try:
    data = load_data(settings.data_dir)
except FileNotFoundError:
    st.error(f"No dataset found in `{settings.data_dir}`. Run `python scripts/generate_data.py`.")
    st.stop()

baseline = settings.baseline()
spend = parts_with_spend(data, baseline)

st.title("Spend Summary")
st.caption(
    f"Baseline spend with home country {baseline.home_country}, "
    f"tariff multiplier {baseline.tariff_multiplier_percent:g}% and "
    f"logistics {baseline.logistics_percent:g}%."
)

# ── ABC classification ───────────────────────────────────────────────────
ABC_COLORS = {"A": "#F44336", "B": "#FF9800", "C": "#4CAF50"}

col_abc, col_cat = st.columns(2)

with col_abc:
    st.subheader("ABC Parts Classification")
    classified = abc_classification(spend)
    summary = abc_summary(classified)
    if summary.empty:
        st.info("No spend to classify.")
    else:
        fig = go.Figure(go.Scatter(
            x=summary["num_parts"],
            y=summary["avg_spend"],
            mode="markers+text",
            text=["Class " + c for c in summary["abc_class"]],
            textposition="top center",
            marker=dict(
                size=summary["total_spend"] / summary["total_spend"].max() * 60 + 10,
                color=[ABC_COLORS[c] for c in summary["abc_class"]],
            ),
            hovertemplate="%{text}<br>%{x} parts<br>avg $%{y:,.0f}<extra></extra>",
        ))
        fig.update_layout(
            height=380, margin=dict(l=20, r=20, t=30, b=20),
            xaxis_title="Number of parts", yaxis_title="Average spend per part (USD)",
        )
        st.plotly_chart(fig, use_container_width=True)

# ── Spend by category ────────────────────────────────────────────────────
with col_cat:
    st.subheader("Spend by Category")
    by_cat = spend_by_category(spend, data)
    if by_cat.empty:
        st.info("No category mappings loaded.")
    else:
        fig = go.Figure(go.Pie(
            labels=by_cat["category_name"],
            values=by_cat["spend"],
            hole=0.3,
            textinfo="none",
            hovertemplate="%{label}: $%{value:,.0f} (%{percent})<extra></extra>",
        ))
        fig.update_layout(height=380, margin=dict(l=20, r=20, t=30, b=20))
        st.plotly_chart(fig, use_container_width=True)

st.divider()

# ── Supplier mix ─────────────────────────────────────────────────────────
col_cty, col_dist = st.columns(2)

with col_cty:
    st.subheader("Top Supplier Countries")
    by_country = supplier_count_by_country(data)
    fig = go.Figure(go.Bar(x=by_country["country"], y=by_country["count"], marker_color="royalblue"))
    fig.update_layout(height=320, margin=dict(l=20, r=20, t=30, b=20), yaxis_title="Suppliers")
    st.plotly_chart(fig, use_container_width=True)

with col_dist:
    st.subheader("Suppliers per Part")
    dist = supplier_count_distribution(data)
    fig = go.Figure(go.Bar(x=dist["label"], y=dist["part_count"], marker_color="seagreen"))
    fig.update_layout(height=320, margin=dict(l=20, r=20, t=30, b=20), yaxis_title="Parts")
    st.plotly_chart(fig, use_container_width=True)

st.divider()

# ── Parts table ──────────────────────────────────────────────────────────
st.subheader("Parts")
table = spend.merge(classified[["part_id", "abc_class"]], on="part_id", how="left")
st.dataframe(
    pd.DataFrame({
        "Part Number": table["part_number"],
        "Name": table["name"],
        "Price": table["price"].map(lambda v: f"${v:,.2f}"),
        "Annual Demand": table["annual_demand"].map(lambda v: f"{v:,}"),
        "Freight/OHD": table["freight_ohd_cost"].map(lambda v: f"{v:.1%}"),
        "Annual Spend": table["annual_spend"].map(lambda v: f"${v:,.0f}"),
        "Class": table["abc_class"].fillna("-"),
    }),
    use_container_width=True,
    hide_index=True,
)
