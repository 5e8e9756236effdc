"""
SpendWise — Home Page (Streamlit entry point).

This is the landing page users see first. It provides:
  1. Three navigation cards linking to the main pages
  2. A key-stats row showing the loaded dataset at a glance
  3. A spend-by-country bar chart previewing where the money goes

Run: streamlit run app.py

Multipage app (sidebar order determined by numeric filename prefix):
  - pages/1_What_If.py        → What-if levers, waterfall chart, saved scenarios
  - pages/2_Spend_Summary.py  → Category spend, ABC classes, supplier mix
  - pages/3_About.py          → How the calculation works
"""

import streamlit as st
import plotly.graph_objects as go

from spendwise.config import get_settings
from spendwise.data_loader import SpendData
from spendwise.valuation import baseline_total_spend, parts_with_spend

st.set_page_config(
    page_title="SpendWise",
    layout="wide",
)


@st.cache_resource
def load_data(data_dir):
    return SpendData(data_dir)


settings = get_settings()

st.title("SpendWise")
st.markdown(
    "Spend analytics and what-if cost scenarios for purchased parts. "
    "See how tariffs, logistics rates, category price moves and "
    "country-specific tariffs change total annual spend."
)

st.divider()

# ── Navigation Cards ─────────────────────────────────────────────────────────
col1, col2, col3 = st.columns(3)

with col1:
    st.subheader("What-If Analysis")
    st.markdown(
        "Adjust tariff and logistics levers, category costs and country "
        "tariffs, then see the impact waterfall. Save scenarios by name."
    )
    st.page_link("pages/1_What_If.py", label="Open What-If", icon="📈")

with col2:
    st.subheader("Spend Summary")
    st.markdown(
        "Spend by category, ABC part classification and the supplier mix "
        "by country."
    )
    st.page_link("pages/2_Spend_Summary.py", label="Open Summary", icon="📊")

with col3:
    st.subheader("About")
    st.markdown("How annual spend and the impact waterfall are calculated.")
    st.page_link("pages/3_About.py", label="Read About", icon="ℹ️")

st.divider()

try:
    data = load_data(settings.data_dir)
except FileNotFoundError:
    st.warning(
        f"No dataset found in `{settings.data_dir}`. "
        "Run `python scripts/generate_data.py` to create the sample data."
    )
    st.stop()

baseline = settings.baseline()

# ── Key Stats ────────────────────────────────────────────────────────────────
c1, c2, c3, c4 = st.columns(4)
c1.metric("Total Annual Spend", f"${baseline_total_spend(data, baseline):,.0f}")
c2.metric("Parts", f"{len(data.parts):,}")
c3.metric("Suppliers", f"{len(data.suppliers):,}")
c4.metric("Categories", f"{len(data.get_category_list()):,}")

# ── Spend by Supplier Country ────────────────────────────────────────────────
# A part's spend is attributed to each country it is sourced from, so parts
# with suppliers in several countries count once per country.
st.markdown("#### Spend by Supplier Country")

spend = parts_with_spend(data, baseline)
merged = (
    data.part_suppliers
    .merge(data.suppliers[["supplier_id", "country"]], on="supplier_id")
    .drop_duplicates(subset=["part_id", "country"])
    .merge(spend[["part_id", "annual_spend"]], on="part_id")
)
by_country = merged.groupby("country")["annual_spend"].sum().sort_values(ascending=False)

fig = go.Figure(go.Bar(
    x=by_country.index.tolist(),
    y=by_country.values.tolist(),
    marker_color=[
        "seagreen" if c == baseline.home_country else "royalblue" for c in by_country.index
    ],
    hovertemplate="%{x}: $%{y:,.0f}<extra></extra>",
))
fig.update_layout(
    height=350,
    margin=dict(l=0, r=0, t=10, b=0),
    yaxis_title="Annual spend (USD)",
)
st.plotly_chart(fig, use_container_width=True)
