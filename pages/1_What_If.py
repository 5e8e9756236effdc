"""
What-If page — adjust scenario levers and see the cost impact waterfall.

Layout:
  - Sidebar: saved scenarios (load / delete), save current scenario form
  - Main area:
    1. Global levers: home country, tariff and logistics point sliders
    2. Category cost adjustments (add/update/remove)
    3. Country tariff overrides (add/update/remove)
    4. Current scenario summary
    5. Metrics row (original spend, what-if spend, net change)
    6. Waterfall chart + P&L table

The levers live in st.session_state as one immutable ScenarioParameters
object; every edit replaces it.

Data flow: data_loader → waterfall.compute_impacts() → UI display
"""

import streamlit as st
import pandas as pd
import plotly.graph_objects as go

from spendwise.config import get_settings
from spendwise.data_loader import SpendData
from spendwise.models import SavedScenario, ValidationError
from spendwise.scenario_store import JsonFileStore, ScenarioStore
from spendwise.valuation import baseline_total_spend
from spendwise.waterfall import WATERFALL_STEPS, compute_impacts, describe_scenario, waterfall_table


@st.cache_resource
def load_data(data_dir):
    return SpendData(data_dir)


st.set_page_config(page_title="What-If — SpendWise", layout="wide")

settings = get_settings()
baseline = settings.baseline()
scenarios = ScenarioStore(JsonFileStore(settings.scenario_store_path))

try:
    data = load_data(settings.data_dir)
except FileNotFoundError:
    st.error(f"No dataset found in `{settings.data_dir}`. Run `python scripts/generate_data.py`.")
    st.stop()

if "scenario_params" not in st.session_state:
    st.session_state.scenario_params = baseline.default_parameters()


def _apply(edit):
    """Run a parameter edit; show validation errors without changing state."""
    try:
        st.session_state.scenario_params = edit(st.session_state.scenario_params)
    except ValidationError as exc:
        st.error(str(exc))


# ── Sidebar: Saved Scenarios ─────────────────────────────────────────────
with st.sidebar:
    st.header("Scenarios")

    names = scenarios.list_scenario_names()
    selected = st.selectbox("Saved scenario", ["—"] + names)
    col_load, col_delete = st.columns(2)
    if col_load.button("Load", use_container_width=True, disabled=selected == "—"):
        loaded = scenarios.load_scenario(selected)
        if loaded is None:
            st.warning(f"Scenario '{selected}' was not found. Using default settings.")
            st.session_state.scenario_params = baseline.default_parameters()
        else:
            st.session_state.scenario_params = loaded.parameters
            st.toast(f"Loaded '{loaded.name}'")
    if col_delete.button("Delete", use_container_width=True, disabled=selected == "—"):
        if scenarios.delete_scenario(selected):
            st.toast(f"Deleted '{selected}'")
            st.rerun()
        else:
            st.warning(f"Scenario '{selected}' was not found.")

    st.divider()

    with st.form("save_scenario"):
        name = st.text_input("Scenario name")
        description = st.text_area("Description", height=80)
        if st.form_submit_button("Save current scenario", type="primary"):
            try:
                ok = scenarios.save_scenario(
                    SavedScenario(name.strip(), description, st.session_state.scenario_params)
                )
            except ValidationError as exc:
                st.error(str(exc))
            else:
                if ok:
                    st.toast(f"Saved '{name.strip()}'")
                else:
                    st.error("Could not write the scenario store.")

    if st.button("Reset levers", use_container_width=True):
        st.session_state.scenario_params = baseline.default_parameters()


# ── Main area ─────────────────────────────────────────────────────────────
st.title("What-If Analysis")
st.caption("Adjustments are applied on top of the baseline tariff and logistics settings.")

params = st.session_state.scenario_params

# ── Global levers ──
st.subheader("Global Adjustments")
g1, g2, g3 = st.columns(3)
# The loaded scenario's home country stays selectable even with no supplier there
countries = data.get_supplier_countries(baseline.home_country, params.home_country)
home = g1.selectbox(
    "Home country", countries,
    index=countries.index(params.home_country),
    help="Suppliers outside this country are treated as imports",
)
tariff_pts = g2.slider(
    "Global tariff adjustment (points)", -50, 50, int(params.global_tariff_adjustment_points),
)
logistics_pts = g3.slider(
    "Global logistics adjustment (points)", -50, 50, int(params.global_logistics_adjustment_points),
)
_apply(lambda p: p.with_home_country(home).with_global_adjustments(tariff_pts, logistics_pts))

# ── Category and country adjustments ──
col_cat, col_cty = st.columns(2)

with col_cat:
    st.subheader("Category Cost Adjustment")
    c1, c2, c3 = st.columns([2, 1, 1])
    category = c1.selectbox("Category", [""] + data.get_category_list(), key="adj_category")
    cat_pct = c2.number_input("Cost adj. (%)", value=0.0, step=1.0, key="adj_category_pct")
    if c3.button("Add/Update", key="add_category"):
        _apply(lambda p: p.with_category_adjustment(category, cat_pct))
    for adj in st.session_state.scenario_params.category_adjustments:
        r1, r2 = st.columns([4, 1])
        r1.write(f"{adj.category_name}: {adj.cost_adjustment_percent:+g}%")
        if r2.button("Remove", key=f"rm_cat_{adj.category_name}"):
            _apply(lambda p, n=adj.category_name: p.without_category_adjustment(n))
            st.rerun()

with col_cty:
    st.subheader("Source Country Tariff")
    c1, c2, c3 = st.columns([2, 1, 1])
    country = c1.selectbox("Country", [""] + data.get_supplier_countries(), key="adj_country")
    cty_pts = c2.number_input("Tariff (points)", value=0.0, step=1.0, key="adj_country_pts")
    if c3.button("Add/Update", key="add_country"):
        _apply(lambda p: p.with_country_tariff_adjustment(country, cty_pts))
    for adj in st.session_state.scenario_params.country_tariff_adjustments:
        r1, r2 = st.columns([4, 1])
        r1.write(f"{adj.country_name}: {adj.tariff_adjustment_points:+g} points")
        if r2.button("Remove", key=f"rm_cty_{adj.country_name}"):
            _apply(lambda p, n=adj.country_name: p.without_country_tariff_adjustment(n))
            st.rerun()

params = st.session_state.scenario_params

with st.expander("Current what-if scenario", expanded=True):
    st.markdown("\n".join(f"- {line}" for line in describe_scenario(params, baseline)))

st.divider()

# ── Results ───────────────────────────────────────────────────────────────
impact = compute_impacts(data, params, baseline, base_spend=baseline_total_spend(data, baseline))

m1, m2, m3 = st.columns(3)
m1.metric("Original Annual Spend", f"${impact.base_spend:,.0f}")
m2.metric("What-If Annual Spend", f"${impact.final_spend:,.0f}")
m3.metric(
    "Net Change", f"${impact.net_change:+,.0f}",
    delta=f"{impact.net_change_percent:+.2f}%", delta_color="inverse",
)

# ── Waterfall chart ──
fig = go.Figure(go.Waterfall(
    x=WATERFALL_STEPS + ["What-If Spend"],
    measure=["absolute", "relative", "relative", "relative", "relative", "total"],
    y=[impact.base_spend] + impact.impacts + [0],
    increasing=dict(marker=dict(color="#F44336")),
    decreasing=dict(marker=dict(color="#4CAF50")),
    totals=dict(marker=dict(color="#2196F3")),
    hovertemplate="%{x}: $%{y:,.0f}<extra></extra>",
))
fig.update_layout(
    height=420,
    margin=dict(l=20, r=20, t=30, b=20),
    yaxis_title="Annual spend (USD)",
    showlegend=False,
)
st.plotly_chart(fig, use_container_width=True)

st.markdown("**Impact P&L**")
table = waterfall_table(impact)
st.dataframe(
    pd.DataFrame({
        "Step": table["step"],
        "Impact": table["impact"].map(lambda v: f"${v:+,.0f}"),
        "Running Subtotal": table["subtotal"].map(lambda v: f"${v:,.0f}"),
    }),
    use_container_width=True,
    hide_index=True,
)

with st.expander("How are the impacts attributed?"):
    st.markdown(
        "Total spend is recomputed four times, adding one lever each time: "
        "global tariff, then global logistics, then category adjustments, "
        "then country tariffs. Each impact is the change from the previous "
        "step. Because the levers multiply, moving a lever earlier or later "
        "in this order would change how the total is split between them."
    )
