"""
About page — explains how SpendWise values parts and attributes changes.

Sections:
  1. Hero: one-line description
  2. How It Works: 3-column layout (Load → Adjust → Compare)
  3. Annual spend formula
  4. The impact waterfall
  5. Saved scenarios
  6. Data files
"""

import streamlit as st

st.set_page_config(page_title="About — SpendWise", layout="wide")

# ── Hero ──────────────────────────────────────────────────────────────────────
st.title("About SpendWise")
st.markdown(
    """
    A **what-if cost calculator** for purchased parts. It recomputes total
    annual spend when tariffs, logistics rates, category prices or
    country-specific tariffs change, and shows how much of the change comes
    from each lever.
    """
)

st.divider()

# ── How It Works ──────────────────────────────────────────────────────────────
st.header("How It Works")

col1, col2, col3 = st.columns(3)

with col1:
    st.subheader("1. Load")
    st.markdown(
        """
        Parts (price, annual demand, freight/overhead rate), suppliers
        with their country, part-category mappings and the part-supplier
        source mix are loaded from CSV files.
        """
    )

with col2:
    st.subheader("2. Adjust")
    st.markdown(
        """
        Pick a **home country**, move the **global tariff** and
        **logistics** sliders, and add **category cost** or
        **country tariff** adjustments.
        """
    )

with col3:
    st.subheader("3. Compare")
    st.markdown(
        """
        The waterfall shows the original spend, the impact of each lever
        and the what-if total. Save the lever settings as a named
        scenario to come back to later.
        """
    )

st.divider()

# ── Annual spend ──────────────────────────────────────────────────────────────
st.header("Annual Spend per Part")
st.markdown(
    """
    Each part is valued in four steps, each building on the previous one:

    1. **Category adjustments**: the price is multiplied by `(1 + pct/100)`
       for every adjusted category the part belongs to.
    2. **Tariff**: a part is *imported* when at least one of its suppliers
       is outside the home country. Imported parts pay
       `base rate × multiplier + tariff points/100`. A country tariff
       adjustment on one of the part's foreign suppliers **replaces** the
       global tariff points. The rate never goes below zero.
    3. **Logistics**: the freight/overhead rate is scaled by
       `(logistics % + logistics points) / 100`, never below zero.
    4. **Spend** = `price after tariff × annual demand × (1 + freight rate)`.
    """
)
st.latex(r"\text{spend} = p_{\text{tariff}} \times d \times (1 + f \cdot \tfrac{L}{100})")

with st.expander("Which supplier's country tariff applies?"):
    st.markdown(
        """
        Suppliers are checked in supplier-id order and the first foreign
        supplier whose country has an adjustment wins. Category
        adjustments are applied in category-name order.
        """
    )

st.divider()

# ── Waterfall ─────────────────────────────────────────────────────────────────
st.header("The Impact Waterfall")
st.markdown(
    """
    | Step | Levers enabled |
    |---|---|
    | Base Spend | none (baseline home country) |
    | Global Tariff Impact | home country + global tariff points |
    | Global Logistics Impact | + global logistics points |
    | Category Adjustments Impact | + category adjustments |
    | Country Tariff Impact | + country tariff adjustments |

    Each impact is the difference from the previous step, so the impacts
    always add up to the net change. The split between levers depends on
    this order because the levers multiply each other.
    """
)

st.divider()

# ── Scenarios and data ────────────────────────────────────────────────────────
st.header("Saved Scenarios")
st.markdown(
    """
    A scenario stores the lever settings only (home country, global points,
    category and country adjustments), not the parts or suppliers. Saving
    under an existing name overwrites it. Scenarios are kept in a JSON file
    (`SPENDWISE_SCENARIO_STORE`, default `scenarios.json`).
    """
)

st.header("Data Files")
st.markdown(
    """
    | File | Columns |
    |---|---|
    | `parts.csv` | part_id, part_number, name, price, annual_demand, freight_ohd_cost |
    | `suppliers.csv` | supplier_id, supplier_code, name, description, street_address, city, state_or_province, postal_code, country |
    | `part_categories.csv` | part_id, category_name |
    | `part_suppliers.csv` | part_id, supplier_id |

    Generate a sample dataset with `python scripts/generate_data.py`.
    """
)
