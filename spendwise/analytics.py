"""
Descriptive spend analytics for the summary page.

All functions take the `parts_with_spend` table (parts + annual_spend
column, see valuation.parts_with_spend) and/or the SpendData snapshot and
return small DataFrames ready for charting:
  - spend_by_category:            spend per category (a part counts in every category it maps to)
  - supplier_count_by_country:    top-N supplier countries
  - supplier_count_distribution:  how many parts have 0, 1, 2, ... suppliers
  - abc_classification / abc_summary: Pareto A/B/C classes by cumulative spend
"""

import pandas as pd

from spendwise.data_loader import SpendData

# Cumulative spend share thresholds for A and B; everything above is C.
ABC_A_THRESHOLD = 0.80
ABC_B_THRESHOLD = 0.95


def spend_by_category(parts_with_spend: pd.DataFrame, data: SpendData) -> pd.DataFrame:
    """Return DataFrame[category_name, spend] sorted by spend, largest first."""
    merged = data.part_categories.merge(
        parts_with_spend[["part_id", "annual_spend"]], on="part_id", how="inner"
    )
    if merged.empty:
        return pd.DataFrame(columns=["category_name", "spend"])
    out = (
        merged.groupby("category_name", as_index=False)["annual_spend"].sum()
        .rename(columns={"annual_spend": "spend"})
        .sort_values("spend", ascending=False)
        .reset_index(drop=True)
    )
    return out


def supplier_count_by_country(data: SpendData, top: int = 5) -> pd.DataFrame:
    """Return DataFrame[country, count] for the `top` countries with most suppliers."""
    if data.suppliers.empty:
        return pd.DataFrame(columns=["country", "count"])
    counts = data.suppliers["country"].value_counts()
    out = counts.rename_axis("country").reset_index(name="count")
    # value_counts ties have no stable order; break them by country name
    out = out.sort_values(["count", "country"], ascending=[False, True]).reset_index(drop=True)
    return out.head(top)


def supplier_count_distribution(data: SpendData) -> pd.DataFrame:
    """Return DataFrame[num_suppliers, label, part_count], ascending by num_suppliers.

    Only associations whose part exists are counted; parts with no
    suppliers show up in the 0 bucket."""
    part_ids = data.parts["part_id"]
    assoc = data.part_suppliers[data.part_suppliers["part_id"].isin(part_ids)]
    per_part = assoc.groupby("part_id").size().reindex(part_ids, fill_value=0)
    dist = per_part.value_counts().sort_index()
    out = pd.DataFrame({"num_suppliers": dist.index.astype(int), "part_count": dist.values})
    out["label"] = out["num_suppliers"].map(lambda n: f"{n} Supplier" + ("" if n == 1 else "s"))
    return out[["num_suppliers", "label", "part_count"]]


def abc_classification(parts_with_spend: pd.DataFrame) -> pd.DataFrame:
    """Classify parts A/B/C by cumulative share of total spend.

    Parts are ranked by spend (largest first). A part whose cumulative
    share is ≤ 80% is class A, ≤ 95% class B, otherwise class C.
    Returns an empty frame when there are no parts or total spend is 0."""
    columns = ["part_id", "part_number", "name", "annual_spend", "cumulative_share", "abc_class"]
    if parts_with_spend.empty:
        return pd.DataFrame(columns=columns)
    total = parts_with_spend["annual_spend"].sum()
    if total == 0:
        return pd.DataFrame(columns=columns)

    ranked = parts_with_spend.sort_values("annual_spend", ascending=False, kind="mergesort").copy()
    ranked["cumulative_share"] = ranked["annual_spend"].cumsum() / total
    ranked["abc_class"] = ranked["cumulative_share"].map(
        lambda s: "A" if s <= ABC_A_THRESHOLD else "B" if s <= ABC_B_THRESHOLD else "C"
    )
    return ranked[columns].reset_index(drop=True)


def abc_summary(classified: pd.DataFrame) -> pd.DataFrame:
    """Aggregate abc_classification output: one row per class present."""
    if classified.empty:
        return pd.DataFrame(columns=["abc_class", "num_parts", "total_spend", "avg_spend"])
    out = classified.groupby("abc_class", as_index=False).agg(
        num_parts=("part_id", "count"),
        total_spend=("annual_spend", "sum"),
    )
    out["avg_spend"] = out["total_spend"] / out["num_parts"]
    return out.sort_values("abc_class").reset_index(drop=True)
