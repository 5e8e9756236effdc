"""
Scenario impact: attribute the total spend change to each lever.

The total is recomputed four times, each pass enabling one more lever:
  1. Global tariff points      (home country = scenario's)
  2. + Global logistics points
  3. + Category cost adjustments
  4. + Country tariff overrides  → final what-if spend

Each impact is the difference between consecutive subtotals, so the
impacts always telescope back to the final spend. Because the levers are
multiplicative, the split between them depends on this order; keep the
order fixed so figures stay comparable between runs.
"""

from dataclasses import dataclass, replace

import pandas as pd

from spendwise.data_loader import SpendData
from spendwise.models import ScenarioParameters
from spendwise.valuation import BaselineSettings, baseline_total_spend, total_spend

WATERFALL_STEPS = [
    "Base Spend",
    "Global Tariff Impact",
    "Global Logistics Impact",
    "Category Adjustments Impact",
    "Country Tariff Impact",
]


@dataclass(frozen=True)
class ScenarioImpact:
    """Base spend, the four ordered subtotals and their deltas."""
    base_spend: float
    after_global_tariff: float
    after_global_logistics: float
    after_category_changes: float
    final_spend: float

    @property
    def impact_global_tariff(self) -> float:
        return self.after_global_tariff - self.base_spend

    @property
    def impact_global_logistics(self) -> float:
        return self.after_global_logistics - self.after_global_tariff

    @property
    def impact_category(self) -> float:
        return self.after_category_changes - self.after_global_logistics

    @property
    def impact_country_tariff(self) -> float:
        return self.final_spend - self.after_category_changes

    @property
    def impacts(self) -> list[float]:
        return [
            self.impact_global_tariff,
            self.impact_global_logistics,
            self.impact_category,
            self.impact_country_tariff,
        ]

    @property
    def net_change(self) -> float:
        return self.final_spend - self.base_spend

    @property
    def net_change_percent(self) -> float:
        if self.base_spend == 0:
            return 0.0
        return self.net_change / self.base_spend * 100


def compute_impacts(
    data: SpendData,
    params: ScenarioParameters,
    baseline: BaselineSettings,
    base_spend=None,
) -> ScenarioImpact:
    """
    Evaluate the scenario and decompose the change into the waterfall.

    Args:
        data: Dataset snapshot (parts, suppliers, mappings, associations).
        params: Scenario levers.
        baseline: Original tariff multiplier, logistics percent and home country.
        base_spend: Original total annual spend. Computed from `baseline`
            when omitted.

    Returns:
        ScenarioImpact with all subtotals.
    """
    if base_spend is None:
        base_spend = baseline_total_spend(data, baseline)

    # Each stage re-derives every part from scratch with more levers enabled.
    tariff_only = replace(
        params,
        global_logistics_adjustment_points=0,
        category_adjustments=(),
        country_tariff_adjustments=(),
    )
    with_logistics = replace(params, category_adjustments=(), country_tariff_adjustments=())
    with_categories = replace(params, country_tariff_adjustments=())

    return ScenarioImpact(
        base_spend=base_spend,
        after_global_tariff=total_spend(data, tariff_only, baseline),
        after_global_logistics=total_spend(data, with_logistics, baseline),
        after_category_changes=total_spend(data, with_categories, baseline),
        final_spend=total_spend(data, params, baseline),
    )


def waterfall_table(impact: ScenarioImpact) -> pd.DataFrame:
    """P&L view: one row per step with its signed impact and running subtotal."""
    values = [impact.base_spend] + impact.impacts
    rows = []
    running = 0.0
    for step, value in zip(WATERFALL_STEPS, values):
        running += value
        rows.append({"step": step, "impact": value, "subtotal": running})
    return pd.DataFrame(rows, columns=["step", "impact", "subtotal"])


def _signed(value) -> str:
    return f"+{value:g}" if value >= 0 else f"{value:g}"


def describe_scenario(params: ScenarioParameters, baseline: BaselineSettings) -> list[str]:
    """Human-readable summary of the active levers, one line per lever."""
    if params.is_neutral(baseline.home_country):
        return ["No adjustments applied."]

    lines = []
    if params.home_country != baseline.home_country:
        lines.append(f"Home country: {params.home_country} (default {baseline.home_country})")
    tariff_pct = max(baseline.effective_base_tariff_rate * 100 + params.global_tariff_adjustment_points, 0)
    logistics_pct = max(baseline.logistics_percent + params.global_logistics_adjustment_points, 0)
    lines.append(
        f"Global Tariff Adjustment: {_signed(params.global_tariff_adjustment_points)} points "
        f"(effective tariff rate on imports: {tariff_pct:g}%)"
    )
    lines.append(
        f"Global Logistics Adj.: {_signed(params.global_logistics_adjustment_points)} points "
        f"(effective logistics rate: {logistics_pct:g}%)"
    )
    for adj in params.category_adjustments:
        lines.append(f"Category '{adj.category_name}' Cost: {_signed(adj.cost_adjustment_percent)}%")
    for adj in params.country_tariff_adjustments:
        lines.append(f"Country '{adj.country_name}' Tariff: {_signed(adj.tariff_adjustment_points)} points")
    return lines
