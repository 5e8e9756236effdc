"""
Per-part annual spend valuation under a set of what-if levers.

Given a part, the scenario levers and the baseline settings, computes the
part's adjusted annual spend:

    spend = price_after_tariff * annual_demand * (1 + effective_freight_rate)

Stages are applied strictly in order, each compounding on the previous one:
  1. Category cost adjustments (multiplicative, per mapped category)
  2. Tariff, only for imported parts (at least one foreign supplier)
  3. Logistics / freight overhead
  4. Annual spend

The baseline spend is the same function evaluated with neutral levers for
the baseline home country. Valuation is pure: no I/O, no hidden state.
"""

from dataclasses import dataclass
from typing import Optional

import pandas as pd

from spendwise.data_loader import SpendData
from spendwise.models import Part, ScenarioParameters

BASE_TARIFF_RATE = 0.05         # 5% base tariff on imports
DEFAULT_HOME_COUNTRY = "USA"


@dataclass(frozen=True)
class BaselineSettings:
    """The "original" settings the what-if levers are applied on top of."""
    home_country: str = DEFAULT_HOME_COUNTRY
    base_tariff_rate: float = BASE_TARIFF_RATE
    tariff_multiplier_percent: float = 100.0   # 100 = base rate as-is, 110 = 1.1x
    logistics_percent: float = 100.0           # 100 = freight_ohd_cost as-is

    @property
    def effective_base_tariff_rate(self) -> float:
        return self.base_tariff_rate * (self.tariff_multiplier_percent / 100)

    def default_parameters(self) -> ScenarioParameters:
        return ScenarioParameters.default(self.home_country)


def tariff_rate_for_part(
    part: Part,
    params: ScenarioParameters,
    data: SpendData,
    baseline: BaselineSettings,
) -> Optional[float]:
    """Return the tariff rate applied to this part, or None if not imported.

    The first foreign supplier (by supplier id) whose country carries a
    country tariff adjustment replaces the global tariff points; the two are
    never added together. The result is floored at 0.
    """
    suppliers = data.suppliers_for_part(part.part_id)
    # No suppliers → not imported. Imported iff at least one supplier is foreign.
    if not any(s.is_foreign(params.home_country) for s in suppliers):
        return None

    country_points = params.country_points_map()

    points = params.global_tariff_adjustment_points
    for supplier in suppliers:
        if supplier.is_foreign(params.home_country) and supplier.country in country_points:
            points = country_points[supplier.country]
            break

    rate = baseline.effective_base_tariff_rate + points / 100
    return max(rate, 0.0)


def value_part(
    part: Part,
    params: ScenarioParameters,
    data: SpendData,
    baseline: BaselineSettings,
) -> float:
    """
    Adjusted annual spend for one part.

    Args:
        part: The part to value.
        params: Scenario levers (home country, global points, adjustment lists).
        data: Dataset snapshot used to resolve the part's categories and suppliers.
        baseline: Base tariff rate, tariff multiplier and logistics percent.

    Returns:
        Annual spend in USD.
    """
    # ── 1. Category cost adjustments ─────────────────────────────────────
    # Compound (1 + pct/100) for every mapped category with an adjustment.
    # Categories come back sorted by name from SpendData.
    price = part.price
    category_pct = params.category_percent_map()
    if category_pct:
        for category in data.categories_for_part(part.part_id):
            pct = category_pct.get(category)
            if pct is not None:
                price *= 1 + pct / 100

    # ── 2. Tariff ────────────────────────────────────────────────────────
    rate = tariff_rate_for_part(part, params, data, baseline)
    if rate is not None:
        price *= 1 + rate

    # ── 3. Logistics / freight overhead ──────────────────────────────────
    logistics_percent = max(baseline.logistics_percent + params.global_logistics_adjustment_points, 0.0)
    freight_rate = part.freight_ohd_cost * (logistics_percent / 100)

    # ── 4. Annual spend ──────────────────────────────────────────────────
    return price * part.annual_demand * (1 + freight_rate)


def total_spend(data: SpendData, params: ScenarioParameters, baseline: BaselineSettings) -> float:
    """Sum of value_part over every part in the dataset (0.0 for no parts)."""
    return sum((value_part(p, params, data, baseline) for p in data.get_parts()), 0.0)


def baseline_part_spend(part: Part, data: SpendData, baseline: BaselineSettings) -> float:
    return value_part(part, baseline.default_parameters(), data, baseline)


def baseline_total_spend(data: SpendData, baseline: BaselineSettings) -> float:
    return sum((baseline_part_spend(p, data, baseline) for p in data.get_parts()), 0.0)


def parts_with_spend(data: SpendData, baseline: BaselineSettings, params=None) -> pd.DataFrame:
    """Return the parts table with an `annual_spend` column.

    Uses the baseline levers unless `params` is given."""
    if params is None:
        params = baseline.default_parameters()
    df = data.parts.copy()
    df["annual_spend"] = [value_part(p, params, data, baseline) for p in data.get_parts()]
    return df
