"""
Domain entities for the spend dataset and the what-if scenario levers.

Frozen dataclasses for the read-only inputs (Part, Supplier and the two
many-to-many link tables), the scenario levers (ScenarioParameters and its
adjustment entries) and the persisted SavedScenario record.

ScenarioParameters is immutable: every edit returns a new object, so a
valuation can never observe a half-applied change. SavedScenario converts
to and from the camelCase JSON record the scenario store writes.
"""

from dataclasses import dataclass, field, replace
from typing import Optional


class ValidationError(ValueError):
    """A user edit that cannot be applied (e.g. no target selected)."""


# ═══════════════════════════════════════════════════════════════════════════════
# DATASET ENTITIES
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Part:
    """A purchased part with its unit price (USD) and annual demand."""
    part_id: str
    part_number: str
    name: str
    price: float
    annual_demand: int
    freight_ohd_cost: float     # fraction of price, e.g. 0.08 = 8%


@dataclass(frozen=True)
class Supplier:
    """A supplier; `country` is the tariff-origin key."""
    supplier_id: str
    supplier_code: str
    name: str
    country: str
    description: str = ""
    street_address: str = ""
    city: str = ""
    state_or_province: str = ""
    postal_code: str = ""

    @property
    def address(self) -> str:
        return (f"{self.street_address}, {self.city}, "
                f"{self.state_or_province} {self.postal_code}, {self.country}")

    def is_foreign(self, home_country: str) -> bool:
        return self.country != home_country


@dataclass(frozen=True)
class PartCategoryMapping:
    part_id: str
    category_name: str


@dataclass(frozen=True)
class PartSupplierAssociation:
    part_id: str
    supplier_id: str


# ═══════════════════════════════════════════════════════════════════════════════
# SCENARIO LEVERS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CategoryAdjustment:
    """Price multiplier for parts in a category: -10 means -10%."""
    category_name: str
    cost_adjustment_percent: float


@dataclass(frozen=True)
class CountryTariffAdjustment:
    """Tariff points that replace the global adjustment for one origin country."""
    country_name: str
    tariff_adjustment_points: float


def _require_target(target: str, kind: str) -> str:
    if target is None or not str(target).strip():
        raise ValidationError(f"Select a {kind} before adding an adjustment.")
    return target


@dataclass(frozen=True)
class ScenarioParameters:
    """The full lever set for one what-if evaluation.

    Category and country adjustments are keyed by name. Adding an existing
    key replaces its value in place; keys are never duplicated.
    """
    home_country: str
    global_tariff_adjustment_points: int = 0
    global_logistics_adjustment_points: int = 0
    category_adjustments: tuple[CategoryAdjustment, ...] = field(default_factory=tuple)
    country_tariff_adjustments: tuple[CountryTariffAdjustment, ...] = field(default_factory=tuple)

    @classmethod
    def default(cls, home_country: str) -> "ScenarioParameters":
        return cls(home_country=home_country)

    def with_global_adjustments(
        self, tariff_points: Optional[int] = None, logistics_points: Optional[int] = None
    ) -> "ScenarioParameters":
        return replace(
            self,
            global_tariff_adjustment_points=(
                self.global_tariff_adjustment_points if tariff_points is None else int(tariff_points)
            ),
            global_logistics_adjustment_points=(
                self.global_logistics_adjustment_points if logistics_points is None else int(logistics_points)
            ),
        )

    def with_home_country(self, home_country: str) -> "ScenarioParameters":
        return replace(self, home_country=_require_target(home_country, "home country"))

    # ── Category adjustments ─────────────────────────────────────────────

    def with_category_adjustment(self, category_name: str, percent: float) -> "ScenarioParameters":
        """Add or update a category adjustment. A zero percent changes nothing."""
        _require_target(category_name, "category")
        if percent == 0:
            return self
        entry = CategoryAdjustment(category_name, percent)
        current = list(self.category_adjustments)
        for i, adj in enumerate(current):
            if adj.category_name == category_name:
                current[i] = entry
                break
        else:
            current.append(entry)
        return replace(self, category_adjustments=tuple(current))

    def without_category_adjustment(self, category_name: str) -> "ScenarioParameters":
        return replace(self, category_adjustments=tuple(
            adj for adj in self.category_adjustments if adj.category_name != category_name
        ))

    def category_percent_map(self) -> dict[str, float]:
        return {adj.category_name: adj.cost_adjustment_percent for adj in self.category_adjustments}

    # ── Country tariff adjustments ───────────────────────────────────────

    def with_country_tariff_adjustment(self, country_name: str, points: float) -> "ScenarioParameters":
        """Add or update a country tariff override. Zero points changes nothing."""
        _require_target(country_name, "country")
        if points == 0:
            return self
        entry = CountryTariffAdjustment(country_name, points)
        current = list(self.country_tariff_adjustments)
        for i, adj in enumerate(current):
            if adj.country_name == country_name:
                current[i] = entry
                break
        else:
            current.append(entry)
        return replace(self, country_tariff_adjustments=tuple(current))

    def without_country_tariff_adjustment(self, country_name: str) -> "ScenarioParameters":
        return replace(self, country_tariff_adjustments=tuple(
            adj for adj in self.country_tariff_adjustments if adj.country_name != country_name
        ))

    def country_points_map(self) -> dict[str, float]:
        return {adj.country_name: adj.tariff_adjustment_points for adj in self.country_tariff_adjustments}

    def is_neutral(self, home_country: str) -> bool:
        """True when evaluating these levers reproduces the baseline spend."""
        return (
            self.home_country == home_country
            and self.global_tariff_adjustment_points == 0
            and self.global_logistics_adjustment_points == 0
            and not self.category_adjustments
            and not self.country_tariff_adjustments
        )


# ═══════════════════════════════════════════════════════════════════════════════
# PERSISTED RECORD
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SavedScenario:
    """A named snapshot of lever settings (not of the underlying data)."""
    name: str
    description: str
    parameters: ScenarioParameters

    def to_record(self) -> dict:
        """JSON-serializable record in the storage schema."""
        p = self.parameters
        return {
            "name": self.name,
            "description": self.description,
            "analysisHomeCountry": p.home_country,
            "globalTariffAdjustmentPoints": int(p.global_tariff_adjustment_points),
            "globalLogisticsAdjustmentPoints": int(p.global_logistics_adjustment_points),
            "activeCategoryAdjustments": [
                {"categoryName": a.category_name, "costAdjustmentPercent": a.cost_adjustment_percent}
                for a in p.category_adjustments
            ],
            "activeCountryTariffAdjustments": [
                {"countryName": a.country_name, "tariffAdjustmentPoints": a.tariff_adjustment_points}
                for a in p.country_tariff_adjustments
            ],
        }

    @classmethod
    def from_record(cls, record: dict) -> "SavedScenario":
        """Rebuild a scenario from its stored record.

        Raises KeyError / TypeError / ValueError on a malformed record; the
        scenario store turns those into a not-found result.
        """
        params = ScenarioParameters(
            home_country=record["analysisHomeCountry"],
            global_tariff_adjustment_points=int(record.get("globalTariffAdjustmentPoints", 0)),
            global_logistics_adjustment_points=int(record.get("globalLogisticsAdjustmentPoints", 0)),
            category_adjustments=tuple(
                CategoryAdjustment(a["categoryName"], a["costAdjustmentPercent"])
                for a in record.get("activeCategoryAdjustments", [])
            ),
            country_tariff_adjustments=tuple(
                CountryTariffAdjustment(a["countryName"], a["tariffAdjustmentPoints"])
                for a in record.get("activeCountryTariffAdjustments", [])
            ),
        )
        return cls(
            name=record["name"],
            description=record.get("description", ""),
            parameters=params,
        )
