"""
Load the spend dataset from CSV and provide lookup methods for valuation.

Loads 4 CSV files from data/ into pandas DataFrames (parts, suppliers,
part-category mappings, part-supplier associations), validates them, and
builds dictionary lookups so the valuation engine can resolve a part's
categories and suppliers in O(1).

Lookup order is fixed: a part's categories come back sorted by category
name and its suppliers sorted by supplier id, so the first-match country
tariff rule and category compounding do not depend on CSV row order.
"""

import logging
from dataclasses import asdict
import os

import pandas as pd

from spendwise.models import Part, Supplier

logger = logging.getLogger(__name__)

PART_COLUMNS = ["part_id", "part_number", "name", "price", "annual_demand", "freight_ohd_cost"]
SUPPLIER_COLUMNS = [
    "supplier_id", "supplier_code", "name", "description", "street_address",
    "city", "state_or_province", "postal_code", "country",
]
CATEGORY_MAPPING_COLUMNS = ["part_id", "category_name"]
ASSOCIATION_COLUMNS = ["part_id", "supplier_id"]


def _check_columns(df: pd.DataFrame, required: list, filename: str):
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{filename} is missing columns: {', '.join(missing)}")


class SpendData:
    """Loads the CSVs from data/ and provides per-part lookups."""

    def __init__(self, data_dir=None):
        if data_dir is None:
            # Default: data/ next to the spendwise package
            data_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")
        self._dir = data_dir
        self._load()

    @classmethod
    def from_frames(cls, parts, suppliers, part_categories, part_suppliers) -> "SpendData":
        """Build from in-memory DataFrames (same columns as the CSVs)."""
        obj = cls.__new__(cls)
        obj._dir = None
        obj.parts = parts.copy()
        obj.suppliers = suppliers.copy()
        obj.part_categories = part_categories.copy()
        obj.part_suppliers = part_suppliers.copy()
        obj._prepare()
        return obj

    @classmethod
    def from_entities(cls, parts, suppliers, part_categories=(), part_suppliers=()) -> "SpendData":
        """Build from lists of Part / Supplier / mapping dataclasses."""
        def frame(rows, columns):
            return pd.DataFrame([asdict(r) for r in rows], columns=columns)

        return cls.from_frames(
            frame(parts, PART_COLUMNS),
            frame(suppliers, SUPPLIER_COLUMNS),
            frame(part_categories, CATEGORY_MAPPING_COLUMNS),
            frame(part_suppliers, ASSOCIATION_COLUMNS),
        )

    def _load(self):
        # ── Load CSV files ────────────────────────────────────────────────
        # IDs and codes stay strings even when they look numeric.
        str_cols = {c: str for c in ("part_id", "part_number", "supplier_id", "supplier_code", "postal_code")}
        self.parts = pd.read_csv(os.path.join(self._dir, "parts.csv"), dtype=str_cols)
        self.suppliers = pd.read_csv(
            os.path.join(self._dir, "suppliers.csv"), dtype=str_cols, keep_default_na=False
        )
        self.part_categories = pd.read_csv(os.path.join(self._dir, "part_categories.csv"), dtype=str_cols)
        self.part_suppliers = pd.read_csv(os.path.join(self._dir, "part_suppliers.csv"), dtype=str_cols)
        logger.info(
            "Loaded %d parts, %d suppliers, %d category mappings, %d associations from %s",
            len(self.parts), len(self.suppliers), len(self.part_categories),
            len(self.part_suppliers), self._dir,
        )
        self._prepare()

    def _prepare(self):
        _check_columns(self.parts, PART_COLUMNS, "parts.csv")
        _check_columns(self.suppliers, ["supplier_id", "supplier_code", "name", "country"], "suppliers.csv")
        _check_columns(self.part_categories, CATEGORY_MAPPING_COLUMNS, "part_categories.csv")
        _check_columns(self.part_suppliers, ASSOCIATION_COLUMNS, "part_suppliers.csv")

        self.part_categories = self.part_categories.dropna(subset=CATEGORY_MAPPING_COLUMNS)
        self.part_suppliers = self.part_suppliers.dropna(subset=ASSOCIATION_COLUMNS)

        for col in SUPPLIER_COLUMNS:
            if col not in self.suppliers.columns:
                self.suppliers[col] = ""

        # ── Validate part invariants ──────────────────────────────────────
        self.parts["price"] = pd.to_numeric(self.parts["price"], errors="raise").astype(float)
        self.parts["annual_demand"] = pd.to_numeric(self.parts["annual_demand"], errors="raise").astype(int)
        self.parts["freight_ohd_cost"] = pd.to_numeric(
            self.parts["freight_ohd_cost"], errors="raise"
        ).astype(float)
        bad = self.parts[(self.parts["price"] < 0) | (self.parts["annual_demand"] < 0)]
        if not bad.empty:
            raise ValueError(
                "Parts with negative price or annual demand: " + ", ".join(bad["part_id"].astype(str))
            )

        self._build_lookups()

    def _build_lookups(self):
        # ── Typed entities ────────────────────────────────────────────────
        self._parts: list[Part] = [
            Part(
                part_id=row["part_id"],
                part_number=row["part_number"],
                name=row["name"],
                price=float(row["price"]),
                annual_demand=int(row["annual_demand"]),
                freight_ohd_cost=float(row["freight_ohd_cost"]),
            )
            for _, row in self.parts.iterrows()
        ]
        self._suppliers: dict[str, Supplier] = {}
        for _, row in self.suppliers.iterrows():
            self._suppliers[row["supplier_id"]] = Supplier(
                **{c: str(row[c]) for c in SUPPLIER_COLUMNS}
            )

        # ── Per-part lookups (sorted, see module docstring) ───────────────
        self._part_categories: dict[str, list[str]] = {}
        for part_id, cat in zip(self.part_categories["part_id"], self.part_categories["category_name"]):
            self._part_categories.setdefault(part_id, []).append(cat)
        for cats in self._part_categories.values():
            cats.sort()

        # Associations to unknown suppliers are dropped here, not in valuation.
        self._part_suppliers: dict[str, list[Supplier]] = {}
        dangling = 0
        for part_id, sid in zip(self.part_suppliers["part_id"], self.part_suppliers["supplier_id"]):
            supplier = self._suppliers.get(sid)
            if supplier is None:
                dangling += 1
                continue
            self._part_suppliers.setdefault(part_id, []).append(supplier)
        for sups in self._part_suppliers.values():
            sups.sort(key=lambda s: s.supplier_id)
        if dangling:
            logger.warning("Ignored %d part-supplier associations with unknown supplier ids", dangling)

    # ── Query methods ────────────────────────────────────────────────────────

    def get_parts(self) -> list[Part]:
        return list(self._parts)

    def get_supplier(self, supplier_id: str):
        return self._suppliers.get(supplier_id)

    def get_suppliers(self) -> list[Supplier]:
        return list(self._suppliers.values())

    def categories_for_part(self, part_id: str) -> list[str]:
        """Category names mapped to this part, sorted by name."""
        return self._part_categories.get(part_id, [])

    def suppliers_for_part(self, part_id: str) -> list[Supplier]:
        """Suppliers associated with this part, sorted by supplier id."""
        return self._part_suppliers.get(part_id, [])

    def get_category_list(self) -> list[str]:
        """Unique category names, sorted."""
        return sorted(set(self.part_categories["category_name"]))

    def get_supplier_countries(self, *include) -> list[str]:
        """Unique supplier countries plus any non-blank names in `include`, sorted."""
        countries = set(self.suppliers["country"])
        countries.update(c for c in include if c)
        return sorted(countries)
