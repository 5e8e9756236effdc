"""
Spend Data Generator
====================
Generates a realistic synthetic spend dataset for the what-if dashboard:
a parts catalog with prices, annual demand and freight/overhead rates, a
supplier base spread across sourcing countries, part→category mappings and
part→supplier associations (the "source mix").

Most parts have one category and one or two suppliers; a few are dual
categorised or single-sourced from the home country, and a handful have no
supplier at all so the "not imported" path is exercised.

Produces 4 CSV files in the data/ directory.

Usage: python scripts/generate_data.py
"""

import os
import numpy as np
import pandas as pd

# ── Reproducibility ──────────────────────────────────────────────────────────
SEED = 42
rng = np.random.default_rng(SEED)

OUTPUT_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")
os.makedirs(OUTPUT_DIR, exist_ok=True)

N_PARTS = 80
HOME_COUNTRY = "USA"

# ═══════════════════════════════════════════════════════════════════════════════
# 1. REFERENCE DATA
# ═══════════════════════════════════════════════════════════════════════════════

# ── Suppliers ────────────────────────────────────────────────────────────────
# Country names match the default home country spelling ("USA").
SUPPLIERS = [
    {"supplier_code": "SUP-001", "name": "Great Lakes Castings",    "city": "Cleveland",   "state_or_province": "OH", "postal_code": "44101",  "country": "USA"},
    {"supplier_code": "SUP-002", "name": "Lone Star Fasteners",     "city": "Houston",     "state_or_province": "TX", "postal_code": "77001",  "country": "USA"},
    {"supplier_code": "SUP-003", "name": "Pacific Polymers",        "city": "Portland",    "state_or_province": "OR", "postal_code": "97201",  "country": "USA"},
    {"supplier_code": "SUP-004", "name": "Shenzhen Circuit Works",  "city": "Shenzhen",    "state_or_province": "GD", "postal_code": "518000", "country": "China"},
    {"supplier_code": "SUP-005", "name": "Ningbo Precision Metal",  "city": "Ningbo",      "state_or_province": "ZJ", "postal_code": "315000", "country": "China"},
    {"supplier_code": "SUP-006", "name": "Suzhou Cable Co",         "city": "Suzhou",      "state_or_province": "JS", "postal_code": "215000", "country": "China"},
    {"supplier_code": "SUP-007", "name": "Monterrey Forge",         "city": "Monterrey",   "state_or_province": "NL", "postal_code": "64000",  "country": "Mexico"},
    {"supplier_code": "SUP-008", "name": "Bajio Plastics",          "city": "Queretaro",   "state_or_province": "QRO", "postal_code": "76000", "country": "Mexico"},
    {"supplier_code": "SUP-009", "name": "Stuttgart Antriebstechnik", "city": "Stuttgart", "state_or_province": "BW", "postal_code": "70173",  "country": "Germany"},
    {"supplier_code": "SUP-010", "name": "Rhein Sensorik",          "city": "Cologne",     "state_or_province": "NW", "postal_code": "50667",  "country": "Germany"},
    {"supplier_code": "SUP-011", "name": "Hanoi Electronics",       "city": "Hanoi",       "state_or_province": "HN", "postal_code": "100000", "country": "Vietnam"},
    {"supplier_code": "SUP-012", "name": "Pune Auto Components",    "city": "Pune",        "state_or_province": "MH", "postal_code": "411001", "country": "India"},
    {"supplier_code": "SUP-013", "name": "Chennai Motors Supply",   "city": "Chennai",     "state_or_province": "TN", "postal_code": "600001", "country": "India"},
    {"supplier_code": "SUP-014", "name": "Ontario Tooling",         "city": "Windsor",     "state_or_province": "ON", "postal_code": "N9A",    "country": "Canada"},
    {"supplier_code": "SUP-015", "name": "Osaka Bearings",          "city": "Osaka",       "state_or_province": "OS", "postal_code": "530-0001", "country": "Japan"},
]

# ── Categories ───────────────────────────────────────────────────────────────
# price range (USD), freight/overhead range (fraction of price), demand range,
# and which supplier countries typically source the category.
CATEGORIES = {
    "Electronics":  {"price": (4, 220),  "freight": (0.03, 0.08), "demand": (500, 20000), "countries": ["China", "Vietnam", "Japan", "USA"]},
    "Castings":     {"price": (15, 400), "freight": (0.08, 0.15), "demand": (100, 5000),  "countries": ["USA", "Mexico", "India", "China"]},
    "Fasteners":    {"price": (0.05, 3), "freight": (0.05, 0.12), "demand": (10000, 500000), "countries": ["USA", "China", "India"]},
    "Plastics":     {"price": (0.5, 40), "freight": (0.06, 0.14), "demand": (2000, 80000), "countries": ["USA", "Mexico", "China"]},
    "Cables":       {"price": (2, 60),   "freight": (0.04, 0.10), "demand": (1000, 30000), "countries": ["China", "Mexico", "Vietnam"]},
    "Bearings":     {"price": (3, 150),  "freight": (0.03, 0.07), "demand": (500, 15000), "countries": ["Japan", "Germany", "China"]},
    "Drivetrain":   {"price": (80, 1500), "freight": (0.05, 0.10), "demand": (50, 3000), "countries": ["Germany", "USA", "Canada", "India"]},
    "Sensors":      {"price": (6, 250),  "freight": (0.02, 0.06), "demand": (500, 25000), "countries": ["Germany", "Japan", "China"]},
}

PART_NOUNS = {
    "Electronics": ["Control Board", "Power Module", "Display Unit", "Relay Assembly", "Inverter Board"],
    "Castings":    ["Housing", "Bracket", "Manifold", "Flange", "Pump Body"],
    "Fasteners":   ["Hex Bolt", "Lock Nut", "Rivet", "Washer", "Machine Screw"],
    "Plastics":    ["Cover", "Clip", "Bezel", "Grommet", "Knob"],
    "Cables":      ["Wire Harness", "Power Cord", "Data Cable", "Ground Strap"],
    "Bearings":    ["Ball Bearing", "Roller Bearing", "Bushing", "Thrust Washer"],
    "Drivetrain":  ["Gearbox", "Drive Shaft", "Clutch Pack", "Motor Mount"],
    "Sensors":     ["Pressure Sensor", "Temp Probe", "Hall Sensor", "Encoder"],
}


# ═══════════════════════════════════════════════════════════════════════════════
# 2. DATA GENERATION
# ═══════════════════════════════════════════════════════════════════════════════

def generate_suppliers():
    rows = []
    for i, s in enumerate(SUPPLIERS, start=1):
        rows.append({
            "supplier_id": f"s{i:03d}",
            "description": f"{s['name']} ({s['city']})",
            "street_address": f"{int(rng.integers(1, 999))} Industrial Way",
            **s,
        })
    return rows


def generate_parts():
    """Parts plus their primary category (index-aligned)."""
    cat_names = list(CATEGORIES)
    parts, primary = [], []
    for i in range(1, N_PARTS + 1):
        cat = cat_names[int(rng.integers(0, len(cat_names)))]
        profile = CATEGORIES[cat]
        lo, hi = profile["price"]
        # Log-uniform price so cheap parts are common and expensive ones rare
        price = float(np.exp(rng.uniform(np.log(lo), np.log(hi))))
        d_lo, d_hi = profile["demand"]
        demand = int(np.exp(rng.uniform(np.log(d_lo), np.log(d_hi))))
        freight = float(rng.uniform(*profile["freight"]))
        noun = PART_NOUNS[cat][int(rng.integers(0, len(PART_NOUNS[cat])))]
        parts.append({
            "part_id": f"p{i:03d}",
            "part_number": f"PN-{10000 + i * 7}",
            "name": f"{noun} {chr(65 + i % 26)}{i}",
            "price": round(price, 2),
            "annual_demand": demand,
            "freight_ohd_cost": round(freight, 3),
        })
        primary.append(cat)
    return parts, primary


def generate_part_categories(parts, primary):
    """One mapping per part; ~15% get a second category."""
    cat_names = list(CATEGORIES)
    rows = []
    for part, cat in zip(parts, primary):
        rows.append({"part_id": part["part_id"], "category_name": cat})
        if rng.random() < 0.15:
            second = cat_names[int(rng.integers(0, len(cat_names)))]
            if second != cat:
                rows.append({"part_id": part["part_id"], "category_name": second})
    return rows


def generate_part_suppliers(parts, primary, suppliers):
    """1-3 suppliers per part drawn from the category's sourcing countries.

    About 5% of parts get no supplier."""
    by_country = {}
    for s in suppliers:
        by_country.setdefault(s["country"], []).append(s["supplier_id"])

    rows = []
    for part, cat in zip(parts, primary):
        if rng.random() < 0.05:
            continue
        n = int(rng.choice([1, 1, 1, 2, 2, 3]))
        candidates = sorted({sid for c in CATEGORIES[cat]["countries"] for sid in by_country.get(c, [])})
        chosen = rng.choice(candidates, size=min(n, len(candidates)), replace=False)
        for sid in sorted(chosen):
            rows.append({"part_id": part["part_id"], "supplier_id": str(sid)})
    return rows


# ═══════════════════════════════════════════════════════════════════════════════
# 3. VALIDATION
# ═══════════════════════════════════════════════════════════════════════════════

def validate_data(parts, suppliers, part_suppliers):
    print("\n" + "=" * 70)
    print("VALIDATION REPORT")
    print("=" * 70)

    supplier_country = {s["supplier_id"]: s["country"] for s in suppliers}
    sourced = {}
    for a in part_suppliers:
        sourced.setdefault(a["part_id"], []).append(supplier_country[a["supplier_id"]])

    imported = sum(1 for countries in sourced.values() if any(c != HOME_COUNTRY for c in countries))
    domestic = sum(1 for countries in sourced.values() if all(c == HOME_COUNTRY for c in countries))
    unsourced = len(parts) - len(sourced)

    base_spend = sum(p["price"] * p["annual_demand"] for p in parts)
    print(f"  Parts:             {len(parts):,}")
    print(f"  Imported parts:    {imported:,}")
    print(f"  Domestic parts:    {domestic:,}")
    print(f"  Unsourced parts:   {unsourced:,}")
    print(f"  Price x demand:    ${base_spend:,.0f}")

    assert all(p["price"] >= 0 and p["annual_demand"] >= 0 for p in parts)
    print("  PASS: all prices and demands non-negative")


# ═══════════════════════════════════════════════════════════════════════════════
# 4. CSV OUTPUT
# ═══════════════════════════════════════════════════════════════════════════════

def write_csv(data, filename, columns=None):
    """Write list of dicts to CSV."""
    df = pd.DataFrame(data, columns=columns)
    path = os.path.join(OUTPUT_DIR, filename)
    df.to_csv(path, index=False)
    print(f"  {filename:<25s} {len(df):>6,} rows")
    return df


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN
# ═══════════════════════════════════════════════════════════════════════════════

def main():
    print("Spend Data Generator")
    print("=" * 70)
    print(f"Output directory: {OUTPUT_DIR}")
    print(f"Random seed: {SEED}")

    print("\nGenerating data...")
    suppliers = generate_suppliers()
    parts, primary = generate_parts()
    part_categories = generate_part_categories(parts, primary)
    part_suppliers = generate_part_suppliers(parts, primary, suppliers)

    print("\nWriting CSV files...")
    write_csv(parts, "parts.csv",
              ["part_id", "part_number", "name", "price", "annual_demand", "freight_ohd_cost"])
    write_csv(suppliers, "suppliers.csv",
              ["supplier_id", "supplier_code", "name", "description", "street_address",
               "city", "state_or_province", "postal_code", "country"])
    write_csv(part_categories, "part_categories.csv", ["part_id", "category_name"])
    write_csv(part_suppliers, "part_suppliers.csv", ["part_id", "supplier_id"])

    validate_data(parts, suppliers, part_suppliers)

    print("\nDone!")


if __name__ == "__main__":
    main()
