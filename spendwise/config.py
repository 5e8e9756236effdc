from __future__ import annotations

import os
from dataclasses import dataclass

from spendwise.valuation import BASE_TARIFF_RATE, DEFAULT_HOME_COUNTRY, BaselineSettings

_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


@dataclass(frozen=True)
class Settings:
    data_dir: str
    scenario_store_path: str
    home_country: str
    base_tariff_rate: float
    tariff_multiplier_percent: float
    logistics_percent: float

    def baseline(self) -> BaselineSettings:
        return BaselineSettings(
            home_country=self.home_country,
            base_tariff_rate=self.base_tariff_rate,
            tariff_multiplier_percent=self.tariff_multiplier_percent,
            logistics_percent=self.logistics_percent,
        )


def get_settings() -> Settings:
    return Settings(
        data_dir=os.getenv("SPENDWISE_DATA_DIR", os.path.join(_REPO_ROOT, "data")),
        scenario_store_path=os.getenv(
            "SPENDWISE_SCENARIO_STORE", os.path.join(_REPO_ROOT, "scenarios.json")
        ),
        home_country=os.getenv("SPENDWISE_HOME_COUNTRY", DEFAULT_HOME_COUNTRY),
        base_tariff_rate=float(os.getenv("SPENDWISE_BASE_TARIFF_RATE", BASE_TARIFF_RATE)),
        tariff_multiplier_percent=float(os.getenv("SPENDWISE_TARIFF_MULTIPLIER_PERCENT", 100)),
        logistics_percent=float(os.getenv("SPENDWISE_LOGISTICS_PERCENT", 100)),
    )
