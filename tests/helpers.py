from typing import Any

from printcalc.models import Configuration, Snapshot, apply_change


def make_config(**changes: Any) -> Configuration:
    config = Configuration()
    for field_name, value in changes.items():
        config = apply_change(config, field_name, value)
    return config


def make_snapshot(name: str = "Test Item", saved_at: str = "2026-10-19T06:30:00+00:00", **changes: Any) -> Snapshot:
    return Snapshot(name=name, saved_at=saved_at, configuration=make_config(**changes))


# Same inputs the in-app sanity check used: fixed 2/g, 12.5 g, 3.5 h at 120 W and 12/kWh.
WATTAGE_JOB = {
    "pricing_mode": "fixed",
    "fixed_per_gram": 2,
    "part_weight": 12.5,
    "print_time_hours": 3.5,
    "print_time_minutes": 0,
    "print_time_seconds": 0,
    "electricity_mode": "wattage",
    "wattage": 120,
    "kwh_price": 12,
    "labor_cost": 50,
    "packaging": 10,
    "failure_margin_pct": 10,
    "markup_pct": 20,
}
