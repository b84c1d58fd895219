import csv
from collections.abc import Sequence
from datetime import date, datetime, timezone
from typing import Any

import pandas as pd

from printcalc.models import ElectricityMode, PricingMode, Snapshot
from printcalc.pricing import compute_breakdown
from printcalc.units import to_number

CSV_SCHEMA_VERSION = "1.5"
BOM = "\ufeff"
NOT_APPLICABLE = ""

CSV_HEADERS: list[str] = [
    "Name",
    "Saved At",
    "Pricing Mode",
    "Spool Price",
    "Spool Weight (g)",
    "Fixed Price/g",
    "Filament Consumed (g)",
    "Print Time (hrs)",
    "Electricity Mode",
    "Wattage (W)",
    "Average Power (kW)",
    "kWh Price",
    "Electricity ₱/hr",
    "Labor Cost",
    "Packaging",
    "Paint",
    "Adhesives",
    "Shipping",
    "3D Modeling Fee",
    "Failure Margin %",
    "Markup %",
    "Price/gram",
    "Material Cost",
    "Electricity Cost",
    "Other Costs (pkg+paint+adh+ship+3D)",
    "Production Cost",
    "Non-Production Cost",
    "Subtotal",
    "With Failure (Subtotal + Failure)",
    "Failure Margin Amount",
    "Markup Amount",
    "Final Price",
]


def format_saved_at(saved_at: str) -> str:
    try:
        parsed = datetime.fromisoformat(saved_at)
    except ValueError:
        return saved_at
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _row_cells(snapshot: Snapshot) -> list[Any]:
    config = snapshot.configuration
    breakdown = compute_breakdown(config)
    pricing_mode = PricingMode.parse(config.pricing_mode)
    electricity_mode = ElectricityMode.parse(config.electricity_mode)

    derive = pricing_mode is PricingMode.DERIVE

    def only_if(applicable: bool, value: Any) -> Any:
        return value if applicable else NOT_APPLICABLE

    return [
        snapshot.name,
        format_saved_at(snapshot.saved_at),
        pricing_mode.value,
        only_if(derive, to_number(config.spool_price)),
        only_if(derive, to_number(config.spool_weight)),
        only_if(not derive, to_number(config.fixed_per_gram)),
        to_number(config.part_weight),
        breakdown.print_hours,
        electricity_mode.value,
        only_if(electricity_mode is ElectricityMode.WATTAGE, to_number(config.wattage)),
        only_if(electricity_mode is ElectricityMode.KILOWATT, breakdown.average_kw),
        only_if(electricity_mode is not ElectricityMode.RATE_PER_HOUR, to_number(config.kwh_price)),
        only_if(
            electricity_mode is ElectricityMode.RATE_PER_HOUR,
            to_number(config.electricity_rate_per_hour),
        ),
        to_number(config.labor_cost),
        to_number(config.packaging),
        to_number(config.paint),
        to_number(config.adhesives),
        to_number(config.shipping),
        to_number(config.modeling_fee),
        to_number(config.failure_margin_pct),
        to_number(config.markup_pct),
        breakdown.price_per_gram,
        breakdown.material_cost,
        breakdown.electricity_cost,
        breakdown.other_costs,
        breakdown.production_cost,
        breakdown.non_production_cost,
        breakdown.subtotal,
        breakdown.with_failure,
        breakdown.failure_margin_amount,
        breakdown.markup_amount,
        breakdown.final_price,
    ]


def to_row(snapshot: Snapshot) -> str:
    """One CSV line for a snapshot, recomputed from its configuration. Every field is quoted."""
    frame = pd.DataFrame([_row_cells(snapshot)], columns=CSV_HEADERS)
    text = frame.to_csv(index=False, header=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    return text.removesuffix("\n")


def to_document(snapshots: Sequence[Snapshot]) -> str:
    rows = [to_row(snapshot) for snapshot in snapshots]
    return BOM + ",".join(CSV_HEADERS) + "\n" + "\n".join(rows)


def export_filename(name: str | None) -> str:
    stem = (name or "").strip() or "save"
    return stem if stem.lower().endswith(".csv") else f"{stem}.csv"


def bulk_export_filename(today: date | None = None) -> str:
    day = today or date.today()
    return f"PrintCalc_Saves_{day.isoformat()}.csv"
