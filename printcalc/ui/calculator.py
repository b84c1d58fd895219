import pandas as pd
import streamlit as st

from printcalc.controller import CalculatorController
from printcalc.models import (
    CUSTOM_PRESET_KEY,
    KILOWATT_PRESETS,
    Breakdown,
    ElectricityMode,
    PricingMode,
    find_kilowatt_preset,
)
from printcalc.snapshots import SaveOutcome
from printcalc.ui.common import (
    flash,
    on_field_change,
    render_flash,
    render_pending_action,
    sync_widgets,
    widget_key,
)
from printcalc.units import format_hours, format_money

PHP = "₱"

PRICING_MODE_LABELS = {
    PricingMode.DERIVE: "Derive from spool",
    PricingMode.FIXED: f"Fixed price/gram ({PHP}/g)",
}

ELECTRICITY_MODE_LABELS = {
    ElectricityMode.WATTAGE: "Wattage (W) × kWh price",
    ElectricityMode.KILOWATT: "Printer average power (kW) × kWh price",
    ElectricityMode.RATE_PER_HOUR: f"Flat rate ({PHP}/hr)",
}

KW_HINT = (
    "Pick your printer model. Values are approximate readings from a power monitor. "
    "If your printer is not listed, choose Other and enter your own kW value. "
    "(Pumili ng printer model sa listahan. Kung wala ang printer mo, piliin ang Other.)"
)


def _number_field(
    controller: CalculatorController,
    label: str,
    field_name: str,
    help_text: str | None = None,
    disabled: bool = False,
) -> None:
    st.text_input(
        label,
        key=widget_key(field_name),
        help=help_text,
        disabled=disabled,
        on_change=on_field_change,
        args=(controller, field_name),
    )


def _on_save(controller: CalculatorController) -> None:
    outcome, message = controller.request_save()
    if outcome is SaveOutcome.SAVED:
        flash("success", message)
    elif outcome is SaveOutcome.ABORTED:
        flash("error", message)


def _render_material(controller: CalculatorController) -> None:
    st.markdown("### Material cost")
    st.radio(
        "Price per gram (choose 1)",
        options=list(PricingMode),
        format_func=PRICING_MODE_LABELS.get,
        key=widget_key("pricing_mode"),
        on_change=on_field_change,
        args=(controller, "pricing_mode"),
    )
    derive = controller.configuration.pricing_mode is PricingMode.DERIVE

    col1, col2 = st.columns(2)
    with col1:
        _number_field(
            controller,
            f"Spool price ({PHP})",
            "spool_price",
            "Total cost of one filament spool (Kung magkano mo nabili ang 1 spool).",
            disabled=not derive,
        )
    with col2:
        _number_field(
            controller,
            "Spool weight (g)",
            "spool_weight",
            "Weight of the entire spool, usually 1000 g (Bigat ng buong spool).",
            disabled=not derive,
        )
    _number_field(
        controller,
        f"Set price ({PHP}/g)",
        "fixed_per_gram",
        "Your set selling rate per gram (Kung ano yung rate mo per gram).",
        disabled=derive,
    )

    st.markdown("### Usage")
    _number_field(
        controller,
        "Filament consumed (g)",
        "part_weight",
        "From your slicer's estimate (Mula sa estimate ng slicer).",
    )


def _render_electricity(controller: CalculatorController) -> None:
    st.markdown("### Print time")
    col1, col2, col3 = st.columns(3)
    with col1:
        _number_field(controller, "Hours", "print_time_hours")
    with col2:
        _number_field(controller, "Minutes", "print_time_minutes")
    with col3:
        _number_field(controller, "Seconds", "print_time_seconds")

    st.markdown("### Electricity")
    st.radio(
        "Electricity cost (choose 1)",
        options=list(ElectricityMode),
        format_func=ELECTRICITY_MODE_LABELS.get,
        key=widget_key("electricity_mode"),
        on_change=on_field_change,
        args=(controller, "electricity_mode"),
    )

    mode = controller.configuration.electricity_mode
    if mode is ElectricityMode.WATTAGE:
        _number_field(controller, "Printer wattage (W)", "wattage")
    elif mode is ElectricityMode.KILOWATT:
        preset_keys = [preset.key for preset in KILOWATT_PRESETS]
        st.selectbox(
            "Printer average power",
            options=preset_keys,
            format_func=lambda key: find_kilowatt_preset(key).label,
            key=widget_key("kilowatt_preset"),
            help=KW_HINT,
            on_change=on_field_change,
            args=(controller, "kilowatt_preset"),
        )
        if controller.configuration.kilowatt_preset == CUSTOM_PRESET_KEY:
            _number_field(controller, "Custom average power (kW)", "kilowatt_custom")

    if mode is ElectricityMode.RATE_PER_HOUR:
        _number_field(
            controller,
            f"Electricity cost ({PHP}/hr)",
            "electricity_rate_per_hour",
            "What one hour of printing costs you (Magkano ang kuryente kada oras).",
        )
    else:
        _number_field(controller, f"Electricity price ({PHP}/kWh)", "kwh_price")


def _render_other_costs(controller: CalculatorController) -> None:
    st.markdown("### Labor & other costs")
    _number_field(controller, f"Labor cost ({PHP})", "labor_cost")
    col1, col2 = st.columns(2)
    with col1:
        _number_field(controller, f"Packaging ({PHP})", "packaging")
        _number_field(controller, f"Paint ({PHP})", "paint")
        _number_field(controller, f"Adhesives ({PHP})", "adhesives")
    with col2:
        _number_field(controller, f"Shipping ({PHP})", "shipping")
        _number_field(controller, f"3D modeling fee ({PHP})", "modeling_fee")

    st.markdown("### Margins")
    col3, col4 = st.columns(2)
    with col3:
        _number_field(
            controller,
            "Failure margin (%)",
            "failure_margin_pct",
            "Added on production cost only, to cover failed prints (Para sa palpak na print).",
        )
    with col4:
        _number_field(
            controller,
            "Markup (%)",
            "markup_pct",
            "Profit added on the whole subtotal (Tubo sa buong subtotal).",
        )


def _render_breakdown(breakdown: Breakdown) -> None:
    st.markdown("### Price breakdown")
    r1, r2, r3 = st.columns(3)
    r1.metric("Final price", format_money(breakdown.final_price, PHP))
    r2.metric("Production cost", format_money(breakdown.production_cost, PHP))
    r3.metric("Print time", format_hours(breakdown.print_hours))

    rows = [
        ("Price per gram", breakdown.price_per_gram),
        ("Material cost", breakdown.material_cost),
        ("Electricity cost", breakdown.electricity_cost),
        ("Production cost", breakdown.production_cost),
        ("Non-production cost (modeling + shipping)", breakdown.non_production_cost),
        ("Subtotal", breakdown.subtotal),
        ("Failure margin", breakdown.failure_margin_amount),
        ("Markup", breakdown.markup_amount),
        ("Final price", breakdown.final_price),
    ]
    df = pd.DataFrame([{"Item": label, "Amount": format_money(value, PHP)} for label, value in rows])
    st.dataframe(df, hide_index=True, width="stretch")


def render(controller: CalculatorController) -> None:
    sync_widgets(controller)
    render_flash()
    render_pending_action(controller)

    col1, col2, col3 = st.columns([4, 1, 1])
    with col1:
        st.text_input(
            "Product",
            key=widget_key("product_name"),
            placeholder="Enter product name (Pangalan ng produkto)",
            help="Used as the name of the save and its CSV file (Gagamitin bilang pangalan ng save).",
            on_change=on_field_change,
            args=(controller, "product_name"),
        )
    with col2:
        st.button("Save", type="primary", on_click=_on_save, args=(controller,))
    with col3:
        st.button("Reset everything", on_click=controller.request_reset, help="Clears all fields + saves")

    col_a, col_b, col_c = st.columns(3)
    with col_a:
        _render_material(controller)
    with col_b:
        _render_electricity(controller)
    with col_c:
        _render_other_costs(controller)

    st.divider()
    _render_breakdown(controller.breakdown())
