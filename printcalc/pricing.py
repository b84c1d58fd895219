from printcalc.models import (
    CUSTOM_PRESET_KEY,
    Breakdown,
    Configuration,
    ElectricityMode,
    PricingMode,
    find_kilowatt_preset,
)
from printcalc.units import to_number


def calculate_price_per_gram(config: Configuration) -> float:
    if PricingMode.parse(config.pricing_mode) is PricingMode.FIXED:
        return to_number(config.fixed_per_gram)

    spool_price = to_number(config.spool_price)
    spool_weight = to_number(config.spool_weight)
    return spool_price / spool_weight if spool_weight > 0 else 0.0


def calculate_print_hours(config: Configuration) -> float:
    return (
        to_number(config.print_time_hours)
        + to_number(config.print_time_minutes) / 60
        + to_number(config.print_time_seconds) / 3600
    )


def resolve_average_kw(config: Configuration) -> float:
    preset = find_kilowatt_preset(config.kilowatt_preset)
    if preset.key == CUSTOM_PRESET_KEY:
        return to_number(config.kilowatt_custom)
    return to_number(preset.kw)


def calculate_electricity_cost(config: Configuration, print_hours: float) -> float:
    mode = ElectricityMode.parse(config.electricity_mode)
    if mode is ElectricityMode.KILOWATT:
        return resolve_average_kw(config) * print_hours * to_number(config.kwh_price)
    if mode is ElectricityMode.RATE_PER_HOUR:
        return to_number(config.electricity_rate_per_hour) * print_hours
    watts = to_number(config.wattage)
    return (watts * print_hours / 1000) * to_number(config.kwh_price)


def compute_breakdown(config: Configuration) -> Breakdown:
    """
    Derive the full price breakdown for one configuration.

    The failure margin is charged on production cost only (material, electricity,
    labor, packaging, paint, adhesives); the markup is charged on the whole
    subtotal, which also includes the modeling fee and shipping.
    """
    price_per_gram = calculate_price_per_gram(config)
    part_weight = max(to_number(config.part_weight), 0.0)
    material_cost = part_weight * price_per_gram

    print_hours = calculate_print_hours(config)
    electricity_cost = calculate_electricity_cost(config, print_hours)

    labor_cost = to_number(config.labor_cost)
    packaging = to_number(config.packaging)
    paint = to_number(config.paint)
    adhesives = to_number(config.adhesives)
    shipping = to_number(config.shipping)
    modeling_fee = to_number(config.modeling_fee)

    production_cost = material_cost + electricity_cost + labor_cost + packaging + paint + adhesives
    non_production_cost = modeling_fee + shipping
    subtotal = production_cost + non_production_cost

    failure_margin_amount = production_cost * (to_number(config.failure_margin_pct) / 100)
    markup_amount = subtotal * (to_number(config.markup_pct) / 100)
    final_price = subtotal + failure_margin_amount + markup_amount

    return Breakdown(
        price_per_gram=price_per_gram,
        material_cost=material_cost,
        print_hours=print_hours,
        average_kw=resolve_average_kw(config),
        electricity_cost=electricity_cost,
        other_costs=packaging + paint + adhesives + shipping + modeling_fee,
        production_cost=production_cost,
        non_production_cost=non_production_cost,
        subtotal=subtotal,
        failure_margin_amount=failure_margin_amount,
        with_failure=subtotal + failure_margin_amount,
        markup_amount=markup_amount,
        final_price=final_price,
    )
