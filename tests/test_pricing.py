import pytest

from printcalc.models import Configuration, ElectricityMode, PricingMode
from printcalc.pricing import (
    calculate_price_per_gram,
    calculate_print_hours,
    compute_breakdown,
    resolve_average_kw,
)
from tests.helpers import WATTAGE_JOB, make_config


def _no_electricity(**changes):
    base = {
        "pricing_mode": "fixed",
        "print_time_hours": 0,
        "print_time_minutes": 0,
        "print_time_seconds": 0,
        "failure_margin_pct": 0,
        "markup_pct": 0,
    }
    base.update(changes)
    return make_config(**base)


def test_default_configuration_prices_with_empty_part_weight():
    breakdown = compute_breakdown(Configuration())

    assert breakdown.price_per_gram == pytest.approx(0.8)
    assert breakdown.material_cost == 0.0
    assert breakdown.print_hours == 6.0
    # 120 W for 6 h at 12/kWh
    assert breakdown.electricity_cost == pytest.approx(8.64)


def test_derive_mode_divides_spool_price_by_weight():
    config = make_config(pricing_mode="derive", spool_price=900, spool_weight=1000, part_weight=50)

    breakdown = compute_breakdown(config)

    assert breakdown.price_per_gram == pytest.approx(0.9)
    assert breakdown.material_cost == pytest.approx(45.0)


@pytest.mark.parametrize("spool_weight", [0, "", "abc", -1000, None])
def test_derive_mode_without_spool_weight_gives_zero_price_per_gram(spool_weight):
    config = make_config(pricing_mode="derive", spool_price=800, spool_weight=spool_weight, part_weight=10)

    breakdown = compute_breakdown(config)

    assert breakdown.price_per_gram == 0.0
    assert breakdown.material_cost == 0.0


def test_fixed_mode_ignores_spool_fields():
    config = make_config(pricing_mode="fixed", fixed_per_gram="2.5", spool_price=800, spool_weight=0)

    assert calculate_price_per_gram(config) == 2.5


@pytest.mark.parametrize("part_weight", [-20, "", "twelve", None])
def test_non_positive_or_missing_part_weight_costs_nothing(part_weight):
    config = make_config(pricing_mode="fixed", fixed_per_gram=2, part_weight=part_weight)

    assert compute_breakdown(config).material_cost == 0.0


def test_print_time_combines_hours_minutes_and_seconds():
    config = make_config(print_time_hours=1, print_time_minutes=30, print_time_seconds=36)

    assert calculate_print_hours(config) == pytest.approx(1.51)


def test_wattage_mode_electricity_cost():
    breakdown = compute_breakdown(make_config(**WATTAGE_JOB))

    assert breakdown.electricity_cost == pytest.approx(5.04, abs=0.02)


def test_kilowatt_custom_mode_electricity_cost():
    config = make_config(
        electricity_mode="kilowatt",
        kilowatt_preset="custom",
        kilowatt_custom=0.129,
        print_time_hours=2,
        print_time_minutes=30,
        print_time_seconds=0,
        kwh_price=12,
    )

    breakdown = compute_breakdown(config)

    assert breakdown.average_kw == pytest.approx(0.129)
    assert breakdown.electricity_cost == pytest.approx(3.87, abs=0.02)


def test_kilowatt_mode_uses_catalog_rating():
    config = make_config(
        electricity_mode="kilowatt",
        kilowatt_preset="bambu_p1s",
        kilowatt_custom=5,
        print_time_hours=10,
        kwh_price=10,
    )

    assert resolve_average_kw(config) == pytest.approx(0.10)
    assert compute_breakdown(config).electricity_cost == pytest.approx(10.0)


def test_unknown_kilowatt_preset_falls_back_to_first_catalog_entry():
    config = make_config(electricity_mode="kilowatt", kilowatt_preset="no_such_printer")

    assert config.kilowatt_preset == "creality_hi"
    assert resolve_average_kw(config) == pytest.approx(0.129)


@pytest.mark.parametrize("kwh_price", [0, 12, 999])
def test_rate_per_hour_mode_ignores_kwh_price(kwh_price):
    config = make_config(
        electricity_mode="rate_per_hour",
        electricity_rate_per_hour=7.5,
        print_time_hours=1,
        print_time_minutes=0,
        print_time_seconds=0,
        kwh_price=kwh_price,
    )

    assert compute_breakdown(config).electricity_cost == pytest.approx(7.5)


def test_failure_margin_on_production_only_and_markup_on_subtotal():
    # production: 100 g at 1/g; non-production: 50 shipping
    config = _no_electricity(
        fixed_per_gram=1,
        part_weight=100,
        shipping=50,
        failure_margin_pct=10,
        markup_pct=20,
    )

    breakdown = compute_breakdown(config)

    assert breakdown.production_cost == pytest.approx(100.0)
    assert breakdown.non_production_cost == pytest.approx(50.0)
    assert breakdown.subtotal == pytest.approx(150.0)
    assert breakdown.failure_margin_amount == pytest.approx(10.0)
    assert breakdown.markup_amount == pytest.approx(30.0)
    assert breakdown.with_failure == pytest.approx(160.0)
    assert breakdown.final_price == pytest.approx(190.0)


def test_cost_line_classification():
    config = _no_electricity(
        labor_cost=40,
        packaging=5,
        paint=3,
        adhesives=2,
        shipping=60,
        modeling_fee=100,
    )

    breakdown = compute_breakdown(config)

    assert breakdown.production_cost == pytest.approx(50.0)
    assert breakdown.non_production_cost == pytest.approx(160.0)
    assert breakdown.other_costs == pytest.approx(170.0)


def test_full_job_breakdown():
    breakdown = compute_breakdown(make_config(**WATTAGE_JOB))

    production = 25 + 5.04 + 50 + 10
    assert breakdown.material_cost == pytest.approx(25.0)
    assert breakdown.production_cost == pytest.approx(production)
    assert breakdown.failure_margin_amount == pytest.approx(production * 0.1)
    assert breakdown.markup_amount == pytest.approx(production * 0.2)
    assert breakdown.final_price == pytest.approx(production * 1.3)


def test_breakdown_is_deterministic():
    config = make_config(**WATTAGE_JOB)

    assert compute_breakdown(config) == compute_breakdown(config)
    assert compute_breakdown(config).to_dict() == compute_breakdown(make_config(**WATTAGE_JOB)).to_dict()


def test_garbage_input_never_raises():
    garbage = {name: "??" for name in WATTAGE_JOB}
    garbage.update(pricing_mode="sideways", electricity_mode="solar", kilowatt_preset=None)

    config = make_config(**garbage)
    breakdown = compute_breakdown(config)

    assert config.pricing_mode is PricingMode.DERIVE
    assert config.electricity_mode is ElectricityMode.WATTAGE
    assert breakdown.price_per_gram == pytest.approx(0.8)
    assert breakdown.print_hours == 0.0
    assert breakdown.material_cost == 0.0
    assert breakdown.electricity_cost == 0.0
    assert breakdown.final_price == 0.0


def test_engine_normalizes_tags_on_directly_built_configuration():
    config = Configuration(pricing_mode="fixed", electricity_mode="php_per_hour", print_time_hours=2)

    breakdown = compute_breakdown(config)

    assert breakdown.price_per_gram == 2.0
    assert breakdown.electricity_cost == pytest.approx(10.0)
    assert PricingMode.parse(config.pricing_mode) is PricingMode.FIXED
    assert ElectricityMode.parse(config.electricity_mode) is ElectricityMode.RATE_PER_HOUR
