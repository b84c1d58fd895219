from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any

NumberLike = float | int | str | None

MAX_SAVES = 3


class PricingMode(str, Enum):
    DERIVE = "derive"
    FIXED = "fixed"

    @classmethod
    def parse(cls, value: Any) -> "PricingMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.DERIVE


class ElectricityMode(str, Enum):
    WATTAGE = "wattage"
    KILOWATT = "kilowatt"
    RATE_PER_HOUR = "rate_per_hour"

    @classmethod
    def parse(cls, value: Any) -> "ElectricityMode":
        if isinstance(value, cls):
            return value
        tag = str(value).strip().lower()
        tag = _LEGACY_ELECTRICITY_TAGS.get(tag, tag)
        try:
            return cls(tag)
        except ValueError:
            return cls.WATTAGE


_LEGACY_ELECTRICITY_TAGS = {"kw": "kilowatt", "php_per_hour": "rate_per_hour"}


@dataclass(frozen=True)
class KilowattPreset:
    key: str
    label: str
    kw: float | None


CUSTOM_PRESET_KEY = "custom"

KILOWATT_PRESETS: tuple[KilowattPreset, ...] = (
    KilowattPreset("creality_hi", "Creality Hi PLA — 0.129 kW", 0.129),
    KilowattPreset("creality_k2pro", "Creality K2 Pro PLA — 0.183 kW", 0.183),
    KilowattPreset("bambu_a1mini", "Bambu Lab A1 Mini PLA — ~0.77 kW", 0.77),
    KilowattPreset("bambu_a1", "Bambu Lab A1 PLA — ~0.93 kW", 0.93),
    KilowattPreset("bambu_p1s", "Bambu Lab P1S PLA — 0.10 kW", 0.10),
    KilowattPreset("bambu_h2s", "Bambu Lab H2S PLA — 0.175 kW", 0.175),
    KilowattPreset("bambu_h2c", "Bambu Lab H2C PLA — 0.128 kW", 0.128),
    KilowattPreset(CUSTOM_PRESET_KEY, "Other (Custom kW)", None),
)

_PRESETS_BY_KEY = {preset.key: preset for preset in KILOWATT_PRESETS}


def find_kilowatt_preset(key: Any) -> KilowattPreset:
    """Unknown keys fall back to the first catalog entry; 'other' is the old name of 'custom'."""
    tag = str(key or "").strip()
    if tag == "other":
        tag = CUSTOM_PRESET_KEY
    return _PRESETS_BY_KEY.get(tag, KILOWATT_PRESETS[0])


@dataclass(frozen=True)
class Configuration:
    pricing_mode: PricingMode = PricingMode.DERIVE
    spool_price: NumberLike = 800
    spool_weight: NumberLike = 1000
    fixed_per_gram: NumberLike = 2.0

    part_weight: NumberLike = ""

    print_time_hours: NumberLike = 6
    print_time_minutes: NumberLike = 0
    print_time_seconds: NumberLike = 0

    electricity_mode: ElectricityMode = ElectricityMode.WATTAGE
    wattage: NumberLike = 120
    kilowatt_preset: str = "creality_hi"
    kilowatt_custom: NumberLike = ""
    kwh_price: NumberLike = 12
    electricity_rate_per_hour: NumberLike = 5

    labor_cost: NumberLike = 0
    packaging: NumberLike = 0
    paint: NumberLike = 0
    adhesives: NumberLike = 0
    shipping: NumberLike = 0
    modeling_fee: NumberLike = 0

    failure_margin_pct: NumberLike = 10
    markup_pct: NumberLike = 20

    product_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["pricing_mode"] = PricingMode.parse(self.pricing_mode).value
        data["electricity_mode"] = ElectricityMode.parse(self.electricity_mode).value
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Configuration":
        if not isinstance(data, dict):
            return cls()
        config = cls()
        for name in CONFIGURATION_FIELDS:
            if name in data:
                config = apply_change(config, name, data[name])
        return config


CONFIGURATION_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(Configuration))


def _coerce_raw(value: Any) -> NumberLike:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, (int, float, str)):
        return value
    return str(value)


def apply_change(config: Configuration, field_name: str, value: Any) -> Configuration:
    """Return a new Configuration with one field changed; tags are normalized, raw numbers kept as typed."""
    if field_name not in CONFIGURATION_FIELDS:
        raise KeyError(f"Unknown configuration field: {field_name}")

    if field_name == "pricing_mode":
        value = PricingMode.parse(value)
    elif field_name == "electricity_mode":
        value = ElectricityMode.parse(value)
    elif field_name == "kilowatt_preset":
        value = find_kilowatt_preset(value).key
    elif field_name == "product_name":
        value = "" if value is None else str(value)
    else:
        value = _coerce_raw(value)

    return replace(config, **{field_name: value})


@dataclass(frozen=True)
class Snapshot:
    name: str
    saved_at: str
    configuration: Configuration

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "saved_at": self.saved_at,
            "configuration": self.configuration.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Snapshot":
        return cls(
            name=str(data.get("name") or ""),
            saved_at=str(data.get("saved_at") or ""),
            configuration=Configuration.from_dict(data.get("configuration")),
        )


@dataclass(frozen=True)
class Breakdown:
    price_per_gram: float
    material_cost: float
    print_hours: float
    average_kw: float
    electricity_cost: float
    other_costs: float
    production_cost: float
    non_production_cost: float
    subtotal: float
    failure_margin_amount: float
    with_failure: float
    markup_amount: float
    final_price: float

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class AppState:
    configuration: Configuration = field(default_factory=Configuration)
    saves: tuple[Snapshot, ...] = ()

    def to_record(self) -> dict[str, Any]:
        record = self.configuration.to_dict()
        record["saves"] = [snapshot.to_dict() for snapshot in self.saves]
        return record

    @classmethod
    def from_record(cls, record: Any) -> "AppState":
        if not isinstance(record, dict):
            return cls()
        raw_saves = record.get("saves")
        saves = tuple(
            Snapshot.from_dict(item)
            for item in (raw_saves if isinstance(raw_saves, list) else [])
            if isinstance(item, dict)
        )
        return cls(configuration=Configuration.from_dict(record), saves=saves[:MAX_SAVES])
