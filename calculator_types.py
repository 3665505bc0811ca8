"""
Calculator Types
Value objects shared by the reconstitution engine, the converters and the UI layers
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Union
import enum


Number = Union[str, int, float]


class DoseUnit(enum.Enum):
    """Unit the target dose is entered in"""
    MG = "mg"
    MCG = "mcg"


class DisplayMode(enum.Enum):
    """Which measure the UI highlights"""
    ML = "ml"
    U100 = "u100"
    BOTH = "both"


class RoundingPrecision(enum.Enum):
    """Syringe-unit step used when rounding is enabled"""
    NONE = "none"
    ONE = "1"
    HALF = "0.5"

    @property
    def step(self) -> float:
        if self is RoundingPrecision.ONE:
            return 1.0
        if self is RoundingPrecision.HALF:
            return 0.5
        return 0.0


class InverseInputType(enum.Enum):
    """What a measured reading is expressed in"""
    ML = "ml"
    UNITS = "units"


def _coerce_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def _coerce_amount(value) -> Number:
    # anything that is not text or a number is treated as empty
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return ""
    return value


def _coerce_enum(enum_cls, value, default):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value))
    except ValueError:
        return default


@dataclass(frozen=True)
class CalculatorInputs:
    """Raw calculator inputs, exactly as the user typed them"""
    vial_amount: Number = "5"  # mg
    diluent_volume: Number = "1"  # mL
    target_dose: Number = "250"
    dose_unit: DoseUnit = DoseUnit.MCG
    display_mode: DisplayMode = DisplayMode.BOTH
    rounding_enabled: bool = False
    rounding_precision: RoundingPrecision = RoundingPrecision.ONE

    def __post_init__(self):
        # True hashes like 1, so it would share a cache entry with it
        for name in ("vial_amount", "diluent_volume", "target_dose"):
            object.__setattr__(self, name, _coerce_amount(getattr(self, name)))
        # accept plain strings ("mcg", "0.5") for the enum fields
        object.__setattr__(self, "dose_unit", _coerce_enum(DoseUnit, self.dose_unit, DoseUnit.MCG))
        object.__setattr__(
            self, "display_mode", _coerce_enum(DisplayMode, self.display_mode, DisplayMode.BOTH)
        )
        object.__setattr__(
            self,
            "rounding_precision",
            _coerce_enum(RoundingPrecision, self.rounding_precision, RoundingPrecision.ONE),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vial_amount": str(self.vial_amount),
            "diluent_volume": str(self.diluent_volume),
            "target_dose": str(self.target_dose),
            "dose_unit": self.dose_unit.value,
            "display_mode": self.display_mode.value,
            "rounding_enabled": self.rounding_enabled,
            "rounding_precision": self.rounding_precision.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: "CalculatorInputs" = None) -> "CalculatorInputs":
        """
        Build inputs from a plain dict (JSON body, stored state)

        Missing keys come from ``base`` (or the defaults); unknown enum
        values fall back to the base value.
        """
        base = base or cls()
        data = data or {}

        def pick(key):
            value = data.get(key)
            return getattr(base, key) if value is None else value

        return cls(
            vial_amount=_coerce_amount(pick("vial_amount")),
            diluent_volume=_coerce_amount(pick("diluent_volume")),
            target_dose=_coerce_amount(pick("target_dose")),
            dose_unit=_coerce_enum(DoseUnit, pick("dose_unit"), base.dose_unit),
            display_mode=_coerce_enum(DisplayMode, pick("display_mode"), base.display_mode),
            rounding_enabled=_coerce_bool(pick("rounding_enabled")),
            rounding_precision=_coerce_enum(
                RoundingPrecision, pick("rounding_precision"), base.rounding_precision
            ),
        )


@dataclass(frozen=True)
class CalculationResult:
    """Everything derived from one set of CalculatorInputs"""
    concentration_mg_per_ml: float = 0.0
    concentration_mcg_per_ml: float = 0.0

    # volume to draw
    volume_ml: float = 0.0
    volume_ml_rounded: float = 0.0

    # U-100 equivalent of the same volume
    units_u100: float = 0.0
    units_u100_rounded: float = 0.0

    # dose actually delivered at the rounded volume
    actual_dose_mg: float = 0.0
    actual_dose_mcg: float = 0.0

    is_valid: bool = False
    exceeds_vial: bool = False
    volume_too_small: bool = False

    @classmethod
    def empty(cls) -> "CalculationResult":
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class InverseCalculationInputs:
    volume_or_units: Number = ""
    input_type: InverseInputType = InverseInputType.UNITS

    def __post_init__(self):
        object.__setattr__(self, "volume_or_units", _coerce_amount(self.volume_or_units))
        object.__setattr__(
            self, "input_type", _coerce_enum(InverseInputType, self.input_type, InverseInputType.UNITS)
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InverseCalculationInputs":
        data = data or {}
        return cls(
            volume_or_units=_coerce_amount(data.get("volume_or_units", "")),
            input_type=_coerce_enum(
                InverseInputType, data.get("input_type"), InverseInputType.UNITS
            ),
        )


@dataclass(frozen=True)
class InverseCalculationResult:
    dose_mg: float = 0.0
    dose_mcg: float = 0.0
    is_valid: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PenConversionResult:
    """Pen (cartridge + dial) view of one dose"""
    concentration_iu_per_ml: float = 0.0
    clicks_needed: int = 0
    volume_ml: float = 0.0
    dose_mg: float = 0.0
    cartridge_mg: float = 0.0
    is_valid: bool = False
    exceeds_cartridge: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
