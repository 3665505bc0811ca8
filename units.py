"""
Unit Conversions
Mass, volume, syringe units, IU and pen clicks

All functions are pure; callers are expected to pass non-negative values.
"""

import math

from calculator_types import PenConversionResult


# Fixed ratios
MCG_PER_MG = 1000
IU_PER_MG = 3  # somatropin: 1 mg = 3 IU
UNITS_PER_ML = 100  # U-100 syringe scale

# Pen device
PEN_CARTRIDGE_ML = 3.0
IU_PER_CLICK = 1

# Below this a U-100 syringe can't be read reliably
MIN_PRACTICAL_VOLUME_ML = 0.02

# Barrel sizes offered by the syringe selector (mL)
SYRINGE_SIZES_ML = (0.3, 0.5, 1.0)


def mg_to_mcg(mg: float) -> float:
    return mg * MCG_PER_MG


def mcg_to_mg(mcg: float) -> float:
    return mcg / MCG_PER_MG


def mg_to_iu(mg: float) -> float:
    return mg * IU_PER_MG


def iu_to_mg(iu: float) -> float:
    return iu / IU_PER_MG


def ml_to_units(ml: float) -> float:
    """Volume in mL -> marks on a U-100 syringe"""
    return ml * UNITS_PER_ML


def units_to_ml(units: float) -> float:
    return units / UNITS_PER_ML


def iu_to_clicks(dose_iu: float) -> int:
    """
    Dial clicks for a dose, rounded half-up

    Clicks are a whole, non-negative display value even though the IU math
    underneath is continuous.
    """
    clicks = math.floor(dose_iu / IU_PER_CLICK + 0.5)
    return max(0, int(clicks))


def clicks_to_iu(clicks: int) -> float:
    return clicks * IU_PER_CLICK


def pen_concentration(cartridge_iu: float, cartridge_ml: float = PEN_CARTRIDGE_ML) -> float:
    """IU per mL once the cartridge is filled"""
    return cartridge_iu / cartridge_ml


def pen_volume_ml(dose_iu: float, concentration_iu_per_ml: float) -> float:
    return dose_iu / concentration_iu_per_ml


def convert_pen_dose(
    cartridge_iu: float,
    dose_iu: float,
    cartridge_ml: float = PEN_CARTRIDGE_ML
) -> PenConversionResult:
    """
    Express an IU dose as pen clicks and injected volume

    Args:
        cartridge_iu: Total IU in the cartridge
        dose_iu: Desired dose in IU
        cartridge_ml: Cartridge volume (fixed at 3 mL for supported pens)

    Returns:
        PenConversionResult; invalid and zeroed when any input is <= 0
        or not finite
    """
    if cartridge_iu <= 0 or dose_iu <= 0 or cartridge_ml <= 0:
        return PenConversionResult()
    if not all(math.isfinite(v) for v in (cartridge_iu, dose_iu, cartridge_ml)):
        return PenConversionResult()

    concentration = pen_concentration(cartridge_iu, cartridge_ml)

    return PenConversionResult(
        concentration_iu_per_ml=concentration,
        clicks_needed=iu_to_clicks(dose_iu),
        volume_ml=pen_volume_ml(dose_iu, concentration),
        dose_mg=iu_to_mg(dose_iu),
        cartridge_mg=iu_to_mg(cartridge_iu),
        is_valid=True,
        exceeds_cartridge=dose_iu > cartridge_iu,
    )


def syringe_capacity_units(syringe_ml: float) -> float:
    """Highest mark on a U-100 barrel of the given size"""
    return ml_to_units(syringe_ml)


def syringe_fill_fraction(units: float, syringe_ml: float) -> float:
    """How full the barrel is at ``units``, clamped to [0, 1]"""
    capacity = syringe_capacity_units(syringe_ml)
    if capacity <= 0:
        return 0.0
    return max(0.0, min(units / capacity, 1.0))
