"""
Vial Dose Calculator
Handles reconstitution, syringe-unit and inverse dose calculations
"""

import math
import re
from functools import lru_cache
from typing import Any, Dict, List, Optional, Union

from calculator_types import (
    CalculatorInputs,
    CalculationResult,
    DisplayMode,
    DoseUnit,
    InverseCalculationInputs,
    InverseCalculationResult,
    InverseInputType,
    Number,
    RoundingPrecision,
)
from config import Config
from formatting import format_number
import units


DECIMAL_PATTERN = re.compile(r"^\d*\.?\d*$")

DISCLAIMER = (
    "These calculations are for educational and research purposes only and "
    "are not medical advice. Always consult a healthcare professional."
)

WARNING_EXCEEDS_VIAL = "Warning: the dose exceeds the total content of the vial."
WARNING_VOLUME_TOO_SMALL = (
    "Warning: very small volume (<{limit} ml), it may be hard to measure accurately."
)


def parse_number(raw: Optional[Number]) -> float:
    """
    Parse a user-entered amount

    Plain decimals ("5", "0.25", ".5", "2.") parse normally; empty,
    malformed or non-finite input is 0.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0

    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return 0.0
        return value if math.isfinite(value) else 0.0

    text = str(raw).strip()
    if not text or text == "." or not DECIMAL_PATTERN.match(text):
        return 0.0
    value = float(text)
    return value if math.isfinite(value) else 0.0


def round_units(units_value: float, precision: Union[RoundingPrecision, str]) -> float:
    """
    Round syringe units to the nearest multiple of the precision step

    Halves round away from zero (2.5 -> 3 with step 1, 1.25 -> 1.5 with
    step 0.5). Rounding an already rounded value returns it unchanged.
    """
    if not isinstance(precision, RoundingPrecision):
        precision = RoundingPrecision(str(precision))

    step = precision.step
    if step <= 0:
        return units_value

    steps = math.floor(abs(units_value) / step + 0.5)
    return math.copysign(steps * step, units_value) if steps else 0.0


class VialCalculator:
    """Calculate reconstitution and dosing for a single vial"""

    @staticmethod
    @lru_cache(maxsize=256)
    def calculate(inputs: CalculatorInputs) -> CalculationResult:
        """
        Derive concentration, draw volume and syringe units

        Args:
            inputs: Raw calculator inputs (vial mg, diluent ml, dose)

        Returns:
            CalculationResult. Never raises; unusable input, or magnitudes
            that would overflow a float, give the all-zero result with
            is_valid=False.
        """
        vial_mg = parse_number(inputs.vial_amount)
        diluent_ml = parse_number(inputs.diluent_volume)
        target_dose = parse_number(inputs.target_dose)

        if vial_mg <= 0 or diluent_ml <= 0 or target_dose <= 0:
            return CalculationResult.empty()

        mg_per_ml = vial_mg / diluent_ml
        if not math.isfinite(mg_per_ml) or mg_per_ml <= 0:
            return CalculationResult.empty()

        if inputs.dose_unit is DoseUnit.MCG:
            dose_mg = units.mcg_to_mg(target_dose)
        else:
            dose_mg = target_dose

        ml_needed = dose_mg / mg_per_ml
        units_u100 = units.ml_to_units(ml_needed)
        if not math.isfinite(units_u100):
            return CalculationResult.empty()

        units_rounded = units_u100
        ml_rounded = ml_needed
        if inputs.rounding_enabled and inputs.rounding_precision is not RoundingPrecision.NONE:
            units_rounded = round_units(units_u100, inputs.rounding_precision)
            # volume always follows the rounded mark, never rounded on its own
            ml_rounded = units.units_to_ml(units_rounded)

        actual_dose_mg = ml_rounded * mg_per_ml

        return CalculationResult(
            concentration_mg_per_ml=mg_per_ml,
            concentration_mcg_per_ml=units.mg_to_mcg(mg_per_ml),
            volume_ml=ml_needed,
            volume_ml_rounded=ml_rounded,
            units_u100=units_u100,
            units_u100_rounded=units_rounded,
            actual_dose_mg=actual_dose_mg,
            actual_dose_mcg=units.mg_to_mcg(actual_dose_mg),
            is_valid=True,
            exceeds_vial=dose_mg > vial_mg,
            volume_too_small=0 < ml_needed < units.MIN_PRACTICAL_VOLUME_ML,
        )

    @staticmethod
    def calculate_inverse(
        inputs: InverseCalculationInputs,
        concentration_mg_per_ml: float
    ) -> InverseCalculationResult:
        """
        Work out the dose contained in a measured volume

        Args:
            inputs: Reading in ml or U-100 units
            concentration_mg_per_ml: Concentration of the reconstituted vial

        Returns:
            InverseCalculationResult; invalid and zeroed when the reading
            or the concentration is not positive
        """
        value = parse_number(inputs.volume_or_units)
        concentration = parse_number(concentration_mg_per_ml)

        if value <= 0 or concentration <= 0:
            return InverseCalculationResult()

        if inputs.input_type is InverseInputType.UNITS:
            volume_ml = units.units_to_ml(value)
        else:
            volume_ml = value

        dose_mg = volume_ml * concentration
        if not math.isfinite(units.mg_to_mcg(dose_mg)):
            return InverseCalculationResult()

        return InverseCalculationResult(
            dose_mg=dose_mg,
            dose_mcg=units.mg_to_mcg(dose_mg),
            is_valid=True,
        )

    @staticmethod
    def warnings_for(result: CalculationResult) -> List[str]:
        """Advisory messages to show next to a valid result"""
        if not result.is_valid:
            return []

        messages = []
        if result.exceeds_vial:
            messages.append(WARNING_EXCEEDS_VIAL)
        elif result.volume_too_small:
            messages.append(WARNING_VOLUME_TOO_SMALL.format(
                limit=format_number(units.MIN_PRACTICAL_VOLUME_ML, 2)
            ))
        return messages

    @staticmethod
    def build_report(
        inputs: CalculatorInputs,
        result: Optional[CalculationResult] = None,
        syringe_ml: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Generate a display-ready reconstitution report

        Args:
            inputs: Calculator inputs
            result: Precomputed result (calculated from inputs if omitted)
            syringe_ml: Barrel size used for the fill gauge

        Returns:
            Dictionary of formatted strings plus warnings
        """
        if result is None:
            result = VialCalculator.calculate(inputs)
        if syringe_ml is None:
            syringe_ml = Config.DEFAULT_SYRINGE_ML

        report = {
            "is_valid": result.is_valid,
            "display_mode": inputs.display_mode.value,
            "vial_mg": format_number(parse_number(inputs.vial_amount)),
            "diluent_ml": format_number(parse_number(inputs.diluent_volume)),
            "target_dose": format_number(parse_number(inputs.target_dose)),
            "dose_unit": inputs.dose_unit.value,
            "warnings": VialCalculator.warnings_for(result),
            "disclaimer": DISCLAIMER,
        }
        if not result.is_valid:
            return report

        fill = units.syringe_fill_fraction(result.units_u100_rounded, syringe_ml)
        report.update({
            "concentration_mg_per_ml": format_number(result.concentration_mg_per_ml),
            "concentration_mcg_per_ml": format_number(result.concentration_mcg_per_ml),
            "volume_ml": format_number(result.volume_ml_rounded),
            "units_u100": format_number(result.units_u100_rounded, 1),
            "actual_dose_mg": format_number(result.actual_dose_mg),
            "actual_dose_mcg": format_number(result.actual_dose_mcg, 1),
            "syringe_ml": format_number(syringe_ml, 2),
            "syringe_capacity_units": format_number(units.syringe_capacity_units(syringe_ml)),
            "syringe_fill_pct": format_number(fill * 100, 0),
            "rounded": result.units_u100_rounded != result.units_u100,
        })
        return report

    @staticmethod
    def print_report(report: Dict[str, Any]) -> None:
        """Print a formatted reconstitution report"""
        print(f"\n{'='*60}")
        print("VIAL RECONSTITUTION REPORT")
        print(f"{'='*60}")
        print("\nVIAL PREPARATION:")
        print(f"  • Vial content: {report['vial_mg']} mg")
        print(f"  • Diluent: {report['diluent_ml']} ml")

        if not report["is_valid"]:
            print("\n  Enter a vial amount, diluent volume and dose greater than 0.")
            print(f"{'='*60}\n")
            return

        print(f"  • Concentration: {report['concentration_mg_per_ml']} mg/ml "
              f"({report['concentration_mcg_per_ml']} mcg/ml)")
        print("\nDOSING INSTRUCTIONS:")
        print(f"  • Target dose: {report['target_dose']} {report['dose_unit']}")

        mode = report["display_mode"]
        if mode in (DisplayMode.ML.value, DisplayMode.BOTH.value):
            print(f"  • Draw volume: {report['volume_ml']} ml")
        if mode in (DisplayMode.U100.value, DisplayMode.BOTH.value):
            print(f"  • Draw the syringe to: {report['units_u100']} units (U-100)")

        if report["rounded"]:
            print(f"  • Actual dose after rounding: {report['actual_dose_mg']} mg "
                  f"({report['actual_dose_mcg']} mcg)")
        print(f"  • Syringe fill: {report['syringe_fill_pct']}% of a "
              f"{report['syringe_ml']} ml ({report['syringe_capacity_units']} unit) syringe")

        for warning in report["warnings"]:
            print(f"\n⚠ {warning}")

        print(f"\n{report['disclaimer']}")
        print(f"{'='*60}\n")


def interactive_calculator():
    """Interactive command-line calculator"""
    print("\n" + "="*60)
    print("VIAL DOSE CALCULATOR")
    print("="*60)

    vial = input("\nVial content (mg): ").strip()
    diluent = input("Diluent to add (ml): ").strip()
    dose = input("Dose per injection: ").strip()
    dose_unit = input("Dose unit [mcg/mg] (default mcg): ").strip().lower() or "mcg"
    precision = input("Round syringe units to [none/1/0.5] (default none): ").strip() or "none"

    inputs = CalculatorInputs.from_dict({
        "vial_amount": vial,
        "diluent_volume": diluent,
        "target_dose": dose,
        "dose_unit": dose_unit,
        "rounding_enabled": precision != "none",
        "rounding_precision": precision,
    })

    report = VialCalculator.build_report(inputs)
    VialCalculator.print_report(report)


if __name__ == "__main__":
    # Example: 5 mg vial, 1 ml diluent, 250 mcg dose
    example = VialCalculator.build_report(CalculatorInputs(
        vial_amount="5",
        diluent_volume="1",
        target_dose="250",
        dose_unit=DoseUnit.MCG,
    ))
    VialCalculator.print_report(example)

    interactive_calculator()
