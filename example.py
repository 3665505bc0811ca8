#!/usr/bin/env python3
"""
Example Usage Script
Demonstrates how to use the calculator core programmatically
"""

from calculator import VialCalculator
from calculator_types import CalculatorInputs, InverseCalculationInputs
from formatting import format_number
import units


def example_workflow():
    """Example workflow: reconstitute, round, check the drawn dose, pen mode"""

    print("\n" + "="*70)
    print(" VIAL DOSE CALCULATOR - EXAMPLE WORKFLOW")
    print("="*70)

    # ========== STEP 1: Reconstitute a 5 mg vial ==========
    print("\n[STEP 1] 5 mg vial + 1 ml diluent, 250 mcg dose...")
    inputs = CalculatorInputs(vial_amount="5", diluent_volume="1", target_dose="250", dose_unit="mcg")
    result = VialCalculator.calculate(inputs)

    print(f"✓ Concentration: {format_number(result.concentration_mg_per_ml)} mg/ml")
    print(f"✓ Draw: {format_number(result.volume_ml)} ml ({format_number(result.units_u100, 1)} units)")

    # ========== STEP 2: Round to whole syringe units ==========
    print("\n[STEP 2] 10 mg vial + 2 ml diluent, 125 mcg dose, rounded to 1 unit...")
    rounded_inputs = CalculatorInputs(
        vial_amount="10",
        diluent_volume="2",
        target_dose="125",
        dose_unit="mcg",
        rounding_enabled=True,
        rounding_precision="1",
    )
    rounded = VialCalculator.calculate(rounded_inputs)

    print(f"✓ Raw mark: {format_number(rounded.units_u100, 2)} units")
    print(f"✓ Rounded mark: {format_number(rounded.units_u100_rounded, 1)} units")
    print(f"✓ Dose actually delivered: {format_number(rounded.actual_dose_mcg, 1)} mcg")

    # ========== STEP 3: What dose is in what I drew? ==========
    print("\n[STEP 3] Dose contained in 7 units of the first vial...")
    inverse = VialCalculator.calculate_inverse(
        InverseCalculationInputs(volume_or_units="7", input_type="units"),
        result.concentration_mg_per_ml
    )
    print(f"✓ {format_number(inverse.dose_mcg, 1)} mcg")

    # ========== STEP 4: Warnings ==========
    print("\n[STEP 4] Checking an oversized dose...")
    too_big = CalculatorInputs(vial_amount="5", diluent_volume="1", target_dose="6", dose_unit="mg")
    for warning in VialCalculator.warnings_for(VialCalculator.calculate(too_big)):
        print(f"⚠ {warning}")

    # ========== STEP 5: Pen mode ==========
    print("\n[STEP 5] 12 IU cartridge, 4 IU dose...")
    pen = units.convert_pen_dose(cartridge_iu=12, dose_iu=4)
    print(f"✓ {format_number(pen.concentration_iu_per_ml)} IU/ml, "
          f"{pen.clicks_needed} clicks, {format_number(pen.volume_ml)} ml "
          f"({format_number(pen.dose_mg)} mg)")

    # ========== STEP 6: Full report ==========
    print("\n[STEP 6] Full report...")
    VialCalculator.print_report(VialCalculator.build_report(rounded_inputs, rounded))

    print("="*70)
    print(" EXAMPLE COMPLETE")
    print("="*70 + "\n")


if __name__ == "__main__":
    example_workflow()
