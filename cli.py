#!/usr/bin/env python3
"""
Vial Dose Calculator CLI
Command-line interface for reconstitution, inverse and pen calculations
"""

from models import get_session
from database import CalculatorStateDB
from calculator import VialCalculator, parse_number
from calculator_types import CalculatorInputs, InverseCalculationInputs
from formatting import format_number
from config import Config
import units


class CalculatorCLI:
    """Command-line interface for the dose calculator"""

    def __init__(self, use_sqlite=True):
        """Initialize CLI with database session"""
        self.db_url = Config.get_database_url(use_sqlite=use_sqlite)
        self.session = get_session(self.db_url)
        self.db = CalculatorStateDB(self.session)
        self.storage_key = Config.STORAGE_KEY

    def run(self):
        """Main CLI loop"""
        print("\n" + "="*60)
        print("VIAL DOSE CALCULATOR CLI")
        print("="*60)

        try:
            while True:
                print("\nMAIN MENU:")
                print("1. Calculate reconstitution")
                print("2. Dose from a measured volume")
                print("3. Pen conversion (IU -> clicks)")
                print("4. View saved inputs")
                print("5. Exit")

                choice = input("\nSelect option (1-5): ").strip()

                if choice == "1":
                    self.calculate_reconstitution()
                elif choice == "2":
                    self.calculate_inverse()
                elif choice == "3":
                    self.pen_conversion()
                elif choice == "4":
                    self.view_saved_inputs()
                elif choice == "5":
                    print("\nGoodbye!")
                    break
                else:
                    print("Invalid option. Please try again.")
        finally:
            self.session.close()

    def _ask(self, prompt, current):
        """Prompt with the saved value as default"""
        answer = input(f"{prompt} [{current}]: ").strip()
        return answer or current

    def calculate_reconstitution(self):
        """Interactive reconstitution calculator"""
        print("\n" + "="*60)
        print("RECONSTITUTION CALCULATOR")
        print("="*60)

        saved = self.db.load_inputs(self.storage_key)

        vial = self._ask("\nVial content (mg)", saved.vial_amount)
        diluent = self._ask("Diluent to add (ml)", saved.diluent_volume)
        dose_unit = self._ask("Dose unit (mcg/mg)", saved.dose_unit.value).lower()
        dose = self._ask(f"Dose per injection ({dose_unit})", saved.target_dose)
        precision = self._ask(
            "Round syringe units (none/1/0.5)",
            saved.rounding_precision.value if saved.rounding_enabled else "none"
        )
        syringe_ml = parse_number(self._ask("Syringe size (ml)", Config.DEFAULT_SYRINGE_ML))

        inputs = CalculatorInputs.from_dict({
            "vial_amount": vial,
            "diluent_volume": diluent,
            "target_dose": dose,
            "dose_unit": dose_unit,
            "rounding_enabled": precision != "none",
            "rounding_precision": precision,
        }, base=saved)

        report = VialCalculator.build_report(inputs, syringe_ml=syringe_ml or None)
        VialCalculator.print_report(report)
        self.db.save_inputs(self.storage_key, inputs)

    def calculate_inverse(self):
        """Work out the dose in a volume already drawn"""
        print("\n" + "="*60)
        print("DOSE FROM VOLUME")
        print("="*60)

        saved = self.db.load_inputs(self.storage_key)
        concentration = VialCalculator.calculate(saved).concentration_mg_per_ml
        answer = input(
            f"\nConcentration (mg/ml) [{format_number(concentration)}]: "
        ).strip()
        if answer:
            concentration = parse_number(answer)

        input_type = input("Reading in (units/ml) [units]: ").strip().lower() or "units"
        reading = input(f"Reading ({input_type}): ").strip()

        result = VialCalculator.calculate_inverse(
            InverseCalculationInputs(volume_or_units=reading, input_type=input_type),
            concentration
        )
        if not result.is_valid:
            print("\n⚠ Enter a reading and a concentration greater than 0.")
            return

        print(f"\n✓ Dose: {format_number(result.dose_mg)} mg "
              f"({format_number(result.dose_mcg, 1)} mcg)")

    def pen_conversion(self):
        """IU dose -> pen clicks"""
        print("\n" + "="*60)
        print("PEN CONVERSION")
        print("="*60)

        amount_unit = input("\nEnter amounts in (iu/mg) [iu]: ").strip().lower() or "iu"
        cartridge = parse_number(input(f"Cartridge content ({amount_unit}): "))
        dose = parse_number(input(f"Dose ({amount_unit}): "))

        if amount_unit == "mg":
            cartridge = units.mg_to_iu(cartridge)
            dose = units.mg_to_iu(dose)

        result = units.convert_pen_dose(cartridge, dose)
        if not result.is_valid:
            print("\n⚠ Enter a cartridge content and a dose greater than 0.")
            return

        print(f"\n✓ Concentration: {format_number(result.concentration_iu_per_ml)} IU/ml "
              f"in a {format_number(units.PEN_CARTRIDGE_ML)} ml cartridge")
        print(f"✓ Dial: {result.clicks_needed} clicks")
        print(f"✓ Injected volume: {format_number(result.volume_ml)} ml")
        print(f"✓ Dose: {format_number(dose)} IU = {format_number(result.dose_mg)} mg")
        if result.exceeds_cartridge:
            print("\n⚠ Warning: the dose exceeds the total content of the cartridge.")

    def view_saved_inputs(self):
        """Show the inputs stored from the last calculation"""
        saved = self.db.load_inputs(self.storage_key)

        print("\n" + "="*60)
        print("SAVED INPUTS")
        print("="*60)
        for key, value in saved.to_dict().items():
            print(f"  {key}: {value}")


def main():
    """Main entry point"""
    cli = CalculatorCLI()
    cli.run()


if __name__ == "__main__":
    main()
