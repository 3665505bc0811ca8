#!/usr/bin/env python3
"""
Quick Setup Script for Vial Dose Calculator
Creates the database and runs a sample calculation
"""

import os
import sys


def main():
    print("\n" + "="*70)
    print(" VIAL DOSE CALCULATOR - QUICK SETUP")
    print("="*70)

    print("\nThis script will:")
    print("1. Install required Python packages")
    print("2. Create the SQLite database for saved inputs")
    print("3. Run a test calculation")

    response = input("\nContinue? (y/n): ").strip().lower()
    if response != 'y':
        print("Setup cancelled.")
        return

    print("\n" + "-"*70)
    print("Step 1: Installing dependencies...")
    print("-"*70)
    os.system(f"{sys.executable} -m pip install -q -r requirements.txt")
    print("✓ Dependencies installed")

    print("\n" + "-"*70)
    print("Step 2: Creating database...")
    print("-"*70)

    from config import Config
    from models import create_database

    create_database(Config.DATABASE_URL)
    print(f"✓ Database ready: {Config.DATABASE_URL}")

    print("\n" + "-"*70)
    print("Step 3: Testing calculator...")
    print("-"*70)

    from calculator import VialCalculator
    from calculator_types import CalculatorInputs

    report = VialCalculator.build_report(CalculatorInputs(
        vial_amount="5",
        diluent_volume="1",
        target_dose="250",
        dose_unit="mcg",
    ))

    VialCalculator.print_report(report)

    print("\n" + "="*70)
    print(" SETUP COMPLETE!")
    print("="*70)
    print("\nYou can now:")
    print("  • Run the CLI: python cli.py")
    print("  • Start the web app: python app.py")
    print("  • Use the calculator: python calculator.py")
    print("="*70 + "\n")


if __name__ == "__main__":
    main()
