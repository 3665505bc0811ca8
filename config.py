"""
Configuration for Vial Dose Calculator
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Application configuration"""

    # Where last-used inputs are kept; any SQLAlchemy URL works
    DATABASE_URL = os.getenv("DATABASE_URL")

    # If no DATABASE_URL is set, fall back to SQLite for local development
    if not DATABASE_URL:
        DATABASE_URL = "sqlite:///vial_calculator.db"

    # Key the calculator state is saved under
    STORAGE_KEY = os.getenv("STORAGE_KEY", "vial-calculator-state")

    # Display settings
    DECIMAL_SEPARATOR = os.getenv("DECIMAL_SEPARATOR", ".")
    DEFAULT_SYRINGE_ML = float(os.getenv("DEFAULT_SYRINGE_ML", "0.3"))

    # Application settings
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    DEBUG = os.getenv("DEBUG", "True").lower() == "true"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def get_database_url(cls, use_sqlite: bool = False) -> str:
        """Get database URL, optionally forcing SQLite"""
        if use_sqlite:
            return "sqlite:///vial_calculator.db"
        return cls.DATABASE_URL

    @classmethod
    def print_config(cls):
        """Print current configuration (hiding sensitive data)"""
        print("\n" + "="*60)
        print("VIAL DOSE CALCULATOR CONFIGURATION")
        print("="*60)
        print(f"Database: {cls.DATABASE_URL}")
        print(f"Storage key: {cls.STORAGE_KEY}")
        print(f"Decimal separator: '{cls.DECIMAL_SEPARATOR}'")
        print(f"Default syringe: {cls.DEFAULT_SYRINGE_ML} ml")
        print(f"Secret key: {'Configured' if os.getenv('SECRET_KEY') else 'Using development default'}")
        print(f"Debug mode: {cls.DEBUG}")
        print(f"Log level: {cls.LOG_LEVEL}")
        print("="*60 + "\n")


if __name__ == "__main__":
    Config.print_config()
