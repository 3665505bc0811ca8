"""
Vial Dose Calculator Database Models
SQLAlchemy ORM model for the last-used calculator inputs
"""

from datetime import datetime
from sqlalchemy import create_engine, Column, Integer, String, Text, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()

DEFAULT_DB_URL = "sqlite:///vial_calculator.db"


class CalculatorState(Base):
    """Saved calculator form, one row per storage key"""
    __tablename__ = 'calculator_state'

    id = Column(Integer, primary_key=True)
    storage_key = Column(String(100), nullable=False, unique=True)
    payload = Column(Text, nullable=False)  # JSON of CalculatorInputs.to_dict()

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<CalculatorState(storage_key='{self.storage_key}')>"


# One engine per database URL, reused by every session
_engines = {}


# Database initialization functions
def create_database(db_url=DEFAULT_DB_URL, echo=False):
    """Create all tables in the database"""
    engine = create_engine(db_url, echo=echo)
    Base.metadata.create_all(engine)
    return engine


def get_session(db_url=DEFAULT_DB_URL):
    """Get a database session (tables are created the first time a URL is used)"""
    engine = _engines.get(db_url)
    if engine is None:
        engine = _engines[db_url] = create_database(db_url)
    Session = sessionmaker(bind=engine)
    return Session()


def dispose_engines():
    """Close pooled connections of every cached engine"""
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()


if __name__ == "__main__":
    # Create tables if running this file directly
    print("Creating database tables...")
    engine = create_database(echo=True)
    print("Database tables created successfully!")
