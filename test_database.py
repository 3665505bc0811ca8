"""
Tests for the saved-inputs store
"""

import pytest

from calculator_types import CalculatorInputs, DoseUnit, RoundingPrecision
from database import CalculatorStateDB
from models import CalculatorState, dispose_engines, get_session


@pytest.fixture
def db(tmp_path):
    session = get_session(f"sqlite:///{tmp_path / 'state.db'}")
    yield CalculatorStateDB(session)
    session.close()
    dispose_engines()


def test_sessions_share_one_engine_per_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'shared.db'}"
    first, second = get_session(url), get_session(url)
    try:
        assert first.get_bind() is second.get_bind()
        assert first is not second
    finally:
        first.close()
        second.close()
        dispose_engines()


def test_missing_key_returns_default(db):
    default = CalculatorInputs(vial_amount="10")
    assert db.load_inputs("nothing-here", default) == default
    assert db.load_inputs("nothing-here") == CalculatorInputs()


def test_save_and_load(db):
    inputs = CalculatorInputs(
        vial_amount="15",
        diluent_volume="3",
        target_dose="2",
        dose_unit=DoseUnit.MG,
        rounding_enabled=True,
        rounding_precision=RoundingPrecision.HALF,
    )
    db.save_inputs("calc", inputs)

    assert db.load_inputs("calc") == inputs


def test_save_replaces_existing_row(db):
    db.save_inputs("calc", CalculatorInputs(vial_amount="5"))
    db.save_inputs("calc", CalculatorInputs(vial_amount="10"))

    assert db.session.query(CalculatorState).count() == 1
    assert db.load_inputs("calc").vial_amount == "10"


def test_keys_are_independent(db):
    db.save_inputs("a", CalculatorInputs(vial_amount="5"))
    db.save_inputs("b", CalculatorInputs(vial_amount="10"))

    assert db.load_inputs("a").vial_amount == "5"
    assert db.load_inputs("b").vial_amount == "10"


def test_corrupt_payload_falls_back_to_default(db):
    db.session.add(CalculatorState(storage_key="calc", payload="{not json"))
    db.session.commit()

    assert db.load_inputs("calc") == CalculatorInputs()


def test_non_object_payload_falls_back_to_default(db):
    db.session.add(CalculatorState(storage_key="calc", payload="[1, 2]"))
    db.session.commit()

    assert db.load_inputs("calc") == CalculatorInputs()


def test_partial_payload_merges_with_default(db):
    db.session.add(CalculatorState(storage_key="calc", payload='{"target_dose": "500", "dose_unit": "bogus"}'))
    db.session.commit()

    loaded = db.load_inputs("calc")
    assert loaded.target_dose == "500"
    assert loaded.dose_unit is DoseUnit.MCG
    assert loaded.vial_amount == "5"


def test_clear(db):
    db.save_inputs("calc", CalculatorInputs(vial_amount="10"))

    assert db.clear_inputs("calc") is True
    assert db.clear_inputs("calc") is False
    assert db.load_inputs("calc") == CalculatorInputs()
