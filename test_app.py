"""
Tests for the Flask JSON API
"""

import pytest

from app import app as flask_app
from models import dispose_engines


@pytest.fixture
def client(tmp_path):
    flask_app.config.update(
        TESTING=True,
        DATABASE_URL=f"sqlite:///{tmp_path / 'app.db'}",
        STORAGE_KEY="test-state",
    )
    with flask_app.test_client() as client:
        yield client
    dispose_engines()


def test_calculate(client):
    response = client.post("/api/calculate", json={
        "vial_amount": "5",
        "diluent_volume": "1",
        "target_dose": "250",
        "dose_unit": "mcg",
    })
    assert response.status_code == 200

    data = response.get_json()
    assert data["success"]
    assert data["saved"]
    assert data["result"]["is_valid"]
    assert data["result"]["units_u100"] == pytest.approx(5.0)
    assert data["result"]["concentration_mg_per_ml"] == pytest.approx(5.0)
    assert data["report"]["units_u100"] == "5"
    assert data["warnings"] == []


def test_calculate_with_rounding_and_warning(client):
    response = client.post("/api/calculate", json={
        "vial_amount": "10",
        "diluent_volume": "5",
        "target_dose": "1",
        "dose_unit": "mcg",
        "rounding_enabled": True,
        "rounding_precision": "0.5",
    })
    data = response.get_json()

    assert data["result"]["volume_too_small"]
    assert data["result"]["units_u100_rounded"] == 0
    assert len(data["warnings"]) == 1


def test_calculate_invalid_inputs_still_succeed(client):
    response = client.post("/api/calculate", json={"vial_amount": "0"})
    data = response.get_json()

    assert response.status_code == 200
    assert not data["result"]["is_valid"]
    assert data["result"]["units_u100"] == 0


def test_calculate_rejects_malformed_json(client):
    response = client.post("/api/calculate", data="{not json", content_type="application/json")
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_calculate_with_integer_too_large_for_a_float(client):
    body = '{"vial_amount": 1' + "0" * 400 + ', "diluent_volume": "1", "target_dose": "250"}'
    response = client.post("/api/calculate", data=body, content_type="application/json")
    data = response.get_json()

    assert response.status_code == 200
    assert not data["result"]["is_valid"]
    assert data["result"]["concentration_mg_per_ml"] == 0


def test_calculate_rejects_non_object(client):
    response = client.post("/api/calculate", json=[1, 2, 3])
    assert response.status_code == 400


def test_calculate_saves_state(client):
    client.post("/api/calculate", json={"vial_amount": "15", "target_dose": "2", "dose_unit": "mg"})

    data = client.get("/api/state").get_json()
    assert data["inputs"]["vial_amount"] == "15"
    assert data["inputs"]["dose_unit"] == "mg"
    # untouched fields keep their defaults
    assert data["inputs"]["diluent_volume"] == "1"


def test_state_put_and_delete(client):
    response = client.put("/api/state", json={"vial_amount": "10", "diluent_volume": "2"})
    assert response.get_json()["inputs"]["diluent_volume"] == "2"

    assert client.get("/api/state").get_json()["inputs"]["vial_amount"] == "10"

    assert client.delete("/api/state").get_json()["cleared"] is True
    assert client.get("/api/state").get_json()["inputs"]["vial_amount"] == "5"
    assert client.delete("/api/state").get_json()["cleared"] is False


def test_inverse_with_concentration(client):
    response = client.post("/api/inverse", json={
        "volume_or_units": "10",
        "input_type": "units",
        "concentration_mg_per_ml": 5,
    })
    data = response.get_json()

    assert data["result"]["is_valid"]
    assert data["result"]["dose_mcg"] == pytest.approx(500.0)


def test_inverse_derives_concentration_from_inputs(client):
    response = client.post("/api/inverse", json={
        "volume_or_units": "0.1",
        "input_type": "ml",
        "inputs": {"vial_amount": "10", "diluent_volume": "2"},
    })
    data = response.get_json()

    assert data["concentration_mg_per_ml"] == pytest.approx(5.0)
    assert data["result"]["dose_mg"] == pytest.approx(0.5)


def test_inverse_invalid_reading(client):
    response = client.post("/api/inverse", json={"volume_or_units": "", "concentration_mg_per_ml": 5})
    assert not response.get_json()["result"]["is_valid"]


def test_pen_in_iu(client):
    data = client.post("/api/pen", json={"cartridge_iu": 12, "dose_iu": 4}).get_json()

    assert data["result"]["clicks_needed"] == 4
    assert data["result"]["concentration_iu_per_ml"] == pytest.approx(4.0)
    assert data["result"]["volume_ml"] == pytest.approx(1.0)


def test_pen_in_mg(client):
    data = client.post("/api/pen", json={"cartridge_mg": 4, "dose_mg": "1"}).get_json()

    assert data["cartridge_iu"] == pytest.approx(12.0)
    assert data["result"]["clicks_needed"] == 3


def test_index_page(client):
    response = client.get("/?vial_amount=5&diluent_volume=1&target_dose=250")
    assert response.status_code == 200
    assert b"Vial Dose Calculator" in response.data
    assert b"<strong>5</strong>" in response.data


def test_index_page_does_not_change_saved_state(client):
    client.put("/api/state", json={"vial_amount": "10"})

    response = client.get("/?vial_amount=15")
    assert b'value="15"' in response.data

    assert client.get("/api/state").get_json()["inputs"]["vial_amount"] == "10"


def test_disclaimer(client):
    data = client.get("/medical-disclaimer").get_json()
    assert "educational" in data["disclaimer"]
