"""
Vial Dose Calculator Web Application

JSON API and a minimal page around the calculator core:
- reconstitution (vial + diluent + dose -> volume / U-100 units)
- inverse calculation (measured volume -> dose)
- pen conversion (IU -> clicks)
- last-used inputs, saved per storage key
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request, render_template_string
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import BadRequest

from calculator import VialCalculator, DISCLAIMER, parse_number
from calculator_types import CalculatorInputs, InverseCalculationInputs
from config import Config
from database import CalculatorStateDB
from models import get_session
import units


app = Flask(__name__)
app.config["SECRET_KEY"] = Config.SECRET_KEY
app.config["DATABASE_URL"] = Config.DATABASE_URL
app.config["STORAGE_KEY"] = Config.STORAGE_KEY
app.logger.setLevel(getattr(logging, Config.LOG_LEVEL, logging.INFO))


INDEX_TEMPLATE = """
<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>Vial Dose Calculator</title></head>
<body>
  <h1>Vial Dose Calculator</h1>
  <form method="get" action="/">
    <label>Vial (mg) <input name="vial_amount" value="{{ inputs.vial_amount }}"></label>
    <label>Diluent (ml) <input name="diluent_volume" value="{{ inputs.diluent_volume }}"></label>
    <label>Dose <input name="target_dose" value="{{ inputs.target_dose }}"></label>
    <select name="dose_unit">
      {% for unit in ("mcg", "mg") %}
      <option value="{{ unit }}" {% if inputs.dose_unit.value == unit %}selected{% endif %}>{{ unit }}</option>
      {% endfor %}
    </select>
    <button type="submit">Calculate</button>
  </form>
  {% if report.is_valid %}
  <p>Draw the syringe to <strong>{{ report.units_u100 }}</strong> units ({{ report.volume_ml }} ml).</p>
  <p>Concentration: {{ report.concentration_mg_per_ml }} mg/ml</p>
  {% for warning in report.warnings %}<p class="warning">{{ warning }}</p>{% endfor %}
  {% else %}
  <p>Enter a vial amount, diluent volume and dose greater than 0.</p>
  {% endif %}
  <p><small>{{ report.disclaimer }}</small></p>
</body>
</html>
"""


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _json_body() -> Optional[Dict[str, Any]]:
    """Request JSON as a dict; {} for an empty body, None when malformed"""
    if not request.get_data():
        return {}
    try:
        payload = request.get_json(force=True)
    except BadRequest:
        return None
    return payload if isinstance(payload, dict) else None


def _bad_request(message: str) -> Tuple[Any, int]:
    return jsonify({"success": False, "error": message}), 400


def _load_saved_inputs() -> CalculatorInputs:
    """Last-used inputs, or the defaults if the store is unavailable"""
    try:
        db = get_session(app.config["DATABASE_URL"])
        try:
            return CalculatorStateDB(db).load_inputs(app.config["STORAGE_KEY"])
        finally:
            db.close()
    except SQLAlchemyError:
        app.logger.exception("Could not load calculator state (non-fatal)")
        return CalculatorInputs()


def _save_inputs(inputs: CalculatorInputs) -> bool:
    try:
        db = get_session(app.config["DATABASE_URL"])
        try:
            CalculatorStateDB(db).save_inputs(app.config["STORAGE_KEY"], inputs)
            return True
        finally:
            db.close()
    except SQLAlchemyError:
        app.logger.exception("Could not save calculator state (non-fatal)")
        return False


# -----------------------------------------------------------------------------
# Pages
# -----------------------------------------------------------------------------
@app.route("/")
def index():
    """Calculator page; query string overrides the saved inputs for this view only"""
    inputs = CalculatorInputs.from_dict(request.args.to_dict(), base=_load_saved_inputs())
    report = VialCalculator.build_report(inputs)
    return render_template_string(INDEX_TEMPLATE, inputs=inputs, report=report)


@app.route("/medical-disclaimer")
def medical_disclaimer():
    """Medical Disclaimer"""
    return jsonify({"disclaimer": DISCLAIMER})


# -----------------------------------------------------------------------------
# Calculator API
# -----------------------------------------------------------------------------
@app.route("/api/calculate", methods=["POST"])
def api_calculate():
    """
    POST JSON CalculatorInputs (missing fields fall back to the saved inputs).
    Returns: {success, inputs, result, warnings, report, saved}
    """
    payload = _json_body()
    if payload is None:
        return _bad_request("Request body must be a JSON object")

    inputs = CalculatorInputs.from_dict(payload, base=_load_saved_inputs())
    syringe_ml = parse_number(payload.get("syringe_ml")) or Config.DEFAULT_SYRINGE_ML

    result = VialCalculator.calculate(inputs)
    saved = _save_inputs(inputs)

    return jsonify({
        "success": True,
        "inputs": inputs.to_dict(),
        "result": result.to_dict(),
        "warnings": VialCalculator.warnings_for(result),
        "report": VialCalculator.build_report(inputs, result, syringe_ml),
        "saved": saved,
    })


@app.route("/api/inverse", methods=["POST"])
def api_inverse():
    """
    POST JSON {volume_or_units, input_type: "ml"|"units", concentration_mg_per_ml}.
    Instead of concentration_mg_per_ml, "inputs" may carry calculator inputs
    the concentration is derived from.
    """
    payload = _json_body()
    if payload is None:
        return _bad_request("Request body must be a JSON object")

    concentration = payload.get("concentration_mg_per_ml")
    if concentration is None:
        nested = payload.get("inputs")
        if nested is not None and not isinstance(nested, dict):
            return _bad_request("'inputs' must be a JSON object")
        base_inputs = CalculatorInputs.from_dict(nested or {}, base=_load_saved_inputs())
        concentration = VialCalculator.calculate(base_inputs).concentration_mg_per_ml

    inverse_inputs = InverseCalculationInputs.from_dict(payload)
    result = VialCalculator.calculate_inverse(inverse_inputs, parse_number(concentration))

    return jsonify({
        "success": True,
        "concentration_mg_per_ml": parse_number(concentration),
        "result": result.to_dict(),
    })


@app.route("/api/pen", methods=["POST"])
def api_pen():
    """
    POST JSON with cartridge_iu or cartridge_mg, and dose_iu or dose_mg.
    Returns clicks, injected volume and mg equivalents.
    """
    payload = _json_body()
    if payload is None:
        return _bad_request("Request body must be a JSON object")

    if payload.get("cartridge_iu") is not None:
        cartridge_iu = parse_number(payload.get("cartridge_iu"))
    else:
        cartridge_iu = units.mg_to_iu(parse_number(payload.get("cartridge_mg")))

    if payload.get("dose_iu") is not None:
        dose_iu = parse_number(payload.get("dose_iu"))
    else:
        dose_iu = units.mg_to_iu(parse_number(payload.get("dose_mg")))

    result = units.convert_pen_dose(cartridge_iu, dose_iu)
    return jsonify({
        "success": True,
        "cartridge_iu": cartridge_iu,
        "dose_iu": dose_iu,
        "cartridge_ml": units.PEN_CARTRIDGE_ML,
        "result": result.to_dict(),
    })


# -----------------------------------------------------------------------------
# Saved state API
# -----------------------------------------------------------------------------
@app.route("/api/state", methods=["GET"])
def api_get_state():
    return jsonify({"success": True, "inputs": _load_saved_inputs().to_dict()})


@app.route("/api/state", methods=["PUT"])
def api_put_state():
    payload = _json_body()
    if payload is None:
        return _bad_request("Request body must be a JSON object")

    inputs = CalculatorInputs.from_dict(payload, base=_load_saved_inputs())
    if not _save_inputs(inputs):
        return jsonify({"success": False, "error": "Could not save calculator state"}), 500
    return jsonify({"success": True, "inputs": inputs.to_dict()})


@app.route("/api/state", methods=["DELETE"])
def api_delete_state():
    try:
        db = get_session(app.config["DATABASE_URL"])
        try:
            cleared = CalculatorStateDB(db).clear_inputs(app.config["STORAGE_KEY"])
        finally:
            db.close()
    except SQLAlchemyError:
        app.logger.exception("Could not clear calculator state")
        return jsonify({"success": False, "error": "Could not clear calculator state"}), 500
    return jsonify({"success": True, "cleared": cleared})


if __name__ == "__main__":
    import os
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=Config.DEBUG)
