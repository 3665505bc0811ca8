"""
Tests for unit conversions and pen mode
"""

import pytest

import units
from calculator_types import PenConversionResult


class TestFixedRatios:

    def test_iu_mg_ratio(self):
        assert units.mg_to_iu(4) == 12
        assert units.iu_to_mg(12) == pytest.approx(4.0)
        assert units.iu_to_mg(units.mg_to_iu(1.333)) == pytest.approx(1.333)

    def test_mass_ratio(self):
        assert units.mg_to_mcg(0.25) == pytest.approx(250.0)
        assert units.mcg_to_mg(250) == pytest.approx(0.25)

    def test_u100_scale(self):
        assert units.ml_to_units(1) == 100
        assert units.units_to_ml(30) == pytest.approx(0.3)


class TestClicks:

    @pytest.mark.parametrize("dose_iu, clicks", [(4, 4), (2.4, 2), (2.5, 3), (0.49, 0), (0, 0), (-3, 0)])
    def test_iu_to_clicks_rounds_half_up(self, dose_iu, clicks):
        assert units.iu_to_clicks(dose_iu) == clicks

    def test_clicks_are_ints(self):
        assert isinstance(units.iu_to_clicks(3.7), int)

    def test_clicks_to_iu(self):
        assert units.clicks_to_iu(5) == 5


class TestPenConversion:

    def test_twelve_iu_cartridge(self):
        result = units.convert_pen_dose(cartridge_iu=12, dose_iu=4)

        assert result.is_valid
        assert result.concentration_iu_per_ml == pytest.approx(4.0)
        assert result.clicks_needed == 4
        assert result.volume_ml == pytest.approx(1.0)
        assert result.dose_mg == pytest.approx(4 / 3)
        assert result.cartridge_mg == pytest.approx(4.0)
        assert not result.exceeds_cartridge

    def test_pen_helpers_match_conversion(self):
        concentration = units.pen_concentration(36)
        assert concentration == pytest.approx(12.0)
        assert units.pen_volume_ml(6, concentration) == pytest.approx(0.5)

    def test_dose_above_cartridge(self):
        result = units.convert_pen_dose(cartridge_iu=12, dose_iu=15)
        assert result.is_valid
        assert result.exceeds_cartridge

    @pytest.mark.parametrize("cartridge, dose", [(0, 4), (12, 0), (-12, 4)])
    def test_invalid_inputs(self, cartridge, dose):
        assert units.convert_pen_dose(cartridge, dose) == PenConversionResult()

    def test_non_finite_inputs(self):
        assert not units.convert_pen_dose(float("inf"), 4).is_valid
        assert not units.convert_pen_dose(12, float("nan")).is_valid

    def test_mg_entry_goes_through_iu(self):
        # a 4 mg cartridge is 12 IU
        result = units.convert_pen_dose(units.mg_to_iu(4), units.mg_to_iu(1))
        assert result.clicks_needed == 3
        assert result.volume_ml == pytest.approx(0.75)


class TestSyringe:

    def test_capacity(self):
        assert units.syringe_capacity_units(0.3) == pytest.approx(30.0)
        assert units.syringe_capacity_units(1.0) == pytest.approx(100.0)

    def test_fill_fraction(self):
        assert units.syringe_fill_fraction(15, 0.3) == pytest.approx(0.5)
        assert units.syringe_fill_fraction(60, 0.3) == 1.0
        assert units.syringe_fill_fraction(-1, 0.3) == 0.0
        assert units.syringe_fill_fraction(10, 0) == 0.0
