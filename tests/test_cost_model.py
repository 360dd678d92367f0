import math
from fractions import Fraction

import numpy as np
import pytest

from conftest import make_inputs
from ev_cost_model import (
    EFFICIENCY_FACTORS, InputErrorKind, InputValidationError, VehicleClass, battery_capacity_kwh,
    calculate_costs, yearly_emissions_kg,
)


def test_four_wheeler_scenario(car_inputs):
    result = calculate_costs(car_inputs)

    assert result.ev_cost_per_km == pytest.approx(1.6)
    assert result.petrol_cost_per_km == pytest.approx(100 / 15)
    assert result.yearly_savings == pytest.approx((100 / 15 - 1.6) * 14600)
    assert result.yearly_savings == pytest.approx(73973.33, abs=0.01)
    assert result.break_even_years == pytest.approx(500000 / result.yearly_savings)
    assert result.break_even_years == pytest.approx(6.76, abs=0.01)
    assert result.breaks_even


def test_four_wheeler_co2(car_inputs):
    result = calculate_costs(car_inputs)
    # 973.33 L * 2.3 kg - 14600 km * 0.1 kg
    assert result.co2_savings_per_year == pytest.approx(14600 / 15 * 2.3 - 1460)


def test_two_wheeler_uses_class_factors(car_inputs, bike_inputs):
    car = calculate_costs(car_inputs)
    bike = calculate_costs(bike_inputs)

    assert battery_capacity_kwh(300, VehicleClass.TWO_WHEELER) == pytest.approx(30)
    assert bike.ev_cost_per_km == pytest.approx(8 * 30 * 0.6 / 300)
    assert bike.petrol_cost_per_km == pytest.approx(100 / (15 * 1.4))
    assert bike.ev_cost_per_km != pytest.approx(car.ev_cost_per_km)


def test_efficiency_factor_table():
    two = EFFICIENCY_FACTORS[VehicleClass.TWO_WHEELER]
    four = EFFICIENCY_FACTORS[VehicleClass.FOUR_WHEELER]
    assert (two.ev, two.petrol, two.co2) == (0.6, 1.4, 0.5)
    assert (four.ev, four.petrol, four.co2) == (1.0, 1.0, 1.0)


@pytest.mark.parametrize("vehicle_class", list(VehicleClass))
@pytest.mark.parametrize("daily_distance", [1.0, 37.5, 120.0])
def test_month_and_five_year_relations_are_exact(vehicle_class, daily_distance):
    result = calculate_costs(make_inputs(vehicle_class, daily_distance=daily_distance))
    assert result.monthly_cost.ev == result.daily_cost.ev * 30
    assert result.monthly_cost.petrol == result.daily_cost.petrol * 30
    assert result.five_year_savings == result.yearly_savings * 5


def test_break_even_is_infinite_when_ev_costs_more_per_km():
    result = calculate_costs(make_inputs(electricity_rate=100.0))
    assert result.petrol_cost_per_km <= result.ev_cost_per_km
    assert result.yearly_savings < 0
    assert result.break_even_years == math.inf
    assert not result.breaks_even


def test_break_even_is_infinite_when_costs_are_equal():
    result = calculate_costs(make_inputs(electricity_rate=5.0, fuel_price=15.0))
    assert result.ev_cost_per_km == result.petrol_cost_per_km
    assert result.yearly_savings == 0
    assert math.isinf(result.break_even_years)


def test_break_even_negative_when_ev_is_cheaper_to_buy():
    result = calculate_costs(make_inputs(ev_price=900_000.0))
    assert result.break_even_years < 0


@pytest.mark.parametrize("overrides", [
    {},
    {"electricity_rate": 100.0},
    {"petrol_mileage": 80.0},
    {"fuel_price": 1.0, "electricity_rate": 50.0},
])
@pytest.mark.parametrize("vehicle_class", list(VehicleClass))
def test_co2_savings_never_negative(vehicle_class, overrides):
    inputs = make_inputs(vehicle_class, **overrides)
    result = calculate_costs(inputs)
    emissions = yearly_emissions_kg(inputs)
    assert result.co2_savings_per_year >= 0
    assert result.co2_savings_per_year == pytest.approx(abs(emissions.petrol - emissions.ev))


def test_high_mileage_petrol_emits_less_but_savings_stay_positive():
    inputs = make_inputs(petrol_mileage=80.0)
    emissions = yearly_emissions_kg(inputs)
    assert emissions.petrol < emissions.ev
    assert calculate_costs(inputs).co2_savings_per_year > 0


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_calculator_refuses_non_finite_inputs(bad):
    with pytest.raises(InputValidationError) as exc_info:
        calculate_costs(make_inputs(fuel_price=bad))
    assert [(e.field, e.kind) for e in exc_info.value.errors] == [("fuel_price", InputErrorKind.NOT_NUMERIC)]


def test_vehicle_class_from_value_falls_back_to_four_wheeler():
    assert VehicleClass.from_value("2wheeler") is VehicleClass.TWO_WHEELER
    assert VehicleClass.from_value("truck") is VehicleClass.FOUR_WHEELER


def test_calculator_refuses_inputs_that_overflow():
    with pytest.raises(InputValidationError) as exc_info:
        calculate_costs(make_inputs(daily_distance=1e307))
    kinds = {e.kind for e in exc_info.value.errors}
    assert kinds == {InputErrorKind.OUT_OF_RANGE}
    assert "co2_savings_per_year" in {e.field for e in exc_info.value.errors}


def test_calculator_refuses_tiny_mileage_that_overflows_cost_per_km():
    with pytest.raises(InputValidationError):
        calculate_costs(make_inputs(petrol_mileage=1e-310))


@pytest.mark.parametrize("value", [np.int64(1_500_000), np.float64(1_500_000.0), Fraction(1_500_000)])
def test_calculator_accepts_other_real_number_types(value):
    result = calculate_costs(make_inputs(ev_price=value))
    assert result.break_even_years == pytest.approx(500000 / result.yearly_savings)


def test_calculator_rejects_bool_inputs():
    with pytest.raises(InputValidationError):
        calculate_costs(make_inputs(ev_price=True))
