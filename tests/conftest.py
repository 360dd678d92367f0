import matplotlib

matplotlib.use("Agg")

import pytest

from ev_cost_model import VehicleClass, VehicleInputs


def make_inputs(vehicle_class=VehicleClass.FOUR_WHEELER, **overrides) -> VehicleInputs:
    values = dict(
        ev_price=1_500_000.0,
        petrol_price=1_000_000.0,
        ev_range=300.0,
        petrol_mileage=15.0,
        electricity_rate=8.0,
        fuel_price=100.0,
        daily_distance=40.0,
    )
    values.update(overrides)
    return VehicleInputs(vehicle_class=vehicle_class, **values)


@pytest.fixture()
def car_inputs() -> VehicleInputs:
    return make_inputs()


@pytest.fixture()
def bike_inputs() -> VehicleInputs:
    return make_inputs(VehicleClass.TWO_WHEELER)


@pytest.fixture()
def raw_car_inputs():
    return {
        "ev_price": "1500000",
        "petrol_price": "1000000",
        "ev_range": "300",
        "petrol_mileage": "15",
        "electricity_rate": "8",
        "fuel_price": "100",
        "daily_distance": "40",
    }
