# ev_cost_model.py
# Cost & emissions model for comparing an electric vehicle with a petrol vehicle.
# Pure functions only: no Streamlit, no I/O.

import math
import numbers
from dataclasses import dataclass, fields
from enum import Enum
from typing import Dict, List, Tuple

from ev_cost_config import get_logger

logger = get_logger(__name__)

# ---------- Model constants ----------
DAYS_PER_YEAR = 365
DAYS_PER_MONTH = 30  # fixed month, not calendar accurate
PROJECTION_YEARS = 5
PETROL_CO2_KG_PER_LITRE = 2.3
EV_CO2_KG_PER_KM = 0.1  # grid-electricity equivalent

# Approximate usable kWh per km of rated range. A modelling shortcut, not battery sizing.
BATTERY_KWH_PER_RANGE_KM = {"2wheeler": 0.1, "4wheeler": 0.2}


class VehicleClass(str, Enum):
    TWO_WHEELER = "2wheeler"
    FOUR_WHEELER = "4wheeler"

    @classmethod
    def from_value(cls, value: str) -> "VehicleClass":
        try:
            return cls(value)
        except ValueError:
            logger.warning("Unknown vehicle class %r, using %s", value, cls.FOUR_WHEELER.value)
            return cls.FOUR_WHEELER


@dataclass(frozen=True)
class EfficiencyFactors:
    ev: float
    petrol: float
    co2: float


# Two-wheelers draw ~40% less electricity, get better effective mileage and emit ~50% less CO2.
EFFICIENCY_FACTORS: Dict[VehicleClass, EfficiencyFactors] = {
    VehicleClass.TWO_WHEELER: EfficiencyFactors(ev=0.6, petrol=1.4, co2=0.5),
    VehicleClass.FOUR_WHEELER: EfficiencyFactors(ev=1.0, petrol=1.0, co2=1.0),
}


# ---------- Errors ----------
class InputErrorKind(str, Enum):
    MISSING_FIELD = "missing_field"
    NOT_NUMERIC = "not_numeric"
    NOT_POSITIVE = "not_positive"
    OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True)
class FieldError:
    field: str
    kind: InputErrorKind


class InputValidationError(ValueError):
    """Raised when vehicle inputs are missing, non-numeric or out of range."""

    def __init__(self, errors: List[FieldError]):
        self.errors: Tuple[FieldError, ...] = tuple(errors)
        summary = ", ".join(f"{e.field} ({e.kind.value})" for e in self.errors)
        super().__init__(f"Invalid vehicle inputs: {summary}")


# ---------- Data model ----------
@dataclass(frozen=True)
class VehicleInputs:
    ev_price: float
    petrol_price: float
    ev_range: float
    petrol_mileage: float
    electricity_rate: float
    fuel_price: float
    daily_distance: float
    vehicle_class: VehicleClass = VehicleClass.FOUR_WHEELER

    def numeric_fields(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "vehicle_class"}

    @property
    def yearly_km(self) -> float:
        return self.daily_distance * DAYS_PER_YEAR


@dataclass(frozen=True)
class CostPair:
    ev: float
    petrol: float


@dataclass(frozen=True)
class CostResult:
    ev_cost_per_km: float
    petrol_cost_per_km: float
    yearly_savings: float
    break_even_years: float
    daily_cost: CostPair
    monthly_cost: CostPair
    five_year_savings: float
    co2_savings_per_year: float

    @property
    def breaks_even(self) -> bool:
        return math.isfinite(self.break_even_years)


# ---------- Number to words (Indian numbering) ----------
UNITS = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
TEENS = ["Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
         "Seventeen", "Eighteen", "Nineteen"]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

THOUSAND = 1_000
LAKH = 100_000
CRORE = 10_000_000


def _group(n: int, size: int, word: str) -> str:
    rest = n % size
    return _to_words(n // size) + " " + word + (" " + _to_words(rest) if rest else "")


def _to_words(n: int) -> str:
    if n < 10:
        return UNITS[n]
    if n < 20:
        return TEENS[n - 10]
    if n < 100:
        return TENS[n // 10] + (" " + UNITS[n % 10] if n % 10 else "")
    if n < THOUSAND:
        rest = n % 100
        return UNITS[n // 100] + " Hundred" + (" and " + _to_words(rest) if rest else "")
    if n < LAKH:
        return _group(n, THOUSAND, "Thousand")
    if n < CRORE:
        return _group(n, LAKH, "Lakh")
    return _group(n, CRORE, "Crore")


def number_to_words(num: float) -> str:
    """
    Spell a non-negative number in English words using thousand / lakh / crore grouping.
    Fractional digits are dropped: 1234.9 -> "One Thousand Two Hundred and Thirty Four".
    """
    if num < 0 or not math.isfinite(num):
        raise ValueError(f"number_to_words expects a finite non-negative value, got {num}")
    n = int(num)
    if n == 0:
        return "Zero"
    return _to_words(n)


# ---------- Calculator ----------
def battery_capacity_kwh(ev_range: float, vehicle_class: VehicleClass) -> float:
    return ev_range * BATTERY_KWH_PER_RANGE_KM[vehicle_class.value]


def ev_cost_per_km(inputs: VehicleInputs) -> float:
    factors = EFFICIENCY_FACTORS[inputs.vehicle_class]
    capacity = battery_capacity_kwh(inputs.ev_range, inputs.vehicle_class)
    return (inputs.electricity_rate * capacity * factors.ev) / inputs.ev_range


def petrol_cost_per_km(inputs: VehicleInputs) -> float:
    factors = EFFICIENCY_FACTORS[inputs.vehicle_class]
    return inputs.fuel_price / (inputs.petrol_mileage * factors.petrol)


def yearly_emissions_kg(inputs: VehicleInputs) -> CostPair:
    """Yearly kg of CO2 attributed to each vehicle under the fixed emission coefficients."""
    factors = EFFICIENCY_FACTORS[inputs.vehicle_class]
    yearly_km = inputs.yearly_km
    petrol_litres = yearly_km / (inputs.petrol_mileage * factors.petrol)
    return CostPair(
        ev=yearly_km * EV_CO2_KG_PER_KM * factors.ev,
        petrol=petrol_litres * PETROL_CO2_KG_PER_LITRE * factors.co2,
    )


def _check_finite(inputs: VehicleInputs) -> None:
    bad = [FieldError(name, InputErrorKind.NOT_NUMERIC)
           for name, value in inputs.numeric_fields().items()
           if not isinstance(value, numbers.Real) or isinstance(value, bool) or not math.isfinite(value)]
    if bad:
        raise InputValidationError(bad)


def _check_result(result: CostResult) -> None:
    # break_even_years may be infinite; every other figure must be a real number
    derived = {
        "ev_cost_per_km": result.ev_cost_per_km,
        "petrol_cost_per_km": result.petrol_cost_per_km,
        "yearly_savings": result.yearly_savings,
        "daily_cost.ev": result.daily_cost.ev,
        "daily_cost.petrol": result.daily_cost.petrol,
        "monthly_cost.ev": result.monthly_cost.ev,
        "monthly_cost.petrol": result.monthly_cost.petrol,
        "five_year_savings": result.five_year_savings,
        "co2_savings_per_year": result.co2_savings_per_year,
    }
    bad = [FieldError(name, InputErrorKind.OUT_OF_RANGE) for name, value in derived.items()
           if not math.isfinite(value)]
    if math.isnan(result.break_even_years):
        bad.append(FieldError("break_even_years", InputErrorKind.OUT_OF_RANGE))
    if bad:
        logger.warning("Inputs overflow the cost model: %s", ", ".join(e.field for e in bad))
        raise InputValidationError(bad)


def calculate_costs(inputs: VehicleInputs) -> CostResult:
    _check_finite(inputs)

    ev_km = ev_cost_per_km(inputs)
    petrol_km = petrol_cost_per_km(inputs)
    yearly_savings = (petrol_km - ev_km) * inputs.yearly_km

    price_difference = inputs.ev_price - inputs.petrol_price
    break_even = price_difference / yearly_savings if yearly_savings > 0 else math.inf

    daily = CostPair(ev=ev_km * inputs.daily_distance, petrol=petrol_km * inputs.daily_distance)
    monthly = CostPair(ev=daily.ev * DAYS_PER_MONTH, petrol=daily.petrol * DAYS_PER_MONTH)

    emissions = yearly_emissions_kg(inputs)
    co2_savings = abs(emissions.petrol - emissions.ev)

    result = CostResult(
        ev_cost_per_km=ev_km,
        petrol_cost_per_km=petrol_km,
        yearly_savings=yearly_savings,
        break_even_years=break_even,
        daily_cost=daily,
        monthly_cost=monthly,
        five_year_savings=yearly_savings * PROJECTION_YEARS,
        co2_savings_per_year=co2_savings,
    )
    _check_result(result)
    logger.debug("Calculated %s for %s", result, inputs)
    return result
