# ev_cost_inputs.py
# Raw form text -> validated VehicleInputs, and the form state reducer driven by the UI.

import json
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ev_cost_config import get_logger
from ev_cost_model import (
    CostResult, FieldError, InputErrorKind, InputValidationError, VehicleClass,
    VehicleInputs, calculate_costs,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class InputField:
    name: str
    label: str
    help: str
    placeholder: str
    allow_zero: bool = True


INPUT_FIELDS: List[InputField] = [
    InputField("ev_price", "EV Price (₹)", "Total on-road price of the electric vehicle", "Enter EV price"),
    InputField("petrol_price", "Petrol Vehicle Price (₹)", "Total on-road price of the petrol vehicle",
               "Enter petrol vehicle price"),
    InputField("ev_range", "EV Range (km/charge)", "Distance the EV can travel on a single charge",
               "Enter EV range", allow_zero=False),
    InputField("petrol_mileage", "Petrol Mileage (km/L)", "Distance the petrol vehicle can travel per liter",
               "Enter petrol mileage", allow_zero=False),
    InputField("electricity_rate", "Electricity Rate (₹/kWh)", "Cost of electricity per kilowatt-hour",
               "Enter electricity rate"),
    InputField("fuel_price", "Fuel Price (₹/L)", "Current price of petrol per liter", "Enter fuel price"),
    InputField("daily_distance", "Daily Distance (km)", "Average daily driving distance",
               "Enter daily distance", allow_zero=False),
]
FIELD_NAMES: Tuple[str, ...] = tuple(f.name for f in INPUT_FIELDS)
FIELDS_BY_NAME: Dict[str, InputField] = {f.name: f for f in INPUT_FIELDS}

# ---------- Presets ----------
PRESETS: Dict[str, Dict[str, Any]] = {
    "Hatchback (4W)": {
        "vehicle_class": "4wheeler",
        "ev_price": "1500000", "petrol_price": "1000000", "ev_range": "300", "petrol_mileage": "15",
        "electricity_rate": "8", "fuel_price": "100", "daily_distance": "40",
    },
    "Scooter (2W)": {
        "vehicle_class": "2wheeler",
        "ev_price": "120000", "petrol_price": "80000", "ev_range": "100", "petrol_mileage": "45",
        "electricity_rate": "8", "fuel_price": "100", "daily_distance": "30",
    },
}


def empty_inputs() -> Dict[str, str]:
    return {name: "" for name in FIELD_NAMES}


# ---------- Parsing & validation ----------
def parse_number(raw: Optional[str]) -> Union[float, InputErrorKind]:
    """Parse one form value. Thousands separators and surrounding spaces are accepted."""
    if raw is None or not str(raw).strip():
        return InputErrorKind.MISSING_FIELD
    text = str(raw).strip().replace(",", "")
    try:
        value = float(text)
    except ValueError:
        return InputErrorKind.NOT_NUMERIC
    if not math.isfinite(value):
        return InputErrorKind.NOT_NUMERIC
    return value


def _check_field(name: str, raw: Optional[str]) -> Union[float, FieldError]:
    parsed = parse_number(raw)
    if isinstance(parsed, InputErrorKind):
        return FieldError(name, parsed)
    spec = FIELDS_BY_NAME[name]
    if parsed < 0 or (parsed == 0 and not spec.allow_zero):
        return FieldError(name, InputErrorKind.NOT_POSITIVE)
    return parsed


def validate_inputs(raw: Mapping[str, Optional[str]]) -> List[FieldError]:
    errors = []
    for name in FIELD_NAMES:
        checked = _check_field(name, raw.get(name))
        if isinstance(checked, FieldError):
            errors.append(checked)
    return errors


def parse_inputs(raw: Mapping[str, Optional[str]], vehicle_class: VehicleClass) -> VehicleInputs:
    values: Dict[str, float] = {}
    errors: List[FieldError] = []
    for name in FIELD_NAMES:
        checked = _check_field(name, raw.get(name))
        if isinstance(checked, FieldError):
            errors.append(checked)
        else:
            values[name] = checked
    if errors:
        logger.warning("Rejected inputs: %s", ", ".join(f"{e.field}={e.kind.value}" for e in errors))
        raise InputValidationError(errors)
    return VehicleInputs(vehicle_class=vehicle_class, **values)


def error_messages(errors: List[FieldError]) -> List[str]:
    messages = []
    kinds = {e.kind for e in errors}
    if InputErrorKind.MISSING_FIELD in kinds:
        messages.append("Please fill in all fields to calculate")
    if InputErrorKind.NOT_NUMERIC in kinds:
        messages.append("Please enter valid numeric values")
    if InputErrorKind.OUT_OF_RANGE in kinds:
        messages.append("These values are too large to calculate a result")
    for e in errors:
        if e.kind is InputErrorKind.NOT_POSITIVE:
            spec = FIELDS_BY_NAME[e.field]
            bound = "zero or more" if spec.allow_zero else "greater than zero"
            messages.append(f"{spec.label} must be {bound}.")
    return messages


# ---------- Form state ----------
@dataclass(frozen=True)
class FormState:
    vehicle_class: VehicleClass = VehicleClass.FOUR_WHEELER
    raw_inputs: Dict[str, str] = field(default_factory=empty_inputs)
    result: Optional[CostResult] = None
    inputs: Optional[VehicleInputs] = None
    errors: Tuple[FieldError, ...] = ()
    active_tab: int = 0
    breakdown_period: str = "daily"
    revision: int = 0


@dataclass(frozen=True)
class SelectVehicleClass:
    vehicle_class: VehicleClass


@dataclass(frozen=True)
class SetField:
    name: str
    value: str


@dataclass(frozen=True)
class Calculate:
    pass


@dataclass(frozen=True)
class SelectTab:
    index: int


@dataclass(frozen=True)
class SetBreakdownPeriod:
    period: str


@dataclass(frozen=True)
class LoadInputs:
    values: Mapping[str, Any]


@dataclass(frozen=True)
class Reset:
    pass


Action = Union[SelectVehicleClass, SetField, Calculate, SelectTab, SetBreakdownPeriod, LoadInputs, Reset]

BREAKDOWN_PERIODS = ("daily", "monthly")


def _cleared(state: FormState, vehicle_class: VehicleClass) -> FormState:
    return FormState(vehicle_class=vehicle_class, revision=state.revision + 1)


def _calculate(state: FormState) -> FormState:
    logger.info("Calculating costs for %s", state.vehicle_class.value)
    try:
        inputs = parse_inputs(state.raw_inputs, state.vehicle_class)
        result = calculate_costs(inputs)
    except InputValidationError as exc:
        return replace(state, errors=exc.errors)
    return replace(state, inputs=inputs, result=result, errors=(), active_tab=0)


def _load(state: FormState, values: Mapping[str, Any]) -> FormState:
    vehicle_class = VehicleClass.from_value(values.get("vehicle_class", state.vehicle_class.value))
    raw = empty_inputs()
    for name in FIELD_NAMES:
        value = values.get(name)
        if value is not None:
            raw[name] = str(value)
    return replace(_cleared(state, vehicle_class), raw_inputs=raw)


def reduce(state: FormState, action: Action) -> FormState:
    """Return the form state that follows `action`. Never mutates `state`."""
    if isinstance(action, SelectVehicleClass):
        if action.vehicle_class == state.vehicle_class:
            return state
        logger.info("Vehicle class switched to %s; inputs reset", action.vehicle_class.value)
        return _cleared(state, action.vehicle_class)
    if isinstance(action, SetField):
        if action.name not in FIELDS_BY_NAME:
            raise KeyError(f"Unknown input field: {action.name}")
        return replace(state, raw_inputs={**state.raw_inputs, action.name: action.value})
    if isinstance(action, Calculate):
        return _calculate(state)
    if isinstance(action, SelectTab):
        return replace(state, active_tab=action.index)
    if isinstance(action, SetBreakdownPeriod):
        if action.period not in BREAKDOWN_PERIODS:
            raise ValueError(f"Unknown breakdown period: {action.period}")
        return replace(state, breakdown_period=action.period)
    if isinstance(action, LoadInputs):
        return _load(state, action.values)
    if isinstance(action, Reset):
        return _cleared(state, state.vehicle_class)
    raise TypeError(f"Unsupported action: {action!r}")


# ---------- JSON import / export ----------
def inputs_to_json(state: FormState) -> str:
    payload = {"vehicle_class": state.vehicle_class.value, **state.raw_inputs}
    return json.dumps(payload, indent=2)


def inputs_from_json(text: str) -> Dict[str, Any]:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Inputs JSON must be an object")
    return data
