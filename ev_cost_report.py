# ev_cost_report.py
# Tables, charts and downloadable artifacts built from a calculated CostResult.

import json
import math
from typing import Dict, List

import altair as alt
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ev_cost_config import CURRENCY_SYMBOL, TREE_CO2_KG_PER_YEAR
from ev_cost_model import (
    DAYS_PER_YEAR, PROJECTION_YEARS, CostResult, VehicleClass, VehicleInputs,
    number_to_words, yearly_emissions_kg,
)

# ---------- Labels ----------
VEHICLE_LABELS: Dict[VehicleClass, Dict[str, str]] = {
    VehicleClass.TWO_WHEELER: {"ev": "Electric Bike", "petrol": "Petrol Bike"},
    VehicleClass.FOUR_WHEELER: {"ev": "Electric Car", "petrol": "Petrol Car"},
}

CLASS_DESCRIPTIONS = {
    VehicleClass.TWO_WHEELER: "Compare electric vs petrol two-wheelers. "
                              "The calculator adjusts efficiency factors for bikes and scooters.",
    VehicleClass.FOUR_WHEELER: "Compare electric vs petrol cars. "
                               "The calculator uses standard efficiency factors for four-wheelers.",
}

COMMON_TIPS = [
    "Include all costs like insurance, maintenance, and registration in vehicle prices",
    "Consider your actual daily commute and occasional long trips for yearly distance",
    "Check your electricity bill for accurate per unit (kWh) rates",
    "Factor in current fuel prices in your region",
]

CLASS_TIPS = {
    VehicleClass.TWO_WHEELER: "For two-wheelers, consider the lower maintenance costs "
                              "and better maneuverability in traffic",
    VehicleClass.FOUR_WHEELER: "For cars, factor in additional costs like parking "
                               "and higher insurance premiums",
}


def tips_for(vehicle_class: VehicleClass) -> List[str]:
    return COMMON_TIPS + [CLASS_TIPS[vehicle_class]]


# ---------- Formatting ----------
def format_indian_number(value: float, decimals: int = 0) -> str:
    """Group digits the Indian way: 1234567.5 -> '12,34,567.50' with decimals=2."""
    negative = value < 0
    text = f"{abs(value):.{decimals}f}"
    whole, _, frac = text.partition(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    out = whole + ("." + frac if frac else "")
    return ("-" if negative else "") + out


def format_currency(value: float, decimals: int = 2) -> str:
    return f"{CURRENCY_SYMBOL} {format_indian_number(value, decimals)}"


def format_break_even(years: float) -> str:
    if not math.isfinite(years):
        return "Never"
    return f"{years:.1f} years"


def amount_in_words(raw: str, unit: str) -> str:
    """Worded hint shown under a price field, e.g. 'One Lakh Rupees'. Empty if not a number."""
    try:
        value = float(str(raw).replace(",", ""))
    except ValueError:
        return ""
    if not math.isfinite(value) or value < 0:
        return ""
    return f"{number_to_words(value)} {unit}"


def distance_hints(raw: str) -> List[str]:
    daily = amount_in_words(raw, "Kilometers per day")
    if not daily:
        return []
    yearly_km = float(str(raw).replace(",", "")) * DAYS_PER_YEAR
    if not math.isfinite(yearly_km):
        return []
    return [daily, f"(Approximately {number_to_words(yearly_km)} Kilometers per year)"]


# ---------- Tables ----------
def running_cost(cost_per_km: float, inputs: VehicleInputs, years: float = 1) -> float:
    return cost_per_km * inputs.daily_distance * DAYS_PER_YEAR * years


def cost_projection(inputs: VehicleInputs, result: CostResult, years: int = PROJECTION_YEARS) -> pd.DataFrame:
    labels = VEHICLE_LABELS[inputs.vehicle_class]
    span = np.arange(years + 1)
    yearly_km = inputs.daily_distance * DAYS_PER_YEAR
    return pd.DataFrame({
        "Period": ["Initial"] + [f"Year {i}" for i in span[1:]],
        f"{labels['ev']} Total Cost": inputs.ev_price + result.ev_cost_per_km * yearly_km * span,
        f"{labels['petrol']} Total Cost": inputs.petrol_price + result.petrol_cost_per_km * yearly_km * span,
    })


def cost_breakdown(inputs: VehicleInputs, result: CostResult) -> pd.DataFrame:
    return pd.DataFrame({
        "Period": ["Daily Cost", "Monthly Cost", "Yearly Cost"],
        "EV Costs": [result.daily_cost.ev, result.monthly_cost.ev,
                     running_cost(result.ev_cost_per_km, inputs)],
        "Petrol Costs": [result.daily_cost.petrol, result.monthly_cost.petrol,
                         running_cost(result.petrol_cost_per_km, inputs)],
    })


def five_year_summary(inputs: VehicleInputs, result: CostResult) -> pd.DataFrame:
    ev_running = running_cost(result.ev_cost_per_km, inputs, PROJECTION_YEARS)
    petrol_running = running_cost(result.petrol_cost_per_km, inputs, PROJECTION_YEARS)
    premium = inputs.ev_price - inputs.petrol_price
    return pd.DataFrame({
        "Category": ["Initial Cost", f"Running Cost ({PROJECTION_YEARS} Years)",
                     f"Total Cost ({PROJECTION_YEARS} Years)"],
        "EV": [inputs.ev_price, ev_running, inputs.ev_price + ev_running],
        "Petrol": [inputs.petrol_price, petrol_running, inputs.petrol_price + petrol_running],
        "Savings": [-premium, result.five_year_savings, result.five_year_savings - premium],
    })


def savings_style(value: float) -> str:
    """Cell CSS for the Savings column: green when the EV comes out ahead, red when it costs more."""
    return "color: #16a34a" if value >= 0 else "color: #dc2626"


def styled_five_year_summary(inputs: VehicleInputs, result: CostResult):
    money = "{:,.2f}"
    return (five_year_summary(inputs, result).style
            .format({"EV": money, "Petrol": money, "Savings": money})
            .map(savings_style, subset=["Savings"]))


def key_insights(result: CostResult) -> Dict[str, float]:
    return {
        "break_even_years": result.break_even_years,
        "monthly_savings": result.monthly_cost.petrol - result.monthly_cost.ev,
        "daily_savings": result.daily_cost.petrol - result.daily_cost.ev,
        "five_year_savings": result.five_year_savings,
        "co2_kg_per_year": result.co2_savings_per_year,
        "trees_equivalent": result.co2_savings_per_year / TREE_CO2_KG_PER_YEAR,
    }


def emissions_split(inputs: VehicleInputs) -> Dict[str, float]:
    kg = yearly_emissions_kg(inputs)
    labels = VEHICLE_LABELS[inputs.vehicle_class]
    return {labels["petrol"]: kg.petrol, labels["ev"]: kg.ev}


# ---------- Charts ----------
def projection_chart(projection: pd.DataFrame) -> alt.Chart:
    order = list(projection["Period"])
    long_df = projection.melt(id_vars="Period", var_name="Vehicle", value_name="Total Cost")
    return alt.Chart(long_df).mark_line(point=True).encode(
        x=alt.X("Period:N", sort=order),
        y=alt.Y("Total Cost:Q", title=f"Total Cost ({CURRENCY_SYMBOL})"),
        color=alt.Color("Vehicle:N", scale=alt.Scale(range=["#22c55e", "#f43f5e"])),
        tooltip=["Period", "Vehicle", alt.Tooltip("Total Cost:Q", format=",.0f")],
    ).properties(title=f"{PROJECTION_YEARS}-Year Cost Comparison")


def breakdown_chart(breakdown: pd.DataFrame) -> alt.Chart:
    order = list(breakdown["Period"])
    long_df = breakdown.melt(id_vars="Period", var_name="Type", value_name="Cost")
    return alt.Chart(long_df).mark_bar().encode(
        x=alt.X("Period:N", sort=order),
        xOffset="Type:N",
        y=alt.Y("Cost:Q", title=f"Cost ({CURRENCY_SYMBOL})"),
        color=alt.Color("Type:N", scale=alt.Scale(range=["#4bc0c0", "#ff6384"])),
        tooltip=["Period", "Type", alt.Tooltip("Cost:Q", format=",.2f")],
    ).properties(title="Cost Comparison Breakdown")


def emissions_pie(split: Dict[str, float]):
    vals = np.array(list(split.values()))
    if float(vals.sum()) <= 0.0:
        vals = np.array([1.0, 0.0])
    fig = plt.figure()
    plt.pie(vals, labels=list(split.keys()), autopct="%1.1f%%", startangle=90,
            colors=["#f43f5e", "#22c55e"])
    plt.axis("equal")
    plt.title("Yearly CO2 emissions (kg)")
    return fig


# ---------- Downloads ----------
def summary_csv(inputs: VehicleInputs, result: CostResult) -> bytes:
    return five_year_summary(inputs, result).to_csv(index=False).encode("utf-8")


def html_report(inputs: VehicleInputs, result: CostResult) -> str:
    labels = VEHICLE_LABELS[inputs.vehicle_class]
    insights = key_insights(result)
    raw = {"vehicle_class": inputs.vehicle_class.value, **inputs.numeric_fields()}
    table = five_year_summary(inputs, result).to_html(index=False, float_format=lambda v: f"{v:,.2f}")
    return f"""
<html><head><meta charset='utf-8'><title>EV vs Petrol Report</title></head><body>
<h2>{labels['ev']} vs {labels['petrol']}</h2>
<ul>
  <li>EV cost per km: {format_currency(result.ev_cost_per_km)}</li>
  <li>Petrol cost per km: {format_currency(result.petrol_cost_per_km)}</li>
  <li>Break-even Period: {format_break_even(result.break_even_years)}</li>
  <li>Monthly Savings: {format_currency(insights['monthly_savings'])}</li>
  <li>{PROJECTION_YEARS}-Year Savings: {format_currency(result.five_year_savings)}</li>
  <li>CO2 Reduction: {round(result.co2_savings_per_year)} kg/year</li>
</ul>
<h3>{PROJECTION_YEARS}-Year Financial Summary</h3>
{table}
<h3>Inputs</h3>
<pre>{json.dumps(raw, indent=2)}</pre>
</body></html>
"""
