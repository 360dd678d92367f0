# ev_petrol_calculator.py
# EV vs Petrol Cost Calculator
# Streamlit front end. Run with: streamlit run ev_petrol_calculator.py

import streamlit as st

from ev_cost_config import APP_TITLE, DEFAULT_VEHICLE_CLASS, setup_logging, get_logger
from ev_cost_inputs import (
    FIELDS_BY_NAME, PRESETS, Calculate, FormState, LoadInputs, Reset, SelectTab, SelectVehicleClass,
    SetBreakdownPeriod, SetField, error_messages, inputs_from_json, inputs_to_json, reduce,
)
from ev_cost_model import (
    BATTERY_KWH_PER_RANGE_KM, DAYS_PER_MONTH, DAYS_PER_YEAR, EFFICIENCY_FACTORS, EV_CO2_KG_PER_KM,
    PETROL_CO2_KG_PER_LITRE, PROJECTION_YEARS, VehicleClass,
)
from ev_cost_report import (
    CLASS_DESCRIPTIONS, VEHICLE_LABELS, amount_in_words, breakdown_chart, cost_breakdown, cost_projection,
    distance_hints, emissions_pie, emissions_split, format_break_even, format_currency,
    html_report, key_insights, projection_chart, styled_five_year_summary, summary_csv, tips_for,
)

setup_logging()
logger = get_logger("ev_petrol_calculator")

st.set_page_config(page_title=APP_TITLE, page_icon="⚡", layout="wide")

SECTIONS = ["📊 Cost Overview", "💰 Detailed Analysis", "🌱 Environmental Impact", "Downloads",
            "How this was computed"]
CLASS_NAMES = {VehicleClass.TWO_WHEELER: "🛵 Two-wheeler", VehicleClass.FOUR_WHEELER: "🚗 Four-wheeler"}

if "form_state" not in st.session_state:
    st.session_state.form_state = FormState(vehicle_class=VehicleClass.from_value(DEFAULT_VEHICLE_CLASS))
    st.session_state.vehicle_class_choice = st.session_state.form_state.vehicle_class
    st.session_state.section_choice = 0


# ---------- Callbacks ----------
def dispatch(action) -> FormState:
    st.session_state.form_state = reduce(st.session_state.form_state, action)
    return st.session_state.form_state


def _sync_widgets(state: FormState) -> None:
    st.session_state.vehicle_class_choice = state.vehicle_class
    st.session_state.section_choice = state.active_tab
    st.session_state.period_choice = state.breakdown_period


def on_vehicle_class_change():
    dispatch(SelectVehicleClass(st.session_state.vehicle_class_choice))


def on_field_change(name: str, key: str):
    dispatch(SetField(name, st.session_state[key]))


def on_calculate():
    _sync_widgets(dispatch(Calculate()))


def on_preset(name: str):
    logger.info("Loading preset %s", name)
    _sync_widgets(dispatch(LoadInputs(PRESETS[name])))


def on_reset():
    _sync_widgets(dispatch(Reset()))


def on_upload():
    uploaded = st.session_state.get("inputs_json")
    if uploaded is None:
        return
    try:
        values = inputs_from_json(uploaded.getvalue().decode())
    except (ValueError, UnicodeDecodeError) as e:
        logger.warning("Rejected uploaded inputs: %s", e)
        st.session_state.upload_error = f"Failed to load JSON: {e}"
        return
    st.session_state.upload_error = None
    _sync_widgets(dispatch(LoadInputs(values)))


def on_section_change():
    dispatch(SelectTab(st.session_state.section_choice))


def on_period_change():
    dispatch(SetBreakdownPeriod(st.session_state.period_choice))


# ---------- Sidebar ----------
st.sidebar.title("Vehicle Type")
st.sidebar.radio("Select Vehicle Type", list(VehicleClass), key="vehicle_class_choice",
                 format_func=CLASS_NAMES.get, on_change=on_vehicle_class_change)

with st.sidebar.expander("Presets & Save/Load", expanded=True):
    cols = st.columns(len(PRESETS))
    for col, name in zip(cols, PRESETS):
        col.button(name, on_click=on_preset, args=(name,))
    st.button("Reset to Defaults", on_click=on_reset)
    st.file_uploader("Load Inputs (JSON)", type="json", key="inputs_json", on_change=on_upload)
    if st.session_state.get("upload_error"):
        st.error(st.session_state.upload_error)

state: FormState = st.session_state.form_state

with st.sidebar.expander("Export current inputs", expanded=False):
    st.download_button(
        "Download Inputs (JSON)",
        data=inputs_to_json(state).encode(),
        file_name="ev_petrol_inputs.json",
        mime="application/json"
    )

# ---------- Title ----------
labels = VEHICLE_LABELS[state.vehicle_class]
st.title(APP_TITLE)
st.markdown("Make an informed decision about your next vehicle purchase")
st.info(CLASS_DESCRIPTIONS[state.vehicle_class])
with st.expander("💡 Smart Calculator Tips", expanded=False):
    st.markdown("\n".join(f"- {tip}" for tip in tips_for(state.vehicle_class)))

# ---------- Inputs ----------
GROUPS = [
    ("Vehicle Prices", ["ev_price", "petrol_price"]),
    ("Vehicle Specifications", ["ev_range", "petrol_mileage"]),
    ("Running Costs", ["electricity_rate", "fuel_price"]),
    ("Usage", ["daily_distance"]),
]

c1, c2 = st.columns(2)
for i, (title, names) in enumerate(GROUPS):
    with [c1, c2][i % 2].container(border=True):
        st.markdown(f"**{title}**")
        for name in names:
            spec = FIELDS_BY_NAME[name]
            key = f"{name}_{state.revision}"
            if key not in st.session_state:
                st.session_state[key] = state.raw_inputs[name]
            st.text_input(spec.label, key=key, placeholder=spec.placeholder, help=spec.help,
                          on_change=on_field_change, args=(name, key))
            raw = state.raw_inputs[name]
            if name in ("ev_price", "petrol_price") and raw:
                st.caption(amount_in_words(raw, "Rupees"))
            elif name == "daily_distance" and raw:
                st.caption("  \n".join(distance_hints(raw)))

st.button("Calculate Total Costs", type="primary", use_container_width=True, on_click=on_calculate)

state = st.session_state.form_state
if state.errors:
    for msg in error_messages(list(state.errors)):
        st.warning(msg)

if state.result is None or state.inputs is None:
    st.stop()

result, inputs = state.result, state.inputs
insights = key_insights(result)

# ---------- KPIs ----------
k1, k2, k3, k4, k5 = st.columns(5)
k1.metric("EV Cost per km", format_currency(result.ev_cost_per_km))
k2.metric("Petrol Cost per km", format_currency(result.petrol_cost_per_km))
k3.metric("Yearly Savings", format_currency(result.yearly_savings, 0))
k4.metric("Break-even Period", format_break_even(result.break_even_years))
k5.metric("CO2 Reduction", f"{round(result.co2_savings_per_year)} kg/year")

# ---------- Sections ----------
st.radio("Section", list(range(len(SECTIONS))), key="section_choice", horizontal=True,
         format_func=lambda i: SECTIONS[i], on_change=on_section_change, label_visibility="collapsed")
section = state.active_tab

if section == 0:
    st.subheader("Cost Comparison Over Time")
    projection = cost_projection(inputs, result)
    st.altair_chart(projection_chart(projection), use_container_width=True)
    st.altair_chart(breakdown_chart(cost_breakdown(inputs, result)), use_container_width=True)

elif section == 1:
    if "period_choice" not in st.session_state:
        st.session_state.period_choice = state.breakdown_period
    st.radio("Breakdown", ["daily", "monthly"], key="period_choice", horizontal=True,
             format_func=lambda p: "📆 Daily" if p == "daily" else "📅 Monthly", on_change=on_period_change)
    if state.breakdown_period == "daily":
        pair, period, savings = result.daily_cost, "Daily", insights["daily_savings"]
    else:
        pair, period, savings = result.monthly_cost, "Monthly", insights["monthly_savings"]
    with st.container(border=True):
        st.markdown(f"**{period} Cost Breakdown**")
        d1, d2 = st.columns(2)
        d1.metric(f"EV {period} Cost", format_currency(pair.ev))
        d2.metric(f"Petrol {period} Cost", format_currency(pair.petrol))
        st.caption(f"{period} savings with EV: {format_currency(savings)}")

    st.subheader(f"{PROJECTION_YEARS}-Year Financial Summary")
    st.dataframe(styled_five_year_summary(inputs, result), use_container_width=True, hide_index=True)

elif section == 2:
    st.subheader(f"Environmental Impact of Your {labels['ev']}")
    co2 = round(result.co2_savings_per_year)
    st.metric("Yearly CO2 Emissions Saved", f"{co2} kg CO2")
    st.caption(
        f"By choosing an {labels['ev'].lower()}, you'll save approximately {co2} kg of CO2 emissions per year, "
        f"equivalent to planting {round(insights['trees_equivalent'])} trees"
    )
    st.pyplot(emissions_pie(emissions_split(inputs)))
    compact = ("Compact size helps reduce traffic congestion and parking space requirements"
               if inputs.vehicle_class is VehicleClass.TWO_WHEELER
               else "Modern electric cars often use recycled materials and have longer-lasting components")
    st.success(f"""
**Environmental Benefits of Your {labels['ev']}**
- Zero direct emissions while driving, contributing to cleaner urban air
- Significantly lower noise pollution compared to {labels['petrol'].lower()}s
- Reduced carbon footprint with renewable energy charging options
- Support for sustainable transportation and reduced fossil fuel dependency
- {compact}
""")

elif section == 3:
    st.subheader("Export")
    st.download_button("Download 5-Year Summary (CSV)", data=summary_csv(inputs, result),
                       file_name="ev_petrol_summary.csv", mime="text/csv")
    st.download_button("Download Mini Report (HTML)", data=html_report(inputs, result).encode("utf-8"),
                       file_name="ev_petrol_report.html", mime="text/html")

else:
    factors = EFFICIENCY_FACTORS[inputs.vehicle_class]
    st.subheader("How this was computed")
    st.markdown(f"Efficiency factors for this vehicle class: EV **{factors.ev}**, "
                f"petrol **{factors.petrol}**, CO2 **{factors.co2}**.")
    st.markdown("### 1) Cost per km")
    st.latex(r"E_{\mathrm{bat}} = R \times k_{\mathrm{bat}}, \quad k_{\mathrm{bat}} = "
             + str(BATTERY_KWH_PER_RANGE_KM[inputs.vehicle_class.value]))
    st.latex(r"c_{\mathrm{EV}} = \frac{p_{\mathrm{kWh}} \cdot E_{\mathrm{bat}} \cdot f_{\mathrm{EV}}}{R}")
    st.latex(r"c_{\mathrm{petrol}} = \frac{p_{\mathrm{L}}}{M \cdot f_{\mathrm{petrol}}}")
    st.markdown("### 2) Savings & break-even")
    st.latex(r"S_{\mathrm{year}} = (c_{\mathrm{petrol}} - c_{\mathrm{EV}}) \times d \times " + str(DAYS_PER_YEAR))
    st.latex(r"Y_{\mathrm{break\text{-}even}} = \frac{P_{\mathrm{EV}} - P_{\mathrm{petrol}}}{S_{\mathrm{year}}}"
             r"\quad (\infty \text{ if } S_{\mathrm{year}} \le 0)")
    st.latex(r"C_{\mathrm{month}} = C_{\mathrm{day}} \times " + str(DAYS_PER_MONTH))
    st.markdown("### 3) CO2")
    st.latex(r"\mathrm{CO_2} = \left| \frac{365 d}{M f_{\mathrm{petrol}}} \cdot "
             + str(PETROL_CO2_KG_PER_LITRE) + r" \cdot f_{\mathrm{CO_2}} - 365 d \cdot "
             + str(EV_CO2_KG_PER_KM) + r" \cdot f_{\mathrm{EV}} \right|")
    st.markdown(r"""
| Symbol | Meaning | Units |
|---|---|---|
| $R$ | EV range per charge | km |
| $M$ | Petrol mileage | km/L |
| $p_{\mathrm{kWh}}$ | Electricity rate | per kWh |
| $p_{\mathrm{L}}$ | Fuel price | per L |
| $d$ | Daily distance | km |
| $f$ | Vehicle-class efficiency factors | - |
""")

# ---------- Key insights ----------
with st.container(border=True):
    st.markdown("**💡 Key Insights**")
    st.markdown(f"""
- Break-even Period: **{format_break_even(result.break_even_years)}**
- Monthly Savings: **{format_currency(insights['monthly_savings'])}**
- {PROJECTION_YEARS}-Year Savings: **{format_currency(result.five_year_savings)}**
- CO2 Reduction: **{round(result.co2_savings_per_year)} kg/year**
""")
