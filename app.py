import logging

import streamlit as st
import pandas as pd
import numpy as np
import altair as alt

from config import get_demo_default, get_page_title, setup_logging
from rules_engine import (
    BILE_ACIDS_HIGH,
    BILE_ACIDS_MEDIUM,
    BILE_ACIDS_TREATMENT,
    RiskLevel,
    evaluate,
    format_factors,
)
from form_input import (
    AGE_OPTIONS,
    GESTATIONAL_DAY_OPTIONS,
    GESTATIONAL_WEEK_OPTIONS,
    PR_INTERVAL_OPTIONS,
    SUMMARY_LABELS,
    YES_NO,
    collect_clinical_input,
    input_summary,
    unparsed_fields,
)

setup_logging()
logger = logging.getLogger(__name__)

# ----------------------
# App Config & Theming
# ----------------------
st.set_page_config(
    page_title=get_page_title(),
    page_icon="🩺",
    layout="wide",
)

# Panel renderer per tier (green / yellow / red)
RISK_PANELS = {
    RiskLevel.LOW: (st.success, "✅"),
    RiskLevel.MEDIUM: (st.warning, "⚠️"),
    RiskLevel.HIGH: (st.error, "🚨"),
}

# Form field (original form key) -> widget key
WIDGET_KEYS = {
    "age": "age",
    "gestationalWeeks": "gestational_weeks",
    "gestationalDays": "gestational_days",
    "bileAcids": "bile_acids",
    "totalBilirubin": "total_bilirubin",
    "got": "got",
    "gpt": "gpt",
    "prInterval": "pr_interval",
    "prValue": "pr_value",
    "meconium": "meconium",
    "earlyOnset": "early_onset",
    "noTreatmentResponse": "no_treatment_response",
}

DEMO_FORM = dict(
    age=31,
    gestationalWeeks=30,
    gestationalDays=2,
    bileAcids="50",
    totalBilirubin="0.5",
    got="50",
    gpt="10",
    prInterval="no_evaluado",
    prValue="",
    meconium="no",
    earlyOnset="no",
    noTreatmentResponse="no",
)

EMPTY_FORM = dict(
    age=None,
    gestationalWeeks=None,
    gestationalDays=0,
    bileAcids="",
    totalBilirubin="",
    got="",
    gpt="",
    prInterval="no_evaluado",
    prValue="",
    meconium="no",
    earlyOnset="no",
    noTreatmentResponse="no",
)


def load_form_values(values: dict) -> None:
    for field, key in WIDGET_KEYS.items():
        st.session_state[key] = values[field]


def on_demo_toggle() -> None:
    load_form_values(DEMO_FORM if st.session_state["demo_mode"] else EMPTY_FORM)


def yes_no_label(value: str) -> str:
    return "Sí" if value == "si" else "No"


def render_assessment(assessment) -> None:
    """Severity-styled panel with factors (when any) and recommendations."""
    panel, icon = RISK_PANELS[assessment.level]
    parts = [f"### Nivel de Riesgo: {assessment.level.label.upper()}"]
    if assessment.triggered_factors:
        parts.append("**Factores de riesgo identificados:**")
        parts.append(format_factors(assessment))
    parts.append("**Recomendaciones:**")
    parts.append(assessment.recommendation)
    panel("\n\n".join(parts), icon=icon)


def bile_acid_chart(bile_acids: float):
    thresholds = pd.DataFrame(
        {
            "umbral": [BILE_ACIDS_TREATMENT, BILE_ACIDS_MEDIUM, BILE_ACIDS_HIGH],
            "descripcion": ["Tratamiento (>10)", "Riesgo medio (≥40)", "Riesgo alto (≥100)"],
        }
    )
    value = pd.DataFrame({"parametro": ["Ácidos biliares"], "valor": [bile_acids]})
    bar = alt.Chart(value).mark_bar(size=40).encode(
        x=alt.X("parametro:N", title=""),
        y=alt.Y("valor:Q", title="μmol/L"),
        tooltip=["valor:Q"],
    )
    rules = alt.Chart(thresholds).mark_rule(strokeDash=[4, 4]).encode(
        y="umbral:Q",
        color=alt.Color("descripcion:N", title="Umbral"),
        tooltip=["descripcion:N", "umbral:Q"],
    )
    return (bar + rules).properties(height=260)


# ----------------------
# Global init
# ----------------------
if "demo_mode" not in st.session_state:
    st.session_state["demo_mode"] = get_demo_default()
    load_form_values(DEMO_FORM if st.session_state["demo_mode"] else EMPTY_FORM)

# ----------------------
# Sidebar
# ----------------------
with st.sidebar:
    st.title("🩺 Colestasis Intrahepática")
    st.caption("Calculadora de riesgo")
    st.toggle(
        "Usar datos de ejemplo",
        key="demo_mode",
        on_change=on_demo_toggle,
        help="Rellena el formulario con un caso de ejemplo",
    )
    st.divider()
    st.info(
        "Herramienta de apoyo. No sustituye el juicio clínico.",
        icon="⚠️",
    )

# ----------------------
# Input Form
# ----------------------
st.title("Calculadora de Riesgo - Colestasis Intrahepática del Embarazo")
st.caption("Basada en las guías RCOG y FLASOG")

# Outside the form so the PR value field can follow the selection
pr_interval = st.radio(
    "Intervalo PR",
    list(PR_INTERVAL_OPTIONS),
    format_func=PR_INTERVAL_OPTIONS.get,
    horizontal=True,
    key="pr_interval",
)

with st.form("risk_form"):
    st.markdown("**Datos de la paciente**")
    c1, c2, c3 = st.columns(3)
    age = c1.selectbox("Edad (años)", AGE_OPTIONS, placeholder="Seleccione", key="age")
    gestational_weeks = c2.selectbox(
        "Semanas de gestación",
        GESTATIONAL_WEEK_OPTIONS,
        placeholder="Seleccione",
        key="gestational_weeks",
    )
    gestational_days = c3.selectbox("Días", GESTATIONAL_DAY_OPTIONS, key="gestational_days")

    st.markdown("**Parámetros bioquímicos**")
    c1, c2, c3, c4 = st.columns(4)
    bile_acids = c1.text_input("Ácidos biliares (μmol/L)", key="bile_acids")
    total_bilirubin = c2.text_input("Bilirrubina total (mg/dL)", key="total_bilirubin")
    got = c3.text_input("GOT (U/L)", key="got")
    gpt = c4.text_input("GPT (U/L)", key="gpt")

    st.markdown("**Parámetros clínicos**")
    pr_value = ""
    if pr_interval == "evaluado":
        pr_value = st.text_input(
            "Valor PR (ms)",
            help="Solo se considera si el intervalo PR fue evaluado",
            key="pr_value",
        )

    c1, c2, c3 = st.columns(3)
    meconium = c1.radio(
        "Presencia de meconio", YES_NO, format_func=yes_no_label, horizontal=True, key="meconium"
    )
    early_onset = c2.radio(
        "Inicio precoz (<30 semanas)", YES_NO, format_func=yes_no_label, horizontal=True, key="early_onset"
    )
    no_treatment_response = c3.radio(
        "Falta de respuesta al tratamiento",
        YES_NO,
        format_func=yes_no_label,
        horizontal=True,
        key="no_treatment_response",
    )

    submitted = st.form_submit_button("Calcular Riesgo", type="primary")

# ----------------------
# Result
# ----------------------
if submitted:
    form = {
        "age": age,
        "gestationalWeeks": gestational_weeks,
        "gestationalDays": gestational_days,
        "bileAcids": bile_acids,
        "totalBilirubin": total_bilirubin,
        "got": got,
        "gpt": gpt,
        "prInterval": pr_interval,
        "prValue": pr_value,
        "meconium": meconium,
        "earlyOnset": early_onset,
        "noTreatmentResponse": no_treatment_response,
    }

    missing = unparsed_fields(form)
    if missing:
        names = ", ".join(SUMMARY_LABELS[key] for key in missing)
        st.warning(f"Complete los campos obligatorios: {names}", icon="ℹ️")
        st.stop()

    clinical_input = collect_clinical_input(form)
    assessment = evaluate(clinical_input)
    logger.info(
        "Risk evaluated: level=%s factors=%d",
        assessment.level.name,
        len(assessment.triggered_factors),
    )

    render_assessment(assessment)

    c1, c2 = st.columns([1, 1])
    with c1:
        st.markdown("#### Datos introducidos")
        st.dataframe(input_summary(form), hide_index=True)
    with c2:
        if not np.isnan(clinical_input.bile_acids):
            st.markdown("#### Ácidos biliares frente a umbrales")
            st.altair_chart(bile_acid_chart(clinical_input.bile_acids))

st.markdown("---")
st.caption("Todos los derechos reservados a MiMaternoFetal.cl")
