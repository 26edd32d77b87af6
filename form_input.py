# form_input.py
import logging
import re

import numpy as np
import pandas as pd

from rules_engine import ClinicalInput, PrInterval

logger = logging.getLogger(__name__)

AGE_OPTIONS = list(range(14, 51))
GESTATIONAL_WEEK_OPTIONS = list(range(20, 41))
GESTATIONAL_DAY_OPTIONS = list(range(0, 7))

YES_NO = ["no", "si"]
PR_INTERVAL_OPTIONS = {
    "no_evaluado": "No evaluado",
    "evaluado": "Evaluado",
}

DEFAULT_FORM = {
    "age": "",
    "gestationalWeeks": "",
    "gestationalDays": "0",
    "bileAcids": "",
    "totalBilirubin": "",
    "got": "",
    "gpt": "",
    "prInterval": "no_evaluado",
    "prValue": "",
    "meconium": "no",
    "earlyOnset": "no",
    "noTreatmentResponse": "no",
}

# Fields the form requires before a calculation is made
REQUIRED_NUMERIC = ["age", "gestationalWeeks", "bileAcids", "totalBilirubin", "got", "gpt"]

SUMMARY_LABELS = {
    "age": "Edad (años)",
    "gestationalWeeks": "Semanas de gestación",
    "gestationalDays": "Días de gestación",
    "bileAcids": "Ácidos biliares (μmol/L)",
    "totalBilirubin": "Bilirrubina total (mg/dL)",
    "got": "GOT (U/L)",
    "gpt": "GPT (U/L)",
    "prInterval": "Intervalo PR",
    "prValue": "Valor PR (ms)",
    "meconium": "Meconio",
    "earlyOnset": "Inicio precoz (<30 semanas)",
    "noTreatmentResponse": "Falta de respuesta al tratamiento",
}

_FLOAT_PREFIX = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^[+-]?\d+")
_AFFIRMATIVE = {"si", "sí", "yes", "true", "1"}


def parse_float(raw) -> float:
    """Lenient float coercion: leading numeric prefix of a string, else NaN."""
    if isinstance(raw, bool):
        return float(raw)
    if isinstance(raw, (int, float)):
        return float(raw)
    if raw is None:
        return np.nan
    match = _FLOAT_PREFIX.match(str(raw).strip())
    return float(match.group(0)) if match else np.nan


def parse_int(raw) -> int | float:
    """Lenient int coercion; NaN when nothing numeric leads the value."""
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw) if np.isnan(raw) else int(raw)
    if raw is None:
        return np.nan
    match = _INT_PREFIX.match(str(raw).strip())
    return int(match.group(0)) if match else np.nan


def parse_yes_no(raw) -> bool:
    if isinstance(raw, bool):
        return raw
    return str(raw or "").strip().lower() in _AFFIRMATIVE


def parse_pr_interval(raw) -> PrInterval:
    if isinstance(raw, PrInterval):
        return raw
    value = str(raw or "").strip().lower()
    if value in {"evaluado", PrInterval.EVALUATED.value}:
        return PrInterval.EVALUATED
    return PrInterval.NOT_EVALUATED


def _is_blank(raw) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def collect_clinical_input(form: dict) -> ClinicalInput:
    """Build the evaluator input from raw form values (original form keys)."""
    values = {**DEFAULT_FORM, **form}
    pr_raw = values["prValue"]
    return ClinicalInput(
        bile_acids=parse_float(values["bileAcids"]),
        got=parse_float(values["got"]),
        gpt=parse_float(values["gpt"]),
        total_bilirubin=parse_float(values["totalBilirubin"]),
        gestational_weeks=parse_int(values["gestationalWeeks"]),
        pr_interval=parse_pr_interval(values["prInterval"]),
        pr_value=0.0 if _is_blank(pr_raw) else parse_float(pr_raw),
        meconium=parse_yes_no(values["meconium"]),
        early_onset=parse_yes_no(values["earlyOnset"]),
        no_treatment_response=parse_yes_no(values["noTreatmentResponse"]),
    )


def unparsed_fields(form: dict) -> list:
    """Return required numeric fields that are blank or not numeric.

    The PR value is required only when the PR interval was evaluated.
    """
    values = {**DEFAULT_FORM, **form}
    required = list(REQUIRED_NUMERIC)
    if parse_pr_interval(values["prInterval"]) == PrInterval.EVALUATED:
        required.append("prValue")
    missing = [key for key in required if np.isnan(parse_float(values[key]))]
    if missing:
        logger.debug("Unparsed numeric fields: %s", ", ".join(missing))
    return missing


def input_summary(form: dict) -> pd.DataFrame:
    """Tabulate the entered values for display next to the result."""
    values = {**DEFAULT_FORM, **form}
    rows = []
    for key, label in SUMMARY_LABELS.items():
        raw = values.get(key, "")
        if key == "prInterval":
            shown = PR_INTERVAL_OPTIONS.get(str(raw), str(raw))
        elif key == "prValue" and parse_pr_interval(values["prInterval"]) != PrInterval.EVALUATED:
            shown = "-"
        elif isinstance(raw, bool):
            shown = "Sí" if raw else "No"
        elif key in ("meconium", "earlyOnset", "noTreatmentResponse"):
            shown = "Sí" if parse_yes_no(raw) else "No"
        else:
            shown = "-" if _is_blank(raw) else str(raw)
        rows.append({"Parámetro": label, "Valor": shown})
    return pd.DataFrame(rows, columns=["Parámetro", "Valor"])
