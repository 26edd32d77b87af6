"""
Pytest configuration and shared fixtures for the ICP risk calculator.
"""
import sys
from pathlib import Path

import pytest

# Flat layout: make the root modules importable
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from rules_engine import ClinicalInput, PrInterval  # noqa: E402


@pytest.fixture
def app_path() -> Path:
    return ROOT / "app.py"


@pytest.fixture
def baseline() -> ClinicalInput:
    """Case that fires no rule at all."""
    return ClinicalInput(
        bile_acids=5,
        got=10,
        gpt=10,
        total_bilirubin=0.5,
        gestational_weeks=30,
        pr_interval=PrInterval.NOT_EVALUATED,
        pr_value=0,
        meconium=False,
        early_onset=False,
        no_treatment_response=False,
    )


@pytest.fixture
def demo_form() -> dict:
    return {
        "age": "31",
        "gestationalWeeks": "30",
        "gestationalDays": "2",
        "bileAcids": "50",
        "totalBilirubin": "0.5",
        "got": "50",
        "gpt": "10",
        "prInterval": "no_evaluado",
        "prValue": "",
        "meconium": "no",
        "earlyOnset": "no",
        "noTreatmentResponse": "no",
    }
