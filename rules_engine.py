# rules_engine.py
from dataclasses import dataclass
from enum import Enum, IntEnum


class RiskLevel(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2

    @property
    def label(self):
        """Spanish label shown on the result panel."""
        return LEVEL_LABELS[self]


LEVEL_LABELS = {
    RiskLevel.LOW: "bajo",
    RiskLevel.MEDIUM: "mediano",
    RiskLevel.HIGH: "alto",
}


class PrInterval(str, Enum):
    NOT_EVALUATED = "not_evaluated"
    EVALUATED = "evaluated"


# Thresholds
BILE_ACIDS_HIGH = 100
BILE_ACIDS_MEDIUM = 40
BILE_ACIDS_TREATMENT = 10
GOT_LIMIT = 40
GPT_LIMIT = 40
BILIRUBIN_LIMIT = 1.2
PR_INTERVAL_LIMIT_MS = 150
EARLY_ONSET_WEEKS = 30
TERM_WEEKS = 37


RECOMMENDATIONS = {
    RiskLevel.LOW: [
        "Seguimiento regular",
        "Monitoreo de ácidos biliares cada 1-2 semanas",
        "Considerar tratamiento sintomático para el prurito si es necesario",
        "Control prenatal de rutina",
    ],
    RiskLevel.MEDIUM: [
        "Monitoreo semanal de ácidos biliares y enzimas hepáticas",
        "Iniciar tratamiento con ácido ursodeoxicólico",
        "Considerar inducción del parto a las 37-38 semanas",
        "Monitoreo fetal más frecuente",
    ],
    RiskLevel.HIGH: [
        "Monitoreo intensivo de ácidos biliares y función hepática (2-3 veces por semana)",
        "Tratamiento con ácido ursodeoxicólico en dosis altas",
        "Planear el parto entre las 34-36 semanas según severidad",
        "Considerar corticosteroides para maduración pulmonar si <34 semanas",
        "Monitoreo fetal diario",
    ],
}

TREATMENT_SUFFIX = " Se sugiere tratamiento con ácido ursodesoxicólico."


@dataclass(frozen=True)
class ClinicalInput:
    bile_acids: float
    got: float
    gpt: float
    total_bilirubin: float
    gestational_weeks: float
    pr_interval: PrInterval = PrInterval.NOT_EVALUATED
    pr_value: float = 0.0
    meconium: bool = False
    early_onset: bool = False
    no_treatment_response: bool = False


@dataclass(frozen=True)
class RiskAssessment:
    level: RiskLevel
    triggered_factors: tuple
    recommendation: str


def _high_risk_factors(data):
    rules = [
        (data.bile_acids >= BILE_ACIDS_HIGH, "Ácidos biliares ≥ 100 μmol/L"),
        (data.meconium, "Presencia de meconio"),
        (data.no_treatment_response, "Falta de respuesta al tratamiento"),
        (
            data.pr_interval == PrInterval.EVALUATED and data.pr_value > PR_INTERVAL_LIMIT_MS,
            "Intervalo PR prolongado (>150ms)",
        ),
    ]
    return [label for fired, label in rules if fired]


def _medium_risk_factors(data):
    rules = [
        (
            BILE_ACIDS_MEDIUM <= data.bile_acids < BILE_ACIDS_HIGH,
            "Ácidos biliares entre 40-99 μmol/L",
        ),
        (data.got > GOT_LIMIT, "GOT elevado (>40 U/L)"),
        (data.gpt > GPT_LIMIT, "GPT elevado (>40 U/L)"),
        (data.total_bilirubin > BILIRUBIN_LIMIT, "Bilirrubina total elevada (>1.2 mg/dL)"),
        (data.gestational_weeks >= TERM_WEEKS, "Edad gestacional ≥ 37 semanas"),
        (data.early_onset, "Inicio precoz (<30 semanas)"),
    ]
    return [label for fired, label in rules if fired]


def build_recommendation(level: RiskLevel, bile_acids: float) -> str:
    """Join the tier's sentences; add the UDCA suggestion when bile acids > 10."""
    text = ". ".join(RECOMMENDATIONS[level]) + "."
    if bile_acids > BILE_ACIDS_TREATMENT:
        text += TREATMENT_SUFFIX
    return text


def evaluate(data: ClinicalInput) -> RiskAssessment:
    """
    Classify an ICP case into a risk tier.

    High-tier rules are all checked first. Medium-tier rules only run when
    none of them fired. Factors keep rule order within the pass that ran.
    """
    level = RiskLevel.LOW
    factors = _high_risk_factors(data)
    if factors:
        level = RiskLevel.HIGH
    else:
        factors = _medium_risk_factors(data)
        if factors:
            level = RiskLevel.MEDIUM

    return RiskAssessment(
        level=level,
        triggered_factors=tuple(factors),
        recommendation=build_recommendation(level, data.bile_acids),
    )


def format_factors(assessment):
    """Format triggered factors into a markdown bullet list."""
    return "\n".join(f"- {factor}" for factor in assessment.triggered_factors)
