"""Data models for medication safety evaluation.

Pydantic models are used for three groups of data:
- Input: the medications (and plain-string allergies) a caller submits
- Reference: the interaction and allergy tables bundled with the package
- Output: the SafetyReport and the findings it is made of

All models are frozen. Reference data is shared by every evaluation, so it
must never change after it has been loaded; output models are frozen so a
report handed to a caller can't be edited behind the evaluator's back.

Field names are snake_case in Python and camelCase on the wire
(e.g. ``overall_risk`` is serialized as ``overallRisk``).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Severity(str, Enum):
    """Three-level ordinal used for findings and for the overall risk."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class _Frozen(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# --- Input ---


class Medication(_Frozen):
    """One medication the patient takes. Only ``name`` is evaluated."""

    name: str | None = None
    dosage: str = ""
    frequency: str = ""


# --- Reference data ---


class InteractionRule(_Frozen):
    """A counterpart drug listed under another drug's table entry."""

    drug: str
    severity: Severity
    description: str


class DrugProfile(_Frozen):
    """Interaction table entry for a single drug.

    ``contraindications`` are clinical conditions (e.g. "pregnancy"); they are
    reference information only and are not used during evaluation.
    """

    interactions: tuple[InteractionRule, ...] = ()
    contraindications: tuple[str, ...] = ()
    monitoring: tuple[str, ...] = ()


class AllergyRule(_Frozen):
    """Allergy table entry: drugs that cross-react with the allergen."""

    cross_reactive: tuple[str, ...]
    severity: Severity
    description: str


# --- Output ---


class Interaction(_Frozen):
    drug1: str
    drug2: str
    severity: Severity
    description: str
    recommendation: str


class Contraindication(_Frozen):
    medication: str
    allergy: str
    severity: Severity
    description: str
    recommendation: str


class MonitoringAlert(_Frozen):
    medication: str
    monitoring: tuple[str, ...]
    recommendation: str


class SafetyReport(_Frozen):
    """Everything the evaluator found for one medication/allergy list."""

    interactions: tuple[Interaction, ...] = ()
    allergy_contraindications: tuple[Contraindication, ...] = ()
    monitoring_alerts: tuple[MonitoringAlert, ...] = ()
    overall_risk: Severity = Severity.LOW
    recommendations: tuple[str, ...] = ()
