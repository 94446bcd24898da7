"""Medication safety evaluator.

Given a patient's medications and known allergies, ``evaluate`` returns a
SafetyReport with:
1. Drug-drug interactions (pairwise, checked in both directions)
2. Allergy contraindications (direct name match and cross-reactivity)
3. Monitoring alerts for drugs that need ongoing observation
4. An overall risk level and an ordered list of recommendations

The function is pure: it reads only the bundled reference tables, keeps no
state between calls, and does no I/O. It is safe to call from any number of
threads or coroutines at once.

Usage:
    report = evaluate(
        [Medication(name="Warfarin"), Medication(name="Aspirin")],
        ["penicillin"],
    )
    report.overall_risk  # Severity.HIGH
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from medsafe.models import (
    Contraindication,
    Interaction,
    Medication,
    MonitoringAlert,
    SafetyReport,
    Severity,
)
from medsafe.reference_data import get_allergy_rule, get_drug_profile

logger = logging.getLogger(__name__)

DIRECT_ALLERGY_RECOMMENDATION = (
    "Discontinue medication immediately and substitute with alternative"
)
CROSS_REACTIVITY_RECOMMENDATION = "Consider alternative medication and monitor closely"

URGENT_ALLERGY_REVIEW = "URGENT: Review allergy contraindications immediately"
HIGH_PRIORITY_INTERACTIONS = "HIGH PRIORITY: Address severe drug interactions"
ENHANCED_MONITORING = "Implement enhanced monitoring protocols"
REGIMEN_SAFE = "Current medication regimen appears safe"
ROUTINE_MONITORING = "Continue routine monitoring"


def interaction_recommendation(severity: Severity | str | None) -> str:
    """Map an interaction's severity to the advice shown with it."""
    if severity == Severity.HIGH:
        return "Consider alternative medications or adjust dosing with close monitoring"
    if severity == Severity.MODERATE:
        return "Monitor closely and consider dose adjustments if needed"
    if severity == Severity.LOW:
        return "Routine monitoring recommended"
    return "Consult clinical pharmacist for guidance"


def _medication_name(entry: Medication | Mapping[str, Any] | None) -> str | None:
    """Return the usable name of a medication entry, or None to skip it."""
    if entry is None:
        return None
    if isinstance(entry, Medication):
        name = entry.name
    else:
        name = entry.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    return name


def _find_interaction(drug: str, counterpart: str) -> Interaction | None:
    """Check drug's table entry for counterpart (one direction only).

    Names are passed with their display casing; lookup is lower-case.
    """
    profile = get_drug_profile(drug)
    if profile is None:
        return None

    wanted = counterpart.lower()
    for rule in profile.interactions:
        if rule.drug.lower() == wanted:
            return Interaction(
                drug1=drug,
                drug2=counterpart,
                severity=rule.severity,
                description=rule.description,
                recommendation=interaction_recommendation(rule.severity),
            )
    return None


def _same_pair(interaction: Interaction, a: str, b: str) -> bool:
    return (interaction.drug1 == a and interaction.drug2 == b) or (
        interaction.drug1 == b and interaction.drug2 == a
    )


def find_interactions(names: list[str]) -> list[Interaction]:
    """Detect interactions between every pair of medications.

    Each index pair i < j is looked up twice: under i's table entry and
    under j's. The reverse direction is only recorded when no interaction
    for the same pair of names has been recorded yet, so a pair declared
    under both drugs is reported once, with the first direction's details.
    """
    interactions: list[Interaction] = []

    for i in range(len(names)):
        for j in range(i + 1, len(names)):
            first, second = names[i], names[j]

            forward = _find_interaction(first, second)
            if forward is not None:
                interactions.append(forward)

            reverse = _find_interaction(second, first)
            if reverse is not None and not any(
                _same_pair(existing, first, second) for existing in interactions
            ):
                interactions.append(reverse)

    return interactions


def find_allergy_contraindications(
    names: list[str], allergies: list[str]
) -> list[Contraindication]:
    """Match every medication against every allergy.

    A direct match (either name contains the other) and a cross-reactivity
    match are independent, so one medication/allergy pair can yield two
    records.
    """
    contraindications: list[Contraindication] = []

    for name in names:
        med_name = name.lower()

        for allergy in allergies:
            allergy_name = allergy.lower()

            if allergy_name in med_name or med_name in allergy_name:
                contraindications.append(
                    Contraindication(
                        medication=name,
                        allergy=allergy,
                        severity=Severity.HIGH,
                        description=f"Patient is allergic to {allergy}",
                        recommendation=DIRECT_ALLERGY_RECOMMENDATION,
                    )
                )

            rule = get_allergy_rule(allergy_name)
            if rule is not None and any(
                drug.lower() in med_name for drug in rule.cross_reactive
            ):
                contraindications.append(
                    Contraindication(
                        medication=name,
                        allergy=allergy,
                        severity=rule.severity,
                        description=f"Cross-reactivity risk: {rule.description}",
                        recommendation=CROSS_REACTIVITY_RECOMMENDATION,
                    )
                )

    return contraindications


def find_monitoring_alerts(names: list[str]) -> list[MonitoringAlert]:
    """One alert per medication whose table entry lists monitoring."""
    alerts: list[MonitoringAlert] = []
    for name in names:
        profile = get_drug_profile(name)
        if profile is None or not profile.monitoring:
            continue
        alerts.append(
            MonitoringAlert(
                medication=name,
                monitoring=profile.monitoring,
                recommendation=f"Monitor {', '.join(profile.monitoring)} regularly",
            )
        )
    return alerts


def _count(findings: Iterable[Interaction | Contraindication], severity: Severity) -> int:
    return sum(1 for f in findings if f.severity == severity)


def assess_risk(
    interactions: list[Interaction],
    contraindications: list[Contraindication],
) -> tuple[Severity, int]:
    """Aggregate findings into an overall risk.

    Returns:
        (overall_risk, high_count). high_count is returned as well because
        the recommendation list depends on it.
    """
    high_count = _count(interactions, Severity.HIGH) + _count(
        contraindications, Severity.HIGH
    )
    moderate_count = _count(interactions, Severity.MODERATE) + _count(
        contraindications, Severity.MODERATE
    )

    if high_count > 0:
        risk = Severity.HIGH
    elif moderate_count > 1:
        risk = Severity.MODERATE
    elif moderate_count > 0 or len(interactions) > 0:
        risk = Severity.MODERATE
    else:
        risk = Severity.LOW

    return risk, high_count


def build_recommendations(
    interactions: list[Interaction],
    contraindications: list[Contraindication],
    monitoring_alerts: list[MonitoringAlert],
    high_count: int,
) -> list[str]:
    """Ordered, cumulative recommendation lines for the whole report."""
    recommendations: list[str] = []
    if contraindications:
        recommendations.append(URGENT_ALLERGY_REVIEW)
    if high_count > 0:
        recommendations.append(HIGH_PRIORITY_INTERACTIONS)
    if monitoring_alerts:
        recommendations.append(ENHANCED_MONITORING)
    if not interactions and not contraindications:
        recommendations.append(REGIMEN_SAFE)
        recommendations.append(ROUTINE_MONITORING)
    return recommendations


def evaluate(
    medications: Iterable[Medication | Mapping[str, Any] | None],
    allergies: Iterable[str | None] | None = None,
) -> SafetyReport:
    """Evaluate a medication list against the reference tables.

    Entries that are None or have no usable name are skipped; they can't
    match anything in the tables. ``allergies=None`` means no known
    allergies, and blank allergy labels are ignored.

    Args:
        medications: Medication models or mappings with a "name" key.
        allergies: Allergy labels, case-insensitive.

    Returns:
        The SafetyReport. An empty input yields a low-risk report.
    """
    names: list[str] = []
    for entry in medications:
        name = _medication_name(entry)
        if name is None:
            logger.debug("Skipping medication entry without a name: %r", entry)
            continue
        names.append(name)

    # A blank label would be a substring of every name and flag everything
    allergy_labels = [
        a for a in (allergies or []) if isinstance(a, str) and a.strip()
    ]

    interactions = find_interactions(names)
    contraindications = find_allergy_contraindications(names, allergy_labels)
    monitoring_alerts = find_monitoring_alerts(names)

    overall_risk, high_count = assess_risk(interactions, contraindications)
    recommendations = build_recommendations(
        interactions, contraindications, monitoring_alerts, high_count
    )

    logger.debug(
        "Evaluated %d medications / %d allergies: %d interactions, "
        "%d contraindications, %d monitoring alerts, risk=%s",
        len(names),
        len(allergy_labels),
        len(interactions),
        len(contraindications),
        len(monitoring_alerts),
        overall_risk.value,
    )

    return SafetyReport(
        interactions=tuple(interactions),
        allergy_contraindications=tuple(contraindications),
        monitoring_alerts=tuple(monitoring_alerts),
        overall_risk=overall_risk,
        recommendations=tuple(recommendations),
    )
