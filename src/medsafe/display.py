"""Display metadata and plain-text rendering for safety reports.

The evaluator only deals in Severity values. How a severity looks to a
person (colour, icon, sort score) lives here so a UI, a CLI or a log line
can all render findings the same way without the evaluator knowing about
any of them.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from medsafe.models import SafetyReport, Severity


class SeverityDisplay(BaseModel):
    """How one severity level is presented."""

    model_config = ConfigDict(frozen=True)

    label: str
    color: str
    icon: str
    score: int


_DISPLAY = {
    Severity.HIGH: SeverityDisplay(label="HIGH", color="red", icon="x-circle", score=3),
    Severity.MODERATE: SeverityDisplay(
        label="MODERATE", color="yellow", icon="alert-triangle", score=2
    ),
    Severity.LOW: SeverityDisplay(label="LOW", color="green", icon="alert-circle", score=1),
}

UNKNOWN_DISPLAY = SeverityDisplay(label="UNKNOWN", color="gray", icon="shield", score=0)


def _coerce(severity: Severity | str | None) -> Severity | None:
    if severity is None or isinstance(severity, Severity):
        return severity
    try:
        return Severity(severity.lower())
    except ValueError:
        return None


def severity_display(severity: Severity | str | None) -> SeverityDisplay:
    """Display metadata for a severity (case-insensitive; unknown → gray)."""
    level = _coerce(severity)
    if level is None:
        return UNKNOWN_DISPLAY
    return _DISPLAY[level]


def severity_color(severity: Severity | str | None) -> str:
    return severity_display(severity).color


def severity_icon(severity: Severity | str | None) -> str:
    return severity_display(severity).icon


def severity_score(severity: Severity | str | None) -> int:
    return severity_display(severity).score


def total_issues(report: SafetyReport) -> int:
    """Number of interactions plus allergy contraindications."""
    return len(report.interactions) + len(report.allergy_contraindications)


def format_report(report: SafetyReport) -> str:
    """Render a SafetyReport as plain text, most severe findings first."""
    issues = total_issues(report)
    lines = [
        f"Safety Status: {severity_display(report.overall_risk).label}",
        f"{issues} {'Issue' if issues == 1 else 'Issues'} Found",
    ]

    if report.allergy_contraindications:
        lines.append("\nAllergy Contraindications:")
        for c in sorted(
            report.allergy_contraindications,
            key=lambda c: severity_score(c.severity),
            reverse=True,
        ):
            lines.append(
                f"- [{severity_display(c.severity).label}] {c.medication} "
                f"(allergy: {c.allergy}) | {c.description} | {c.recommendation}"
            )

    if report.interactions:
        lines.append("\nDrug Interactions:")
        for i in sorted(
            report.interactions,
            key=lambda i: severity_score(i.severity),
            reverse=True,
        ):
            lines.append(
                f"- [{severity_display(i.severity).label}] {i.drug1} + {i.drug2}"
                f" | {i.description} | {i.recommendation}"
            )

    if report.monitoring_alerts:
        lines.append("\nMonitoring:")
        for alert in report.monitoring_alerts:
            lines.append(f"- {alert.medication}: {alert.recommendation}")

    if report.recommendations:
        lines.append("\nRecommendations:")
        for rec in report.recommendations:
            lines.append(f"- {rec}")

    return "\n".join(lines)
