"""FastAPI server — the HTTP entry point for the evaluator.

Endpoints:

- GET  /health                      — Simple check that the server is running
- GET  /reference                   — Reference data version and known names
- GET  /drugs/{name}                — Interaction table entry for one drug
- POST /medications/check           — Evaluate medications + allergies (JSON)
- POST /medications/check/summary   — Same, rendered as plain text

Request and response bodies are validated by Pydantic; FastAPI answers 422
for a malformed payload before the evaluator is called.

Run locally with:
    uvicorn medsafe.app:app --reload
"""

import logging

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from medsafe.config import MEDSAFE_API_TITLE, MEDSAFE_LOG_LEVEL
from medsafe.display import format_report
from medsafe.evaluator import evaluate
from medsafe.models import DrugProfile, Medication, SafetyReport
from medsafe.reference_data import (
    ALLERGY_CROSS_REACTIVITY,
    DRUG_INTERACTIONS,
    REFERENCE_DATA_VERSION,
    get_drug_profile,
)

logging.basicConfig(level=MEDSAFE_LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=MEDSAFE_API_TITLE,
    description="Check a medication list for interactions and allergy risks",
    version="0.1.0",
)


class CheckRequest(BaseModel):
    """What the client sends to the /medications/check endpoints."""

    medications: list[Medication]
    allergies: list[str] | None = None  # None means no known allergies


class ReferenceInfo(BaseModel):
    """What /reference sends back."""

    version: str
    drugs: list[str]
    allergens: list[str]


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint. Returns 200 if the server is running."""
    return {"status": "ok"}


@app.get("/reference", response_model=ReferenceInfo)
async def reference() -> ReferenceInfo:
    """Report which reference data version this server evaluates against."""
    return ReferenceInfo(
        version=REFERENCE_DATA_VERSION,
        drugs=sorted(DRUG_INTERACTIONS),
        allergens=sorted(ALLERGY_CROSS_REACTIVITY),
    )


@app.get("/drugs/{name}", response_model=DrugProfile)
async def drug_profile(name: str) -> DrugProfile:
    """Return a drug's interactions, contraindicated conditions and monitoring."""
    profile = get_drug_profile(name)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"No reference entry for {name!r}")
    return profile


@app.post("/medications/check", response_model=SafetyReport)
async def check_medications(request: CheckRequest) -> SafetyReport:
    """Evaluate the submitted medications against the patient's allergies."""
    report = evaluate(request.medications, request.allergies)
    logger.info(
        "Checked %d medications: risk=%s",
        len(request.medications),
        report.overall_risk.value,
    )
    return report


@app.post("/medications/check/summary", response_class=PlainTextResponse)
async def check_medications_summary(request: CheckRequest) -> str:
    """Same as /medications/check, rendered as a plain-text report."""
    return format_report(evaluate(request.medications, request.allergies))
