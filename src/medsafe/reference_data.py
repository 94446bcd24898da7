"""Bundled reference tables: drug interactions and allergy cross-reactivity.

Both tables ship inside the package as versioned JSON files under
``medsafe/data/``. They are loaded and validated once, when this module is
first imported, and exposed as read-only mappings of frozen models:

    DRUG_INTERACTIONS          drug name     -> DrugProfile
    ALLERGY_CROSS_REACTIVITY   allergen name -> AllergyRule

Keys are lower-case. A missing or malformed file raises ReferenceDataError
at import time, so a broken install fails before any evaluation runs.

The tables are not configurable. To change them, ship a new version of the
JSON files.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from importlib.resources import files
from importlib.resources.abc import Traversable
from pathlib import Path
from types import MappingProxyType
from typing import TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from medsafe.models import AllergyRule, DrugProfile

logger = logging.getLogger(__name__)

_DATA_DIR = files("medsafe") / "data"

DRUG_INTERACTIONS_FILE = "drug_interactions.json"
ALLERGY_CROSS_REACTIVITY_FILE = "allergy_cross_reactivity.json"

EntryT = TypeVar("EntryT", bound=BaseModel)


class ReferenceDataError(Exception):
    """Raised when a bundled reference table can't be read or validated."""


def load_table(
    source: Traversable | Path, entry_model: type[EntryT]
) -> tuple[str, Mapping[str, EntryT]]:
    """Read one reference table file.

    Args:
        source: Path to the JSON file.
        entry_model: Model every value under ``entries`` must validate as.

    Returns:
        (version, entries) where entries is a read-only mapping keyed by the
        lower-cased name.

    Raises:
        ReferenceDataError: If the file is missing, not JSON, or doesn't
            match the expected shape.
    """
    try:
        raw = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Could not read reference table %s: %s", source, e)
        raise ReferenceDataError(f"Could not read {source}: {e}") from e

    if not isinstance(raw, dict) or "version" not in raw or "entries" not in raw:
        logger.error("Reference table %s has no version/entries", source)
        raise ReferenceDataError(f"{source} must contain 'version' and 'entries'")

    try:
        entries = TypeAdapter(dict[str, entry_model]).validate_python(raw["entries"])
    except ValidationError as e:
        logger.error("Reference table %s failed validation: %s", source, e)
        raise ReferenceDataError(f"Invalid entries in {source}: {e}") from e

    normalized = {name.lower(): entry for name, entry in entries.items()}
    return str(raw["version"]), MappingProxyType(normalized)


DRUG_INTERACTIONS_VERSION, DRUG_INTERACTIONS = load_table(
    _DATA_DIR / DRUG_INTERACTIONS_FILE, DrugProfile
)
ALLERGY_CROSS_REACTIVITY_VERSION, ALLERGY_CROSS_REACTIVITY = load_table(
    _DATA_DIR / ALLERGY_CROSS_REACTIVITY_FILE, AllergyRule
)

# Both tables are released together; this is the combined data version.
REFERENCE_DATA_VERSION = (
    f"interactions-{DRUG_INTERACTIONS_VERSION}"
    f"+allergies-{ALLERGY_CROSS_REACTIVITY_VERSION}"
)

logger.info(
    "Loaded reference data %s (%d drugs, %d allergens)",
    REFERENCE_DATA_VERSION,
    len(DRUG_INTERACTIONS),
    len(ALLERGY_CROSS_REACTIVITY),
)


def get_drug_profile(name: str) -> DrugProfile | None:
    """Look up a drug's interaction table entry (case-insensitive)."""
    return DRUG_INTERACTIONS.get(name.lower())


def get_allergy_rule(allergen: str) -> AllergyRule | None:
    """Look up an allergen's cross-reactivity entry (case-insensitive)."""
    return ALLERGY_CROSS_REACTIVITY.get(allergen.lower())
