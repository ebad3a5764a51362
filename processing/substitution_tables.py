# processing/substitution_tables.py
"""Curated word tables used by the heuristic suggestion generator.

Three tables map a lowercase word to alternatives: consonant-cluster words
that are hard to sing, words whose stress tends to fight the beat, and rhyme
alternatives for common line endings. A YAML file named by
``settings.SUBSTITUTION_TABLES_FILE`` may replace any of them, e.g.::

    singability:
      strength: [power, force]
    rhyme:
      night: [light, sight]
"""

from __future__ import annotations

import functools
from pathlib import Path

import structlog
from config import settings
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from yaml_parser import load_yaml_file

logger = structlog.get_logger(__name__)

SINGABILITY_SUBSTITUTIONS: dict[str, list[str]] = {
    # Consonant clusters
    "strength": ["power", "force", "might"],
    "through": ["past", "by", "via"],
    "against": ["facing", "toward", "upon"],
    "underneath": ["below", "under", "beneath"],
    "throughout": ["across", "over", "within"],
    "stretch": ["reach", "spread", "span"],
    "scratched": ["marked", "scraped", "torn"],
    "struggled": ["fought", "strove", "tried"],
    "strangled": ["choked", "gripped", "held"],
    "splashed": ["sprayed", "spilled", "soaked"],
    # Weak vowels on stressed beats
    "the": ["this", "that", "a"],
    "a": ["one", "some"],
}

STRESS_SUBSTITUTIONS: dict[str, list[str]] = {
    "remember": ["recall", "think of"],
    "however": ["but yet", "although"],
    "because": ["since", "for", "as"],
    "before": ["ere", "prior"],
    "about": ["around", "near"],
    "upon": ["on", "atop"],
    "between": ["amid", "among"],
    "without": ["lacking", "minus"],
}

RHYME_ALTERNATIVES: dict[str, list[str]] = {
    "night": ["light", "sight", "bright", "flight", "right"],
    "day": ["way", "say", "stay", "play", "ray"],
    "love": ["above", "dove", "of"],
    "heart": ["part", "start", "art", "dart"],
    "time": ["rhyme", "climb", "chime", "prime"],
    "away": ["today", "betray", "display", "decay"],
    "mind": ["find", "kind", "blind", "behind"],
    "eyes": ["skies", "lies", "rise", "wise", "cries"],
    "soul": ["whole", "goal", "role", "toll"],
    "dream": ["stream", "beam", "seem", "gleam"],
}


class SubstitutionTables(BaseModel):
    """The three lookup tables; keys and alternatives are stored lowercase."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    singability: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in SINGABILITY_SUBSTITUTIONS.items()}
    )
    stress: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in STRESS_SUBSTITUTIONS.items()}
    )
    rhyme: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in RHYME_ALTERNATIVES.items()}
    )

    @field_validator("singability", "stress", "rhyme", mode="before")
    @classmethod
    def _lowercase_table(cls, value):
        if not isinstance(value, dict):
            return value
        return {
            str(word).strip().lower(): [str(alt).strip().lower() for alt in alts]
            if isinstance(alts, list)
            else alts
            for word, alts in value.items()
        }

    def synonym_tables(self) -> list[dict[str, list[str]]]:
        """Tables whose entries are near-synonyms of their key."""
        return [self.singability, self.stress]


DEFAULT_SUBSTITUTION_TABLES = SubstitutionTables()


def load_substitution_tables(filepath: str | Path) -> SubstitutionTables:
    """Load tables from YAML; sections the file omits keep their defaults.

    Unreadable or malformed files are logged and the built-in tables returned.
    """
    data = load_yaml_file(str(filepath))
    if data is None:
        logger.error(
            "Could not load substitution tables; using built-in tables",
            filepath=str(filepath),
        )
        return DEFAULT_SUBSTITUTION_TABLES

    try:
        tables = SubstitutionTables(**data)
    except ValidationError as exc:
        logger.error(
            "Invalid substitution tables; using built-in tables",
            filepath=str(filepath),
            error=str(exc),
        )
        return DEFAULT_SUBSTITUTION_TABLES

    logger.info(
        "Loaded substitution tables",
        filepath=str(filepath),
        singability=len(tables.singability),
        stress=len(tables.stress),
        rhyme=len(tables.rhyme),
    )
    return tables


@functools.lru_cache(maxsize=8)
def _load_configured_tables(filepath: str) -> SubstitutionTables:
    return load_substitution_tables(filepath)


def get_substitution_tables() -> SubstitutionTables:
    """Return the tables configured via ``settings.SUBSTITUTION_TABLES_FILE``.

    Each configured file is read once per process.
    """
    if settings.SUBSTITUTION_TABLES_FILE:
        return _load_configured_tables(settings.SUBSTITUTION_TABLES_FILE)
    return DEFAULT_SUBSTITUTION_TABLES
