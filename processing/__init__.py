"""Model-free processing of quantitative poem analysis."""

from .substitution_tables import (
    DEFAULT_SUBSTITUTION_TABLES,
    SubstitutionTables,
    get_substitution_tables,
    load_substitution_tables,
)
from .suggestion_generator import (
    GeneratorOptions,
    GeneratorResult,
    count_generatable_problems,
    generate_suggestions_from_analysis,
    has_generatable_problems,
)

__all__ = [
    "DEFAULT_SUBSTITUTION_TABLES",
    "SubstitutionTables",
    "get_substitution_tables",
    "load_substitution_tables",
    "GeneratorOptions",
    "GeneratorResult",
    "count_generatable_problems",
    "generate_suggestions_from_analysis",
    "has_generatable_problems",
]
