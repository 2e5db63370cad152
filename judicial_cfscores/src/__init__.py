"""
Judicial CF Score Analysis Package.

This package provides tools for describing the campaign-finance ideology
scores (CF scores) of US state judges by party, appointment type, entry
year and state.
"""

from .data_acquisition import CFScoreDataLoader, ReadError, SchemaError
from .preprocessing import (
    CFScoreDataPreprocessor,
    derive_appointment_type,
    map_party,
    normalize_state,
)
from .analysis import CFScoreAnalyzer, categorize_ideology, count_categories
from .visualization import CFScoreVisualizer

__version__ = "0.1.0"
__all__ = [
    "CFScoreDataLoader",
    "ReadError",
    "SchemaError",
    "CFScoreDataPreprocessor",
    "derive_appointment_type",
    "map_party",
    "normalize_state",
    "CFScoreAnalyzer",
    "categorize_ideology",
    "count_categories",
    "CFScoreVisualizer",
]
