"""scoring package - band resolution, per-instrument scorers, category and overall aggregation."""

from scoring.aggregate import evaluate, evaluate_category, evaluate_overall, summarize_category
from scoring.answers import Answer, Answers, normalize_answer, normalize_responses
from scoring.bands import EMPTY_BAND, Band, pct, resolve_band
from scoring.dispatch import SCORERS, evaluate_instrument
from scoring.results import (
    AssessmentResult,
    CategoryResult,
    CategorySummary,
    InstrumentResult,
    OverallResult,
)
from scoring.schema import Category, Instrument, InstrumentType, Item, Schema

__all__ = [
    "evaluate",
    "evaluate_category",
    "evaluate_overall",
    "summarize_category",
    "evaluate_instrument",
    "SCORERS",
    "Answer",
    "Answers",
    "normalize_answer",
    "normalize_responses",
    "Band",
    "EMPTY_BAND",
    "pct",
    "resolve_band",
    "AssessmentResult",
    "CategoryResult",
    "CategorySummary",
    "InstrumentResult",
    "OverallResult",
    "Category",
    "Instrument",
    "InstrumentType",
    "Item",
    "Schema",
]
