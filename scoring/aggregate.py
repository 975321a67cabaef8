# scoring/aggregate.py
from __future__ import annotations

import dataclasses
import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from scoring.answers import Answers, normalize_responses
from scoring.bands import EMPTY_BAND, pct, resolve_band
from scoring.dispatch import evaluate_instrument
from scoring.results import (
    NEUTRAL_OVERALL,
    AssessmentResult,
    CategoryResult,
    CategorySummary,
    InstrumentResult,
    OverallResult,
)
from scoring.schema import Category, CompositeRule, InstrumentType, Schema, SummaryRule
from utils.errors import InvalidInputError

logger = logging.getLogger(__name__)


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


# ─────────────────────────────────────────────────────────────
# Category
# ─────────────────────────────────────────────────────────────
def summarize_category(
    rule: SummaryRule, results: Iterable[InstrumentResult]
) -> Optional[CategorySummary]:
    """
    sum     -> add the numeric totals of the sources
    percent -> pool each source's answer space (total/max, or tier weights
               for derived values), then pct
    The band stays empty until at least one source has an answer.
    """
    by_id = {r.id: r for r in results}
    sources = [by_id[sid] for sid in (rule.sources or tuple(by_id)) if sid in by_id]
    answered = any(r.answered for r in sources)

    if rule.mode == "sum":
        value = 0
        for r in sources:
            if _is_number(r.total):
                value += r.total
        return CategorySummary(
            mode="sum",
            value=value,
            total=value,
            band=resolve_band(value, rule.bands) if answered else EMPTY_BAND,
        )

    if rule.mode == "percent":
        total, max_total = 0, 0
        for r in sources:
            space = r.answer_space()
            if space is None:
                continue
            total += space[0]
            max_total += space[1]
        percent = pct(total, max_total)
        return CategorySummary(
            mode="percent",
            percent=percent,
            total=total,
            max=max_total,
            band=resolve_band(percent, rule.percent_bands) if answered else EMPTY_BAND,
        )

    logger.warning("unknown summary mode %r, summary omitted", rule.mode)
    return None


def evaluate_category(
    category: Union[Category, Mapping[str, Any]],
    responses: Union[Answers, Mapping[str, Any]],
) -> CategoryResult:
    """
    Flat instruments first, then sub-group instruments (tagged with their
    sub-group key). The optional summary reads the results just computed.
    """
    if not isinstance(category, Category):
        category = Category.from_dict(category)
    answers = normalize_responses(responses)

    results: List[InstrumentResult] = []
    for sub, instrument in category.all_instruments():
        r = evaluate_instrument(instrument, answers)
        if sub is not None:
            r = dataclasses.replace(r, sub=sub)
        results.append(r)

    summary = summarize_category(category.summary, results) if category.summary else None
    return CategoryResult(
        id=category.id,
        title=category.title,
        instruments=tuple(results),
        summary=summary,
    )


# ─────────────────────────────────────────────────────────────
# Overall
# ─────────────────────────────────────────────────────────────
def evaluate_overall(
    categories: Iterable[CategoryResult], rule: Optional[CompositeRule]
) -> OverallResult:
    """
    percent          -> pool every weighted-select total/max across categories
    weighted_average -> pool each category's (score, max) answer space
    no rule          -> neutral result (nothing is fabricated)
    """
    if rule is None or not rule.mode:
        return NEUTRAL_OVERALL

    total, max_total = 0, 0
    if rule.mode == "percent":
        for c in categories:
            for r in c.instruments:
                if r.type != InstrumentType.WEIGHTED_SELECT.value:
                    continue
                if _is_number(r.total) and _is_number(r.max):
                    total += r.total
                    max_total += r.max
    elif rule.mode == "weighted_average":
        for c in categories:
            score, max_score = c.totals()
            if max_score > 0:
                total += score
                max_total += max_score
    else:
        logger.warning("unknown composite mode %r, overall omitted", rule.mode)
        return NEUTRAL_OVERALL

    percent = pct(total, max_total)
    return OverallResult(
        mode=rule.mode,
        percent=percent,
        total=total,
        max=max_total,
        band=resolve_band(percent, rule.percent_bands),
    )


# ─────────────────────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────────────────────
def evaluate(
    schema: Union[Schema, Mapping[str, Any]],
    responses: Union[Answers, Mapping[str, Any]],
) -> AssessmentResult:
    """Full single-pass evaluation: schema + response map -> fresh result tree."""
    if not isinstance(schema, (Schema, Mapping)):
        raise InvalidInputError(f"schema must be a mapping, got {type(schema).__name__}")
    if not isinstance(responses, (Answers, Mapping)):
        raise InvalidInputError(f"responses must be a mapping, got {type(responses).__name__}")

    if not isinstance(schema, Schema):
        schema = Schema.from_dict(schema)
    answers = normalize_responses(responses)

    categories = tuple(evaluate_category(c, answers) for c in schema.categories)
    return AssessmentResult(
        categories=categories,
        overall=evaluate_overall(categories, schema.overall),
    )
