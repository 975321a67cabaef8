# scoring/dispatch.py
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Union

from scoring.answers import Answers, normalize_responses
from scoring.demographics import BMIScorer, DemographicsScorer
from scoring.likert import LikertScorer
from scoring.medications import MedicationScorer
from scoring.radio import RadioScorer
from scoring.results import InstrumentResult, unsupported_result
from scoring.schema import Instrument, InstrumentType
from scoring.vfq import VFQRoutedScorer
from scoring.weighted import WeightedSelectScorer
from scoring.yesno import YesNoScorer

logger = logging.getLogger(__name__)

SCORERS: Dict[InstrumentType, Any] = {
    InstrumentType.DEMOGRAPHICS: DemographicsScorer(),
    InstrumentType.BMI: BMIScorer(),
    InstrumentType.YN_LIST: YesNoScorer(),
    InstrumentType.LIKERT: LikertScorer(),
    InstrumentType.RADIO: RadioScorer(),
    InstrumentType.WEIGHTED_SELECT: WeightedSelectScorer(),
    InstrumentType.MEDICATIONS: MedicationScorer(),
    InstrumentType.VFQ_ROUTED: VFQRoutedScorer(),
}


def evaluate_instrument(
    instrument: Union[Instrument, Mapping[str, Any]],
    responses: Union[Answers, Mapping[str, Any]],
) -> InstrumentResult:
    """
    Route one instrument to its scorer. Unknown type tags, and scorers that
    fail on an odd node, come back as an "unsupported" result instead of
    raising, so sibling instruments are unaffected.
    """
    if not isinstance(instrument, Instrument):
        instrument = Instrument.from_dict(instrument)
    answers = normalize_responses(responses)

    if instrument.type is InstrumentType.UNSUPPORTED:
        tag = instrument.type_tag or "(missing)"
        logger.warning("unsupported instrument type %r for %s", tag, instrument.id)
        return unsupported_result(
            instrument.id, instrument.title, f"Unsupported instrument type: {tag}"
        )

    scorer = SCORERS[instrument.type]
    try:
        return scorer.score(instrument, answers)
    except (TypeError, ValueError, KeyError, AttributeError, ArithmeticError) as e:
        logger.exception("scoring failed for %s (%s)", instrument.id, instrument.type.value)
        return unsupported_result(
            instrument.id, instrument.title, f"Could not score {instrument.type.value}: {e}"
        )
