# scoring/vfq.py
"""
VFQ 3-of-7: routed visual function score.

Seven items are declared, in order, but only three are asked. The first answer
picks the branch, the second picks the last item. The three answers feed a
logistic model that gives a 0..100 functional score (higher = better vision).

The result total is the threat complement, 100 - score, out of 100, so vision
pools with the other higher-is-worse instruments. Bands apply to the
functional score. An incomplete route leaves max unset and the band empty.
"""
from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from scoring.answers import Answers
from scoring.bands import clamp, resolve_band
from scoring.results import InstrumentResult
from scoring.schema import Instrument

ITEM_COUNT = 7
SCORE_MAX = 100

_INTERCEPT = 1.145


def route_score(values: Sequence[Optional[float]]) -> Tuple[Optional[float], Tuple[int, ...]]:
    """
    (functional score, indexes of the items used). The score is None while
    the route is incomplete.
    """
    used: List[int] = []
    p = _INTERCEPT

    def take(index: int, coef: float) -> Optional[float]:
        nonlocal p
        v = values[index]
        if v is None:
            return None
        p -= coef * v
        used.append(index)
        return v

    first = take(0, 0.085)
    if first is None:
        return None, ()

    if first == 1:
        second = take(1, 0.043)
        if second is None:
            return None, tuple(used)
        last = take(3, 0.029) if second < 3 else take(4, 0.054)
    else:
        second = take(2, 0.104)
        if second is None:
            return None, tuple(used)
        last = take(5, 0.058) if second == 1 else take(6, 0.031)
    if last is None:
        return None, tuple(used)

    p = clamp(p, 0.001, 0.999)
    score = 72.63 - 31.44 * p - 9.423 * math.log(p / (1 - p))
    return clamp(score, 0, SCORE_MAX), tuple(used)


class VFQRoutedScorer:
    def score(self, instrument: Instrument, answers: Answers) -> InstrumentResult:
        items = instrument.items
        if len(items) != ITEM_COUNT:
            raise ValueError(f"VFQ 3-of-7 needs {ITEM_COUNT} items, got {len(items)}")

        lo, hi = None, None
        if instrument.options:
            lo = min(o.value for o in instrument.options)
            hi = max(o.value for o in instrument.options)
        values: List[Optional[float]] = []
        for it in items:
            v = answers.number(instrument.id, it.key)
            if v is not None and lo is not None:
                v = clamp(v, lo, hi)
            values.append(v)

        score, used = route_score(values)
        used_keys = [items[i].key for i in used]
        if score is None:
            return InstrumentResult(
                id=instrument.id,
                title=instrument.title,
                type=instrument.type.value,
                total=0,
                answered=len(used),
                extra={"score": None, "used": used_keys, "complete": False},
            )

        score = round(score, 1)
        return InstrumentResult(
            id=instrument.id,
            title=instrument.title,
            type=instrument.type.value,
            total=round(SCORE_MAX - score, 1),
            max=SCORE_MAX,
            answered=len(used),
            band=resolve_band(score, instrument.bands),
            extra={"score": score, "used": used_keys, "complete": True},
        )
