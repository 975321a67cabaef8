# scoring/answers.py
"""
Boundary normalization of the raw response map.

The input surface produces loosely typed values ("1", "true", 1, True all
mean "checked"; option values arrive as strings). They are parsed once into
Answer values and every scorer reads only the resulting Answers snapshot.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Union

_TRUE_WORDS = {"yes", "y", "true", "on", "checked"}
_FALSE_WORDS = {"no", "n", "false", "off", "unchecked"}


@dataclass(frozen=True)
class Answer:
    raw: Any
    text: str = ""
    number: Optional[float] = None
    checked: Optional[bool] = None


def _parse_number(s: str) -> Optional[float]:
    try:
        v = float(s)
    except ValueError:
        return None
    return v if math.isfinite(v) else None


def normalize_answer(raw: Any) -> Optional[Answer]:
    """Raw value -> Answer, or None when the value means "unanswered"."""
    if raw is None:
        return None

    if isinstance(raw, bool):
        return Answer(raw=raw, text=str(raw).lower(), checked=raw)

    if isinstance(raw, (int, float)):
        if not math.isfinite(raw):
            return None
        checked = True if raw == 1 else (False if raw == 0 else None)
        return Answer(raw=raw, text=str(raw), number=raw, checked=checked)

    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        low = text.lower()
        number = _parse_number(text)
        if low in _TRUE_WORDS or number == 1:
            checked: Optional[bool] = True
        elif low in _FALSE_WORDS or number == 0:
            checked = False
        else:
            checked = None
        return Answer(raw=raw, text=text, number=number, checked=checked)

    # Lists, dicts and other containers carry no scorable meaning.
    return None


class Answers(Mapping[str, Answer]):
    """Read-only snapshot of normalized answers keyed like the raw response map."""

    def __init__(self, answers: Mapping[str, Answer]):
        self._data = MappingProxyType(dict(answers))

    def __getitem__(self, key: str) -> Answer:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def lookup(self, instrument_id: str, item_key: str) -> Optional[Answer]:
        """Qualified "<instrument>.<item>" key first, then the bare item key."""
        qualified = f"{instrument_id}.{item_key}"
        if qualified in self._data:
            return self._data[qualified]
        return self._data.get(item_key)

    def number(self, instrument_id: str, item_key: str) -> Optional[float]:
        a = self.lookup(instrument_id, item_key)
        return a.number if a is not None else None

    def checked(self, instrument_id: str, item_key: str) -> Optional[bool]:
        a = self.lookup(instrument_id, item_key)
        return a.checked if a is not None else None

    def text(self, instrument_id: str, item_key: str) -> str:
        a = self.lookup(instrument_id, item_key)
        return a.text if a is not None else ""


def normalize_responses(responses: Union[Mapping[str, Any], Answers]) -> Answers:
    if isinstance(responses, Answers):
        return responses
    out: Dict[str, Answer] = {}
    for key, raw in responses.items():
        a = normalize_answer(raw)
        if a is not None:
            out[str(key)] = a
    return Answers(out)
