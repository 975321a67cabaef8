# utils/export.py — result tree → flat row / DataFrame / CSV
from __future__ import annotations

from io import StringIO
from typing import Any, Dict, List

import pandas as pd

from scoring.results import AssessmentResult


def build_row(ts: str, participant_id: str, result: AssessmentResult) -> Dict[str, Any]:
    """
    One flat row per assessment:
      {instrument}_total / _max / _band / _pct, {category}_summary(_band), overall_pct/_band
    """
    row: Dict[str, Any] = {"timestamp": ts, "participant_id": participant_id}
    for c, r in result.instruments():
        k = r.id
        row[f"{k}_total"] = r.total
        row[f"{k}_max"] = r.max
        row[f"{k}_band"] = r.band.label
        if r.percent is not None:
            row[f"{k}_pct"] = r.percent
        if r.type == "demographics":
            row[f"{k}_age"] = r.extra.get("age")
            row[f"{k}_bmi"] = r.extra.get("bmi")
        elif r.type == "bmi":
            row[f"{k}_bmi"] = r.extra.get("bmi")
        elif r.type == "vfq_routed":
            row[f"{k}_score"] = r.extra.get("score")

    for c in result.categories:
        if c.summary is None:
            continue
        s = c.summary
        row[f"{c.id}_summary"] = s.percent if s.mode == "percent" else s.value
        row[f"{c.id}_summary_band"] = s.band.label

    if result.overall.mode is not None:
        row["overall_pct"] = result.overall.percent
        row["overall_band"] = result.overall.band.label
    return row


def results_frame(result: AssessmentResult) -> pd.DataFrame:
    """One row per instrument, in evaluation order."""
    records: List[Dict[str, Any]] = []
    for c, r in result.instruments():
        records.append({
            "category": c.id,
            "sub": r.sub or "",
            "instrument": r.id,
            "title": r.title,
            "type": r.type,
            "total": r.total,
            "max": r.max,
            "answered": r.answered,
            "percent": r.percent,
            "band": r.band.label,
            "level": r.band.level,
            "note": r.note,
        })
    columns = ["category", "sub", "instrument", "title", "type", "total", "max",
               "answered", "percent", "band", "level", "note"]
    return pd.DataFrame(records, columns=columns)


def to_csv_bytes(df: pd.DataFrame) -> bytes:
    buf = StringIO()
    df.to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8-sig")
