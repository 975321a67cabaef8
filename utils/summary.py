# utils/summary.py — deterministic text summary of an AssessmentResult
# Only pre-resolved numbers and labels are printed; nothing is re-scored or re-banded here.
from __future__ import annotations

from typing import Any, List, Optional

from scoring.bands import Band
from scoring.results import AssessmentResult, CategoryResult, InstrumentResult, OverallResult


def fmt_band(band: Optional[Band]) -> str:
    if band is None or band.empty:
        return ""
    if band.label and band.level:
        return f"{band.label} ({band.level})"
    return band.label or band.level


def fmt_pct(n: Any) -> str:
    if n is None:
        return ""
    return f"{round(float(n))}%"


def safe_num(n: Any, digits: int = 0) -> str:
    if n is None or isinstance(n, bool):
        return ""
    try:
        f = float(n)
    except (TypeError, ValueError):
        return ""
    return f"{f:.{digits}f}" if digits > 0 else str(round(f))


def line(*parts: str) -> str:
    return " — ".join(p for p in parts if p)


def instrument_line(r: InstrumentResult) -> str:
    if r.type == "demographics":
        age, bmi = r.extra.get("age"), r.extra.get("bmi")
        age_part = line(f"Age: {age}", fmt_band(r.extra.get("age_band"))) if age is not None else ""
        bmi_part = line(f"BMI: {bmi}", fmt_band(r.extra.get("bmi_band"))) if bmi is not None else ""
        return line(r.title or "Demographics", " • ".join(p for p in (age_part, bmi_part) if p))

    if r.type == "bmi":
        bmi = r.extra.get("bmi")
        return line(
            r.title or "BMI",
            " • ".join(p for p in (f"BMI: {bmi}" if bmi is not None else "", fmt_band(r.band)) if p),
        )

    if r.type in ("likert", "yn_list"):
        return line(r.title, f"Total: {safe_num(r.total)}/{safe_num(r.max)}", fmt_band(r.band))

    if r.type == "radio":
        return line(r.title, f"Total: {safe_num(r.total)}", fmt_band(r.band))

    if r.type == "weighted_select":
        return line(
            r.title,
            f"Score: {safe_num(r.total)}/{safe_num(r.max)}",
            f"Load: {fmt_pct(r.percent)}",
            fmt_band(r.band),
        )

    if r.type == "vfq_routed":
        score = r.extra.get("score")
        if score is None:
            return line(r.title or "Vision", "Incomplete")
        return line(r.title or "Vision", f"Score: {safe_num(score, 1)}/100", fmt_band(r.band))

    if r.type == "medications":
        return line(
            r.title or "Medication Threat",
            f"Selected: {safe_num(r.extra.get('checked_count', 0))}",
            f"Weight: {safe_num(r.total)}",
            fmt_band(r.band),
        )

    return line(r.title or r.id or "Instrument", "No summary available")


def section_header(c: CategoryResult) -> str:
    title = c.title or c.id
    return f"\n{title}\n{'=' * (len(title) or 6)}"


def section_summary_line(c: CategoryResult) -> str:
    s = c.summary
    if s is None:
        return ""
    if s.percent is not None:
        return line("Section Summary", f"Load: {fmt_pct(s.percent)}", fmt_band(s.band))
    if s.value is not None:
        return line("Section Summary", f"Total: {safe_num(s.value)}", fmt_band(s.band))
    return ""


def overall_summary(o: Optional[OverallResult]) -> str:
    if o is None or o.mode is None:
        return ""
    return f"\nOverall\n-------\n{line('Aggregate Load', fmt_pct(o.percent), fmt_band(o.band))}"


def summary_lines(result: AssessmentResult) -> List[str]:
    lines: List[str] = []
    for c in result.categories:
        lines.append(section_header(c))
        for r in c.instruments:
            prefix = f"[{r.sub}] " if r.sub else ""
            lines.append(f"• {prefix}{instrument_line(r)}")
        s = section_summary_line(c)
        if s:
            lines.append(s)
    ov = overall_summary(result.overall)
    if ov:
        lines.append(ov)
    return lines


def format_summary(result: AssessmentResult) -> str:
    return "\n".join(summary_lines(result)).strip()
