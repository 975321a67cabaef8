"""
Shared fixtures: small hand-built schemas plus the bundled data/ files.
"""

from __future__ import annotations

from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = ROOT / "data"

TIER_BANDS = [
    {"min": 0, "max": 24, "label": "Low", "level": "low"},
    {"min": 25, "max": 49, "label": "Moderate", "level": "moderate"},
    {"min": 50, "max": 74, "label": "High", "level": "high"},
    {"min": 75, "max": 100, "label": "Very High", "level": "very high"},
]

FREQ_OPTIONS = [
    {"value": 0, "label": "Never"},
    {"value": 1, "label": "Sometimes"},
    {"value": 2, "label": "Often"},
    {"value": 3, "label": "Daily"},
]


def weighted(iid: str, n_items: int, weights=None) -> dict:
    weights = weights or [1] * n_items
    return {
        "id": iid,
        "title": iid.title(),
        "type": "weighted_select",
        "options": FREQ_OPTIONS,
        "items": [{"key": f"q{i + 1}", "label": f"Q{i + 1}", "weight": w}
                  for i, w in enumerate(weights)],
        "percentBands": TIER_BANDS,
    }


@pytest.fixture
def tier_bands():
    return [dict(b) for b in TIER_BANDS]


@pytest.fixture
def stress_instrument():
    return {
        "id": "stress",
        "title": "Perceived Stress",
        "type": "likert",
        "scaleMax": 4,
        "reverse": ["s2", "s3"],
        "items": [{"key": f"s{i}", "label": f"Stress {i}"} for i in range(1, 5)],
        "bands": [
            {"min": 0, "max": 5, "label": "Low Stress"},
            {"min": 6, "max": 10, "label": "Moderate Stress"},
            {"min": 11, "max": 16, "label": "High Stress"},
        ],
    }


@pytest.fixture
def mini_schema(stress_instrument):
    return {
        "categories": [
            {
                "id": "personal",
                "title": "Personal History",
                "instruments": [stress_instrument],
            },
            {
                "id": "exposures",
                "title": "Exposures",
                "instruments": [weighted("toxins", 4), weighted("foods", 3)],
                "summary": {
                    "mode": "percent",
                    "sources": ["toxins", "foods"],
                    "percentBands": TIER_BANDS,
                },
            },
        ],
        "overall": {"mode": "percent", "percentBands": TIER_BANDS},
    }


@pytest.fixture
def bundled_schema_path():
    return DATA_DIR / "instruments_config.json"


@pytest.fixture
def bundled_lookup_path():
    return DATA_DIR / "master.csv"
