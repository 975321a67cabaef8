# ┏━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━┓
# ┃ utils/registry.py — schema loading (JSON / YAML) + display lookup CSV   ┃
# ┗━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━┛
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

import pandas as pd
import yaml

from scoring.schema import Schema
from utils.errors import SchemaLoadError

logger = logging.getLogger(__name__)

LOOKUP_COLUMNS = ["instrument_id", "item_key", "threat", "brand_name"]


def _load_json(p: Path) -> Any:
    with p.open("r", encoding="utf-8") as f:
        return json.load(f)


def _load_yaml(p: Path) -> Any:
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_schema_dict(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Raw schema document.
    .json → json, .yaml/.yml → PyYAML. Anything else or a non-mapping
    top level raises SchemaLoadError.
    """
    p = Path(path)
    if not p.exists():
        raise SchemaLoadError(f"Schema file not found: {p}")

    suffix = p.suffix.lower()
    try:
        if suffix == ".json":
            doc = _load_json(p)
        elif suffix in (".yaml", ".yml"):
            doc = _load_yaml(p)
        else:
            raise SchemaLoadError(f"Unsupported schema format: {p.name} (.json|.yaml|.yml)")
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise SchemaLoadError(f"Schema load failed: {p.name} → {e}") from e

    if not isinstance(doc, Mapping):
        raise SchemaLoadError(f"Schema root must be an object: {p.name}")
    if not doc.get("categories"):
        logger.warning("schema %s has no categories", p.name)
    return dict(doc)


def load_schema(path: Union[str, Path]) -> Schema:
    return Schema.from_dict(load_schema_dict(path))


def list_categories(schema: Schema) -> List[Dict[str, Any]]:
    return [
        {
            "id": c.id,
            "title": c.title,
            "instruments": [i.id for _, i in c.all_instruments()],
        }
        for c in schema.categories
    ]


# ─────────────────────────────────────────────────────────────
# Display lookup (master.csv): item_key → helper text / brand name
# ─────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Lookup:
    threat_by_key: Dict[str, str] = field(default_factory=dict)
    brand_by_key: Dict[str, str] = field(default_factory=dict)

    def __contains__(self, key: object) -> bool:
        return str(key).strip().lower() in self.threat_by_key

    def threat(self, key: str) -> str:
        return self.threat_by_key.get(key.strip().lower(), "")

    def brand(self, key: str) -> str:
        return self.brand_by_key.get(key.strip().lower(), "")


def load_lookup(path: Union[str, Path]) -> Lookup:
    p = Path(path)
    if not p.exists():
        raise SchemaLoadError(f"Lookup file not found: {p}")
    try:
        df = pd.read_csv(p, dtype=str, keep_default_na=False)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise SchemaLoadError(f"Lookup load failed: {p.name} → {e}") from e
    return lookup_from_frame(df, source=p.name)


def lookup_from_frame(df: pd.DataFrame, source: str = "lookup") -> Lookup:
    df = df.rename(columns=lambda c: str(c).strip())
    missing = [c for c in LOOKUP_COLUMNS if c not in df.columns]
    if missing:
        raise SchemaLoadError(f"{source} is missing required columns: {', '.join(missing)}")

    df = df.assign(item_key=df["item_key"].astype(str).str.strip().str.lower())
    df = df[df["item_key"] != ""]
    threat: Dict[str, str] = {}
    brand: Dict[str, str] = {}
    for row in df.itertuples(index=False):
        threat[row.item_key] = str(row.threat).strip()
        brand[row.item_key] = str(row.brand_name).strip()
    return Lookup(threat_by_key=threat, brand_by_key=brand)


def validate_lookup_keys(schema: Schema, lookup: Lookup) -> List[str]:
    """
    One warning per item whose csv_key is not in the lookup.
    Display-time only: scoring never depends on the lookup.
    """
    warnings: List[str] = []
    for c in schema.categories:
        for _, inst in c.all_instruments():
            items = list(inst.items)
            for cls in inst.classes:
                items.extend(cls.items)
            for it in items:
                if it.csv_key and it.csv_key not in lookup:
                    warnings.append(f"{c.title} / {inst.title}: {it.csv_key}")
    for w in warnings:
        logger.warning("lookup key missing: %s", w)
    return warnings
