# app.py — Brain Threat Analysis (Streamlit)
# - Categories render as collapsed expanders; sub-groups (e.g. Sensory → Hearing/Vision) nest inside
# - Every widget change reruns the page and rebuilds the whole result tree (scoring.evaluate)
# - master.csv is display-only (helper text / brand names); missing keys warn, never block scoring
# - Text summary (copyable) + CSV download ( *_max columns dropped )

import os, sys
from datetime import datetime
from typing import Any, Dict, Optional

import pandas as pd
import streamlit as st

# ─────────────────────────────────────────────────────────────
# Project path
# ─────────────────────────────────────────────────────────────
ROOT = os.path.dirname(os.path.abspath(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# ─────────────────────────────────────────────────────────────
# Internal modules
# ─────────────────────────────────────────────────────────────
from scoring import evaluate
from scoring.likert import scale_max_of
from scoring.schema import Category, Instrument, InstrumentType, Schema
from utils.config import Settings
from utils.errors import SchemaLoadError
from utils.export import build_row, results_frame, to_csv_bytes
from utils.logging import setup_logging
from utils.registry import Lookup, load_lookup, load_schema, validate_lookup_keys
from utils.summary import format_summary

SETTINGS = Settings.from_env()
setup_logging(SETTINGS.log_level, SETTINGS.log_json)

WIDGET_PREFIX = "w::"
UNANSWERED = "—"

st.set_page_config(
    page_title="Brain Threat Analysis",
    layout="wide",
    initial_sidebar_state="collapsed",
)


# ─────────────────────────────────────────────────────────────
# Data (loaded once, ahead of any scoring call)
# ─────────────────────────────────────────────────────────────
@st.cache_resource
def get_schema(path: str) -> Schema:
    return load_schema(os.path.join(ROOT, path) if not os.path.isabs(path) else path)


@st.cache_resource
def get_lookup(path: str) -> Lookup:
    return load_lookup(os.path.join(ROOT, path) if not os.path.isabs(path) else path)


def wkey(instrument_id: str, item_key: str) -> str:
    return f"{WIDGET_PREFIX}{instrument_id}.{item_key}"


def clear_widgets(prefixes) -> None:
    for k in list(st.session_state.keys()):
        if any(str(k).startswith(p) for p in prefixes):
            del st.session_state[k]


def _fmt_choice(labels: Dict[Any, str]):
    return lambda v: UNANSWERED if v is None else labels.get(v, str(v))


# ─────────────────────────────────────────────────────────────
# Instrument widgets → flat response map entries
# ─────────────────────────────────────────────────────────────
def render_choice_items(inst: Instrument, lookup: Optional[Lookup], out: Dict[str, Any]) -> None:
    if inst.type is InstrumentType.LIKERT and not inst.options:
        top = int(scale_max_of(inst))
        shared = {v: str(v) for v in range(top + 1)}
    else:
        shared = {o.value: o.label or str(o.value) for o in inst.options}

    for it in inst.items:
        labels = {o.value: o.label or str(o.value) for o in it.options} or shared
        sel = st.radio(
            it.label,
            [None] + list(labels.keys()),
            format_func=_fmt_choice(labels),
            horizontal=True,
            key=wkey(inst.id, it.key),
        )
        if lookup is not None and it.csv_key:
            helper = lookup.threat(it.csv_key)
            if helper:
                st.caption(helper)
        if sel is not None:
            out[f"{inst.id}.{it.key}"] = sel


def render_yes_no(inst: Instrument, out: Dict[str, Any]) -> None:
    for it in inst.items:
        sel = st.radio(
            it.label,
            [None, "Yes", "No"],
            format_func=lambda v: UNANSWERED if v is None else v,
            horizontal=True,
            key=wkey(inst.id, it.key),
        )
        if sel is not None:
            out[f"{inst.id}.{it.key}"] = sel


def render_medications(inst: Instrument, lookup: Optional[Lookup], out: Dict[str, Any]) -> None:
    groups = [(c.title, c.items) for c in inst.classes]
    if inst.items:
        groups.append(("Other", inst.items))
    for title, items in groups:
        st.markdown(f"**{title}**")
        for it in items:
            brand = lookup.brand(it.csv_key or it.key) if lookup is not None else ""
            label = f"{it.label} ({brand})" if brand else it.label
            if st.checkbox(label, key=wkey(inst.id, it.key)):
                out[f"{inst.id}.{it.key}"] = True


def render_body_measures(inst: Instrument, out: Dict[str, Any]) -> None:
    if inst.type is InstrumentType.DEMOGRAPHICS:
        age = st.number_input("Age (years)", min_value=0, max_value=120, value=None, step=1,
                              key=wkey(inst.id, "age"))
        if age is not None:
            out[f"{inst.id}.age"] = age

    units = st.radio("Units", ["US", "Metric"], horizontal=True, key=wkey(inst.id, "units"))
    out[f"{inst.id}.units"] = units
    if units == "US":
        fields = [("height_ft", "Height (ft)"), ("height_in", "Height (in)"), ("weight_lb", "Weight (lb)")]
    else:
        fields = [("height_m", "Height (m)"), ("weight_kg", "Weight (kg)")]
    cols = st.columns(len(fields))
    for col, (k, label) in zip(cols, fields):
        with col:
            v = st.number_input(label, min_value=0.0, value=None, key=wkey(inst.id, k))
            if v is not None:
                out[f"{inst.id}.{k}"] = v


def render_instrument(inst: Instrument, lookup: Optional[Lookup], out: Dict[str, Any]) -> None:
    st.subheader(inst.title)
    t = inst.type
    if t in (InstrumentType.LIKERT, InstrumentType.RADIO, InstrumentType.WEIGHTED_SELECT,
             InstrumentType.VFQ_ROUTED):
        render_choice_items(inst, lookup, out)
    elif t is InstrumentType.YN_LIST:
        render_yes_no(inst, out)
    elif t is InstrumentType.MEDICATIONS:
        render_medications(inst, lookup, out)
    elif t in (InstrumentType.DEMOGRAPHICS, InstrumentType.BMI):
        render_body_measures(inst, out)
    else:
        st.info(f"Unsupported instrument type: {inst.type_tag or '(missing)'}")


def render_category(cat: Category, lookup: Optional[Lookup], out: Dict[str, Any]) -> None:
    with st.expander(cat.title, expanded=False):
        for inst in cat.instruments:
            render_instrument(inst, lookup, out)
        for sub in cat.subgroups:
            st.markdown(f"#### {sub.title}")
            for inst in sub.instruments:
                render_instrument(inst, lookup, out)

        if st.button("Clear This Section", key=f"clear::{cat.id}"):
            clear_widgets([f"{WIDGET_PREFIX}{i.id}." for _, i in cat.all_instruments()])
            st.rerun()


# ─────────────────────────────────────────────────────────────
# Page
# ─────────────────────────────────────────────────────────────
st.title("🧠 Brain Threat Analysis")

try:
    schema = get_schema(SETTINGS.schema_path)
except SchemaLoadError as e:
    st.error(f"Cannot load instrument schema: {e}")
    st.stop()

lookup: Optional[Lookup] = None
try:
    lookup = get_lookup(SETTINGS.lookup_path)
except SchemaLoadError as e:
    st.warning(f"Helper text (master.csv) unavailable; scoring continues: {e}")

if lookup is not None:
    missing = validate_lookup_keys(schema, lookup)
    if missing:
        msg = "csvKey values missing from master.csv:\n\n" + "\n".join(f"- {m}" for m in missing)
        if SETTINGS.strict_lookup:
            st.error(msg)
            st.stop()
        st.warning(msg)

participant_id = st.text_input("Participant ID", key=f"{WIDGET_PREFIX}participant_id")

responses: Dict[str, Any] = {}
for cat in schema.categories:
    render_category(cat, lookup, responses)

result = evaluate(schema, responses)

st.divider()
st.subheader("Summary")
summary_text = format_summary(result)
st.code(summary_text or "(no responses yet)", language=None)

with st.expander("Instrument table", expanded=False):
    st.dataframe(results_frame(result), use_container_width=True, hide_index=True)

ts = datetime.now().isoformat(timespec="seconds")
df_out = pd.DataFrame([build_row(ts, participant_id.strip(), result)])
drop_cols = [c for c in df_out.columns if c.endswith("_max")]
if drop_cols:
    df_out = df_out.drop(columns=drop_cols, errors="ignore")

c1, c2 = st.columns(2)
c1.download_button("📥 Download CSV", data=to_csv_bytes(df_out),
                   file_name=f"{ts.replace(':', '-')}_summary.csv", mime="text/csv")
if c2.button("Clear Form"):
    clear_widgets([WIDGET_PREFIX])
    st.rerun()
