import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

import altair as alt
import streamlit as st

from core.data import DecodeError, rows_to_frame
from core.metrics_overview import build_charts, compute_project_detail
from core.settings import normalize_settings
from core.state import ProjectSelection, SelectionMiss, project_name

alt.data_transformers.disable_max_rows()
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .badge {border-radius: 10px;padding: 12px 14px;margin-bottom: 8px;}
        .badge .label {font-size: 0.85rem;font-weight: 500;opacity: 0.85;}
        .badge .value {font-size: 1.15rem;font-weight: 700;}
        .info {border: 1px solid #e5e7eb;border-radius: 10px;padding: 10px 14px;margin-bottom: 8px;}
        .info .label {font-size: 0.85rem;color: #4b5563;}
        .info .value {font-weight: 600;color: #111827;word-break: break-word;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def badge(label: str, value: str, background: str, text_color: str = "#111827"):
    st.markdown(
        f"<div class='badge' style='background:{background};color:{text_color};'>"
        f"<div class='label'>{label}</div><div class='value'>{value}</div></div>",
        unsafe_allow_html=True,
    )


def info_card(label: str, value: str, background: str = "#ffffff"):
    st.markdown(
        f"<div class='info' style='background:{background};'><div class='label'>{label}</div>"
        f"<div class='value'>{value}</div></div>",
        unsafe_allow_html=True,
    )


def get_selection() -> ProjectSelection:
    if "selection" not in st.session_state:
        st.session_state["selection"] = ProjectSelection(normalize_settings({}))
    return st.session_state["selection"]


def handle_upload(selection: ProjectSelection, uploaded) -> None:
    # file_id changes on every new upload, even for same-named, same-sized files
    signature = uploaded.file_id
    if st.session_state.get("_upload_sig") == signature:
        return
    if uploaded.size > selection.settings.max_upload_mb * 1024 * 1024:
        st.error(f"File exceeds {selection.settings.max_upload_mb} MB.")
        return
    try:
        selection.load_bytes(uploaded.getvalue(), uploaded.name)
    except DecodeError:
        st.error("Error reading file. Please ensure it is a valid Excel file.")
        return
    st.session_state["_upload_sig"] = signature
    st.session_state["project_choice"] = project_name(selection.selected)


def render_detail(detail: Dict[str, Any]):
    badges = detail["badges"]
    with card(detail["name"]):
        cols = st.columns(4)
        with cols[0]:
            badge("Priority", badges["priority"]["value"], badges["priority"]["color"])
        with cols[1]:
            badge("Size", badges["size"]["value"], "linear-gradient(135deg,#6366f1,#a855f7)", "#ffffff")
        with cols[2]:
            badge("Current Stage", badges["stage"]["value"], badges["stage"]["color"], "#ffffff")
        with cols[3]:
            badge("Ageing", f"{badges['ageing']['value']} days", "linear-gradient(135deg,#f97316,#ef4444)", "#ffffff")

        left, right = st.columns(2)
        with left:
            info_card("Current Remark", detail["status"]["current_remark"], "#eff6ff")
        with right:
            info_card("Pending With", detail["status"]["pending_with"], "#fefce8")

    with card("Timeline & Dates"):
        cols = st.columns(3)
        for i, item in enumerate(detail["timeline"]):
            with cols[i % 3]:
                info_card(item["label"], item["value"])

    plan = detail["plan"]
    with card("Project Planning Status"):
        cols = st.columns(3)
        with cols[0]:
            badge(plan["plan_shared"]["label"], plan["plan_shared"]["value"], plan["plan_shared"]["color"])
        with cols[1]:
            badge(plan["plan_confirmed"]["label"], plan["plan_confirmed"]["value"], plan["plan_confirmed"]["color"])
        with cols[2]:
            info_card("Ageing (Days)", plan["ageing_days"])
        info_card("Remarks", plan["remarks"])


def render_charts(selection: ProjectSelection):
    charts = build_charts(selection.datasets, selection.settings)
    top = st.columns(2)
    top[0].altair_chart(charts["priority"], use_container_width=True)
    top[1].altair_chart(charts["stage"], use_container_width=True)
    bottom = st.columns(2)
    bottom[0].altair_chart(charts["size"], use_container_width=True)
    bottom[1].altair_chart(charts["ageing"], use_container_width=True)


def on_project_change():
    selection = get_selection()
    try:
        selection.select(st.session_state["project_choice"])
    except SelectionMiss as exc:
        st.warning(str(exc))


# ---------- UI setup ----------
st.set_page_config(page_title="Project Tracker Dashboard", layout="wide")
inject_base_styles()
st.title("Project Tracker Dashboard")
st.caption("Monitor and manage your project portfolio")

selection = get_selection()

with card("Upload Project Data"):
    uploaded = st.file_uploader("Excel files (.xlsx, .xls)", type=["xlsx", "xls"])
    if uploaded is not None:
        handle_upload(selection, uploaded)
    if selection.file_name:
        st.success(f"✓ {selection.file_name}")

if selection.project_count == 0:
    with card("No Projects Loaded"):
        st.info("Upload an Excel file to get started with your project tracking")
    st.stop()

names = selection.project_names()
st.selectbox(
    f"Select Project ({selection.project_count} projects loaded)",
    options=list(dict.fromkeys(names)),
    key="project_choice",
    on_change=on_project_change,
)

selected: Optional[Dict[str, Any]] = selection.selected
if selected is None:
    st.info("No project selected.")
else:
    render_detail(compute_project_detail(selected, selection.settings))

render_charts(selection)

with st.expander("Raw data", expanded=False):
    st.dataframe(rows_to_frame(list(selection.rows)).astype(str), hide_index=True, use_container_width=True)
