from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Mapping, Optional

from core import fields as f
from core.aggregations import DerivedDatasets
from core.charts import ageing_bar, count_bar, pairs_records, share_pie, to_vega_spec
from core.settings import DashboardSettings

TIMELINE_FIELDS = [
    ("stage_pending_since", "Current Stage Pending Since", f.STAGE_PENDING_SINCE),
    ("last_action_date", "Last Action Date", f.LAST_ACTION_DATE),
    ("next_action_planned", "Next Action (As Per Plan)", f.NEXT_ACTION_PLANNED),
    ("next_action_date", "Next Action Date", f.NEXT_ACTION_DATE),
    ("brd_shared_date", "BRD Shared Date", f.BRD_SHARED_DATE),
    ("today", "Today", f.TODAY),
]


def build_charts(datasets: DerivedDatasets, settings: DashboardSettings) -> Dict[str, Any]:
    return {
        "priority": share_pie(datasets.priority, "Priority Distribution"),
        "stage": count_bar(datasets.stage, "Current Stage Distribution"),
        "size": share_pie(datasets.size, "Project Size Distribution"),
        "ageing": ageing_bar(datasets.ageing, f"Top {settings.top_n} Projects by Ageing"),
    }


def compute_overview(settings: DashboardSettings, rows_count: int, datasets: DerivedDatasets, file_name: str = "") -> Dict[str, Any]:
    if rows_count == 0:
        return {"settings": asdict(settings), "file_name": file_name, "project_count": 0, "datasets": {}, "charts": {}}

    charts = {key: to_vega_spec(chart) for key, chart in build_charts(datasets, settings).items()}
    return {
        "settings": asdict(settings),
        "file_name": file_name,
        "project_count": rows_count,
        "datasets": {
            "priority": pairs_records(datasets.priority),
            "stage": pairs_records(datasets.stage, "count"),
            "size": pairs_records(datasets.size),
            "ageing": pairs_records(datasets.ageing, "ageing"),
        },
        "charts": charts,
    }


def _flag_card(row: Mapping[str, Any], label: str, candidates, missing: str) -> Dict[str, Any]:
    value = f.resolve_field(row, candidates)
    flag = f.classify_plan_flag(row, candidates)
    return {"label": label, "value": f.display_value(value, missing), "flag": flag, "color": f.FLAG_COLORS[flag]}


def compute_project_detail(row: Optional[Mapping[str, Any]], settings: DashboardSettings) -> Dict[str, Any]:
    """Card payload for one project row; every field is already display text."""
    if row is None:
        return {"selected": False}

    missing = settings.missing_label
    priority = f.resolve_field(row, f.PRIORITY)
    stage = f.resolve_field(row, f.CURRENT_STAGE)
    priority_cat = f.classify_priority(priority)
    stage_cat = f.classify_stage(stage)

    return {
        "selected": True,
        "name": f.display_value(f.resolve_field(row, f.PROJECT_NAME), missing),
        "badges": {
            "priority": {"value": f.display_value(priority, missing), "category": priority_cat, "color": f.PRIORITY_COLORS[priority_cat]},
            "size": {"value": f.display_value(f.resolve_field(row, f.SIZE), missing)},
            "stage": {"value": f.display_value(stage, missing), "category": stage_cat, "color": f.STAGE_COLORS[stage_cat]},
            "ageing": {"value": f.display_value(f.resolve_field(row, f.AGEING), missing)},
        },
        "status": {
            "current_remark": f.display_value(f.resolve_field(row, f.CURRENT_REMARK), missing),
            "pending_with": f.display_value(f.resolve_field(row, f.PENDING_WITH), missing),
        },
        "timeline": [
            {"key": key, "label": label, "value": f.format_date(f.resolve_field(row, candidates), missing)}
            for key, label, candidates in TIMELINE_FIELDS
        ],
        "plan": {
            "plan_shared": _flag_card(row, "Project Plan Shared", f.PLAN_SHARED, missing),
            "plan_confirmed": _flag_card(row, "Plan Confirmation Received", f.PLAN_CONFIRMED, missing),
            "ageing_days": f.display_value(f.resolve_field(row, f.AGEING_DAYS), missing),
            "remarks": f.display_value(f.resolve_field(row, f.REMARKS), "No remarks"),
        },
    }
