"""Header lookup, badge classification and date formatting for project rows.

Exports vary header spelling between workbooks, so each logical field is an
ordered tuple of candidate headers. `resolve_field` returns the first
non-empty match, or None when the field is absent.
"""

from __future__ import annotations

import math
import numbers
from datetime import date, datetime, timedelta
from typing import Any, Mapping, Optional, Sequence

PROJECT_NAME = ("Project Name",)
PRIORITY = ("Priority",)
SIZE = ("Size",)
CURRENT_STAGE = ("Current Stage",)
AGEING = ("Ageing 1",)
CURRENT_REMARK = ("Current Remark",)
PENDING_WITH = ("Pending with", "Pending With")
STAGE_PENDING_SINCE = ("Current stage pending since",)
LAST_ACTION_DATE = ("Last Action date",)
NEXT_ACTION_PLANNED = ("Next Action Date as per plan",)
NEXT_ACTION_DATE = ("Next Action Date", "Next action data")
BRD_SHARED_DATE = ("BRD Shared date",)
TODAY = ("Today",)
PLAN_SHARED = ("Plan shared Y/N", "Project plan shared (Yes/No)")
PLAN_CONFIRMED = ("Plan confirmation received Y/N", "Plan confirmation recieved (Yes / No)")
AGEING_DAYS = ("Ageing 2",)
REMARKS = ("Remarks", "Remark")

MISSING = "N/A"

# Day 0 of the spreadsheet serial-date system.
SERIAL_EPOCH = datetime(1899, 12, 30)
DATE_FORMAT = "%d %b %Y"

PRIORITY_RULES = (
    ("critical", ("p0", "high", "critical")),
    ("medium", ("p1", "medium")),
    ("low", ("p2", "low")),
)
STAGE_RULES = (
    ("done", ("complete", "done")),
    ("in-progress", ("progress", "development", "pending")),
    ("awaiting-signoff", ("signoff", "user")),
    ("blocked", ("blocked",)),
)

PRIORITY_COLORS = {
    "critical": "#FEE2E2",
    "medium": "#FEF9C3",
    "low": "#DCFCE7",
    "other": "#DBEAFE",
}
STAGE_COLORS = {
    "done": "#22C55E",
    "in-progress": "#3B82F6",
    "awaiting-signoff": "#EAB308",
    "blocked": "#EF4444",
    "other": "#A855F7",
}
FLAG_COLORS = {"yes": "#DCFCE7", "no": "#F3F4F6"}

# substring that marks a plan flag as "yes", per header
FLAG_TOKENS = {
    "Plan shared Y/N": "y",
    "Project plan shared (Yes/No)": "yes",
    "Plan confirmation received Y/N": "y",
    "Plan confirmation recieved (Yes / No)": "yes",
}


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def resolve_field(record: Optional[Mapping[str, Any]], candidates: Sequence[str]) -> Any:
    """Return the value of the first candidate header holding a non-empty value."""
    if not record:
        return None
    for header in candidates:
        value = record.get(header)
        if not is_empty(value):
            return value
    return None


def _classify(value: Any, rules) -> str:
    if is_empty(value):
        return "other"
    text = str(value).lower()
    for category, needles in rules:
        if any(n in text for n in needles):
            return category
    return "other"


def classify_priority(value: Any) -> str:
    """Map free-text priority to critical / medium / low / other."""
    return _classify(value, PRIORITY_RULES)


def classify_stage(value: Any) -> str:
    """Map free-text stage to done / in-progress / awaiting-signoff / blocked / other."""
    return _classify(value, STAGE_RULES)


def classify_flag(value: Any, token: str = "y") -> str:
    """Return yes when the cell text contains `token`, ignoring case."""
    if is_empty(value):
        return "no"
    return "yes" if token in str(value).lower() else "no"


def classify_plan_flag(record: Optional[Mapping[str, Any]], candidates: Sequence[str]) -> str:
    """Flag for a plan column that may appear under any of `candidates`.

    Y/N headers match on "y", (Yes/No) headers on "yes"; any matching header
    makes the flag "yes".
    """
    if not record:
        return "no"
    for header in candidates:
        if classify_flag(record.get(header), FLAG_TOKENS.get(header, "y")) == "yes":
            return "yes"
    return "no"


def format_date(value: Any, missing: str = MISSING) -> str:
    """Render a date cell as DD Mon YYYY.

    Numbers are day serials counted from 1899-12-30; text is returned as-is.
    Only None, NaN and "" count as absent.
    """
    if value is None or (isinstance(value, str) and value == "") or (isinstance(value, float) and math.isnan(value)):
        return missing
    if isinstance(value, (datetime, date)):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        try:
            return (SERIAL_EPOCH + timedelta(days=float(value))).strftime(DATE_FORMAT)
        except (OverflowError, ValueError):
            return str(value)
    return str(value)


def display_value(value: Any, default: str = MISSING) -> str:
    if is_empty(value):
        return default
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
