from __future__ import annotations

import math
from datetime import date, datetime

import pytest

from core.fields import (
    NEXT_ACTION_DATE,
    PENDING_WITH,
    PLAN_CONFIRMED,
    PLAN_SHARED,
    PRIORITY,
    REMARKS,
    classify_flag,
    classify_plan_flag,
    classify_priority,
    classify_stage,
    display_value,
    format_date,
    resolve_field,
)


def test_resolve_first_non_empty_candidate():
    record = {"Pending with": "", "Pending With": "Legal"}
    assert resolve_field(record, PENDING_WITH) == "Legal"


def test_resolve_prefers_earlier_candidate():
    record = {"Remarks": "main", "Remark": "fallback"}
    assert resolve_field(record, REMARKS) == "main"


def test_resolve_absent_when_no_candidate_matches():
    assert resolve_field({"Other": "x"}, NEXT_ACTION_DATE) is None
    assert resolve_field({"Priority": "   "}, PRIORITY) is None
    assert resolve_field({"Priority": float("nan")}, PRIORITY) is None
    assert resolve_field({}, PRIORITY) is None
    assert resolve_field(None, PRIORITY) is None


def test_resolve_keeps_zero():
    assert resolve_field({"Priority": 0}, PRIORITY) == 0


@pytest.mark.parametrize(
    "value, expected",
    [
        ("P0", "critical"),
        ("High", "critical"),
        ("CRITICAL path", "critical"),
        ("p1 - medium", "medium"),
        ("Medium", "medium"),
        ("P2", "low"),
        ("low", "low"),
        # "p0" wins over "low" by precedence
        ("P0 low effort", "critical"),
        ("Whenever", "other"),
        ("", "other"),
        (None, "other"),
        (3, "other"),
    ],
)
def test_classify_priority(value, expected):
    assert classify_priority(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Completed", "done"),
        ("DONE", "done"),
        ("In Progress", "in-progress"),
        ("Development", "in-progress"),
        ("Pending approval", "in-progress"),
        ("User Signoff", "awaiting-signoff"),
        ("UAT with user", "awaiting-signoff"),
        ("Blocked", "blocked"),
        # "pending" beats "signoff"
        ("Pending signoff", "in-progress"),
        ("On hold", "other"),
        ("", "other"),
        (None, "other"),
    ],
)
def test_classify_stage(value, expected):
    assert classify_stage(value) == expected


def test_format_date_serial_number():
    assert format_date(44927) == "01 Jan 2023"
    assert format_date(44927.75) == "01 Jan 2023"
    assert format_date(25569) == "01 Jan 1970"


def test_format_date_text_unchanged():
    assert format_date("Next week") == "Next week"
    assert format_date("2023-01-05") == "2023-01-05"


def test_format_date_absent():
    assert format_date(None) == "N/A"
    assert format_date("") == "N/A"
    assert format_date(math.nan) == "N/A"
    assert format_date(None, missing="-") == "-"


def test_format_date_whitespace_text_unchanged():
    assert format_date("   ") == "   "


def test_format_date_native_dates():
    assert format_date(datetime(2024, 3, 9, 15, 30)) == "09 Mar 2024"
    assert format_date(date(2024, 12, 25)) == "25 Dec 2024"


def test_format_date_out_of_range_serial_does_not_raise():
    assert format_date(1e12) == str(1e12)
    assert format_date(float("inf")) == "inf"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Yes", "yes"),
        ("y", "yes"),
        ("Not yet", "yes"),
        ("Partially yes", "yes"),
        ("No", "no"),
        ("N", "no"),
        ("", "no"),
        (None, "no"),
    ],
)
def test_classify_flag(value, expected):
    assert classify_flag(value) == expected


def test_classify_flag_with_yes_token():
    assert classify_flag("Yes, sent", "yes") == "yes"
    assert classify_flag("Y", "yes") == "no"
    assert classify_flag("Only by mail", "yes") == "no"


@pytest.mark.parametrize(
    "record, expected",
    [
        ({"Plan shared Y/N": "Y"}, "yes"),
        ({"Project plan shared (Yes/No)": "Y"}, "no"),
        ({"Project plan shared (Yes/No)": "YES - v2"}, "yes"),
        ({"Plan shared Y/N": "N", "Project plan shared (Yes/No)": "Yes"}, "yes"),
        ({"Plan shared Y/N": "", "Project plan shared (Yes/No)": "No"}, "no"),
        ({}, "no"),
        (None, "no"),
    ],
)
def test_classify_plan_flag(record, expected):
    assert classify_plan_flag(record, PLAN_SHARED) == expected


def test_classify_plan_flag_confirmation_headers():
    assert classify_plan_flag({"Plan confirmation recieved (Yes / No)": "yes"}, PLAN_CONFIRMED) == "yes"
    assert classify_plan_flag({"Plan confirmation received Y/N": "Y"}, PLAN_CONFIRMED) == "yes"


def test_display_value():
    assert display_value(None) == "N/A"
    assert display_value("", "Unknown") == "Unknown"
    assert display_value(30.0) == "30"
    assert display_value(2.5) == "2.5"
    assert display_value("M") == "M"
