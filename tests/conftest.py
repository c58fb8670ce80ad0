# Shared pytest fixtures
from __future__ import annotations

import io
from datetime import datetime
from pathlib import Path

import pandas as pd
import pytest

# BIFF8 workbook holding the same sheet as `tracker_rows`
XLS_FIXTURE = Path(__file__).parent / "fixtures" / "tracker.xls"

HEADERS = [
    "Project Name",
    "Priority",
    "Size",
    "Current Stage",
    "Ageing 1",
    "Pending with",
    "Last Action date",
    "Plan shared Y/N",
]


def make_workbook(rows: list[list[object]], extra_sheets: dict[str, list[list[object]]] | None = None) -> bytes:
    """Build XLSX bytes whose first sheet holds `rows` verbatim (row 0 = headers)."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name="Projects", header=False, index=False)
        for name, sheet_rows in (extra_sheets or {}).items():
            pd.DataFrame(sheet_rows).to_excel(writer, sheet_name=name, header=False, index=False)
    return buf.getvalue()


@pytest.fixture()
def tracker_rows() -> list[list[object]]:
    return [
        HEADERS,
        ["Alpha", "P0 - High", "L", "In Progress", 30, "Finance", datetime(2023, 1, 1), "Yes"],
        ["Bravo", "P1", "M", "User Signoff", 45, None, None, "N"],
        ["Charlie", None, "L", "Completed", "12 days", "IT", "TBD", None],
    ]


@pytest.fixture()
def tracker_xlsx(tracker_rows) -> bytes:
    return make_workbook(tracker_rows)


@pytest.fixture()
def tracker_xls() -> bytes:
    return XLS_FIXTURE.read_bytes()
