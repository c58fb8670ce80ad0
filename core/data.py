from __future__ import annotations

import io
import logging
import math
from typing import Any, Dict, List

import pandas as pd


logger = logging.getLogger(__name__)

XLS_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"
ZIP_SIGNATURE = b"PK\x03\x04"

ENGINES = {"xls": "xlrd", "xlsx": "openpyxl"}


class DashboardError(Exception):
    """Base class for errors surfaced to the dashboard user."""


class DecodeError(DashboardError):
    """Raised when uploaded bytes are not a readable XLS/XLSX workbook."""

    def __init__(self, message: str, file_name: str = "") -> None:
        super().__init__(message)
        self.file_name = file_name


def detect_format(content: bytes) -> str:
    """Return "xls" or "xlsx" from the container signature."""
    if content.startswith(XLS_SIGNATURE):
        return "xls"
    if content.startswith(ZIP_SIGNATURE):
        return "xlsx"
    raise DecodeError("Unsupported file format. Please upload an .xlsx or .xls file.")


def _clean_cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return int(value)
        return value
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if value is pd.NaT or value is pd.NA:
        return ""
    return value


def _records_from_frame(df: pd.DataFrame) -> List[Dict[str, Any]]:
    headers = [str(c) for c in df.columns]
    rows: List[Dict[str, Any]] = []
    for raw in df.itertuples(index=False, name=None):
        record = {h: _clean_cell(v) for h, v in zip(headers, raw)}
        # skip fully blank rows
        if all(v == "" for v in record.values()):
            continue
        rows.append(record)
    return rows


def decode_workbook(content: bytes, file_name: str = "") -> List[Dict[str, Any]]:
    """Decode the first sheet of an uploaded workbook into row records.

    The first row of the sheet supplies the headers. Every record carries
    every header; blank cells come back as "". Raises DecodeError when the
    bytes are empty, not an XLS/XLSX container, or fail to parse.
    """
    if not content:
        raise DecodeError("The uploaded file is empty.", file_name)
    try:
        fmt = detect_format(content)
    except DecodeError as exc:
        exc.file_name = file_name
        raise

    try:
        df = pd.read_excel(
            io.BytesIO(content),
            sheet_name=0,
            header=0,
            engine=ENGINES[fmt],
            dtype=object,
            keep_default_na=False,
        )
    except ImportError:
        raise
    except Exception as exc:
        raise DecodeError(f"Error reading file {file_name or '<upload>'}: {exc}", file_name) from exc

    rows = _records_from_frame(df)
    logger.info("decoded %s (%s): %d rows x %d columns", file_name or "<upload>", fmt, len(rows), len(df.columns))
    return rows


def sheet_headers(rows: List[Dict[str, Any]]) -> List[str]:
    if not rows:
        return []
    return list(rows[0].keys())


def rows_to_frame(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=sheet_headers(rows))
