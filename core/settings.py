from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DashboardSettings:
    top_n: int = 10
    label_length: int = 15
    unknown_label: str = "Unknown"
    missing_label: str = "N/A"
    max_upload_mb: int = 25


def _as_int(value: object, default: int, lo: int, hi: int) -> int:
    try:
        out = int(value)  # type: ignore[arg-type]
    except Exception:
        out = default
    return max(lo, min(hi, out))


def _as_label(value: object, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def normalize_settings(raw: Optional[dict] = None) -> DashboardSettings:
    raw = raw or {}
    return DashboardSettings(
        top_n=_as_int(raw.get("top_n", 10), 10, 1, 50),
        label_length=_as_int(raw.get("label_length", 15), 15, 1, 80),
        unknown_label=_as_label(raw.get("unknown_label"), "Unknown"),
        missing_label=_as_label(raw.get("missing_label"), "N/A"),
        max_upload_mb=_as_int(raw.get("max_upload_mb", 25), 25, 1, 200),
    )
