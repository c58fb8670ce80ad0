from __future__ import annotations

from core.settings import DashboardSettings, normalize_settings


def test_defaults():
    assert normalize_settings({}) == DashboardSettings()
    assert normalize_settings(None) == DashboardSettings()


def test_clamps_and_coerces():
    s = normalize_settings({"top_n": "500", "label_length": 0, "max_upload_mb": -4})
    assert s.top_n == 50
    assert s.label_length == 1
    assert s.max_upload_mb == 1


def test_garbage_falls_back_to_defaults():
    s = normalize_settings({"top_n": "many", "unknown_label": "  ", "missing_label": None})
    assert s.top_n == 10
    assert s.unknown_label == "Unknown"
    assert s.missing_label == "N/A"
