from __future__ import annotations

from typing import List

from pydantic import BaseModel


class SettingsModel(BaseModel):
    top_n: int = 10
    label_length: int = 15
    unknown_label: str = "Unknown"
    missing_label: str = "N/A"
    max_upload_mb: int = 25


class SelectRequest(BaseModel):
    name: str


class ProjectListResponse(BaseModel):
    file_name: str
    project_count: int
    projects: List[str]
    selected: str | None = None
