from __future__ import annotations

import logging
import math
from datetime import date, datetime

import numpy as np
import pandas as pd
from fastapi import FastAPI, File, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.schemas import ProjectListResponse, SelectRequest, SettingsModel
from core.data import DecodeError
from core.fields import format_date
from core.metrics_overview import compute_overview, compute_project_detail
from core.settings import normalize_settings
from core.state import ProjectSelection, SelectionMiss, project_name


app = FastAPI(title="Project Tracker API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

settings = normalize_settings(SettingsModel().model_dump())
selection = ProjectSelection(settings)


def _json(data: object, status_code: int = 200) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                datetime: format_date,
                date: format_date,
                pd.Timestamp: format_date,
            },
        ),
    )


def _error(exc: Exception, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


def _project_list() -> dict:
    snap = selection.snapshot
    return ProjectListResponse(
        file_name=snap.file_name,
        project_count=len(snap.rows),
        projects=selection.project_names(),
        selected=project_name(snap.selected) if snap.selected is not None else None,
    ).model_dump()


@app.post("/upload")
def upload(file: UploadFile = File(...)):
    # sync handler; FastAPI runs it in its threadpool
    limit = settings.max_upload_mb * 1024 * 1024
    try:
        content = file.file.read(limit + 1)
        if len(content) > limit:
            return _error(ValueError(f"File exceeds {settings.max_upload_mb} MB."), 413)
        selection.load_bytes(content, file.filename or "")
        return _json(_project_list())
    except DecodeError as exc:
        return _error(exc, 400)
    except Exception as exc:
        logger.exception("upload failed")
        return _error(exc, 500)


@app.post("/select")
def select(req: SelectRequest):
    try:
        selection.select(req.name)
        return _json(_project_list())
    except SelectionMiss as exc:
        return _error(exc, 404)
    except Exception as exc:
        logger.exception("select failed")
        return _error(exc, 500)


@app.get("/projects")
def projects():
    try:
        return _json(_project_list())
    except Exception as exc:
        logger.exception("projects failed")
        return _error(exc, 500)


@app.get("/project")
def project():
    try:
        return _json(compute_project_detail(selection.selected, settings))
    except Exception as exc:
        logger.exception("project failed")
        return _error(exc, 500)


@app.get("/overview")
def overview():
    try:
        snap = selection.snapshot
        return _json(compute_overview(settings, len(snap.rows), snap.datasets, snap.file_name))
    except Exception as exc:
        logger.exception("overview failed")
        return _error(exc, 500)
