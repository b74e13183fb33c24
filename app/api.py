"""
API Module
==========

FastAPI backend: /detect, /split and /merge take an uploaded workbook;
/reference lists developers and projects; /download serves generated files.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from fastapi import FastAPI, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import FileResponse, JSONResponse

from app.backend.process import detect_file, merge_file, split_file
from tablesplit.config import get_settings
from tablesplit.errors import DecodeError, EncodeError, ReferenceDataError
from tablesplit.logger import get_logger, set_level
from tablesplit.reference import fetch_reference_data, projects_by_developers

logger = get_logger(__name__)
set_level(get_settings().LOG_LEVEL)

app = FastAPI(title="Table Split Backend")

OUTPUT_ROOT = Path(get_settings().OUTPUT_DIR)
FILE_REGISTRY: Dict[str, str] = {}

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _register_file(path: str) -> str:
    """Register *path* for download and return its file id."""
    file_id = uuid4().hex
    FILE_REGISTRY[file_id] = path
    return file_id


def _download_entry(path: str) -> Dict[str, str]:
    file_id = _register_file(path)
    return {"file_id": file_id, "download_url": f"/download/{file_id}"}


async def _read_upload(file: UploadFile) -> bytes:
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(content) > get_settings().MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="Uploaded file is too large")
    return content


def _parse_json_field(raw: Optional[str], field: str, expected: type) -> Any:
    if raw is None or not raw.strip():
        return expected()
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"{field} must be valid JSON") from e
    if not isinstance(value, expected):
        raise HTTPException(status_code=400, detail=f"{field} must be a JSON {expected.__name__}")
    return value


@app.get("/download/{file_id}")
def download_file(file_id: str):
    """Serve a generated workbook by id."""
    path = FILE_REGISTRY.get(file_id)
    if not path or not Path(path).exists():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path, filename=Path(path).name, media_type=XLSX_MEDIA_TYPE)


@app.post("/detect")
async def detect_endpoint(file: UploadFile = File(...)):
    """Detect the tables of every sheet in the uploaded workbook."""
    content = await _read_upload(file)
    try:
        result = detect_file(content, file.filename or "workbook.xlsx")
    except DecodeError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return JSONResponse(result)


@app.post("/split")
async def split_endpoint(
    file: UploadFile = File(...),
    drop_summary_rows: bool = Form(False),
    drop_empty_columns: bool = Form(False),
):
    """Split the uploaded workbook into one tab per detected table."""
    content = await _read_upload(file)
    job_id = uuid4().hex
    try:
        result = split_file(
            content,
            file.filename or "workbook.xlsx",
            output_dir=str(OUTPUT_ROOT / job_id),
            drop_summary_rows=drop_summary_rows,
            drop_empty_columns=drop_empty_columns,
        )
    except DecodeError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except EncodeError as e:
        raise HTTPException(status_code=422, detail=f"Error generating download: {e}") from e
    return JSONResponse({
        "job_id": job_id,
        "result": result,
        "download": _download_entry(result["output_path"]),
    })


@app.post("/merge")
async def merge_endpoint(
    file: UploadFile = File(...),
    sheets: Optional[str] = Form(None),
    assignments: Optional[str] = Form(None),
    selected_groups: Optional[str] = Form(None),
    resolve_labels: bool = Form(False),
):
    """
    Merge sheets of the uploaded workbook. ``sheets`` and ``selected_groups``
    are JSON lists, ``assignments`` a JSON object of sheet name → group id.
    """
    content = await _read_upload(file)
    sheet_names: List[str] = _parse_json_field(sheets, "sheets", list)
    assignment_map: Dict[str, str] = _parse_json_field(assignments, "assignments", dict)
    groups: List[str] = _parse_json_field(selected_groups, "selected_groups", list)
    job_id = uuid4().hex
    try:
        result = merge_file(
            content,
            file.filename or "workbook.xlsx",
            output_dir=str(OUTPUT_ROOT / job_id),
            sheet_names=sheet_names or None,
            assignments=assignment_map,
            selected_groups=groups,
            resolve_labels=resolve_labels,
        )
    except DecodeError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ReferenceDataError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    except EncodeError as e:
        raise HTTPException(status_code=422, detail=f"Error generating download: {e}") from e
    return JSONResponse({
        "job_id": job_id,
        "result": result,
        "download": _download_entry(result["output_path"]),
    })


@app.get("/reference")
def reference_endpoint(developer_ids: Optional[List[str]] = Query(None)):
    """Developers and projects, optionally narrowed to some developers."""
    try:
        data = fetch_reference_data()
    except ReferenceDataError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    projects = projects_by_developers(data.projects, developer_ids) if developer_ids else data.projects
    return JSONResponse({
        "developers": [d.model_dump() for d in data.developers],
        "projects": [p.model_dump() for p in projects],
    })
