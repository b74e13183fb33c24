"""
Reference data: the developer/project list used as merge group labels.

The list is a CSV published at ``Settings.REFERENCE_DATA_URL``. It is fetched
once per request with no retry; any failure surfaces as
:class:`ReferenceDataError` so the caller can offer to try again.
"""

from __future__ import annotations

import io
from typing import Any, Dict, List, Optional, Sequence

import httpx
import pandas as pd

from tablesplit.config import get_settings
from tablesplit.errors import ReferenceDataError
from tablesplit.ir import Developer, Project, ReferenceData
from tablesplit.logger import get_logger

logger = get_logger(__name__)


def _strip_quotes(text: Any) -> str:
    value = "" if text is None or pd.isna(text) else str(text).strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def _flag(value: Any) -> bool:
    return _strip_quotes(value).upper() == "TRUE"


def parse_reference_csv(csv_text: str) -> ReferenceData:
    """
    Parse the reference CSV into developers and projects.

    Expected columns: ``project_id``, ``Project Name``, ``developer_id``,
    ``Developer Name``, ``is_super``, ``fake``, ``not_launched``. Missing
    columns read as empty; developers are unique by id in first-seen order.
    """
    if not csv_text or not csv_text.strip():
        raise ReferenceDataError("Empty reference data response")
    try:
        df = pd.read_csv(
            io.StringIO(csv_text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise ReferenceDataError(f"Could not parse reference data: {exc}") from exc
    df.columns = [_strip_quotes(c) for c in df.columns]

    def col(row: Dict[str, Any], name: str) -> str:
        return _strip_quotes(row.get(name, ""))

    projects: List[Project] = []
    developers: Dict[str, Developer] = {}
    for row in df.to_dict(orient="records"):
        project = Project(
            id=col(row, "project_id"),
            name=col(row, "Project Name"),
            developer_id=col(row, "developer_id"),
            developer_name=col(row, "Developer Name"),
            is_super=_flag(row.get("is_super")),
            fake=_flag(row.get("fake")),
            not_launched=_flag(row.get("not_launched")),
        )
        projects.append(project)
        if project.developer_id and project.developer_id not in developers:
            developers[project.developer_id] = Developer(
                id=project.developer_id, name=project.developer_name,
            )

    logger.info("Reference data: %d developer(s), %d project(s)", len(developers), len(projects))
    return ReferenceData(developers=list(developers.values()), projects=projects)


def fetch_reference_data(
    url: Optional[str] = None,
    client: Optional[httpx.Client] = None,
) -> ReferenceData:
    """
    Download and parse the reference CSV.

    Raises:
        ReferenceDataError: transport failure, non-2xx status or empty body
    """
    settings = get_settings()
    target = url or settings.REFERENCE_DATA_URL
    owns_client = client is None
    if owns_client:
        client = httpx.Client(timeout=httpx.Timeout(settings.REQUEST_TIMEOUT, connect=10.0))
    try:
        logger.info("Fetching reference data from %s", target)
        response = client.get(target)
    except httpx.HTTPError as exc:
        logger.error("Reference data request failed: %s", exc)
        raise ReferenceDataError(f"Failed to fetch reference data: {exc}") from exc
    finally:
        if owns_client:
            client.close()

    if not response.is_success:
        logger.error("Reference data request returned %s", response.status_code)
        raise ReferenceDataError(
            f"Failed to fetch reference data: {response.status_code} {response.reason_phrase}",
            status_code=response.status_code,
        )
    return parse_reference_csv(response.text)


def projects_by_developers(projects: Sequence[Project], developer_ids: Sequence[str]) -> List[Project]:
    """Projects owned by any of *developer_ids*; no ids selects nothing."""
    if not developer_ids:
        return []
    wanted = set(developer_ids)
    return [p for p in projects if p.developer_id in wanted]
