"""
Decide which wizard step a returning visitor should land on.

The wizard is linear: personal info, services, documents, delivery, summary.
The first step whose required data is missing wins.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Union

from pydantic import BaseModel

logger = logging.getLogger(__name__)

FORM_STEP_PATHS: tuple[str, ...] = (
    "/form/personal-info",
    "/form/choose-services",
    "/form/documents",
    "/form/delivery",
    "/form/summary",
)


def _as_dict(form_data: Union[BaseModel, dict[str, Any], None]) -> dict[str, Any]:
    if form_data is None:
        return {}
    if isinstance(form_data, BaseModel):
        return form_data.model_dump(by_alias=True)
    return form_data


def _blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _selected(data: dict[str, Any]) -> list[str]:
    services = data.get("selectedServices")
    if not isinstance(services, list):
        return []
    return [s for s in services if isinstance(s, str)]


def count_documents(form_data: Union[BaseModel, dict[str, Any], None]) -> int:
    """Total uploaded documents across the selected services only."""
    data = _as_dict(form_data)
    documents = data.get("serviceDocuments")
    if not isinstance(documents, dict):
        return 0
    total = 0
    for service_id in _selected(data):
        docs = documents.get(service_id)
        total += len(docs) if isinstance(docs, list) else 0
    return total


def resume_step_index(form_data: Union[BaseModel, dict[str, Any], None]) -> int:
    data = _as_dict(form_data)
    if _blank(data.get("firstName")) or _blank(data.get("lastName")) or _blank(data.get("email")):
        return 0
    if not _selected(data):
        return 1
    if count_documents(data) == 0:
        return 2
    if not data.get("deliveryMethod"):
        return 3
    return 4


def resume_path(form_data: Union[BaseModel, dict[str, Any], None], query: str = "") -> str:
    """Path of the resume step, keeping any existing query string."""
    path = FORM_STEP_PATHS[resume_step_index(form_data)]
    query = (query or "").lstrip("?")
    return f"{path}?{query}" if query else path


def resume_path_from_stored(raw: str | None, query: str = "") -> str:
    """Resume path from a persisted draft; unreadable drafts restart at step 0."""
    try:
        data = json.loads(raw) if raw else {}
    except (TypeError, ValueError):
        logger.warning("Stored form draft is not valid JSON; restarting at personal info")
        data = {}
    if not isinstance(data, dict):
        data = {}
    return resume_path(data, query)
