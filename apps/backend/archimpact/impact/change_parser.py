"""
Change Request Parser
=====================

Builds ChangeRequest values from natural language or structured input.

Natural-language parsing is keyword based: the change type is inferred
from words such as "endpoint", "schema" or "remove", and explicit targets
are picked up from ``file:``, ``endpoint:``, ``table:`` and ``component:``
markers in the description.
"""

from __future__ import annotations

import logging
import re
import uuid

from ..errors import InvalidChangeRequestError
from ..models.impact_models import ChangeRequest, ChangeType

logger = logging.getLogger(__name__)

# Ordered: the first matching keyword group decides the type
CHANGE_TYPE_KEYWORDS: list[tuple[ChangeType, tuple[str, ...]]] = [
    (ChangeType.MODIFY_API, ("endpoint", "api", "route")),
    (ChangeType.MODIFY_SCHEMA, ("schema", "table", "database", "model")),
    (ChangeType.MODIFY_FEATURE, ("component", "ui", "page")),
    (ChangeType.ADD_FEATURE, ("add", "new")),
    (ChangeType.REMOVE_FEATURE, ("remove", "delete")),
    (ChangeType.BUG_FIX, ("bug", "fix")),
]

DEFAULT_CHANGE_TYPE = ChangeType.MODIFY_FEATURE

FILE_PATTERN = re.compile(r"(?:file|path):\s*([^\s,]+)", re.IGNORECASE)
ENDPOINT_PATTERN = re.compile(r"(?:endpoint|route|api):\s*([^\s,]+)", re.IGNORECASE)
TABLE_PATTERN = re.compile(r"(?:table|model):\s*([a-zA-Z_][a-zA-Z0-9_]*)", re.IGNORECASE)
COMPONENT_PATTERN = re.compile(r"(?:component|page):\s*([a-zA-Z_][a-zA-Z0-9_]*)", re.IGNORECASE)

_WORD = re.compile(r"[a-z0-9]+")


def generate_change_id() -> str:
    return f"change-{uuid.uuid4().hex[:12]}"


def infer_change_type(description: str) -> ChangeType:
    """Infer the change type from a free-text description."""
    words = set(_WORD.findall(description.lower()))
    for change_type, keywords in CHANGE_TYPE_KEYWORDS:
        if any(keyword in words for keyword in keywords):
            return change_type
    return DEFAULT_CHANGE_TYPE


def extract_change_details(description: str) -> dict[str, list[str]]:
    """
    Extract explicit targets from a description.

    Returns:
        Dict with ``target_files``, ``target_endpoints``, ``target_tables``
        and ``target_components`` (each possibly empty)
    """
    return {
        "target_files": FILE_PATTERN.findall(description),
        "target_endpoints": ENDPOINT_PATTERN.findall(description),
        "target_tables": TABLE_PATTERN.findall(description),
        "target_components": COMPONENT_PATTERN.findall(description),
    }


def parse_change_request(request: str | dict | ChangeRequest) -> ChangeRequest:
    """
    Parse a change request from natural language or structured input.

    Args:
        request: Free text, a dict in ChangeRequest shape, or a ChangeRequest

    Returns:
        A validated ChangeRequest. Explicit targets found in the description
        fill any target list the input left empty.

    Raises:
        InvalidChangeRequestError: If structured input has no description or
            an unknown change type
    """
    if isinstance(request, str):
        details = extract_change_details(request)
        change = ChangeRequest(
            id=generate_change_id(),
            description=request,
            type=infer_change_type(request),
            **{key: tuple(values) for key, values in details.items()},
        )
        logger.debug("Parsed change %s as %s", change.id, change.type)
        return change

    data = request.to_dict() if isinstance(request, ChangeRequest) else dict(request)
    return _validate_change_request(data)


def _validate_change_request(data: dict) -> ChangeRequest:
    description = data.get("description") or ""
    if not description.strip():
        raise InvalidChangeRequestError(
            "Change request must have a description", {"id": data.get("id", "")}
        )

    change_type = data.get("type") or DEFAULT_CHANGE_TYPE.value
    try:
        change_type = ChangeType(change_type).value
    except ValueError:
        valid = ", ".join(t.value for t in ChangeType)
        raise InvalidChangeRequestError(
            f"Unknown change type '{change_type}'. Must be one of: {valid}",
            {"id": data.get("id", ""), "type": change_type},
        ) from None

    data["type"] = change_type
    data["id"] = data.get("id") or generate_change_id()

    change = ChangeRequest.from_dict(data)
    details = extract_change_details(description)
    missing = {
        key: tuple(values)
        for key, values in details.items()
        if values and not getattr(change, key)
    }
    if missing:
        change = ChangeRequest.from_dict({**change.to_dict(), **missing})
    return change
