"""Normalization of remote response shapes at the client boundary"""

from typing import Any

import structlog
from pydantic import ValidationError

from brainbox.catalog.models import Item

logger = structlog.get_logger(__name__)


def _unwrap(payload: Any) -> Any:
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def decode_collection(payload: Any) -> list[Item]:
    """Bare list or ``{"data": [...]}``; anything else is an empty collection."""
    records = _unwrap(payload)
    if not isinstance(records, list):
        logger.warning(
            "Unrecognized collection shape", shape=type(payload).__name__
        )
        return []

    items: list[Item] = []
    for record in records:
        try:
            items.append(Item.model_validate(record))
        except ValidationError as exc:
            logger.debug("Skipping invalid item record", error=str(exc), raw=record)
    return items


def decode_item(payload: Any) -> Item | None:
    record = _unwrap(payload)
    if not isinstance(record, dict):
        return None
    try:
        return Item.model_validate(record)
    except ValidationError as exc:
        logger.warning("Invalid item in response", error=str(exc))
        return None


def decode_search_results(payload: Any) -> tuple[list[dict[str, Any]], str | None]:
    """Return the result records carrying an identifier and the optional searchType."""
    if not isinstance(payload, dict):
        return [], None

    search_type = payload.get("searchType")
    if not isinstance(search_type, str) or not search_type:
        search_type = None

    raw_results = payload.get("results")
    if not isinstance(raw_results, list):
        return [], search_type

    results: list[dict[str, Any]] = []
    for record in raw_results:
        if isinstance(record, dict) and record.get("_id") not in (None, ""):
            results.append(record)
    return results, search_type
