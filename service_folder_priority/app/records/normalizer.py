"""
Request body normalization for the Folder Priority skill.

Two payload shapes are accepted:

- the skill envelope ``{"values": [{"recordId": "...", "data": {...}}, ...]}``
- a single bare JSON object, which becomes one record

Anything else is rejected with ``PayloadParseError``.
"""

import json
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from shared.errors import PayloadParseError
from shared.logging import get_logger

from .models import (
    NormalizedBatch, PayloadShape, PLACEHOLDER_RECORD_ID, Record, SkillRequest
)

logger = get_logger("folder_priority.normalizer")

ENVELOPE_KEY = "values"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"unsupported JSON constant {name}")


def normalize(raw_body: bytes) -> NormalizedBatch:
    """Turn a raw request body into a canonical batch."""
    try:
        document = json.loads(raw_body, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        logger.warning("Request body is not JSON", error=str(e))
        raise PayloadParseError(details={"reason": "body is not valid JSON"})

    if not isinstance(document, dict):
        logger.warning("Request body is not a JSON object", json_type=type(document).__name__)
        raise PayloadParseError(details={"reason": "body is not a JSON object"})

    batch = _from_envelope(document)
    if batch is not None:
        return batch

    return _from_bare_object(document)


def _from_envelope(document: Dict[str, Any]) -> Optional[NormalizedBatch]:
    """Read the skill envelope; None when the document is not a usable envelope."""
    if not document.get(ENVELOPE_KEY):
        return None

    try:
        request = SkillRequest.model_validate(document)
    except PydanticValidationError as e:
        logger.debug("Body is not a skill envelope, trying single object", errors=e.error_count())
        return None

    records = [
        Record(
            record_id=entry.record_id if entry.record_id is not None else str(position),
            data=dict(entry.data or {}),
        )
        for position, entry in enumerate(request.values, start=1)
    ]
    return NormalizedBatch(shape=PayloadShape.ENVELOPE, records=records)


def _from_bare_object(document: Dict[str, Any]) -> NormalizedBatch:
    """Wrap a single JSON object as a one-record batch."""
    data: Dict[str, Any] = {}
    for name, value in document.items():
        # A "values" member means this was meant as an envelope; stop copying here.
        if name.lower() == ENVELOPE_KEY:
            logger.debug("Stopped copying fields at envelope key", key=name)
            break
        data[name] = value

    record_id = document.get("recordId")
    record = Record(
        record_id=str(record_id) if record_id is not None else PLACEHOLDER_RECORD_ID,
        data=data,
    )
    return NormalizedBatch(shape=PayloadShape.BARE_OBJECT, records=[record])
