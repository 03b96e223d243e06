from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from services.crm_entities import EntityKind, new_id, record_ids
from services.crm_errors import FormatError, PermissionDeniedError
from services.crm_rbac import ROLE_ADMIN, can_create

logger = logging.getLogger(__name__)


def export_records(records: Sequence[Dict[str, Any]]) -> str:
    """Serialize a collection exactly as given; callers pass the already permission-filtered view."""
    return json.dumps(list(records), indent=2, ensure_ascii=False)


def export_filename(kind: EntityKind, translator) -> str:
    return f"{translator.translate(f'{kind.name}.title').lower()}.json"


def parse_records(blob: Any) -> List[Dict[str, Any]]:
    if isinstance(blob, bytes):
        try:
            blob = blob.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FormatError(f"Import file is not UTF-8 text: {exc}", message=str(exc)) from exc
    try:
        parsed = json.loads(blob)
    except (TypeError, json.JSONDecodeError) as exc:
        raise FormatError(f"Error parsing JSON file: {exc}", message=str(exc)) from exc
    if not isinstance(parsed, list):
        raise FormatError("Imported JSON is not an array.", message="Imported JSON is not an array.")
    for index, item in enumerate(parsed):
        if not isinstance(item, dict):
            detail = f"Item {index} is not an object."
            raise FormatError(detail, message=detail)
    return parsed


def import_records(
    blob: Any,
    existing: Sequence[Dict[str, Any]],
    role: Optional[str],
    caller_id: Optional[str],
    kind: EntityKind,
) -> List[Dict[str, Any]]:
    """
    Append the records in ``blob`` to ``existing``.

    Imported ids are never trusted: every record gets a freshly generated id.
    Imports always append; no de-duplication is attempted.
    Non-admin importers become the owner of any record that arrives without one.
    """
    if not can_create(role):
        raise PermissionDeniedError(f"{role} cannot import {kind.name}")
    parsed = parse_records(blob)
    taken = record_ids(existing)
    imported: List[Dict[str, Any]] = []
    for item in parsed:
        record = dict(item)
        record["id"] = new_id(kind.id_prefix, taken)
        taken.add(record["id"])
        if role != ROLE_ADMIN and not record.get("ownerId"):
            record["ownerId"] = caller_id
        imported.append(record)
    logger.info("Imported %d %s (actor=%s)", len(imported), kind.name, caller_id)
    return [*existing, *imported]
