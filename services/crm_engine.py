from __future__ import annotations

import locale
import logging
from functools import cmp_to_key
from numbers import Number
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence

from services.crm_entities import CASCADE_UNLINK, EntityKind, new_id, record_ids
from services.crm_errors import NotFoundError, PermissionDeniedError
from services.crm_rbac import (
    can_create,
    can_modify,
    can_view_kind,
    can_view_record,
    resolve_owner,
)

logger = logging.getLogger(__name__)

ASCENDING = "ascending"
DESCENDING = "descending"

Record = Dict[str, Any]
Lookups = Mapping[str, Sequence[Record]]


class MutationResult(NamedTuple):
    records: List[Record]
    record: Record


class DeleteResult(NamedTuple):
    records: List[Record]
    related: Dict[str, List[Record]]
    record: Record


def find_record(record_id: Any, records: Sequence[Record]) -> Optional[Record]:
    target = str(record_id or "")
    if not target:
        return None
    for item in records:
        if str(item.get("id") or "") == target:
            return item
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _compare_values(left: Any, right: Any) -> int:
    if isinstance(left, str) and isinstance(right, str):
        return locale.strcoll(left, right)
    if _is_number(left) and _is_number(right):
        return (left > right) - (left < right)
    # Mismatched or non-comparable types keep their relative order.
    return 0


class EntityEngine:
    """
    Permission-scoped CRUD, search and sort for one entity kind.

    Every operation is a pure function of its inputs: collections passed in
    are never mutated, new lists are returned instead.
    """

    def __init__(self, kind: EntityKind, missing_label: str = ""):
        self.kind = kind
        self.missing_label = missing_label

    # -- reads -----------------------------------------------------------

    def list(self, role: Optional[str], caller_id: Optional[str], records: Sequence[Record]) -> List[Record]:
        if not can_view_kind(role, self.kind.name):
            return []
        return [item for item in records if can_view_record(role, item.get("ownerId"), caller_id)]

    def display_name(self, kind_name: str, record_id: Any, lookups: Optional[Lookups]) -> str:
        linked = find_record(record_id, (lookups or {}).get(kind_name) or [])
        if not linked:
            return self.missing_label
        return str(linked.get("name") or linked.get("title") or self.missing_label)

    def _search_values(self, item: Record, lookups: Optional[Lookups]) -> List[str]:
        values = [item.get(name) for name in self.kind.search_fields]
        for field_name, kind_name in self.kind.linked_fields.items():
            if item.get(field_name):
                values.append(self.display_name(kind_name, item.get(field_name), lookups))
        for field_name, kind_name in self.kind.linked_lists.items():
            for linked_id in item.get(field_name) or []:
                linked = find_record(linked_id, (lookups or {}).get(kind_name) or [])
                if linked:
                    values.append(linked.get("name"))
        return [str(value) for value in values if isinstance(value, str) and value]

    def search(self, query: Optional[str], records: Sequence[Record], lookups: Optional[Lookups] = None) -> List[Record]:
        needle = str(query or "").strip().lower()
        if not needle:
            return list(records)
        return [
            item
            for item in records
            if any(needle in value.lower() for value in self._search_values(item, lookups))
        ]

    def sort_value(self, item: Record, key: str, lookups: Optional[Lookups] = None) -> Any:
        if key in self.kind.linked_fields:
            return self.display_name(self.kind.linked_fields[key], item.get(key), lookups)
        return item.get(key)

    def sort(
        self,
        records: Sequence[Record],
        key: Optional[str] = None,
        direction: Optional[str] = None,
        lookups: Optional[Lookups] = None,
    ) -> List[Record]:
        sort_key = key or self.kind.default_sort[0]
        sort_direction = direction or self.kind.default_sort[1]
        if sort_key not in self.kind.sort_keys:
            raise ValueError(f"Cannot sort {self.kind.name} by {sort_key!r}")
        if sort_direction not in {ASCENDING, DESCENDING}:
            raise ValueError(f"Unknown sort direction: {sort_direction!r}")
        sign = 1 if sort_direction == ASCENDING else -1

        def compare(left: Record, right: Record) -> int:
            return sign * _compare_values(
                self.sort_value(left, sort_key, lookups),
                self.sort_value(right, sort_key, lookups),
            )

        return sorted(records, key=cmp_to_key(compare))

    # -- writes ----------------------------------------------------------

    def add(
        self,
        role: Optional[str],
        caller_id: Optional[str],
        candidate: Record,
        records: Sequence[Record],
    ) -> MutationResult:
        if not can_create(role):
            raise PermissionDeniedError(f"{role} cannot create {self.kind.name}")
        created = dict(candidate)
        created["id"] = new_id(self.kind.id_prefix, record_ids(records))
        created["ownerId"] = resolve_owner(role, caller_id, candidate)
        logger.info("Added %s %s (owner=%s, actor=%s)", self.kind.label, created["id"], created["ownerId"], caller_id)
        return MutationResult([*records, created], created)

    def _existing_for_change(self, role: Optional[str], caller_id: Optional[str], record_id: Any, records: Sequence[Record]) -> Record:
        existing = find_record(record_id, records)
        if existing is None:
            raise NotFoundError(f"{self.kind.label} {record_id} not found", id=record_id)
        if not can_modify(role, existing.get("ownerId"), caller_id):
            raise PermissionDeniedError(f"{role} {caller_id} cannot modify {self.kind.label} {record_id}")
        return existing

    def update(
        self,
        role: Optional[str],
        caller_id: Optional[str],
        updated: Record,
        records: Sequence[Record],
    ) -> MutationResult:
        existing = self._existing_for_change(role, caller_id, updated.get("id"), records)
        replacement = dict(updated)
        replacement["id"] = existing["id"]
        new_records = [replacement if item is existing else item for item in records]
        logger.info("Updated %s %s (actor=%s)", self.kind.label, replacement["id"], caller_id)
        return MutationResult(new_records, replacement)

    def delete(
        self,
        role: Optional[str],
        caller_id: Optional[str],
        target_id: Any,
        records: Sequence[Record],
        related: Optional[Lookups] = None,
    ) -> DeleteResult:
        existing = self._existing_for_change(role, caller_id, target_id, records)
        related = related or {}
        missing = [rule.kind for rule in self.kind.cascades if rule.kind not in related]
        if missing:
            raise ValueError(f"Deleting {self.kind.name} requires related collections: {', '.join(missing)}")

        removed_id = str(existing["id"])
        # Build every new collection before returning anything, so callers
        # only ever see the fully cascaded state.
        updates: Dict[str, List[Record]] = {}
        for rule in self.kind.cascades:
            source = updates.get(rule.kind, related[rule.kind])
            if rule.mode == CASCADE_UNLINK:
                updates[rule.kind] = [
                    {**item, rule.field: [cid for cid in item.get(rule.field) or [] if str(cid) != removed_id]}
                    for item in source
                ]
            else:
                updates[rule.kind] = [item for item in source if str(item.get(rule.field) or "") != removed_id]
        new_records = [item for item in records if item is not existing]
        logger.info(
            "Deleted %s %s (actor=%s, cascaded=%s)",
            self.kind.label,
            removed_id,
            caller_id,
            {name: len(related[name]) - len(items) for name, items in updates.items()},
        )
        return DeleteResult(new_records, updates, existing)

    # -- detail helpers ----------------------------------------------------

    def related_to(self, record_id: Any, records: Sequence[Record], field_name: str) -> List[Record]:
        target = str(record_id or "")
        return [item for item in records if target and str(item.get(field_name) or "") == target]
