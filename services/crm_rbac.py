from __future__ import annotations

from typing import Any, Dict, Optional

ROLE_ADMIN = "Admin"
ROLE_SALES = "Sales"
ROLE_VIEWER = "Viewer"
ROLES = (ROLE_ADMIN, ROLE_SALES, ROLE_VIEWER)

# Kinds a Viewer cannot see at all, regardless of ownership.
VIEWER_HIDDEN_KINDS = {"campaigns"}


def normalize_role(raw_role: Any) -> str:
    role = str(raw_role or "").strip().lower()
    for known in ROLES:
        if known.lower() == role:
            return known
    raise ValueError(f"Unknown role: {raw_role!r}")


def can_view_all(role: Optional[str]) -> bool:
    return role == ROLE_ADMIN


def can_create(role: Optional[str]) -> bool:
    return role in {ROLE_ADMIN, ROLE_SALES}


def can_modify(role: Optional[str], owner_id: Optional[str], caller_id: Optional[str]) -> bool:
    if role == ROLE_ADMIN:
        return True
    if role == ROLE_SALES:
        return bool(owner_id) and owner_id == caller_id
    return False


def can_view_kind(role: Optional[str], kind: str) -> bool:
    if role == ROLE_VIEWER and kind in VIEWER_HIDDEN_KINDS:
        return False
    return role in ROLES


def can_view_record(role: Optional[str], owner_id: Optional[str], caller_id: Optional[str]) -> bool:
    if can_view_all(role):
        return True
    return bool(caller_id) and owner_id == caller_id


def can_set_commission_rate(role: Optional[str]) -> bool:
    return role == ROLE_ADMIN


def can_request_summary(role: Optional[str]) -> bool:
    return role in ROLES


def resolve_owner(role: Optional[str], caller_id: Optional[str], candidate: Dict[str, Any]) -> Optional[str]:
    """Admins may hand a new record to another owner; everyone else owns what they create."""
    requested = candidate.get("ownerId")
    if role == ROLE_ADMIN and requested:
        return requested
    return caller_id
