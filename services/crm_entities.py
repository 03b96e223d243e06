from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Tuple
from uuid import uuid4

CASCADE_DROP = "drop"
CASCADE_UNLINK = "unlink"


@dataclass(frozen=True)
class Cascade:
    """Dependent-record rule applied when a record of the owning kind is deleted."""

    kind: str
    field: str
    mode: str = CASCADE_DROP


@dataclass(frozen=True)
class EntityKind:
    name: str
    label: str
    id_prefix: str
    storage_key: str
    search_fields: Tuple[str, ...]
    # foreign-key field -> kind whose display name stands in for the id
    linked_fields: Dict[str, str] = field(default_factory=dict)
    # list-of-ids field -> kind
    linked_lists: Dict[str, str] = field(default_factory=dict)
    cascades: Tuple[Cascade, ...] = ()
    sort_keys: Tuple[str, ...] = ("name",)
    default_sort: Tuple[str, str] = ("name", "ascending")


CUSTOMERS = EntityKind(
    name="customers",
    label="Customer",
    id_prefix="cust",
    storage_key="crmCustomers",
    search_fields=("name", "company", "email"),
    cascades=(
        Cascade("deals", "customerId"),
        Cascade("activities", "customerId"),
        Cascade("campaigns", "linkedCustomerIds", CASCADE_UNLINK),
    ),
    sort_keys=("name", "company", "status"),
)

SUPPLIERS = EntityKind(
    name="suppliers",
    label="Supplier",
    id_prefix="sup",
    storage_key="crmSuppliers",
    search_fields=("name", "contactPerson", "company", "email"),
    cascades=(Cascade("activities", "supplierId"),),
    sort_keys=("name", "contactPerson", "company", "status"),
)

DEALS = EntityKind(
    name="deals",
    label="Deal",
    id_prefix="deal",
    storage_key="crmDeals",
    search_fields=("name", "stage"),
    linked_fields={"customerId": "customers"},
    cascades=(Cascade("activities", "dealId"),),
    sort_keys=("name", "customerId", "value", "stage", "closeDate"),
)

ACTIVITIES = EntityKind(
    name="activities",
    label="Activity",
    id_prefix="act",
    storage_key="crmActivities",
    search_fields=("title", "type", "status", "notes"),
    linked_fields={"customerId": "customers", "dealId": "deals", "supplierId": "suppliers"},
    sort_keys=("dueDate", "title", "type", "status"),
    default_sort=("dueDate", "ascending"),
)

CAMPAIGNS = EntityKind(
    name="campaigns",
    label="Campaign",
    id_prefix="camp",
    storage_key="crmCampaigns",
    search_fields=("name", "description", "status"),
    linked_lists={"linkedCustomerIds": "customers"},
    sort_keys=("name", "status", "startDate", "endDate"),
)

PRODUCTS = EntityKind(
    name="products",
    label="Product",
    id_prefix="prod",
    storage_key="crmProducts",
    search_fields=("name", "description", "category", "sku"),
    sort_keys=("name", "price", "category"),
)

KINDS: Dict[str, EntityKind] = {
    kind.name: kind for kind in (CUSTOMERS, SUPPLIERS, DEALS, ACTIVITIES, CAMPAIGNS, PRODUCTS)
}

USERS_KEY = "crmUsers"
LOGGED_IN_USER_KEY = "loggedInUser"
COMMISSION_RATE_KEY = "commissionRate"
LANGUAGE_KEY = "crmLanguage"
CUSTOM_LABELS_KEY = "crmCustomLabels"


def get_kind(name: str) -> EntityKind:
    try:
        return KINDS[str(name or "").strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown entity kind: {name!r}") from None


def new_id(prefix: str, taken: Optional[Iterable[str]] = None) -> str:
    taken_ids = set(taken or ())
    while True:
        ts_ms = int(datetime.now(timezone.utc).timestamp() * 1000)
        candidate = f"{prefix}-{ts_ms}-{uuid4().hex[:9]}"
        if candidate not in taken_ids:
            return candidate


def record_ids(records: Iterable[Dict[str, Any]]) -> set:
    return {str(item.get("id")) for item in records if item.get("id") is not None}
