from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from numbers import Number
from typing import Any, Callable, Dict, List, Optional, Tuple

from services.ai_service import (
    build_customer_prompt,
    build_deal_prompt,
    build_supplier_prompt,
    generate_summary,
)
from services.crm_auth import (
    hash_password,
    normalize_email,
    public_user,
    validate_login,
    validate_registration,
    verify_password,
)
from services.crm_codec import export_filename, export_records, import_records
from services.crm_engine import EntityEngine, find_record
from services.crm_entities import (
    COMMISSION_RATE_KEY,
    KINDS,
    LOGGED_IN_USER_KEY,
    USERS_KEY,
    get_kind,
    new_id,
    record_ids,
)
from services.crm_errors import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from services.crm_metrics import commission_overview, dashboard_metrics
from services.crm_rbac import (
    ROLE_VIEWER,
    can_modify,
    can_request_summary,
    can_set_commission_rate,
)
from services.crm_seed import DEFAULT_COMMISSION_RATE, seed_collections, seed_users
from services.crm_store import BlobStore, get_blob_store
from services.i18n_service import Translator

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

FOLLOW_UP_DAYS = 7

# kind -> (translation arg, activity link field)
_FOLLOW_UP_LINKS = {
    "customers": ("customerName", "customerId"),
    "deals": ("dealName", "dealId"),
    "suppliers": ("supplierName", "supplierId"),
}

# Keys removed on logout; language and custom labels survive.
_SESSION_KEYS = [kind.storage_key for kind in KINDS.values()] + [USERS_KEY, COMMISSION_RATE_KEY, LOGGED_IN_USER_KEY]


class CRMWorkspace:
    """
    In-memory CRM workspace backed by a blob store.

    Every mutation is applied to the in-memory collections first and then
    mirrored to the store. A failed mirror write is logged and the in-memory
    state stays authoritative.
    """

    def __init__(
        self,
        store: Optional[BlobStore] = None,
        translator: Optional[Translator] = None,
        summarizer: Optional[Callable[..., str]] = None,
        key_selector: Optional[Callable[[], Optional[str]]] = None,
    ):
        self.store = store or get_blob_store()
        self.translator = translator or Translator(self.store)
        self.summarizer = summarizer or generate_summary
        self.key_selector = key_selector
        self.collections: Dict[str, List[Record]] = {}
        self.users: List[Record] = []
        self.current_user: Optional[Record] = None
        self.commission_rate: float = DEFAULT_COMMISSION_RATE
        self._load()

    # -- start-up ----------------------------------------------------------

    def _load(self) -> None:
        seeds = seed_collections()
        for name, kind in KINDS.items():
            self.collections[name] = self.store.load(kind.storage_key, seeds[name])
        self.users = self.store.load(USERS_KEY, [])
        if not self.users:
            self.users = seed_users()
            self._mirror(USERS_KEY, self.users)
        self.current_user = self.store.load(LOGGED_IN_USER_KEY, {}) or None
        rate = self.store.load(COMMISSION_RATE_KEY, DEFAULT_COMMISSION_RATE)
        self.commission_rate = float(rate) if 0 <= rate <= 1 else DEFAULT_COMMISSION_RATE
        logger.info(
            "Workspace loaded (%s store): %s",
            self.store.name,
            {name: len(items) for name, items in self.collections.items()},
        )

    def _reset_to_seed(self) -> None:
        self.collections = seed_collections()
        self.users = seed_users()
        self.commission_rate = DEFAULT_COMMISSION_RATE

    def _mirror(self, key: str, value: Any) -> None:
        if not self.store.save(key, value):
            logger.warning("Mirror of '%s' failed; keeping in-memory state", key)

    def _apply(self, updates: Dict[str, List[Record]]) -> None:
        # All collections are swapped before any write, so a mirror failure
        # never leaves the in-memory store half-updated.
        for name, items in updates.items():
            self.collections[name] = items
        for name, items in updates.items():
            self._mirror(KINDS[name].storage_key, items)

    # -- session -----------------------------------------------------------

    @property
    def role(self) -> Optional[str]:
        return self.current_user.get("role") if self.current_user else None

    @property
    def caller_id(self) -> Optional[str]:
        return self.current_user.get("id") if self.current_user else None

    def _require_user(self) -> Record:
        if not self.current_user:
            raise AuthenticationError("No user is logged in", message_key="auth_page.login_required")
        return self.current_user

    def _start_session(self, user: Record) -> Record:
        self.current_user = public_user(user)
        self._mirror(LOGGED_IN_USER_KEY, self.current_user)
        return self.current_user

    def register(self, username: str, email: str, password: str, confirm_password: str, role: Any) -> Record:
        normalized_role = validate_registration(
            self.users,
            username=username,
            email=email,
            password=password,
            confirm_password=confirm_password,
            role=role,
        )
        user = {
            "id": new_id("user", record_ids(self.users)),
            "username": username.strip(),
            "email": normalize_email(email),
            "passwordHash": hash_password(password),
            "role": normalized_role,
        }
        self.users = [*self.users, user]
        self._mirror(USERS_KEY, self.users)
        logger.info("Registered user %s with role %s", user["id"], normalized_role)
        return self._start_session(user)

    def login(self, email: str, password: str) -> Record:
        validate_login(email, password)
        wanted = normalize_email(email)
        for user in self.users:
            if normalize_email(user.get("email")) == wanted and verify_password(password, user.get("passwordHash")):
                logger.info("User %s logged in", user.get("id"))
                return self._start_session(user)
        logger.info("Failed login for %s", wanted)
        raise AuthenticationError("Invalid email or password")

    def logout(self) -> None:
        logger.info("User %s logged out; resetting workspace", self.caller_id)
        self.current_user = None
        self.store.clear(_SESSION_KEYS)
        self._reset_to_seed()

    # -- reads -------------------------------------------------------------

    def engine(self, kind_name: str) -> EntityEngine:
        return EntityEngine(get_kind(kind_name), missing_label=self.translator.translate("common.na"))

    def list(self, kind_name: str) -> List[Record]:
        self._require_user()
        engine = self.engine(kind_name)
        return engine.list(self.role, self.caller_id, self.collections[engine.kind.name])

    def lookups(self) -> Dict[str, List[Record]]:
        """Visible collections used to resolve linked ids into display names."""
        return {name: self.list(name) for name in ("customers", "deals", "suppliers")}

    def browse(
        self,
        kind_name: str,
        query: Optional[str] = None,
        sort_key: Optional[str] = None,
        direction: Optional[str] = None,
    ) -> List[Record]:
        engine = self.engine(kind_name)
        lookups = self.lookups()
        visible = self.list(kind_name)
        return engine.sort(engine.search(query, visible, lookups), sort_key, direction, lookups)

    def search(self, kind_name: str, query: Optional[str]) -> List[Record]:
        return self.engine(kind_name).search(query, self.list(kind_name), self.lookups())

    def sort(self, kind_name: str, sort_key: Optional[str] = None, direction: Optional[str] = None) -> List[Record]:
        return self.engine(kind_name).sort(self.list(kind_name), sort_key, direction, self.lookups())

    def get(self, kind_name: str, record_id: str) -> Record:
        record = find_record(record_id, self.list(kind_name))
        if record is None:
            raise NotFoundError(f"{kind_name} {record_id} not found", id=record_id)
        return record

    # -- writes ------------------------------------------------------------

    def add(self, kind_name: str, candidate: Record) -> Record:
        self._require_user()
        engine = self.engine(kind_name)
        result = engine.add(self.role, self.caller_id, candidate, self.collections[engine.kind.name])
        self._apply({engine.kind.name: result.records})
        return result.record

    def update(self, kind_name: str, updated: Record) -> Record:
        self._require_user()
        engine = self.engine(kind_name)
        result = engine.update(self.role, self.caller_id, updated, self.collections[engine.kind.name])
        self._apply({engine.kind.name: result.records})
        return result.record

    def delete(self, kind_name: str, record_id: str) -> Record:
        self._require_user()
        engine = self.engine(kind_name)
        related = {rule.kind: self.collections[rule.kind] for rule in engine.kind.cascades}
        result = engine.delete(self.role, self.caller_id, record_id, self.collections[engine.kind.name], related)
        self._apply({engine.kind.name: result.records, **result.related})
        return result.record

    def import_json(self, kind_name: str, blob: Any) -> int:
        self._require_user()
        kind = get_kind(kind_name)
        existing = self.collections[kind.name]
        merged = import_records(blob, existing, self.role, self.caller_id, kind)
        self._apply({kind.name: merged})
        return len(merged) - len(existing)

    def export_json(self, kind_name: str) -> Tuple[str, str]:
        """Return ``(filename, payload)`` for the caller's visible records of a kind."""
        kind = get_kind(kind_name)
        payload = export_records(self.list(kind.name))
        return export_filename(kind, self.translator), payload

    def set_commission_rate(self, rate: Any) -> float:
        self._require_user()
        if not can_set_commission_rate(self.role):
            raise PermissionDeniedError(f"{self.role} cannot change the commission rate")
        if not isinstance(rate, Number) or isinstance(rate, bool) or not 0 <= rate <= 1:
            raise ValidationError({"commissionRate": "commissions.rate_out_of_range"})
        self.commission_rate = float(rate)
        self._mirror(COMMISSION_RATE_KEY, self.commission_rate)
        logger.info("Commission rate set to %s by %s", self.commission_rate, self.caller_id)
        return self.commission_rate

    # -- detail views --------------------------------------------------------

    def related_activity_template(self, kind_name: str, record_id: str) -> Record:
        """Pre-filled follow-up Activity for a record; the caller still submits it through ``add``."""
        self._require_user()
        kind = get_kind(kind_name)
        if self.role == ROLE_VIEWER:
            raise PermissionDeniedError(f"{self.role} cannot create related activities")
        record = self.get(kind.name, record_id)
        due = (datetime.now(timezone.utc) + timedelta(days=FOLLOW_UP_DAYS)).date().isoformat()
        draft: Record = {"type": "Task", "status": "Pending", "dueDate": due}

        if kind.name == "activities":
            if not can_modify(self.role, record.get("ownerId"), self.caller_id):
                raise PermissionDeniedError(f"{self.caller_id} cannot follow up activity {record_id}")
            title = record.get("title")
            draft["title"] = self.translator.translate("activities.detail.follow_up_title", title=title)
            draft["notes"] = self.translator.translate("activities.detail.follow_up_notes", title=title)
            for field_name in ("customerId", "dealId", "supplierId"):
                if record.get(field_name):
                    draft[field_name] = record[field_name]
            return draft

        if kind.name not in _FOLLOW_UP_LINKS:
            raise ValueError(f"Related activities are not supported for {kind.name}")
        arg_name, link_field = _FOLLOW_UP_LINKS[kind.name]
        args = {arg_name: record.get("name")}
        draft["title"] = self.translator.translate(f"{kind.name}.detail.follow_up_title", **args)
        draft["notes"] = self.translator.translate(f"{kind.name}.detail.follow_up_notes", **args)
        draft[link_field] = record["id"]
        if kind.name == "deals" and record.get("customerId"):
            draft["customerId"] = record["customerId"]
        return draft

    def build_summary_prompt(self, kind_name: str, record_id: str) -> str:
        self._require_user()
        kind = get_kind(kind_name)
        record = self.get(kind.name, record_id)
        activities = self.list("activities")
        if kind.name == "customers":
            engine = self.engine("deals")
            return build_customer_prompt(
                record,
                engine.related_to(record["id"], self.list("deals"), "customerId"),
                engine.related_to(record["id"], activities, "customerId"),
                self.translator,
            )
        if kind.name == "deals":
            engine = self.engine("deals")
            return build_deal_prompt(
                record,
                engine.display_name("customers", record.get("customerId"), self.lookups()),
                engine.related_to(record["id"], activities, "dealId"),
                self.translator,
            )
        if kind.name == "suppliers":
            engine = self.engine("suppliers")
            return build_supplier_prompt(
                record,
                engine.related_to(record["id"], activities, "supplierId"),
                self.translator,
            )
        raise ValueError(f"Summaries are not supported for {kind.name}")

    def summarize(self, kind_name: str, record_id: str) -> str:
        self._require_user()
        if not can_request_summary(self.role):
            raise PermissionDeniedError(f"{self.role} cannot request summaries")
        prompt = self.build_summary_prompt(kind_name, record_id)
        logger.info("Requesting %s summary for %s (actor=%s)", kind_name, record_id, self.caller_id)
        return self.summarizer(prompt, key_selector=self.key_selector)

    # -- metrics -------------------------------------------------------------

    def dashboard(self) -> Dict[str, Any]:
        return dashboard_metrics(
            self.list("customers"),
            self.list("deals"),
            self.list("activities"),
            missing_label=self.translator.translate("common.na"),
        )

    def commissions(self) -> Dict[str, Any]:
        return commission_overview(
            self.list("deals"),
            self.list("customers"),
            self.commission_rate,
            missing_label=self.translator.translate("common.na"),
        )
