from __future__ import annotations

import json
import logging
from numbers import Number
from threading import Lock
from typing import Any, Dict, Iterable, Optional

from azure.core.exceptions import ResourceNotFoundError
from azure.data.tables import TableServiceClient, UpdateMode

from shared.config import get_store_backend, get_table_settings
from shared.db import StoredBlob, init_db, make_engine, make_session_factory

logger = logging.getLogger(__name__)

# Azure Table string properties cap out at 64 KiB (UTF-16), so large
# collections are split across numbered properties.
_TABLE_CHUNK_CHARS = 30000


def _json_dump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _same_shape(value: Any, default: Any) -> bool:
    if default is None:
        return True
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, Number):
        return isinstance(value, Number) and not isinstance(value, bool)
    if isinstance(default, list):
        # List blobs are record collections.
        return isinstance(value, list) and all(isinstance(item, dict) for item in value)
    return isinstance(value, type(default))


class BlobStore:
    """
    Durable key-value store for JSON blobs.

    Reads never raise: a missing, unreadable or corrupt value yields the
    caller's default. Writes report success as a bool instead of raising so
    the in-memory state stays authoritative when the backend misbehaves.
    """

    name = "base"

    def _read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def _write(self, key: str, raw: str) -> None:
        raise NotImplementedError

    def _delete(self, key: str) -> None:
        raise NotImplementedError

    def load(self, key: str, default: Any = None) -> Any:
        try:
            raw = self._read(key)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Blob read failed for '%s' (%s), using default: %s", key, self.name, exc)
            return default
        if raw is None:
            return default
        try:
            value = json.loads(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Corrupt blob for '%s' (%s), using default: %s", key, self.name, exc)
            return default
        if not _same_shape(value, default):
            logger.warning("Blob for '%s' has unexpected shape %s, using default", key, type(value).__name__)
            return default
        return value

    def save(self, key: str, value: Any) -> bool:
        try:
            self._write(key, _json_dump(value))
            return True
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Blob write failed for '%s' (%s): %s", key, self.name, exc)
            return False

    def remove(self, key: str) -> bool:
        try:
            self._delete(key)
            return True
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Blob delete failed for '%s' (%s): %s", key, self.name, exc)
            return False

    def clear(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.remove(key)


class MemoryBlobStore(BlobStore):
    name = "memory"

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._lock = Lock()
        self._data: Dict[str, str] = dict(initial or {})

    def _read(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def _write(self, key: str, raw: str) -> None:
        with self._lock:
            self._data[key] = raw

    def _delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def raw(self, key: str) -> Optional[str]:
        return self._read(key)


class SqlBlobStore(BlobStore):
    name = "sql"

    def __init__(self, database_url: Optional[str] = None, engine=None):
        self.engine = engine or make_engine(database_url)
        init_db(self.engine)
        self.SessionLocal = make_session_factory(self.engine)

    def _read(self, key: str) -> Optional[str]:
        db = self.SessionLocal()
        try:
            row = db.get(StoredBlob, key)
            return row.value if row else None
        finally:
            db.close()

    def _write(self, key: str, raw: str) -> None:
        db = self.SessionLocal()
        try:
            row = db.get(StoredBlob, key)
            if row is None:
                db.add(StoredBlob(key=key, value=raw))
            else:
                row.value = raw
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _delete(self, key: str) -> None:
        db = self.SessionLocal()
        try:
            row = db.get(StoredBlob, key)
            if row is not None:
                db.delete(row)
                db.commit()
        finally:
            db.close()


class TableBlobStore(BlobStore):
    name = "table"

    def __init__(
        self,
        connection_string: Optional[str] = None,
        table_name: Optional[str] = None,
        workspace_id: Optional[str] = None,
        service: Optional[TableServiceClient] = None,
    ):
        settings = get_table_settings()
        self.table_name = table_name or settings["table_name"]
        self.partition = str(workspace_id or settings["workspace_id"]).strip() or "default"
        if service is None:
            conn_str = connection_string or settings["connection_string"]
            if not conn_str:
                raise ValueError("AZURE_STORAGE_CONNECTION_STRING (or AzureWebJobsStorage) is required")
            service = TableServiceClient.from_connection_string(conn_str)
        service.create_table_if_not_exists(self.table_name)
        self._client = service.get_table_client(table_name=self.table_name)

    def _read(self, key: str) -> Optional[str]:
        try:
            entity = self._client.get_entity(partition_key=self.partition, row_key=key)
        except ResourceNotFoundError:
            return None
        chunks = int(entity.get("chunks") or 0)
        return "".join(str(entity.get(f"value{index}") or "") for index in range(chunks))

    def _write(self, key: str, raw: str) -> None:
        parts = [raw[i : i + _TABLE_CHUNK_CHARS] for i in range(0, len(raw), _TABLE_CHUNK_CHARS)] or [""]
        entity: Dict[str, Any] = {
            "PartitionKey": self.partition,
            "RowKey": key,
            "chunks": len(parts),
        }
        for index, part in enumerate(parts):
            entity[f"value{index}"] = part
        self._client.upsert_entity(mode=UpdateMode.REPLACE, entity=entity)

    def _delete(self, key: str) -> None:
        self._client.delete_entity(partition_key=self.partition, row_key=key)


def get_blob_store(backend: Optional[str] = None) -> BlobStore:
    name = (backend or get_store_backend()).strip().lower()
    if name == "sql":
        return SqlBlobStore()
    if name == "table":
        return TableBlobStore()
    if name != "memory":
        logger.warning("Unknown CRM_STORE_BACKEND '%s', using in-memory store", name)
    return MemoryBlobStore()
