import os
from typing import Optional

from dotenv import load_dotenv


def load_settings_file(path: Optional[str] = None) -> bool:
    """Load a .env file into the process environment without overriding it."""
    return load_dotenv(dotenv_path=path, override=False)


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    """Return an environment setting with an optional default."""
    return os.getenv(name, default)


def get_database_url() -> str:
    """
    Return the database URL for the SQL blob store.
    Defaults to a local SQLite file for development if not provided.
    """
    return os.getenv("DATABASE_URL") or "sqlite:///./data/crm.db"


def get_store_backend() -> str:
    """Blob store backend name: memory, sql or table."""
    return (os.getenv("CRM_STORE_BACKEND") or "memory").strip().lower()


def get_table_settings() -> dict:
    """
    Azure Table Storage settings for the table blob store.
    One partition per workspace so several workspaces can share a table.
    """
    return {
        "connection_string": os.getenv("AZURE_STORAGE_CONNECTION_STRING") or os.getenv("AzureWebJobsStorage"),
        "table_name": os.getenv("CRM_BLOB_TABLE", "CRMBlobs"),
        "workspace_id": os.getenv("CRM_WORKSPACE_ID", "default"),
    }


def get_openai_settings() -> dict:
    return {
        "api_key": os.getenv("OPENAI_API_KEY"),
        "model": os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        "base_url": os.getenv("OPENAI_BASE_URL") or None,
    }


def get_log_level() -> str:
    return (os.getenv("CRM_LOG_LEVEL") or "INFO").strip().upper()
