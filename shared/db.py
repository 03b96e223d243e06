import os
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.orm import declarative_base, scoped_session, sessionmaker

from shared.config import get_database_url

Base = declarative_base()


class StoredBlob(Base):
    __tablename__ = "crm_blobs"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


def make_engine(database_url: str | None = None):
    url = database_url or get_database_url()
    if url.startswith("sqlite:///./"):
        # Relative SQLite files live under ./data by default; create it on first use.
        directory = os.path.dirname(url[len("sqlite:///"):])
        if directory:
            os.makedirs(directory, exist_ok=True)
    return create_engine(
        url,
        future=True,
        pool_pre_ping=True,
    )


def make_session_factory(engine):
    return scoped_session(
        sessionmaker(bind=engine, autoflush=False, autocommit=False)
    )


def init_db(engine) -> None:
    """Create tables if they do not exist."""
    Base.metadata.create_all(bind=engine)
