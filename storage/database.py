# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: database.py
# -----------------------------------------------------------------------------
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from storage.models import Base
from utility.logging_utils import get_class_logger


class Database:
    """
    Engine + session factory for the embeddings and ledger tables.

    SQLite files get their parent directory created; in-memory SQLite uses a
    StaticPool so every session sees the same database.
    """

    def __init__(self, url: str, *, echo: bool = False, logger=None):
        self.url = url
        self.logger = logger or get_class_logger(self.__class__)

        parsed = make_url(url)
        kwargs = {"echo": echo}
        if parsed.get_backend_name() == "sqlite":
            kwargs["connect_args"] = {"check_same_thread": False}  # shared across worker threads
            if parsed.database in (None, "", ":memory:"):
                kwargs["poolclass"] = StaticPool
            else:
                Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(url, **kwargs)
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False)
        self.logger.info("Database engine created (%s)", parsed.render_as_string(hide_password=True))

    def init_schema(self) -> None:
        """Create all tables. Call once at startup."""
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session scope: commit on success, roll back on error, always close."""
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            self.logger.warning("Database ping failed: %s", e)
            return False
