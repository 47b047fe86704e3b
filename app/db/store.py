"""
Physical Store Module

Each shared database is materialized as its own SQLite file holding the six
entity tables. The registry decides when a store exists; this module only
creates, opens and removes the files.

Stores are opened per operation: every `open()` builds a fresh engine, hands
out one session and disposes the engine afterwards, so no connection outlives
the request that needed it.
"""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Session, create_engine

from app.core.errors import InternalError
from app.models.kinds import STORE_TABLES

logger = logging.getLogger(__name__)

# SQLite side files that belong to a store
_SIDE_SUFFIXES = ("-journal", "-wal", "-shm")


class StoreProvisioner:
    def __init__(self, stores_dir: str):
        self.stores_dir = Path(stores_dir)

    def locator(self, database_id: str) -> str:
        """Path of the store file for a database id."""
        return str(self.stores_dir / f"{database_id}.db")

    def exists(self, database_id: str) -> bool:
        return Path(self.locator(database_id)).exists()

    def _create_engine(self, database_id: str):
        return create_engine(
            f"sqlite:///{self.locator(database_id)}",
            connect_args={"check_same_thread": False},
        )

    def _create_tables(self, engine) -> None:
        self.stores_dir.mkdir(parents=True, exist_ok=True)
        # create_all only creates missing tables, so existing rows are untouched
        SQLModel.metadata.create_all(engine, tables=STORE_TABLES)

    def provision(self, database_id: str) -> str:
        """
        Create the store for a database if absent and return its locator.

        Calling this for an existing store only adds tables that are missing.
        """
        engine = self._create_engine(database_id)
        try:
            self._create_tables(engine)
        except (OSError, SQLAlchemyError) as exc:
            logger.error("provision failed for database %s: %s", database_id, exc)
            raise InternalError(f"Could not provision store for database {database_id}") from exc
        finally:
            engine.dispose()

        locator = self.locator(database_id)
        logger.info("Provisioned store for database %s at %s", database_id, locator)
        return locator

    def destroy(self, database_id: str) -> bool:
        """
        Delete the store file of a database.

        Returns False when there was nothing to delete.
        """
        path = Path(self.locator(database_id))
        removed = False
        try:
            for candidate in [path] + [Path(f"{path}{suffix}") for suffix in _SIDE_SUFFIXES]:
                if candidate.exists():
                    candidate.unlink()
                    removed = True
        except OSError as exc:
            logger.error("destroy failed for database %s: %s", database_id, exc)
            raise InternalError(f"Could not delete store for database {database_id}") from exc

        if removed:
            logger.info("Deleted store for database %s", database_id)
        return removed

    @contextmanager
    def open(self, database_id: str) -> Iterator[Session]:
        """
        Open a session on the store of a database.

        Missing tables are created first, so stores provisioned before a table
        was added keep working.
        """
        engine = self._create_engine(database_id)
        try:
            try:
                self._create_tables(engine)
            except (OSError, SQLAlchemyError) as exc:
                logger.error("open failed for database %s: %s", database_id, exc)
                raise InternalError(f"Could not open store for database {database_id}") from exc

            with Session(engine) as session:
                yield session
        finally:
            engine.dispose()
