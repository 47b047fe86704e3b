"""
Snapshot Backup Store

Keeps one JSON snapshot per shared database under BACKUPS_DIR. Saving
overwrites the previous snapshot (single slot); the file is written to a
temporary name first and renamed into place, so a reader never sees a
partially written snapshot.

A database that was never backed up has an empty snapshot, not a missing one.
"""
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from app.core.errors import InternalError
from app.models.snapshot import Snapshot
from app.services.entities import validate_bundle_tags

logger = logging.getLogger(__name__)


class SnapshotStore:
    def __init__(self, backups_dir: str):
        self.backups_dir = Path(backups_dir)

    def path(self, database_id: str) -> Path:
        return self.backups_dir / f"{database_id}.json"

    def save(self, database_id: str, user_id: str, snapshot: Snapshot) -> Snapshot:
        """
        Stamp the snapshot with time, database and submitter, then persist it.

        Entities tagged with another database are rejected before anything is
        written, so every stored snapshot can be restored into this database.
        """
        validate_bundle_tags(snapshot, database_id)
        stamped = snapshot.model_copy(update={
            "last_modified": datetime.now(timezone.utc).isoformat(),
            "database_id": database_id,
            "user_id": user_id,
        })
        payload = stamped.model_dump_json(by_alias=True, indent=2)

        tmp_name: Optional[str] = None
        try:
            self.backups_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.backups_dir,
                prefix=f".{database_id}.", suffix=".tmp", delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
            os.replace(tmp_name, self.path(database_id))
        except OSError as exc:
            logger.error("save snapshot failed for database %s: %s", database_id, exc)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise InternalError(f"Could not save snapshot for database {database_id}") from exc

        logger.info(
            "Saved snapshot for database %s by user %s: %d folders, %d notes, %d schedule entries, "
            "%d pinboard notes, %d connections, %d images",
            database_id, user_id,
            len(stamped.folders), len(stamped.notes), len(stamped.schedule_entries),
            len(stamped.pinboard_notes), len(stamped.connections), len(stamped.note_images),
        )
        return stamped

    def load(self, database_id: str, user_id: str) -> Snapshot:
        """Return the latest snapshot, or an empty one if none was saved yet."""
        path = self.path(database_id)
        if not path.exists():
            logger.info("No snapshot yet for database %s, returning empty snapshot to user %s", database_id, user_id)
            return Snapshot(database_id=database_id)

        try:
            raw = path.read_text(encoding="utf-8")
            snapshot = Snapshot.model_validate_json(raw)
        except (OSError, PydanticValidationError) as exc:
            logger.error("load snapshot failed for database %s: %s", database_id, exc)
            raise InternalError(f"Could not read snapshot for database {database_id}") from exc

        logger.info("Loaded snapshot for database %s for user %s", database_id, user_id)
        return snapshot

    def delete(self, database_id: str) -> bool:
        """Remove the snapshot of a database; False when there was none."""
        path = self.path(database_id)
        try:
            if not path.exists():
                return False
            path.unlink()
        except OSError as exc:
            logger.error("delete snapshot failed for database %s: %s", database_id, exc)
            raise InternalError(f"Could not delete snapshot for database {database_id}") from exc

        logger.info("Deleted snapshot for database %s", database_id)
        return True
