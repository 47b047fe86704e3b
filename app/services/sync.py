"""
Sync Reconciler

Merges client state into a physical store and exports it back.

- upsert: every entity is looked up by primary key and overwritten if present
  (last write wins, no version comparison), otherwise inserted with the id
  the client sent. Each entity list is committed as one transaction.
- replace_all: wipes the six tables and loads a snapshot in one transaction,
  so a failure leaves the previous contents in place.
- export_all: reads the six tables into a snapshot.

Concurrent calls on the same database are not serialized here: overlapping
upserts resolve per entity to whichever write committed last, and overlapping
replace_all calls leave the store as the last one to commit wrote it.
"""
import logging
from typing import Any, Dict

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.core.errors import InternalError, ValidationError
from app.db.store import StoreProvisioner
from app.models.kinds import ENTITY_KINDS, EntityKind
from app.models.snapshot import Snapshot, SyncBundle, SyncResult
from app.services.entities import fill_timestamps, validate_bundle_tags

logger = logging.getLogger(__name__)


def _validate_unique_ids(bundle: SyncBundle) -> None:
    for kind in ENTITY_KINDS:
        seen = set()
        for item in getattr(bundle, kind.attr):
            if item.id in seen:
                raise ValidationError(f"Duplicate id {item.id} in {kind.attr}")
            seen.add(item.id)


def _stamped(item: Any, database_id: str, existing: Any = None) -> Dict[str, Any]:
    fields = item.model_dump()
    fields["database_id"] = database_id
    return fill_timestamps(fields, existing)


class SyncReconciler:
    def __init__(self, provisioner: StoreProvisioner):
        self.provisioner = provisioner

    def _upsert_kind(self, session: Session, kind: EntityKind, items, result: SyncResult, database_id: str) -> None:
        for item in items:
            row = session.get(kind.model, item.id)
            if row is None:
                session.add(kind.model(**_stamped(item, database_id)))
                # Make the row visible to a later duplicate in the same list
                session.flush()
                result.inserted += 1
            else:
                for key, value in _stamped(item, database_id, row).items():
                    setattr(row, key, value)
                session.add(row)
                result.updated += 1

    def upsert(self, database_id: str, bundle: SyncBundle) -> SyncResult:
        validate_bundle_tags(bundle, database_id)
        result = SyncResult()

        with self.provisioner.open(database_id) as session:
            for kind in ENTITY_KINDS:
                items = getattr(bundle, kind.attr)
                if not items:
                    continue
                try:
                    self._upsert_kind(session, kind, items, result, database_id)
                    session.commit()
                except SQLAlchemyError as exc:
                    session.rollback()
                    logger.error("upsert %s failed for database %s: %s", kind.attr, database_id, exc)
                    raise InternalError(f"Could not sync {kind.attr} for database {database_id}") from exc

        logger.info(
            "Synced database %s: %d inserted, %d updated", database_id, result.inserted, result.updated
        )
        return result

    def replace_all(self, database_id: str, snapshot: SyncBundle) -> None:
        validate_bundle_tags(snapshot, database_id)
        _validate_unique_ids(snapshot)

        with self.provisioner.open(database_id) as session:
            try:
                for kind in ENTITY_KINDS:
                    session.exec(delete(kind.model))
                for kind in ENTITY_KINDS:
                    for item in getattr(snapshot, kind.attr):
                        session.add(kind.model(**_stamped(item, database_id)))
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("replace_all failed for database %s: %s", database_id, exc)
                raise InternalError(f"Could not replace contents of database {database_id}") from exc

        logger.info("Replaced contents of database %s", database_id)

    def export_all(self, database_id: str) -> Snapshot:
        lists: Dict[str, list] = {}
        with self.provisioner.open(database_id) as session:
            try:
                for kind in ENTITY_KINDS:
                    rows = session.exec(select(kind.model).order_by(kind.model.id)).all()
                    lists[kind.attr] = [
                        kind.data_schema.model_validate(row, from_attributes=True) for row in rows
                    ]
            except SQLAlchemyError as exc:
                logger.error("export_all failed for database %s: %s", database_id, exc)
                raise InternalError(f"Could not export database {database_id}") from exc

        return Snapshot(database_id=database_id, **lists)
