"""
Entity Service

CRUD on the live rows of one physical store. Ids created here come from the
store's autoincrement unless the caller supplies one; the sync reconciler is
the path where the client is authoritative for ids.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from app.core.errors import InternalError, NotFoundError, ValidationError
from app.db.store import StoreProvisioner
from app.models.folder import Folder
from app.models.kinds import ENTITY_KINDS, EntityKind
from app.models.note import Note

logger = logging.getLogger(__name__)

_TIMESTAMPS = ("created_at", "updated_at")


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def check_database_tag(kind: EntityKind, fields: Dict[str, Any], database_id: str) -> None:
    """Reject an entity tagged with another database id."""
    tag = fields.get("database_id")
    if tag is not None and tag != database_id:
        raise ValidationError(
            f"{kind.attr} entry {fields.get('id')} belongs to database {tag}, not {database_id}"
        )


def validate_bundle_tags(bundle: Any, database_id: str) -> None:
    """Run check_database_tag over every entity of a sync bundle or snapshot."""
    for kind in ENTITY_KINDS:
        for item in getattr(bundle, kind.attr):
            check_database_tag(kind, {"id": item.id, "database_id": item.database_id}, database_id)


def fill_timestamps(fields: Dict[str, Any], existing: Any = None) -> Dict[str, Any]:
    """
    Fill missing timestamps from the existing row, or with the current time.

    Keeping the stored values when the payload has none makes repeated
    upserts of the same payload leave the row unchanged.
    """
    now = utc_now()
    for key in _TIMESTAMPS:
        if fields.get(key) is None:
            fields[key] = getattr(existing, key, None) or now
    return fields


class EntityService:
    def __init__(self, provisioner: StoreProvisioner):
        self.provisioner = provisioner

    def list(self, database_id: str, kind: EntityKind, skip: int = 0, limit: int = 100) -> List[Any]:
        with self.provisioner.open(database_id) as session:
            try:
                statement = select(kind.model).order_by(kind.model.id).offset(skip).limit(limit)
                rows = session.exec(statement).all()
                return [kind.data_schema.model_validate(row, from_attributes=True) for row in rows]
            except SQLAlchemyError as exc:
                logger.error("list %s failed for database %s: %s", kind.attr, database_id, exc)
                raise InternalError(f"Could not read {kind.attr}") from exc

    def get(self, database_id: str, kind: EntityKind, entity_id: int) -> Any:
        with self.provisioner.open(database_id) as session:
            try:
                row = session.get(kind.model, entity_id)
            except SQLAlchemyError as exc:
                logger.error("get %s %s failed for database %s: %s", kind.attr, entity_id, database_id, exc)
                raise InternalError(f"Could not read {kind.attr}") from exc
            if row is None:
                raise NotFoundError(f"{kind.attr} entry {entity_id} not found")
            return kind.data_schema.model_validate(row, from_attributes=True)

    def create(self, database_id: str, kind: EntityKind, payload: Dict[str, Any]) -> Any:
        try:
            data = kind.create_schema.model_validate(payload)
        except PydanticValidationError as exc:
            raise ValidationError(str(exc)) from exc

        fields = data.model_dump()
        check_database_tag(kind, fields, database_id)
        fields["database_id"] = database_id
        fill_timestamps(fields)
        if fields.get("id") is None:
            fields.pop("id", None)

        with self.provisioner.open(database_id) as session:
            try:
                if "id" in fields and session.get(kind.model, fields["id"]) is not None:
                    raise ValidationError(f"{kind.attr} entry {fields['id']} already exists")
                row = kind.model(**fields)
                session.add(row)
                session.commit()
                session.refresh(row)
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("create %s failed for database %s: %s", kind.attr, database_id, exc)
                raise InternalError(f"Could not create {kind.attr} entry") from exc

            logger.info("Created %s entry %s in database %s", kind.attr, row.id, database_id)
            return kind.data_schema.model_validate(row, from_attributes=True)

    def update(self, database_id: str, kind: EntityKind, entity_id: int, changes: Dict[str, Any]) -> Any:
        changes = dict(changes)
        changes.pop("id", None)
        unknown = set(changes) - set(kind.data_schema.model_fields)
        if unknown:
            raise ValidationError(f"Unknown fields for {kind.attr}: {', '.join(sorted(unknown))}")
        check_database_tag(kind, changes, database_id)

        with self.provisioner.open(database_id) as session:
            try:
                row = session.get(kind.model, entity_id)
                if row is None:
                    raise NotFoundError(f"{kind.attr} entry {entity_id} not found")

                # Validate the merged record, not just the partial payload
                merged = kind.data_schema.model_validate(row, from_attributes=True).model_dump()
                merged.update(changes)
                if "updated_at" not in changes:
                    merged["updated_at"] = utc_now()
                try:
                    data = kind.data_schema.model_validate(merged)
                except PydanticValidationError as exc:
                    raise ValidationError(str(exc)) from exc

                for key, value in data.model_dump(exclude={"id"}).items():
                    setattr(row, key, value)
                row.database_id = database_id
                session.add(row)
                session.commit()
                session.refresh(row)
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("update %s %s failed for database %s: %s", kind.attr, entity_id, database_id, exc)
                raise InternalError(f"Could not update {kind.attr} entry") from exc
            return kind.data_schema.model_validate(row, from_attributes=True)

    def delete(self, database_id: str, kind: EntityKind, entity_id: int) -> None:
        with self.provisioner.open(database_id) as session:
            try:
                row = session.get(kind.model, entity_id)
                if row is None:
                    raise NotFoundError(f"{kind.attr} entry {entity_id} not found")
                if kind.model is Folder:
                    # Notes keep living outside the removed folder
                    session.exec(update(Note).where(Note.folder_id == entity_id).values(folder_id=None))
                session.delete(row)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("delete %s %s failed for database %s: %s", kind.attr, entity_id, database_id, exc)
                raise InternalError(f"Could not delete {kind.attr} entry") from exc

            logger.info("Deleted %s entry %s from database %s", kind.attr, entity_id, database_id)
