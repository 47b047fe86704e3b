"""
Entity Endpoints Module

CRUD on the live contents of a shared database, one route set for all six
entity kinds. The `{kind}` segment is one of folders, notes, schedule-entries,
pinboard-notes, connections or note-images.

Any member of the database (owner or collaborator) may read and write its
entities.
"""
from typing import Any, Dict
from fastapi import APIRouter, Depends, status

from app.api import deps
from app.models.kinds import EntityKind
from app.models.shared_database import SharedDatabaseRead
from app.services.entities import EntityService

router = APIRouter()


@router.get("/{database_id}/{kind}")
def list_entities(
    skip: int = 0,
    limit: int = 100,
    database: SharedDatabaseRead = Depends(deps.get_member_database),
    entity_kind: EntityKind = Depends(deps.get_entity_kind),
    service: EntityService = Depends(deps.get_entity_service),
):
    """
    Retrieve a paginated list of entities of one kind, ordered by id.
    """
    return service.list(database.id, entity_kind, skip=skip, limit=limit)


@router.post("/{database_id}/{kind}", status_code=status.HTTP_201_CREATED)
def create_entity(
    entity_in: Dict[str, Any],
    database: SharedDatabaseRead = Depends(deps.get_member_database),
    entity_kind: EntityKind = Depends(deps.get_entity_kind),
    service: EntityService = Depends(deps.get_entity_service),
):
    """
    Create an entity.

    The id may be supplied by the client; otherwise the store assigns one.
    The entity is always tagged with the database it is created in.
    """
    return service.create(database.id, entity_kind, entity_in)


@router.get("/{database_id}/{kind}/{entity_id}")
def read_entity(
    entity_id: int,
    database: SharedDatabaseRead = Depends(deps.get_member_database),
    entity_kind: EntityKind = Depends(deps.get_entity_kind),
    service: EntityService = Depends(deps.get_entity_service),
):
    return service.get(database.id, entity_kind, entity_id)


@router.patch("/{database_id}/{kind}/{entity_id}")
def update_entity(
    entity_id: int,
    entity_update: Dict[str, Any],
    database: SharedDatabaseRead = Depends(deps.get_member_database),
    entity_kind: EntityKind = Depends(deps.get_entity_kind),
    service: EntityService = Depends(deps.get_entity_service),
):
    """
    Update selected fields of an entity; fields not sent keep their values.
    """
    return service.update(database.id, entity_kind, entity_id, entity_update)


@router.delete("/{database_id}/{kind}/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entity(
    entity_id: int,
    database: SharedDatabaseRead = Depends(deps.get_member_database),
    entity_kind: EntityKind = Depends(deps.get_entity_kind),
    service: EntityService = Depends(deps.get_entity_service),
):
    """
    Delete an entity. Deleting a folder moves its notes out of it.
    """
    service.delete(database.id, entity_kind, entity_id)
