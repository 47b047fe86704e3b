"""
Shared Database Endpoints Module

This module exposes the database registry: creating and deleting shared
databases, listing the ones a user belongs to, and managing membership
(collaborators, join, leave, ownership transfer).

Owners and collaborators both see a database; only the owner may change its
membership or delete it. Failures are raised as service errors and mapped to
status codes by the handler in app.main.
"""
from typing import List
from fastapi import APIRouter, Depends, status

from app.api import deps
from app.models.shared_database import (
    CollaboratorAdd,
    OwnershipTransfer,
    SharedDatabaseCreate,
    SharedDatabaseRead,
)
from app.services.registry import DatabaseRegistry

router = APIRouter()


@router.get("", response_model=List[SharedDatabaseRead])
def list_databases(
    registry: DatabaseRegistry = Depends(deps.get_registry),
    user_id: str = Depends(deps.get_current_user_id),
):
    """
    Retrieve every database the current user owns or collaborates on.
    """
    return registry.list_databases(user_id)


@router.post("", response_model=SharedDatabaseRead, status_code=status.HTTP_201_CREATED)
def create_database(
    database_in: SharedDatabaseCreate,
    registry: DatabaseRegistry = Depends(deps.get_registry),
    user_id: str = Depends(deps.get_current_user_id),
):
    """
    Create a new shared database owned by the current user.

    The physical store is provisioned before the response is sent, so the
    returned id can be synced against immediately.
    """
    return registry.create_database(user_id, database_in.name)


@router.get("/{database_id}", response_model=SharedDatabaseRead)
def read_database(
    database_id: str,
    registry: DatabaseRegistry = Depends(deps.get_registry),
    user_id: str = Depends(deps.get_current_user_id),
):
    return registry.get_database(database_id, user_id)


@router.delete("/{database_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_database(
    database_id: str,
    registry: DatabaseRegistry = Depends(deps.get_registry),
    user_id: str = Depends(deps.get_current_user_id),
):
    """
    Delete a shared database together with its store and snapshot (owner only).
    """
    registry.delete_database(database_id, user_id)


@router.post("/{database_id}/join", response_model=SharedDatabaseRead)
def join_database(
    database_id: str,
    registry: DatabaseRegistry = Depends(deps.get_registry),
    user_id: str = Depends(deps.get_current_user_id),
):
    """
    Join a database by id as a collaborator.

    Joining a database the caller already belongs to changes nothing.
    """
    return registry.join_database(database_id, user_id)


@router.post("/{database_id}/leave", status_code=status.HTTP_204_NO_CONTENT)
def leave_database(
    database_id: str,
    registry: DatabaseRegistry = Depends(deps.get_registry),
    user_id: str = Depends(deps.get_current_user_id),
):
    registry.leave_database(database_id, user_id)


@router.post("/{database_id}/collaborators", response_model=SharedDatabaseRead)
def add_collaborator(
    database_id: str,
    collaborator_in: CollaboratorAdd,
    registry: DatabaseRegistry = Depends(deps.get_registry),
    user_id: str = Depends(deps.get_current_user_id),
):
    """
    Add a collaborator (owner only). Adding an existing member is a no-op.
    """
    return registry.add_collaborator(database_id, user_id, collaborator_in.user_id)


@router.delete("/{database_id}/collaborators/{collaborator_id}", response_model=SharedDatabaseRead)
def remove_collaborator(
    database_id: str,
    collaborator_id: str,
    registry: DatabaseRegistry = Depends(deps.get_registry),
    user_id: str = Depends(deps.get_current_user_id),
):
    """
    Remove a collaborator (owner only).

    The owner cannot be removed this way; use the transfer endpoint first.
    """
    return registry.remove_collaborator(database_id, user_id, collaborator_id)


@router.post("/{database_id}/transfer", response_model=SharedDatabaseRead)
def transfer_ownership(
    database_id: str,
    transfer_in: OwnershipTransfer,
    registry: DatabaseRegistry = Depends(deps.get_registry),
    user_id: str = Depends(deps.get_current_user_id),
):
    """
    Hand ownership to an existing collaborator; the caller becomes a collaborator.
    """
    return registry.transfer_ownership(database_id, user_id, transfer_in.new_owner_id)
