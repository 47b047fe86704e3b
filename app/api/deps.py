"""
API Dependencies Module

This module provides FastAPI dependency functions for authentication and for
wiring the service layer. Tokens are issued by an external identity provider;
this service only validates them and reads the caller's user id from the
`sub` claim.

It implements a dual authentication strategy supporting both bearer tokens (for API clients)
and HTTP-only cookies (for browser clients).
"""
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from sqlmodel import Session

from app.core.config import settings
from app.core.errors import NotFoundError, UnauthenticatedError
from app.db.session import get_db
from app.db.store import StoreProvisioner
from app.models.kinds import KINDS_BY_SLUG, EntityKind
from app.models.shared_database import SharedDatabaseRead
from app.services.backup import SnapshotStore
from app.services.entities import EntityService
from app.services.registry import DatabaseRegistry
from app.services.sync import SyncReconciler

# auto_error=False allows us to check cookies as a fallback
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login",
    auto_error=False
)


def get_current_user_id(
    request: Request,
    token: Optional[str] = Depends(reusable_oauth2)
) -> str:
    """
    Dependency that returns the id of the authenticated caller.

    The function first checks for a bearer token in the Authorization header.
    If not found, it falls back to checking the access_token cookie.

    Raises:
        UnauthenticatedError: If no token is present, or it is invalid, expired
            or lacks a subject
    """
    if not token:
        token = request.cookies.get("access_token")
        # Cookie format is "Bearer <token>"
        if token and token.startswith("Bearer "):
            token = token.replace("Bearer ", "")

    if not token:
        raise UnauthenticatedError()

    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        raise UnauthenticatedError("Could not validate credentials")

    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise UnauthenticatedError("Could not validate credentials")
    return user_id


def get_provisioner() -> StoreProvisioner:
    return StoreProvisioner(settings.STORES_DIR)


def get_snapshot_store() -> SnapshotStore:
    return SnapshotStore(settings.BACKUPS_DIR)


def get_registry(
    db: Session = Depends(get_db),
    provisioner: StoreProvisioner = Depends(get_provisioner),
    snapshots: SnapshotStore = Depends(get_snapshot_store),
) -> DatabaseRegistry:
    return DatabaseRegistry(db, provisioner, snapshots)


def get_reconciler(provisioner: StoreProvisioner = Depends(get_provisioner)) -> SyncReconciler:
    return SyncReconciler(provisioner)


def get_entity_service(provisioner: StoreProvisioner = Depends(get_provisioner)) -> EntityService:
    return EntityService(provisioner)


def get_entity_kind(kind: str) -> EntityKind:
    """Resolve the `{kind}` path segment, e.g. `pinboard-notes`."""
    try:
        return KINDS_BY_SLUG[kind]
    except KeyError:
        raise NotFoundError(f"Unknown entity kind '{kind}'")


def get_member_database(
    database_id: str,
    registry: DatabaseRegistry = Depends(get_registry),
    user_id: str = Depends(get_current_user_id),
) -> SharedDatabaseRead:
    """
    Dependency that requires the caller to be owner or collaborator of the
    database named in the path.

    Raises:
        NotFoundError: If the database does not exist
        ForbiddenError: If the caller is not a member
    """
    return registry.get_database(database_id, user_id)
