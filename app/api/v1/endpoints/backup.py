"""
Backup Endpoints Module

Each shared database has one stored snapshot. Clients may upload a snapshot
directly, ask the server to take one from the live store, read the stored
one back, or restore the live store from it.
"""
from fastapi import APIRouter, Depends

from app.api import deps
from app.models.shared_database import SharedDatabaseRead
from app.models.snapshot import Snapshot
from app.services.backup import SnapshotStore
from app.services.sync import SyncReconciler

router = APIRouter()


@router.get("/{database_id}", response_model=Snapshot)
def load_backup(
    database: SharedDatabaseRead = Depends(deps.get_member_database),
    snapshots: SnapshotStore = Depends(deps.get_snapshot_store),
    user_id: str = Depends(deps.get_current_user_id),
):
    """
    Return the stored snapshot. A database that was never backed up yields
    an empty snapshot.
    """
    return snapshots.load(database.id, user_id)


@router.post("/{database_id}", response_model=Snapshot)
def save_backup(
    snapshot: Snapshot,
    database: SharedDatabaseRead = Depends(deps.get_member_database),
    snapshots: SnapshotStore = Depends(deps.get_snapshot_store),
    user_id: str = Depends(deps.get_current_user_id),
):
    """
    Store a client-supplied snapshot, replacing the previous one.

    lastModified, databaseId and userId are set by the server.
    """
    return snapshots.save(database.id, user_id, snapshot)


@router.post("/{database_id}/create", response_model=Snapshot)
def create_backup(
    database: SharedDatabaseRead = Depends(deps.get_member_database),
    snapshots: SnapshotStore = Depends(deps.get_snapshot_store),
    reconciler: SyncReconciler = Depends(deps.get_reconciler),
    user_id: str = Depends(deps.get_current_user_id),
):
    """
    Export the live store and save it as the new snapshot.
    """
    return snapshots.save(database.id, user_id, reconciler.export_all(database.id))


@router.post("/{database_id}/restore", response_model=Snapshot)
def restore_backup(
    database: SharedDatabaseRead = Depends(deps.get_member_database),
    snapshots: SnapshotStore = Depends(deps.get_snapshot_store),
    reconciler: SyncReconciler = Depends(deps.get_reconciler),
    user_id: str = Depends(deps.get_current_user_id),
):
    """
    Replace the live store with the stored snapshot and return what was restored.

    Restoring a database that was never backed up empties its store.
    """
    snapshot = snapshots.load(database.id, user_id)
    reconciler.replace_all(database.id, snapshot)
    return snapshot
