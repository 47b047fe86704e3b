"""
Sync Endpoints Module

Bulk merge between a client and the live store of a shared database.

- POST merges a bundle of entity lists (insert or overwrite by id)
- PUT replaces the whole store with the submitted snapshot
- GET exports the whole store as a snapshot
"""
from fastapi import APIRouter, Depends, status

from app.api import deps
from app.models.shared_database import SharedDatabaseRead
from app.models.snapshot import Snapshot, SyncBundle, SyncResult
from app.services.sync import SyncReconciler

router = APIRouter()


@router.post("/{database_id}", response_model=SyncResult)
def upsert(
    bundle: SyncBundle,
    database: SharedDatabaseRead = Depends(deps.get_member_database),
    reconciler: SyncReconciler = Depends(deps.get_reconciler),
):
    """
    Merge client entities into the store.

    Entities are matched by id: existing rows are overwritten (last write
    wins), unknown ids are inserted with the id the client sent.
    """
    return reconciler.upsert(database.id, bundle)


@router.put("/{database_id}", status_code=status.HTTP_204_NO_CONTENT)
def replace_all(
    snapshot: Snapshot,
    database: SharedDatabaseRead = Depends(deps.get_member_database),
    reconciler: SyncReconciler = Depends(deps.get_reconciler),
):
    reconciler.replace_all(database.id, snapshot)


@router.get("/{database_id}", response_model=Snapshot)
def export_all(
    database: SharedDatabaseRead = Depends(deps.get_member_database),
    reconciler: SyncReconciler = Depends(deps.get_reconciler),
):
    return reconciler.export_all(database.id)
