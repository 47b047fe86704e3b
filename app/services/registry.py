"""
Database Registry

The registry is the single source of truth for which shared databases exist,
who owns them and who collaborates on them. Creating a database provisions
its physical store; deleting it removes the registry row first and then
cleans up the store and snapshot on a best-effort basis.

Owner and collaborator are disjoint roles: the owner never has a row in
database_collaborators. Membership changes are single-row inserts and deletes
on that table, so concurrent add/remove calls cannot overwrite each other.
"""
import logging
from typing import List

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from app.core.errors import (
    ForbiddenError,
    InternalError,
    InvalidOperationError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from app.db.store import StoreProvisioner
from app.models.shared_database import DatabaseCollaborator, SharedDatabase, SharedDatabaseRead
from app.services import access
from app.services.backup import SnapshotStore

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 255


class DatabaseRegistry:
    def __init__(self, db: Session, provisioner: StoreProvisioner, snapshots: SnapshotStore):
        self.db = db
        self.provisioner = provisioner
        self.snapshots = snapshots

    def _load(self, database_id: str) -> SharedDatabase:
        statement = (
            select(SharedDatabase)
            .where(SharedDatabase.id == database_id)
            .options(selectinload(SharedDatabase.collaborators))
        )
        row = self.db.exec(statement).first()
        if row is None:
            raise NotFoundError(f"Database {database_id} not found")
        return row

    def _read(self, database_id: str) -> SharedDatabaseRead:
        # Re-read so the collaborator list reflects the committed state
        self.db.expire_all()
        return SharedDatabaseRead.from_row(self._load(database_id))

    def _commit(self, operation: str, database_id: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("%s failed for database %s: %s", operation, database_id, exc)
            raise InternalError(f"Could not update registry for database {database_id}") from exc

    def _discard_store(self, database_id: str) -> None:
        try:
            self.provisioner.destroy(database_id)
        except InternalError:
            logger.warning("Store for database %s was not removed", database_id)

    def _commit_membership(self, operation: str, database_id: str) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            # Same membership written concurrently by another request
            self.db.rollback()
            logger.info("%s on database %s was already applied", operation, database_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("%s failed for database %s: %s", operation, database_id, exc)
            raise InternalError(f"Could not update registry for database {database_id}") from exc

    def create_database(self, owner_id: str, name: str) -> SharedDatabaseRead:
        """
        Register a new database owned by owner_id and provision its store.

        If provisioning fails the registry row is rolled back, so a row never
        exists without a store.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Database name must not be empty")
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(f"Database name must be at most {MAX_NAME_LENGTH} characters")

        row = SharedDatabase(name=name, owner_id=owner_id)
        database_id = row.id
        row.store_locator = self.provisioner.locator(database_id)
        self.db.add(row)
        try:
            self.db.flush()
            self.provisioner.provision(database_id)
            self.db.commit()
        except (ServiceError, SQLAlchemyError) as exc:
            self.db.rollback()
            self._discard_store(database_id)
            if isinstance(exc, ServiceError):
                raise
            logger.error("create failed for database %s: %s", database_id, exc)
            raise InternalError("Could not register database") from exc

        logger.info("Created database %s (%s) for user %s", database_id, name, owner_id)
        return self._read(database_id)

    def list_databases(self, user_id: str) -> List[SharedDatabaseRead]:
        """Every database the user owns or collaborates on."""
        member_of = select(DatabaseCollaborator.database_id).where(DatabaseCollaborator.user_id == user_id)
        statement = (
            select(SharedDatabase)
            .where(or_(SharedDatabase.owner_id == user_id, SharedDatabase.id.in_(member_of)))
            .options(selectinload(SharedDatabase.collaborators))
            .order_by(SharedDatabase.created_at)
        )
        return [SharedDatabaseRead.from_row(row) for row in self.db.exec(statement).all()]

    def get_database(self, database_id: str, user_id: str) -> SharedDatabaseRead:
        """
        Return a database the caller may read.

        Raises NotFoundError for an unknown id and ForbiddenError when the
        caller is neither owner nor collaborator.
        """
        database = SharedDatabaseRead.from_row(self._load(database_id))
        access.require_read(database, user_id)
        return database

    def delete_database(self, database_id: str, user_id: str) -> None:
        """
        Remove a database; only its owner may do this.

        Dropping the registry row is the operation of record. The store and
        the snapshot are removed afterwards and failures there are only logged.
        """
        row = self._load(database_id)
        if not access.can_delete(SharedDatabaseRead.from_row(row), user_id):
            raise ForbiddenError("Only the owner may delete this database")

        self.db.delete(row)
        self._commit("delete", database_id)
        logger.info("Deleted database %s by user %s", database_id, user_id)

        self._discard_store(database_id)
        try:
            self.snapshots.delete(database_id)
        except InternalError:
            logger.warning("Snapshot for deleted database %s was not removed", database_id)

    def add_collaborator(self, database_id: str, owner_id: str, new_user_id: str) -> SharedDatabaseRead:
        new_user_id = (new_user_id or "").strip()
        if not new_user_id:
            raise ValidationError("User id must not be empty")

        row = self._load(database_id)
        database = SharedDatabaseRead.from_row(row)
        if not access.can_write_collaborators(database, owner_id):
            raise ForbiddenError("Only the owner may manage collaborators")
        if access.can_read(database, new_user_id):
            return database

        row.collaborators.append(DatabaseCollaborator(user_id=new_user_id))
        self._commit_membership("add_collaborator", database_id)
        logger.info("Added collaborator %s to database %s", new_user_id, database_id)
        return self._read(database_id)

    def remove_collaborator(self, database_id: str, owner_id: str, target_user_id: str) -> SharedDatabaseRead:
        row = self._load(database_id)
        database = SharedDatabaseRead.from_row(row)
        if not access.can_write_collaborators(database, owner_id):
            raise ForbiddenError("Only the owner may manage collaborators")
        if access.is_owner(database, target_user_id):
            raise InvalidOperationError("The owner cannot be removed; transfer ownership first")
        if not access.is_collaborator(database, target_user_id):
            return database

        _drop_member(row, target_user_id)
        self._commit("remove_collaborator", database_id)
        logger.info("Removed collaborator %s from database %s", target_user_id, database_id)
        return self._read(database_id)

    def join_database(self, database_id: str, user_id: str) -> SharedDatabaseRead:
        """Add the caller as collaborator of a database they know the id of."""
        row = self._load(database_id)
        database = SharedDatabaseRead.from_row(row)
        if access.can_read(database, user_id):
            return database

        row.collaborators.append(DatabaseCollaborator(user_id=user_id))
        self._commit_membership("join", database_id)
        logger.info("User %s joined database %s", user_id, database_id)
        return self._read(database_id)

    def leave_database(self, database_id: str, user_id: str) -> None:
        row = self._load(database_id)
        database = SharedDatabaseRead.from_row(row)
        if access.is_owner(database, user_id):
            raise InvalidOperationError("The owner cannot leave; transfer ownership first")
        access.require_read(database, user_id)

        _drop_member(row, user_id)
        self._commit("leave", database_id)
        logger.info("User %s left database %s", user_id, database_id)

    def transfer_ownership(self, database_id: str, current_owner_id: str, new_owner_id: str) -> SharedDatabaseRead:
        """
        Swap roles: new_owner_id becomes owner, current_owner_id a collaborator.

        The new owner must already be a collaborator. Both role changes are
        committed together.
        """
        row = self._load(database_id)
        database = SharedDatabaseRead.from_row(row)
        if not access.can_transfer(database, current_owner_id):
            raise ForbiddenError("Only the owner may transfer ownership")
        if not access.is_collaborator(database, new_owner_id):
            raise InvalidOperationError(f"User {new_owner_id} is not a collaborator of this database")

        _drop_member(row, new_owner_id)
        row.collaborators.append(DatabaseCollaborator(user_id=current_owner_id))
        row.owner_id = new_owner_id
        self.db.add(row)
        self._commit("transfer_ownership", database_id)

        logger.info("Transferred database %s from %s to %s", database_id, current_owner_id, new_owner_id)
        return self._read(database_id)


def _drop_member(row: SharedDatabase, user_id: str) -> None:
    # delete-orphan removes the junction row on flush
    for membership in list(row.collaborators):
        if membership.user_id == user_id:
            row.collaborators.remove(membership)
