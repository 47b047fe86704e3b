"""
Access Guard

Pure predicates over a shared database and a caller id. The owner and the
collaborators may read and sync; only the owner may manage membership,
transfer ownership or delete the database.
"""
from typing import Protocol, Sequence

from app.core.errors import ForbiddenError


class Membership(Protocol):
    owner_id: str
    collaborators: Sequence[str]


def is_owner(db: Membership, user_id: str) -> bool:
    return db.owner_id == user_id


def is_collaborator(db: Membership, user_id: str) -> bool:
    return user_id in db.collaborators


def can_read(db: Membership, user_id: str) -> bool:
    return is_owner(db, user_id) or is_collaborator(db, user_id)


def can_write_collaborators(db: Membership, user_id: str) -> bool:
    return is_owner(db, user_id)


def can_delete(db: Membership, user_id: str) -> bool:
    return is_owner(db, user_id)


def can_transfer(db: Membership, user_id: str) -> bool:
    return is_owner(db, user_id)


def require_read(db: Membership, user_id: str) -> None:
    if not can_read(db, user_id):
        raise ForbiddenError("Not a member of this database")
