"""
Shared Database Model Module

This module defines the registry side of collaboration: the SharedDatabase row
that names a logical database and its owner, and the DatabaseCollaborator
junction table that records which other users may read and sync it.
"""
from typing import List, Optional
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone
import uuid


class DatabaseCollaborator(SQLModel, table=True):
    """
    Junction table between a shared database and the users collaborating on it.

    The owner is tracked separately in SharedDatabase.owner_id and never has a
    row here. The composite primary key makes a duplicate membership
    impossible at the storage layer.

    Attributes:
        database_id: Foreign key to the shared database
        user_id: Opaque id of the collaborating user
        joined_at: ISO timestamp when the membership was created
    """
    __tablename__ = "database_collaborators"

    database_id: str = Field(foreign_key="shared_databases.id", primary_key=True)
    user_id: str = Field(primary_key=True, index=True)
    joined_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    database: Optional["SharedDatabase"] = Relationship(back_populates="collaborators")


class SharedDatabase(SQLModel, table=True):
    """
    Registry row for one logical collaborative database.

    Attributes:
        id: Opaque identifier generated at creation (immutable)
        name: Display name chosen by the owner
        owner_id: User id of the owner, a role distinct from collaborator
        created_at: ISO timestamp of creation
        store_locator: Path of the physical store backing this database
    """
    __tablename__ = "shared_databases"

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    name: str = Field(nullable=False, max_length=255)
    owner_id: str = Field(nullable=False, index=True)
    created_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    store_locator: Optional[str] = None

    # Collaborator rows are removed together with the database row
    collaborators: List[DatabaseCollaborator] = Relationship(
        back_populates="database",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class SharedDatabaseCreate(SQLModel):
    name: str


class CollaboratorAdd(SQLModel):
    user_id: str


class OwnershipTransfer(SQLModel):
    new_owner_id: str


class SharedDatabaseRead(SQLModel):
    """Schema for reading a shared database together with its collaborator ids."""
    id: str
    name: str
    owner_id: str
    created_at: Optional[str] = None
    collaborators: List[str] = []

    @classmethod
    def from_row(cls, row: SharedDatabase) -> "SharedDatabaseRead":
        return cls(
            id=row.id,
            name=row.name,
            owner_id=row.owner_id,
            created_at=row.created_at,
            collaborators=sorted(c.user_id for c in row.collaborators),
        )
