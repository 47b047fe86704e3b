"""
Note Model Module

This module defines the Note stored in every per-database store. Notes may sit
in a folder; the folder reference is soft and is cleared when the folder goes.
"""
from typing import Dict, List, Optional
from sqlmodel import SQLModel, Field, JSON


class NoteBase(SQLModel):
    """
    Base properties for a Note.
    """
    # Basic note content
    title: str = Field(nullable=False)
    content: Optional[str] = None

    # Soft reference to folders.id in the same store (set to NULL on folder delete)
    folder_id: Optional[int] = None

    # Image file names and free-form key/value metadata, stored as JSON columns
    images: List[str] = Field(default_factory=list, sa_type=JSON)
    note_metadata: Dict[str, str] = Field(default_factory=dict, sa_type=JSON)

    # Rich-text document as produced by the client editor
    content_json: Optional[str] = None

    # Id of the shared database this row belongs to
    database_id: Optional[str] = None

    # Audit timestamps (ISO strings); filled by the store when missing
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Note(NoteBase, table=True):
    """
    Note table model.
    """
    __tablename__ = "notes"

    # Primary key, unique within one store only
    id: Optional[int] = Field(default=None, primary_key=True)


class NoteCreate(NoteBase):
    """Payload for creating a note; the id is assigned by the store when omitted."""
    id: Optional[int] = None


class NoteData(NoteBase):
    """Note as carried in sync bundles, snapshots and API responses."""
    id: int
