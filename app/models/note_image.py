"""
Note Image Model Module

Only the image metadata lives in the store. The bytes are uploaded and served
by a separate file endpoint, which is why file_path is optional.
"""
from typing import Optional
from sqlmodel import SQLModel, Field


class NoteImageBase(SQLModel):
    note_id: int = Field(nullable=False)   # soft reference to notes.id
    file_name: str = Field(nullable=False)
    file_path: Optional[str] = None

    database_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class NoteImage(NoteImageBase, table=True):
    __tablename__ = "note_images"

    id: Optional[int] = Field(default=None, primary_key=True)


class NoteImageCreate(NoteImageBase):
    id: Optional[int] = None


class NoteImageData(NoteImageBase):
    id: int
