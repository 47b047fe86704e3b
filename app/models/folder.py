"""
Folder Model Module
"""
from typing import Optional
from sqlmodel import SQLModel, Field


class FolderBase(SQLModel):
    name: str = Field(nullable=False)
    parent_id: Optional[int] = None

    # ARGB colour as an integer
    color: int = 0
    is_expanded: bool = True

    database_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Folder(FolderBase, table=True):
    __tablename__ = "folders"

    id: Optional[int] = Field(default=None, primary_key=True)


class FolderCreate(FolderBase):
    id: Optional[int] = None


class FolderData(FolderBase):
    id: int
