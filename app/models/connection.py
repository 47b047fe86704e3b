"""
Connection Model Module
"""
from typing import Optional
from sqlmodel import SQLModel, Field


class ConnectionBase(SQLModel):
    # Soft references to pinboard_notes.id in the same store
    from_id: int = Field(nullable=False)
    to_id: int = Field(nullable=False)

    name: str = ""
    connection_color: int = 0

    database_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Connection(ConnectionBase, table=True):
    __tablename__ = "connections"

    id: Optional[int] = Field(default=None, primary_key=True)


class ConnectionCreate(ConnectionBase):
    id: Optional[int] = None


class ConnectionData(ConnectionBase):
    id: int
