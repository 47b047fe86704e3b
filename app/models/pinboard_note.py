"""
Pinboard Note Model Module

A pinboard note is a card placed on a free-form board. Cards are linked to
each other through Connection rows.
"""
from typing import Optional
from sqlmodel import SQLModel, Field


class PinboardNoteBase(SQLModel):
    title: str = ""
    content: str = ""

    # Position and size on the board
    position_x: float = 0.0
    position_y: float = 0.0
    width: float = 200.0
    height: float = 150.0

    background_color: int = 0   # ARGB
    icon: int = 0               # icon code point

    database_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class PinboardNote(PinboardNoteBase, table=True):
    __tablename__ = "pinboard_notes"

    id: Optional[int] = Field(default=None, primary_key=True)


class PinboardNoteCreate(PinboardNoteBase):
    id: Optional[int] = None


class PinboardNoteData(PinboardNoteBase):
    id: int
