"""
Schedule Entry Model Module

Schedule entries keep their recurrence rule, tags and user-defined fields as
opaque JSON text; the server stores and returns them untouched.
"""
from typing import Optional
from sqlmodel import SQLModel, Field


class ScheduleEntryBase(SQLModel):
    time: str = Field(nullable=False)   # "HH:mm"
    date: str = Field(nullable=False)   # "yyyy-MM-dd"
    note: Optional[str] = None

    dynamic_fields_json: Optional[str] = None
    recurrence_json: Optional[str] = None
    tags_json: Optional[str] = None

    database_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ScheduleEntry(ScheduleEntryBase, table=True):
    __tablename__ = "schedule_entries"

    id: Optional[int] = Field(default=None, primary_key=True)


class ScheduleEntryCreate(ScheduleEntryBase):
    id: Optional[int] = None


class ScheduleEntryData(ScheduleEntryBase):
    id: int
