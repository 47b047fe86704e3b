"""
Snapshot Schema Module

A SyncBundle is the set of entity lists a client submits for merging. A
Snapshot is a total export of one database: the same six lists plus the
stamp written by the backup store. The JSON layout is fixed:

    folders, notes, scheduleEntries, pinboardNotes, connections, noteImages,
    lastModified, databaseId, userId

Entity fields themselves stay snake_case. Python field names are accepted on
input as well, so internal callers can build bundles without aliases.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.models.connection import ConnectionData
from app.models.folder import FolderData
from app.models.note import NoteData
from app.models.note_image import NoteImageData
from app.models.pinboard_note import PinboardNoteData
from app.models.schedule_entry import ScheduleEntryData


class SyncBundle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    folders: List[FolderData] = Field(default_factory=list)
    notes: List[NoteData] = Field(default_factory=list)
    schedule_entries: List[ScheduleEntryData] = Field(default_factory=list, alias="scheduleEntries")
    pinboard_notes: List[PinboardNoteData] = Field(default_factory=list, alias="pinboardNotes")
    connections: List[ConnectionData] = Field(default_factory=list)
    note_images: List[NoteImageData] = Field(default_factory=list, alias="noteImages")

    def is_empty(self) -> bool:
        return not any((
            self.folders, self.notes, self.schedule_entries,
            self.pinboard_notes, self.connections, self.note_images,
        ))


class Snapshot(SyncBundle):
    last_modified: Optional[str] = Field(default=None, alias="lastModified")
    database_id: Optional[str] = Field(default=None, alias="databaseId")
    user_id: Optional[str] = Field(default=None, alias="userId")


class SyncResult(BaseModel):
    """Rows inserted and updated by one upsert."""
    inserted: int = 0
    updated: int = 0
