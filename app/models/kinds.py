"""
Entity Kind Registry

Describes the six entity tables of a physical store in one place so the
provisioner, the sync reconciler and the CRUD endpoints iterate over the same
list in the same order.
"""
from dataclasses import dataclass
from typing import Dict, Tuple, Type

from sqlmodel import SQLModel

from app.models.connection import Connection, ConnectionCreate, ConnectionData
from app.models.folder import Folder, FolderCreate, FolderData
from app.models.note import Note, NoteCreate, NoteData
from app.models.note_image import NoteImage, NoteImageCreate, NoteImageData
from app.models.pinboard_note import PinboardNote, PinboardNoteCreate, PinboardNoteData
from app.models.schedule_entry import ScheduleEntry, ScheduleEntryCreate, ScheduleEntryData


@dataclass(frozen=True)
class EntityKind:
    slug: str                       # URL segment, e.g. "schedule-entries"
    attr: str                       # SyncBundle / Snapshot attribute name
    model: Type[SQLModel]           # table model
    create_schema: Type[SQLModel]   # validated create payload
    data_schema: Type[SQLModel]     # wire representation

    @property
    def table(self):
        return self.model.__table__


ENTITY_KINDS: Tuple[EntityKind, ...] = (
    EntityKind("folders", "folders", Folder, FolderCreate, FolderData),
    EntityKind("notes", "notes", Note, NoteCreate, NoteData),
    EntityKind("schedule-entries", "schedule_entries", ScheduleEntry, ScheduleEntryCreate, ScheduleEntryData),
    EntityKind("pinboard-notes", "pinboard_notes", PinboardNote, PinboardNoteCreate, PinboardNoteData),
    EntityKind("connections", "connections", Connection, ConnectionCreate, ConnectionData),
    EntityKind("note-images", "note_images", NoteImage, NoteImageCreate, NoteImageData),
)

KINDS_BY_SLUG: Dict[str, EntityKind] = {kind.slug: kind for kind in ENTITY_KINDS}

STORE_TABLES = [kind.table for kind in ENTITY_KINDS]
