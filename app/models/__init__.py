from .shared_database import SharedDatabase, DatabaseCollaborator, SharedDatabaseRead
from .folder import Folder, FolderData
from .note import Note, NoteData
from .schedule_entry import ScheduleEntry, ScheduleEntryData
from .pinboard_note import PinboardNote, PinboardNoteData
from .connection import Connection, ConnectionData
from .note_image import NoteImage, NoteImageData
from .snapshot import Snapshot, SyncBundle, SyncResult
from .kinds import EntityKind, ENTITY_KINDS, KINDS_BY_SLUG, STORE_TABLES

REGISTRY_TABLES = [SharedDatabase.__table__, DatabaseCollaborator.__table__]

__all__ = [
    "SharedDatabase", "DatabaseCollaborator", "SharedDatabaseRead",
    "Folder", "FolderData",
    "Note", "NoteData",
    "ScheduleEntry", "ScheduleEntryData",
    "PinboardNote", "PinboardNoteData",
    "Connection", "ConnectionData",
    "NoteImage", "NoteImageData",
    "Snapshot", "SyncBundle", "SyncResult",
    "EntityKind", "ENTITY_KINDS", "KINDS_BY_SLUG", "STORE_TABLES",
    "REGISTRY_TABLES",
]
