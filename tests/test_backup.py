import json
import unittest

from app.core.errors import InternalError, ValidationError
from app.models.snapshot import Snapshot
from app.services.sync import SyncReconciler
from tests.helpers import StorageTestCase


class SnapshotStoreTests(StorageTestCase):
    def test_load_without_save_returns_empty_snapshot(self):
        snapshot = self.snapshots.load("db1", "u1")

        self.assertTrue(snapshot.is_empty())
        self.assertEqual(snapshot.database_id, "db1")
        self.assertIsNone(snapshot.last_modified)

    def test_save_stamps_and_overwrites_single_slot(self):
        first = Snapshot(notes=[{"id": 1, "title": "Pack"}], database_id="ignored", user_id="ignored")
        saved = self.snapshots.save("db1", "u1", first)

        self.assertEqual((saved.database_id, saved.user_id), ("db1", "u1"))
        self.assertIsNotNone(saved.last_modified)

        self.snapshots.save("db1", "u2", Snapshot(folders=[{"id": 1, "name": "Inbox"}]))
        loaded = self.snapshots.load("db1", "u1")

        self.assertEqual(loaded.user_id, "u2")
        self.assertEqual(loaded.notes, [])
        self.assertEqual([f.name for f in loaded.folders], ["Inbox"])
        self.assertEqual(sorted(p.name for p in self.snapshots.backups_dir.iterdir()), ["db1.json"])

    def test_file_uses_camel_case_top_level_keys(self):
        self.snapshots.save("db1", "u1", Snapshot(schedule_entries=[{"id": 1, "time": "08:00", "date": "2024-05-02"}]))

        document = json.loads(self.snapshots.path("db1").read_text(encoding="utf-8"))

        self.assertEqual(
            set(document),
            {"folders", "notes", "scheduleEntries", "pinboardNotes", "connections", "noteImages",
             "lastModified", "databaseId", "userId"},
        )
        self.assertEqual(document["scheduleEntries"][0]["time"], "08:00")

    def test_corrupt_snapshot_is_an_internal_error(self):
        self.snapshots.backups_dir.mkdir(parents=True)
        self.snapshots.path("db1").write_text("{not json", encoding="utf-8")

        with self.assertRaises(InternalError):
            self.snapshots.load("db1", "u1")

    def test_save_rejects_entities_of_another_database(self):
        foreign = Snapshot(notes=[{"id": 1, "title": "Pack", "database_id": "other"}])

        with self.assertRaises(ValidationError):
            self.snapshots.save("db1", "u1", foreign)

        self.assertFalse(self.snapshots.path("db1").exists())

    def test_saved_snapshot_restores_into_its_database(self):
        reconciler = SyncReconciler(self.provisioner)
        self.provisioner.provision("db1")
        self.snapshots.save("db1", "u1", Snapshot(notes=[
            {"id": 1, "title": "Pack", "database_id": "db1"},
            {"id": 2, "title": "Tickets"},
        ]))

        reconciler.replace_all("db1", self.snapshots.load("db1", "u1"))

        notes = reconciler.export_all("db1").notes
        self.assertEqual([(n.id, n.title, n.database_id) for n in notes], [(1, "Pack", "db1"), (2, "Tickets", "db1")])

    def test_delete(self):
        self.assertFalse(self.snapshots.delete("db1"))
        self.snapshots.save("db1", "u1", Snapshot())
        self.assertTrue(self.snapshots.delete("db1"))
        self.assertTrue(self.snapshots.load("db1", "u1").is_empty())


if __name__ == "__main__":
    unittest.main()
