import unittest

from app.core.errors import NotFoundError, ValidationError
from app.models.kinds import KINDS_BY_SLUG
from app.services.entities import EntityService
from tests.helpers import StorageTestCase

FOLDERS = KINDS_BY_SLUG["folders"]
NOTES = KINDS_BY_SLUG["notes"]
CONNECTIONS = KINDS_BY_SLUG["connections"]


class EntityServiceTests(StorageTestCase):
    def setUp(self):
        super().setUp()
        self.service = EntityService(self.provisioner)
        self.provisioner.provision("db1")

    def test_create_assigns_id_and_tags_database(self):
        note = self.service.create("db1", NOTES, {"title": "Pack"})

        self.assertIsNotNone(note.id)
        self.assertEqual(note.database_id, "db1")
        self.assertIsNotNone(note.created_at)
        self.assertEqual(self.service.get("db1", NOTES, note.id).title, "Pack")

    def test_create_with_client_id_and_duplicate(self):
        self.service.create("db1", NOTES, {"id": 10, "title": "Pack"})

        with self.assertRaises(ValidationError):
            self.service.create("db1", NOTES, {"id": 10, "title": "Again"})

    def test_create_rejects_invalid_payloads(self):
        with self.assertRaises(ValidationError):
            self.service.create("db1", NOTES, {"content": "no title"})
        with self.assertRaises(ValidationError):
            self.service.create("db1", CONNECTIONS, {"from_id": "a", "to_id": 2})
        with self.assertRaises(ValidationError):
            self.service.create("db1", NOTES, {"title": "Pack", "database_id": "other"})

    def test_update_merges_fields(self):
        note = self.service.create("db1", NOTES, {"title": "Pack", "content": "socks"})

        updated = self.service.update("db1", NOTES, note.id, {"title": "Pack bags"})

        self.assertEqual(updated.title, "Pack bags")
        self.assertEqual(updated.content, "socks")
        self.assertEqual(updated.created_at, note.created_at)

        with self.assertRaises(ValidationError):
            self.service.update("db1", NOTES, note.id, {"colour": 3})
        with self.assertRaises(NotFoundError):
            self.service.update("db1", NOTES, 999, {"title": "x"})

    def test_list_is_paginated_by_id(self):
        for title in ("a", "b", "c"):
            self.service.create("db1", NOTES, {"title": title})

        page = self.service.list("db1", NOTES, skip=1, limit=1)
        self.assertEqual([n.title for n in page], ["b"])

    def test_deleting_folder_moves_notes_out(self):
        folder = self.service.create("db1", FOLDERS, {"name": "Travel"})
        note = self.service.create("db1", NOTES, {"title": "Pack", "folder_id": folder.id})

        self.service.delete("db1", FOLDERS, folder.id)

        self.assertIsNone(self.service.get("db1", NOTES, note.id).folder_id)
        with self.assertRaises(NotFoundError):
            self.service.get("db1", FOLDERS, folder.id)
        with self.assertRaises(NotFoundError):
            self.service.delete("db1", FOLDERS, folder.id)


if __name__ == "__main__":
    unittest.main()
