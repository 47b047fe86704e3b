import unittest

from fastapi.testclient import TestClient
from jose import jwt
from sqlmodel import Session

from app.api import deps
from app.core.config import settings
from app.db.session import get_db
from app.main import app
from tests.helpers import StorageTestCase

API = settings.API_V1_STR


def auth(user_id):
    token = jwt.encode({"sub": user_id}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return {"Authorization": f"Bearer {token}"}


class NotesSyncApiTests(StorageTestCase):
    def setUp(self):
        super().setUp()

        def override_db():
            with Session(self.engine) as session:
                yield session

        app.dependency_overrides[get_db] = override_db
        app.dependency_overrides[deps.get_provisioner] = lambda: self.provisioner
        app.dependency_overrides[deps.get_snapshot_store] = lambda: self.snapshots
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        super().tearDown()

    def create_database(self, owner, name="Trip Notes"):
        response = self.client.post(f"{API}/databases", json={"name": name}, headers=auth(owner))
        self.assertEqual(response.status_code, 201)
        return response.json()["id"]

    def test_health(self):
        response = self.client.get(f"{API}/health")
        self.assertEqual(response.json(), {"status": "ok"})

    def test_requests_without_valid_token_are_rejected(self):
        response = self.client.get(f"{API}/databases")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers["WWW-Authenticate"], "Bearer")

        response = self.client.get(f"{API}/databases", headers={"Authorization": "Bearer garbage"})
        self.assertEqual(response.status_code, 401)

    def test_cookie_token_is_accepted(self):
        token = jwt.encode({"sub": "u1"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        self.client.cookies.set("access_token", token)

        response = self.client.get(f"{API}/databases")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])

    def test_trip_notes_scenario(self):
        db_id = self.create_database("u1")
        listed = self.client.get(f"{API}/databases", headers=auth("u1")).json()
        self.assertEqual([d["id"] for d in listed], [db_id])

        self.assertEqual(self.client.get(f"{API}/sync/{db_id}", headers=auth("u2")).status_code, 403)

        response = self.client.post(
            f"{API}/databases/{db_id}/collaborators", json={"user_id": "u2"}, headers=auth("u1")
        )
        self.assertEqual(response.json()["collaborators"], ["u2"])

        exported = self.client.get(f"{API}/sync/{db_id}", headers=auth("u2"))
        self.assertEqual(exported.status_code, 200)
        self.assertEqual(exported.json()["notes"], [])
        self.assertEqual(exported.json()["databaseId"], db_id)

        response = self.client.post(
            f"{API}/sync/{db_id}", json={"notes": [{"id": 1, "title": "Pack"}]}, headers=auth("u2")
        )
        self.assertEqual(response.json(), {"inserted": 1, "updated": 0})

        notes = self.client.get(f"{API}/sync/{db_id}", headers=auth("u2")).json()["notes"]
        self.assertEqual([(n["id"], n["title"]) for n in notes], [(1, "Pack")])

        self.assertEqual(self.client.delete(f"{API}/databases/{db_id}", headers=auth("u1")).status_code, 204)
        for user in ("u1", "u2"):
            response = self.client.get(f"{API}/databases/{db_id}", headers=auth(user))
            self.assertEqual(response.status_code, 404)

    def test_transfer_ownership_scenario(self):
        db_id = self.create_database("u1")

        response = self.client.post(
            f"{API}/databases/{db_id}/transfer", json={"new_owner_id": "u2"}, headers=auth("u1")
        )
        self.assertEqual(response.status_code, 409)

        self.client.post(f"{API}/databases/{db_id}/collaborators", json={"user_id": "u2"}, headers=auth("u1"))
        response = self.client.post(
            f"{API}/databases/{db_id}/transfer", json={"new_owner_id": "u2"}, headers=auth("u1")
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["owner_id"], "u2")
        self.assertEqual(response.json()["collaborators"], ["u1"])

        self.assertEqual(self.client.delete(f"{API}/databases/{db_id}", headers=auth("u1")).status_code, 403)
        self.assertEqual(self.client.delete(f"{API}/databases/{db_id}", headers=auth("u2")).status_code, 204)

    def test_join_and_leave(self):
        db_id = self.create_database("u1")

        response = self.client.post(f"{API}/databases/{db_id}/join", headers=auth("u2"))
        self.assertEqual(response.json()["collaborators"], ["u2"])

        self.assertEqual(self.client.post(f"{API}/databases/{db_id}/leave", headers=auth("u1")).status_code, 409)
        self.assertEqual(self.client.post(f"{API}/databases/{db_id}/leave", headers=auth("u2")).status_code, 204)
        self.assertEqual(self.client.get(f"{API}/databases/{db_id}", headers=auth("u2")).status_code, 403)

    def test_empty_name_is_rejected(self):
        response = self.client.post(f"{API}/databases", json={"name": "  "}, headers=auth("u1"))
        self.assertEqual(response.status_code, 422)

    def test_entity_crud(self):
        db_id = self.create_database("u1")
        base = f"{API}/databases/{db_id}"

        folder = self.client.post(f"{base}/folders", json={"name": "Travel"}, headers=auth("u1")).json()
        note = self.client.post(
            f"{base}/notes", json={"title": "Pack", "folder_id": folder["id"]}, headers=auth("u1")
        )
        self.assertEqual(note.status_code, 201)
        note = note.json()
        self.assertEqual(note["database_id"], db_id)

        response = self.client.patch(f"{base}/notes/{note['id']}", json={"content": "socks"}, headers=auth("u1"))
        self.assertEqual(response.json()["content"], "socks")

        self.assertEqual(self.client.delete(f"{base}/folders/{folder['id']}", headers=auth("u1")).status_code, 204)
        note = self.client.get(f"{base}/notes/{note['id']}", headers=auth("u1")).json()
        self.assertIsNone(note["folder_id"])

        self.assertEqual(self.client.get(f"{base}/folders/{folder['id']}", headers=auth("u1")).status_code, 404)
        self.assertEqual(self.client.get(f"{base}/widgets", headers=auth("u1")).status_code, 404)
        self.assertEqual(self.client.get(f"{base}/notes", headers=auth("u2")).status_code, 403)

    def test_backup_create_and_restore(self):
        db_id = self.create_database("u1")

        empty = self.client.get(f"{API}/backup/{db_id}", headers=auth("u1"))
        self.assertEqual(empty.status_code, 200)
        self.assertEqual(empty.json()["notes"], [])

        self.client.post(f"{API}/sync/{db_id}", json={"notes": [{"id": 1, "title": "Pack"}]}, headers=auth("u1"))
        backup = self.client.post(f"{API}/backup/{db_id}/create", headers=auth("u1")).json()
        self.assertEqual(backup["userId"], "u1")
        self.assertEqual([n["title"] for n in backup["notes"]], ["Pack"])

        self.client.put(f"{API}/sync/{db_id}", json={"notes": []}, headers=auth("u1"))
        self.assertEqual(self.client.get(f"{API}/sync/{db_id}", headers=auth("u1")).json()["notes"], [])

        self.client.post(f"{API}/backup/{db_id}/restore", headers=auth("u1"))
        notes = self.client.get(f"{API}/sync/{db_id}", headers=auth("u1")).json()["notes"]
        self.assertEqual([n["title"] for n in notes], ["Pack"])

    def test_uploaded_backup_with_foreign_entities_is_refused(self):
        db_id = self.create_database("u1")

        response = self.client.post(
            f"{API}/backup/{db_id}",
            json={"notes": [{"id": 1, "title": "Pack", "database_id": "other"}]},
            headers=auth("u1"),
        )
        self.assertEqual(response.status_code, 422)

        response = self.client.post(
            f"{API}/backup/{db_id}", json={"notes": [{"id": 1, "title": "Pack"}]}, headers=auth("u1")
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["databaseId"], db_id)

        restored = self.client.post(f"{API}/backup/{db_id}/restore", headers=auth("u1"))
        self.assertEqual(restored.status_code, 200)
        notes = self.client.get(f"{API}/sync/{db_id}", headers=auth("u1")).json()["notes"]
        self.assertEqual([n["title"] for n in notes], ["Pack"])


if __name__ == "__main__":
    unittest.main()
