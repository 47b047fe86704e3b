import unittest

from app.core.errors import ForbiddenError
from app.models.shared_database import SharedDatabaseRead
from app.services import access


class AccessGuardTests(unittest.TestCase):
    def setUp(self):
        self.db = SharedDatabaseRead(id="abc", name="Trip Notes", owner_id="u1", collaborators=["u2"])

    def test_owner_and_collaborators_can_read(self):
        self.assertTrue(access.can_read(self.db, "u1"))
        self.assertTrue(access.can_read(self.db, "u2"))
        self.assertFalse(access.can_read(self.db, "u3"))

    def test_only_owner_manages_the_database(self):
        for check in (access.can_write_collaborators, access.can_delete, access.can_transfer):
            self.assertTrue(check(self.db, "u1"))
            self.assertFalse(check(self.db, "u2"))
            self.assertFalse(check(self.db, "u3"))

    def test_require_read_raises_forbidden_for_outsiders(self):
        access.require_read(self.db, "u1")
        access.require_read(self.db, "u2")
        with self.assertRaises(ForbiddenError):
            access.require_read(self.db, "u3")


if __name__ == "__main__":
    unittest.main()
