import tempfile
import unittest
from pathlib import Path

from sqlmodel import Session, create_engine

from app.db.session import init_registry
from app.db.store import StoreProvisioner
from app.services.backup import SnapshotStore
from app.services.registry import DatabaseRegistry


class StorageTestCase(unittest.TestCase):
    """Registry, stores and backups rooted in a fresh temporary directory."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.engine = create_engine(
            f"sqlite:///{self.root / 'registry.db'}",
            connect_args={"check_same_thread": False},
        )
        init_registry(self.engine)
        self.provisioner = StoreProvisioner(str(self.root / "stores"))
        self.snapshots = SnapshotStore(str(self.root / "backups"))

    def tearDown(self):
        self.engine.dispose()
        self._tmp.cleanup()

    def open_registry(self, provisioner=None, snapshots=None) -> DatabaseRegistry:
        session = Session(self.engine)
        self.addCleanup(session.close)
        return DatabaseRegistry(session, provisioner or self.provisioner, snapshots or self.snapshots)
