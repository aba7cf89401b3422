"""Tests for app.services.seed: sample catalogue inserted once into an empty table."""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.database import create_db_engine, create_session_factory
from app.core.errors import DuplicateNameError
from app.main import create_app
from app.models import Base
from app.services.seed import SAMPLE_SWEETS, seed_sample_sweets
from app.services.sweets import SweetService


class TestSeedSampleSweets(unittest.TestCase):
    def setUp(self) -> None:
        tmp = self.enterContext(tempfile.TemporaryDirectory())
        self.settings = Settings(_env_file=None, DATABASE_URL=f"sqlite:///{Path(tmp) / 'seed.db'}")
        self.engine = create_db_engine(self.settings)
        self.addCleanup(self.engine.dispose)
        Base.metadata.create_all(bind=self.engine)
        self.session_factory = create_session_factory(self.engine)
        self.sweets = SweetService(self.session_factory)

    def test_seeds_empty_table(self) -> None:
        inserted = seed_sample_sweets(self.session_factory, self.sweets)
        self.assertEqual(inserted, len(SAMPLE_SWEETS))
        names = {s.name for s in self.sweets.get_all()}
        self.assertEqual(names, {item["name"] for item in SAMPLE_SWEETS})

    def test_second_run_is_noop(self) -> None:
        seed_sample_sweets(self.session_factory, self.sweets)
        self.assertEqual(seed_sample_sweets(self.session_factory, self.sweets), 0)
        self.assertEqual(len(self.sweets.get_all()), len(SAMPLE_SWEETS))

    def test_non_empty_table_left_alone(self) -> None:
        self.sweets.create("House Special", "Chocolate", 5.0, 1)
        self.assertEqual(seed_sample_sweets(self.session_factory, self.sweets), 0)
        self.assertEqual(len(self.sweets.get_all()), 1)

    def test_existing_names_are_skipped(self) -> None:
        service = MagicMock()
        service.create.side_effect = [DuplicateNameError()] + [MagicMock()] * (len(SAMPLE_SWEETS) - 1)
        inserted = seed_sample_sweets(self.session_factory, service)
        self.assertEqual(inserted, len(SAMPLE_SWEETS) - 1)
        self.assertEqual(service.create.call_count, len(SAMPLE_SWEETS))

    def test_app_startup_seeds_when_enabled(self) -> None:
        settings = self.settings.model_copy(update={"SEED_SAMPLE_DATA": True})
        with TestClient(create_app(settings)) as client:
            self.assertEqual(len(client.app.state.sweet_service.get_all()), len(SAMPLE_SWEETS))


if __name__ == "__main__":
    unittest.main()
