"""Tests for the ``shelf seed`` command."""

import json

import pytest

from shelf.cli.main import seed


class TestSeedCommand:
    @pytest.fixture(autouse=True)
    def _env(self, monkeypatch, tmp_path):
        self.data_file = tmp_path / "data" / "books.json"
        self.seed_file = tmp_path / "seed.json"
        self.seed_file.write_text(json.dumps([{"id": "s1", "title": "Seeded", "author": "A"}]))
        monkeypatch.setenv("SHELF_STORE__PATH", str(self.data_file))
        monkeypatch.setenv("SHELF_ASSETS__UPLOAD_DIR", str(tmp_path / "uploads"))

    def test_seeds_empty_json_store(self):
        seed(self.seed_file)

        assert [doc["id"] for doc in json.loads(self.data_file.read_text())] == ["s1"]

    def test_leaves_populated_store_alone(self):
        self.data_file.parent.mkdir(parents=True)
        self.data_file.write_text(json.dumps([{"id": "keep", "title": "Kept", "author": "B"}]))

        seed(self.seed_file)

        assert [doc["id"] for doc in json.loads(self.data_file.read_text())] == ["keep"]

    def test_missing_seed_file_exits_non_zero(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            seed(tmp_path / "missing.json")

        assert exc_info.value.code == 1
