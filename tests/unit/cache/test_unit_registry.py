# tests/unit/cache/test_unit_registry.py — v1
"""Tests for cache/fingerprint.py and cache/json_store.py — processed-file ledger."""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

from rutrenamer.cache.fingerprint import file_key
from rutrenamer.cache.json_store import ProcessedRegistry


# ---------------------------------------------------------------------------
# file_key
# ---------------------------------------------------------------------------

class TestFileKey:
    def test_format(self, tmp_path):
        key = file_key(tmp_path / "a.pdf", 1024, 1700000000123456789)
        assert key == f"{tmp_path / 'a.pdf'}::1024::1700000000123456789"

    def test_relative_path_made_absolute(self):
        key = file_key("a.pdf", 1, 2)
        assert key.startswith(str(Path("a.pdf").absolute()))

    def test_changes_with_size(self, tmp_path):
        p = tmp_path / "a.pdf"
        assert file_key(p, 1, 5) != file_key(p, 2, 5)

    def test_changes_with_mtime(self, tmp_path):
        p = tmp_path / "a.pdf"
        assert file_key(p, 1, 5) != file_key(p, 1, 6)

    def test_changes_with_path(self, tmp_path):
        assert file_key(tmp_path / "a.pdf", 1, 5) != file_key(tmp_path / "b.pdf", 1, 5)

    def test_registry_key_delegates(self, tmp_path):
        p = tmp_path / "a.pdf"
        assert ProcessedRegistry.key(p, 3, 4) == file_key(p, 3, 4)


# ---------------------------------------------------------------------------
# ProcessedRegistry.load
# ---------------------------------------------------------------------------

class TestRegistryLoad:
    def test_missing_file_is_empty(self, tmp_path):
        assert ProcessedRegistry(tmp_path / "none.json").load() == set()

    def test_loads_keys(self, tmp_path):
        path = tmp_path / "reg.json"
        path.write_text(json.dumps(["k1", "k2"]), encoding="utf-8")
        assert ProcessedRegistry(path).load() == {"k1", "k2"}

    def test_corrupt_json_is_empty(self, tmp_path, caplog):
        path = tmp_path / "reg.json"
        path.write_text("[not json", encoding="utf-8")
        assert ProcessedRegistry(path).load() == set()
        assert "reprocessing everything" in caplog.text

    def test_wrong_shape_is_empty(self, tmp_path):
        path = tmp_path / "reg.json"
        path.write_text(json.dumps({"k1": True}), encoding="utf-8")
        assert ProcessedRegistry(path).load() == set()

    def test_non_string_entries_are_rejected(self, tmp_path):
        path = tmp_path / "reg.json"
        path.write_text(json.dumps(["k1", 2]), encoding="utf-8")
        assert ProcessedRegistry(path).load() == set()

    def test_default_path(self):
        assert ProcessedRegistry().path == Path("processed_files.json")


# ---------------------------------------------------------------------------
# ProcessedRegistry.save
# ---------------------------------------------------------------------------

class TestRegistrySave:
    def test_roundtrip_sorted(self, tmp_path):
        path = tmp_path / "reg.json"
        reg = ProcessedRegistry(path)
        assert reg.save({"b", "a"}) is True
        assert json.loads(path.read_text(encoding="utf-8")) == ["a", "b"]
        assert reg.load() == {"a", "b"}

    def test_creates_parent_dir(self, tmp_path):
        path = tmp_path / "state" / "reg.json"
        assert ProcessedRegistry(path).save({"a"}) is True
        assert path.exists()

    def test_no_temp_file_left(self, tmp_path):
        path = tmp_path / "reg.json"
        ProcessedRegistry(path).save({"a"})
        assert sorted(p.name for p in tmp_path.iterdir()) == ["reg.json"]

    def test_replace_failure_keeps_previous_ledger(self, tmp_path):
        path = tmp_path / "reg.json"
        reg = ProcessedRegistry(path)
        reg.save({"old"})

        with patch(
            "rutrenamer.cache.json_store.os.replace",
            side_effect=OSError("disk full"),
        ):
            assert reg.save({"old", "new"}) is False

        assert reg.load() == {"old"}
        assert not (tmp_path / "reg.json.tmp").exists()

    def test_save_uses_atomic_replace(self, tmp_path):
        path = tmp_path / "reg.json"
        with patch(
            "rutrenamer.cache.json_store.os.replace", wraps=os.replace,
        ) as replace:
            ProcessedRegistry(path).save({"a"})
        replace.assert_called_once_with(tmp_path / "reg.json.tmp", path)
