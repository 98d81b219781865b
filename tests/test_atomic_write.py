"""Tests for atomic dump writing."""

import json

import pytest
import yaml

from helpers.atomic_write import (
    AtomicWriteError,
    atomic_write_json,
    atomic_write_text,
    atomic_write_yaml,
)


class TestAtomicWrite:
    def test_text_written_and_parents_created(self, tmp_path):
        target = tmp_path / "out" / "nested" / "dump.txt"
        atomic_write_text(target, "hello\n")
        assert target.read_text(encoding="utf-8") == "hello\n"

    def test_replaces_existing_file_without_leftovers(self, tmp_path):
        target = tmp_path / "dump.txt"
        target.write_text("old")
        atomic_write_text(target, "new")

        assert target.read_text() == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["dump.txt"]

    def test_yaml_preserves_key_order(self, tmp_path):
        target = tmp_path / "settings.yaml"
        data = {"node_name": "admin", "chef_zero": {"enabled": True, "port": 8889}}
        atomic_write_yaml(target, data)

        text = target.read_text()
        assert text.index("node_name") < text.index("chef_zero")
        assert yaml.safe_load(text) == data

    def test_json(self, tmp_path):
        target = tmp_path / "settings.json"
        atomic_write_json(target, {"cookbook_path": ["/a", "/b"]})
        assert json.loads(target.read_text()) == {"cookbook_path": ["/a", "/b"]}

    def test_unserializable_json_raises(self, tmp_path):
        with pytest.raises(AtomicWriteError):
            atomic_write_json(tmp_path / "x.json", {"bad": object()})

    def test_unwritable_target_raises(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(AtomicWriteError):
            atomic_write_text(blocker / "child.txt", "data")
