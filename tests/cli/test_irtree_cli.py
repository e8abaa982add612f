"""Tests for the irtree command line interface."""

import json
import subprocess
import sys
from pathlib import Path

import pytest

from irtree.__main__ import main

REPO_ROOT = Path(__file__).resolve().parents[2]


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "irtree", *args],
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
        timeout=30,
    )


@pytest.fixture
def tree_file(tmp_path, sample_tree_wire) -> Path:
    path = tmp_path / "layout.json"
    path.write_text(json.dumps(sample_tree_wire))
    return path


@pytest.fixture
def invalid_file(tmp_path) -> Path:
    path = tmp_path / "broken.json"
    path.write_text(
        json.dumps(
            {
                "id": "page",
                "type": "Stack",
                "children": [
                    {"id": "chart", "type": "Chart"},
                    {"id": "b", "type": "Button", "properties": {"label": "Go"},
                     "children": [{"id": "r", "type": "Row"}]},
                ],
            }
        )
    )
    return path


class TestEntryPoint:
    """Tests for the module entry point, run as a subprocess."""

    def test_no_arguments_shows_help(self):
        result = _run()
        assert result.returncode == 1
        assert "Usage: irtree" in result.stdout

    def test_help(self):
        result = _run("--help")
        assert result.returncode == 0
        assert "validate" in result.stdout

    def test_unknown_command(self):
        result = _run("bogus")
        assert result.returncode == 1
        assert "Unknown command: bogus" in result.stderr

    def test_validate_valid_file(self, tree_file):
        result = _run("validate", str(tree_file))
        assert result.returncode == 0
        assert "valid (0 error(s), 0 warning(s))" in result.stdout


class TestValidateCommand:
    """Tests for `irtree validate`."""

    def test_invalid_file(self, invalid_file, capsys):
        assert main(["validate", str(invalid_file)]) == 1
        out = capsys.readouterr().out
        assert "[invalid-type] root.children[0] (chart)" in out
        assert "[invalid-nesting] root.children[1].children[0] (r)" in out
        assert "invalid (3 error(s), 0 warning(s))" in out

    def test_json_output(self, invalid_file, capsys):
        assert main(["validate", str(invalid_file), "--json"]) == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["is_valid"] is False
        assert {error["node_id"] for error in payload["errors"]} == {"chart", "r"}

    def test_document_file(self, tmp_path, sample_tree_wire, capsys):
        path = tmp_path / "doc.json"
        path.write_text(json.dumps({"meta": {"version": "1.0.0"}, "root": sample_tree_wire}))
        assert main(["validate", str(path), "--json"]) == 0
        assert json.loads(capsys.readouterr().out)["is_valid"] is True

    def test_warnings_do_not_fail(self, tmp_path, capsys):
        path = tmp_path / "warn.json"
        path.write_text(json.dumps({"id": "r", "type": "Row", "properties": {"gap": "xl"}}))
        assert main(["validate", str(path)]) == 0
        assert "WARNING [deprecated-value]" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, caplog):
        assert main(["validate", str(tmp_path / "nope.json")]) == 1
        assert any("Cannot read" in message for message in caplog.messages)

    def test_bad_json(self, tmp_path, caplog):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert main(["validate", str(path)]) == 1
        assert any("not valid JSON" in message for message in caplog.messages)

    def test_non_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        assert main(["validate", str(path)]) == 1

    def test_requires_file(self, capsys):
        assert main(["validate"]) == 1


class TestSchemaCommand:
    """Tests for `irtree schema`."""

    def test_listing(self, capsys):
        assert main(["schema"]) == 0
        out = capsys.readouterr().out
        assert "Containers: Row, Stack, Button" in out
        assert "Leaves:     -" in out
        assert "forbids Row, Stack" in out

    def test_json(self, capsys):
        assert main(["schema", "--json"]) == 0
        exported = json.loads(capsys.readouterr().out)
        assert list(exported) == ["Row", "Stack", "Button"]
        assert exported["Button"]["allowed_slots"] == ["main", "icon", "content"]


class TestIdsCommand:
    """Tests for `irtree ids`."""

    def test_lists_ids_in_walk_order(self, tree_file, capsys):
        assert main(["ids", str(tree_file)]) == 0
        assert capsys.readouterr().out.split() == [
            "page", "toolbar", "save", "cancel", "cancel-icon", "body",
        ]

    def test_duplicates(self, tmp_path, caplog):
        path = tmp_path / "dup.json"
        path.write_text(
            json.dumps(
                {
                    "id": "a",
                    "type": "Stack",
                    "children": [{"id": "b", "type": "Button"}, {"id": "b", "type": "Button"}],
                }
            )
        )
        assert main(["ids", str(path)]) == 1
        assert "Duplicate ids: b" in caplog.messages

    def test_malformed_tree(self, tmp_path, caplog):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"id": "a", "children": []}))
        assert main(["ids", str(path)]) == 1
        assert any("is not a component tree" in message for message in caplog.messages)


class TestTreeCommand:
    """Tests for `irtree tree`."""

    def test_outline(self, tree_file, capsys):
        assert main(["tree", str(tree_file)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "Stack (page)",
            "  Row (toolbar)",
            "    Button (save)",
            "    Button (cancel)",
            "      [icon] Button (cancel-icon)",
            "  Stack (body)",
        ]

    def test_document_file(self, tmp_path, sample_tree_wire, capsys):
        path = tmp_path / "doc.json"
        path.write_text(json.dumps({"root": sample_tree_wire}))
        assert main(["tree", str(path)]) == 0
        assert capsys.readouterr().out.startswith("Stack (page)")
