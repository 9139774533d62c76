"""
Tests for the command line interface.
"""

import asyncio
import json
import sys

import pytest

from mycelia import cli


def test_compile_writes_artifacts(tmp_path, capsys):
    """Test compiling a directory and writing artifacts."""
    content = tmp_path / "content"
    content.mkdir()
    (content / "a.md").write_text('<project id="p"><task id="t">X</task></project>', encoding="utf-8")
    out_dir = tmp_path / "out"

    status = asyncio.run(cli.main(["compile", str(content), "--out-dir", str(out_dir)]))

    assert status == 0
    output = capsys.readouterr().out
    assert "Nodes:    2" in output
    graph = json.loads((out_dir / "graph.json").read_text(encoding="utf-8"))
    assert set(graph["nodes"]) == {"p", "t"}
    assert (out_dir / "renderable.json").exists()


def test_compile_no_write(tmp_path):
    """Test --no-write leaves the output directory alone."""
    source = tmp_path / "a.md"
    source.write_text('<note id="n">x</note>', encoding="utf-8")
    out_dir = tmp_path / "out"

    status = asyncio.run(cli.main(["compile", str(source), "--out-dir", str(out_dir), "--no-write"]))
    assert status == 0
    assert not out_dir.exists()


def test_compile_missing_file_fails(tmp_path):
    """Test an unreadable source sets a failing exit status."""
    status = asyncio.run(cli.main(["compile", str(tmp_path / "missing.md"), "--no-write"]))
    assert status == 1


def test_validate_and_project(tmp_path, capsys):
    """Test validating and projecting a written graph."""
    source = tmp_path / "a.md"
    source.write_text('<project id="p"><link id="l" to="ghost" /></project>', encoding="utf-8")
    out_dir = tmp_path / "out"
    asyncio.run(cli.main(["compile", str(source), "--out-dir", str(out_dir)]))
    capsys.readouterr()

    graph_path = str(out_dir / "graph.json")
    assert asyncio.run(cli.main(["validate", graph_path])) == 1
    assert "ghost" in capsys.readouterr().out

    tree_path = tmp_path / "tree.json"
    assert asyncio.run(cli.main(["project", graph_path, "--output", str(tree_path)])) == 0
    tree = json.loads(tree_path.read_text(encoding="utf-8"))
    assert tree["meta"]["unresolvedRefs"][0]["targetId"] == "ghost"


def test_validate_rejects_malformed_artifact(tmp_path):
    """Test a malformed graph file fails validation."""
    bad = tmp_path / "graph.json"
    bad.write_text("{}", encoding="utf-8")
    assert asyncio.run(cli.main(["validate", str(bad)])) == 1


def test_no_command_prints_help(capsys):
    """Test running without a command."""
    assert asyncio.run(cli.main([])) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_run_exits_with_command_status(tmp_path, monkeypatch, capsys):
    """Test the console entry point dispatches subcommands directly."""
    source = tmp_path / "a.md"
    source.write_text('<note id="n">x</note>', encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["mycelia", "compile", str(source), "--no-write"])

    with pytest.raises(SystemExit) as exc_info:
        cli.run()

    assert exc_info.value.code == 0
    assert "Nodes:    1" in capsys.readouterr().out
