"""
Tests for the run_streamer command-line script.
"""

import json
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import pytest

from run_streamer import main

DOCUMENT = b"<r><i>1</i><i>2</i></r>"


@pytest.fixture
def xml_file(tmp_path, monkeypatch):
    for name in ("XML_STREAMER_CAPTURE_DEPTH", "XML_STREAMER_CHUNK_SIZE", "XML_STREAMER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "items.xml"
    path.write_bytes(DOCUMENT)
    return path


def test_prints_all_nodes_as_json(xml_file, capsys):
    main([str(xml_file)])

    result = json.loads(capsys.readouterr().out)
    assert result["count"] == 2
    assert result["nodes"] == ["<i>1</i>", "<i>2</i>"]
    assert "container" not in result


def test_limit_stops_after_n_nodes(xml_file, capsys):
    main([str(xml_file), "--limit", "1"])

    result = json.loads(capsys.readouterr().out)
    assert result["count"] == 1
    assert result["nodes"] == ["<i>1</i>"]


@pytest.mark.parametrize("limit", ["0", "-3", "many"])
def test_limit_below_one_is_rejected(xml_file, capsys, limit):
    with pytest.raises(SystemExit) as ctx:
        main([str(xml_file), "--limit", limit])

    assert ctx.value.code == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "--limit" in captured.err


def test_count_only(xml_file, capsys):
    main([str(xml_file), "--count"])

    assert capsys.readouterr().out == "2\n"


def test_count_with_limit(xml_file, capsys):
    main([str(xml_file), "--count", "-n", "1"])

    assert capsys.readouterr().out == "1\n"


def test_container_is_incomplete_when_limited(xml_file, capsys):
    main([str(xml_file), "--extract-container", "--limit", "1"])
    limited = json.loads(capsys.readouterr().out)

    main([str(xml_file), "--extract-container"])
    full = json.loads(capsys.readouterr().out)

    assert limited["container_complete"] is False
    assert full["container_complete"] is True
    assert full["container"] == "<r></r>"


def test_output_file(xml_file, tmp_path, capsys):
    output = tmp_path / "nodes.json"
    main([str(xml_file), "-o", str(output)])

    assert capsys.readouterr().out == ""
    assert json.loads(output.read_text(encoding="utf-8"))["nodes"] == ["<i>1</i>", "<i>2</i>"]


def test_missing_source_exits_with_error(tmp_path, capsys):
    with pytest.raises(SystemExit) as ctx:
        main([str(tmp_path / "missing.xml")])

    assert ctx.value.code == 1
    assert "✗ Error" in capsys.readouterr().err
