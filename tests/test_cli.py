import json
from pathlib import Path

from typer.testing import CliRunner

from smartchunk.cli import app
from smartchunk.version import __version__

runner = CliRunner()

SOURCE = "def alpha():\n    return 1\n\n\ndef _beta():\n    return 2\n"


def test_chunk_json_output(tmp_path: Path) -> None:
    path = tmp_path / "mod.py"
    path.write_text(SOURCE, encoding="utf-8")

    result = runner.invoke(app, ["chunk", str(path), "--json"])

    assert result.exit_code == 0, result.output
    records = json.loads(result.output)
    assert [r["metadata"]["name"] for r in records] == ["alpha", "_beta"]
    assert records[0]["metadata"]["language"] == "python"
    assert records[1]["metadata"]["is_public"] is False
    assert records[0]["content"] == "def alpha():\n    return 1"


def test_chunk_table_output_with_size_override(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("z" * 50, encoding="utf-8")

    result = runner.invoke(app, ["chunk", str(path), "-m", "20", "-o", "0"])

    assert result.exit_code == 0, result.output
    assert "notes.txt (3 chunks)" in result.output


def test_chunk_writes_log_file(tmp_path: Path) -> None:
    path = tmp_path / "mod.py"
    path.write_text(SOURCE, encoding="utf-8")
    log_file = tmp_path / "run.log"

    result = runner.invoke(app, ["chunk", str(path), "--json", "--log", str(log_file)])

    assert result.exit_code == 0, result.output
    assert "file_chunked" in log_file.read_text(encoding="utf-8")


def test_chunk_missing_file_fails(tmp_path: Path) -> None:
    result = runner.invoke(app, ["chunk", str(tmp_path / "absent.py")])
    assert result.exit_code != 0


def test_languages_lists_extensions() -> None:
    result = runner.invoke(app, ["languages"])
    assert result.exit_code == 0
    assert ".tsx" in result.output
    assert "python" in result.output


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_chunk_rejects_overlap_not_below_max(tmp_path: Path) -> None:
    path = tmp_path / "mod.py"
    path.write_text(SOURCE, encoding="utf-8")

    result = runner.invoke(app, ["chunk", str(path), "-m", "50", "-o", "500"])

    assert result.exit_code == 2
