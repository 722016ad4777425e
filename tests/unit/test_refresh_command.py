"""Tests for the bfm refresh and info commands."""

import json
import shlex
import sys

from click.testing import CliRunner

from bfm_cli.brew.store import SQLiteInfoStore
from bfm_cli.cli import cli
from bfm_cli.config import update_config


INFO = [
    {"name": "vim", "full_name": "vim", "desc": "Vi 'workalike'", "dependencies": ["python"],
     "versions": {"stable": "8.0.0596"}, "installed": [{"version": "8.0.0596"}]},
    {"name": "python", "full_name": "python", "dependencies": []},
]


def _query_command(tmp_path, payload):
    """A query command that prints ``payload`` like brew info would."""
    source = tmp_path / "info_source.json"
    source.write_text(json.dumps(payload))
    script = f"import sys; sys.stdout.write(open({str(source)!r}).read())"
    return shlex.join([sys.executable, "-c", script])


class TestRefreshCommand:

    def test_refresh_populates_cache_and_snapshot(self, tmp_path, monkeypatch):
        db = tmp_path / "bfm.db"
        snapshot = tmp_path / "info.json"
        monkeypatch.setenv("BFM_SNAPSHOT", str(snapshot))
        monkeypatch.setenv("BFM_QUERY_COMMAND", _query_command(tmp_path, INFO))

        result = CliRunner().invoke(cli, ["--db", str(db), "refresh"])

        assert result.exit_code == 0, result.output
        assert "Cached metadata for 2 package(s)." in result.output
        with SQLiteInfoStore(db) as store:
            assert store.find("vim").dependencies == ["python"]
        assert [p["full_name"] for p in json.loads(snapshot.read_text())] == ["vim", "python"]

    def test_refresh_from_snapshot(self, tmp_path):
        db = tmp_path / "bfm.db"
        snapshot = tmp_path / "info.json"
        snapshot.write_text(json.dumps(INFO))
        update_config({"snapshot": str(snapshot), "query_command": "bfm-not-a-command"})

        result = CliRunner().invoke(cli, ["--db", str(db), "refresh", "--from-snapshot"])

        assert result.exit_code == 0, result.output
        with SQLiteInfoStore(db) as store:
            assert store.names() == ["python", "vim"]

    def test_failing_query_command(self, tmp_path):
        db = tmp_path / "bfm.db"
        update_config({
            "snapshot": str(tmp_path / "info.json"),
            "query_command": shlex.join([sys.executable, "-c", "import sys; sys.exit(2)"]),
        })

        result = CliRunner().invoke(cli, ["--db", str(db), "refresh"])

        assert result.exit_code == 1
        assert "exited with status 2" in result.output
        assert not (tmp_path / "info.json").exists()

    def test_malformed_query_output(self, tmp_path):
        db = tmp_path / "bfm.db"
        update_config({
            "snapshot": str(tmp_path / "info.json"),
            "query_command": shlex.join([sys.executable, "-c", "print('oops')"]),
        })

        result = CliRunner().invoke(cli, ["--db", str(db), "refresh"])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output


class TestInfoCommand:

    def test_shows_cached_record(self, tmp_path):
        db = tmp_path / "bfm.db"
        snapshot = tmp_path / "info.json"
        snapshot.write_text(json.dumps(INFO))
        update_config({"snapshot": str(snapshot)})
        runner = CliRunner()
        runner.invoke(cli, ["--db", str(db), "refresh", "--from-snapshot"])

        result = runner.invoke(cli, ["--db", str(db), "info", "vim"])

        assert result.exit_code == 0, result.output
        assert "Vi 'workalike'" in result.output
        assert "8.0.0596" in result.output
        assert "python" in result.output

    def test_unknown_package(self, tmp_path):
        result = CliRunner().invoke(cli, ["--db", str(tmp_path / "bfm.db"), "info", "vim"])
        assert result.exit_code == 1
        assert "bfm refresh" in result.output
