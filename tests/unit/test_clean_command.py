"""Tests for the bfm clean command."""

from click.testing import CliRunner

from bfm_cli.brew.store import SQLiteInfoStore
from bfm_cli.cli import cli

from conftest import make_info, populate


CONTENTS = """
tap 'homebrew/bundle'
brew 'a2ps'
tap 'homebrew/core'
cask 'google-chrome'
mas 'Xcode', id: 497799835
cask 'firefox'
# some comment
"""

EXPECTED = """tap 'homebrew/bundle'
tap 'homebrew/core'

brew 'a2ps'

cask 'firefox'
cask 'google-chrome'

mas 'Xcode', id: 497799835"""


def _setup(tmp_path, *infos):
    brewfile = tmp_path / "Brewfile"
    brewfile.write_text(CONTENTS)
    db = tmp_path / "bfm.db"
    with SQLiteInfoStore(db) as store:
        populate(store, *infos)
    return brewfile, db


def _invoke(brewfile, db, *args):
    return CliRunner().invoke(cli, ["--brewfile", str(brewfile), "--db", str(db), "clean", *args])


class TestCleanCommand:

    def test_rewrites_in_sorted_sections(self, tmp_path):
        brewfile, db = _setup(tmp_path, make_info("a2ps"))

        result = _invoke(brewfile, db)

        assert result.exit_code == 0
        assert brewfile.read_text() == EXPECTED + "\n"

    def test_dry_run(self, tmp_path):
        brewfile, db = _setup(tmp_path, make_info("a2ps"))

        result = _invoke(brewfile, db, "--dry-run")

        assert result.exit_code == 0
        assert EXPECTED in result.output
        assert brewfile.read_text() == CONTENTS

    def test_uncached_package_aborts(self, tmp_path):
        brewfile, db = _setup(tmp_path)

        result = _invoke(brewfile, db)

        assert result.exit_code == 1
        assert "Could not find info for 'a2ps'" in result.output
        assert brewfile.read_text() == CONTENTS
