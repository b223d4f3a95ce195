"""Tests for the database update script."""

import sys
from pathlib import Path
from unittest import mock

# Add scripts directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from update_callsigns import backup_path, main

from oeradio.adapters.database import CallsignDatabaseStore

from conftest import make_database, make_record


def run_update(*args: str) -> int:
    with mock.patch.object(sys, "argv", ["update_callsigns.py", *args]):
        return main()


class TestUpdateFailure:
    """Tests for backup handling when an update fails."""

    def test_existing_database_restored(self, tmp_path: Path) -> None:
        """Test the current database survives a failed update."""
        output = tmp_path / "callsigns_oe.json"
        CallsignDatabaseStore(output).save(make_database([make_record("OE1ABC")]))
        before = output.read_bytes()
        bad_pdf = tmp_path / "broken.pdf"
        bad_pdf.write_bytes(b"not a pdf")

        assert run_update("--pdf", str(bad_pdf), "--output", str(output)) == 1
        assert output.read_bytes() == before
        assert backup_path(output).exists()

    def test_stale_backup_not_restored(self, tmp_path: Path) -> None:
        """Test a backup left by an earlier run is not copied into place."""
        output = tmp_path / "callsigns_oe.json"
        CallsignDatabaseStore(backup_path(output)).save(make_database([make_record("OE9OLD")]))
        bad_pdf = tmp_path / "broken.pdf"
        bad_pdf.write_bytes(b"not a pdf")

        assert run_update("--pdf", str(bad_pdf), "--output", str(output)) == 1
        assert not output.exists()

    def test_missing_pdf(self, tmp_path: Path) -> None:
        """Test an unreadable input file fails cleanly."""
        output = tmp_path / "callsigns_oe.json"
        assert run_update("--pdf", str(tmp_path / "nope.pdf"), "--output", str(output)) == 1
        assert not output.exists()
