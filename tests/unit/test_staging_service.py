"""Unit tests for the staging directory."""

import pytest

from doceat.core.errors import StagingFileMissing
from doceat.services.staging_service import LocalStaging


def test_write_read_delete(tmp_path) -> None:
    staging = LocalStaging(tmp_path / "uploads")
    path = staging.write("Motive.pdf", b"%PDF")

    assert path == tmp_path / "uploads" / "Motive.pdf"
    assert staging.read("Motive.pdf") == b"%PDF"
    staging.delete("Motive.pdf")
    assert not staging.exists("Motive.pdf")
    staging.delete("Motive.pdf")


def test_names_cannot_escape_the_root(tmp_path) -> None:
    staging = LocalStaging(tmp_path / "uploads")
    path = staging.write("../../etc/evil.txt", b"x")
    assert path == tmp_path / "uploads" / "evil.txt"


def test_missing_file(tmp_path) -> None:
    with pytest.raises(StagingFileMissing):
        LocalStaging(tmp_path).read("ghost.txt")
