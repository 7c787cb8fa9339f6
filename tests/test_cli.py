"""Tests for the richnote command line."""

import json
import subprocess
import tempfile
from pathlib import Path


def test_version_flag():
    """Test that --version flag works and shows version."""
    result = subprocess.run(
        ["richnote", "--version"],
        capture_output=True,
        text=True,
    )

    assert result.returncode == 0
    assert "richnote" in result.stdout


def test_version_module():
    """Test that version is accessible from module."""
    from richnote import __version__

    assert __version__
    parts = __version__.split('.')
    assert len(parts) >= 2


def test_to_rich_and_back():
    """Test both conversion commands over stdin."""
    result = subprocess.run(
        ["richnote", "to-rich"],
        input="- a\n\t- b\n\n[[My Note]]",
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert result.stdout == "- a\n  - b\n\n&#x20;\n\n[My Note](My%20Note)"

    result = subprocess.run(
        ["richnote", "to-host"],
        input=result.stdout,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert result.stdout == "- a\n\t- b\n\n[[My Note]]"


def test_check_vault():
    """Test checking every note in a vault."""
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        (vault / "good.md").write_text("- a\n\t- b\n\n[[x]]")
        (vault / "lossy.md").write_text("a\n \nb")

        result = subprocess.run(
            ["richnote", "--vault", str(vault), "--json", "check"],
            capture_output=True,
            text=True,
        )

        assert result.returncode == 1
        data = json.loads(result.stdout)
        assert data["checked"] == 2
        assert data["failures"] == [{"path": "lossy.md", "lines": [2]}]


def test_check_files_ok():
    with tempfile.TemporaryDirectory() as tmpdir:
        note = Path(tmpdir) / "note.md"
        note.write_text("| a |\n|---|\n\ntext  ")

        result = subprocess.run(
            ["richnote", "check", str(note)],
            capture_output=True,
            text=True,
        )

        assert result.returncode == 0
        assert "Mismatched: 0" in result.stdout


def test_tag_command():
    """Test typed text runs through the tag recognizer."""
    result = subprocess.run(
        ["richnote", "tag", "see #project/x "],
        capture_output=True,
        text=True,
    )

    assert result.returncode == 0
    assert result.stdout == "see [#project/x](tag:project/x) \n"


def test_mirror_command():
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        (vault / "note.md").write_text("\t- a")

        result = subprocess.run(
            ["richnote", "--vault", str(vault), "mirror"],
            capture_output=True,
            text=True,
        )

        assert result.returncode == 0
        assert "Mirrored: 1" in result.stdout
        assert (vault / ".richnote" / "note.md").read_text() == "  - a"
