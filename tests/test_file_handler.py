"""Tests for file_handler module: filesystem capability and text decoding."""

import pytest

from sync_agents.file_handler import LocalFileSystem, decode_bytes, read_text

# =============================================================================
# LocalFileSystem
# =============================================================================


class TestLocalFileSystem:
    """Tests for the local-disk FileSystem implementation."""

    def test_write_creates_parents(self, tmp_path):
        fs = LocalFileSystem()
        target = tmp_path / "a" / "b" / "c.txt"
        fs.write_file(target, b"data")
        assert target.read_bytes() == b"data"
        assert fs.exists(target)

    def test_list_entries_sorted_with_kind(self, tmp_path):
        (tmp_path / "zeta.md").write_text("z")
        (tmp_path / "alpha").mkdir()
        (tmp_path / "mid.txt").write_text("m")

        entries = LocalFileSystem().list_entries(tmp_path)

        assert ("alpha", True) in entries
        assert ("zeta.md", False) in entries
        names = [name for name, _ in entries]
        assert names == sorted(names)

    def test_list_entries_on_file_raises(self, tmp_path):
        f = tmp_path / "file.txt"
        f.write_text("x")
        with pytest.raises(OSError):
            LocalFileSystem().list_entries(f)

    def test_copy_file(self, tmp_path):
        src = tmp_path / "src.sh"
        src.write_bytes(b"#!/bin/sh\n")
        dst = tmp_path / "out" / "dst.sh"

        LocalFileSystem().copy_file(src, dst)

        assert dst.read_bytes() == b"#!/bin/sh\n"

    def test_remove_tree_directory(self, tmp_path):
        d = tmp_path / "skill"
        (d / "scripts").mkdir(parents=True)
        (d / "scripts" / "x.sh").write_text("x")

        LocalFileSystem().remove_tree(d)

        assert not d.exists()

    def test_remove_tree_file(self, tmp_path):
        f = tmp_path / "agent.md"
        f.write_text("x")
        LocalFileSystem().remove_tree(f)
        assert not f.exists()

    def test_stat_mtime(self, tmp_path):
        f = tmp_path / "x"
        f.write_text("x")
        assert LocalFileSystem().stat_mtime(f) == f.stat().st_mtime


# =============================================================================
# decode_bytes / read_text
# =============================================================================


class TestDecodeBytes:
    def test_utf8(self):
        assert decode_bytes("naïve ✓".encode("utf-8")) == ("naïve ✓", "utf-8")

    def test_utf8_bom_stripped(self):
        assert decode_bytes(b"\xef\xbb\xbf---\n") == ("---\n", "utf-8")

    def test_empty(self):
        assert decode_bytes(b"") == ("", "utf-8")

    def test_non_utf8_detected(self):
        raw = (
            "Ceci est un document en français avec des caractères accentués: "
            "é, è, à, ç, ô, û. Le café était très agréable."
        ).encode("cp1252")
        content, encoding = decode_bytes(raw)
        assert encoding != "utf-8"
        assert "Ceci est un document" in content

    def test_read_text(self, tmp_path):
        f = tmp_path / "doc.md"
        f.write_bytes("# Titre\n".encode("utf-8"))
        assert read_text(LocalFileSystem(), f) == "# Titre\n"
