"""Tests for sync_agents.sync.project_docs -- the CLAUDE.md/AGENTS.md merge."""

import os

import pytest

from helpers import FailingFileSystem, write
from sync_agents.errors import DocumentMergeError
from sync_agents.file_handler import LocalFileSystem
from sync_agents.models import RecordAction
from sync_agents.sync.project_docs import sync_project_docs

fs = LocalFileSystem()


def _set_mtime(path, mtime):
    os.utime(path, (mtime, mtime))


class TestSyncProjectDocs:
    def test_neither_exists(self, project_dir):
        assert sync_project_docs(fs, project_dir) == []
        assert list(project_dir.iterdir()) == []

    def test_only_agents_md(self, project_dir):
        write(project_dir / "AGENTS.md", b"# Rules\n\xe2\x9c\x93\n")

        (record,) = sync_project_docs(fs, project_dir)

        assert (project_dir / "CLAUDE.md").read_bytes() == b"# Rules\n\xe2\x9c\x93\n"
        assert record.name == "CLAUDE.md"
        assert record.action == RecordAction.CREATED
        assert record.source_path == str(project_dir / "AGENTS.md")
        assert record.output_path == str(project_dir / "CLAUDE.md")

    def test_only_claude_md(self, project_dir):
        write(project_dir / "CLAUDE.md", "claude")
        (record,) = sync_project_docs(fs, project_dir)
        assert record.name == "AGENTS.md"
        assert (project_dir / "AGENTS.md").read_text() == "claude"

    def test_newer_second_overwrites_first(self, project_dir):
        claude = write(project_dir / "CLAUDE.md", "old")
        agents = write(project_dir / "AGENTS.md", "new")
        _set_mtime(claude, 1_000_000)
        _set_mtime(agents, 2_000_000)

        (record,) = sync_project_docs(fs, project_dir)

        assert claude.read_text() == "new"
        assert record.name == "CLAUDE.md"
        assert record.action == RecordAction.UPDATED

    def test_newer_first_overwrites_second(self, project_dir):
        claude = write(project_dir / "CLAUDE.md", "new")
        agents = write(project_dir / "AGENTS.md", "old")
        _set_mtime(claude, 2_000_000)
        _set_mtime(agents, 1_000_000)

        sync_project_docs(fs, project_dir)

        assert agents.read_text() == "new"

    def test_tie_favours_first(self, project_dir):
        claude = write(project_dir / "CLAUDE.md", "first")
        agents = write(project_dir / "AGENTS.md", "second")
        _set_mtime(claude, 1_500_000)
        _set_mtime(agents, 1_500_000)

        (record,) = sync_project_docs(fs, project_dir)

        assert record.name == "AGENTS.md"
        assert agents.read_text() == "first"

    def test_identical_content_is_noop(self, project_dir):
        claude = write(project_dir / "CLAUDE.md", "same")
        agents = write(project_dir / "AGENTS.md", "same")
        _set_mtime(claude, 1_000_000)
        _set_mtime(agents, 2_000_000)

        assert sync_project_docs(fs, project_dir) == []
        assert os.stat(claude).st_mtime == 1_000_000

    def test_dry_run_reports_without_writing(self, project_dir):
        write(project_dir / "AGENTS.md", "x")

        (record,) = sync_project_docs(fs, project_dir, dry_run=True)

        assert record.action == RecordAction.CREATED
        assert not (project_dir / "CLAUDE.md").exists()

    def test_read_failure_raises(self, project_dir):
        agents = write(project_dir / "AGENTS.md", "x")
        failing = FailingFileSystem(reads=[agents])

        with pytest.raises(DocumentMergeError, match="CLAUDE.md and AGENTS.md"):
            sync_project_docs(failing, project_dir)

    def test_write_failure_raises(self, project_dir):
        write(project_dir / "AGENTS.md", "x")
        failing = FailingFileSystem(writes=[project_dir / "CLAUDE.md"])

        with pytest.raises(DocumentMergeError):
            sync_project_docs(failing, project_dir)
