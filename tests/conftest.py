"""Shared pytest fixtures for sync-agents tests."""

import pytest

from sync_agents.sync import SyncEngine, Tree

_ENV_VARS = (
    "SYNC_AGENTS_CONFIG",
    "SYNC_AGENTS_PRIMARY",
    "SYNC_AGENTS_SHARED",
    "SYNC_AGENTS_LEGACY",
    "SYNC_AGENTS_NO_CLEANUP",
    "LOG_LEVEL",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep every test away from the real home directory and environment."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture
def primary_tree(tmp_path):
    return Tree.primary(tmp_path / "claude")


@pytest.fixture
def shared_tree(tmp_path):
    return Tree.skills_only(tmp_path / "agents" / "skills")


@pytest.fixture
def legacy_tree(tmp_path):
    return Tree.skills_only(tmp_path / "codex" / "skills")


@pytest.fixture
def project_dir(tmp_path):
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def make_engine(primary_tree, shared_tree, legacy_tree, project_dir):
    """Factory for a ``SyncEngine`` over the per-test trees."""

    def _make(fs=None):
        return SyncEngine(
            primary=primary_tree,
            shared=shared_tree,
            legacy=legacy_tree,
            cwd=project_dir,
            fs=fs,
        )

    return _make
