"""Shared constants for discovery, adapters, and the CLI."""

from pathlib import Path

TOOL_NAME = "sync-agents"

# Every skill directory carries this manifest; directories without it are ignored.
MANIFEST_NAME = "SKILL.md"

# Agents are flat markdown documents.
DOCUMENT_SUFFIX = ".md"

# Primary tree layout: <root>/skills/<name>/SKILL.md and <root>/agents/<name>.md
PRIMARY_SKILLS_SUBDIR = "skills"
PRIMARY_AGENTS_SUBDIR = "agents"

# Shared and Legacy keep script files in this subdirectory of a skill.
SCRIPTS_DIR = "scripts"

SCRIPT_SUFFIXES: frozenset[str] = frozenset(
    {".ts", ".js", ".mjs", ".cjs", ".py", ".sh", ".bash", ".rb"}
)

DEFAULT_PRIMARY_ROOT = Path("~/.claude")
DEFAULT_SHARED_ROOT = Path("~/.agents/skills")
DEFAULT_LEGACY_ROOT = Path("~/.codex/skills")

# Project document pair; ties favour the first.
PROJECT_DOCS: tuple[str, str] = ("CLAUDE.md", "AGENTS.md")
