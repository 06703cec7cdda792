"""Item discovery within a tree.

- A skill is a directory containing ``SKILL.md``; other directories are
  ignored, as are dot-directories (tool-managed internals).
- An agent is a ``.md`` file in the tree's agents directory; other files
  are ignored.

Discovery never writes.  A missing directory yields no items; a
directory that exists but cannot be listed raises ``TreeReadError``.  An
individual item that cannot be read or parsed is handed to *on_error*
and skipped, so one bad manifest never hides the rest of the tree.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from sync_agents import frontmatter
from sync_agents.constants import DOCUMENT_SUFFIX, MANIFEST_NAME
from sync_agents.converters.common import parse_provenance
from sync_agents.errors import TreeReadError
from sync_agents.file_handler import FileSystem, read_text
from sync_agents.models import Item, ItemKind

from .tree import Tree

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[str, ItemKind, Path, Exception], None]


def _log_and_skip(
    name: str, kind: ItemKind, path: Path, exc: Exception
) -> None:
    logger.warning("Skipping unreadable %s %s (%s): %s", kind.value, name, path, exc)


def _list_directory(fs: FileSystem, directory: Path) -> list[tuple[str, bool]]:
    if not fs.exists(directory):
        logger.debug("Directory %s does not exist", directory)
        return []
    try:
        return fs.list_entries(directory)
    except OSError as exc:
        raise TreeReadError(str(directory), str(exc)) from exc


def ensure_readable(fs: FileSystem, tree: Tree) -> None:
    """Fail early if *tree*'s root exists but cannot be listed.

    Raises:
        TreeReadError: If the root is a file or cannot be enumerated.
    """
    _list_directory(fs, tree.root)


def skill_names(fs: FileSystem, tree: Tree) -> frozenset[str]:
    """Names of the skills present in *tree*, without reading them."""
    skills_dir = tree.skills_dir
    return frozenset(
        name
        for name, is_dir in _list_directory(fs, skills_dir)
        if is_dir
        and not name.startswith(".")
        and fs.exists(skills_dir / name / MANIFEST_NAME)
    )


def _is_agent_entry(name: str, is_dir: bool) -> bool:
    return (
        not is_dir
        and not name.startswith(".")
        and name.endswith(DOCUMENT_SUFFIX)
    )


def agent_names(fs: FileSystem, tree: Tree) -> frozenset[str]:
    """Names of the agent documents in *tree*, without reading them."""
    agents_dir = tree.agents_dir
    if agents_dir is None:
        return frozenset()
    return frozenset(
        name[: -len(DOCUMENT_SUFFIX)]
        for name, is_dir in _list_directory(fs, agents_dir)
        if _is_agent_entry(name, is_dir)
    )


def _collect_files(
    fs: FileSystem, directory: Path, prefix: str = ""
) -> dict[str, bytes]:
    """Read every file under *directory* except the top-level manifest."""
    files: dict[str, bytes] = {}
    for name, is_dir in fs.list_entries(directory):
        relative_path = f"{prefix}{name}"
        if is_dir:
            files.update(
                _collect_files(fs, directory / name, f"{relative_path}/")
            )
        elif relative_path != MANIFEST_NAME:
            files[relative_path] = fs.read_file(directory / name)
    return files


def load_skill(fs: FileSystem, skill_dir: Path) -> Item:
    """Read one skill directory into an ``Item``.

    Raises:
        FrontmatterError: If the manifest metadata is malformed.
        OSError: If any file cannot be read.
    """
    metadata, body = frontmatter.parse(read_text(fs, skill_dir / MANIFEST_NAME))
    return Item(
        name=skill_dir.name,
        kind=ItemKind.SKILL,
        metadata=metadata,
        body=body,
        auxiliary_files=_collect_files(fs, skill_dir),
        source_path=skill_dir,
        provenance=parse_provenance(body),
    )


def load_agent(fs: FileSystem, agent_path: Path) -> Item:
    """Read one agent document into an ``Item``."""
    metadata, body = frontmatter.parse(read_text(fs, agent_path))
    return Item(
        name=agent_path.name[: -len(DOCUMENT_SUFFIX)],
        kind=ItemKind.AGENT,
        metadata=metadata,
        body=body,
        source_path=agent_path,
        provenance=parse_provenance(body),
    )


def discover_skills(
    fs: FileSystem, tree: Tree, on_error: ErrorCallback | None = None
) -> list[Item]:
    """Return every skill in *tree*, sorted by name."""
    report = on_error or _log_and_skip
    skills_dir = tree.skills_dir
    items: list[Item] = []
    for name, is_dir in _list_directory(fs, skills_dir):
        if not is_dir or name.startswith("."):
            continue
        skill_dir = skills_dir / name
        if not fs.exists(skill_dir / MANIFEST_NAME):
            continue
        try:
            items.append(load_skill(fs, skill_dir))
        except (OSError, ValueError) as exc:
            report(name, ItemKind.SKILL, skill_dir, exc)

    logger.debug("Discovered %d skills in %s", len(items), skills_dir)
    return items


def discover_agents(
    fs: FileSystem, tree: Tree, on_error: ErrorCallback | None = None
) -> list[Item]:
    """Return every agent document in *tree*, sorted by name."""
    agents_dir = tree.agents_dir
    if agents_dir is None:
        return []

    report = on_error or _log_and_skip
    items: list[Item] = []
    for name, is_dir in _list_directory(fs, agents_dir):
        if not _is_agent_entry(name, is_dir):
            continue
        agent_path = agents_dir / name
        try:
            items.append(load_agent(fs, agent_path))
        except (OSError, ValueError) as exc:
            report(name[: -len(DOCUMENT_SUFFIX)], ItemKind.AGENT, agent_path, exc)

    logger.debug("Discovered %d agents in %s", len(items), agents_dir)
    return items
