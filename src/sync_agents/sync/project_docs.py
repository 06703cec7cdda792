"""Project document merge: keep ``CLAUDE.md`` and ``AGENTS.md`` identical.

This is a two-file special case, not a tree sync.  The more recently
modified document wins (ties favour the first); a document that is
missing is created from the other; identical content is left alone
whatever the timestamps say.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sync_agents.constants import PROJECT_DOCS
from sync_agents.errors import DocumentMergeError
from sync_agents.file_handler import FileSystem
from sync_agents.models import DocRecord, RecordAction

logger = logging.getLogger(__name__)


def _pick_direction(
    fs: FileSystem, first: Path, second: Path
) -> tuple[Path, Path] | None:
    """Return ``(source, destination)`` or ``None`` if neither exists."""
    first_exists = fs.exists(first)
    second_exists = fs.exists(second)

    if not first_exists and not second_exists:
        return None
    if first_exists and not second_exists:
        return first, second
    if second_exists and not first_exists:
        return second, first

    if fs.stat_mtime(first) >= fs.stat_mtime(second):
        return first, second
    return second, first


def sync_project_docs(
    fs: FileSystem,
    cwd: Path,
    dry_run: bool = False,
    names: tuple[str, str] = PROJECT_DOCS,
) -> list[DocRecord]:
    """Copy the newer project document over the older one.

    Args:
        fs: Filesystem capability.
        cwd: Project directory holding the two documents.
        dry_run: If ``True``, report the write without performing it.
        names: The document pair, first one winning ties.

    Returns:
        An empty list when nothing changed, otherwise one ``DocRecord``.

    Raises:
        DocumentMergeError: If either document cannot be read or written.
    """
    first, second = cwd / names[0], cwd / names[1]
    try:
        picked = _pick_direction(fs, first, second)
        if picked is None:
            logger.debug("No project documents in %s", cwd)
            return []

        source, destination = picked
        content = fs.read_file(source)
        destination_exists = fs.exists(destination)
        if destination_exists and fs.read_file(destination) == content:
            logger.debug("%s already matches %s", destination.name, source.name)
            return []

        if not dry_run:
            fs.write_file(destination, content)
            logger.info("Copied %s -> %s", source, destination)
    except OSError as exc:
        raise DocumentMergeError(
            f"Failed to merge {first.name} and {second.name} in {cwd}: {exc}"
        ) from exc

    return [
        DocRecord(
            name=destination.name,
            source_path=str(source),
            output_path=str(destination),
            action=(
                RecordAction.UPDATED
                if destination_exists
                else RecordAction.CREATED
            ),
        )
    ]
