"""Tree layout and the generic "merge items into a tree" operation.

Every transfer direction goes through ``merge_items_into_tree``; the
only thing that differs between directions is the converter and the
``MergePolicy``:

- ``OVERWRITE`` -- replace an existing destination unless it is
  already equivalent to the converted output.
- ``ADDITIVE_ONLY`` -- never touch an existing destination.

Failures are per item: a converter or write error is logged, recorded
as an ``ItemError``, and the next item is processed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from sync_agents.constants import (
    DOCUMENT_SUFFIX,
    MANIFEST_NAME,
    PRIMARY_AGENTS_SUBDIR,
    PRIMARY_SKILLS_SUBDIR,
)
from sync_agents.converters.common import ConversionResult, documents_equivalent
from sync_agents.file_handler import FileSystem, decode_bytes
from sync_agents.models import (
    Item,
    ItemError,
    ItemKind,
    MergePolicy,
    RecordAction,
    SyncDirection,
    SyncRecord,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tree:
    """A directory root plus where each kind of item lives inside it.

    Args:
        root: Tree root directory.
        skills_subdir: Subdirectory holding one directory per skill, or
            ``None`` when skills live directly under *root*.
        agents_subdir: Subdirectory holding flat agent documents, or
            ``None`` when the tree has no agents.
    """

    root: Path
    skills_subdir: str | None = None
    agents_subdir: str | None = None

    @classmethod
    def primary(cls, root: Path) -> Tree:
        return cls(root, PRIMARY_SKILLS_SUBDIR, PRIMARY_AGENTS_SUBDIR)

    @classmethod
    def skills_only(cls, root: Path) -> Tree:
        """Layout of the Shared and Legacy trees."""
        return cls(root)

    @property
    def skills_dir(self) -> Path:
        if self.skills_subdir:
            return self.root / self.skills_subdir
        return self.root

    @property
    def agents_dir(self) -> Path | None:
        if self.agents_subdir:
            return self.root / self.agents_subdir
        return None

    def kind_dir(self, kind: ItemKind) -> Path:
        if kind == ItemKind.SKILL:
            return self.skills_dir
        agents_dir = self.agents_dir
        if agents_dir is None:
            raise ValueError(f"Tree {self.root} has no agents directory")
        return agents_dir

    def destination(self, name: str, kind: ItemKind) -> Path:
        """Skill directory or agent document for *name*."""
        if kind == ItemKind.SKILL:
            return self.skills_dir / name
        return self.kind_dir(kind) / f"{name}{DOCUMENT_SUFFIX}"

    def presence_path(self, name: str, kind: ItemKind) -> Path:
        """Path whose existence means *name* is present in this tree."""
        if kind == ItemKind.SKILL:
            return self.skills_dir / name / MANIFEST_NAME
        return self.destination(name, kind)


@dataclass
class MergeOutcome:
    """Result of merging a batch of items into one tree.

    Attributes:
        records: Items written (or that would be, in a dry run).
        errors: Per-item failures.
        written: Destination-form items behind each record, in order.
    """

    records: list[SyncRecord] = field(default_factory=list)
    errors: list[ItemError] = field(default_factory=list)
    written: list[Item] = field(default_factory=list)

    @property
    def names(self) -> frozenset[str]:
        return frozenset(record.name for record in self.records)


def _files_in_sync(fs: FileSystem, base: Path, result: ConversionResult) -> bool:
    for relative_path, source in result.copies.items():
        path = base / relative_path
        if not fs.exists(path) or fs.read_file(path) != fs.read_file(source):
            return False
    for relative_path, data in result.files.items():
        path = base / relative_path
        if not fs.exists(path):
            return False
        existing = fs.read_file(path)
        if existing == data:
            continue
        if path.suffix != DOCUMENT_SUFFIX:
            return False
        existing_text, _ = decode_bytes(existing)
        planned_text, _ = decode_bytes(data)
        name = result.item.name if path.name == MANIFEST_NAME else None
        if not documents_equivalent(existing_text, planned_text, name):
            return False
    return True


def _merge_one(
    fs: FileSystem,
    item: Item,
    tree: Tree,
    convert: Callable[[Item], ConversionResult],
    policy: MergePolicy,
    direction: SyncDirection,
    dry_run: bool,
) -> tuple[SyncRecord, Item] | None:
    result = convert(item)
    target = result.item
    base = tree.kind_dir(target.kind)
    destination = tree.destination(target.name, target.kind)
    exists = fs.exists(tree.presence_path(target.name, target.kind))

    if exists and policy == MergePolicy.ADDITIVE_ONLY:
        logger.debug(
            "Skipping %s (%s): destination exists", target.name, direction.value
        )
        return None

    if exists and _files_in_sync(fs, base, result):
        logger.debug(
            "Skipping %s (%s): already in sync", target.name, direction.value
        )
        return None

    paths = [base / relative_path for relative_path in result.files]
    paths += [base / relative_path for relative_path in result.copies]
    if not dry_run:
        for relative_path, data in result.files.items():
            fs.write_file(base / relative_path, data)
        for relative_path, source in result.copies.items():
            fs.copy_file(source, base / relative_path)
        logger.info(
            "Wrote %s %s -> %s (%d files)",
            result.primary_kind.value,
            target.name,
            destination,
            len(paths),
        )

    record = SyncRecord(
        name=target.name,
        kind=result.primary_kind,
        direction=direction,
        destination_path=str(destination),
        files_written=[str(path) for path in paths],
        action=RecordAction.UPDATED if exists else RecordAction.CREATED,
    )
    return record, target


def merge_items_into_tree(
    fs: FileSystem,
    items: Iterable[Item],
    tree: Tree,
    *,
    convert: Callable[[Item], ConversionResult],
    policy: MergePolicy,
    direction: SyncDirection,
    dry_run: bool = False,
) -> MergeOutcome:
    """Convert each item and materialise it in *tree* according to *policy*.

    Args:
        fs: Filesystem capability.
        items: Source items, processed in order.
        tree: Destination tree.
        convert: Direction-specific converter.
        policy: Overwrite or additive-only.
        direction: Recorded on every record and error.
        dry_run: If ``True``, decide everything but write nothing.

    Returns:
        A ``MergeOutcome`` with records, errors, and written items.
    """
    outcome = MergeOutcome()
    for item in items:
        try:
            merged = _merge_one(
                fs, item, tree, convert, policy, direction, dry_run
            )
        except Exception as exc:
            logger.error(
                "Error syncing %s %s (%s): %s",
                item.kind.value,
                item.name,
                direction.value,
                exc,
            )
            outcome.errors.append(
                ItemError(
                    name=item.name,
                    kind=item.kind,
                    direction=direction,
                    source_path=str(item.source_path or ""),
                    message=str(exc),
                )
            )
            continue

        if merged is not None:
            record, written = merged
            outcome.records.append(record)
            outcome.written.append(written)
    return outcome
