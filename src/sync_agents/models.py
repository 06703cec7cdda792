"""Pydantic models shared by discovery, converters, and the engine.

Defines the core data contracts used across all sync modules:

- ``ItemKind``: Skill or Agent.
- ``Provenance``: Structured origin of a generated item.
- ``Item``: The unit of synchronisation (metadata + body + auxiliary files).
- ``MergePolicy``: Overwrite vs additive-only materialisation.
- ``SyncDirection``: The three transfer directions between trees.
- ``SyncRecord``: One written (or previewed) item transfer.
- ``ItemError``: One per-item failure that did not abort the run.
- ``DocRecord``: Outcome of the project document merge.
- ``SyncReport``: Aggregate results for a full run.

All models are frozen (immutable) for safety.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel


class ItemKind(str, Enum):
    """Kind of a synchronised item."""

    SKILL = "skill"
    AGENT = "agent"


class Origin(str, Enum):
    """Ecosystem an item was generated from."""

    PRIMARY = "primary"
    SHARED = "shared"


class Provenance(BaseModel):
    """Where a generated item came from.

    Attributes:
        origin: Ecosystem of the source item.
        kind: Kind of the source item in that ecosystem.
        name: Name of the source item.
    """

    origin: Origin
    kind: ItemKind
    name: str

    model_config = {"frozen": True}


class Item(BaseModel):
    """A skill or agent definition.

    Attributes:
        name: Directory name (skills) or file stem (agents).
        kind: Skill or Agent.
        metadata: Ordered metadata header.
        body: Document text following the header.
        auxiliary_files: Relative POSIX path -> bytes for every other file
            travelling with a skill (scripts, secondary documents, ...).
        source_path: Skill directory or agent file the item was read from.
        provenance: Parsed provenance header, if the body carries one.
    """

    name: str
    kind: ItemKind
    metadata: dict[str, Any] = {}
    body: str = ""
    auxiliary_files: dict[str, bytes] = {}
    source_path: Path | None = None
    provenance: Provenance | None = None

    model_config = {"frozen": True}


class MergePolicy(str, Enum):
    """How an item is materialised when its destination already exists."""

    OVERWRITE = "overwrite"
    ADDITIVE_ONLY = "additive_only"


class SyncDirection(str, Enum):
    """Transfer direction between trees."""

    PRIMARY_TO_SHARED = "primary_to_shared"
    LEGACY_TO_SHARED = "legacy_to_shared"
    SHARED_TO_PRIMARY = "shared_to_primary"


class RecordAction(str, Enum):
    """Whether a destination was newly created or replaced."""

    CREATED = "created"
    UPDATED = "updated"


class SyncRecord(BaseModel):
    """One item transfer that was written (or would be, in a dry run).

    Attributes:
        name: Item name.
        kind: Kind of the item as materialised at the destination.
        direction: Transfer direction.
        destination_path: Skill directory or agent file written.
        files_written: Every file path written for this item.
        action: Created or updated.
    """

    name: str
    kind: ItemKind
    direction: SyncDirection
    destination_path: str
    files_written: list[str] = []
    action: RecordAction = RecordAction.CREATED

    model_config = {"frozen": True}


class ItemError(BaseModel):
    """A per-item failure recorded without aborting the run."""

    name: str
    kind: ItemKind
    direction: SyncDirection
    source_path: str
    message: str

    model_config = {"frozen": True}


class DocRecord(BaseModel):
    """Outcome of the project document merge.

    Attributes:
        name: File name of the document that was written.
        source_path: Document copied from.
        output_path: Document copied to.
        action: Created or updated.
    """

    name: str
    source_path: str
    output_path: str
    action: RecordAction

    model_config = {"frozen": True}


class SyncReport(BaseModel):
    """Aggregate report for a full reconciliation run.

    Attributes:
        dry_run: Whether this was a dry run (no changes applied).
        to_shared: Primary -> Shared transfers.
        migrated: Legacy -> Shared transfers.
        to_primary: Shared -> Primary back-fills.
        removed_legacy: Legacy item names removed (or that would be).
        shadowed_agents: Primary agents dropped because a skill has the
            same name.
        docs: Project document merge outcome.
        errors: Per-item failures.
        started_at: ISO 8601 timestamp when the run started.
        completed_at: ISO 8601 timestamp when the run completed.
    """

    dry_run: bool = False
    to_shared: list[SyncRecord] = []
    migrated: list[SyncRecord] = []
    to_primary: list[SyncRecord] = []
    removed_legacy: list[str] = []
    shadowed_agents: list[str] = []
    docs: list[DocRecord] = []
    errors: list[ItemError] = []
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    @property
    def to_shared_skills(self) -> list[SyncRecord]:
        """Primary skills written to Shared."""
        return [r for r in self.to_shared if r.kind == ItemKind.SKILL]

    @property
    def to_shared_agents(self) -> list[SyncRecord]:
        """Primary agents written to Shared."""
        return [r for r in self.to_shared if r.kind == ItemKind.AGENT]

    @property
    def to_primary_skills(self) -> list[SyncRecord]:
        """Shared items back-filled as Primary skills."""
        return [r for r in self.to_primary if r.kind == ItemKind.SKILL]

    @property
    def to_primary_agents(self) -> list[SyncRecord]:
        """Shared items back-filled as Primary agents."""
        return [r for r in self.to_primary if r.kind == ItemKind.AGENT]

    @property
    def migrated_names(self) -> list[str]:
        return [r.name for r in self.migrated]

    @property
    def change_count(self) -> int:
        """Number of items, removals, and documents changed."""
        return (
            len(self.to_shared)
            + len(self.migrated)
            + len(self.to_primary)
            + len(self.removed_legacy)
            + len(self.docs)
        )

    @property
    def has_changes(self) -> bool:
        return self.change_count > 0
