"""Reconciliation engine that orchestrates a full sync run.

The ``SyncEngine`` ties together discovery, the converters, the generic
tree merge, and the project document merge.  For the global scope it:

1. Discovers Primary skills and agents and the names already in Shared.
2. Writes every Primary item to Shared (Primary always wins).  A Primary
   agent whose name is also a Primary skill is shadowed by the skill.
3. Migrates Legacy skills whose name nobody claimed yet into Shared, and
   optionally removes every Legacy item whose name is now claimed.
4. Re-discovers Shared and back-fills into Primary every item whose name
   Primary does not have.

The local scope merges the project document pair.

Claimed names are explicit frozensets threaded through the steps:
``shared_claimed`` gates the Legacy migration and ``primary_claimed``
gates the back-fill.  Each step returns the extended set.

Error handling is per item: a single failure does not abort the run.
Only tree-level read failures and document merge failures propagate.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from sync_agents.config import Config
from sync_agents.converters import (
    legacy_to_shared,
    primary_to_shared,
    shared_to_primary,
)
from sync_agents.file_handler import FileSystem, LocalFileSystem
from sync_agents.models import (
    DocRecord,
    Item,
    ItemError,
    ItemKind,
    MergePolicy,
    SyncDirection,
    SyncRecord,
    SyncReport,
)

from .discovery import (
    ErrorCallback,
    agent_names,
    discover_agents,
    discover_skills,
    ensure_readable,
    skill_names,
)
from .project_docs import sync_project_docs
from .tree import MergeOutcome, Tree, merge_items_into_tree

logger = logging.getLogger(__name__)


def split_shadowed_agents(
    agents: list[Item], primary_skill_names: frozenset[str]
) -> tuple[list[Item], list[Item]]:
    """Split Primary agents into ``(kept, shadowed)``.

    Within Primary a skill and an agent may not share a name; when they
    do, the skill wins and the agent is left out of the Shared sync.
    """
    kept: list[Item] = []
    shadowed: list[Item] = []
    for agent in agents:
        (shadowed if agent.name in primary_skill_names else kept).append(agent)
    return kept, shadowed


class SyncEngine:
    """Reconcile the Primary, Shared, and Legacy trees.

    Args:
        primary: Authoritative tree (skills and agents).
        shared: Converged destination tree (skills only).
        legacy: Deprecated tree being migrated into Shared.
        cwd: Project directory for the document merge.
        fs: Filesystem capability; the local disk by default.
    """

    def __init__(
        self,
        primary: Tree,
        shared: Tree,
        legacy: Tree,
        cwd: Path,
        fs: FileSystem | None = None,
    ) -> None:
        self.primary = primary
        self.shared = shared
        self.legacy = legacy
        self.cwd = cwd
        self.fs: FileSystem = fs or LocalFileSystem()

    @classmethod
    def from_config(
        cls, config: Config, fs: FileSystem | None = None
    ) -> SyncEngine:
        return cls(
            primary=Tree.primary(config.primary_root),
            shared=Tree.skills_only(config.shared_root),
            legacy=Tree.skills_only(config.legacy_root),
            cwd=config.cwd,
            fs=fs,
        )

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def run(
        self,
        dry_run: bool = False,
        sync_global: bool = True,
        sync_local: bool = True,
        cleanup_legacy: bool = True,
    ) -> SyncReport:
        """Execute a full reconciliation run.

        Args:
            dry_run: If ``True``, compute every decision but write and
                delete nothing.
            sync_global: Reconcile the three trees.
            sync_local: Merge the project document pair.
            cleanup_legacy: Remove Legacy items once Shared or Primary
                claims their name.

        Returns:
            A ``SyncReport`` summarising what was (or would be) done.

        Raises:
            TreeReadError: If a tree root exists but cannot be read.
            DocumentMergeError: If the project documents cannot be merged.
        """
        started_at = datetime.now(timezone.utc).isoformat()
        errors: list[ItemError] = []
        to_shared: list[SyncRecord] = []
        migrated: list[SyncRecord] = []
        to_primary: list[SyncRecord] = []
        removed: list[str] = []
        shadowed: list[str] = []
        docs: list[DocRecord] = []

        if sync_global:
            for tree in (self.primary, self.shared, self.legacy):
                ensure_readable(self.fs, tree)

            # Step 1: discovery
            primary_skills = discover_skills(
                self.fs,
                self.primary,
                self._collector(errors, SyncDirection.PRIMARY_TO_SHARED),
            )
            primary_agents = discover_agents(
                self.fs,
                self.primary,
                self._collector(errors, SyncDirection.PRIMARY_TO_SHARED),
            )
            names_in_shared = skill_names(self.fs, self.shared)

            # Step 2: Primary's combined namespace, listed rather than parsed
            # so an unreadable item still claims its name
            primary_skill_names = skill_names(self.fs, self.primary)
            primary_names = primary_skill_names | agent_names(
                self.fs, self.primary
            )

            # Step 3: Primary -> Shared
            agents, shadowed_agents = split_shadowed_agents(
                primary_agents, primary_skill_names
            )
            for agent in shadowed_agents:
                logger.info(
                    "Agent %s is shadowed by the skill of the same name",
                    agent.name,
                )
            shadowed = [agent.name for agent in shadowed_agents]

            outcome = self._primary_to_shared(
                primary_skills + agents, dry_run
            )
            to_shared = outcome.records
            errors.extend(outcome.errors)
            planned_shared = {item.name: item for item in outcome.written}

            # Step 4: Legacy -> Shared
            shared_claimed = primary_names | names_in_shared
            if self.fs.exists(self.legacy.root):
                outcome, shared_claimed, removed = self._migrate_legacy(
                    shared_claimed,
                    cleanup_legacy,
                    dry_run,
                    errors,
                )
                migrated = outcome.records
                errors.extend(outcome.errors)
                planned_shared.update(
                    (item.name, item) for item in outcome.written
                )

            # Step 5: Shared -> Primary, after re-discovery
            shared_items = self._shared_view(planned_shared, dry_run, errors)
            outcome, _primary_claimed = self._backfill(
                shared_items, primary_names, dry_run
            )
            to_primary = outcome.records
            errors.extend(outcome.errors)

        # Step 6: project documents
        if sync_local:
            docs = sync_project_docs(self.fs, self.cwd, dry_run)

        report = SyncReport(
            dry_run=dry_run,
            to_shared=to_shared,
            migrated=migrated,
            to_primary=to_primary,
            removed_legacy=removed,
            shadowed_agents=shadowed,
            docs=docs,
            errors=errors,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
        )
        logger.info(
            "Sync %s: %d changes, %d errors",
            "previewed" if dry_run else "complete",
            report.change_count,
            len(errors),
        )
        return report

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _primary_to_shared(
        self, items: list[Item], dry_run: bool
    ) -> MergeOutcome:
        return merge_items_into_tree(
            self.fs,
            items,
            self.shared,
            convert=primary_to_shared.convert,
            policy=MergePolicy.OVERWRITE,
            direction=SyncDirection.PRIMARY_TO_SHARED,
            dry_run=dry_run,
        )

    def _migrate_legacy(
        self,
        shared_claimed: frozenset[str],
        cleanup: bool,
        dry_run: bool,
        errors: list[ItemError],
    ) -> tuple[MergeOutcome, frozenset[str], list[str]]:
        """Copy unclaimed Legacy skills into Shared, then clean up.

        Returns:
            Tuple of (outcome, extended shared_claimed, removed names).
        """
        direction = SyncDirection.LEGACY_TO_SHARED
        legacy_items = discover_skills(
            self.fs, self.legacy, self._collector(errors, direction)
        )
        candidates = [i for i in legacy_items if i.name not in shared_claimed]
        outcome = merge_items_into_tree(
            self.fs,
            candidates,
            self.shared,
            convert=legacy_to_shared.convert,
            policy=MergePolicy.ADDITIVE_ONLY,
            direction=direction,
            dry_run=dry_run,
        )
        claimed = shared_claimed | outcome.names

        removed: list[str] = []
        if cleanup:
            for item in legacy_items:
                if item.name not in claimed or item.source_path is None:
                    continue
                if not dry_run:
                    try:
                        self.fs.remove_tree(item.source_path)
                    except OSError as exc:
                        logger.error(
                            "Failed to remove legacy %s: %s", item.name, exc
                        )
                        errors.append(
                            ItemError(
                                name=item.name,
                                kind=item.kind,
                                direction=direction,
                                source_path=str(item.source_path),
                                message=f"cleanup failed: {exc}",
                            )
                        )
                        continue
                    logger.info("Removed legacy %s", item.source_path)
                removed.append(item.name)

        return outcome, claimed, removed

    def _shared_view(
        self,
        planned: dict[str, Item],
        dry_run: bool,
        errors: list[ItemError],
    ) -> list[Item]:
        """Re-discover Shared, including this run's (simulated) writes."""
        view = {
            item.name: item
            for item in discover_skills(
                self.fs,
                self.shared,
                self._collector(errors, SyncDirection.SHARED_TO_PRIMARY),
            )
        }
        if dry_run:
            view.update(planned)
        return [view[name] for name in sorted(view)]

    def _backfill(
        self,
        shared_items: list[Item],
        primary_claimed: frozenset[str],
        dry_run: bool,
    ) -> tuple[MergeOutcome, frozenset[str]]:
        """Create Primary items for Shared names Primary does not have.

        Returns:
            Tuple of (outcome, extended primary_claimed).
        """
        candidates = [i for i in shared_items if i.name not in primary_claimed]
        outcome = merge_items_into_tree(
            self.fs,
            candidates,
            self.primary,
            convert=shared_to_primary.convert,
            policy=MergePolicy.ADDITIVE_ONLY,
            direction=SyncDirection.SHARED_TO_PRIMARY,
            dry_run=dry_run,
        )
        return outcome, primary_claimed | outcome.names

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _collector(
        errors: list[ItemError], direction: SyncDirection
    ) -> ErrorCallback:
        def collect(
            name: str, kind: ItemKind, path: Path, exc: Exception
        ) -> None:
            logger.error("Error reading %s %s: %s", kind.value, path, exc)
            errors.append(
                ItemError(
                    name=name,
                    kind=kind,
                    direction=direction,
                    source_path=str(path),
                    message=str(exc),
                )
            )

        return collect
