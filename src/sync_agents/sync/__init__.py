"""Skill and agent reconciliation engine.

Public API for converging the Primary, Shared, and Legacy trees and for
merging the project document pair.

Architecture
------------
Each tree is discovered into ``Item`` values.  Every transfer goes
through one generic operation, ``merge_items_into_tree``, parameterised
by a direction-specific converter and a ``MergePolicy``.  Primary always
wins; the other directions only fill gaps.

Modules:

- ``engine``        -- ``SyncEngine``: orchestrates a full run.
- ``discovery``     -- Enumerate skills and agents in a tree.
- ``tree``          -- ``Tree`` layout and ``merge_items_into_tree``.
- ``project_docs``  -- Newest-wins merge of ``CLAUDE.md``/``AGENTS.md``.
- ``reporter``      -- Human-readable and JSON report formatting.

Public exports
--------------
``SyncEngine``, ``Tree``, ``merge_items_into_tree``, ``discover_skills``,
``discover_agents``, ``sync_project_docs``, ``format_sync_report``,
``format_dry_run_preview``, ``report_to_json``.

Usage example
-------------
::

    from sync_agents.config import load_config
    from sync_agents.sync import SyncEngine, format_sync_report

    engine = SyncEngine.from_config(load_config())

    # Dry-run first to preview changes
    preview = engine.run(dry_run=True)
    print(format_sync_report(preview))

    # Execute the sync
    report = engine.run()
    print(format_sync_report(report))
"""

from .discovery import discover_agents, discover_skills
from .engine import SyncEngine
from .project_docs import sync_project_docs
from .reporter import (
    format_dry_run_preview,
    format_sync_report,
    report_to_json,
)
from .tree import Tree, merge_items_into_tree

__all__ = [
    "SyncEngine",
    "Tree",
    "discover_agents",
    "discover_skills",
    "format_dry_run_preview",
    "format_sync_report",
    "merge_items_into_tree",
    "report_to_json",
    "sync_project_docs",
]
