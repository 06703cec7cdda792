"""Sync report formatting functions.

Provides human-readable and machine-readable output for sync runs:

- ``format_sync_report`` -- full post-sync summary.
- ``format_dry_run_preview`` -- dry-run preview grouped by direction.
- ``report_to_json`` -- structured dict for ``json.dumps``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sync_agents.models import SyncRecord, SyncReport


def _record_line(record: SyncRecord) -> str:
    count = len(record.files_written)
    noun = "file" if count == 1 else "files"
    return (
        f"  {record.kind.value} {record.name} -> {record.destination_path} "
        f"({record.action.value}, {count} {noun})"
    )


def _sections(report: SyncReport) -> list[tuple[str, list[str]]]:
    """Titled line groups shared by the report and the preview."""
    return [
        ("Primary -> Shared", [_record_line(r) for r in report.to_shared]),
        ("Legacy -> Shared", [_record_line(r) for r in report.migrated]),
        ("Shared -> Primary", [_record_line(r) for r in report.to_primary]),
        ("Legacy removed", [f"  {name}" for name in report.removed_legacy]),
        (
            "Project documents",
            [
                f"  {d.source_path} -> {d.output_path} ({d.action.value})"
                for d in report.docs
            ],
        ),
    ]


# ------------------------------------------------------------------
# Human-readable report
# ------------------------------------------------------------------


def format_sync_report(report: SyncReport) -> str:
    """Format a complete sync report as human-readable text.

    Sections are only included when they contain at least one entry.

    Args:
        report: The completed sync report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    header = "Sync report"
    if report.dry_run:
        header += " (DRY RUN)"
    lines.append(header)
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    lines.append(
        f"Synced {len(report.to_shared)} to Shared "
        f"({len(report.to_shared_skills)} skills, "
        f"{len(report.to_shared_agents)} agents), "
        f"migrated {len(report.migrated)}, "
        f"back-filled {len(report.to_primary)} "
        f"({len(report.to_primary_skills)} skills, "
        f"{len(report.to_primary_agents)} agents), "
        f"removed {len(report.removed_legacy)}, "
        f"{len(report.errors)} errors"
    )
    lines.append("")

    for title, entries in _sections(report):
        if entries:
            lines.append(f"{title}:")
            lines.extend(entries)
            lines.append("")

    if report.shadowed_agents:
        lines.append("Shadowed agents (a skill has the same name):")
        for name in report.shadowed_agents:
            lines.append(f"  {name}")
        lines.append("")

    if report.errors:
        lines.append("Errors:")
        for e in report.errors:
            lines.append(
                f"  {e.kind.value} {e.name} ({e.direction.value}): {e.message}"
            )
        lines.append("")

    if not report.has_changes and not report.errors:
        lines.append("Everything is in sync.")
        lines.append("")

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# Dry-run preview
# ------------------------------------------------------------------


def format_dry_run_preview(report: SyncReport) -> str:
    """Format a dry-run preview grouped by direction.

    Each section is shown as ``[DIRECTION]`` followed by its entries.

    Args:
        report: A dry-run sync report (``dry_run=True``).

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = ["DRY RUN -- No changes will be made", ""]

    for title, entries in _sections(report):
        if entries:
            lines.append(f"[{title.upper()}]")
            lines.extend(entries)
            lines.append("")

    if report.errors:
        lines.append(f"Errors: {len(report.errors)} items could not be read")
        lines.append("")

    if not report.has_changes:
        lines.append("No changes needed.")
        lines.append("")

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def report_to_json(report: SyncReport) -> dict:
    """Convert a sync report to a structured dict for JSON serialisation.

    Args:
        report: The sync report.

    Returns:
        Dict with timestamps, counts, and per-record details.
    """
    return {
        "dry_run": report.dry_run,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "counts": {
            "to_shared": len(report.to_shared),
            "migrated": len(report.migrated),
            "to_primary": len(report.to_primary),
            "removed_legacy": len(report.removed_legacy),
            "docs": len(report.docs),
            "errors": len(report.errors),
            "total_changes": report.change_count,
        },
        "to_shared": [r.model_dump(mode="json") for r in report.to_shared],
        "migrated": [r.model_dump(mode="json") for r in report.migrated],
        "to_primary": [r.model_dump(mode="json") for r in report.to_primary],
        "removed_legacy": list(report.removed_legacy),
        "shadowed_agents": list(report.shadowed_agents),
        "docs": [d.model_dump(mode="json") for d in report.docs],
        "errors": [e.model_dump(mode="json") for e in report.errors],
    }
