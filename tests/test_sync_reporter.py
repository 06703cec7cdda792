"""Tests for sync report formatting functions."""

import json

from sync_agents.models import (
    DocRecord,
    ItemError,
    ItemKind,
    RecordAction,
    SyncDirection,
    SyncRecord,
    SyncReport,
)
from sync_agents.sync.reporter import (
    format_dry_run_preview,
    format_sync_report,
    report_to_json,
)


def _record(name, kind=ItemKind.SKILL, direction=SyncDirection.PRIMARY_TO_SHARED,
            files=1, action=RecordAction.CREATED):
    return SyncRecord(
        name=name,
        kind=kind,
        direction=direction,
        destination_path=f"/dest/{name}",
        files_written=[f"/dest/{name}/f{i}" for i in range(files)],
        action=action,
    )


def _full_report(**overrides):
    fields = dict(
        to_shared=[
            _record("foo"),
            _record("bar", kind=ItemKind.AGENT, files=2),
        ],
        migrated=[_record("old", direction=SyncDirection.LEGACY_TO_SHARED)],
        to_primary=[
            _record(
                "native",
                direction=SyncDirection.SHARED_TO_PRIMARY,
                action=RecordAction.UPDATED,
            )
        ],
        removed_legacy=["old"],
        docs=[
            DocRecord(
                name="CLAUDE.md",
                source_path="/p/AGENTS.md",
                output_path="/p/CLAUDE.md",
                action=RecordAction.CREATED,
            )
        ],
        started_at="2026-01-01T00:00:00+00:00",
        completed_at="2026-01-01T00:00:01+00:00",
    )
    fields.update(overrides)
    return SyncReport(**fields)


# ---------------------------------------------------------------------------
# format_sync_report
# ---------------------------------------------------------------------------


class TestFormatSyncReport:
    def test_header_and_summary_line(self):
        text = format_sync_report(_full_report())

        assert text.startswith("Sync report\n")
        assert "Started: 2026-01-01T00:00:00+00:00" in text
        assert "Completed: 2026-01-01T00:00:01+00:00" in text
        assert (
            "Synced 2 to Shared (1 skills, 1 agents), migrated 1, "
            "back-filled 1 (1 skills, 0 agents), removed 1, 0 errors"
        ) in text

    def test_sections_and_record_lines(self):
        text = format_sync_report(_full_report())

        assert "Primary -> Shared:" in text
        assert "  skill foo -> /dest/foo (created, 1 file)" in text
        assert "  agent bar -> /dest/bar (created, 2 files)" in text
        assert "Legacy -> Shared:" in text
        assert "Shared -> Primary:" in text
        assert "(updated, 1 file)" in text
        assert "Legacy removed:\n  old" in text
        assert "  /p/AGENTS.md -> /p/CLAUDE.md (created)" in text
        assert "Everything is in sync." not in text

    def test_dry_run_header(self):
        text = format_sync_report(_full_report(dry_run=True))
        assert text.startswith("Sync report (DRY RUN)")

    def test_empty_sections_omitted(self):
        report = SyncReport(
            to_shared=[_record("foo")], started_at="2026-01-01T00:00:00+00:00"
        )
        text = format_sync_report(report)

        assert "Primary -> Shared:" in text
        assert "Legacy -> Shared:" not in text
        assert "Legacy removed:" not in text
        assert "Completed:" not in text

    def test_in_sync(self):
        report = SyncReport(started_at="2026-01-01T00:00:00+00:00")
        assert format_sync_report(report).endswith("Everything is in sync.")

    def test_errors_and_shadowed_agents(self):
        report = SyncReport(
            shadowed_agents=["dup"],
            errors=[
                ItemError(
                    name="broken",
                    kind=ItemKind.SKILL,
                    direction=SyncDirection.LEGACY_TO_SHARED,
                    source_path="/legacy/broken",
                    message="bad header",
                )
            ],
            started_at="2026-01-01T00:00:00+00:00",
        )
        text = format_sync_report(report)

        assert "Shadowed agents (a skill has the same name):\n  dup" in text
        assert "  skill broken (legacy_to_shared): bad header" in text
        assert "Everything is in sync." not in text


# ---------------------------------------------------------------------------
# format_dry_run_preview
# ---------------------------------------------------------------------------


class TestFormatDryRunPreview:
    def test_grouped_sections(self):
        text = format_dry_run_preview(_full_report(dry_run=True))

        assert text.startswith("DRY RUN -- No changes will be made")
        assert "[PRIMARY -> SHARED]" in text
        assert "[LEGACY -> SHARED]" in text
        assert "[SHARED -> PRIMARY]" in text
        assert "[LEGACY REMOVED]" in text
        assert "[PROJECT DOCUMENTS]" in text
        assert "No changes needed." not in text

    def test_no_changes(self):
        report = SyncReport(dry_run=True, started_at="2026-01-01T00:00:00+00:00")
        text = format_dry_run_preview(report)
        assert "[" not in text
        assert text.endswith("No changes needed.")

    def test_error_count(self):
        error = ItemError(
            name="x",
            kind=ItemKind.AGENT,
            direction=SyncDirection.PRIMARY_TO_SHARED,
            source_path="/x.md",
            message="m",
        )
        report = SyncReport(
            dry_run=True, errors=[error], started_at="2026-01-01T00:00:00+00:00"
        )
        assert "Errors: 1 items could not be read" in format_dry_run_preview(report)


# ---------------------------------------------------------------------------
# report_to_json
# ---------------------------------------------------------------------------


class TestReportToJson:
    def test_counts(self):
        data = report_to_json(_full_report())
        assert data["counts"] == {
            "to_shared": 2,
            "migrated": 1,
            "to_primary": 1,
            "removed_legacy": 1,
            "docs": 1,
            "errors": 0,
            "total_changes": 6,
        }

    def test_records_use_plain_values(self):
        data = report_to_json(_full_report())

        first = data["to_shared"][0]
        assert first["name"] == "foo"
        assert first["kind"] == "skill"
        assert first["direction"] == "primary_to_shared"
        assert first["action"] == "created"
        assert data["docs"][0]["action"] == "created"
        assert data["removed_legacy"] == ["old"]

    def test_serialisable(self):
        data = report_to_json(_full_report(shadowed_agents=["dup"]))
        decoded = json.loads(json.dumps(data))
        assert decoded["shadowed_agents"] == ["dup"]
        assert decoded["dry_run"] is False
