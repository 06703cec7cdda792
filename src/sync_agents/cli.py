"""Command-line entry point for sync-agents."""

import argparse
import json
import logging
import sys

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from .config import Config, load_config
from .config_loader import discover_config_files, load_hierarchical_config
from .config_schema import UnifiedConfig, build_config, to_runtime_config
from .errors import ConfigError, SyncAgentsError
from .logger import setup_logging
from .sync import (
    SyncEngine,
    format_dry_run_preview,
    format_sync_report,
    report_to_json,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sync-agents",
        description="Reconcile skills and agents across the Primary, Shared, "
        "and Legacy trees, and keep CLAUDE.md and AGENTS.md in step.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Preview every change without touching disk
  sync-agents --dry-run

  # Only reconcile the trees, keep Legacy items on disk
  sync-agents --global --no-cleanup

  # Only merge the project documents in the current directory
  sync-agents --local

  # Use a different Primary tree
  sync-agents --source ~/work/claude
        """,
    )
    parser.add_argument(
        "--source",
        help="Override the Primary tree root (takes precedence over "
        "SYNC_AGENTS_PRIMARY and config files; default: ~/.claude)",
    )
    parser.add_argument(
        "--global",
        dest="global_only",
        action="store_true",
        help="Only reconcile the skill and agent trees",
    )
    parser.add_argument(
        "--local",
        dest="local_only",
        action="store_true",
        help="Only merge the project documents in the current directory",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute and report every change without writing anything",
    )
    parser.add_argument(
        "--no-cleanup",
        action="store_true",
        help="Keep Legacy items on disk after they are migrated or claimed",
    )
    return parser


def resolve_scope(global_only: bool, local_only: bool) -> tuple[bool, bool]:
    """Return ``(sync_global, sync_local)``; no flag or both flags run both."""
    if global_only == local_only:
        return True, True
    return global_only, local_only


def _load_unified_config() -> UnifiedConfig:
    try:
        return build_config(load_hierarchical_config())
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def _preflight(config: Config) -> None:
    for label, root in (
        ("Primary", config.primary_root),
        ("Shared", config.shared_root),
    ):
        if not root.exists():
            logger.warning("%s tree %s does not exist yet", label, root)


def main(argv: list[str] | None = None) -> int:
    """Run one sync and return the process exit code."""
    args, unknown = build_parser().parse_known_args(argv)

    try:
        # .env first so ${VAR} interpolation in YAML can see its values
        load_dotenv(find_dotenv(usecwd=True))
        unified = _load_unified_config()
        setup_logging(
            log_file=unified.logging.file,
            log_format=unified.logging.format,
            level=unified.logging.level,
        )
        if unknown:
            logger.debug("Ignoring unrecognised arguments: %s", " ".join(unknown))
        config_files = discover_config_files()
        if config_files:
            logger.debug("Using config file: %s", config_files[0])

        config = load_config(
            source=args.source,
            no_cleanup=args.no_cleanup,
            yaml_fallbacks=to_runtime_config(unified),
        )
        sync_global, sync_local = resolve_scope(args.global_only, args.local_only)
        if sync_global:
            _preflight(config)

        report = SyncEngine.from_config(config).run(
            dry_run=args.dry_run,
            sync_global=sync_global,
            sync_local=sync_local,
            cleanup_legacy=config.cleanup_legacy,
        )
    except (SyncAgentsError, OSError) as exc:
        logger.debug("Sync aborted", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.debug("Report: %s", json.dumps(report_to_json(report)))
    if args.dry_run:
        print(format_dry_run_preview(report))
    else:
        print(format_sync_report(report))
    return 0


def run() -> None:
    """Entry point that handles errors gracefully and parses CLI arguments."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
