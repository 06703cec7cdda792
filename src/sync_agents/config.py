"""Runtime configuration for a sync run.

Reads the tree roots and the cleanup switch from CLI args, environment
variables, .env files, and YAML config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    SYNC_AGENTS_PRIMARY: Primary tree root (optional, default: ~/.claude)
    SYNC_AGENTS_SHARED: Shared tree root (optional, default: ~/.agents/skills)
    SYNC_AGENTS_LEGACY: Legacy tree root (optional, default: ~/.codex/skills)
    SYNC_AGENTS_NO_CLEANUP: Keep Legacy items after migration (optional, default: false)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .constants import (
    DEFAULT_LEGACY_ROOT,
    DEFAULT_PRIMARY_ROOT,
    DEFAULT_SHARED_ROOT,
)
from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class Config:
    primary_root: Path
    shared_root: Path
    legacy_root: Path
    cwd: Path
    cleanup_legacy: bool = True


def _resolve(raw: str | os.PathLike[str], label: str) -> Path:
    text = os.fspath(raw).strip()
    if not text:
        raise ConfigError(f"{label} root cannot be empty.")
    return Path(text).expanduser().resolve()


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ConfigError if invalid.

    A root that does not exist yet is fine (it is created on first write
    or simply treated as empty).

    Args:
        config: Config instance to validate.

    Raises:
        ConfigError: If a root exists but is not a directory, or Primary
            and Shared point at the same directory.
    """
    for label, root in (
        ("Primary", config.primary_root),
        ("Shared", config.shared_root),
        ("Legacy", config.legacy_root),
    ):
        if root.exists() and not root.is_dir():
            raise ConfigError(f"{label} root '{root}' is not a directory.")

    if config.primary_root == config.shared_root:
        raise ConfigError(
            f"Primary and Shared roots must differ (both are '{config.primary_root}')."
        )

    if config.legacy_root in (config.primary_root, config.shared_root):
        logger.warning(
            "Legacy root %s overlaps another tree; cleanup may remove live items",
            config.legacy_root,
        )


def load_config(
    source: str | None = None,
    no_cleanup: bool = False,
    yaml_fallbacks: dict | None = None,
    cwd: Path | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        source: Override the Primary root (``--source``).
        no_cleanup: Disable Legacy removal (``--no-cleanup``).
        yaml_fallbacks: Flat dict of values from the YAML config, as
            produced by ``config_schema.to_runtime_config``.  Keys:
            primary, shared, legacy, cleanup_legacy.
        cwd: Project directory; the process working directory by default.

    Returns:
        Validated Config instance.

    Raises:
        ConfigError: If any resolved value is invalid.
    """
    fb = yaml_fallbacks or {}

    # --- Path fields: CLI > env > YAML > default ---

    primary = (
        source
        or os.getenv("SYNC_AGENTS_PRIMARY")
        or fb.get("primary")
        or DEFAULT_PRIMARY_ROOT
    )
    shared = (
        os.getenv("SYNC_AGENTS_SHARED") or fb.get("shared") or DEFAULT_SHARED_ROOT
    )
    legacy = (
        os.getenv("SYNC_AGENTS_LEGACY") or fb.get("legacy") or DEFAULT_LEGACY_ROOT
    )

    # --- Boolean fields: CLI > env > YAML > default ---

    def get_bool_env(key: str) -> bool | None:
        """Return True/False from env var, or None if unset."""
        val = os.getenv(key)
        if val is None:
            return None
        return val.lower() in ("true", "1", "yes", "on")

    if no_cleanup:
        cleanup_legacy = False
    else:
        env_no_cleanup = get_bool_env("SYNC_AGENTS_NO_CLEANUP")
        if env_no_cleanup is not None:
            cleanup_legacy = not env_no_cleanup
        else:
            cleanup_legacy = bool(fb.get("cleanup_legacy", True))

    config = Config(
        primary_root=_resolve(primary, "Primary"),
        shared_root=_resolve(shared, "Shared"),
        legacy_root=_resolve(legacy, "Legacy"),
        cwd=(cwd or Path.cwd()).resolve(),
        cleanup_legacy=cleanup_legacy,
    )

    validate_config(config)

    return config
