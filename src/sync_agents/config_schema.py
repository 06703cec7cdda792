"""Unified configuration schema for sync_agents.

Defines Pydantic models for the YAML config structure with dedicated
sections for the tree roots, sync behaviour, and logging.  Includes an
adapter that flattens the schema into the fallbacks ``load_config``
understands.

Usage:
    from sync_agents.config_schema import build_config, to_runtime_config

    raw = load_hierarchical_config()
    unified = build_config(raw)
    config = load_config(
        source=args.source,
        yaml_fallbacks=to_runtime_config(unified),
    )
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .constants import (
    DEFAULT_LEGACY_ROOT,
    DEFAULT_PRIMARY_ROOT,
    DEFAULT_SHARED_ROOT,
)

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class TreesConfig(BaseModel):
    """Tree roots.  Paths may use ``~``; they are resolved at load time."""

    primary: str = Field(
        default=str(DEFAULT_PRIMARY_ROOT),
        description="Authoritative tree (skills/ and agents/)",
    )
    shared: str = Field(
        default=str(DEFAULT_SHARED_ROOT),
        description="Converged skills tree read by other tools",
    )
    legacy: str = Field(
        default=str(DEFAULT_LEGACY_ROOT),
        description="Deprecated skills tree migrated into Shared",
    )

    model_config = {"frozen": True}


class SyncConfig(BaseModel):
    """Sync behaviour."""

    cleanup_legacy: bool = Field(
        default=True,
        description="Remove Legacy items once Primary or Shared claims them",
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
        format: ``text`` for human-readable lines, ``json`` for one JSON
            object per line.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")
    format: Literal["text", "json"] = Field(
        default="text", description="Log line format"
    )

    model_config = {"frozen": True}

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"Unknown log level '{value}'; expected one of {', '.join(_LOG_LEVELS)}"
            )
        return level


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Aggregates all config sections. Every section has sensible defaults,
    so ``UnifiedConfig()`` (zero-config) is always valid.
    """

    trees: TreesConfig = Field(default_factory=TreesConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Factory function
# ---------------------------------------------------------------------------


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``load_hierarchical_config()``.

    Handles missing sections gracefully; anything absent gets defaults.

    Args:
        raw_data: Merged configuration dictionary.

    Returns:
        Validated ``UnifiedConfig`` instance.

    Raises:
        pydantic.ValidationError: If a section has the wrong shape.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)


# ---------------------------------------------------------------------------
# Adapter: UnifiedConfig -> load_config fallbacks
# ---------------------------------------------------------------------------


def to_runtime_config(unified: UnifiedConfig) -> dict:
    """Flatten a ``UnifiedConfig`` into the ``yaml_fallbacks`` dict
    accepted by ``config.load_config``.

    Args:
        unified: The unified config produced by ``build_config()``.

    Returns:
        Dict with keys primary, shared, legacy, cleanup_legacy.
    """
    return {
        "primary": unified.trees.primary,
        "shared": unified.trees.shared,
        "legacy": unified.trees.legacy,
        "cleanup_legacy": unified.sync.cleanup_legacy,
    }
