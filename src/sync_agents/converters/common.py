"""Common types and utilities for item conversion between ecosystems."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

from sync_agents import frontmatter
from sync_agents.constants import MANIFEST_NAME, SCRIPT_SUFFIXES, TOOL_NAME
from sync_agents.errors import FrontmatterError
from sync_agents.file_handler import decode_bytes
from sync_agents.models import Item, ItemKind, Origin, Provenance

# =============================================================================
# Tool vocabulary
# =============================================================================
#
# Primary documents address the tools of Primary's own runtime by name.
# The Shared ecosystem has no such vocabulary, so these phrases are
# rewritten into capability-neutral wording on the way out.
# =============================================================================

_TOOL_PHRASES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bUse the Read tool\b"), "Read the file"),
    (re.compile(r"\bUse the Write tool\b"), "Write to the file"),
    (re.compile(r"\bUse the Glob tool\b"), "Search for files"),
    (re.compile(r"\bUse the Grep tool\b"), "Search file contents"),
    (re.compile(r"\bUse the Edit tool\b"), "Edit the file"),
    (re.compile(r"\bUse the Bash tool\b"), "Run the command"),
)

_TOOL_NAMES: tuple[tuple[str, str], ...] = (
    ("`Glob`", "file search"),
    ("`Grep`", "content search"),
    ("`Read`", "file read"),
)


def neutralize_tool_references(text: str) -> str:
    """Rewrite Primary tool-invocation phrases into neutral wording.

    Examples:
        >>> neutralize_tool_references("Use the Read tool to inspect.")
        'Read the file to inspect.'
        >>> neutralize_tool_references("Prefer `Grep` over scanning.")
        'Prefer content search over scanning.'
    """
    for pattern, replacement in _TOOL_PHRASES:
        text = pattern.sub(replacement, text)
    for name, replacement in _TOOL_NAMES:
        text = text.replace(name, replacement)
    return text


# =============================================================================
# Provenance header
# =============================================================================

_ORIGIN_LABELS: dict[Origin, str] = {
    Origin.PRIMARY: "Claude Code",
    Origin.SHARED: "shared",
}

# "codex" is what Shared items were called before the Shared tree moved.
_LABEL_ORIGINS: dict[str, Origin] = {
    "claude code": Origin.PRIMARY,
    "shared": Origin.SHARED,
    "codex": Origin.SHARED,
}

_HEADER_LINE_RE = re.compile(
    r"\A>[ \t]*Auto-generated from .* by "
    + re.escape(TOOL_NAME)
    + r"[ \t]*(?:\r?\n|\Z)(?:[ \t]*\r?\n)?",
    re.IGNORECASE,
)

_PROVENANCE_RE = re.compile(
    r"\A>[ \t]*Auto-generated from (?P<label>.+?) (?P<kind>skill|agent)\b"
    r"(?:[ \t]+`(?P<name>[^`]*)`)?.*? by " + re.escape(TOOL_NAME),
    re.IGNORECASE,
)


def provenance_header(provenance: Provenance) -> str:
    """Render the one-line provenance header plus its blank separator."""
    label = _ORIGIN_LABELS[provenance.origin]
    return (
        f"> Auto-generated from {label} {provenance.kind.value} "
        f"`{provenance.name}` by {TOOL_NAME}\n\n"
    )


def parse_provenance(body: str) -> Provenance | None:
    """Recover structured provenance from a body's leading header line.

    Returns ``None`` when the body carries no header, or a header whose
    origin label is not recognised.
    """
    match = _PROVENANCE_RE.match(body.lstrip())
    if match is None:
        return None
    origin = _LABEL_ORIGINS.get(match.group("label").strip().lower())
    if origin is None:
        return None
    return Provenance(
        origin=origin,
        kind=ItemKind(match.group("kind").lower()),
        name=match.group("name") or "",
    )


def strip_provenance_header(body: str) -> str:
    """Remove a leading provenance header (if any) and leading whitespace."""
    return _HEADER_LINE_RE.sub("", body.lstrip(), count=1).lstrip()


def with_provenance_header(body: str, provenance: Provenance) -> str:
    """Prepend a fresh header, replacing any header already present."""
    return provenance_header(provenance) + strip_provenance_header(body)


# =============================================================================
# Metadata projection
# =============================================================================

SHARED_FIELDS: tuple[str, ...] = ("name", "description")

_MODEL_MARKER = "Original model: "
_MODEL_FOLD_RE = re.compile(r"(?:^|\.\s)" + re.escape(_MODEL_MARKER) + r"(.+)$")


def project_metadata(metadata: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only the fields the Shared ecosystem understands."""
    return {key: metadata[key] for key in SHARED_FIELDS if metadata.get(key)}


def fold_model_into_description(metadata: Mapping[str, Any]) -> dict[str, Any]:
    """Project agent metadata, folding ``model`` into the description.

    Examples:
        >>> fold_model_into_description(
        ...     {"name": "bar", "description": "helps", "model": "m1"}
        ... )
        {'name': 'bar', 'description': 'helps. Original model: m1'}
    """
    projected: dict[str, Any] = {}
    if metadata.get("name"):
        projected["name"] = metadata["name"]

    parts: list[str] = []
    if metadata.get("description"):
        parts.append(str(metadata["description"]))
    if metadata.get("model"):
        parts.append(f"{_MODEL_MARKER}{metadata['model']}")
    if parts:
        projected["description"] = ". ".join(parts)
    return projected


def unfold_model_from_description(
    description: str | None,
) -> tuple[str | None, str | None]:
    """Reverse ``fold_model_into_description``.

    Returns:
        Tuple of (description, model); either may be ``None``.
    """
    if not description:
        return None, None
    match = _MODEL_FOLD_RE.search(description)
    if match is None:
        return description, None
    model = match.group(1).strip() or None
    stripped = description[: match.start()].strip() or None
    return stripped, model


# =============================================================================
# Conversion result
# =============================================================================


def is_script(relative_path: str) -> bool:
    return PurePosixPath(relative_path).suffix.lower() in SCRIPT_SUFFIXES


def is_secondary_document(relative_path: str) -> bool:
    """Top-level markdown file other than the manifest."""
    path = PurePosixPath(relative_path)
    return len(path.parts) == 1 and path.suffix.lower() == ".md"


@dataclass
class ConversionResult:
    """Output of converting one item for a destination tree.

    Attributes:
        item: The item as it exists in the destination ecosystem.
        primary_kind: Kind of the item in Primary's namespace, used for
            reporting (a Primary agent stays an agent in Shared reports).
        files: Destination files keyed by POSIX path relative to the
            destination tree's directory for ``item.kind``.
        copies: Source files copied verbatim, keyed the same way as
            *files*.
        warnings: Non-fatal notes about auxiliary files left behind.
    """

    item: Item
    primary_kind: ItemKind
    files: dict[str, bytes] = field(default_factory=dict)
    copies: dict[str, Path] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


def render_document(metadata: Mapping[str, Any], body: str) -> bytes:
    return frontmatter.serialize(metadata, body).encode("utf-8")


def render_skill(item: Item) -> dict[str, bytes]:
    """Lay out a skill item as ``<name>/SKILL.md`` plus its auxiliary files."""
    files = {
        f"{item.name}/{MANIFEST_NAME}": render_document(
            item.metadata, item.body
        )
    }
    for relative_path, data in item.auxiliary_files.items():
        files[f"{item.name}/{relative_path}"] = data
    return files


def load_document(data: bytes) -> tuple[dict[str, Any], str]:
    """Decode and parse an auxiliary markdown document."""
    text, _encoding = decode_bytes(data)
    return frontmatter.parse(text)


def documents_equivalent(
    existing: str, planned: str, name: str | None = None
) -> bool:
    """Compare two Shared documents ignoring the generated provenance header.

    Only the metadata fields Shared keeps are compared, so fields a
    projection would drop anyway never count as a difference.

    When *name* is given, a planned ``name`` equal to it matches an
    existing document that has no ``name`` at all (back-fill fills that
    field in from the directory name).

    A document that cannot be parsed is never equivalent.  A header from
    the same origin ecosystem that names a different kind or item is
    stale, so the documents are not equivalent either.
    """
    try:
        existing_meta, existing_body = frontmatter.parse(existing)
        planned_meta, planned_body = frontmatter.parse(planned)
    except FrontmatterError:
        return False

    existing_origin = parse_provenance(existing_body)
    planned_origin = parse_provenance(planned_body)
    if (
        existing_origin is not None
        and planned_origin is not None
        and existing_origin.origin == planned_origin.origin
        and existing_origin != planned_origin
    ):
        return False

    existing_fields = project_metadata(existing_meta)
    planned_fields = project_metadata(planned_meta)
    if (
        name is not None
        and "name" not in existing_fields
        and planned_fields.get("name") == name
    ):
        del planned_fields["name"]

    same_metadata = existing_fields == planned_fields
    same_body = strip_provenance_header(existing_body) == strip_provenance_header(
        planned_body
    )
    return same_metadata and same_body
