"""Primary -> Shared conversion for skills and agents.

Metadata is narrowed to ``name`` and ``description``; everything else
(colors, tool allow-lists, model hints) only means something inside
Primary's runtime.  Agents keep their model hint by folding it into the
description.  Bodies lose Primary's tool vocabulary and gain a
provenance header so the reverse direction can tell where they came from.

Layout changes for skills:

- root-level scripts move into ``scripts/``
- secondary markdown documents are re-serialized with the same
  metadata projection and vocabulary rewrite as the manifest
- any other file stays behind (reported as a warning)
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath

from sync_agents.constants import SCRIPTS_DIR
from sync_agents.models import Item, ItemKind, Origin, Provenance

from .common import (
    ConversionResult,
    fold_model_into_description,
    is_script,
    is_secondary_document,
    load_document,
    neutralize_tool_references,
    project_metadata,
    render_document,
    render_skill,
    with_provenance_header,
)

logger = logging.getLogger(__name__)


def _script_destination(relative_path: str) -> str:
    path = PurePosixPath(relative_path)
    if path.parts[0] == SCRIPTS_DIR:
        return relative_path
    if len(path.parts) == 1:
        return f"{SCRIPTS_DIR}/{path.name}"
    return f"{SCRIPTS_DIR}/{relative_path}"


def convert_skill(item: Item) -> ConversionResult:
    """Convert a Primary skill into a Shared skill directory.

    Raises:
        FrontmatterError: If a secondary document has malformed metadata.
    """
    provenance = Provenance(
        origin=Origin.PRIMARY, kind=ItemKind.SKILL, name=item.name
    )
    body = with_provenance_header(
        neutralize_tool_references(item.body), provenance
    )

    auxiliary: dict[str, bytes] = {}
    warnings: list[str] = []
    for relative_path, data in item.auxiliary_files.items():
        if is_secondary_document(relative_path):
            sub_meta, sub_body = load_document(data)
            auxiliary[relative_path] = render_document(
                project_metadata(sub_meta),
                neutralize_tool_references(sub_body).lstrip(),
            )
        elif is_script(relative_path):
            auxiliary[_script_destination(relative_path)] = data
        else:
            warnings.append(
                f"{item.name}/{relative_path}: not a script or document, not copied"
            )

    shared = Item(
        name=item.name,
        kind=ItemKind.SKILL,
        metadata=project_metadata(item.metadata),
        body=body,
        auxiliary_files=auxiliary,
        source_path=item.source_path,
        provenance=provenance,
    )
    for warning in warnings:
        logger.warning(warning)
    return ConversionResult(
        item=shared,
        primary_kind=ItemKind.SKILL,
        files=render_skill(shared),
        warnings=warnings,
    )


def convert_agent(item: Item) -> ConversionResult:
    """Convert a Primary agent document into a Shared skill directory."""
    provenance = Provenance(
        origin=Origin.PRIMARY, kind=ItemKind.AGENT, name=item.name
    )
    shared = Item(
        name=item.name,
        kind=ItemKind.SKILL,
        metadata=fold_model_into_description(item.metadata),
        body=with_provenance_header(
            neutralize_tool_references(item.body), provenance
        ),
        source_path=item.source_path,
        provenance=provenance,
    )
    return ConversionResult(
        item=shared,
        primary_kind=ItemKind.AGENT,
        files=render_skill(shared),
    )


def convert(item: Item) -> ConversionResult:
    """Dispatch on the Primary item's kind."""
    if item.kind == ItemKind.AGENT:
        return convert_agent(item)
    return convert_skill(item)
