"""Shared -> Primary back-fill conversion.

The item's structured provenance decides the destination kind: an item
that was generated from a Primary agent becomes a Primary agent document
again, anything else becomes a Primary skill directory.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Any

from sync_agents.constants import SCRIPTS_DIR
from sync_agents.models import Item, ItemKind, Origin, Provenance

from .common import (
    ConversionResult,
    is_script,
    is_secondary_document,
    load_document,
    render_document,
    render_skill,
    unfold_model_from_description,
    with_provenance_header,
)

logger = logging.getLogger(__name__)


def originated_as_agent(item: Item) -> bool:
    """True when the item was generated from a Primary agent."""
    provenance = item.provenance
    return (
        provenance is not None
        and provenance.origin == Origin.PRIMARY
        and provenance.kind == ItemKind.AGENT
    )


def _backfill_provenance(item: Item) -> Provenance:
    return Provenance(origin=Origin.SHARED, kind=ItemKind.SKILL, name=item.name)


def convert_agent(item: Item) -> ConversionResult:
    """Rebuild a Primary agent document from a Shared skill."""
    raw_description = item.metadata.get("description")
    description, model = unfold_model_from_description(
        raw_description if isinstance(raw_description, str) else None
    )

    metadata: dict[str, Any] = {"name": item.name}
    if description:
        metadata["description"] = description
    if model:
        metadata["model"] = model

    provenance = _backfill_provenance(item)
    agent = Item(
        name=item.name,
        kind=ItemKind.AGENT,
        metadata=metadata,
        body=with_provenance_header(item.body, provenance),
        source_path=item.source_path,
        provenance=provenance,
    )
    return ConversionResult(
        item=agent,
        primary_kind=ItemKind.AGENT,
        files={f"{item.name}.md": render_document(agent.metadata, agent.body)},
    )


def convert_skill(item: Item) -> ConversionResult:
    """Rebuild a Primary skill directory from a Shared skill.

    Scripts come back out of ``scripts/`` to the skill root; secondary
    documents keep their metadata as-is.

    Raises:
        FrontmatterError: If a secondary document has malformed metadata.
    """
    metadata = dict(item.metadata)
    if not metadata.get("name"):
        metadata["name"] = item.name

    auxiliary: dict[str, bytes] = {}
    warnings: list[str] = []
    for relative_path, data in item.auxiliary_files.items():
        path = PurePosixPath(relative_path)
        if is_script(relative_path):
            if path.parts[0] == SCRIPTS_DIR and len(path.parts) > 1:
                relative_path = str(PurePosixPath(*path.parts[1:]))
            auxiliary[relative_path] = data
        elif is_secondary_document(relative_path):
            sub_meta, sub_body = load_document(data)
            auxiliary[relative_path] = render_document(
                sub_meta, sub_body.lstrip()
            )
        else:
            warnings.append(
                f"{item.name}/{relative_path}: not a script or document, not copied"
            )

    provenance = _backfill_provenance(item)
    skill = Item(
        name=item.name,
        kind=ItemKind.SKILL,
        metadata=metadata,
        body=with_provenance_header(item.body, provenance),
        auxiliary_files=auxiliary,
        source_path=item.source_path,
        provenance=provenance,
    )
    for warning in warnings:
        logger.warning(warning)
    return ConversionResult(
        item=skill,
        primary_kind=ItemKind.SKILL,
        files=render_skill(skill),
        warnings=warnings,
    )


def convert(item: Item) -> ConversionResult:
    if originated_as_agent(item):
        return convert_agent(item)
    return convert_skill(item)
