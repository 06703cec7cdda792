"""Legacy -> Shared migration: a byte-for-byte skill directory copy.

Legacy and Shared already share format conventions, so nothing is
rewritten.  Every file is copied from disk rather than re-serialized so
the copy is exact.
"""

from __future__ import annotations

from sync_agents.constants import MANIFEST_NAME
from sync_agents.models import Item, ItemKind

from .common import ConversionResult


def convert(item: Item) -> ConversionResult:
    """Plan a copy of a Legacy skill directory, unchanged.

    Raises:
        ValueError: If the item has no source directory.
    """
    if item.source_path is None:
        raise ValueError(f"Legacy item {item.name} has no source directory")

    copies = {f"{item.name}/{MANIFEST_NAME}": item.source_path / MANIFEST_NAME}
    for relative_path in item.auxiliary_files:
        copies[f"{item.name}/{relative_path}"] = item.source_path / relative_path

    return ConversionResult(item=item, primary_kind=ItemKind.SKILL, copies=copies)
