"""Frontmatter codec: YAML metadata block plus markdown body.

A document looks like::

    ---
    name: foo
    description: does X
    ---

    Body text...

``serialize`` always emits the metadata block (an empty block when there
is no metadata) followed by exactly one blank line.  ``parse`` consumes
that one blank line, so ``parse(serialize(m, b)) == (m, b)`` holds for
any mapping of scalar values and any body text.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

import yaml

from .errors import FrontmatterError

MARKER = "---"

_UNICODE_BREAKS = "\x85\u2028\u2029"

_OPEN_RE = re.compile(r"\A---[ \t]*\r?\n")
_CLOSE_RE = re.compile(r"^---[ \t]*(?:\r?\n|\Z)", re.MULTILINE)


def parse(raw_text: str) -> tuple[dict[str, Any], str]:
    """Split *raw_text* into ``(metadata, body)``.

    Text without an opening marker, or with an opening marker but no
    closing one, has no metadata: the whole text is the body.

    Raises:
        FrontmatterError: If the metadata block is not valid YAML or its
            root is not a mapping.
    """
    opening = _OPEN_RE.match(raw_text)
    if opening is None:
        return {}, raw_text

    rest = raw_text[opening.end() :]
    closing = _CLOSE_RE.search(rest)
    if closing is None:
        return {}, raw_text

    block = rest[: closing.start()]
    body = rest[closing.end() :]

    # Exactly one blank-line separator belongs to the block
    if body.startswith("\r\n"):
        body = body[2:]
    elif body.startswith("\n"):
        body = body[1:]

    try:
        data = yaml.safe_load(block) if block.strip() else None
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"Invalid YAML metadata: {exc}") from exc

    if data is None:
        return {}, body
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"Metadata block must be a mapping, got {type(data).__name__}"
        )
    return data, body


def _dump(metadata: Mapping[str, Any], allow_unicode: bool) -> str:
    return yaml.safe_dump(
        dict(metadata),
        sort_keys=False,
        allow_unicode=allow_unicode,
        default_flow_style=False,
    )


def serialize(metadata: Mapping[str, Any], body: str) -> str:
    """Render *metadata* and *body* as a frontmatter document.

    Unicode is written as-is, except that a block holding one of the
    Unicode line breaks (NEL, LS, PS) is written escaped: the emitter
    would otherwise leave them inside plain or single-quoted scalars,
    where the loader folds them to a space.
    """
    block = ""
    if metadata:
        block = _dump(metadata, allow_unicode=True)
        if any(ch in block for ch in _UNICODE_BREAKS):
            block = _dump(metadata, allow_unicode=False)
    return f"{MARKER}\n{block}{MARKER}\n\n{body}"
