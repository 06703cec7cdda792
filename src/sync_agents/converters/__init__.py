"""Item converters, one module per transfer direction.

- ``primary_to_shared`` -- narrow metadata, neutralize tool vocabulary,
  move scripts into ``scripts/``, add a provenance header.
- ``legacy_to_shared`` -- byte-for-byte skill directory copy.
- ``shared_to_primary`` -- recover the origin kind from provenance and
  rebuild a Primary skill or agent.
"""

from .common import (
    ConversionResult,
    documents_equivalent,
    fold_model_into_description,
    neutralize_tool_references,
    parse_provenance,
    project_metadata,
    provenance_header,
    strip_provenance_header,
    unfold_model_from_description,
    with_provenance_header,
)

__all__ = [
    "ConversionResult",
    "documents_equivalent",
    "fold_model_into_description",
    "neutralize_tool_references",
    "parse_provenance",
    "project_metadata",
    "provenance_header",
    "strip_provenance_header",
    "unfold_model_from_description",
    "with_provenance_header",
]
