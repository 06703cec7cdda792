"""File handler module: filesystem capability and encoding-aware decoding.

The sync core never touches ``pathlib`` or ``shutil`` for mutations
directly.  It goes through the narrow ``FileSystem`` interface below so
tests can inject failures, and so every mutation happens in one place.
All calls are local and synchronous; any of them may raise ``OSError``.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Protocol

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)


# =============================================================================
# Capability interface
# =============================================================================


class FileSystem(Protocol):
    """Filesystem operations consumed by discovery, adapters, and the engine."""

    def exists(self, path: Path) -> bool: ...

    def list_entries(self, directory: Path) -> list[tuple[str, bool]]: ...

    def read_file(self, path: Path) -> bytes: ...

    def write_file(self, path: Path, data: bytes) -> None: ...

    def copy_file(self, src: Path, dst: Path) -> None: ...

    def remove_tree(self, path: Path) -> None: ...

    def stat_mtime(self, path: Path) -> float: ...


class LocalFileSystem:
    """``FileSystem`` backed by the local disk."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def list_entries(self, directory: Path) -> list[tuple[str, bool]]:
        """List ``(name, is_directory)`` pairs sorted by name.

        Raises:
            FileNotFoundError: If *directory* does not exist.
            NotADirectoryError: If *directory* is a file.
        """
        return sorted(
            (entry.name, entry.is_dir()) for entry in directory.iterdir()
        )

    def read_file(self, path: Path) -> bytes:
        return path.read_bytes()

    def write_file(self, path: Path, data: bytes) -> None:
        """Write *data* to *path*, creating parent directories as needed."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def copy_file(self, src: Path, dst: Path) -> None:
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)

    def remove_tree(self, path: Path) -> None:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()

    def stat_mtime(self, path: Path) -> float:
        return path.stat().st_mtime


# =============================================================================
# Text decoding
# =============================================================================


def decode_bytes(raw: bytes) -> tuple[str, str]:
    """Decode document bytes with automatic encoding detection.

    UTF-8 (with or without BOM) is tried first since nearly every skill
    and agent document is UTF-8.  Anything else goes through
    charset-normalizer, falling back to lossy UTF-8 when detection fails.

    Args:
        raw: Raw file content.

    Returns:
        Tuple of (content_string, detected_encoding).
    """
    if not raw:
        return ("", "utf-8")

    try:
        return (raw.decode("utf-8-sig"), "utf-8")
    except UnicodeDecodeError:
        pass

    result = from_bytes(raw).best()
    if result is None:
        logger.debug("Encoding detection failed; decoding as lossy utf-8")
        return (raw.decode("utf-8", errors="replace"), "utf-8")

    encoding = result.encoding
    # ascii is a strict subset of utf-8
    if encoding == "ascii":
        encoding = "utf-8"
    return (str(result), encoding)


def read_text(fs: FileSystem, path: Path) -> str:
    """Read *path* through *fs* and decode it to text."""
    content, encoding = decode_bytes(fs.read_file(path))
    if encoding != "utf-8":
        logger.debug("Decoded %s as %s", path, encoding)
    return content
