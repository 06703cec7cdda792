"""Exception taxonomy for sync-agents.

Only errors that abort a whole run live here.  Per-item adapter failures
are caught by the engine and recorded as ``ItemError`` entries in the
report instead of being raised.
"""


class SyncAgentsError(Exception):
    """Base class for all sync-agents errors."""


class ConfigError(SyncAgentsError, ValueError):
    """Invalid or inconsistent configuration."""


class FrontmatterError(SyncAgentsError, ValueError):
    """Malformed YAML metadata block in a document."""


class TreeReadError(SyncAgentsError):
    """A tree root exists but cannot be enumerated.

    A missing tree root is *not* an error (discovery yields nothing).
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read tree {path}: {reason}")
        self.path = path
        self.reason = reason


class DocumentMergeError(SyncAgentsError):
    """Read or write failure while merging the project document pair."""
