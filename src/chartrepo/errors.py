"""Exception hierarchy raised while building a chart repository index."""
from __future__ import annotations


class ChartRepoError(Exception):
    """Base class for all index build failures."""


class ScanError(ChartRepoError):
    """The chart directory is unreadable or holds an unparsable chart."""


class DuplicateVersionError(ChartRepoError):
    """Two scanned charts claim the same name and version."""

    def __init__(self, name: str, version: str, detail: str = "") -> None:
        self.name = name
        self.version = version
        message = f"duplicate chart version {name} {version}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class MergeLoadError(ChartRepoError):
    """An existing index given for merging could not be loaded."""


class SerializationError(ChartRepoError):
    """An index could not be decoded or written."""
