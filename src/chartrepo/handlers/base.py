"""Base class for readers that pull chart metadata out of packaged artifacts."""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable

from ..schema import ChartMetadata


class ChartMetadataReader(ABC):
    """Abstract base class for chart archive readers."""

    extensions: Iterable[str] = ()

    def sniff(self, path: Path) -> bool:
        """Return ``True`` if ``path`` looks like an archive this reader understands."""

        name = path.name.lower()
        return any(name.endswith(ext.lower()) for ext in self.extensions)

    @abstractmethod
    def extract(self, path: Path) -> ChartMetadata:
        """Return the metadata of the chart packaged at ``path``.

        Raises :class:`chartrepo.errors.ScanError` when the archive is
        unreadable or carries no valid chart definition.
        """
