"""Filesystem scanning utilities for building the chart index."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .errors import ScanError
from .handlers.base import ChartMetadataReader
from .handlers.chart import TarballChartReader
from .schema import ChartMetadata
from .utils.hashing import file_sha256
from .utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class ScanConfig:
    """Configuration parameters controlling scan behaviour."""

    root: Path
    exclude_dirs: Sequence[str] = (".git",)
    max_depth: int = 1
    follow_symlinks: bool = False

    def __post_init__(self) -> None:
        self.root = Path(self.root)
        if self.max_depth < 0:
            raise ValueError("max_depth must be >= 0")


@dataclass(slots=True)
class ScanRecord:
    """A packaged chart found on disk."""

    path: Path
    rel_path: Path
    metadata: ChartMetadata
    digest: str

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def version(self) -> str:
        return self.metadata.version

    @property
    def filename(self) -> str:
        return self.path.name


class ChartScanner:
    """Scan a directory and dispatch chart archives to metadata readers."""

    readers: List[ChartMetadataReader]

    def __init__(self, readers: Optional[Sequence[ChartMetadataReader]] = None) -> None:
        self.readers = list(readers) if readers else [TarballChartReader()]

    def _select_reader(self, path: Path) -> Optional[ChartMetadataReader]:
        for reader in self.readers:
            if reader.sniff(path):
                return reader
        return None

    def _read(self, path: Path, root: Path, reader: ChartMetadataReader) -> ScanRecord:
        metadata = reader.extract(path)
        try:
            digest = file_sha256(path)
        except OSError as exc:
            raise ScanError(f"{path.name}: unable to hash chart archive: {exc}") from exc
        return ScanRecord(path=path, rel_path=path.relative_to(root), metadata=metadata, digest=digest)

    def scan(self, config: ScanConfig) -> Iterator[ScanRecord]:
        """Yield a record for every chart archive below ``config.root``.

        A file claimed by a reader but not readable as a chart aborts the scan
        with :class:`ScanError`; other files are ignored.
        """

        root = config.root
        if not root.is_dir():
            raise ScanError(f"chart directory {root} does not exist or is not a directory")
        exclude_dirs = {name.lower() for name in config.exclude_dirs}

        def on_walk_error(err: OSError) -> None:
            raise ScanError(f"unable to read directory {err.filename}: {err.strerror or err}") from err

        for dirpath, dirnames, filenames in os.walk(
            root, followlinks=config.follow_symlinks, onerror=on_walk_error
        ):
            current = Path(dirpath)
            depth = len(current.relative_to(root).parts)
            if depth >= config.max_depth:
                dirnames[:] = []
            else:
                dirnames[:] = [d for d in dirnames if d.lower() not in exclude_dirs]
            for filename in filenames:
                path = current / filename
                reader = self._select_reader(path)
                if reader is None:
                    LOGGER.debug("Skipping %s: not a chart archive", path)
                    continue
                record = self._read(path, root, reader)
                LOGGER.debug("Found chart %s %s at %s", record.name, record.version, record.rel_path)
                yield record
