"""Orchestrates scanning, building, merging and writing a chart index."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from .builder import build_catalog
from .errors import MergeLoadError, SerializationError
from .merge import merge_catalogs
from .scanner import ChartScanner, ScanConfig
from .schema import Catalog
from .serializer import CatalogFormat, load_catalog, write_catalog
from .utils.clock import Clock, utc_now
from .utils.logging import get_logger

LOGGER = get_logger(__name__)
INDEX_FILENAME = "index.yaml"


class IndexStage(str, Enum):
    IDLE = "idle"
    SCANNED = "scanned"
    BUILT = "built"
    MERGED = "merged"
    SORTED = "sorted"
    WRITTEN = "written"
    DONE = "done"


@dataclass(slots=True)
class IndexRequest:
    """Parameters of a single ``index`` run."""

    directory: Path
    url: str = ""
    merge: Optional[Path] = None
    output_format: CatalogFormat = CatalogFormat.YAML
    exclude_dirs: Sequence[str] = (".git",)
    max_depth: int = 1

    def __post_init__(self) -> None:
        self.directory = Path(self.directory)
        if self.merge is not None:
            self.merge = Path(self.merge)
        self.output_format = CatalogFormat(self.output_format)

    @property
    def output_path(self) -> Path:
        return self.directory / INDEX_FILENAME


@dataclass
class IndexResult:
    catalog: Catalog
    output_path: Path
    stages: List[IndexStage] = field(default_factory=list)


class IndexService:
    """Build ``index.yaml`` for a directory of packaged charts.

    A run walks ``IDLE -> SCANNED -> BUILT -> [MERGED] -> SORTED -> WRITTEN ->
    DONE``. Any failure propagates to the caller and leaves the output file
    untouched.
    """

    def __init__(self, scanner: Optional[ChartScanner] = None, clock: Clock = utc_now) -> None:
        self.scanner = scanner or ChartScanner()
        self.clock = clock

    def load_merge_target(self, path: Path, fmt: CatalogFormat) -> Catalog:
        """Load the index to merge into, bootstrapping an empty one if it is missing."""

        if not path.exists():
            LOGGER.info("Merge target %s does not exist; writing an empty index there", path)
            empty = Catalog.new(self.clock)
            write_catalog(path, empty, fmt)
            return empty
        try:
            return load_catalog(path)
        except SerializationError as exc:
            raise MergeLoadError(f"merge failed: {exc}") from exc

    def run(self, request: IndexRequest) -> IndexResult:
        stages = [IndexStage.IDLE]

        def advance(stage: IndexStage) -> None:
            stages.append(stage)
            LOGGER.info("Index %s: %s", request.directory, stage.value)

        config = ScanConfig(
            root=request.directory,
            exclude_dirs=request.exclude_dirs,
            max_depth=request.max_depth,
        )
        records = list(self.scanner.scan(config))
        advance(IndexStage.SCANNED)

        catalog = build_catalog(request.url, records, clock=self.clock)
        advance(IndexStage.BUILT)

        if request.merge is not None:
            existing = self.load_merge_target(request.merge, request.output_format)
            catalog = merge_catalogs(catalog, existing)
            advance(IndexStage.MERGED)

        catalog.sort_entries()
        advance(IndexStage.SORTED)

        write_catalog(request.output_path, catalog, request.output_format)
        advance(IndexStage.WRITTEN)

        advance(IndexStage.DONE)
        return IndexResult(catalog=catalog, output_path=request.output_path, stages=stages)


def index_directory(
    directory: Path,
    url: str = "",
    merge: Optional[Path] = None,
    json_output: bool = False,
    clock: Clock = utc_now,
) -> IndexResult:
    """Convenience wrapper running :class:`IndexService` with default collaborators."""

    fmt = CatalogFormat.JSON if json_output else CatalogFormat.YAML
    request = IndexRequest(directory=directory, url=url, merge=merge, output_format=fmt)
    return IndexService(clock=clock).run(request)
