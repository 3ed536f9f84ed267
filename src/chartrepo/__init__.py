"""Build, merge and serialize chart repository indexes."""

from .builder import build_catalog
from .errors import (
    ChartRepoError,
    DuplicateVersionError,
    MergeLoadError,
    ScanError,
    SerializationError,
)
from .merge import merge_catalogs
from .scanner import ChartScanner, ScanConfig, ScanRecord
from .schema import Catalog, CatalogEntry, CatalogSummary, ChartMetadata
from .serializer import CatalogFormat, decode_catalog, encode_catalog, load_catalog, write_catalog
from .service import IndexRequest, IndexResult, IndexService, IndexStage, index_directory

__all__ = [
    "build_catalog",
    "ChartRepoError",
    "DuplicateVersionError",
    "MergeLoadError",
    "ScanError",
    "SerializationError",
    "merge_catalogs",
    "ChartScanner",
    "ScanConfig",
    "ScanRecord",
    "Catalog",
    "CatalogEntry",
    "CatalogSummary",
    "ChartMetadata",
    "CatalogFormat",
    "decode_catalog",
    "encode_catalog",
    "load_catalog",
    "write_catalog",
    "IndexRequest",
    "IndexResult",
    "IndexService",
    "IndexStage",
    "index_directory",
]
