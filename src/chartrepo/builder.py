"""Turn scanned chart archives into an index."""
from __future__ import annotations

from typing import Iterable

from .schema import Catalog, CatalogEntry
from .scanner import ScanRecord
from .utils.clock import Clock, utc_now
from .utils.logging import get_logger
from .utils.paths import chart_url

LOGGER = get_logger(__name__)


def build_catalog(base_url: str, records: Iterable[ScanRecord], clock: Clock = utc_now) -> Catalog:
    """Build a catalog with one entry per scanned chart.

    Every entry gets a single download URL: the chart's path relative to the
    scanned directory, prefixed by ``base_url`` when one is given. All
    ``created`` stamps and the catalog's ``generated`` stamp share one clock
    reading.

    Raises :class:`chartrepo.errors.DuplicateVersionError` if two records
    carry the same chart name and version.
    """

    now = clock()
    catalog = Catalog.new(clock=lambda: now)
    for record in records:
        entry = CatalogEntry.from_metadata(
            record.metadata,
            urls=[chart_url(base_url, record.rel_path)],
            digest=record.digest,
            created_at=now,
        )
        catalog.add(entry)
    LOGGER.debug(
        "Built index with %d charts and %d versions",
        len(catalog.entries),
        sum(len(versions) for versions in catalog.entries.values()),
    )
    return catalog
