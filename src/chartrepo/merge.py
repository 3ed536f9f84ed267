"""Combine a freshly built index with a previously published one."""
from __future__ import annotations

from .schema import Catalog
from .utils.logging import get_logger

LOGGER = get_logger(__name__)


def merge_catalogs(local: Catalog, existing: Catalog) -> Catalog:
    """Merge ``existing`` into ``local`` and return ``local``.

    Versions already in ``local`` win; every other version from ``existing``
    is copied over unchanged, tombstones included. ``existing`` is not
    modified.
    """

    carried = 0
    for name in sorted(existing.entries):
        for entry in existing.entries[name]:
            if local.has(entry.name, entry.version):
                LOGGER.debug("Keeping local %s %s over existing entry", entry.name, entry.version)
                continue
            local.entries.setdefault(name, []).append(entry.model_copy(deep=True))
            carried += 1
    LOGGER.debug("Carried %d entries forward from existing index", carried)
    return local
