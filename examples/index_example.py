"""Example script showing how to build and merge an index programmatically."""
from __future__ import annotations

import sys
from pathlib import Path

from chartrepo import CatalogSummary, IndexRequest, IndexService
from chartrepo.serializer import CatalogFormat
from chartrepo.utils.logging import configure_logging


def main(directory: str, url: str = "") -> None:
    configure_logging("INFO")
    request = IndexRequest(
        directory=Path(directory),
        url=url,
        merge=Path(directory) / "index.yaml",
        output_format=CatalogFormat.YAML,
    )
    result = IndexService().run(request)
    print(CatalogSummary.from_catalog(result.catalog).model_dump_json(indent=2))


if __name__ == "__main__":
    main(*sys.argv[1:3])
