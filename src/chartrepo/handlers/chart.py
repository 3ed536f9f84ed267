"""Reader for charts packaged as gzip tarballs."""
from __future__ import annotations

import tarfile
import zlib
from pathlib import Path, PurePosixPath
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from ..errors import ScanError
from ..schema import ChartMetadata
from ..utils.logging import get_logger
from .base import ChartMetadataReader

LOGGER = get_logger(__name__)
CHART_FILE = "Chart.yaml"


class TarballChartReader(ChartMetadataReader):
    """Read ``<chart>/Chart.yaml`` from a ``.tgz`` chart package."""

    extensions = (".tgz",)

    def _find_chart_file(self, archive: tarfile.TarFile) -> Optional[tarfile.TarInfo]:
        for member in archive.getmembers():
            parts = PurePosixPath(member.name.replace("\\", "/")).parts
            if len(parts) == 2 and parts[1] == CHART_FILE and member.isfile():
                return member
        return None

    def extract(self, path: Path) -> ChartMetadata:
        try:
            with tarfile.open(path, mode="r:gz") as archive:
                member = self._find_chart_file(archive)
                if member is None:
                    raise ScanError(f"{path.name}: no {CHART_FILE} found in chart archive")
                handle = archive.extractfile(member)
                if handle is None:
                    raise ScanError(f"{path.name}: unable to read {member.name}")
                with handle:
                    raw = handle.read()
        except (tarfile.TarError, OSError, EOFError, zlib.error) as exc:
            raise ScanError(f"{path.name}: unable to open chart archive: {exc}") from exc

        try:
            document: Any = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ScanError(f"{path.name}: invalid {CHART_FILE}: {exc}") from exc
        if not isinstance(document, dict):
            raise ScanError(f"{path.name}: {CHART_FILE} is not a mapping")
        try:
            metadata = ChartMetadata.model_validate(document)
        except ValidationError as exc:
            raise ScanError(f"{path.name}: invalid {CHART_FILE}: {exc}") from exc
        LOGGER.debug("Read chart %s %s from %s", metadata.name, metadata.version, path)
        return metadata
