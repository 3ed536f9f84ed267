"""Read and write chart indexes as YAML or JSON."""
from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .errors import SerializationError
from .schema import Catalog
from .utils.logging import get_logger

LOGGER = get_logger(__name__)
FILE_MODE = 0o644


class CatalogFormat(str, Enum):
    YAML = "yaml"
    JSON = "json"


class CatalogEncoder(ABC):
    """Converts a catalog to and from one textual encoding."""

    format: CatalogFormat

    @abstractmethod
    def dumps(self, record: Dict[str, Any]) -> str:
        """Render a published index document."""

    @abstractmethod
    def loads(self, text: str) -> Any:
        """Parse text into a document; raise ``ValueError`` on malformed input."""

    def encode(self, catalog: Catalog) -> bytes:
        return self.dumps(catalog.as_record()).encode("utf-8")

    def decode(self, data: bytes) -> Catalog:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SerializationError(f"index is not valid UTF-8: {exc}") from exc
        try:
            document = self.loads(text)
        except ValueError as exc:
            raise SerializationError(f"unable to parse {self.format.value} index: {exc}") from exc
        return _catalog_from_document(document)


class YamlCatalogEncoder(CatalogEncoder):
    format = CatalogFormat.YAML

    def dumps(self, record: Dict[str, Any]) -> str:
        return yaml.safe_dump(record, sort_keys=False, default_flow_style=False, allow_unicode=True)

    def loads(self, text: str) -> Any:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(str(exc)) from exc


class JsonCatalogEncoder(CatalogEncoder):
    format = CatalogFormat.JSON

    def dumps(self, record: Dict[str, Any]) -> str:
        return json.dumps(record, indent=2, ensure_ascii=False) + "\n"

    def loads(self, text: str) -> Any:
        return json.loads(text)


ENCODERS: Dict[CatalogFormat, CatalogEncoder] = {
    CatalogFormat.YAML: YamlCatalogEncoder(),
    CatalogFormat.JSON: JsonCatalogEncoder(),
}


def get_encoder(fmt: CatalogFormat) -> CatalogEncoder:
    return ENCODERS[CatalogFormat(fmt)]


def sniff_format(data: bytes) -> CatalogFormat:
    """Guess the encoding of a stored index from its first character."""

    if data.lstrip().startswith(b"{"):
        return CatalogFormat.JSON
    return CatalogFormat.YAML


def _catalog_from_document(document: Any) -> Catalog:
    if not isinstance(document, dict):
        raise SerializationError("index document is not a mapping")
    if not document.get("apiVersion"):
        raise SerializationError("no API version specified")
    if "entries" not in document:
        raise SerializationError("index has no entries section")
    if not isinstance(document["entries"], dict):
        raise SerializationError("index entries section is not a mapping")
    if "generated" not in document:
        raise SerializationError("index has no generated timestamp")
    try:
        return Catalog.model_validate(document)
    except ValidationError as exc:
        raise SerializationError(f"invalid index: {exc}") from exc


def encode_catalog(catalog: Catalog, fmt: CatalogFormat = CatalogFormat.YAML) -> bytes:
    return get_encoder(fmt).encode(catalog)


def decode_catalog(data: bytes, fmt: Optional[CatalogFormat] = None) -> Catalog:
    """Parse a stored index; the encoding is sniffed when ``fmt`` is omitted."""

    return get_encoder(fmt or sniff_format(data)).decode(data)


def load_catalog(path: Path, fmt: Optional[CatalogFormat] = None) -> Catalog:
    """Read and parse the index stored at ``path``."""

    try:
        data = path.read_bytes()
    except OSError as exc:
        raise SerializationError(f"unable to read index {path}: {exc}") from exc
    return decode_catalog(data, fmt)


def _atomic_write_bytes(path: Path, payload: bytes) -> None:
    """Atomically replace ``path`` with ``payload``."""

    handle = tempfile.NamedTemporaryFile("wb", dir=path.parent, prefix=f".{path.name}.", delete=False)
    temp_path = Path(handle.name)
    try:
        with handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(temp_path, FILE_MODE)
        temp_path.replace(path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def write_catalog(path: Path, catalog: Catalog, fmt: CatalogFormat = CatalogFormat.YAML) -> None:
    """Encode ``catalog`` and write it to ``path``."""

    payload = encode_catalog(catalog, fmt)
    try:
        _atomic_write_bytes(path, payload)
    except OSError as exc:
        raise SerializationError(f"unable to write index {path}: {exc}") from exc
    LOGGER.info("Wrote %s index to %s", CatalogFormat(fmt).value, path)
