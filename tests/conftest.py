from __future__ import annotations

import io
import logging
import tarfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

import pytest
import yaml
from loguru import logger

from chartrepo.schema import Catalog, CatalogEntry
from chartrepo.utils.logging import LoguruHandler

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _configure_test_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("NO_COLOR", "1")
    yield
    logger.remove()
    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, LoguruHandler)]:
        root.removeHandler(handler)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


def write_chart(
    directory: Path,
    name: str,
    version: str,
    *,
    filename: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
    payload: bytes = b"",
) -> Path:
    """Package a minimal chart as ``<name>-<version>.tgz`` in ``directory``."""

    directory.mkdir(parents=True, exist_ok=True)
    chart_yaml = {"apiVersion": "v2", "name": name, "version": version, **(extra or {})}
    path = directory / (filename or f"{name}-{version}.tgz")
    with tarfile.open(path, mode="w:gz") as archive:
        for member, content in (
            (f"{name}/Chart.yaml", yaml.safe_dump(chart_yaml).encode("utf-8")),
            (f"{name}/values.yaml", b"replicaCount: 1\n" + payload),
        ):
            info = tarfile.TarInfo(member)
            info.size = len(content)
            archive.addfile(info, io.BytesIO(content))
    return path


@pytest.fixture
def make_chart() -> Callable[..., Path]:
    return write_chart


def build_entry(
    name: str,
    version: str,
    *,
    digest: str = "0" * 64,
    created: datetime = FIXED_NOW,
    urls: Optional[List[str]] = None,
    removed: bool = False,
) -> CatalogEntry:
    return CatalogEntry(
        name=name,
        version=version,
        digest=digest,
        created_at=created,
        urls=[f"{name}-{version}.tgz"] if urls is None else urls,
        removed=removed,
    )


@pytest.fixture
def make_entry() -> Callable[..., CatalogEntry]:
    return build_entry


@pytest.fixture
def make_catalog() -> Callable[..., Catalog]:
    def _make(*entries: CatalogEntry, generated: datetime = FIXED_NOW) -> Catalog:
        catalog = Catalog.new(lambda: generated)
        for entry in entries:
            catalog.add(entry)
        return catalog

    return _make
