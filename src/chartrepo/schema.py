"""Pydantic models describing chart metadata and the on-disk index schema."""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

import semver
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from .errors import DuplicateVersionError
from .utils.clock import Clock, utc_now

INDEX_API_VERSION = "v1"

_DIGEST_PATTERN = re.compile(r"^[0-9a-fA-F]+$")


def parse_version(value: str) -> semver.Version:
    """Parse ``value`` as a semantic version, raising ``ValueError`` if it is not one.

    A leading ``v`` is accepted and a missing minor or patch number counts as
    zero, so ``v1.2`` parses as ``1.2.0``. Build metadata takes no part in
    ordering or equality.
    """

    text = value[1:] if value[:1] in ("v", "V") else value
    try:
        return semver.Version.parse(text, optional_minor_and_patch=True)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid chart version {value!r}") from exc


def format_timestamp(value: datetime) -> str:
    """Render ``value`` as an RFC 3339 UTC timestamp."""

    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Maintainer(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    email: Optional[str] = None
    url: Optional[str] = None


class Dependency(BaseModel):
    """A subchart requirement declared in ``Chart.yaml``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str
    version: Optional[str] = None
    repository: Optional[str] = None
    condition: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    enabled: Optional[bool] = None
    import_values: List[Any] = Field(default_factory=list, alias="import-values")
    alias: Optional[str] = None


class ChartFields(BaseModel):
    """Chart metadata shared by ``Chart.yaml`` and index entries."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    version: str
    description: Optional[str] = None
    api_version: Optional[str] = Field(default=None, alias="apiVersion")
    app_version: Optional[str] = Field(default=None, alias="appVersion")
    kube_version: Optional[str] = Field(default=None, alias="kubeVersion")
    type: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    home: Optional[str] = None
    sources: List[str] = Field(default_factory=list)
    maintainers: List[Maintainer] = Field(default_factory=list)
    icon: Optional[str] = None
    condition: Optional[str] = None
    tags: Optional[str] = None
    deprecated: bool = False
    annotations: Dict[str, str] = Field(default_factory=dict)
    dependencies: List[Dependency] = Field(default_factory=list)

    @field_validator("version", "app_version", mode="before")
    @classmethod
    def coerce_scalar(cls, value: Any) -> Any:
        # Hand-written YAML often carries unquoted numbers such as ``version: 1.0``.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("version")
    @classmethod
    def validate_version(cls, value: str) -> str:
        parse_version(value)
        return value

    @property
    def parsed_version(self) -> semver.Version:
        return parse_version(self.version)


class ChartMetadata(ChartFields):
    """Fields read from a chart's ``Chart.yaml``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CatalogEntry(ChartFields):
    """A single published version of a chart.

    Keys not modelled here are kept as extra fields and written back out, so
    entries carried over from an existing index lose nothing.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    created_at: datetime = Field(alias="created")
    removed: bool = False
    digest: str
    urls: List[str] = Field(default_factory=list)

    @field_validator("digest")
    @classmethod
    def validate_digest(cls, value: str) -> str:
        if not _DIGEST_PATTERN.match(value):
            raise ValueError(f"digest must be a hex string; got {value!r}")
        return value

    @field_validator("created_at")
    @classmethod
    def normalise_created(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @model_validator(mode="after")
    def check_urls(self) -> "CatalogEntry":
        if not self.removed and not self.urls:
            raise ValueError(f"chart {self.name} {self.version} has no download URLs")
        return self

    @field_serializer("created_at")
    def serialize_created(self, value: datetime) -> str:
        return format_timestamp(value)

    @classmethod
    def from_metadata(
        cls, metadata: ChartMetadata, *, urls: List[str], digest: str, created_at: datetime
    ) -> "CatalogEntry":
        """Create an entry for a freshly scanned chart."""

        fields = metadata.model_dump(exclude_none=True)
        return cls(**fields, urls=urls, digest=digest, created_at=created_at)

    def as_record(self) -> Dict[str, Any]:
        """Return a JSON-serialisable mapping using the published key names.

        Optional fields left at their defaults, including ``removed: false``,
        are omitted.
        """

        record = self.model_dump(mode="json", by_alias=True, exclude_defaults=True)
        record.setdefault("urls", [])
        return record


class Catalog(BaseModel):
    """A chart repository index: chart name to published versions."""

    model_config = ConfigDict(populate_by_name=True)

    api_version: str = Field(alias="apiVersion", min_length=1)
    generated: datetime
    entries: Dict[str, List[CatalogEntry]]

    @field_validator("generated")
    @classmethod
    def normalise_generated(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @model_validator(mode="after")
    def check_entries(self) -> "Catalog":
        for name, versions in self.entries.items():
            seen = set()
            for entry in versions:
                if entry.name != name:
                    raise ValueError(f"entry {entry.name} {entry.version} listed under {name!r}")
                parsed = entry.parsed_version
                if parsed in seen:
                    raise ValueError(f"duplicate chart version {name} {entry.version}")
                seen.add(parsed)
        return self

    @classmethod
    def new(cls, clock: Clock = utc_now) -> "Catalog":
        """Return an empty catalog stamped with the current time."""

        return cls(api_version=INDEX_API_VERSION, generated=clock(), entries={})

    def get(self, name: str, version: str) -> Optional[CatalogEntry]:
        wanted = parse_version(version)
        for entry in self.entries.get(name, []):
            if entry.parsed_version == wanted:
                return entry
        return None

    def has(self, name: str, version: str) -> bool:
        return self.get(name, version) is not None

    def add(self, entry: CatalogEntry) -> None:
        """Append ``entry``, rejecting a second copy of the same version."""

        existing = self.get(entry.name, entry.version)
        if existing is not None:
            raise DuplicateVersionError(
                entry.name,
                entry.version,
                f"{', '.join(existing.urls)} and {', '.join(entry.urls)}",
            )
        self.entries.setdefault(entry.name, []).append(entry)

    def sort_entries(self) -> None:
        """Order every chart's versions newest first."""

        for versions in self.entries.values():
            versions.sort(key=lambda entry: entry.parsed_version, reverse=True)

    def iter_entries(self) -> Iterator[CatalogEntry]:
        for name in sorted(self.entries):
            yield from self.entries[name]

    def as_record(self) -> Dict[str, Any]:
        """Return the published document with chart names in sorted order."""

        return {
            "apiVersion": self.api_version,
            "entries": {
                name: [entry.as_record() for entry in self.entries[name]]
                for name in sorted(self.entries)
            },
            "generated": format_timestamp(self.generated),
        }


class CatalogSummary(BaseModel):
    """Aggregate summary information of an index."""

    total_charts: int
    total_versions: int
    removed_versions: int
    latest: Dict[str, str]

    @classmethod
    def from_catalog(cls, catalog: Catalog) -> "CatalogSummary":
        total = 0
        removed = 0
        latest: Dict[str, str] = {}
        for name in sorted(catalog.entries):
            live: List[CatalogEntry] = []
            for entry in catalog.entries[name]:
                total += 1
                if entry.removed:
                    removed += 1
                else:
                    live.append(entry)
            if live:
                latest[name] = max(live, key=lambda entry: entry.parsed_version).version
        return cls(
            total_charts=len(catalog.entries),
            total_versions=total,
            removed_versions=removed,
            latest=latest,
        )
