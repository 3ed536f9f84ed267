"""Configuration helpers for chartrepo."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..errors import ChartRepoError


class IndexConfig(BaseModel):
    """Defaults for ``chartrepo index``; explicit command line flags win."""

    url: str = ""
    merge: Optional[Path] = None
    json_output: bool = False
    exclude_dirs: Tuple[str, ...] = (".git",)
    max_depth: int = Field(default=1, ge=0)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        allowed = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        value = value.upper()
        if value not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}; got {value!r}")
        return value


def load_config(path: Path) -> IndexConfig:
    """Load configuration from a YAML file."""

    data: Dict[str, Any] = {}
    if path.exists():
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ChartRepoError(f"invalid config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ChartRepoError(f"invalid config file {path}: expected a mapping")
    try:
        return IndexConfig(**data)
    except ValidationError as exc:
        raise ChartRepoError(f"invalid config file {path}: {exc}") from exc
