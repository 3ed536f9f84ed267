from __future__ import annotations

from pathlib import Path, PurePosixPath

import pytest

from chartrepo.errors import ChartRepoError
from chartrepo.utils.config import IndexConfig, load_config
from chartrepo.utils.paths import chart_url, normalise_path, url_join


def test_load_config_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.yml")
    assert isinstance(config, IndexConfig)
    assert config.url == ""
    assert config.max_depth == 1
    assert config.exclude_dirs == (".git",)


def test_load_config_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_text("url: https://charts.example.com\nmerge: published/index.yaml\nexclude_dirs: [.git, tmp]\n")
    config = load_config(path)
    assert config.merge == Path("published/index.yaml")
    assert config.exclude_dirs == (".git", "tmp")


@pytest.mark.parametrize("content", ["- a list\n", "log_level: loud\n", "max_depth: -1\n", "url: [\n"])
def test_load_config_rejects_invalid(tmp_path: Path, content: str) -> None:
    path = tmp_path / "config.yml"
    path.write_text(content)
    with pytest.raises(ChartRepoError, match="invalid config file"):
        load_config(path)


def test_normalise_path(tmp_path: Path) -> None:
    test_path = tmp_path / "folder" / "file.txt"
    test_path.parent.mkdir(parents=True)
    test_path.write_text("data")
    resolved = normalise_path(Path(str(test_path)))
    assert resolved.exists()
    assert resolved.is_absolute()


@pytest.mark.parametrize(
    "base, parts, expected",
    [
        ("https://example.com", ("a.tgz",), "https://example.com/a.tgz"),
        ("https://example.com/repo/", ("sub", "a.tgz"), "https://example.com/repo/sub/a.tgz"),
        ("https://example.com/repo?x=1", ("a.tgz",), "https://example.com/repo/a.tgz?x=1"),
        ("charts", ("a.tgz",), "charts/a.tgz"),
    ],
)
def test_url_join(base: str, parts: tuple, expected: str) -> None:
    assert url_join(base, *parts) == expected


def test_chart_url_without_base() -> None:
    assert chart_url("", PurePosixPath("stable/a-1.0.0.tgz")) == "stable/a-1.0.0.tgz"
