"""Resolution of chart directories and construction of chart download URLs."""
from __future__ import annotations

import posixpath
from pathlib import Path, PurePath
from urllib.parse import urlsplit, urlunsplit


def normalise_path(path: Path) -> Path:
    """Resolve a chart directory given on the command line to an absolute path."""

    return Path(str(path).replace("\\", "/")).expanduser().resolve()


def url_join(base_url: str, *parts: str) -> str:
    """Append ``parts`` to the path of ``base_url``.

    The base URL's own path is kept, so ``https://host/charts`` and
    ``https://host/charts/`` both resolve ``foo.tgz`` to
    ``https://host/charts/foo.tgz``.
    """

    parsed = urlsplit(base_url)
    base_path = parsed.path
    if parsed.netloc and not base_path:
        base_path = "/"
    joined = posixpath.join(base_path, *(part for part in parts if part))
    return urlunsplit(parsed._replace(path=joined))


def chart_url(base_url: str, rel_path: PurePath) -> str:
    """Return the download URL for a chart at ``rel_path`` below the repository root."""

    relative = rel_path.as_posix()
    if not base_url:
        return relative
    return url_join(base_url, relative)
