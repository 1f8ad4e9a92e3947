from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, field
from pathlib import Path

from .utils import parse_list, squeeze_slashes

DAY_RE = re.compile(r"/(?P<year>\d{4})/(?P<month>\d{2})/(?P<day>\d{2})")
MONTH_RE = re.compile(r"/(?P<year>\d{4})/(?P<month>\d{2})")
YEAR_RE = re.compile(r"/(?P<year>\d{4})")
FORMAT_RE = re.compile(r"\.(?P<format>[^./]+)$")


@dataclass(frozen=True)
class DateFilter:
    year: str | None = None
    month: str | None = None
    day: str | None = None

    def is_empty(self) -> bool:
        return self.year is None and self.month is None and self.day is None


@dataclass(frozen=True)
class TagFilter:
    tags: frozenset[str] = field(default_factory=frozenset)

    def is_empty(self) -> bool:
        return not self.tags


def _as_posix(path: str | Path) -> str:
    if isinstance(path, Path):
        return path.as_posix()
    return str(path).replace("\\", "/")


def to_uri_path(file_path: str | Path, data_root: str | Path = "", strip_extension: bool = True) -> str:
    """Map a file under ``data_root`` to its public URI path.

    ``data/tech//intro.blog`` under ``data`` becomes ``/tech/intro``.
    Directories pass ``strip_extension=False`` so ``v1.2`` stays whole.
    """
    path = _as_posix(file_path)
    root = Path(data_root).as_posix().rstrip("/") if data_root else ""
    if root and (path == root or path.startswith(root + "/")):
        path = path[len(root):]
    path = squeeze_slashes(path)
    if strip_extension:
        head, tail = posixpath.split(path)
        stem, _ = posixpath.splitext(tail)
        path = posixpath.join(head, stem) if head else stem
    path = path.rstrip("/")
    if not path.startswith("/"):
        path = "/" + path
    return path


def normalize_uri_path(uri_path: str) -> str:
    return squeeze_slashes(uri_path).rstrip("/")


def parse_request_uri(raw_path: str) -> tuple[str, DateFilter, TagFilter]:
    """Split a request path into content path, date filter and tag filter.

    ``/2020/05/tech;python,web`` gives ``/tech``, year 2020 month 05,
    tags python and web. Date segments may appear anywhere in the path.
    """
    path_part, _, tags_part = raw_path.partition(";")
    tag_filter = TagFilter(frozenset(parse_list(tags_part)))

    for pattern in (DAY_RE, MONTH_RE, YEAR_RE):
        match = pattern.search(path_part)
        if match:
            date_filter = DateFilter(**match.groupdict())
            return path_part[match.end():], date_filter, tag_filter
    return path_part, DateFilter(), tag_filter


def split_format(path_info: str, requested_format: str = "", default: str = "html") -> tuple[str, str]:
    """Strip a trailing ``.format`` from the request path.

    A path extension wins over the ``format`` query parameter. Any
    ``;tags`` suffix is kept on the returned path.
    """
    path_part, sep, tags_part = path_info.partition(";")
    match = FORMAT_RE.search(path_part)
    if match:
        return path_part[: match.start()] + sep + tags_part, match.group("format")
    requested_format = (requested_format or "").strip()
    return path_info, requested_format or default
