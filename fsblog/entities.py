from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union

from .config import BlogConfig
from .content import parse_text
from .paths import to_uri_path


class EntityKind(str, Enum):
    CATEGORY = "category"
    BLOG_POST = "blog_post"
    PAGE = "page"


@dataclass(frozen=True)
class Category:
    uri_path: str
    name: str
    kind: EntityKind = field(default=EntityKind.CATEGORY, init=False)


@dataclass(frozen=True)
class Page:
    """A standalone page. Also the shape shared with blog posts.

    ``base_uri`` and ``permalink`` stay empty on indexed entities and are
    only filled on the copies made while rendering.
    """

    uri_path: str
    name: str
    title: str
    time: dt.datetime
    content: str
    category: str
    tags: tuple[str, ...] = ()
    base_uri: str = ""
    permalink: str = ""
    kind: EntityKind = field(default=EntityKind.PAGE, init=False)


@dataclass(frozen=True)
class BlogPost(Page):
    kind: EntityKind = field(default=EntityKind.BLOG_POST, init=False)


Entity = Union[Category, Page, BlogPost]


def classify(path: Path, config: BlogConfig) -> EntityKind | None:
    if not path.exists():
        return None
    if path.is_dir():
        return EntityKind.CATEGORY
    if path.suffix == config.post_extension:
        return EntityKind.BLOG_POST
    if path.suffix == config.page_extension:
        return EntityKind.PAGE
    return None


def parse_content(path: Path, config: BlogConfig) -> dict | None:
    """Read the shared fields of a post or page file.

    Returns None for anything that is not a regular file or that lacks a
    title line and a body after the metadata block.
    """
    if not path.is_file():
        return None
    raw_text = path.read_text(encoding="utf-8", errors="replace")
    parsed = parse_text(raw_text)
    if parsed is None:
        return None
    meta, title, body = parsed
    return {
        "uri_path": to_uri_path(path, config.data_dir),
        "name": path.stem,
        "title": title,
        "time": dt.datetime.fromtimestamp(path.stat().st_mtime),
        "content": body,
        "category": to_uri_path(path.parent, config.data_dir, strip_extension=False),
        "tags": tuple(meta.get("tags", [])),
    }


def parse_entity(path: Path, config: BlogConfig) -> Entity | None:
    kind = classify(path, config)
    if kind is EntityKind.CATEGORY:
        uri_path = to_uri_path(path, config.data_dir, strip_extension=False)
        return Category(uri_path=uri_path, name=uri_path)
    if kind is EntityKind.BLOG_POST:
        fields = parse_content(path, config)
        return BlogPost(**fields) if fields else None
    if kind is EntityKind.PAGE:
        fields = parse_content(path, config)
        return Page(**fields) if fields else None
    return None
