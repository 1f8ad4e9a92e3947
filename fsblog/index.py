from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

from .config import BlogConfig
from .entities import BlogPost, Entity, EntityKind, Page, parse_entity
from .paths import DateFilter, TagFilter, normalize_uri_path

ALL = ":all"


@dataclass
class CategoryInfo:
    link: str
    posts: list[BlogPost] = field(default_factory=list)


def list_paths(root: Path) -> list[Path]:
    if not root.exists():
        return []
    return [root] + sorted(root.rglob("*"), key=lambda p: p.as_posix())


def scan_entities(config: BlogConfig) -> list[Entity]:
    """Walk the whole data directory. Nothing is cached between calls."""
    entities = []
    for path in list_paths(Path(config.data_dir)):
        entity = parse_entity(path, config)
        if entity is not None:
            entities.append(entity)
    return entities


def find_entity(entities: list[Entity], uri_path: str) -> Entity | None:
    """Return the first entity addressed by ``uri_path``.

    Two files sharing a URI path (``a.blog`` and ``a.page`` in the same
    directory) resolve to whichever the scan met first.
    """
    uri_path = normalize_uri_path(uri_path)
    candidates = {uri_path, uri_path + "/"}
    for entity in entities:
        if entity.uri_path in candidates:
            return entity
    return None


def find_entities(
    entities: list[Entity], category: str = ALL, kind: EntityKind | str = ALL
) -> list[Entity]:
    result = []
    for entity in entities:
        if category != ALL:
            entity_category = getattr(entity, "category", None)
            if entity_category is None or not entity_category.startswith(category):
                continue
        if kind != ALL and entity.kind != kind:
            continue
        result.append(entity)
    return result


def accept_entity(entity: Entity, date_filter: DateFilter, tag_filter: TagFilter) -> bool:
    time = entity.time
    if date_filter.year is not None and int(date_filter.year) != time.year:
        return False
    if date_filter.month is not None and int(date_filter.month) != time.month:
        return False
    if date_filter.day is not None and int(date_filter.day) != time.day:
        return False
    if not tag_filter.is_empty() and tag_filter.tags.isdisjoint(entity.tags):
        return False
    return True


def permalink(entity: Entity, base_uri: str) -> str:
    return f"{base_uri}{entity.uri_path}"


def annotate(entity: Page, base_uri: str, **changes: object) -> Page:
    """Return a render-local copy carrying ``base_uri`` and ``permalink``."""
    return replace(entity, base_uri=base_uri, permalink=permalink(entity, base_uri), **changes)


def categories_info(entities: list[Entity], base_uri: str) -> dict[str, CategoryInfo]:
    result: dict[str, CategoryInfo] = {}
    for entity in entities:
        if entity.kind != EntityKind.BLOG_POST:
            continue
        info = result.get(entity.category)
        if info is None:
            info = CategoryInfo(link=f"{base_uri}{entity.category}")
            result[entity.category] = info
        info.posts.append(entity)
    return result


def pages(entities: list[Entity], base_uri: str) -> list[Page]:
    return [annotate(entity, base_uri) for entity in entities if entity.kind == EntityKind.PAGE]
