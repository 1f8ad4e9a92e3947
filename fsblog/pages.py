from __future__ import annotations

import datetime as dt
import html
from dataclasses import asdict, dataclass, field

from .config import BlogConfig
from .entities import Entity, EntityKind, Page
from .index import CategoryInfo, accept_entity, annotate, find_entities, find_entity
from .paths import DateFilter, TagFilter
from .plugins import Plugin, apply_plugins
from .templates import TemplateSet, load_template_set
from .utils import iso_date, short_date


@dataclass
class HeaderFooterVars:
    """Request-scoped values bound into the header, footer and not-found templates."""

    blog_title: str
    blog_base_uri: str
    categories_info: dict[str, CategoryInfo] = field(default_factory=dict)
    pages: list[Page] = field(default_factory=list)
    last_update_time: dt.datetime = field(default_factory=dt.datetime.now)
    previous_page_link: str = ""
    next_page_link: str = ""

    def as_template_vars(self) -> dict[str, str]:
        return {
            "blog_title": html.escape(self.blog_title),
            "blog_base_uri": self.blog_base_uri,
            "last_update_time": iso_date(self.last_update_time),
            "previous_page_link": self.previous_page_link,
            "next_page_link": self.next_page_link,
            "categories_list": build_category_list(self.categories_info),
            "pages_list": build_page_list(self.pages),
            "pagination": build_pagination(self.next_page_link, self.previous_page_link),
        }


@dataclass(frozen=True)
class EntityContext:
    title: str
    name: str
    uri_path: str
    category: str
    tags: str
    time: str
    date: str
    content: str
    escaped_content: str
    permalink: str
    base_uri: str

    @classmethod
    def from_entity(cls, entity: Page) -> "EntityContext":
        return cls(
            title=html.escape(entity.title),
            name=entity.name,
            uri_path=entity.uri_path,
            category=entity.category,
            tags=", ".join(entity.tags),
            time=iso_date(entity.time),
            date=short_date(entity.time),
            content=entity.content,
            escaped_content=html.escape(entity.content),
            permalink=entity.permalink,
            base_uri=entity.base_uri,
        )

    def as_template_vars(self) -> dict[str, str]:
        return asdict(self)


def build_category_list(categories_info: dict[str, CategoryInfo]) -> str:
    items = []
    for name, info in categories_info.items():
        items.append(
            f'<li><a href="{html.escape(info.link)}">{html.escape(name)}</a>'
            f'<span class="count">{len(info.posts)}</span></li>'
        )
    return "\n".join(items)


def build_page_list(pages: list[Page]) -> str:
    return "\n".join(
        f'<li><a href="{html.escape(page.permalink)}">{html.escape(page.title)}</a></li>' for page in pages
    )


def build_pagination(next_page_link: str, previous_page_link: str) -> str:
    if not next_page_link and not previous_page_link:
        return ""
    items = []
    if next_page_link:
        items.append(f'<a class="page-link" href="{html.escape(next_page_link)}">Newer posts</a>')
    if previous_page_link:
        items.append(f'<a class="page-link" href="{html.escape(previous_page_link)}">Older posts</a>')
    return f'<nav class="pagination">{" ".join(items)}</nav>'


def render_entity(fmt: str, entity: Page, base_uri: str, plugins: list[Plugin]) -> EntityContext:
    view = annotate(entity, base_uri, content=apply_plugins(fmt, entity.content, plugins))
    return EntityContext.from_entity(view)


def render(
    uri_path: str,
    entities: list[Entity],
    fmt: str,
    page: int,
    header_vars: HeaderFooterVars,
    config: BlogConfig,
    date_filter: DateFilter | None = None,
    tag_filter: TagFilter | None = None,
    plugins: list[Plugin] | None = None,
    templates: TemplateSet | None = None,
) -> str:
    """Render ``uri_path`` as a complete response: content-type line, blank line, body.

    Posts and pages render on their own, categories render one window of
    their newest posts. Missing entities and entities rejected by the
    filters render the ``not_found`` template.
    """
    date_filter = date_filter or DateFilter()
    tag_filter = tag_filter or TagFilter()
    plugins = plugins or []
    template = templates or load_template_set(fmt, config.templates_dir)
    base_uri = header_vars.blog_base_uri

    entity = find_entity(entities, uri_path)

    main_content = []
    header_vars.previous_page_link = ""
    header_vars.next_page_link = ""

    def not_found() -> str:
        return template.not_found.render(header_vars.as_template_vars())

    if entity is None:
        main_content.append(not_found())
    elif entity.kind in (EntityKind.BLOG_POST, EntityKind.PAGE):
        context = render_entity(fmt, entity, base_uri, plugins)
        if not accept_entity(entity, date_filter, tag_filter):
            main_content.append(not_found())
        elif entity.kind == EntityKind.BLOG_POST:
            main_content.append(template.blog_post_single.render(context.as_template_vars()))
        else:
            main_content.append(template.page.render(context.as_template_vars()))
    else:
        blog_posts = find_entities(entities, entity.name, EntityKind.BLOG_POST)
        filtered_posts = [post for post in blog_posts if accept_entity(post, date_filter, tag_filter)]
        if not filtered_posts:
            main_content.append(not_found())
        else:
            # sorted() is stable: equal timestamps keep scan order.
            filtered_posts = sorted(filtered_posts, key=lambda p: p.time, reverse=True)
            header_vars.last_update_time = filtered_posts[0].time

            per_page = config.posts_per_page
            start = page * per_page
            for post in filtered_posts[start : start + per_page]:
                context = render_entity(fmt, post, base_uri, plugins)
                main_content.append(template.blog_post.render(context.as_template_vars()))

            current_uri = f"{base_uri}{uri_path}"
            if page > 0:
                header_vars.next_page_link = f"{current_uri}?page={page - 1}"
            if len(filtered_posts) > (page + 1) * per_page:
                header_vars.previous_page_link = f"{current_uri}?page={page + 1}"

    # Header and footer are bound after the main content so they see the
    # pagination links and last update time computed above.
    variables = header_vars.as_template_vars()
    return "".join(
        [
            f"Content-type: {template.content_type}\n\n",
            template.header.render(variables),
            "".join(main_content),
            template.footer.render(variables),
        ]
    )
