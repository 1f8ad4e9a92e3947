from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from .render import Template, read_template

FORMAT_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")
TEMPLATE_NAMES = ("header", "blog_post", "blog_post_single", "page", "not_found", "footer")

DEFAULT_HTML_HEADER = """<html>
  <head>
    <title>{{blog_title}}</title>
  </head>
  <body>
    <h1><a href="{{blog_base_uri}}/">{{blog_title}}</a></h1>
    <ul class="pages">{{pages_list}}</ul>
    <ul class="categories">{{categories_list}}</ul>
"""

DEFAULT_HTML_BLOG_POST = """<h2><a href="{{permalink}}">{{title}}</a></h2>
<p class="post-date">{{date}}</p>
{{content}}
<hr/>
"""

DEFAULT_HTML_BLOG_POST_SINGLE = """<h2>{{title}}</h2>
<p class="post-date">{{date}}</p>
{{content}}
<hr/>
"""

DEFAULT_HTML_PAGE = """<h2>{{title}}</h2>
{{content}}
<hr/>
"""

DEFAULT_HTML_NOT_FOUND = """<h2>Not found</h2>
"""

DEFAULT_HTML_FOOTER = """    {{pagination}}
  </body>
</html>
"""

DEFAULT_ATOM_HEADER = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>{{blog_title}}</title>
  <updated>{{last_update_time}}</updated>
  <author>
    <name>{{blog_title}}</name>
  </author>
  <id>{{blog_base_uri}}/</id>
"""

DEFAULT_ATOM_BLOG_POST = """  <entry>
    <title>{{title}}</title>
    <link href="{{permalink}}"/>
    <id>{{permalink}}</id>
    <updated>{{time}}</updated>
    <content type="html">{{escaped_content}}</content>
  </entry>
"""

DEFAULT_ATOM_FOOTER = """</feed>
"""

DEFAULTS = {
    "html": {
        "content_type": "text/html",
        "header": DEFAULT_HTML_HEADER,
        "blog_post": DEFAULT_HTML_BLOG_POST,
        "blog_post_single": DEFAULT_HTML_BLOG_POST_SINGLE,
        "page": DEFAULT_HTML_PAGE,
        "not_found": DEFAULT_HTML_NOT_FOUND,
        "footer": DEFAULT_HTML_FOOTER,
    },
    "atom": {
        "content_type": "application/atom+xml",
        "header": DEFAULT_ATOM_HEADER,
        "blog_post": DEFAULT_ATOM_BLOG_POST,
        "blog_post_single": DEFAULT_ATOM_BLOG_POST,
        "page": DEFAULT_ATOM_BLOG_POST,
        "not_found": "",
        "footer": DEFAULT_ATOM_FOOTER,
    },
}


class TemplateSetError(ValueError):
    pass


@dataclass(frozen=True)
class TemplateSet:
    content_type: str
    header: Template
    blog_post: Template
    blog_post_single: Template
    page: Template
    not_found: Template
    footer: Template


def load_template_set(fmt: str, templates_dir: str | Path | None = None) -> TemplateSet:
    """Build the template set for ``fmt``.

    Files under ``<templates_dir>/<fmt>/`` named after a template
    (or ``content_type``) replace the built-in default of the same name.
    Formats without defaults must provide every file.
    """
    if not FORMAT_NAME_RE.match(fmt or ""):
        raise TemplateSetError(f"Invalid format name: {fmt!r}")
    parts: dict[str, str] = dict(DEFAULTS.get(fmt, {}))
    if templates_dir:
        format_dir = Path(templates_dir) / fmt
        for name in ("content_type",) + TEMPLATE_NAMES:
            path = format_dir / name
            if path.is_file():
                parts[name] = read_template(path)
    if "content_type" in parts:
        parts["content_type"] = parts["content_type"].strip()

    missing = [name for name in ("content_type",) + TEMPLATE_NAMES if name not in parts]
    if missing or not parts["content_type"]:
        missing = missing or ["content_type"]
        raise TemplateSetError(f"Incomplete template set for format {fmt!r}: missing {', '.join(missing)}")

    return TemplateSet(
        content_type=parts["content_type"],
        **{name: Template(parts[name]) for name in TEMPLATE_NAMES},
    )
