from __future__ import annotations

import argparse
import os
import sys
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping
from urllib.parse import parse_qs

from .config import DEFAULT_CONFIG, BlogConfig, build_config, load_config, resolve_paths
from .index import categories_info, pages, scan_entities
from .pages import HeaderFooterVars, render
from .paths import parse_request_uri, split_format
from .plugins import load_plugins
from .utils import parse_int

DEFAULT_FORMAT = "html"
ERROR_MESSAGE = "An error occurred while processing your request"


@dataclass(frozen=True)
class Request:
    path: str = "/"
    format: str = ""
    page: int = 0


def make_request(path_info: str | None, fmt: str | None = None, page: object = None) -> Request:
    return Request(path=path_info or "/", format=fmt or "", page=max(0, parse_int(page, 0)))


def request_from_cgi(environ: Mapping[str, str]) -> Request:
    query = parse_qs(environ.get("QUERY_STRING", ""), keep_blank_values=True)

    def first(name: str) -> str:
        values = query.get(name) or [""]
        return values[0]

    return make_request(environ.get("PATH_INFO"), first("format"), first("page") or None)


def base_uri_from_cgi(environ: Mapping[str, str]) -> str:
    host = environ.get("HTTP_HOST") or environ.get("SERVER_NAME") or "localhost"
    host = host.split(":", 1)[0]
    port = parse_int(environ.get("SERVER_PORT"), 80)
    base_uri = f"http://{host}"
    if port != 80:
        base_uri += f":{port}"
    return base_uri + environ.get("SCRIPT_NAME", "").rstrip("/")


def is_cgi(environ: Mapping[str, str]) -> bool:
    return "GATEWAY_INTERFACE" in environ or "REQUEST_METHOD" in environ


def handle_request(request: Request, config: BlogConfig, base_uri: str = "") -> str:
    """Scan the content tree and render one request. Nothing survives the call."""
    base_uri = config.base_uri or base_uri
    path, fmt = split_format(request.path, request.format, DEFAULT_FORMAT)

    plugins = load_plugins(config)
    entities = scan_entities(config)
    uri_path, date_filter, tag_filter = parse_request_uri(path)

    header_vars = HeaderFooterVars(
        blog_title=config.blog_title,
        blog_base_uri=base_uri,
        categories_info=categories_info(entities, base_uri),
        pages=pages(entities, base_uri),
    )
    return render(
        uri_path,
        entities,
        fmt,
        request.page,
        header_vars,
        config,
        date_filter=date_filter,
        tag_filter=tag_filter,
        plugins=plugins,
    )


def error_response(config: BlogConfig, exc: BaseException) -> str:
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return "\n".join(
        [
            "Content-type: text/plain",
            "",
            config.blog_title,
            "",
            ERROR_MESSAGE,
            repr(exc),
            trace,
        ]
    )


def respond(request: Request, config: BlogConfig, base_uri: str = "") -> str:
    try:
        return handle_request(request, config, base_uri)
    except Exception as exc:
        return error_response(config, exc)


def load_blog_config(config_path: Path) -> BlogConfig:
    config = build_config(load_config(config_path))
    return resolve_paths(config, config_path)


def main(argv: list[str] | None = None, environ: Mapping[str, str] | None = None) -> None:
    environ = os.environ if environ is None else environ
    if is_cgi(environ):
        config_path = Path(environ.get("FSBLOG_CONFIG", DEFAULT_CONFIG))
        config = load_blog_config(config_path)
        request = request_from_cgi(environ)
        sys.stdout.write(respond(request, config, base_uri_from_cgi(environ)))
        return

    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default=DEFAULT_CONFIG)
    pre_args, _ = pre_parser.parse_known_args(argv)
    config = load_blog_config(Path(pre_args.config))

    parser = argparse.ArgumentParser(description="File-system blog renderer.")
    parser.add_argument("--config", default=pre_args.config, help="Path to blog config file (TOML/YAML/JSON).")
    parser.add_argument("path", nargs="?", default="/", help="Request path, e.g. /tech/2020;python.")
    parser.add_argument("--format", default="", help="Output format when the path has no extension.")
    parser.add_argument("--page", default=0, type=int, help="Page of a category listing, 0 is the newest.")
    parser.add_argument("--data", default=None, help="Directory containing posts, pages and categories.")
    parser.add_argument("--templates", default=None, help="Directory containing per-format templates.")
    parser.add_argument("--plugins-dir", default=None, help="Directory of plugin .py files.")
    parser.add_argument("--base-uri", default=None, help="Public base URI used in links.")
    parser.add_argument("--title", default=None, help="Blog title.")
    parser.add_argument(
        "--posts-per-page",
        default=None,
        type=int,
        help=f"Posts per category page (config: {config.posts_per_page}).",
    )
    args = parser.parse_args(argv)

    config = config.with_overrides(
        data_dir=args.data,
        templates_dir=args.templates,
        plugins_dir=args.plugins_dir,
        base_uri=args.base_uri,
        blog_title=args.title,
        posts_per_page=args.posts_per_page,
    )
    request = make_request(args.path, args.format, args.page)
    sys.stdout.write(respond(request, config))
