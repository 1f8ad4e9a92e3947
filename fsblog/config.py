from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

from .utils import parse_int, parse_list

try:
    import tomllib as toml
except ImportError:
    try:
        import tomli as toml
    except ImportError:  # pragma: no cover - optional dependency
        toml = None

try:
    import yaml
except ImportError:  # pragma: no cover - optional dependency
    yaml = None

DEFAULT_CONFIG = "fsblog.toml"
POST_EXTENSION = ".blog"
PAGE_EXTENSION = ".page"
POSTS_PER_PAGE = 4


@dataclass(frozen=True)
class BlogConfig:
    """Read-only settings shared by every request."""

    blog_title: str = ""
    data_dir: str = "data"
    templates_dir: str = "templates"
    plugins_dir: str = ""
    plugins: tuple[str, ...] = field(default_factory=tuple)
    post_extension: str = POST_EXTENSION
    page_extension: str = PAGE_EXTENSION
    posts_per_page: int = POSTS_PER_PAGE
    base_uri: str = ""

    def with_overrides(self, **overrides: object) -> "BlogConfig":
        values = {key: value for key, value in overrides.items() if value is not None}
        if not values:
            return self
        return build_config({**self.as_dict(), **values})

    def as_dict(self) -> dict:
        return {item.name: getattr(self, item.name) for item in fields(self)}


def _extension(value: object, default: str) -> str:
    text = str(value or "").strip()
    if not text:
        return default
    return text if text.startswith(".") else f".{text}"


def build_config(data: dict) -> BlogConfig:
    known = {item.name for item in fields(BlogConfig)}
    unknown = sorted(key for key in data if key not in known)
    if unknown:
        print(f"Ignoring unknown config keys: {', '.join(unknown)}", file=sys.stderr)

    def text(key: str, default: str) -> str:
        value = data.get(key)
        return default if value is None else str(value)

    return BlogConfig(
        blog_title=text("blog_title", ""),
        data_dir=text("data_dir", "data"),
        templates_dir=text("templates_dir", "templates"),
        plugins_dir=text("plugins_dir", ""),
        plugins=tuple(parse_list(data.get("plugins"))),
        post_extension=_extension(data.get("post_extension"), POST_EXTENSION),
        page_extension=_extension(data.get("page_extension"), PAGE_EXTENSION),
        posts_per_page=max(1, parse_int(data.get("posts_per_page"), POSTS_PER_PAGE)),
        base_uri=text("base_uri", "").strip(),
    )


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        if toml is None:
            print("TOML config requires tomllib (Python 3.11+) or tomli.", file=sys.stderr)
            sys.exit(1)
        try:
            data = toml.loads(text)
        except Exception as exc:  # pragma: no cover - depends on parser
            print(f"Invalid TOML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        if not isinstance(data, dict):
            print(f"TOML config must be a mapping: {path}", file=sys.stderr)
            sys.exit(1)
        return data
    if suffix in {".yml", ".yaml"}:
        if yaml is None:
            print("YAML config requires PyYAML.", file=sys.stderr)
            sys.exit(1)
        try:
            data = yaml.safe_load(text)
        except Exception as exc:  # pragma: no cover - depends on parser
            print(f"Invalid YAML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        if data is None:
            return {}
        if not isinstance(data, dict):
            print(f"YAML config must be a mapping: {path}", file=sys.stderr)
            sys.exit(1)
        return data
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON in config file {path}: {exc}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(data, dict):
        print(f"JSON config must be a mapping: {path}", file=sys.stderr)
        sys.exit(1)
    return data


def resolve_paths(config: BlogConfig, config_path: Path) -> BlogConfig:
    """Make relative directories in the config relative to the config file."""
    base = config_path.resolve().parent

    def resolve(value: str) -> str:
        if not value:
            return value
        path = Path(value)
        if path.is_absolute():
            return value
        return str(base / path)

    return replace(
        config,
        data_dir=resolve(config.data_dir),
        templates_dir=resolve(config.templates_dir),
        plugins_dir=resolve(config.plugins_dir),
    )
