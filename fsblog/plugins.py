"""Content-transform plugins.

A plugin is any callable ``(format, content) -> content``. Plugins run in
order on every rendered post or page body, each one receiving the previous
one's output.
"""

from __future__ import annotations

import html
import importlib
import importlib.util
import sys
from pathlib import Path
from typing import Callable

import markdown

from .code_linker import CodeLinkerExtension
from .config import BlogConfig
from .content import normalize_list_spacing

Plugin = Callable[[str, str], str]
MARKUP_FORMATS = {"html", "atom"}


class PluginError(ValueError):
    pass


def apply_plugins(fmt: str, content: str, plugins: list[Plugin]) -> str:
    for plugin in plugins:
        content = plugin(fmt, content)
    return content


def add_paragraphs(fmt: str, content: str) -> str:
    if fmt not in MARKUP_FORMATS or "<p>" in content:
        return content
    return "".join(f"<p>{line.strip()}</p>\n" for line in content.splitlines() if line.strip())


def escape_html(fmt: str, content: str) -> str:
    if fmt not in MARKUP_FORMATS:
        return content
    return html.escape(content)


def make_markdown(config: BlogConfig) -> Plugin:
    def convert(fmt: str, content: str) -> str:
        if fmt not in MARKUP_FORMATS:
            return content
        md = markdown.Markdown(
            extensions=["fenced_code", "tables", "codehilite", CodeLinkerExtension(Path(config.data_dir))],
            extension_configs={"codehilite": {"guess_lang": False}},
        )
        return md.convert(normalize_list_spacing(content))

    return convert


BUILTINS: dict[str, Callable[[BlogConfig], Plugin]] = {
    "add_paragraphs": lambda config: add_paragraphs,
    "escape_html": lambda config: escape_html,
    "markdown": make_markdown,
}


def resolve_plugin(name: str, config: BlogConfig) -> Plugin:
    """Resolve a built-in plugin name or a ``module:function`` import string."""
    if name in BUILTINS:
        return BUILTINS[name](config)
    module_path, sep, attr_name = name.partition(":")
    if not sep or not module_path or not attr_name:
        raise PluginError(f"Unknown plugin {name!r}; expected a built-in name or 'module:function'")
    module = importlib.import_module(module_path)
    func = getattr(module, attr_name, None)
    if func is None or not callable(func):
        raise PluginError(f"Plugin {name!r} is not a callable")
    return func


def load_plugin_file(path: Path) -> Plugin:
    """Load the function named after ``path``'s stem from a plugin file."""
    module_name = f"_fsblog_plugin_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise PluginError(f"Cannot load plugin file {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    func = getattr(module, path.stem, None)
    if func is None or not callable(func):
        raise PluginError(f"Plugin file {path} does not define {path.stem}()")
    return func


def load_plugins(config: BlogConfig) -> list[Plugin]:
    plugins = [resolve_plugin(name, config) for name in config.plugins]
    if config.plugins_dir:
        plugins_dir = Path(config.plugins_dir)
        if not plugins_dir.is_dir():
            print(f"Plugins directory not found: {plugins_dir}", file=sys.stderr)
            return plugins
        for path in sorted(plugins_dir.glob("*.py"), key=lambda p: p.name):
            plugins.append(load_plugin_file(path))
    return plugins
