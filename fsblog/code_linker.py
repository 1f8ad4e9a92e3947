from __future__ import annotations

import xml.etree.ElementTree as etree
from pathlib import Path

from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.util import ClassNotFound

RE_CODE_LINK = r"\[(?P<text>[^\]]+)\]\(code:(?P<path>[^#)]+)(?:#L(?P<line>\d+))?\)"


class CodeLinkerProcessor(InlineProcessor):
    """Turn ``[text](code:snippets/demo.py#L3)`` into a link carrying highlighted source.

    Paths are resolved against the blog data directory and may not leave it.
    """

    def __init__(self, pattern, md, data_root: Path):
        super().__init__(pattern, md)
        self.data_root = data_root.resolve()

    def handleMatch(self, m, data):
        file_path_str = m.group("path").strip()
        line_num = int(m.group("line")) if m.group("line") else 0
        link_text = m.group("text")

        file_path = (self.data_root / file_path_str.lstrip("/")).resolve()
        if not file_path.is_relative_to(self.data_root) or not file_path.is_file():
            return self.error_link(f"File not found: {file_path_str}"), m.start(0), m.end(0)

        try:
            code_selection = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return self.error_link(f"Error reading file: {exc}"), m.start(0), m.end(0)

        try:
            lexer = get_lexer_for_filename(file_path.name, stripall=True)
        except ClassNotFound:
            lexer = TextLexer()
        formatter = HtmlFormatter(
            linenos=True,
            cssclass="codehilite",
            hl_lines=[line_num] if line_num else [],
        )
        highlighted_code = highlight(code_selection, lexer, formatter)

        el = etree.Element("a")
        el.set("href", "#")
        el.set("class", "code-link")
        el.set("data-code", highlighted_code)
        el.set("data-lang", lexer.aliases[0] if lexer.aliases else "text")
        if line_num:
            el.set("data-line", str(line_num))
        el.text = link_text
        return el, m.start(0), m.end(0)

    def error_link(self, message: str):
        el = etree.Element("a")
        el.set("href", "#")
        el.set("class", "code-link-error")
        el.text = message
        return el


class CodeLinkerExtension(Extension):
    def __init__(self, data_root: Path, **kwargs):
        super().__init__(**kwargs)
        self.data_root = Path(data_root)

    def extendMarkdown(self, md):
        md.inlinePatterns.register(
            CodeLinkerProcessor(RE_CODE_LINK, md, self.data_root),
            "code_linker",
            175,
        )
