from __future__ import annotations

import re

from .utils import parse_list

META_MARKER = "#"
META_RE = re.compile(r"^#(?P<key>[A-Za-z_]+):(?P<value>.*)$")
LIST_KEYS = {"tags"}
LIST_MARKER_RE = re.compile(r"^(?P<indent>[ \t]*)(?:[-+*]|\d+[.)])\s+")
FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(`{3,}|~{3,})")


def parse_metadata(lines: list[str]) -> tuple[dict, list[str]]:
    """Split leading ``#key: value`` lines off a content file.

    The block ends at the first line that does not start with ``#``.
    Marker lines with an unknown key are consumed and ignored.
    """
    meta: dict = {}
    index = 0
    for line in lines:
        if not line.startswith(META_MARKER):
            break
        match = META_RE.match(line.rstrip("\r\n"))
        if match:
            key = match.group("key").strip().lower()
            value = match.group("value").strip()
            if key in LIST_KEYS:
                meta[key] = parse_list(value)
        index += 1
    return meta, lines[index:]


def split_title(lines: list[str]) -> tuple[str, str]:
    while lines and not lines[0].strip():
        lines = lines[1:]
    if not lines:
        return "", ""
    title = lines[0].strip()
    body = "".join(lines[1:]).strip()
    return title, body


def parse_text(text: str) -> tuple[dict, str, str] | None:
    """Return ``(meta, title, body)`` or None when title or body is missing."""
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines(keepends=True)
    meta, rest = parse_metadata(lines)
    title, body = split_title(rest)
    if not title or not body:
        return None
    return meta, title, body


def normalize_list_spacing(text: str) -> str:
    """Insert the blank line Markdown needs before a list that follows a paragraph."""
    lines = text.splitlines()
    out: list[str] = []
    in_fence = False
    fence_marker = ""
    for line in lines:
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(2)
            if not in_fence:
                in_fence = True
                fence_marker = marker
            elif marker == fence_marker:
                in_fence = False
                fence_marker = ""
            out.append(line)
            continue
        if in_fence:
            out.append(line)
            continue
        list_match = LIST_MARKER_RE.match(line)
        if list_match and not list_match.group("indent"):
            if out and out[-1].strip() and not LIST_MARKER_RE.match(out[-1]):
                out.append("")
        out.append(line)
    return "\n".join(out)
