from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def render_template(template: str, **context: str) -> str:
    # Single pass: substituted values are never scanned for placeholders.
    def repl(match: re.Match) -> str:
        return context.get(match.group(1), match.group(0))

    return PLACEHOLDER_RE.sub(repl, template)


def read_template(path: Path) -> str:
    return path.read_text(encoding="utf-8")


@dataclass(frozen=True)
class Template:
    source: str

    def render(self, variables: Mapping[str, str]) -> str:
        return render_template(self.source, **variables)
