"""Unit tests for code_linker.py"""

import markdown

from fsblog.code_linker import CodeLinkerExtension


def convert(text, data_root):
    md = markdown.Markdown(extensions=[CodeLinkerExtension(data_root)])
    return md.convert(text)


def test_code_link_embeds_highlighted_source(data_dir):
    snippets = data_dir / "snippets"
    snippets.mkdir()
    (snippets / "demo.py").write_text("x = 1\ny = 2\n", encoding="utf-8")

    out = convert("See [the demo](code:snippets/demo.py#L2).", data_dir)
    assert 'class="code-link"' in out
    assert 'data-line="2"' in out
    assert 'data-lang="python"' in out
    assert ">the demo</a>" in out


def test_code_link_without_line(data_dir):
    (data_dir / "notes.txt").write_text("plain", encoding="utf-8")
    out = convert("[notes](code:/notes.txt)", data_dir)
    assert 'class="code-link"' in out
    assert "data-line" not in out


def test_code_link_missing_file(data_dir):
    out = convert("[gone](code:nope.py#L1)", data_dir)
    assert 'class="code-link-error"' in out
    assert "File not found: nope.py" in out


def test_code_link_cannot_leave_data_root(tmp_path, data_dir):
    (tmp_path / "secret.py").write_text("token = 'x'", encoding="utf-8")
    out = convert("[s](code:../secret.py#L1)", data_dir)
    assert 'class="code-link-error"' in out
    assert "token" not in out
