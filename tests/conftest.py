"""Shared fixtures: small content trees under tmp_path"""

from __future__ import annotations

import datetime as dt
import os
from pathlib import Path

import pytest

from fsblog.config import BlogConfig


def write_entry(path: Path, text: str, when: dt.datetime | None = None) -> Path:
    """Write a content file and optionally pin its modification time."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    if when is not None:
        stamp = when.timestamp()
        os.utime(path, (stamp, stamp))
    return path


@pytest.fixture(name="write")
def write_fixture():
    return write_entry


@pytest.fixture(name="data_dir")
def data_dir_fixture(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    return data


@pytest.fixture(name="config")
def config_fixture(tmp_path, data_dir):
    return BlogConfig(
        blog_title="Test Blog",
        data_dir=str(data_dir),
        templates_dir=str(tmp_path / "templates"),
        posts_per_page=4,
        base_uri="http://example.org/blog",
    )


@pytest.fixture(name="blog_tree")
def blog_tree_fixture(data_dir):
    """Two categories, one page, one broken file and one unrelated file."""
    write_entry(
        data_dir / "tech" / "python.blog",
        "#tags: python, code\nPython tips\nUse a virtualenv.\n",
        dt.datetime(2020, 5, 3, 10, 0),
    )
    write_entry(
        data_dir / "tech" / "rust.blog",
        "#tags: rust\nRust notes\nOwnership first.\n",
        dt.datetime(2021, 1, 15, 9, 30),
    )
    write_entry(
        data_dir / "life" / "garden.blog",
        "Garden\nTomatoes are up.\n",
        dt.datetime(2020, 6, 1, 8, 0),
    )
    write_entry(data_dir / "about.page", "About me\nI write things.\n", dt.datetime(2019, 1, 1))
    write_entry(data_dir / "tech" / "broken.blog", "Only a title\n")
    write_entry(data_dir / "notes.txt", "Not content\nat all\n")
    return data_dir
