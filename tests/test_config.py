"""Unit tests for config.py"""

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from fsblog.config import BlogConfig, build_config, load_config, resolve_paths


def test_load_config_missing(tmp_path):
    assert load_config(tmp_path / "nope.toml") == {}


def test_load_config_toml(tmp_path):
    path = tmp_path / "fsblog.toml"
    path.write_text('blog_title = "T"\nposts_per_page = 3\n', encoding="utf-8")
    assert load_config(path) == {"blog_title": "T", "posts_per_page": 3}


def test_load_config_yaml(tmp_path):
    path = tmp_path / "fsblog.yaml"
    path.write_text("blog_title: T\nplugins: [markdown]\n", encoding="utf-8")
    assert load_config(path) == {"blog_title": "T", "plugins": ["markdown"]}


def test_load_config_json(tmp_path):
    path = tmp_path / "fsblog.json"
    path.write_text('{"blog_title": "T"}', encoding="utf-8")
    assert load_config(path) == {"blog_title": "T"}


def test_load_config_invalid_json_exits(tmp_path, capsys):
    path = tmp_path / "fsblog.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(SystemExit):
        load_config(path)
    assert "Invalid JSON" in capsys.readouterr().err


def test_build_config_defaults():
    config = build_config({})
    assert config == BlogConfig()
    assert config.post_extension == ".blog"
    assert config.page_extension == ".page"
    assert config.posts_per_page == 4


def test_build_config_coercion(capsys):
    config = build_config(
        {
            "posts_per_page": "0",
            "post_extension": "txt",
            "plugins": "markdown, add_paragraphs",
            "colour": "blue",
        }
    )
    assert config.posts_per_page == 1
    assert config.post_extension == ".txt"
    assert config.plugins == ("markdown", "add_paragraphs")
    assert "colour" in capsys.readouterr().err


def test_config_is_immutable():
    with pytest.raises(FrozenInstanceError):
        BlogConfig().blog_title = "x"


def test_with_overrides_skips_none():
    config = BlogConfig(blog_title="A", posts_per_page=2)
    updated = config.with_overrides(blog_title=None, posts_per_page=5)
    assert updated.blog_title == "A"
    assert updated.posts_per_page == 5
    assert config.with_overrides(blog_title=None) is config


def test_resolve_paths_relative_to_config(tmp_path):
    config = resolve_paths(BlogConfig(data_dir="data", plugins_dir=""), tmp_path / "fsblog.toml")
    assert Path(config.data_dir) == tmp_path.resolve() / "data"
    assert config.plugins_dir == ""


def test_resolve_paths_keeps_absolute(tmp_path):
    absolute = str(tmp_path / "elsewhere")
    config = resolve_paths(BlogConfig(data_dir=absolute), tmp_path / "fsblog.toml")
    assert config.data_dir == absolute
