"""Unit tests for entities.py"""

import datetime as dt
from dataclasses import FrozenInstanceError

import pytest

from fsblog.entities import BlogPost, Category, EntityKind, Page, classify, parse_content, parse_entity


def test_classify(config, blog_tree):
    assert classify(blog_tree / "tech", config) is EntityKind.CATEGORY
    assert classify(blog_tree / "tech" / "python.blog", config) is EntityKind.BLOG_POST
    assert classify(blog_tree / "about.page", config) is EntityKind.PAGE
    assert classify(blog_tree / "notes.txt", config) is None
    assert classify(blog_tree / "missing.blog", config) is None


def test_parse_content_fields(config, blog_tree):
    fields = parse_content(blog_tree / "tech" / "python.blog", config)
    assert fields == {
        "uri_path": "/tech/python",
        "name": "python",
        "title": "Python tips",
        "time": dt.datetime(2020, 5, 3, 10, 0),
        "content": "Use a virtualenv.",
        "category": "/tech",
        "tags": ("python", "code"),
    }


def test_parse_content_root_category(config, blog_tree):
    """Files directly under the data root belong to the '/' category."""
    fields = parse_content(blog_tree / "about.page", config)
    assert fields["category"] == "/"
    assert fields["uri_path"] == "/about"


def test_parse_content_multiline_body(config, data_dir, write):
    path = write(data_dir / "long.blog", "Title\n\nFirst\n\nSecond\n\n")
    fields = parse_content(path, config)
    assert fields["content"] == "First\n\nSecond"


def test_parse_content_rejects_short_file(config, blog_tree):
    assert parse_content(blog_tree / "tech" / "broken.blog", config) is None


def test_parse_content_rejects_directory(config, blog_tree):
    assert parse_content(blog_tree / "tech", config) is None


def test_parse_content_is_deterministic(config, blog_tree):
    path = blog_tree / "tech" / "rust.blog"
    assert parse_content(path, config) == parse_content(path, config)


def test_parse_entity_variants(config, blog_tree):
    category = parse_entity(blog_tree / "tech", config)
    post = parse_entity(blog_tree / "tech" / "python.blog", config)
    page = parse_entity(blog_tree / "about.page", config)

    assert category == Category(uri_path="/tech", name="/tech")
    assert isinstance(post, BlogPost) and post.kind is EntityKind.BLOG_POST
    assert type(page) is Page and page.kind is EntityKind.PAGE
    assert post.base_uri == "" and post.permalink == ""


def test_parse_entity_root_is_category(config, blog_tree):
    assert parse_entity(blog_tree, config) == Category(uri_path="/", name="/")


def test_parse_entity_skips_unknown_and_broken(config, blog_tree):
    assert parse_entity(blog_tree / "notes.txt", config) is None
    assert parse_entity(blog_tree / "tech" / "broken.blog", config) is None


def test_custom_extensions(config, data_dir, write):
    from dataclasses import replace

    custom = replace(config, post_extension=".post", page_extension=".txt")
    write(data_dir / "a.post", "Title\nBody\n")
    write(data_dir / "b.txt", "Title\nBody\n")
    assert parse_entity(data_dir / "a.post", custom).kind is EntityKind.BLOG_POST
    assert parse_entity(data_dir / "b.txt", custom).kind is EntityKind.PAGE


def test_entities_are_frozen(config, blog_tree):
    post = parse_entity(blog_tree / "tech" / "python.blog", config)
    with pytest.raises(FrozenInstanceError):
        post.content = "changed"


def test_dotted_directories_stay_distinct(config, data_dir, write):
    write(data_dir / "v1.2" / "notes.blog", "Notes\nBody\n")
    write(data_dir / "v1.3" / "other.blog", "Other\nBody\n")
    entities = [parse_entity(path, config) for path in (data_dir / "v1.2", data_dir / "v1.3")]
    assert [entity.uri_path for entity in entities] == ["/v1.2", "/v1.3"]
    post = parse_entity(data_dir / "v1.2" / "notes.blog", config)
    assert post.uri_path == "/v1.2/notes"
    assert post.category == "/v1.2"
