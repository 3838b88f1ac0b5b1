"""Tests for sitegen.fields."""

import pytest

from sitegen.fields import create_file_path, derive_type, on_create_node


def _nodes(relative_path):
    file_node = {"id": "file:1", "relativePath": relative_path}
    md_node = {
        "id": "markdown:1",
        "parent": "file:1",
        "internal": {"type": "MarkdownRemark"},
    }
    lookup = {"file:1": file_node}
    return md_node, lookup.get


class TestCreateFilePath:
    @pytest.mark.parametrize(
        "rel, expected",
        [
            ("page.md", "/page/"),
            ("index.md", "/"),
            ("about-me/index.md", "/about-me/"),
            ("blog/2020/my-post.md", "/blog/2020/my-post/"),
            ("blog/2020/my-post/index.md", "/blog/2020/my-post/"),
            ("notes/plot.ipynb", "/notes/plot/"),
        ],
    )
    def test_slug_from_relative_path(self, rel, expected):
        node, get_node = _nodes(rel)
        assert create_file_path(node, get_node) == expected

    def test_without_trailing_slash(self):
        node, get_node = _nodes("blog/my-post.md")
        assert create_file_path(node, get_node, trailing_slash=False) == "/blog/my-post"

    def test_base_path_is_stripped(self):
        node, get_node = _nodes("pages/blog/my-post.md")
        assert create_file_path(node, get_node, base_path="pages") == "/blog/my-post/"

    def test_missing_parent_raises(self):
        node = {"id": "markdown:1", "parent": "file:missing"}
        with pytest.raises(LookupError):
            create_file_path(node, {}.get)


class TestDeriveType:
    def test_two_segments_has_no_type(self):
        assert derive_type("/page") is None

    def test_three_segments_has_no_type(self):
        assert derive_type("/blog/my-post") is None

    def test_four_segments_uses_first_directory(self):
        assert derive_type("/blog/2020/my-post") == "blog"

    def test_trailing_slash_counts_as_segment(self):
        assert derive_type("/blog/my-post/") == "blog"

    def test_root(self):
        assert derive_type("/") is None


class TestOnCreateNode:
    def _collect(self):
        calls = []

        def create_node_field(name, node, value):
            calls.append((name, node["id"], value))

        return calls, create_node_field

    def test_attaches_slug_and_type(self):
        node, get_node = _nodes("projects/2021/thing.md")
        calls, create_node_field = self._collect()
        on_create_node(node, create_node_field, get_node)
        assert calls == [
            ("slug", "markdown:1", "/projects/2021/thing/"),
            ("type", "markdown:1", "projects"),
        ]

    def test_shallow_path_gets_slug_only(self):
        node, get_node = _nodes("page.md")
        calls, create_node_field = self._collect()
        on_create_node(node, create_node_field, get_node)
        assert calls == [("slug", "markdown:1", "/page/")]

    def test_ignores_non_markdown_nodes(self):
        calls, create_node_field = self._collect()
        file_node = {"id": "file:1", "internal": {"type": "File"}}
        on_create_node(file_node, create_node_field, {}.get)
        assert calls == []
