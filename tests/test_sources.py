"""Tests for sitegen.sources."""

from datetime import date

from conftest import post
from sitegen.fields import on_create_node
from sitegen.nodes import ContentStore
from sitegen.sources import source_filesystem


def _store():
    return ContentStore(hooks=[on_create_node])


def test_sources_markdown_with_fields(content_dir, write):
    write("blog/2020/hello.md", post("Hello", "2020-05-01"))
    write("about/index.md", post("About"))
    store = _store()

    assert source_filesystem(store, content_dir) == 2

    hello = store.find_by_slug("/blog/2020/hello/")
    assert hello["fields"]["type"] == "blog"
    assert hello["frontmatter"]["title"] == "Hello"
    assert hello["frontmatter"]["date"] == date(2020, 5, 1)
    assert hello["rawMarkdownBody"].strip() == "Body text."

    about = store.find_by_slug("/about/")
    assert "type" not in about["fields"]


def test_non_content_files_become_file_nodes_only(content_dir, write):
    write("blog/2020/hello.md", post("Hello", "2020-05-01"))
    (content_dir / "blog" / "2020" / "pic.png").write_bytes(b"\x89PNG")
    store = _store()

    assert source_filesystem(store, content_dir) == 1
    assert len(store) == 3
    assert len(store.nodes_of_type("File")) == 2


def test_hidden_paths_skipped(content_dir, write):
    write(".drafts/secret.md", post("Secret"))
    write("notes/.ipynb_checkpoints/x.md", post("Checkpoint"))
    store = _store()
    assert source_filesystem(store, content_dir) == 0
    assert len(store) == 0


def test_missing_title_defaults_to_stem(content_dir, write):
    write("my-first-note.md", "Just text.\n")
    store = _store()
    source_filesystem(store, content_dir)
    node = store.find_by_slug("/my-first-note/")
    assert node["frontmatter"]["title"] == "My First Note"


def test_bad_frontmatter_reported_not_raised(content_dir, write, capsys):
    write("blog/2020/broken.md", "---\ntitle: [unclosed\n---\n\nBody\n")
    write("blog/2020/fine.md", post("Fine", "2020-01-01"))
    store = _store()

    assert source_filesystem(store, content_dir) == 1
    result = store.query_markdown()
    assert result["errors"][0]["path"] == "blog/2020/broken.md"
    assert "broken.md" in capsys.readouterr().out


def test_missing_content_dir(tmp_path):
    store = _store()
    assert source_filesystem(store, tmp_path / "nope") == 0
    assert len(store) == 0
