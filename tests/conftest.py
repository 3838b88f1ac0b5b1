import pathlib

import pytest


def make_edge(slug, node_type=None, title=None):
    fields = {"slug": slug}
    if node_type is not None:
        fields["type"] = node_type
    return {
        "node": {
            "id": f"markdown:{slug}",
            "fields": fields,
            "frontmatter": {"title": title or slug},
        }
    }


@pytest.fixture
def content_dir(tmp_path):
    d = tmp_path / "content"
    d.mkdir()
    return d


@pytest.fixture
def write(content_dir):
    def _write(rel, text):
        p = content_dir / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p

    return _write


def post(title, date=None, body="Body text.\n"):
    lines = ["---", f"title: {title}"]
    if date:
        lines.append(f"date: {date}")
    lines.append("---")
    return "\n".join(lines) + "\n\n" + body
