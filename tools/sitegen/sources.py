from __future__ import annotations

import pathlib
from typing import Any, Dict, Optional

from nbformat import ValidationError

from .config import (
    FILE_NODE,
    MARKDOWN_NODE,
    MARKDOWN_SUFFIXES,
    NOTEBOOK_SUFFIX,
)
from .git import git_last_commit_date
from .nodes import ContentStore, Node
from .notebooks import notebook_to_markdown
from .utils import (
    _norm_text,
    natural_key,
    normalize_frontmatter_dates,
    parse_frontmatter,
)


def _file_node(path: pathlib.Path, content_dir: pathlib.Path, name: str) -> Node:
    rel = path.relative_to(content_dir).as_posix()
    return {
        "id": f"file:{name}:{rel}",
        "parent": None,
        "internal": {"type": FILE_NODE},
        "sourceInstanceName": name,
        "absolutePath": str(path),
        "relativePath": rel,
        "sourceRoot": str(content_dir),
        "extension": path.suffix.lstrip(".").lower(),
    }


def _read_markdown(path: pathlib.Path):
    text = _norm_text(path.read_text(encoding="utf-8"))
    fm, body = parse_frontmatter(text)
    return fm or {}, body, {}


def _markdown_node(
    file_node: Node,
    fm: Dict[str, Any],
    body: str,
    outputs: Dict[str, bytes],
) -> Node:
    return {
        "id": f"markdown:{file_node['relativePath']}",
        "parent": file_node["id"],
        "internal": {"type": MARKDOWN_NODE},
        "frontmatter": fm,
        "rawMarkdownBody": body,
        "outputs": outputs,
        "fileAbsolutePath": file_node["absolutePath"],
        "contentDir": file_node["sourceRoot"],
    }


def source_file(
    store: ContentStore,
    path: pathlib.Path,
    content_dir: pathlib.Path,
    name: str = "pages",
) -> Optional[Node]:
    """
    Register one file; returns its Markdown node when the file is content.

    Unreadable content is reported to the store and skipped so the problem
    surfaces as a query error instead of a half-built site.
    """
    file_node = store.create_node(_file_node(path, content_dir, name))

    suffix = path.suffix.lower()
    if suffix in MARKDOWN_SUFFIXES:
        reader = _read_markdown
    elif suffix == NOTEBOOK_SUFFIX:
        reader = notebook_to_markdown
    else:
        return None

    try:
        fm, body, outputs = reader(path)
    except (ValueError, ValidationError, UnicodeDecodeError) as e:
        print(f"! {file_node['relativePath']}: {e}")
        store.report_error(str(e), path=file_node["relativePath"])
        return None

    fm = normalize_frontmatter_dates(dict(fm))
    if not fm.get("date"):
        git_date = git_last_commit_date(path)
        if git_date is not None:
            fm["date"] = git_date
    fm.setdefault("title", path.stem.replace("-", " ").title())

    return store.create_node(_markdown_node(file_node, fm, body, outputs))


def source_filesystem(
    store: ContentStore,
    content_dir: pathlib.Path,
    name: str = "pages",
) -> int:
    if not content_dir.exists():
        print(f"- no content directory at {content_dir}")
        return 0

    files = [
        p for p in content_dir.rglob("*")
        if p.is_file()
        and not any(part.startswith(".") for part in p.relative_to(content_dir).parts)
    ]
    files.sort(key=lambda p: natural_key(p.relative_to(content_dir).as_posix()))

    count = 0
    for p in files:
        if source_file(store, p, content_dir, name) is not None:
            count += 1
    print(f"✓ sourced {count} content files from {content_dir}")
    return count
