"""
Derived node fields.

Every Markdown node gets a `slug` built from its file location, and a `type`
when the slug is nested deeply enough to name a category:

    /about-me/            -> slug only
    /blog/2020/my-post/   -> slug, type "blog"
"""

from __future__ import annotations

import posixpath
from typing import Any, Callable, Dict, Optional

from .config import MARKDOWN_NODE, TYPE_MIN_SEGMENTS

Node = Dict[str, Any]


def create_file_path(
    node: Node,
    get_node: Callable[[str], Optional[Node]],
    base_path: str = "",
    trailing_slash: bool = True,
) -> str:
    file_node = get_node(node.get("parent") or "")
    if file_node is None:
        raise LookupError(f"no parent file node for {node.get('id')!r}")

    rel = file_node["relativePath"]
    if base_path:
        base = base_path.strip("/") + "/"
        if rel.startswith(base):
            rel = rel[len(base):]

    directory, filename = posixpath.split(rel)
    stem = posixpath.splitext(filename)[0]
    parts = ["/", directory, "" if stem == "index" else stem]
    path = posixpath.join(*parts)
    path = posixpath.normpath(path) if path != "/" else path
    if trailing_slash and not path.endswith("/"):
        path += "/"
    return path


def derive_type(slug: str) -> Optional[str]:
    segments = slug.split("/")
    if len(segments) > TYPE_MIN_SEGMENTS:
        return segments[1]
    return None


def on_create_node(
    node: Node,
    create_node_field: Callable[..., None],
    get_node: Callable[[str], Optional[Node]],
) -> None:
    if node.get("internal", {}).get("type") != MARKDOWN_NODE:
        return

    value = create_file_path(node, get_node)
    create_node_field(name="slug", node=node, value=value)

    node_type = derive_type(value)
    if node_type is not None:
        create_node_field(name="type", node=node, value=node_type)
