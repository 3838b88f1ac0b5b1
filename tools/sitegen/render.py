from __future__ import annotations

import pathlib
from typing import Any, Dict, Iterable, List

from .assets import ensure_dir, rewrite_urls_and_copy_assets
from .components import bio, layout, render_template
from .config import ASSET_DIR_NAME, LISTING_TEMPLATE, MAX_TOC_DEPTH
from .markdown_processing import markdown_to_html, prepare_markdown
from .nodes import ContentStore
from .pages import group_by_category


def page_dir(out_dir: pathlib.Path, path: str) -> pathlib.Path:
    rel = path.strip("/")
    return out_dir / rel if rel else out_dir


def render_page(
    request: Dict[str, Any],
    store: ContentStore,
    site: Dict[str, Any],
    out_dir: pathlib.Path,
) -> pathlib.Path:
    slug = request["context"]["slug"]
    node_id = request["context"].get("id")
    node = store.get_node(node_id) if node_id else store.find_by_slug(slug)
    if node is None:
        raise LookupError(f"no content node for {slug!r}")

    dest = page_dir(out_dir, request["path"])
    ensure_dir(dest)

    for name, data in (node.get("outputs") or {}).items():
        (dest / name).write_bytes(data)

    body = rewrite_urls_and_copy_assets(
        node.get("rawMarkdownBody", ""),
        pathlib.Path(node["fileAbsolutePath"]).parent,
        dest / ASSET_DIR_NAME,
        url_prefix=slug,
        root=pathlib.Path(node["contentDir"]) if node.get("contentDir") else None,
    )
    body, toc = prepare_markdown(body, max_depth=MAX_TOC_DEPTH)

    content = render_template(
        request["component"],
        post=node,
        html=markdown_to_html(body),
        toc=toc,
        bio=bio(site),
        previous=request["context"]["previous"],
        next=request["context"]["next"],
    )
    html = layout(
        request["path"],
        site["routes"],
        site,
        content,
        title=node["frontmatter"].get("title"),
    )
    out = dest / "index.html"
    out.write_text(html, encoding="utf-8")
    return out


def render_pages(
    requests: Iterable[Dict[str, Any]],
    store: ContentStore,
    site: Dict[str, Any],
    out_dir: pathlib.Path,
) -> List[pathlib.Path]:
    written = [render_page(r, store, site, out_dir) for r in requests]
    if written:
        print(f"✓ rendered {len(written)} pages into {out_dir}")
    return written


def render_listings(
    store: ContentStore,
    site: Dict[str, Any],
    out_dir: pathlib.Path,
) -> List[pathlib.Path]:
    """One index page per route that names a category."""
    edges = store.query_markdown()["data"]["allMarkdownRemark"]["edges"]
    buckets = group_by_category(edges)

    written: List[pathlib.Path] = []
    for route in site["routes"].values():
        category = route.get("category")
        if not category:
            continue
        if category not in buckets:
            print(f"! route {route['path']} names unknown category {category!r}")
            continue
        content = render_template(
            LISTING_TEMPLATE,
            posts=[e["node"] for e in buckets[category]],
            bio=bio(site),
        )
        dest = page_dir(out_dir, route["path"])
        ensure_dir(dest)
        out = dest / "index.html"
        out.write_text(
            layout(route["path"], site["routes"], site, content),
            encoding="utf-8",
        )
        written.append(out)
        print(f"✓ listing {route['path']} ({len(buckets[category])} posts)")
    return written
