#!/usr/bin/env python3
"""
Static builder for the blog/portfolio site.

- content/**/*.md, content/**/*.ipynb -> one page per post at its slug
  slug: path under content/ (`index` collapses onto its directory)
  type: first path segment when the slug is nested (`/blog/2020/post/`)
- Posts are paginated newest first within their category:
  blog, projects, and everything else
- Routes with a `category` in site.yml get a listing page
- Output: public/<slug>/index.html plus copied assets and notebook outputs
"""

from __future__ import annotations

import pathlib
import sys
from typing import Any, Dict, List

from .config import CONTENT_DIR, PUBLIC_DIR, SITE_CONFIG, load_site_config
from .fields import on_create_node
from .nodes import ContentStore
from .pages import PageRegistry, QueryError, create_pages
from .render import render_listings, render_pages
from .sources import source_filesystem


def build(
    content_dir: pathlib.Path = CONTENT_DIR,
    out_dir: pathlib.Path = PUBLIC_DIR,
    site_config: pathlib.Path = SITE_CONFIG,
) -> List[Dict[str, Any]]:
    site = load_site_config(site_config)

    store = ContentStore(hooks=[on_create_node])
    source_filesystem(store, content_dir)

    registry = PageRegistry()
    create_pages(store.query_markdown, registry.create_page)

    out_dir.mkdir(parents=True, exist_ok=True)
    render_pages(registry, store, site, out_dir)
    render_listings(store, site, out_dir)
    return registry.pages


def main():
    try:
        build()
    except QueryError as e:
        print(f"ERROR: content query failed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
