#!/usr/bin/env python3
from __future__ import annotations

import copy
import pathlib
import re
from typing import Any, Dict

# ---------- Paths

# This assumes config.py sits in tools/sitegen/ at the repo root.
ROOT = pathlib.Path(__file__).resolve().parents[2]
CONTENT_DIR = ROOT / "content"
PUBLIC_DIR = ROOT / "public"
TEMPLATE_DIR = pathlib.Path(__file__).resolve().parent / "templates"
SITE_CONFIG = ROOT / "site.yml"

# ---------- Content query

QUERY_LIMIT = 1000
FILE_NODE = "File"
MARKDOWN_NODE = "MarkdownRemark"
MARKDOWN_SUFFIXES = (".md", ".markdown")
NOTEBOOK_SUFFIX = ".ipynb"

# ---------- Pages

BLOG_POST_TEMPLATE = "blog-post.html.j2"
LISTING_TEMPLATE = "listing.html.j2"
CATEGORIES = ("blog", "projects")
OTHER_CATEGORY = "other"
# a slug needs more than this many "/"-separated segments to carry a type
TYPE_MIN_SEGMENTS = 3

ASSET_DIR_NAME = "assets"
ASSET_SOURCE_DIR_CANDIDATES = ("assets", "_assets")
MAX_TOC_DEPTH = 3
MARKDOWN_EXTENSIONS = ("fenced_code", "tables", "attr_list")

DEFAULT_SITE: Dict[str, Any] = {
    "title": "Blog",
    "author": "Site Author",
    "role": "Software Developer",
    "avatar": "",
    "routes": {
        "root": {"path": "/", "title": "Blog", "category": "blog"},
        "projects": {
            "path": "/projects/",
            "title": "Projects",
            "category": "projects",
        },
        "aboutMe": {"path": "/about-me/", "title": "About me"},
    },
    "nav": None,
    "social": [],
}

# Some shared regexes

MD_LINK_IMG = re.compile(
    r'(!?)\[(?P<alt>[^\]]*)\]\((?P<url>[^)\s]+)(?:\s+"[^"]*")?\)'
)
HTML_SRC_OR_HREF = re.compile(
    r'(?P<attr>\bsrc\b|\bhref\b)\s*=\s*([\'"])(?P<url>[^\'"]+)\2'
)
MD_HEADING = re.compile(r'^(?P<hash>#{1,6})\s+(?P<text>.+?)\s*$',
                        re.MULTILINE)
SETEXT_RE = re.compile(
    r'^(?P<text>[^\n#].*?)\n(?P<underline>=+|-+)[ \t]*$', re.MULTILINE
)
HEADING_ID = re.compile(r"\s*\{\s*#(?P<id>[-a-z0-9]+)\s*\}\s*$")
BLOCK_HTML = re.compile(
    r'^(<(?P<tag>(div|table|figure|video|iframe|details|summary|blockquote)\b)'
    r'[\s\S]*?>[\s\S]*?</(?P=tag)>)$',
    re.MULTILINE,
)
FENCE = re.compile(r"(^```.*?$)(.*?)(^```$)",
                   re.MULTILINE | re.DOTALL)
INLINE_MATH = re.compile(r'(?<!\\)\$(.+?)(?<!\\)\$')
BLOCK_MATH = re.compile(
    r'(^\$\$.*?^\$\$)', re.MULTILINE | re.DOTALL
)
SPACES_EOL = re.compile(r'[ \t]+$', re.MULTILINE)
SLUG_RE = re.compile(r"[^a-z0-9-]+")


def load_site_config(path: pathlib.Path = SITE_CONFIG) -> Dict[str, Any]:
    """
    Read site.yml and lay it over DEFAULT_SITE.

    Top-level keys replace the defaults wholesale, so a `routes` mapping in
    site.yml is the complete routing table.
    """
    from .utils import read_yaml

    site = copy.deepcopy(DEFAULT_SITE)
    data = read_yaml(path)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    for key, value in data.items():
        site[key] = value
    return site
