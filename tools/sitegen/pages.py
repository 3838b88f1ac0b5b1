from __future__ import annotations

import sys
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .config import BLOG_POST_TEMPLATE, CATEGORIES, OTHER_CATEGORY, QUERY_LIMIT

Edge = Dict[str, Any]
Node = Dict[str, Any]


class QueryError(Exception):
    """The content query came back with errors; no pages were created."""

    def __init__(self, errors: List[Any]) -> None:
        self.errors = list(errors)
        super().__init__(
            "; ".join(str(e.get("message", e)) if isinstance(e, dict) else str(e)
                      for e in self.errors)
        )


def classify(node: Node) -> str:
    node_type = (node.get("fields") or {}).get("type")
    if node_type in CATEGORIES:
        return node_type
    return OTHER_CATEGORY


def group_by_category(edges: List[Edge]) -> Dict[str, List[Edge]]:
    buckets: Dict[str, List[Edge]] = {c: [] for c in CATEGORIES + (OTHER_CATEGORY,)}
    for edge in edges:
        buckets[classify(edge["node"])].append(edge)
    return buckets


def link_neighbours(
    posts: List[Edge],
) -> Iterator[Tuple[Edge, Optional[Node], Optional[Node]]]:
    """Yield (post, previous, next); posts are newest first, so next is i - 1."""
    for i, post in enumerate(posts):
        previous = None if i == len(posts) - 1 else posts[i + 1]["node"]
        nxt = None if i == 0 else posts[i - 1]["node"]
        yield post, previous, nxt


def create_post_pages(
    posts: List[Edge],
    create_page: Callable[..., None],
    component: str = BLOG_POST_TEMPLATE,
) -> int:
    for post, previous, nxt in link_neighbours(posts):
        slug = post["node"]["fields"]["slug"]
        create_page(
            path=slug,
            component=component,
            context={
                "id": post["node"]["id"],
                "slug": slug,
                "previous": previous,
                "next": nxt,
            },
        )
    return len(posts)


def create_pages(
    graphql: Callable[..., Dict[str, Any]],
    create_page: Callable[..., None],
    component: str = BLOG_POST_TEMPLATE,
    limit: int = QUERY_LIMIT,
) -> int:
    result = graphql(limit=limit)
    if result.get("errors"):
        print(result["errors"], file=sys.stderr)
        raise QueryError(result["errors"])

    posts = result["data"]["allMarkdownRemark"]["edges"]

    created = 0
    for category, bucket in group_by_category(posts).items():
        n = create_post_pages(bucket, create_page, component)
        if n:
            print(f"✓ {n} {category} pages")
        created += n
    return created


class PageRegistry:
    """Collects page-creation requests in the order they were issued."""

    def __init__(self) -> None:
        self.pages: List[Dict[str, Any]] = []

    def create_page(self, path: str, component: str, context: Dict[str, Any]) -> None:
        self.pages.append(
            {"path": path, "component": component, "context": context}
        )

    def __iter__(self):
        return iter(self.pages)

    def __len__(self) -> int:
        return len(self.pages)
