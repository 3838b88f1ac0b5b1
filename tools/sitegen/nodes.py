from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from .config import MARKDOWN_NODE, QUERY_LIMIT
from .utils import coerce_date_like

Node = Dict[str, Any]
NodeHook = Callable[[Node, Callable[..., None], Callable[[str], Optional[Node]]], None]


def _date_sort_value(node: Node) -> Optional[datetime]:
    v = coerce_date_like((node.get("frontmatter") or {}).get("date"))
    if isinstance(v, datetime):
        return v
    if isinstance(v, date):
        return datetime(v.year, v.month, v.day)
    return None


class ContentStore:
    """
    In-memory node registry with the small query surface the page builder
    needs. Nodes keep the framework's shape: `id`, `parent`, `children`,
    `internal.type`, `frontmatter` and a `fields` mapping for derived values.
    """

    def __init__(self, hooks: Optional[List[NodeHook]] = None) -> None:
        self._nodes: Dict[str, Node] = {}
        self._hooks: List[NodeHook] = list(hooks or [])
        self.errors: List[Dict[str, Any]] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def create_node(self, node: Node) -> Node:
        if node["id"] in self._nodes:
            raise ValueError(f"duplicate node id {node['id']!r}")
        node.setdefault("children", [])
        node.setdefault("fields", {})
        self._nodes[node["id"]] = node

        parent = self._nodes.get(node.get("parent") or "")
        if parent is not None:
            parent["children"].append(node["id"])

        for hook in self._hooks:
            hook(node, self.create_node_field, self.get_node)
        return node

    def create_node_field(self, name: str, node: Node, value: Any) -> None:
        if name == "slug":
            taken = self.find_by_slug(value)
            if taken is not None and taken is not node:
                message = f"slug {value!r} of {node['id']!r} already used by {taken['id']!r}"
                print(f"! {message}")
                self.report_error(message, path=node.get("id"))
        node.setdefault("fields", {})[name] = value

    def report_error(self, message: str, path: Optional[str] = None) -> None:
        err: Dict[str, Any] = {"message": message}
        if path:
            err["path"] = path
        self.errors.append(err)

    def nodes_of_type(self, internal_type: str) -> List[Node]:
        return [
            n for n in self._nodes.values()
            if n.get("internal", {}).get("type") == internal_type
        ]

    def find_by_slug(self, slug: str) -> Optional[Node]:
        for n in self.nodes_of_type(MARKDOWN_NODE):
            if n["fields"].get("slug") == slug:
                return n
        return None

    def query_markdown(self, limit: int = QUERY_LIMIT) -> Dict[str, Any]:
        """
        All Markdown nodes, newest first, at most `limit` of them.

        Shaped like a GraphQL response; ingestion errors are returned under
        `errors` next to the data.
        """
        nodes = self.nodes_of_type(MARKDOWN_NODE)
        dated = [n for n in nodes if _date_sort_value(n) is not None]
        undated = [n for n in nodes if _date_sort_value(n) is None]
        # sorted() is stable, so equal dates keep ingestion order
        dated = sorted(dated, key=_date_sort_value, reverse=True)
        ordered = (dated + undated)[:limit]

        result: Dict[str, Any] = {
            "data": {
                "allMarkdownRemark": {
                    "edges": [{"node": n} for n in ordered],
                }
            }
        }
        if self.errors:
            result["errors"] = list(self.errors)
        return result
