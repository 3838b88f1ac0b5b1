"""
Presentational pieces of the site: navigation, bio, social links and the
page layout that wraps every rendered page.

Each component renders one Jinja2 template from `templates/` and returns
`Markup`, so components nest inside each other without double escaping.
The routing table is always handed in by the caller.
"""

from __future__ import annotations

import functools
import pathlib
from typing import Any, Dict, Iterable, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from .config import TEMPLATE_DIR

Routes = Dict[str, Dict[str, Any]]


@functools.lru_cache(maxsize=None)
def get_env(template_dir: pathlib.Path = TEMPLATE_DIR) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_template(name: str, **context: Any) -> Markup:
    return Markup(get_env().get_template(name).render(**context))


def select_routes(routes: Routes, visible: Optional[Iterable[str]] = None) -> List[Dict[str, Any]]:
    if visible is None:
        return list(routes.values())
    return [routes[key] for key in visible if key in routes]


def find_route(routes: Routes, location: str) -> Optional[Dict[str, Any]]:
    for route in routes.values():
        if route.get("path") == location:
            return route
    return None


def nav(routes: Routes, visible: Optional[Iterable[str]] = None, children: str = "") -> Markup:
    return render_template(
        "nav.html.j2",
        routes=select_routes(routes, visible),
        children=children,
    )


def bio(site: Dict[str, Any]) -> Markup:
    return render_template(
        "bio.html.j2",
        author=site.get("author", ""),
        role=site.get("role", ""),
        avatar=site.get("avatar", ""),
    )


def social(links: Iterable[Dict[str, Any]]) -> Markup:
    return render_template(
        "social.html.j2",
        links=[li for li in links if isinstance(li, dict) and li.get("url")],
    )


def layout(
    location: str,
    routes: Routes,
    site: Dict[str, Any],
    content: str,
    title: Optional[str] = None,
) -> Markup:
    route = find_route(routes, location)
    return render_template(
        "layout.html.j2",
        nav=nav(routes, site.get("nav"), children=social(site.get("social") or [])),
        route=route,
        author=site.get("author", ""),
        page_title=title or (route or {}).get("title") or site.get("title", ""),
        site_title=site.get("title", ""),
        content=Markup(content),
    )
