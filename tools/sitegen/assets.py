from __future__ import annotations

import pathlib
import re
from typing import Optional

from .config import (
    ASSET_DIR_NAME,
    ASSET_SOURCE_DIR_CANDIDATES,
    HTML_SRC_OR_HREF,
    MD_LINK_IMG,
)
from .utils import short_hash, slugify

_SCHEME = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*:')


def ensure_dir(p: pathlib.Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def is_relative_local(url: str) -> bool:
    if not url:
        return False
    if _SCHEME.match(url):
        return False
    if url.startswith(("#", "/")):
        return False
    return True


def copy_asset_make_name(
    src: pathlib.Path, out_assets_dir: pathlib.Path
) -> str:
    data = src.read_bytes()
    safe_stem = slugify(src.stem) or "asset"
    fname = f"{safe_stem}.{short_hash(data)}{src.suffix}"
    ensure_dir(out_assets_dir)
    (out_assets_dir / fname).write_bytes(data)
    return f"{ASSET_DIR_NAME}/{fname}"


def resolve_asset_candidate(
    base_dir: pathlib.Path,
    url: str,
    root: Optional[pathlib.Path] = None,
) -> Optional[pathlib.Path]:
    """Find the linked file; with `root` set, files outside it are ignored."""
    root = root.resolve() if root is not None else None
    for adir in ("",) + ASSET_SOURCE_DIR_CANDIDATES:
        cand = (base_dir / adir / url).resolve()
        if root is not None and root not in cand.parents:
            continue
        if cand.is_file():
            return cand
    return None


def rewrite_urls_and_copy_assets(
    text: str,
    base_dir: pathlib.Path,
    out_assets_dir: pathlib.Path,
    url_prefix: str | None = None,
    root: Optional[pathlib.Path] = None,
) -> str:
    """
    Rewrite markdown/HTML URLs that are local relative paths by:
    - looking up the source file next to the content file
    - copying it to out_assets_dir with a hashed name
    - returning either "assets/..." or "<url_prefix>/assets/..."

    Files outside `root` are never copied.
    Links to other content files (.md, .ipynb) are left alone.
    """

    def _final_url(rel: str) -> str:
        if url_prefix:
            return f"{url_prefix.rstrip('/')}/{rel}"
        return rel

    def _copy(url: str) -> Optional[str]:
        if not is_relative_local(url):
            return None
        if url.lower().endswith((".md", ".markdown", ".ipynb")):
            return None
        src = resolve_asset_candidate(base_dir, url, root=root)
        if src is None:
            return None
        return _final_url(copy_asset_make_name(src, out_assets_dir))

    def _md_repl(m):
        new = _copy(m.group("url"))
        if new is None:
            return m.group(0)
        return f"{m.group(1)}[{m.group('alt')}]({new})"

    def _html_repl(m):
        new = _copy(m.group("url"))
        if new is None:
            return m.group(0)
        return f'{m.group("attr")}="{new}"'

    text = MD_LINK_IMG.sub(_md_repl, text)
    text = HTML_SRC_OR_HREF.sub(_html_repl, text)
    return text
