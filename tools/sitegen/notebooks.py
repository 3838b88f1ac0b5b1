from __future__ import annotations

import copy
import pathlib
import re
from typing import Any, Dict, Optional, Tuple

import nbformat
from nbconvert import MarkdownExporter
from nbformat import NotebookNode
from nbformat.validator import validate

from .utils import _norm_text, short_hash, slugify

_HIDDEN_INPUT_TAGS = {"hide-input", "remove-input", "hide_input", "remove_input"}
_HIDDEN_OUTPUT_TAGS = {"hide-output", "remove-output", "hide_output", "remove_output"}
_REMOVE_CELL_TAGS = {"remove-cell", "hide-cell", "remove_cell", "hide_cell"}

_H1_RE = re.compile(r'^\s*#\s+(.+?)\s*(?:\{\s*#[-a-z0-9]+\s*\})?\s*$', re.MULTILINE)


def _tags(cell: NotebookNode) -> set:
    md = cell.get("metadata") or {}
    return set(md.get("tags") or [])


def _is_effectively_empty(cell: NotebookNode) -> bool:
    src = _norm_text(cell.get("source", "")).strip()
    if src:
        return False
    if cell.get("cell_type") == "markdown":
        return not cell.get("attachments")
    if cell.get("cell_type") == "code":
        return not cell.get("outputs")
    return True


def _apply_hidden_flags(cell: NotebookNode) -> Optional[NotebookNode]:
    tags = _tags(cell)
    if tags & _REMOVE_CELL_TAGS:
        return None

    c = copy.deepcopy(cell)
    md = c.get("metadata") or {}
    jup = md.get("jupyter") if isinstance(md.get("jupyter"), dict) else {}

    source_hidden = (
        bool(jup.get("source_hidden"))
        or bool(tags & _HIDDEN_INPUT_TAGS)
        or bool(md.get("source_hidden"))
    )
    if source_hidden:
        if c.get("cell_type") == "markdown":
            return None
        if c.get("cell_type") == "code":
            c["source"] = ""

    outputs_hidden = (
        bool(jup.get("outputs_hidden"))
        or bool(tags & _HIDDEN_OUTPUT_TAGS)
        or bool(md.get("outputs_hidden"))
    )
    if outputs_hidden and c.get("cell_type") == "code":
        c["outputs"] = []
        c["execution_count"] = None

    return c


def filter_and_apply_visibility(nb: NotebookNode) -> None:
    cells = []
    for cell in nb.cells:
        cell = _apply_hidden_flags(cell)
        if cell is None or _is_effectively_empty(cell):
            continue
        cells.append(cell)
    nb.cells = cells


def notebook_title(nb: NotebookNode, path: pathlib.Path) -> str:
    if nb.metadata.get("title"):
        return nb.metadata["title"]
    for cell in nb.cells:
        if cell.get("cell_type") != "markdown":
            continue
        m = _H1_RE.search(cell.get("source", ""))
        if m:
            return m.group(1).strip()
    return path.stem.replace("-", " ").replace("_", " ").title()


def notebook_to_markdown(
    path: pathlib.Path,
) -> Tuple[Dict[str, Any], str, Dict[str, bytes]]:
    """
    Convert a notebook into (frontmatter, markdown body, output blobs).

    Output blobs (plots and other rich outputs) are renamed to
    `<stem>.<sha8><ext>` and the body is rewritten to match, so repeated
    builds produce the same file names.
    """
    nb = nbformat.read(str(path), as_version=4)
    validate(nb)
    filter_and_apply_visibility(nb)

    fm: Dict[str, Any] = {"title": notebook_title(nb, path)}
    for key in ("date", "description", "tags"):
        if key in nb.metadata:
            fm[key] = nb.metadata[key]

    body, resources = MarkdownExporter().from_notebook_node(nb)

    outputs: Dict[str, bytes] = {}
    for name, data in (resources.get("outputs") or {}).items():
        p = pathlib.Path(name)
        new_name = f"{slugify(p.stem) or 'output'}.{short_hash(data)}{p.suffix}"
        outputs[new_name] = data
        if new_name != name:
            body = body.replace(name, new_name)

    return fm, _norm_text(body), outputs
