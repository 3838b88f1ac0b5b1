from __future__ import annotations

import re
from typing import Any, Dict, List, Tuple

import markdown
from markupsafe import Markup

from .config import (
    BLOCK_HTML,
    BLOCK_MATH,
    FENCE,
    HEADING_ID,
    INLINE_MATH,
    MARKDOWN_EXTENSIONS,
    MD_HEADING,
    SETEXT_RE,
)
from .utils import normalize_markdown_light


def pad_block_html(md: str) -> str:
    lines, out, in_code = md.split("\n"), [], False
    for i, line in enumerate(lines):
        if line.strip().startswith(("```", "~~~")):
            in_code = not in_code
        if (not in_code) and BLOCK_HTML.match(line):
            if out and out[-1] != "":
                out.append("")
            out.append(line)
            if i + 1 < len(lines) and lines[i + 1].strip() != "":
                out.append("")
            continue
        out.append(line)
    return "\n".join(out)


def map_noncode(md: str, fn):
    parts, last = [], 0
    for m in FENCE.finditer(md):
        parts.append(fn(md[last : m.start()]))
        parts.append(md[m.start() : m.end()])
        last = m.end()
    parts.append(fn(md[last:]))
    return "".join(parts)


def map_noncode_nonmath(md: str, fn):
    def _strip_math(s):
        spans = []

        def _hold(regex, text):
            def repl(m):
                spans.append(m.group(0))
                return f"@@M{len(spans) - 1}@@"

            return regex.sub(repl, text)

        t = _hold(BLOCK_MATH, s)
        t = _hold(INLINE_MATH, t)
        t = fn(t)
        for i, span in enumerate(spans):
            t = t.replace(f"@@M{i}@@", span, 1)
        return t

    return map_noncode(md, _strip_math)


def slugify_heading(text: str) -> str:
    s = text.strip().lower()
    s = re.sub(r"\s+", "-", s)
    s = re.sub(r"[^a-z0-9\-]", "", s)
    s = re.sub(r"-{2,}", "-", s).strip("-")
    return s or "section"


def add_heading_ids(
    md_text: str, used_ids: Dict[str, int], max_depth: int = 3
) -> Tuple[str, List[Dict[str, Any]]]:
    """Add `{#id}` to headings and collect ToC items up to `max_depth`."""
    toc: List[Dict[str, Any]] = []

    def unique_id(base: str) -> str:
        n = used_ids.get(base, 0)
        used_ids[base] = n + 1
        return base if n == 0 else f"{base}-{n}"

    # Setext -> ATX first, so both forms go through the same pass below
    def _setext(m):
        level = 1 if m.group("underline").startswith("=") else 2
        return f"{'#' * level} {m.group('text').strip()}"

    text = SETEXT_RE.sub(_setext, md_text)

    lines = text.split("\n")
    for i, line in enumerate(lines):
        m = MD_HEADING.match(line)
        if not m:
            continue
        level = len(m.group("hash"))
        head_txt = m.group("text").strip()
        existing = HEADING_ID.search(head_txt)
        if existing:
            hid = existing.group("id")
            head_txt = HEADING_ID.sub("", head_txt)
            used_ids[hid] = used_ids.get(hid, 0) + 1
        else:
            hid = unique_id(slugify_heading(head_txt))
            lines[i] = f"{'#' * level} {head_txt} {{#{hid}}}"
        if level <= max_depth:
            toc.append({"level": level, "text": head_txt, "id": hid})

    return "\n".join(lines), toc


def prepare_markdown(
    body: str, max_depth: int = 3
) -> Tuple[str, List[Dict[str, Any]]]:
    toc: List[Dict[str, Any]] = []
    used_ids: Dict[str, int] = {}

    def _ids(s):
        s2, items = add_heading_ids(s, used_ids, max_depth=max_depth)
        toc.extend(items)
        return s2

    body = map_noncode(body, pad_block_html)
    body = map_noncode_nonmath(body, _ids)
    body = map_noncode_nonmath(body, normalize_markdown_light)
    return body, toc


def markdown_to_html(body: str) -> Markup:
    return Markup(markdown.markdown(body, extensions=list(MARKDOWN_EXTENSIONS)))
