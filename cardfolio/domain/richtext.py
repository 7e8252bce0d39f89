"""
Lightweight markup used by textareas that are not backed by a WYSIWYG editor.

Supported markup: ``**bold**``, ``*italic*``, ``• `` bullet lines and
``[text](url)`` links. There is no nesting; each line is rendered on its own.
"""
from __future__ import annotations

import html
import re
from dataclasses import dataclass
from enum import Enum

BULLET = "•"

_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"\*(.*?)\*")
_LINK_RE = re.compile(r"\[(.*?)\]\((.*?)\)")
_FULL_LINK_RE = re.compile(r"^\[(.*)\]\((.*)\)$", re.DOTALL)
_UNSAFE_SCHEMES = ("javascript:", "data:", "vbscript:")


class Format(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    BULLET = "bullet"
    LINK = "link"


@dataclass(frozen=True)
class FormatResult:
    text: str
    selection_start: int
    selection_end: int


def _wrapped_by(text: str, start: int, end: int, marker: str) -> bool:
    size = len(marker)
    if start < size or text[start - size : start] != marker or text[end : end + size] != marker:
        return False
    if marker == "*":
        # a single star next to another star belongs to bold markup
        before = text[start - 2 : start - 1] if start >= 2 else ""
        after = text[end + 1 : end + 2]
        return before != "*" and after != "*"
    return True


def _toggle_wrap(text: str, start: int, end: int, marker: str) -> FormatResult:
    size = len(marker)
    selected = text[start:end]
    if _wrapped_by(text, start, end, marker):
        new_text = text[: start - size] + selected + text[end + size :]
        return FormatResult(new_text, start - size, end - size)
    inner_wrapped = (
        len(selected) >= 2 * size
        and selected.startswith(marker)
        and selected.endswith(marker)
        and (marker != "*" or not selected.startswith("**"))
    )
    if inner_wrapped:
        inner = selected[size:-size]
        new_text = text[:start] + inner + text[end:]
        return FormatResult(new_text, start, start + len(inner))
    new_text = text[:start] + marker + selected + marker + text[end:]
    return FormatResult(new_text, start + size, end + size)


def _toggle_bullet(text: str, start: int, end: int) -> FormatResult:
    selected = text[start:end]
    prefix = BULLET + " "
    if selected.startswith(prefix):
        new_text = text[:start] + selected[len(prefix) :] + text[end:]
        return FormatResult(new_text, start, end - len(prefix))
    if selected:
        new_text = text[:start] + prefix + selected + text[end:]
        return FormatResult(new_text, start + 2, end + 2)
    new_text = text[:start] + prefix + text[end:]
    return FormatResult(new_text, start + 2, start + 2)


def _toggle_link(text: str, start: int, end: int) -> FormatResult:
    selected = text[start:end]
    match = _FULL_LINK_RE.match(selected)
    if match:
        label = match.group(1)
        new_text = text[:start] + label + text[end:]
        return FormatResult(new_text, start, start + len(label))
    if selected:
        formatted = f"[{selected}](url)"
        new_end = end + 1
    else:
        formatted = "[link](https://example.com)"
        new_end = start + 5
    new_text = text[:start] + formatted + text[end:]
    return FormatResult(new_text, start + 1, new_end)


def apply_format(text: str, start: int, end: int, kind: Format | str) -> FormatResult:
    """Wrap (or unwrap) ``text[start:end]`` in the markup for ``kind``.

    The returned selection covers the same characters the user had selected,
    shifted past any inserted markers.
    """
    text = text or ""
    start = max(0, min(start, len(text)))
    end = max(start, min(end, len(text)))
    fmt = Format(kind)
    if fmt is Format.BOLD:
        return _toggle_wrap(text, start, end, "**")
    if fmt is Format.ITALIC:
        return _toggle_wrap(text, start, end, "*")
    if fmt is Format.BULLET:
        return _toggle_bullet(text, start, end)
    return _toggle_link(text, start, end)


def _safe_href(url: str) -> str:
    if url.strip().lower().startswith(_UNSAFE_SCHEMES):
        return "#"
    return url


def _render_inline(line: str) -> str:
    escaped = html.escape(line, quote=True)
    escaped = _BOLD_RE.sub(r"<strong>\1</strong>", escaped)
    escaped = _ITALIC_RE.sub(r"<em>\1</em>", escaped)
    return _LINK_RE.sub(
        lambda m: f'<a href="{_safe_href(m.group(2))}" class="rt-link">{m.group(1)}</a>',
        escaped,
    )


def render_fragments(text: str | None) -> list[str]:
    """One HTML fragment per line of ``text``."""
    if not text:
        return []
    fragments = []
    for line in text.split("\n"):
        if line.strip().startswith(BULLET):
            body = line.replace(BULLET, "", 1).strip()
            fragments.append(
                f'<div class="rt-bullet"><span class="rt-bullet-mark">{BULLET}</span>'
                f"<span>{_render_inline(body)}</span></div>"
            )
        else:
            fragments.append(f'<p class="rt-line">{_render_inline(line)}</p>')
    return fragments


def render_html(text: str | None) -> str:
    return "\n".join(render_fragments(text))
