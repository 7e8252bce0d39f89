"""Jinja2 environment shared by the public card page and client previews."""
from __future__ import annotations

import os

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from cardfolio.core.utils import absolute_url
from cardfolio.domain.richtext import render_html

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")


def _richtext(value: str | None) -> Markup:
    # render_html escapes the raw text before adding markup
    return Markup(render_html(value))


def build_environment(base_url: str | None = None) -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["richtext"] = _richtext
    env.filters["absolute_url"] = lambda path: absolute_url(path, base_url) if path else ""
    return env
