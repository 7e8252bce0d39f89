"""Render the local state of an editor with the same templates the site uses."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional

from cardfolio.templating import build_environment


@lru_cache(maxsize=8)
def _environment(base_url: Optional[str]):
    return build_environment(base_url)


def render_preview(template: str, data: Any, base_url: Optional[str] = None, **context: Any) -> str:
    return _environment(base_url).get_template(template).render(data=data, **context)
