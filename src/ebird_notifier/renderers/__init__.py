"""Pure rendering functions: structured data -> HTML strings.

Renderers take observations (or dicts) and return an HTML fragment. No side
effects, no I/O, no Prefect decorators.

Public API:
  - notification: build_notification_html, build_subject

Templates live in ``ebird_notifier/templates`` and are rendered through the
shared Jinja2 environment below (autoescaped).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

# Shared Jinja2 environment for all renderers
_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
_jinja_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=True,
)


def render_template(template_name: str, **kwargs: Any) -> str:
    """Render a Jinja2 template by name."""
    return _jinja_env.get_template(template_name).render(**kwargs)
