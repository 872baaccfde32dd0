"""Jinja2 rendering of the HTML email body."""

from __future__ import annotations

import logging

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape
from markupsafe import Markup, escape

logger = logging.getLogger(__name__)

DEFAULT_EMAIL_TEMPLATE = "notification_email.html.j2"


def nl2br(value: object) -> Markup:
    """Escape ``value`` and turn its line breaks into ``<br>`` tags."""
    return Markup("<br>").join(escape(line) for line in str(value).splitlines())


def default_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("multichannel_notifications", "templates"),
        autoescape=select_autoescape(["html", "xml", "j2"]),
        undefined=StrictUndefined,
    )
    env.filters["nl2br"] = nl2br
    return env


class EmailBodyRenderer:
    """
    Renders the subject/body of a notification into the HTML email layout.

    Pass a custom ``environment`` (with an ``nl2br`` filter) to use your own
    templates.
    """

    def __init__(
        self,
        template_name: str = DEFAULT_EMAIL_TEMPLATE,
        environment: Environment | None = None,
    ) -> None:
        self._env = environment or default_environment()
        self._template_name = template_name

    def render(self, subject: str, body: str) -> str:
        try:
            template = self._env.get_template(self._template_name)
            return template.render(subject=subject, body=body)
        except Exception as e:
            logger.error(f"Email template rendering failed: {e}")
            raise
