"""Tests for HTML email rendering."""

import jinja2
import pytest
from markupsafe import Markup

from multichannel_notifications.rendering import EmailBodyRenderer, nl2br


def test_nl2br_escapes_and_breaks_lines():
    result = nl2br("<b>one</b>\ntwo")

    assert isinstance(result, Markup)
    assert result == "&lt;b&gt;one&lt;/b&gt;<br>two"


def test_default_template_renders_subject_and_body():
    html = EmailBodyRenderer().render("Order <42>", "Shipped\nArriving soon")

    assert "<h2>Order &lt;42&gt;</h2>" in html
    assert "Shipped<br>Arriving soon" in html


def test_custom_environment():
    env = jinja2.Environment(
        loader=jinja2.DictLoader({"plain.html": "{{ subject }}|{{ body | nl2br }}"}),
        autoescape=True,
    )
    env.filters["nl2br"] = nl2br

    html = EmailBodyRenderer("plain.html", environment=env).render("S", "a\nb")

    assert html == "S|a<br>b"


def test_missing_template_raises():
    renderer = EmailBodyRenderer("missing.html.j2")

    with pytest.raises(jinja2.TemplateNotFound):
        renderer.render("S", "B")
