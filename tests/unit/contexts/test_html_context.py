"""Unit tests for contexts/html.py"""

import pytest

from mdview.config import RenderOptions
from mdview.contexts.html import HtmlContext
from mdview.core.models import ElementKind
from mdview.core.render import render_markdown


def _html(source, **kwargs):
    return render_markdown(source, HtmlContext(), **kwargs)


@pytest.mark.parametrize("source,expected", [
    ("# Hi\n",                 "<h1>Hi</h1>"),
    ("a & b\n",                "<p>a &amp; b</p>"),
    ("*a* **b** ~~c~~\n",      "<p><em>a</em> <strong>b</strong> <del>c</del></p>"),
    ("- a\n- b\n",             "<ul><li>a</li><li>b</li></ul>"),
    ("1. a\n",                 "<ol><li>a</li></ol>"),
    ("3. a\n",                 '<ol start="3"><li>a</li></ol>'),
    ("> q\n",                  "<blockquote><p>q</p></blockquote>"),
    ("***\n",                  "<hr>"),
    ("use `x`\n",              "<p>use <code>x</code></p>"),
    ("a\\\nb\n",               "<p>a<br>b</p>"),
])
def test_basic_markup(source, expected):
    assert _html(source) == expected


def test_code_block_language_and_escaping():
    assert _html("```py\nx < 1\n```\n") == '<pre><code class="language-py">x &lt; 1\n</code></pre>'


def test_task_list():
    assert _html("- [x] done\n") == '<ul><li><input type="checkbox" checked disabled>done</li></ul>'


def test_table_alignment():
    html = _html("| a |\n|:-:|\n| 1 |\n")
    assert html == (
        '<table><thead><tr><th style="text-align: center">a</th></tr></thead>'
        '<tbody><tr><td style="text-align: center">1</td></tr></tbody></table>'
    )


def test_link_and_image():
    assert _html('[x](http://a.b "T")\n') == '<p><a href="http://a.b" title="T">x</a></p>'
    assert _html("![alt](a.png)\n") == '<p><img src="a.png" alt="alt"></p>'


def test_math_mounts_stylesheet():
    html = _html("$x$\n", options=RenderOptions(maths=True))
    link, body = html.split("\n", 1)
    assert link.startswith('<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/katex@0.16.7/')
    assert 'crossorigin="anonymous"' in link
    assert body == '<p><span class="math-inline">x</span></p>'


def test_component_returns_html():
    components = {"Badge": lambda props: f'<span class="badge">{props.get("label")}</span>'}
    assert _html('<Badge label="new"/>\n', components=components) == '<span class="badge">new</span>'


def test_component_wraps_rendered_children():
    components = {"Box": lambda props: f"<section>{''.join(props.children)}</section>"}
    assert _html("<Box>\n\n**hey**\n\n</Box>\n", components=components) == "<section><p><strong>hey</strong></p></section>"


def test_raw_html_passthrough():
    assert _html("a <kbd>x</kbd>\n") == "<p>a <kbd>x</kbd></p>"


def test_unsupported_kind():
    with pytest.raises(ValueError, match="custom_component"):
        HtmlContext().create_element(ElementKind.custom_component, {}, [], (0, 0))


def test_highlighted_code_block():
    html = _html("```python\nprint(1)\n```\n", options=RenderOptions(theme="monokai"))
    assert html.startswith('<div class="highlight" style="background: #272822')
    assert "print" in html
    assert "language-python" not in html


def test_wikilink_anchor():
    html = _html("[[Home Page|home]]\n", options=RenderOptions(wikilinks=True))
    assert html == '<p><a href="Home Page" class="wikilink">home</a></p>'
