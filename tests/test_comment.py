"""Tests for comment rendering and synopsis extraction."""

from __future__ import annotations

import textwrap

import pytest

from docmod.comment import CommentRenderer
from docmod.links import LinkResolver


@pytest.fixture
def renderer() -> CommentRenderer:
    return CommentRenderer(
        LinkResolver(
            "example.com/docmod",
            "mod",
            symbols={"Module", "Package"},
            module_packages={"mod": "example.com/docmod/mod"},
        )
    )


def test_paragraphs_are_escaped(renderer: CommentRenderer) -> None:
    html = renderer.html("Compare a < b & c.\n\nSecond paragraph.")
    assert html == "<p>Compare a &lt; b &amp; c.</p>\n<p>Second paragraph.</p>"


def test_doc_links_become_anchors(renderer: CommentRenderer) -> None:
    html = renderer.html("See [Module] and [mod.Package] and [json.dumps].")
    assert '<a href="#Module">Module</a>' in html
    assert '<a href="mod.html#Package">mod.Package</a>' in html
    assert '<a href="https://docs.python.org/3/library/json#dumps">json.dumps</a>' in html


def test_unknown_brackets_stay_literal(renderer: CommentRenderer) -> None:
    html = renderer.html("A list like [not a link] or [mystery].")
    assert "[not a link]" in html
    assert "[mystery]" in html
    assert "<a " not in html


def test_bare_urls_are_linked(renderer: CommentRenderer) -> None:
    html = renderer.html("Docs live at https://example.com/docs.")
    assert '<a href="https://example.com/docs">https://example.com/docs</a>.' in html


def test_heading_list_and_code_blocks(renderer: CommentRenderer) -> None:
    text = textwrap.dedent(
        """\
        # Usage Notes

        - first item
        - second item

        1. one
        2. two

        Example:

            value = render(x)
            print(value)
        """
    )
    html = renderer.html(text)
    assert '<h3 id="hdr-Usage_Notes">Usage Notes</h3>' in html
    assert "<ul>\n<li>first item</li>\n<li>second item</li>\n</ul>" in html
    assert "<ol>\n<li>one</li>\n<li>two</li>\n</ol>" in html
    assert "<pre><code>value = render(x)\nprint(value)\n</code></pre>" in html


def test_code_blocks_do_not_resolve_links(renderer: CommentRenderer) -> None:
    html = renderer.html("    items[Module]")
    assert html == "<pre><code>items[Module]\n</code></pre>"


def test_bracketed_urls_are_linked_once(renderer: CommentRenderer) -> None:
    html = renderer.html("See [https://example.com/x] here.")
    assert '<a href="https://example.com/x">https://example.com/x</a>' in html
    assert "https://https://" not in html


def test_raw_html_is_escaped(renderer: CommentRenderer) -> None:
    html = renderer.html("Use <b>bold</b> sparingly.")
    assert "&lt;b&gt;bold&lt;/b&gt;" in html
    assert "<b>" not in html


def test_dunder_names_are_not_emphasis(renderer: CommentRenderer) -> None:
    html = renderer.html("Calls __init__ once.")
    assert html == "<p>Calls __init__ once.</p>"


def test_markdown_links_are_left_to_markdown(renderer: CommentRenderer) -> None:
    html = renderer.html("Read [Module](https://example.com/guide).")
    assert '<a href="https://example.com/guide">Module</a>' in html
    assert 'href="#Module"' not in html



def test_synopsis_takes_first_sentence(renderer: CommentRenderer) -> None:
    text = "Package mod processes a directory. It does more.\n\nDetails follow."
    assert renderer.synopsis(text) == "Package mod processes a directory."


def test_synopsis_reduces_links_to_text(renderer: CommentRenderer) -> None:
    assert renderer.synopsis("Wraps [mod.Package] for\ntemplates") == "Wraps mod.Package for templates"


def test_synopsis_skips_leading_heading(renderer: CommentRenderer) -> None:
    assert renderer.synopsis("# Title\n\nBody text here. More.") == "Body text here."


def test_empty_comment(renderer: CommentRenderer) -> None:
    assert renderer.html("") == ""
    assert renderer.synopsis("") == ""
