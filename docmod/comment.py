"""Rendering of documentation comments to HTML.

Comments are Markdown, rendered with Python-Markdown. Raw HTML in comments is
escaped rather than passed through, ``# Heading`` lines become ``<h3>``
elements with ``hdr-`` anchors, bare ``http(s)://`` URLs are linked and
``[Name]`` style doc links are resolved through the package's
:class:`LinkResolver`.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as etree
from typing import Optional

import markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor
from markdown.treeprocessors import Treeprocessor
from markdown.util import AtomicString

from .links import LinkResolver

DOC_LINK_PATTERN = r"\[([^\[\]\s][^\[\]]*)\](?![\[(])"
BARE_URL_PATTERN = r"(https?://[^\s<>\[\]\"']+[^\s<>\[\]\"'.,;:!?)])"

_SENTENCE_END = re.compile(r"[.!?](?=\s|$)")
_HEADING_ID = re.compile(r"[^A-Za-z0-9]+")


def heading_id(value: str, separator: str = "_") -> str:
    """Anchor for a comment heading: ``hdr-`` plus the title's word characters."""
    return "hdr-" + _HEADING_ID.sub(separator, value).strip(separator)


class DocLinkInlineProcessor(InlineProcessor):
    """Turns ``[target]`` into an anchor when the resolver accepts the target."""

    def __init__(self, pattern: str, md: markdown.Markdown, resolver: LinkResolver) -> None:
        super().__init__(pattern, md)
        self.resolver = resolver

    def handleMatch(self, m, data):
        link = self.resolver.parse(m.group(1))
        if link is None:
            return None, None, None
        href = self.resolver.url_for(link)
        if not href:
            return link.text, m.start(0), m.end(0)
        el = etree.Element("a")
        el.set("href", href)
        el.text = AtomicString(link.text)
        return el, m.start(0), m.end(0)


class BareUrlInlineProcessor(InlineProcessor):
    """Links bare ``http://`` and ``https://`` URLs."""

    ANCESTOR_EXCLUDES = ("a",)

    def handleMatch(self, m, data):
        el = etree.Element("a")
        el.set("href", m.group(1))
        el.text = AtomicString(m.group(1))
        return el, m.start(0), m.end(0)


class FirstParagraphTreeprocessor(Treeprocessor):
    """Records the text of the first top-level paragraph of each document."""

    def __init__(self, md: markdown.Markdown) -> None:
        super().__init__(md)
        self.text = ""

    def run(self, root):
        self.text = ""
        for el in root:
            if el.tag == "p":
                self.text = " ".join("".join(el.itertext()).split())
                break
        return None


class DocCommentExtension(Extension):
    """Doc links, bare URLs and escaped raw HTML for documentation comments."""

    def __init__(self, resolver: LinkResolver, **kwargs) -> None:
        self.resolver = resolver
        self.first_paragraph: Optional[FirstParagraphTreeprocessor] = None
        super().__init__(**kwargs)

    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
        md.inlinePatterns.deregister("entity")
        # dunder names such as __init__ are not emphasis
        md.inlinePatterns.deregister("em_strong2", strict=False)

        # after backticks and escapes, before reference links
        md.inlinePatterns.register(DocLinkInlineProcessor(DOC_LINK_PATTERN, md, self.resolver), "doc_link", 175)
        md.inlinePatterns.register(BareUrlInlineProcessor(BARE_URL_PATTERN, md), "bare_url", 105)

        self.first_paragraph = FirstParagraphTreeprocessor(md)
        md.treeprocessors.register(self.first_paragraph, "first_paragraph", 1)


class CommentRenderer:
    """Renders comment text for one package through its :class:`LinkResolver`."""

    def __init__(self, resolver: LinkResolver) -> None:
        self.resolver = resolver
        self._extension = DocCommentExtension(resolver)
        self._md = markdown.Markdown(
            extensions=[
                "fenced_code",
                "sane_lists",
                "toc",
                self._extension,
            ],
            extension_configs={
                "toc": {
                    "baselevel": 3,
                    "marker": "",
                    "slugify": heading_id,
                    "separator": "_",
                }
            },
        )

    def html(self, text: str) -> str:
        if not text.strip():
            return ""
        self._md.reset()
        return self._md.convert(text)

    def synopsis(self, text: str) -> str:
        """Return the first sentence of the first paragraph as plain text."""
        if not text.strip():
            return ""
        self.html(text)
        flat = self._extension.first_paragraph.text
        match = _SENTENCE_END.search(flat)
        return flat[: match.end()] if match else flat


__all__ = ["CommentRenderer", "DocCommentExtension", "heading_id"]
