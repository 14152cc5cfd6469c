"""Markdown to HTML conversion for daily notes.

Raw HTML inside a note is never passed through, with one exception: a
``<source src="...">`` tag, which older notes use inside media embeds. It is
rebuilt from scratch so that only its ``src`` attribute survives. Everything
else that looks like HTML ends up escaped in the output.
"""

from __future__ import annotations

import html
import re
import xml.etree.ElementTree as etree

import markdown
from markdown.extensions import Extension
from markdown.extensions.fenced_code import FencedCodeExtension
from markdown.extensions.tables import TableExtension
from markdown.inlinepatterns import InlineProcessor
from markdown.treeprocessors import Treeprocessor

SOURCE_TAG_RE = r"(?i)<source\b([^<>]*?)/?>"

_SRC_ATTR_RE = re.compile(
    r"""(?:^|\s)src\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+))""",
    re.IGNORECASE,
)

UNSAFE_SCHEMES = ("javascript:", "vbscript:", "data:")

URL_ATTRIBUTES = {"a": "href", "img": "src", "source": "src"}


def is_unsafe_url(url: str) -> bool:
    # Browsers decode entities and skip control characters before looking at the scheme
    normalized = re.sub(r"[\x00-\x20]+", "", html.unescape(url)).lower()
    return normalized.startswith(UNSAFE_SCHEMES)


class SourceTagInlineProcessor(InlineProcessor):
    def handleMatch(self, m, data):
        attr = _SRC_ATTR_RE.search(m.group(1))
        if attr is None:
            return None, None, None
        src = next(g for g in attr.groups() if g is not None)
        el = etree.Element("source")
        el.set("src", src)
        return el, m.start(0), m.end(0)


class UnsafeUrlTreeprocessor(Treeprocessor):
    def run(self, root):
        for el in root.iter():
            attr = URL_ATTRIBUTES.get(el.tag)
            if attr is None:
                continue
            value = el.get(attr)
            if value is not None and is_unsafe_url(value):
                del el.attrib[attr]
        return None


class SanitizeExtension(Extension):
    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
        md.inlinePatterns.register(SourceTagInlineProcessor(SOURCE_TAG_RE, md), "source_tag", 90)
        md.treeprocessors.register(UnsafeUrlTreeprocessor(md), "unsafe_urls", 5)


def _markdown_renderer() -> markdown.Markdown:
    return markdown.Markdown(
        extensions=[
            FencedCodeExtension(),
            TableExtension(),
            "pymdownx.tilde",
            "pymdownx.magiclink",
            "pymdownx.tasklist",
            SanitizeExtension(),
        ],
        extension_configs={
            # ~text~ stays literal; only ~~text~~ is strikethrough
            "pymdownx.tilde": {"subscript": False},
        },
        output_format="html",
    )


def render_markdown(text: str) -> str:
    # A new renderer per call; Markdown instances carry per-document state.
    return _markdown_renderer().convert(text)
