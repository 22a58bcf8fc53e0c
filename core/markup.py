# =============================================================================
# core/markup.py  —  Page body markup → Markdown-flavored text
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Rewrites the body markup returned by the pagecontent call into plain text
#   an LLM can read.  BeautifulSoup tokenizes the markup; the walk below only
#   understands the tags the help portal actually emits.
#
# SUPPORTED TAGS (the contract):
#   <script>, <style>    → removed together with their contents
#   <h1> … <h6>          → "\n" + N × "#" + " " … "\n"
#   <p>, <br>            → newline before and after / newline
#   <li>                 → "• " … "\n"
#   <code>               → `inline code`
#   <pre>                → fenced ``` block (inner tags are dropped)
#
# Every other tag is unwrapped: its text stays, the tag itself goes.
# Comments and declarations are dropped.  Character entities come back
# decoded.  Tables and nested lists are flattened to their text.
# =============================================================================

import re

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

_STRIP_TAGS = ["script", "style"]
_HEADINGS = {f"h{level}": level for level in range(1, 7)}
_BLANK_RUN = re.compile(r"\s*\n\s*\n\s*")


def _render_children(node: Tag) -> str:
    parts = []
    for child in node.children:
        if isinstance(child, PreformattedString):
            # comments, doctypes, CDATA, processing instructions
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child))
        elif isinstance(child, Tag):
            parts.append(_render_tag(child))
    return "".join(parts)


def _render_tag(tag: Tag) -> str:
    name = tag.name.lower()
    if name in _HEADINGS:
        return "\n" + "#" * _HEADINGS[name] + " " + _render_children(tag) + "\n"
    if name == "p":
        return "\n" + _render_children(tag) + "\n"
    if name == "br":
        return "\n"
    if name == "li":
        return "• " + _render_children(tag) + "\n"
    if name == "code":
        return "`" + _render_children(tag) + "`"
    if name == "pre":
        return "\n```\n" + tag.get_text() + "\n```\n"
    return _render_children(tag)


def html_to_text(markup: str) -> str:
    """Convert help-portal body markup to Markdown-flavored plain text.

    >>> html_to_text("<h1>Title</h1><p>Hello<br/>World</p>")
    '# Title\\n\\nHello\\nWorld'
    """
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup.find_all(_STRIP_TAGS):
        tag.decompose()

    text = _render_children(soup)
    text = _BLANK_RUN.sub("\n\n", text)
    return text.strip()
