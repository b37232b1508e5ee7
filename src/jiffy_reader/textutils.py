from __future__ import annotations

from bs4 import BeautifulSoup

HTML_SUFFIXES = {".xhtml", ".html", ".htm"}

BLOCK_TAGS = [
    "p",
    "div",
    "br",
    "li",
    "ul",
    "ol",
    "section",
    "article",
    "blockquote",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
]


def html_to_text(html: str) -> str:
    """Return the readable text of an HTML document, one block per line.

    Inline markup (including reading markers) does not introduce breaks, so
    an annotated document yields the same text as its source.
    """
    soup = BeautifulSoup(html, "html.parser")
    for element in soup(["head", "script", "style"]):
        element.decompose()
    for element in soup.find_all(BLOCK_TAGS):
        element.insert_after("\n")
    lines = [line.strip() for line in soup.get_text().splitlines()]
    return "\n".join(line for line in lines if line).strip()
