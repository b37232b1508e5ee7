"""
Walk an HTML tree and splice bionic-reading markers into its text leaves.

Every text node outside an opaque subtree (math, code, scripts, or a wrapper
this walker already produced) is replaced by a ``<br-span>`` element that
holds the same characters split into ``<br-bold>``, ``<br-fixation>`` and
``<br-edge>`` elements. Because generated wrappers are themselves opaque,
walking the same tree twice changes nothing the second time.
"""

from __future__ import annotations

import logging
from typing import Iterable

from bs4 import BeautifulSoup, NavigableString, Tag

from ..config import DEFAULT_OPAQUE_TAGS, FixationConfig, validate_config
from ..stream import AnnotationStream, build_stream
from .base import iter_pieces
from .markup import BOLD_TAG, EDGE_TAG, FIXATION_TAG, STRENGTH_ATTR, WRAPPER_TAG

logger = logging.getLogger(__name__)

OPAQUE_CLASSES = {"math", "math-block", "math-inline"}


class HtmlTreeWalker:
    """Annotate the text leaves of a BeautifulSoup tree in place."""

    def __init__(
        self,
        config: FixationConfig,
        opaque_tags: Iterable[str] = DEFAULT_OPAQUE_TAGS,
        parser: str = "html.parser",
    ) -> None:
        self.config = validate_config(config)
        self.opaque_tags = {tag.lower() for tag in opaque_tags} | {WRAPPER_TAG}
        self.parser = parser

    def apply(self, soup: BeautifulSoup) -> int:
        """Replace qualifying text leaves; return how many were replaced."""
        replaced = 0
        for node in list(soup.find_all(string=True)):
            if type(node) is not NavigableString or self._is_opaque(node):
                continue
            stream = build_stream(str(node), self.config)
            if not len(stream):
                continue
            node.replace_with(self._build_wrapper(soup, stream))
            replaced += 1
        logger.debug("Annotated %d text nodes", replaced)
        return replaced

    def render_document(self, html: str) -> str:
        """Parse ``html``, annotate it and serialize the result."""
        soup = BeautifulSoup(html, self.parser)
        self.apply(soup)
        if soup.body is not None:
            soup.body[STRENGTH_ATTR] = str(self.config.fixation_strength)
            soup.body["saccades-interval"] = str(self.config.saccades_interval)
        return str(soup)

    def _is_opaque(self, node: NavigableString) -> bool:
        for parent in node.parents:
            if not isinstance(parent, Tag) or isinstance(parent, BeautifulSoup):
                continue
            if parent.name.lower() in self.opaque_tags:
                return True
            classes = parent.get("class") or []
            if OPAQUE_CLASSES.intersection(classes):
                return True
        return False

    def _build_wrapper(self, soup: BeautifulSoup, stream: AnnotationStream) -> Tag:
        text = stream.text
        wrapper = soup.new_tag(WRAPPER_TAG)
        for piece, annotation in iter_pieces(stream):
            if annotation is None:
                wrapper.append(NavigableString(piece))
                continue
            if annotation.bold is not None:
                bold = soup.new_tag(BOLD_TAG)
                for fixation in annotation.fixations:
                    element = soup.new_tag(
                        FIXATION_TAG, attrs={STRENGTH_ATTR: str(fixation.strength)}
                    )
                    element.string = text[fixation.span.start : fixation.span.end]
                    bold.append(element)
                wrapper.append(bold)
            if annotation.edge is not None:
                edge = soup.new_tag(EDGE_TAG)
                edge.string = text[annotation.edge.start : annotation.edge.end]
                wrapper.append(edge)
        return wrapper
