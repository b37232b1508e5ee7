from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path, PurePosixPath

from .materializers import HtmlTreeWalker
from .textutils import HTML_SUFFIXES, html_to_text

logger = logging.getLogger(__name__)

MIMETYPE_MEMBER = "mimetype"
CONTAINER_MEMBER = "META-INF/container.xml"
TEXT_MEDIA_PREFIXES = ("application/xhtml", "text/html")


class EPUBParseError(RuntimeError):
    """Raised when an EPUB archive cannot be parsed."""


def extract_text_from_epub(epub_path: Path) -> str:
    """Return the concatenated text of all readable chapters in an EPUB."""
    with _open_epub(epub_path) as zf:
        texts: list[str] = []
        for member in _chapter_members(zf):
            try:
                raw_html = zf.read(member).decode("utf-8", errors="replace")
            except KeyError:
                logger.warning("Spine item %s missing from %s", member, epub_path)
                continue
            text = html_to_text(raw_html)
            if text:
                texts.append(text)
        return "\n\n".join(texts).strip()


def annotate_epub(epub_path: Path, output_path: Path, walker: HtmlTreeWalker) -> int:
    """Write a copy of ``epub_path`` whose chapters carry reading markers.

    Non-chapter members are copied byte for byte. Returns the number of
    chapters rewritten.
    """
    rewritten = 0
    with _open_epub(epub_path) as src:
        chapters = set(_chapter_members(src))
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(output_path, "w", zipfile.ZIP_DEFLATED) as dst:
            # Readers expect an uncompressed mimetype as the first member.
            if MIMETYPE_MEMBER in src.namelist():
                dst.writestr(
                    MIMETYPE_MEMBER,
                    src.read(MIMETYPE_MEMBER),
                    compress_type=zipfile.ZIP_STORED,
                )
            for info in src.infolist():
                if info.filename == MIMETYPE_MEMBER:
                    continue
                data = src.read(info.filename)
                if info.filename in chapters:
                    html = data.decode("utf-8", errors="replace")
                    data = walker.render_document(html).encode("utf-8")
                    rewritten += 1
                    logger.info("Annotated chapter %s", info.filename)
                dst.writestr(info, data)
    return rewritten


def _open_epub(epub_path: Path) -> zipfile.ZipFile:
    if not epub_path.exists():
        raise EPUBParseError(f"EPUB file not found: {epub_path}")
    try:
        return zipfile.ZipFile(epub_path, "r")
    except zipfile.BadZipFile as exc:
        raise EPUBParseError(f"Invalid EPUB archive: {epub_path}") from exc


def _chapter_members(zf: zipfile.ZipFile) -> list[str]:
    """Spine chapters in reading order, or every HTML member when there is no spine."""
    chapters = _spine_items(zf, _locate_opf(zf))
    if chapters:
        return chapters
    return [
        name
        for name in zf.namelist()
        if PurePosixPath(name).suffix.lower() in HTML_SUFFIXES
    ]


def _locate_opf(zf: zipfile.ZipFile) -> str:
    try:
        root = ET.fromstring(zf.read(CONTAINER_MEMBER))
    except KeyError as exc:
        raise EPUBParseError(f"EPUB missing {CONTAINER_MEMBER}") from exc
    except ET.ParseError as exc:
        raise EPUBParseError("Unable to parse container.xml") from exc
    rootfile = root.find(".//{*}rootfile")
    opf_path = rootfile.attrib.get("full-path") if rootfile is not None else None
    if not opf_path:
        raise EPUBParseError("container.xml does not name a package document")
    return opf_path


def _spine_items(zf: zipfile.ZipFile, opf_path: str) -> list[str]:
    try:
        root = ET.fromstring(zf.read(opf_path))
    except (KeyError, ET.ParseError):
        return []

    manifest: dict[str, tuple[str, str]] = {}
    for item in root.findall(".//{*}manifest/{*}item"):
        item_id = item.attrib.get("id")
        href = item.attrib.get("href")
        if item_id and href:
            manifest[item_id] = (href, item.attrib.get("media-type", "").lower())

    base = PurePosixPath(opf_path).parent
    members: list[str] = []
    for itemref in root.findall(".//{*}spine/{*}itemref"):
        entry = manifest.get(itemref.attrib.get("idref", ""))
        if entry is None:
            continue
        href, media_type = entry
        if not media_type.startswith(TEXT_MEDIA_PREFIXES):
            continue
        members.append((base / href).as_posix() if str(base) != "." else href)
    return members
