from __future__ import annotations

import json
import logging
from dataclasses import replace as dc_replace
from pathlib import Path
from typing import Dict, List, TypedDict

import typer
import yaml

from .config import (
    FixationConfig,
    InvalidConfigurationError,
    ReaderConfig,
    load_config,
    validate_config,
)
from .epub import EPUBParseError, annotate_epub, extract_text_from_epub
from .materializers import HtmlTreeWalker, create_materializer
from .models import Document, TaggedRange
from .stream import AnnotationStream, build_stream
from .textutils import HTML_SUFFIXES, html_to_text

logger = logging.getLogger(__name__)

app = typer.Typer(help="Jiffy Reader bionic reading CLI.", no_args_is_help=True)

# File types the CLI knows how to expand into Document instances.
SUPPORTED_INPUT_EXTENSIONS = {".txt", ".md", ".epub"} | HTML_SUFFIXES
RENDER_FORMATS = ("markup", "ansi", "html")


class RangePayload(TypedDict):
    start: int
    end: int
    role: str
    strength: int


class DocumentSummary(TypedDict):
    doc_id: str
    word_count: int
    emphasized_words: int
    ranges: List[RangePayload]


@app.command()
def annotate(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=True, file_okay=True
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    stem_percentage: float | None = typer.Option(
        None, "--stem-percentage", help="Share of each word (0-1] rendered bold."
    ),
    max_fixation_parts: int | None = typer.Option(
        None, "--max-fixation-parts", help="Max fixation groups per word stem."
    ),
    fixation_lower_bound: int | None = typer.Option(
        None,
        "--fixation-lower-bound",
        help="Fixation width that disables subdividing the stem.",
    ),
    fixation_strength: int | None = typer.Option(
        None, "--fixation-strength", help="How many fixation groups get full weight."
    ),
    saccades_interval: int | None = typer.Option(
        None, "--saccades-interval", help="Words skipped between emphasized words."
    ),
) -> None:
    """Annotate the input corpus and emit the tagged ranges as JSON."""
    cfg = _load_reader_config(
        config,
        stem_percentage,
        max_fixation_parts,
        fixation_lower_bound,
        fixation_strength,
        saccades_interval,
    )
    documents = _load_documents(input_path)
    summary = [
        _summarize(doc.doc_id, build_stream(doc.text, cfg.fixation))
        for doc in documents
    ]
    typer.echo(json.dumps({"documents": summary}, indent=2))


@app.command()
def render(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, file_okay=True
    ),
    output_path: Path | None = typer.Option(None, "--output-path", "-o"),
    output_format: str = typer.Option(
        "markup", "--format", "-f", help="One of: markup, ansi, html."
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    force: bool = typer.Option(
        False, "--force", help="Annotate even when the config disables reading mode."
    ),
    stem_percentage: float | None = typer.Option(None, "--stem-percentage"),
    max_fixation_parts: int | None = typer.Option(None, "--max-fixation-parts"),
    fixation_lower_bound: int | None = typer.Option(None, "--fixation-lower-bound"),
    fixation_strength: int | None = typer.Option(None, "--fixation-strength"),
    saccades_interval: int | None = typer.Option(None, "--saccades-interval"),
) -> None:
    """Render a single file with reading markers."""
    normalized = output_format.lower().strip()
    if normalized not in RENDER_FORMATS:
        raise typer.BadParameter(
            f"Unknown format '{output_format}'. Choose from {', '.join(RENDER_FORMATS)}.",
            param_hint="--format",
        )
    cfg = _load_reader_config(
        config,
        stem_percentage,
        max_fixation_parts,
        fixation_lower_bound,
        fixation_strength,
        saccades_interval,
    )
    source = input_path.read_text(encoding="utf-8")
    if not cfg.enable and not force:
        typer.echo("Reading mode disabled in config; output left unchanged.", err=True)
        rendered = source
    elif normalized == "html":
        walker = HtmlTreeWalker(cfg.fixation, opaque_tags=cfg.opaque_tags)
        rendered = walker.render_document(source)
    else:
        if input_path.suffix.lower() in HTML_SUFFIXES:
            source = html_to_text(source)
        stream = build_stream(source, cfg.fixation)
        rendered = create_materializer(normalized).render(stream)

    if output_path is None:
        typer.echo(rendered)
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(rendered, encoding="utf-8")
    typer.echo(f"Wrote {normalized} rendering to {output_path}")


@app.command()
def epub(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, file_okay=True
    ),
    output_path: Path = typer.Option(..., dir_okay=False),
    config: Path | None = typer.Option(None, "--config", "-c"),
    stem_percentage: float | None = typer.Option(None, "--stem-percentage"),
    max_fixation_parts: int | None = typer.Option(None, "--max-fixation-parts"),
    fixation_lower_bound: int | None = typer.Option(None, "--fixation-lower-bound"),
    fixation_strength: int | None = typer.Option(None, "--fixation-strength"),
    saccades_interval: int | None = typer.Option(None, "--saccades-interval"),
) -> None:
    """Write an EPUB copy whose chapters carry reading markers."""
    cfg = _load_reader_config(
        config,
        stem_percentage,
        max_fixation_parts,
        fixation_lower_bound,
        fixation_strength,
        saccades_interval,
    )
    walker = HtmlTreeWalker(cfg.fixation, opaque_tags=cfg.opaque_tags)
    try:
        chapters = annotate_epub(input_path, output_path, walker)
    except EPUBParseError as exc:
        raise typer.BadParameter(str(exc), param_hint="--input-path") from exc
    typer.echo(f"Annotated {chapters} chapters into {output_path}")


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = ReaderConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False))


def main() -> None:
    app()


def _load_reader_config(
    config_path: Path | None,
    stem_percentage: float | None,
    max_fixation_parts: int | None,
    fixation_lower_bound: int | None,
    fixation_strength: int | None,
    saccades_interval: int | None,
) -> ReaderConfig:
    """Load YAML config, apply CLI overrides and validate the fixation settings."""
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc
    overrides: Dict[str, float | int] = {}
    if stem_percentage is not None:
        overrides["word_stem_percentage"] = stem_percentage
    if max_fixation_parts is not None:
        overrides["max_fixation_parts"] = max_fixation_parts
    if fixation_lower_bound is not None:
        overrides["fixation_lower_bound"] = fixation_lower_bound
    if fixation_strength is not None:
        overrides["fixation_strength"] = fixation_strength
    if saccades_interval is not None:
        overrides["saccades_interval"] = saccades_interval
    fixation: FixationConfig = dc_replace(cfg.fixation, **overrides)
    try:
        cfg.fixation = validate_config(fixation)
    except InvalidConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return cfg


def _load_documents(input_path: Path) -> List[Document]:
    """Expand the input path into documents, using relative paths as doc IDs."""
    if input_path.is_file():
        return [_document_from_file(input_path, input_path.name)]

    files = sorted(
        p
        for p in input_path.rglob("*")
        if p.is_file() and p.suffix.lower() in SUPPORTED_INPUT_EXTENSIONS
    )
    if not files:
        logger.warning("No supported documents found under %s", input_path)
    return [_document_from_file(file, str(file.relative_to(input_path))) for file in files]


def _document_from_file(path: Path, doc_id: str) -> Document:
    """Read a supported file from disk and wrap it in a Document."""
    suffix = path.suffix.lower()
    try:
        if suffix == ".epub":
            text = extract_text_from_epub(path)
        elif suffix in HTML_SUFFIXES:
            text = html_to_text(path.read_text(encoding="utf-8"))
        else:
            text = path.read_text(encoding="utf-8")
    except EPUBParseError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return Document(doc_id=doc_id, text=text)


def _summarize(doc_id: str, stream: AnnotationStream) -> DocumentSummary:
    """Convert a stream into a JSON-serializable summary."""
    return {
        "doc_id": doc_id,
        "word_count": len(stream),
        "emphasized_words": sum(1 for a in stream if not a.skipped),
        "ranges": [_range_dict(r) for r in stream.ranges()],
    }


def _range_dict(tagged: TaggedRange) -> RangePayload:
    return {
        "start": tagged.span.start,
        "end": tagged.span.end,
        "role": tagged.role.value,
        "strength": tagged.strength,
    }


if __name__ == "__main__":
    main()
