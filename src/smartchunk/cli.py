"""
Command line interface for the smartchunk engine.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .chunking import ChunkingOptions, SmartChunker
from .chunking.languages import EXTENSION_TO_LANGUAGE
from .logger import configure_logging, get_logger, redirect_logging_to_file
from .settings import settings
from .version import __version__

app = typer.Typer(name="smartchunk", help="Code-aware chunking for embedding pipelines.")
configure_logging(level=settings.log_level_value, enable_console=False)
log = get_logger(__name__)
console = Console()


def _build_options(
    max_chunk_size: Optional[int],
    overlap: Optional[int],
    signatures: bool,
) -> ChunkingOptions:
    defaults = ChunkingOptions.from_settings()
    try:
        return ChunkingOptions(
            max_chunk_size=max_chunk_size or defaults.max_chunk_size,
            overlap=overlap if overlap is not None else defaults.overlap,
            min_chunk_size=defaults.min_chunk_size,
            preserve_signatures=signatures and defaults.preserve_signatures,
            calculate_complexity=defaults.calculate_complexity,
        )
    except ValidationError as exc:
        messages = "; ".join(error["msg"] for error in exc.errors())
        raise typer.BadParameter(messages) from exc


@app.command()
def chunk(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to chunk."),
    max_chunk_size: Optional[int] = typer.Option(
        None, "--max-chunk-size", "-m", min=1, help="Maximum characters per chunk."
    ),
    overlap: Optional[int] = typer.Option(
        None, "--overlap", "-o", min=0, help="Characters shared by consecutive parts."
    ),
    signatures: bool = typer.Option(
        True,
        "--signatures/--no-signatures",
        help="Prefix split parts with their parent's signature line.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON records instead of a table."),
    log_file: Optional[Path] = typer.Option(
        None, "--log", help="Write detailed logs to the given file."
    ),
) -> None:
    """Chunk a single source file and print the resulting records."""
    if log_file:
        redirect_logging_to_file(log_file, level=logging.DEBUG)

    options = _build_options(max_chunk_size, overlap, signatures)
    chunks = SmartChunker(options).chunk_file(path)
    log.info("file_chunked", file=str(path), chunks=len(chunks))

    if as_json:
        typer.echo(json.dumps([item.to_record() for item in chunks], indent=2))
        return

    table = Table(title=f"{path.name} ({len(chunks)} chunks)")
    table.add_column("#", justify="right")
    table.add_column("type")
    table.add_column("name")
    table.add_column("lines")
    table.add_column("part")
    table.add_column("chars", justify="right")
    table.add_column("cplx", justify="right")
    table.add_column("score", justify="right")
    for index, item in enumerate(chunks):
        record = item.chunk
        part = f"{record.part_number + 1}/{record.total_parts}" if record.is_partial else "-"
        table.add_row(
            str(index),
            record.kind.value,
            record.name,
            f"{record.start_line}-{record.end_line}",
            part,
            str(len(record.text)),
            str(item.complexity_estimate),
            str(item.importance_score),
        )
    console.print(table)


@app.command()
def languages() -> None:
    """List the file extensions the classifier recognizes."""
    table = Table(title="Recognized extensions")
    table.add_column("extension")
    table.add_column("language")
    table.add_column("family")
    table.add_column("grammar")
    for extension, info in sorted(EXTENSION_TO_LANGUAGE.items()):
        table.add_row(extension, info.name, info.family.value, info.grammar or "-")
    console.print(table)


@app.command()
def version() -> None:
    """Print the installed version."""
    typer.echo(__version__)


if __name__ == "__main__":  # pragma: no cover
    app()
