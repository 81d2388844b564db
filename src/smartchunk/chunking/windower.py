"""
Fixed-size character windowing for content without usable structure.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from .models import Chunk, ChunkKind
from ..logger import get_logger

log = get_logger(__name__)


def _line_at(source: str, offset: int) -> int:
    """1-based line number of the character at ``offset``."""
    return source.count("\n", 0, offset) + 1


def window_text(source: str, max_size: int, overlap: int) -> List[Chunk]:
    """Window raw text into ``text`` chunks of at most ``max_size`` characters."""
    whole = Chunk(
        kind=ChunkKind.TEXT,
        name="content",
        start_line=1,
        end_line=_line_at(source, max(len(source) - 1, 0)),
        start_offset=0,
        end_offset=len(source),
        content=source,
    )
    return window_chunk(whole, source, max_size, overlap, name_parts=True)


def window_chunk(
    chunk: Chunk,
    source: str,
    max_size: int,
    overlap: int,
    name_parts: bool = False,
) -> List[Chunk]:
    """
    Slide a ``max_size`` window over ``chunk`` with ``max_size - overlap`` steps.

    Kind, name and doc data are inherited from ``chunk``; only the first window
    keeps the doc comment. With ``name_parts`` every window is renamed
    ``chunk_<n>``, matching plain-text output.
    """
    if chunk.size <= max_size:
        return [chunk]

    step = max(1, max_size - overlap)
    windows: List[tuple[int, int]] = []
    start = chunk.start_offset
    while True:
        end = min(start + max_size, chunk.end_offset)
        windows.append((start, end))
        if end >= chunk.end_offset:
            break
        start += step

    total = len(windows)
    parent: Optional[str] = chunk.parent_name or chunk.name
    pieces: List[Chunk] = []
    for part, (start, end) in enumerate(windows):
        pieces.append(
            replace(
                chunk,
                name=f"chunk_{part}" if name_parts else chunk.name,
                start_line=_line_at(source, start),
                end_line=_line_at(source, end - 1),
                start_offset=start,
                end_offset=end,
                content=source[start:end],
                doc_comment=chunk.doc_comment if part == 0 else None,
                is_partial=True,
                part_number=part,
                total_parts=total,
                parent_name=parent,
                prefix="",
            )
        )
    log.debug(
        "chunk_windowed",
        name=chunk.name,
        kind=chunk.kind.value,
        parts=total,
        max_size=max_size,
        overlap=overlap,
    )
    return pieces
