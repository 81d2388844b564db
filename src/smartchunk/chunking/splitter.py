"""
Splitting of oversize chunks into overlapping, line-aligned fragments.

Split points are picked near the ideal line count by scoring candidate lines:
blank lines and comments are preferred over closing brackets, which in turn
beat ``return``/``break`` statements and ordinary code.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence, Tuple

from .languages import LanguageFamily
from .models import BODY_PLACEHOLDER, Chunk
from .windower import window_chunk
from ..logger import get_logger

log = get_logger(__name__)

SEARCH_WINDOW = 10
BODY_OPEN_MARKER = {
    LanguageFamily.BRACE: " {",
    LanguageFamily.INDENTATION: ":",
    LanguageFamily.UNKNOWN: "",
}

_CLOSING_LINES = frozenset({"}", "};", "})", "});", "]", "];", "])", "]);", ")", ");"})
_LOOP_EXITS = frozenset({"break", "break;", "continue", "continue;"})


def score_split_point(line: str, family: LanguageFamily) -> int:
    """Score a line as the first line of the next fragment (higher is better)."""
    stripped = line.strip()
    if not stripped:
        return 10
    if family is LanguageFamily.INDENTATION:
        if stripped.startswith("#"):
            return 8
    elif stripped.startswith(("//", "/*", "*")):
        return 8
    if stripped in _CLOSING_LINES:
        return 7
    if stripped == "return" or stripped.startswith(("return ", "return;")):
        return 6
    if stripped in _LOOP_EXITS:
        return 5
    return 1


def _line_starts(lines: Sequence[str]) -> List[int]:
    starts = [0]
    for line in lines:
        starts.append(starts[-1] + len(line) + 1)
    return starts


def find_split_point(
    lines: Sequence[str],
    current: int,
    ideal: int,
    limit: int,
    family: LanguageFamily,
) -> int:
    """
    Pick the split line in ``[ideal - 10, ideal + 10]`` clamped to ``(current, limit]``.

    The first line with the strictly highest score wins. ``limit`` equal to the
    number of lines means the fragment may run to the end of the chunk.
    """
    search_start = max(current + 1, ideal - SEARCH_WINDOW)
    search_end = min(limit, ideal + SEARCH_WINDOW)
    best_line = min(max(ideal, current + 1), limit)
    best_score = -1
    for index in range(search_start, search_end + 1):
        score = 10 if index >= len(lines) else score_split_point(lines[index], family)
        if score > best_score:
            best_score = score
            best_line = index
    return best_line


def _plan_ranges(
    lines: Sequence[str],
    starts: Sequence[int],
    max_size: int,
    overlap: int,
    family: LanguageFamily,
) -> List[Tuple[int, int]]:
    total_chars = starts[-1] - 1
    average = total_chars / len(lines)
    lines_per_chunk = max(1, int(max_size / average)) if average else len(lines)
    overlap_lines = int(overlap / average) if average else 0

    def size(first: int, stop: int) -> int:
        return starts[stop] - starts[first] - 1

    ranges: List[Tuple[int, int]] = []
    current = 0
    while True:
        if size(current, len(lines)) <= max_size:
            if size(current, len(lines)) > 0:
                ranges.append((current, len(lines)))
            break
        limit = current + 1
        while limit < len(lines) and size(current, limit + 1) <= max_size:
            limit += 1
        ideal = min(current + lines_per_chunk, limit)
        split = find_split_point(lines, current, ideal, limit, family)
        if size(current, split) > 0:
            ranges.append((current, split))
        # Overlap never moves the cursor backwards past the previous start.
        current = max(split - overlap_lines, current + 1)
    return ranges


def split_chunk(
    chunk: Chunk,
    source: str,
    max_size: int,
    overlap: int,
    preserve_signatures: bool = True,
    family: LanguageFamily = LanguageFamily.BRACE,
) -> List[Chunk]:
    """
    Split ``chunk`` into sub-chunks of at most ``max_size`` characters.

    Chunks within budget are returned unchanged. Chunks holding a single line
    longer than the budget cannot be split on lines and are windowed instead.
    """
    if chunk.size <= max_size:
        return [chunk]

    lines = chunk.content.split("\n")
    if any(len(line) > max_size for line in lines):
        log.debug("chunk_split_windowed", name=chunk.name, size=chunk.size)
        return window_chunk(chunk, source, max_size, overlap)

    starts = _line_starts(lines)
    ranges = _plan_ranges(lines, starts, max_size, overlap, family)

    header = ""
    if preserve_signatures and chunk.signature:
        signature_line = chunk.signature.split("\n", 1)[0]
        if signature_line.endswith(BODY_PLACEHOLDER):
            signature_line = signature_line[: -len(BODY_PLACEHOLDER)]
        header = signature_line.rstrip() + BODY_OPEN_MARKER[family] + "\n"

    total = len(ranges)
    parent = chunk.parent_name or chunk.name
    pieces: List[Chunk] = []
    for part, (first, stop) in enumerate(ranges):
        start_offset = chunk.start_offset + starts[first]
        end_offset = chunk.start_offset + starts[stop] - 1
        pieces.append(
            replace(
                chunk,
                start_line=chunk.start_line + first,
                end_line=chunk.start_line + stop - 1,
                start_offset=start_offset,
                end_offset=end_offset,
                content=source[start_offset:end_offset],
                doc_comment=chunk.doc_comment if part == 0 else None,
                is_partial=True,
                part_number=part,
                total_parts=total,
                parent_name=parent,
                prefix=header if part > 0 else "",
            )
        )
    log.debug(
        "chunk_split",
        name=chunk.name,
        kind=chunk.kind.value,
        size=chunk.size,
        parts=total,
    )
    return pieces
