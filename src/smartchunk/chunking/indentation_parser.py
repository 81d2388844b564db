"""
Pattern-based declaration extraction for indentation-delimited sources.

Function and class headers are matched at any nesting depth, so a method
yields its own chunk nested inside the chunk of its class. Block extents are
inferred from indentation: a block ends at the first code line indented no
deeper than its header.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .models import Chunk, ChunkKind
from ..logger import get_logger

log = get_logger(__name__)

_DECORATORS = r"(?P<decorators>(?:@[\w.]+(?:\(.*?\))?[ \t]*(?:#[^\n]*)?\r?\n[ \t]*)*)"
# Parameter lists may nest parentheses two levels deep, e.g. ``a=f(g(1))``.
_PARAMS = r"(?P<params>(?:[^()]|\((?:[^()]|\([^()]*\))*\))*)"

FUNCTION_PATTERN = re.compile(
    r"^(?P<indent>[ \t]*)"
    + _DECORATORS
    + r"(?P<async>async[ \t]+)?def[ \t]+(?P<name>\w+)[ \t]*\("
    + _PARAMS
    + r"\)[ \t]*(?:->[^:\n]+)?:",
    re.MULTILINE,
)
CLASS_PATTERN = re.compile(
    r"^(?P<indent>[ \t]*)"
    + _DECORATORS
    + r"class[ \t]+(?P<name>\w+)(?:[ \t]*\((?P<bases>[^)]*)\))?[ \t]*:",
    re.MULTILINE,
)

DOCSTRING_LOOKAHEAD = 5
_DOCSTRING_OPEN = re.compile(r"^[rRuUbBfF]{0,2}(\"\"\"|''')")


@dataclass(frozen=True)
class _SourceLines:
    """Line table for offset/line conversions over one source string."""

    lines: Sequence[str]
    starts: Sequence[int]

    @classmethod
    def build(cls, source: str) -> "_SourceLines":
        lines = source.split("\n")
        starts = [0]
        for line in lines[:-1]:
            starts.append(starts[-1] + len(line) + 1)
        return cls(lines=lines, starts=starts)

    def line_of(self, offset: int) -> int:
        """0-based line index containing ``offset``."""
        low, high = 0, len(self.starts) - 1
        while low < high:
            mid = (low + high + 1) // 2
            if self.starts[mid] <= offset:
                low = mid
            else:
                high = mid - 1
        return low

    def line_end(self, index: int) -> int:
        return self.starts[index] + len(self.lines[index])


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip())


def _is_skippable(stripped: str) -> bool:
    return not stripped or stripped.startswith("#")


def find_block_end(lines: Sequence[str], body_start: int, base_indent: int) -> int:
    """
    Return the 0-based index of the last line belonging to a block.

    Scanning starts at ``body_start``; blank and comment-only lines never end
    the block, and trailing ones are trimmed from it.
    """
    index = body_start
    while index < len(lines):
        stripped = lines[index].strip()
        if not _is_skippable(stripped) and _indent_width(lines[index]) <= base_indent:
            break
        index += 1
    last = index - 1
    while last >= body_start and _is_skippable(lines[last].strip()):
        last -= 1
    return max(last, body_start - 1)


def extract_docstring(lines: Sequence[str], body_start: int) -> Optional[str]:
    """Find a triple-quoted doc-string within the first lines of a block body."""
    for index in range(body_start, min(body_start + DOCSTRING_LOOKAHEAD, len(lines))):
        stripped = lines[index].strip()
        opening = _DOCSTRING_OPEN.match(stripped)
        if opening:
            quote = opening.group(1)
            head = stripped[opening.end():]
            if quote in head:
                text = head[: head.index(quote)].strip()
                return text or None
            collected = [head]
            for follow in lines[index + 1:]:
                if quote in follow:
                    collected.append(follow[: follow.index(quote)])
                    text = "\n".join(collected).strip()
                    return text or None
                collected.append(follow)
            return None
        if not _is_skippable(stripped):
            break
    return None


def _decorators(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(line.strip() for line in raw.splitlines() if line.strip())


def _iter_matches(source: str) -> Iterator[Tuple[ChunkKind, re.Match[str]]]:
    for match in FUNCTION_PATTERN.finditer(source):
        yield ChunkKind.FUNCTION, match
    for match in CLASS_PATTERN.finditer(source):
        yield ChunkKind.CLASS, match


def _build_chunk(
    kind: ChunkKind,
    match: re.Match[str],
    source: str,
    table: _SourceLines,
) -> Chunk:
    start_offset = match.start()
    header_line = table.line_of(match.start("name"))
    colon_line = table.line_of(match.end() - 1)
    base_indent = _indent_width(table.lines[header_line])
    body_start = colon_line + 1
    last_line = find_block_end(table.lines, body_start, base_indent)
    end_offset = table.line_end(last_line)

    name = match.group("name")
    if kind is ChunkKind.FUNCTION:
        is_async = match.group("async") is not None
        signature = f"{'async ' if is_async else ''}def {name}({match.group('params')})"
    else:
        is_async = False
        bases = match.group("bases")
        signature = f"class {name}({bases})" if bases else f"class {name}"

    return Chunk(
        kind=kind,
        name=name,
        start_line=table.line_of(start_offset) + 1,
        end_line=last_line + 1,
        start_offset=start_offset,
        end_offset=end_offset,
        content=source[start_offset:end_offset],
        signature=signature,
        doc_comment=extract_docstring(table.lines, body_start),
        decorators=_decorators(match.group("decorators")),
        is_async=is_async,
    )


def parse_indentation(source: str) -> List[Chunk]:
    """
    Extract function and class chunks, sorted by start offset.

    Nested declarations are kept, so ranges may overlap between a parent and
    its children. Without any match the whole file is one ``module`` chunk.
    """
    table = _SourceLines.build(source)
    chunks = [_build_chunk(kind, match, source, table) for kind, match in _iter_matches(source)]
    if not chunks:
        log.debug("no_declarations_found", strategy="indentation")
        return [
            Chunk(
                kind=ChunkKind.MODULE,
                name="module",
                start_line=1,
                end_line=len(table.lines),
                start_offset=0,
                end_offset=len(source),
                content=source,
            )
        ]
    chunks.sort(key=lambda chunk: chunk.start_offset)
    return chunks
