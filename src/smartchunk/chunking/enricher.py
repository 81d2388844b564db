"""
Metadata enrichment for final chunks: LOC, complexity and importance scores.
"""
from __future__ import annotations

import math
import re
from typing import Sequence

from .languages import LanguageInfo
from .models import Chunk, ChunkKind, EnrichedChunk

PRIVATE_PREFIX = "_"
PREVIEW_LENGTH = 200
MAX_COMPLEXITY = 100
MAX_IMPORTANCE = 10

_COMPLEXITY_PATTERNS: Sequence[re.Pattern[str]] = tuple(
    re.compile(pattern)
    for pattern in (
        r"\bif\b",
        r"\belse\s+if\b",
        r"\belse\b",
        r"\bfor\b",
        r"\bwhile\b",
        r"\bcase\b",
        r"\bcatch\b",
        r"\btry\b",
        r"\band\b",
        r"\bor\b",
        r"&&",
        r"\|\|",
        r"\?",
    )
)


def count_loc(content: str, comment_markers: Sequence[str]) -> int:
    """Count non-blank lines that do not start with a comment marker."""
    markers = tuple(comment_markers)
    loc = 0
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped and not stripped.startswith(markers):
            loc += 1
    return loc


def estimate_complexity(content: str) -> int:
    """Rough cyclomatic estimate: 1 plus one per branching/logical token, capped at 100."""
    complexity = 1
    for pattern in _COMPLEXITY_PATTERNS:
        complexity += len(pattern.findall(content))
    return min(complexity, MAX_COMPLEXITY)


def score_importance(chunk: Chunk) -> int:
    score = 5.0
    if chunk.is_exported:
        score += 2
    if chunk.name and not chunk.name.startswith(PRIVATE_PREFIX):
        score += 1
    if chunk.kind is ChunkKind.FUNCTION:
        score += 1
    if chunk.kind is ChunkKind.CLASS:
        score += 1
    if chunk.doc_comment:
        score += 1
    if chunk.is_async:
        score += 0.5
    if chunk.is_generator:
        score += 0.5
    # Halves round up.
    return min(int(math.floor(score + 0.5)), MAX_IMPORTANCE)


def build_preview(text: str) -> str:
    return text[:PREVIEW_LENGTH].replace("\n", " ").strip()


def enrich_chunk(
    chunk: Chunk,
    language: LanguageInfo,
    calculate_complexity: bool = True,
) -> EnrichedChunk:
    """Attach size, complexity, importance and preview metadata to ``chunk``."""
    return EnrichedChunk(
        chunk=chunk,
        language=language.name,
        loc_count=count_loc(chunk.content, language.comment_markers),
        complexity_estimate=estimate_complexity(chunk.content) if calculate_complexity else 1,
        importance_score=score_importance(chunk),
        preview_text=build_preview(chunk.text),
        is_public=bool(chunk.name) and not chunk.name.startswith(PRIVATE_PREFIX),
    )
