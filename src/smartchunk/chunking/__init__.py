"""
Chunking utilities for code-aware embedding ingestion.

Integrates Tree-sitter parsing for brace-delimited languages and indentation
heuristics for Python to split source files into bounded, semantically rich
segments with retrieval metadata.
"""

from .engine import SmartChunker, chunk_source
from .languages import LanguageFamily, LanguageInfo, detect_language
from .models import Chunk, ChunkingOptions, ChunkKind, EnrichedChunk

__all__ = [
    "Chunk",
    "ChunkKind",
    "ChunkingOptions",
    "EnrichedChunk",
    "LanguageFamily",
    "LanguageInfo",
    "SmartChunker",
    "chunk_source",
    "detect_language",
]
