"""
Code-aware chunking engine for embedding and vector search ingestion.
"""

from .chunking import ChunkingOptions, ChunkKind, EnrichedChunk, SmartChunker, chunk_source
from .version import __version__

__all__ = [
    "ChunkKind",
    "ChunkingOptions",
    "EnrichedChunk",
    "SmartChunker",
    "chunk_source",
    "__version__",
]
