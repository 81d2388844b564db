"""
Chunking pipeline: classify -> parse -> split -> enrich.

Each call works on its own copy of the inputs and keeps no state between
calls, so one :class:`SmartChunker` can serve concurrent callers.
"""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from .enricher import enrich_chunk
from .indentation_parser import parse_indentation
from .languages import LanguageFamily, LanguageInfo, detect_language
from .models import Chunk, ChunkingOptions, ChunkKind, EnrichedChunk
from .splitter import split_chunk
from .tree_sitter_parser import parse_brace
from .windower import window_chunk, window_text
from ..logger import get_logger

log = get_logger(__name__)

_WHOLE_FILE_KINDS = {ChunkKind.MODULE, ChunkKind.UNPARSEABLE}


class SmartChunker:
    """Code-aware chunker producing bounded, metadata-rich chunks."""

    def __init__(self, options: Optional[ChunkingOptions] = None) -> None:
        self.options = options or ChunkingOptions.from_settings()

    def chunk_text(
        self,
        source: str,
        file_path: Union[str, Path],
        options: Optional[ChunkingOptions] = None,
    ) -> List[EnrichedChunk]:
        """Chunk ``source`` using the language implied by ``file_path``."""
        opts = options or self.options
        language = detect_language(file_path)

        if language.family is LanguageFamily.UNKNOWN:
            pieces = window_text(source, opts.max_chunk_size, opts.overlap)
        else:
            pieces = []
            for chunk in self._parse(source, language):
                pieces.extend(self._bound(chunk, source, language, opts))

        enriched = [
            enrich_chunk(piece, language, calculate_complexity=opts.calculate_complexity)
            for piece in pieces
        ]
        log.debug(
            "chunks_ready",
            file=str(file_path),
            language=language.name,
            chunks=len(enriched),
        )
        return enriched

    async def chunk_text_async(
        self,
        source: str,
        file_path: Union[str, Path],
        options: Optional[ChunkingOptions] = None,
    ) -> List[EnrichedChunk]:
        """Run :meth:`chunk_text` in a worker thread for asyncio callers."""
        return await asyncio.to_thread(self.chunk_text, source, file_path, options)

    def chunk_file(
        self, path: Path, options: Optional[ChunkingOptions] = None
    ) -> List[EnrichedChunk]:
        text = path.read_text(encoding="utf-8", errors="ignore")
        return self.chunk_text(text, path, options)

    def chunk_files(
        self,
        files: Iterable[Path],
        progress_callback: Optional[Callable[[Path], None]] = None,
    ) -> List[EnrichedChunk]:
        """Chunk every file in ``files``, reporting each one to ``progress_callback``."""
        results: List[EnrichedChunk] = []
        for path in files:
            try:
                results.extend(self.chunk_file(path))
            finally:
                if progress_callback:
                    progress_callback(path)
        return results

    @staticmethod
    def _parse(source: str, language: LanguageInfo) -> List[Chunk]:
        if language.family is LanguageFamily.INDENTATION:
            return parse_indentation(source)
        return parse_brace(source, language.grammar or language.name).chunks

    @staticmethod
    def _bound(
        chunk: Chunk,
        source: str,
        language: LanguageInfo,
        opts: ChunkingOptions,
    ) -> List[Chunk]:
        if chunk.size <= opts.max_chunk_size:
            return [chunk]
        if chunk.kind in _WHOLE_FILE_KINDS:
            return window_chunk(chunk, source, opts.max_chunk_size, opts.overlap)
        return split_chunk(
            chunk,
            source,
            opts.max_chunk_size,
            opts.overlap,
            preserve_signatures=opts.preserve_signatures,
            family=language.family,
        )


def chunk_source(
    source: str,
    file_path: Union[str, Path],
    options: Optional[ChunkingOptions] = None,
) -> List[EnrichedChunk]:
    """Convenience wrapper around a one-off :class:`SmartChunker`."""
    return SmartChunker(options).chunk_text(source, file_path)
