"""
Chunk data types shared by every chunking stage.

Each parser strategy builds the same :class:`Chunk` shape; the enricher wraps
it into an :class:`EnrichedChunk` that serializes to the flat record consumed
by embedding pipelines.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, model_validator

from ..settings import AppSettings, settings


# Stands in for a function body in signatures taken from function-valued variables.
BODY_PLACEHOLDER = "{...}"


class ChunkKind(str, Enum):
    """Semantic category of a chunk."""

    FUNCTION = "function"
    CLASS = "class"
    MODULE = "module"
    TEXT = "text"
    OTHER = "other"
    UNPARSEABLE = "unparseable"


@dataclass(frozen=True)
class Chunk:
    """A contiguous span of a source file.

    ``content`` is always ``source[start_offset:end_offset]``. Text added to make
    a split fragment read on its own (the parent's signature line) lives in
    ``prefix`` so the offsets stay exact.
    """

    kind: ChunkKind
    name: str
    start_line: int
    end_line: int
    start_offset: int
    end_offset: int
    content: str
    signature: Optional[str] = None
    doc_comment: Optional[str] = None
    decorators: Tuple[str, ...] = ()
    is_async: bool = False
    is_generator: bool = False
    is_exported: bool = False
    is_partial: bool = False
    part_number: int = 0
    total_parts: int = 1
    parent_name: Optional[str] = None
    prefix: str = ""

    @property
    def text(self) -> str:
        """Embeddable text: the signature prefix (if any) followed by the content."""
        return self.prefix + self.content

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class EnrichedChunk:
    """A final chunk plus the metrics computed by the enricher."""

    chunk: Chunk
    language: str
    loc_count: int
    complexity_estimate: int
    importance_score: int
    preview_text: str
    is_public: bool

    @property
    def content(self) -> str:
        return self.chunk.content

    def to_record(self) -> Dict[str, Any]:
        """Flatten into the ``{"content", "metadata"}`` record used for ingestion."""
        chunk = self.chunk
        text = chunk.text
        metadata: Dict[str, Any] = {
            "chunk_type": chunk.kind.value,
            "name": chunk.name,
            "language": self.language,
            "start_line": chunk.start_line,
            "end_line": chunk.end_line,
            "start_char": chunk.start_offset,
            "end_char": chunk.end_offset,
            "line_count": chunk.end_line - chunk.start_line + 1,
            "char_count": len(text),
            "is_partial": chunk.is_partial,
            "part_number": chunk.part_number,
            "total_parts": chunk.total_parts,
            "parent_chunk": chunk.parent_name,
            "signature": chunk.signature,
            "has_docstring": bool(chunk.doc_comment),
            "docstring": chunk.doc_comment,
            "decorators": ", ".join(chunk.decorators) if chunk.decorators else None,
            "complexity_estimate": self.complexity_estimate,
            "loc": self.loc_count,
            "chunk_score": self.importance_score,
            "is_public": self.is_public,
            "is_exported": chunk.is_exported,
            "is_async": chunk.is_async,
            "is_generator": chunk.is_generator,
            "preview": self.preview_text,
        }
        return {"content": text, "metadata": metadata}


class ChunkingOptions(BaseModel):
    """Knobs accepted by :class:`~smartchunk.chunking.engine.SmartChunker`."""

    max_chunk_size: int = Field(default=4000, gt=0)
    overlap: int = Field(default=200, ge=0)
    # Advisory only; chunks smaller than this are not merged.
    min_chunk_size: int = Field(default=500, ge=0)
    preserve_signatures: bool = True
    calculate_complexity: bool = True

    @model_validator(mode="after")
    def _overlap_below_max(self) -> "ChunkingOptions":
        if self.overlap >= self.max_chunk_size:
            raise ValueError(
                f"overlap ({self.overlap}) must be smaller than max_chunk_size ({self.max_chunk_size})"
            )
        return self

    @classmethod
    def from_settings(cls, app_settings: Optional[AppSettings] = None) -> "ChunkingOptions":
        source = app_settings or settings
        return cls(
            max_chunk_size=source.max_chunk_size,
            overlap=source.chunk_overlap,
            min_chunk_size=source.min_chunk_size,
            preserve_signatures=source.preserve_signatures,
            calculate_complexity=source.calculate_complexity,
        )
