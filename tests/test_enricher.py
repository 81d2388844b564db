from smartchunk.chunking.enricher import (
    build_preview,
    count_loc,
    enrich_chunk,
    estimate_complexity,
    score_importance,
)
from smartchunk.chunking.languages import detect_language
from smartchunk.chunking.models import Chunk, ChunkKind


def _chunk(content: str = "x = 1", **fields) -> Chunk:
    values = dict(
        kind=ChunkKind.FUNCTION,
        name="compute",
        start_line=1,
        end_line=content.count("\n") + 1,
        start_offset=0,
        end_offset=len(content),
        content=content,
    )
    values.update(fields)
    return Chunk(**values)


def test_count_loc_skips_blank_and_comment_lines() -> None:
    content = "a = 1\n\n   # note\n  b = 2\n"
    assert count_loc(content, ("#",)) == 2
    js = "let a = 1;\n// note\n/* block\n * more\n */\nlet b;"
    assert count_loc(js, ("//", "/*", "*")) == 2


def test_complexity_counts_branch_tokens() -> None:
    assert estimate_complexity("return 1") == 1
    assert estimate_complexity("if (a && b) { x(); } else { y(); }") == 4
    assert estimate_complexity("value = a if b or c else d") == 4


def test_complexity_is_capped() -> None:
    assert estimate_complexity("if x:\n" * 500) == 100


def test_importance_score_components() -> None:
    full = _chunk(
        is_exported=True,
        doc_comment="/** docs */",
        is_async=True,
    )
    assert score_importance(full) == 10

    private_class = _chunk(kind=ChunkKind.CLASS, name="_Hidden")
    assert score_importance(private_class) == 6

    private_async = _chunk(name="_helper", is_async=True)
    assert score_importance(private_async) == 7

    text = _chunk(kind=ChunkKind.TEXT, name="content")
    assert score_importance(text) == 6


def test_preview_flattens_newlines_and_truncates() -> None:
    assert build_preview("line one\nline two\n") == "line one line two"
    assert len(build_preview("x" * 500)) == 200


def test_enrich_chunk_populates_metrics() -> None:
    chunk = _chunk("def _private():\n    if x:\n        return 1\n", name="_private")
    enriched = enrich_chunk(chunk, detect_language("mod.py"))
    assert enriched.language == "python"
    assert enriched.loc_count == 3
    assert enriched.complexity_estimate == 2
    assert enriched.is_public is False
    assert enriched.preview_text.startswith("def _private():")


def test_enrich_chunk_without_complexity() -> None:
    chunk = _chunk("if a and b: pass")
    enriched = enrich_chunk(chunk, detect_language("mod.py"), calculate_complexity=False)
    assert enriched.complexity_estimate == 1


def test_record_exposes_flat_metadata() -> None:
    chunk = _chunk("def run():\n    pass", decorators=("@cached", "@traced"))
    record = enrich_chunk(chunk, detect_language("mod.py")).to_record()
    assert record["content"] == chunk.content
    metadata = record["metadata"]
    assert set(metadata) == {
        "chunk_type",
        "name",
        "language",
        "start_line",
        "end_line",
        "start_char",
        "end_char",
        "line_count",
        "char_count",
        "is_partial",
        "part_number",
        "total_parts",
        "parent_chunk",
        "signature",
        "has_docstring",
        "docstring",
        "decorators",
        "complexity_estimate",
        "loc",
        "chunk_score",
        "is_public",
        "is_exported",
        "is_async",
        "is_generator",
        "preview",
    }
    assert metadata["chunk_type"] == "function"
    assert metadata["decorators"] == "@cached, @traced"
    assert metadata["line_count"] == 2
    assert metadata["has_docstring"] is False
    assert metadata["total_parts"] == 1
