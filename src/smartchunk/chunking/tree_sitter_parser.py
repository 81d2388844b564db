"""
Tree-sitter assisted declaration extraction for brace-delimited languages.

The whole file is parsed once; each top-level statement is classified into a
function, class or TypeScript type-level chunk. Export wrappers are peeled in
a loop so ``export default function`` and ``export const f = () => {}`` are
extracted like their plain counterparts and flagged as exported.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from tree_sitter import Language, Node, Parser  # type: ignore[import]

from .models import BODY_PLACEHOLDER, Chunk, ChunkKind
from ..logger import get_logger

log = get_logger(__name__)


_LANGUAGE_CACHE: dict[str, Language] = {}

DOC_LOOKBACK_LINES = 10
ANONYMOUS = "anonymous"

_FUNCTION_DECLARATIONS = {"function_declaration", "generator_function_declaration"}
_CLASS_DECLARATIONS = {"class_declaration", "abstract_class_declaration", "class"}
_FUNCTION_VALUES = {"arrow_function", "function_expression", "function", "generator_function"}
_VARIABLE_DECLARATIONS = {"lexical_declaration", "variable_declaration"}
_TYPE_DECLARATIONS = {
    "interface_declaration": "interface",
    "type_alias_declaration": "type",
    "enum_declaration": "enum",
}
_GENERATORS = {"generator_function_declaration", "generator_function"}


def _load_language(grammar: str) -> Language:
    """
    Lazily load a prebuilt tree-sitter grammar.

    Grammars come from ``tree_sitter_language_pack``, which bundles compiled
    parsers for JavaScript, TypeScript and TSX.
    """
    if grammar in _LANGUAGE_CACHE:
        return _LANGUAGE_CACHE[grammar]

    try:
        from tree_sitter_language_pack import get_language  # type: ignore
    except ImportError as exc:  # pragma: no cover - runtime configuration issue
        raise RuntimeError(
            "tree_sitter_language_pack is required for prebuilt grammars. "
            "Install it via `pip install tree-sitter-language-pack`."
        ) from exc

    language = get_language(grammar)
    _LANGUAGE_CACHE[grammar] = language
    return language


@dataclass
class ParseOutcome:
    """Chunks produced for one file plus the parse diagnostic, if any."""

    chunks: List[Chunk]
    diagnostic: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.diagnostic is not None


class _Source:
    """Source text with byte-to-character offset translation."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.data = text.encode("utf-8", errors="surrogatepass")
        self.lines = text.split("\n")
        self._ascii = len(self.data) == len(text)

    def char_offset(self, byte_offset: int) -> int:
        if self._ascii:
            return byte_offset
        return len(self.data[:byte_offset].decode("utf-8", errors="surrogatepass"))

    def node_span(self, node: Node) -> Tuple[int, int]:
        return self.char_offset(node.start_byte), self.char_offset(node.end_byte)

    def node_text(self, node: Node) -> str:
        start, end = self.node_span(node)
        return self.text[start:end]


def _whole_file(source: str, kind: ChunkKind, name: str) -> Chunk:
    return Chunk(
        kind=kind,
        name=name,
        start_line=1,
        end_line=len(source.split("\n")),
        start_offset=0,
        end_offset=len(source),
        content=source,
    )


def _first_error(root: Node) -> Optional[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _describe_error(root: Node) -> str:
    node = _first_error(root) or root
    row, column = node.start_point
    if node.is_missing:
        return f"missing '{node.type}' at line {row + 1}, column {column + 1}"
    return f"syntax error at line {row + 1}, column {column + 1}"


def extract_doc_comment(lines: Sequence[str], start_line: int) -> Optional[str]:
    """
    Find a ``/** ... */`` block just above the 1-based ``start_line``.

    Blank lines and other comment lines may sit in between; any code line ends
    the search, as does the look-back limit.
    """
    header = start_line - 1
    for index in range(header - 1, max(header - 1 - DOC_LOOKBACK_LINES, -1), -1):
        stripped = lines[index].strip()
        if stripped.startswith("/**"):
            collected: List[str] = []
            for line in lines[index:header]:
                collected.append(line)
                if "*/" in line:
                    break
            return "\n".join(collected).strip()
        if stripped and not stripped.startswith(("*", "//", "/*")):
            break
    return None


def _is_async(node: Node) -> bool:
    return any(child.type == "async" for child in node.children)


def _name_of(node: Node, source: _Source) -> str:
    name_node = node.child_by_field_name("name")
    return source.node_text(name_node) if name_node is not None else ANONYMOUS


def _unwrap_exports(node: Node) -> Tuple[Optional[Node], bool]:
    exported = False
    current: Optional[Node] = node
    while current is not None and current.type == "export_statement":
        exported = True
        current = current.child_by_field_name("declaration") or current.child_by_field_name(
            "value"
        )
    return current, exported


def _span_chunk(node: Node, source: _Source, **fields) -> Chunk:
    start, end = source.node_span(node)
    start_line = node.start_point[0] + 1
    return Chunk(
        start_line=start_line,
        end_line=node.end_point[0] + 1,
        start_offset=start,
        end_offset=end,
        content=source.text[start:end],
        doc_comment=extract_doc_comment(source.lines, start_line),
        **fields,
    )


def _function_chunk(node: Node, source: _Source, exported: bool) -> Chunk:
    start, _ = source.node_span(node)
    body = node.child_by_field_name("body")
    if body is not None:
        body_start = source.char_offset(body.start_byte)
        signature = source.text[start:body_start].strip()
    else:
        signature = source.node_text(node).split("{", 1)[0].strip()
    return _span_chunk(
        node,
        source,
        kind=ChunkKind.FUNCTION,
        name=_name_of(node, source),
        signature=signature,
        is_async=_is_async(node),
        is_generator=node.type in _GENERATORS,
        is_exported=exported,
    )


def _variable_chunk(node: Node, source: _Source, exported: bool) -> Optional[Chunk]:
    for declarator in node.named_children:
        if declarator.type != "variable_declarator":
            continue
        value = declarator.child_by_field_name("value")
        if value is None or value.type not in _FUNCTION_VALUES:
            continue
        head = source.node_text(declarator).split("{", 1)[0].strip()
        return _span_chunk(
            node,
            source,
            kind=ChunkKind.FUNCTION,
            name=_name_of(declarator, source),
            signature=f"{head} {BODY_PLACEHOLDER}",
            is_async=_is_async(value),
            is_generator=value.type in _GENERATORS,
            is_exported=exported,
        )
    return None


def _classify(statement: Node, source: _Source) -> Optional[Chunk]:
    node, exported = _unwrap_exports(statement)
    if node is None:
        return None
    if node.type in _FUNCTION_DECLARATIONS or (exported and node.type in _FUNCTION_VALUES):
        return _function_chunk(node, source, exported)
    if node.type in _CLASS_DECLARATIONS:
        name = _name_of(node, source)
        return _span_chunk(
            node,
            source,
            kind=ChunkKind.CLASS,
            name=name,
            signature=f"class {name}",
            is_exported=exported,
        )
    if node.type in _VARIABLE_DECLARATIONS:
        return _variable_chunk(node, source, exported)
    if node.type in _TYPE_DECLARATIONS:
        name = _name_of(node, source)
        return _span_chunk(
            node,
            source,
            kind=ChunkKind.OTHER,
            name=name,
            signature=f"{_TYPE_DECLARATIONS[node.type]} {name}",
            is_exported=exported,
        )
    return None


def parse_brace(source: str, grammar: str) -> ParseOutcome:
    """
    Extract top-level declaration chunks from ``source``.

    Never raises: syntax errors (or a missing grammar) degrade to a single
    ``unparseable`` chunk, and files without declarations to a ``module`` chunk.
    """
    try:
        parser = Parser(_load_language(grammar))
        tree = parser.parse(source.encode("utf-8", errors="surrogatepass"))
    except Exception as exc:
        diagnostic = f"{type(exc).__name__}: {exc}"
        log.warning("tree_sitter_parse_failed", grammar=grammar, error=diagnostic)
        return ParseOutcome([_whole_file(source, ChunkKind.UNPARSEABLE, "unparseable")], diagnostic)

    root = tree.root_node
    if root.has_error:
        diagnostic = _describe_error(root)
        log.warning("tree_sitter_syntax_error", grammar=grammar, error=diagnostic)
        return ParseOutcome([_whole_file(source, ChunkKind.UNPARSEABLE, "unparseable")], diagnostic)

    wrapped = _Source(source)
    chunks: List[Chunk] = []
    for statement in root.named_children:
        chunk = _classify(statement, wrapped)
        if chunk is not None:
            chunks.append(chunk)

    if not chunks:
        log.debug("no_declarations_found", strategy="tree_sitter", grammar=grammar)
        return ParseOutcome([_whole_file(source, ChunkKind.MODULE, "module")])
    return ParseOutcome(chunks)
