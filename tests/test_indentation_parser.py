from smartchunk.chunking.indentation_parser import (
    extract_docstring,
    find_block_end,
    parse_indentation,
)
from smartchunk.chunking.models import ChunkKind

SIBLINGS = '''import os


def first(a, b):
    """Add two numbers."""
    return a + b


def second():
    # comment
    x = 1

    return x
'''

NESTED = '''@dataclass
class Point(Base):
    """A point.

    With more text.
    """

    x: int = 0

    @property
    def norm(self) -> float:
        return abs(self.x)

    async def fetch(self, client):
        return await client.get(self.x)
'''


def _assert_exact(source, chunks) -> None:
    for chunk in chunks:
        assert chunk.content == source[chunk.start_offset : chunk.end_offset]


def test_sibling_functions_do_not_overlap() -> None:
    chunks = parse_indentation(SIBLINGS)
    assert [c.name for c in chunks] == ["first", "second"]
    first, second = chunks
    assert first.end_offset < second.start_offset
    assert (first.start_line, first.end_line) == (4, 6)
    assert (second.start_line, second.end_line) == (9, 13)
    assert first.doc_comment == "Add two numbers."
    assert second.doc_comment is None
    assert second.content.endswith("return x")
    assert first.signature == "def first(a, b)"
    _assert_exact(SIBLINGS, chunks)


def test_nested_declarations_are_contained_in_parent() -> None:
    chunks = parse_indentation(NESTED)
    assert [(c.kind, c.name) for c in chunks] == [
        (ChunkKind.CLASS, "Point"),
        (ChunkKind.FUNCTION, "norm"),
        (ChunkKind.FUNCTION, "fetch"),
    ]
    point, norm, fetch = chunks
    for child in (norm, fetch):
        assert point.start_offset <= child.start_offset
        assert child.end_offset <= point.end_offset
    assert point.start_offset == 0
    assert point.decorators == ("@dataclass",)
    assert point.signature == "class Point(Base)"
    assert point.doc_comment.startswith("A point.")
    assert "With more text." in point.doc_comment
    assert norm.decorators == ("@property",)
    assert norm.signature == "def norm(self)"
    assert norm.content.lstrip().startswith("@property")
    assert fetch.is_async is True
    assert fetch.signature == "async def fetch(self, client)"
    assert point.end_offset == fetch.end_offset
    _assert_exact(NESTED, chunks)


def test_multiline_parameters() -> None:
    source = "def build(\n    name,\n    value=dict(a=1),\n):\n    return name\n\nresult = build('x')\n"
    chunks = parse_indentation(source)
    assert len(chunks) == 1
    chunk = chunks[0]
    assert chunk.name == "build"
    assert (chunk.start_line, chunk.end_line) == (1, 5)
    assert chunk.content.endswith("return name")
    assert "value=dict(a=1)" in chunk.signature


def test_dotted_decorator_with_arguments() -> None:
    source = '@app.route("/items", methods=("GET",))\ndef items():\n    return []\n'
    chunk = parse_indentation(source)[0]
    assert chunk.name == "items"
    assert chunk.start_offset == 0
    assert chunk.decorators == ('@app.route("/items", methods=("GET",))',)


def test_one_line_body() -> None:
    source = "def f(): return 1\ndef g():\n    pass\n"
    chunks = parse_indentation(source)
    assert [c.content for c in chunks] == ["def f(): return 1", "def g():\n    pass"]


def test_no_declarations_yields_module_chunk() -> None:
    source = "x = 1\nprint(x)\n"
    chunks = parse_indentation(source)
    assert len(chunks) == 1
    assert chunks[0].kind is ChunkKind.MODULE
    assert chunks[0].content == source
    assert (chunks[0].start_offset, chunks[0].end_offset) == (0, len(source))


def test_empty_source_yields_module_chunk() -> None:
    chunks = parse_indentation("")
    assert len(chunks) == 1
    assert chunks[0].kind is ChunkKind.MODULE
    assert chunks[0].content == ""


def test_find_block_end_trims_trailing_blank_and_comment_lines() -> None:
    lines = ["def f():", "    a = 1", "", "    # trailing", "", "x = 2"]
    assert find_block_end(lines, 1, 0) == 1


def test_extract_docstring_forms() -> None:
    assert extract_docstring(["def f():", '    r"""Raw doc."""'], 1) == "Raw doc."
    assert extract_docstring(["def f():", "    '''Multi", "    line.'''"], 1) == "Multi\n    line."
    assert extract_docstring(["def f():", "    # note", '    """After comment."""'], 1) == "After comment."
    assert extract_docstring(["def f():", "    x = 1", '    """Too late."""'], 1) is None
    assert extract_docstring(["def f():", '    """Unterminated'], 1) is None


def test_parameters_with_two_levels_of_parentheses() -> None:
    source = "def f(a=g(h(1)), b=(2, (3, 4))):\n    return a\n\ndef k():\n    return 0\n"
    chunks = parse_indentation(source)
    assert [c.name for c in chunks] == ["f", "k"]
    assert chunks[0].signature == "def f(a=g(h(1)), b=(2, (3, 4)))"
    assert chunks[0].content == "def f(a=g(h(1)), b=(2, (3, 4))):\n    return a"
