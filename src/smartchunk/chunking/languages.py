"""
Extension based language classification.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Dict, Optional, Tuple, Union


class LanguageFamily(str, Enum):
    """How a language delimits its blocks."""

    BRACE = "brace-delimited"
    INDENTATION = "indentation-delimited"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class LanguageInfo:
    """Classifier result for a single path."""

    name: str
    family: LanguageFamily
    grammar: Optional[str] = None

    @property
    def comment_markers(self) -> Tuple[str, ...]:
        return COMMENT_MARKERS[self.family]


COMMENT_MARKERS: Dict[LanguageFamily, Tuple[str, ...]] = {
    LanguageFamily.BRACE: ("//", "/*", "*"),
    LanguageFamily.INDENTATION: ("#",),
    LanguageFamily.UNKNOWN: ("//", "#", "/*", "*"),
}

UNKNOWN_LANGUAGE = LanguageInfo(name="unknown", family=LanguageFamily.UNKNOWN)

_JAVASCRIPT = LanguageInfo("javascript", LanguageFamily.BRACE, "javascript")
_TYPESCRIPT = LanguageInfo("typescript", LanguageFamily.BRACE, "typescript")
_TSX = LanguageInfo("typescript", LanguageFamily.BRACE, "tsx")
_PYTHON = LanguageInfo("python", LanguageFamily.INDENTATION)

EXTENSION_TO_LANGUAGE: Dict[str, LanguageInfo] = {
    ".js": _JAVASCRIPT,
    ".jsx": _JAVASCRIPT,
    ".mjs": _JAVASCRIPT,
    ".cjs": _JAVASCRIPT,
    ".ts": _TYPESCRIPT,
    ".mts": _TYPESCRIPT,
    ".cts": _TYPESCRIPT,
    ".tsx": _TSX,
    ".py": _PYTHON,
    ".pyw": _PYTHON,
    ".pyi": _PYTHON,
}


def detect_language(path: Union[str, PurePath]) -> LanguageInfo:
    """Map a file path to its language; unknown extensions map to ``unknown``."""
    suffix = PurePath(path).suffix.lower()
    return EXTENSION_TO_LANGUAGE.get(suffix, UNKNOWN_LANGUAGE)
