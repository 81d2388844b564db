"""Version lookup for smartchunk."""

from __future__ import annotations

from functools import lru_cache
from importlib import metadata, resources

DISTRIBUTION = "smartchunk"


@lru_cache(maxsize=1)
def get_version() -> str:
    """
    Return the installed distribution version.

    ``VERSION`` is the single source: packaging reads it at build time, and a
    source checkout that was never installed reads it directly.
    """
    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        bundled = resources.files(__package__).joinpath("VERSION")
        return bundled.read_text(encoding="utf-8").strip()


__version__ = get_version()
