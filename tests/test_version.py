from pathlib import Path

import smartchunk
from smartchunk.version import __version__, get_version


def test_version_comes_from_version_file() -> None:
    version_file = Path(smartchunk.__file__).with_name("VERSION")
    assert get_version() == version_file.read_text(encoding="utf-8").strip()
    assert smartchunk.__version__ == __version__ == get_version()
