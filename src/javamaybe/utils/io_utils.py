"""
Centralized file I/O utilities.

- Single place for encoding handling
- Use Path.read_text() consistently (no raw open/read)
"""

from pathlib import Path
from typing import Iterator, Union

from .config import DEFAULT_FILE_ENCODING, JAVA_FILE_EXTENSION


def read_source_file(path: Union[Path, str]) -> str:
    """Read source file with standard encoding."""
    p = Path(path) if not isinstance(path, Path) else path
    return p.read_text(encoding=DEFAULT_FILE_ENCODING)


def write_source_file(path: Union[Path, str], text: str) -> None:
    """Write generated source, creating parent directories as needed."""
    p = Path(path) if not isinstance(path, Path) else path
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding=DEFAULT_FILE_ENCODING)


def iter_java_files(root: Union[Path, str]) -> Iterator[Path]:
    """Yield every .java file under root (root itself if it is a file), sorted."""
    p = Path(root)
    if p.is_file():
        yield p
        return
    yield from sorted(q for q in p.rglob("*" + JAVA_FILE_EXTENSION) if q.is_file())
