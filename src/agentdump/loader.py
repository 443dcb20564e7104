"""Locate, read and index a dump file."""

import logging
import time
from pathlib import Path

from agentdump.models import ClassInfo
from agentdump.parsers import DumpParser
from agentdump.search import SearchIndex

logger = logging.getLogger(__name__)

DUMP_FILE_NAME = "dump.cs"


class DumpNotFoundError(FileNotFoundError):
    """Raised when no dump file exists at the requested location."""


def resolve_dump_path(path: str | Path) -> Path:
    """Resolve a dump folder or file to the dump file.

    Args:
        path: Either the dump file itself or a folder containing dump.cs

    Returns:
        Path to an existing dump file

    Raises:
        DumpNotFoundError: If no dump file exists at that location
    """
    path = Path(path)
    dump_file = path / DUMP_FILE_NAME if path.is_dir() else path

    if not dump_file.is_file():
        raise DumpNotFoundError(f"{DUMP_FILE_NAME} not found at {dump_file}")

    return dump_file


def load_classes(path: str | Path) -> list[ClassInfo]:
    """Read and parse a dump.

    Undecodable bytes are replaced rather than rejected.
    """
    dump_file = resolve_dump_path(path)

    start = time.perf_counter()
    # Iterating the file splits on newlines only, never on U+0085 or U+2028
    with open(dump_file, "r", encoding="utf-8", errors="replace") as f:
        classes = DumpParser().parse_lines(f)

    elapsed = time.perf_counter() - start
    logger.info(f"Parsed {len(classes)} classes from {dump_file} in {elapsed:.2f}s")
    return classes


def load_index(path: str | Path) -> SearchIndex:
    """Read, parse and index a dump.

    Args:
        path: Dump file or folder containing dump.cs

    Returns:
        SearchIndex over every class in the dump

    Raises:
        DumpNotFoundError: If no dump file exists at that location
    """
    return SearchIndex(load_classes(path))
