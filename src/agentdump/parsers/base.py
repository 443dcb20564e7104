import io
from abc import ABC, abstractmethod
from collections.abc import Iterable

from agentdump.models import ClassInfo


class BaseParser(ABC):
    """Abstract base class for dump parsers."""

    @abstractmethod
    def parse_lines(self, lines: Iterable[str]) -> list[ClassInfo]:
        """Extract all type declarations from the lines of a dump.

        Args:
            lines: Lines of the dump, in file order. Trailing newlines are allowed.

        Returns:
            List of ClassInfo objects in file order
        """
        pass

    def parse_text(self, text: str) -> list[ClassInfo]:
        """Convenience wrapper around parse_lines for an in-memory dump.

        Lines break only at LF, CR and CRLF. Other Unicode line separators
        can appear inside obfuscated identifiers and are kept.
        """
        return self.parse_lines(io.StringIO(text, newline=None))
