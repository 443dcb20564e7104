from agentdump.parsers.base import BaseParser
from agentdump.parsers.dump_parser import DumpParser

__all__ = ["BaseParser", "DumpParser"]
