"""
Streaming parser for MSD, the `#KEY:VALUE;` format of rhythm game charts.

The parser reads from any stream lazily and yields one `MSDParameter`
per `#...;` block. It is designed to be used both as a library and from
the `msdparser` command line tool.
"""

from msdparser.errors import (
    MSDParserError,
    StrayTextError,
    UnexpectedEofError,
)
from msdparser.main.config import ParserSettings
from msdparser.parameter import MSDParameter
from msdparser.parser import MSDParser, ParserMode, parse_msd

__all__ = [
    "MSDParameter",
    "MSDParser",
    "MSDParserError",
    "ParserMode",
    "ParserSettings",
    "StrayTextError",
    "UnexpectedEofError",
    "parse_msd",
]
