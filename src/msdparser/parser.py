#!/usr/bin/env python3
"""
Streaming parser for MSD data.

MSD is the `#KEY:VALUE:VALUE;` markup used by rhythm game chart files
(.sm, .ssc, .dwi, .msd). The parser pulls characters from a readable stream
on demand, so a chart never needs to be fully loaded in memory, and hands
back one parameter per `#...;` block.
"""

import codecs
import io
import logging
import typing
from dataclasses import dataclass, field
from enum import Enum

from msdparser.errors import MSDParserError, StrayTextError, UnexpectedEofError
from msdparser.main.config import ParserSettings
from msdparser.parameter import MSDParameter

# Buffer size for reading
BUFFER_SIZE = 4096

ParseResult = typing.Union[MSDParameter, MSDParserError]


class ParserMode(Enum):
    OUTSIDE = "Outside"
    KEY = "Key"
    VALUE = "Value"
    COMMENT = "Comment"
    ESCAPED_CHAR = "EscapedChar"

    def __str__(self):
        return self.value


@dataclass
class ParserState(object):
    mode: ParserMode = ParserMode.OUTSIDE
    # Mode to go back to once a comment or an escaped character is over
    return_mode: ParserMode = ParserMode.OUTSIDE
    buffer: typing.List[str] = field(default_factory=list)
    components: typing.List[str] = field(default_factory=list)
    last_key: typing.Optional[str] = None
    finished: bool = False

    def begin_parameter(self):
        self.mode = ParserMode.KEY
        self.buffer = []
        self.components = []

    def flush_component(self):
        self.components.append("".join(self.buffer))
        self.buffer = []

    def take_parameter(self) -> MSDParameter:
        parameter = MSDParameter(components=self.components)
        self.components = []
        self.mode = ParserMode.OUTSIDE
        self.last_key = parameter.key()
        return parameter

    def open_key(self) -> str:
        if len(self.components) > 0:
            return self.components[0]
        return "".join(self.buffer)


class MSDParser(object):
    """
    Pull based parser over a readable stream of MSD text.

    Each call to `advance` resumes the state machine where the previous call
    left it and returns the next `MSDParameter`, a terminal `MSDParserError`,
    or None once nothing is left. Iterating over the parser yields the
    parameters and raises the terminal error, if any.
    """

    def __init__(self,
        stream: typing.IO,
        escapes: bool = True,
        ignore_stray_text: bool = False,
        buffer_size: int = BUFFER_SIZE,
        encoding: str = "utf-8",
        logger: typing.Optional[logging.Logger] = None):
        assert stream is not None, "stream must be provided"
        assert buffer_size > 0, "buffer_size must be positive"
        self.stream = stream
        self.escapes = escapes
        self.ignore_stray_text = ignore_stray_text
        self.buffer_size = buffer_size
        self.encoding = encoding
        self.logger = logger or self._create_default_logger()
        self.state = ParserState()

        self._chunk: str = ""
        self._chunk_idx: int = 0
        self._pushback: typing.Optional[str] = None
        self._done_reading: bool = False
        self._decoder = None

    def _create_default_logger(self) -> logging.Logger:
        logger = logging.getLogger("MSDParser")
        if not logger.handlers:
            logger.setLevel(logging.INFO)
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            logger.addHandler(handler)
        return logger

    def _read_chunk(self) -> str:
        data = self.stream.read(self.buffer_size)
        if not data:
            self._done_reading = True
            # Flush what is left of a truncated multi-byte character
            return self._decoder.decode(b"", final=True) if self._decoder is not None else ""
        if isinstance(data, (bytes, bytearray)):
            if self._decoder is None:
                self._decoder = codecs.getincrementaldecoder(self.encoding)(errors="replace")
            # A multi-byte character split across chunks stays in the decoder until the next read
            return self._decoder.decode(data)
        return data

    def _read_char(self) -> str:
        """Read one character, or return an empty string at the end of the stream."""
        if self._pushback is not None:
            ch = self._pushback
            self._pushback = None
            return ch
        while self._chunk_idx >= len(self._chunk):
            if self._done_reading:
                return ""
            self._chunk = self._read_chunk()
            self._chunk_idx = 0
        ch = self._chunk[self._chunk_idx]
        self._chunk_idx += 1
        return ch

    def _next_char_is(self, expected: str) -> bool:
        """Consume the next character if it is `expected`, otherwise push it back."""
        ch = self._read_char()
        if ch == expected:
            return True
        if ch != "":
            self._pushback = ch
        return False

    def _stray_text_location(self) -> str:
        if self.state.last_key is None:
            return "at start of document"
        return f"after '{self.state.last_key}' parameter"

    def _fail(self, error: MSDParserError) -> MSDParserError:
        self.state.finished = True
        return error

    def _end_of_stream(self) -> typing.Optional[MSDParserError]:
        state = self.state
        mode = state.return_mode if state.mode == ParserMode.COMMENT else state.mode
        if mode == ParserMode.OUTSIDE:
            state.finished = True
            self.logger.debug("Reached end of MSD stream")
            return None
        key = state.open_key()
        location = f"inside '{key}' parameter" if key else "inside parameter"
        return self._fail(UnexpectedEofError(f"unexpected end of input {location}"))

    def _consume_outside(self, ch: str) -> typing.Optional[MSDParserError]:
        if ch == "#":
            self.state.begin_parameter()
            return None
        # Blank lines and a leading byte order mark are never stray text
        if self.ignore_stray_text or ch.isspace() or ch == "\ufeff":
            return None
        return self._fail(StrayTextError(f"stray '{ch}' encountered {self._stray_text_location()}"))

    def _consume(self, ch: str) -> typing.Optional[ParseResult]:
        state = self.state
        mode = state.mode
        if mode == ParserMode.COMMENT:
            if ch == "\n" or ch == "\r":
                if ch == "\r":
                    self._next_char_is("\n")
                state.mode = state.return_mode
            return None
        if mode == ParserMode.ESCAPED_CHAR:
            state.buffer.append(ch)
            state.mode = state.return_mode
            return None
        if ch == "/" and self._next_char_is("/"):
            state.return_mode = mode
            state.mode = ParserMode.COMMENT
            return None
        if mode == ParserMode.OUTSIDE:
            return self._consume_outside(ch)

        # Inside a parameter: KEY or VALUE
        if ch == "\\" and self.escapes:
            state.return_mode = mode
            state.mode = ParserMode.ESCAPED_CHAR
        elif ch == ":":
            state.flush_component()
            state.mode = ParserMode.VALUE
        elif ch == ";":
            state.flush_component()
            parameter = state.take_parameter()
            self.logger.debug(f"Parsed '{parameter.key()}' parameter with {len(parameter.components) - 1} value(s)")
            return parameter
        else:
            state.buffer.append(ch)
        return None

    def advance(self) -> typing.Optional[ParseResult]:
        """
        Get the next parameter.

        Returns None if there are no more parameters, an `MSDParameter` for the
        next `#...;` block, or an `MSDParserError` when the stream contains stray
        text (unless `ignore_stray_text` is set) or ends inside a parameter.
        An error is always the last result.
        """
        if self.state.finished:
            return None
        while True:
            ch = self._read_char()
            if ch == "":
                return self._end_of_stream()
            result = self._consume(ch)
            if result is not None:
                return result

    def __iter__(self) -> "MSDParser":
        return self

    def __next__(self) -> MSDParameter:
        result = self.advance()
        if result is None:
            raise StopIteration
        if isinstance(result, MSDParserError):
            raise result
        return result


def parse_msd(
    *,
    file: typing.Optional[typing.IO] = None,
    string: typing.Optional[typing.Union[str, bytes]] = None,
    escapes: typing.Optional[bool] = None,
    ignore_stray_text: typing.Optional[bool] = None,
    settings: typing.Optional[ParserSettings] = None,
    logger: typing.Optional[logging.Logger] = None) -> MSDParser:
    """
    Parse MSD data from either a readable `file` or a `string`.

    `escapes` indicates whether or not a backslash escapes the next character.
    `ignore_stray_text` indicates whether text outside of parameters is discarded
    instead of being reported as an error. Both default to the values in
    `settings` (escapes on, stray text reported).
    """
    assert file is not None or string is not None, "Either file or string must be provided"
    assert file is None or string is None, "Only one of file or string must be provided"
    settings = settings or ParserSettings()
    if string is not None:
        file = io.BytesIO(string) if isinstance(string, (bytes, bytearray)) else io.StringIO(string)
    return MSDParser(
        file,
        escapes=settings.escapes if escapes is None else escapes,
        ignore_stray_text=settings.ignore_stray_text if ignore_stray_text is None else ignore_stray_text,
        buffer_size=settings.buffer_size,
        encoding=settings.encoding,
        logger=logger)
