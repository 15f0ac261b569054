#!/usr/bin/env python3

from dataclasses import dataclass


# Errors returned (not raised) by MSDParser.advance when the parameter stream ends abnormally
@dataclass
class MSDParserError(Exception):
    msg: str

    def __str__(self) -> str:
        return f"MSDParserError: {self.msg}"


@dataclass
class UnexpectedEofError(MSDParserError):
    pass


@dataclass
class StrayTextError(MSDParserError):
    pass
