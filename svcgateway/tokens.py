"""Tokens produced when reading service definition files."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(str, Enum):
    """Kinds of token in a service definition."""

    KEY = "key"
    VALUE = "value"
    COLON = "colon"
    DASH = "dash"
    NEWLINE = "newline"
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    """A token with its type and text."""

    type: TokenType
    lexeme: str


EOF_TOKEN = Token(TokenType.EOF, "EOF")