"""Turns service definition text into tokens."""

from __future__ import annotations

import os
from collections.abc import Iterable

from .tokens import EOF_TOKEN, Token, TokenType

_COLON = Token(TokenType.COLON, "COLON")
_DASH = Token(TokenType.DASH, "DASH")
_NEWLINE = Token(TokenType.NEWLINE, "NEWLINE")


def tokenize_lines(lines: Iterable[str]) -> list[Token]:
    """Tokenize lines of a service definition; always ends with EOF."""
    tokens: list[Token] = []
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        if line.startswith("- "):
            tokens += [_DASH, Token(TokenType.VALUE, line[2:]), _NEWLINE]
            continue

        key, sep, rest = line.partition(":")
        if not sep:
            continue
        tokens += [Token(TokenType.KEY, key.strip()), _COLON]
        if rest:
            tokens.append(Token(TokenType.VALUE, rest.strip()))
        tokens.append(_NEWLINE)

    tokens.append(EOF_TOKEN)
    return tokens


def tokenize(path: str | os.PathLike[str]) -> list[Token]:
    """Tokenize the service definition file at ``path``."""
    with open(path, encoding="utf-8") as handle:
        return tokenize_lines(handle)


class Lexer:
    """A cursor over a list of tokens."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = list(tokens)
        self.position = 0

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "Lexer":
        return cls(tokenize(path))

    def next_token(self) -> Token:
        """Return the current token and advance; EOF once exhausted."""
        if self.position >= len(self.tokens):
            return EOF_TOKEN
        token = self.tokens[self.position]
        self.position += 1
        return token

    def peek(self) -> Token:
        """Return the current token without advancing."""
        if self.position >= len(self.tokens):
            return EOF_TOKEN
        return self.tokens[self.position]