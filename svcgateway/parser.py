"""Parser for ``.svc`` service definition files."""

from __future__ import annotations

import os

from .lexer import Lexer, tokenize_lines
from .models import APIType, ServiceDefinition
from .tokens import Token, TokenType


class ParseError(ValueError):
    """Raised when a service definition is malformed."""


_API_TYPES = {"GRPC": APIType.GRPC, "REST": APIType.REST}


class Parser:
    """Builds a :class:`ServiceDefinition` from a token stream."""

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer

    def expect(self, token_type: TokenType) -> Token:
        """Consume the next token, which must be of ``token_type``."""
        token = self.lexer.next_token()
        if token.type is not token_type:
            raise ParseError(
                "parser failed to correctly parse service definition: "
                f"expected {token_type.value} got {token.type.value}"
            )
        return token

    def parse(self) -> ServiceDefinition:
        service = ServiceDefinition()
        while self.lexer.peek().type is TokenType.KEY:
            self._parse_element(service)
        self.expect(TokenType.EOF)
        return service

    def _parse_element(self, service: ServiceDefinition) -> None:
        key = self.expect(TokenType.KEY).lexeme
        self.expect(TokenType.COLON)
        if self.lexer.peek().type is TokenType.NEWLINE:
            self.expect(TokenType.NEWLINE)
            values = self._parse_list_values()
        else:
            values = [self.expect(TokenType.VALUE).lexeme]
            self.expect(TokenType.NEWLINE)
        self._add_field(service, key, values)

    def _parse_list_values(self) -> list[str]:
        values: list[str] = []
        while True:
            self.expect(TokenType.DASH)
            values.append(self.expect(TokenType.VALUE).lexeme)
            self.expect(TokenType.NEWLINE)
            if self.lexer.peek().type is not TokenType.DASH:
                return values

    @staticmethod
    def _add_field(service: ServiceDefinition, key: str, values: list[str]) -> None:
        if key == "name":
            service.name = values[0]
        elif key == "replicas":
            try:
                service.replicas = int(values[0])
            except ValueError:
                pass
        elif key == "addresses":
            service.addresses = values
        elif key == "api_type":
            service.api_type = _API_TYPES.get(values[0], APIType.GRPC)
        elif key == "endpoints":
            service.endpoints = values
        elif key == "health_endpoint":
            service.health_endpoint = values[0]


def parse_text(text: str) -> ServiceDefinition:
    """Parse a service definition from a string."""
    return Parser(Lexer(tokenize_lines(text.splitlines()))).parse()


def parse_file(path: str | os.PathLike[str]) -> ServiceDefinition:
    """Parse the service definition file at ``path``."""
    return Parser(Lexer.from_file(path)).parse()