import pytest

from svcgateway.lexer import Lexer
from svcgateway.models import APIType, ServiceDefinition
from svcgateway.parser import ParseError, Parser, parse_file, parse_text
from svcgateway.tokens import Token, TokenType

DOCUMENT = """\
# users service
name: users
replicas: 3
addresses:
  - 127.0.0.1:8000
  - 127.0.0.1:8001
api_type: REST
endpoints:
  - GET /users
  - /items
health_endpoint: /healthz
"""


def test_parse_full_document():
    service = parse_text(DOCUMENT)
    assert service == ServiceDefinition(
        name="users",
        replicas=3,
        addresses=["127.0.0.1:8000", "127.0.0.1:8001"],
        api_type=APIType.REST,
        endpoints=["GET /users", "/items"],
        health_endpoint="/healthz",
    )


def test_empty_text_gives_empty_definition():
    assert parse_text("") == ServiceDefinition()


def test_bad_replicas_are_ignored():
    assert parse_text("replicas: abc\n").replicas == 0


@pytest.mark.parametrize("value, expected", [("GRPC", APIType.GRPC), ("REST", APIType.REST), ("SOAP", APIType.GRPC)])
def test_api_type(value, expected):
    assert parse_text(f"api_type: {value}\n").api_type is expected


def test_unknown_keys_are_ignored():
    assert parse_text("colour: blue\nname: x\n") == ServiceDefinition(name="x")


def test_stray_list_item_is_an_error():
    with pytest.raises(ParseError):
        parse_text("name: a\n- x\n")


def test_empty_list_is_an_error():
    with pytest.raises(ParseError):
        parse_text("addresses:\nname: x\n")


def test_expect_reports_mismatch():
    parser = Parser(Lexer([Token(TokenType.VALUE, "v")]))
    with pytest.raises(ParseError, match="expected key got value"):
        parser.expect(TokenType.KEY)


def test_expect_returns_matching_token():
    parser = Parser(Lexer([Token(TokenType.KEY, "k")]))
    assert parser.expect(TokenType.KEY) == Token(TokenType.KEY, "k")


def test_parse_file(tmp_path):
    path = tmp_path / "users.svc"
    path.write_text(DOCUMENT)
    assert parse_file(path) == parse_text(DOCUMENT)