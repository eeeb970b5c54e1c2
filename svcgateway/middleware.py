"""WSGI middleware: chaining, JWT checks, rate limiting and request logging."""

from __future__ import annotations

import os
import threading
import time
from collections.abc import Callable, Iterable
from http import HTTPStatus
from typing import Any

import jwt

from .logs import get_logger
from .metrics import get_tracker

WSGIApp = Callable[[dict, Callable[..., Any]], Iterable[bytes]]
Middleware = Callable[[WSGIApp], WSGIApp]

CLAIMS_KEY = "svcgateway.claims"
_ISSUER = "gateway"
_TOKEN_LIFETIME = 60 * 60
_BEARER = "Bearer "


def _plain_error(start_response: Callable[..., Any], code: int, message: str) -> list[bytes]:
    body = (message + "\n").encode("utf-8")
    start_response(
        f"{code} {HTTPStatus(code).phrase}",
        [
            ("Content-Type", "text/plain; charset=utf-8"),
            ("X-Content-Type-Options", "nosniff"),
            ("Content-Length", str(len(body))),
        ],
    )
    return [body]


def use(handler: WSGIApp, *args: Middleware) -> WSGIApp:
    """Wrap ``handler`` so the first middleware given runs first."""
    for middleware in reversed(args):
        handler = middleware(handler)
    return handler


def jwt_secret() -> bytes:
    """Return the signing secret from ``JWT_SECRET``."""
    value = os.environ.get("JWT_SECRET", "")
    if not value:
        raise RuntimeError("no jwt secret set")
    return value.encode("utf-8")


def generate_jwt_token(user_id: str) -> str:
    """Issue an HS256 token for ``user_id`` valid for one hour."""
    if not os.environ.get("JWT_SECRET", ""):
        raise RuntimeError("environment variable not set")
    now = int(time.time())
    claims = {
        "sub": user_id,
        "iss": _ISSUER,
        "iat": now,
        "exp": now + _TOKEN_LIFETIME,
    }
    return jwt.encode(claims, jwt_secret(), algorithm="HS256")


def decode_jwt_token(token: str) -> dict[str, Any]:
    """Verify an HS256 token and return its claims."""
    return jwt.decode(token, jwt_secret(), algorithms=["HS256"])


def check_jwt_token(app: WSGIApp) -> WSGIApp:
    """Reject requests without a valid bearer token."""

    def secured(environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        header = environ.get("HTTP_AUTHORIZATION", "")
        if not header.startswith(_BEARER):
            return _plain_error(start_response, 401, HTTPStatus.UNAUTHORIZED.phrase)
        try:
            claims = decode_jwt_token(header[len(_BEARER):])
        except (jwt.InvalidTokenError, RuntimeError):
            return _plain_error(start_response, 401, "invalid token")
        environ[CLAIMS_KEY] = claims
        return app(environ, start_response)

    return secured


class TokenBucket:
    """Allows ``rate`` events per second with bursts of up to ``burst``."""

    def __init__(
        self,
        rate: float,
        burst: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.rate = float(rate)
        self.burst = burst
        self._clock = clock
        self._tokens = float(burst)
        self._last = clock()
        self._lock = threading.Lock()

    def allow(self) -> bool:
        """Take one token if available."""
        with self._lock:
            now = self._clock()
            elapsed = max(0.0, now - self._last)
            self._last = now
            self._tokens = min(float(self.burst), self._tokens + elapsed * self.rate)
            if self._tokens >= 1.0:
                self._tokens -= 1.0
                return True
            return False


class RateLimiter:
    """Per-client-address rate limiting middleware."""

    def __init__(self, app: WSGIApp, rate: float, burst: int) -> None:
        self.app = app
        self.rate = rate
        self.burst = burst
        self._visitors: dict[str, TokenBucket] = {}
        self._lock = threading.Lock()

    def _bucket(self, address: str) -> TokenBucket:
        with self._lock:
            bucket = self._visitors.get(address)
            if bucket is None:
                bucket = TokenBucket(self.rate, self.burst)
                self._visitors[address] = bucket
            return bucket

    def __call__(self, environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        if not self._bucket(environ.get("REMOTE_ADDR", "")).allow():
            return _plain_error(start_response, 429, HTTPStatus.TOO_MANY_REQUESTS.phrase)
        return self.app(environ, start_response)


def rate_limiter(app: WSGIApp) -> WSGIApp:
    """Limit each client to one request per second with bursts of ten."""
    return RateLimiter(app, 1.0, 10)


def request_logger(app: WSGIApp) -> WSGIApp:
    """Count and log every request with its response status."""

    def logged(environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        status_code = HTTPStatus.OK.value

        def capture(status: str, headers: list, exc_info: Any = None) -> Any:
            nonlocal status_code
            status_code = int(status.split(" ", 1)[0])
            return start_response(status, headers, exc_info)

        result = app(environ, capture)
        try:
            body = list(result)
        finally:
            close = getattr(result, "close", None)
            if close is not None:
                close()

        path = environ.get("PATH_INFO", "")
        get_tracker().record_request(path, status_code)
        get_logger().info(f"{environ.get('REQUEST_METHOD', '')} {path} {status_code}")
        return body

    return logged