"""HTTP gateway that authenticates clients and forwards calls to services."""

from __future__ import annotations

import json
import os
import time
from collections.abc import Callable, Iterable
from typing import Any

import requests
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound
from werkzeug.routing import Map, Rule
from werkzeug.serving import BaseWSGIServer, make_server
from werkzeug.wrappers import Request, Response

from . import metrics
from .balancer import BalancerMode, LoadBalancer, ServiceNotValidError
from .client import EndpointNotFoundError, RESTClient, ServiceUnhealthyError
from .heartbeat import HeartbeatManager
from .middleware import (
    check_jwt_token,
    generate_jwt_token,
    rate_limiter,
    request_logger,
    use,
)
from .models import APIType
from .registry import ServiceRegistry

DEFAULT_ADDRESS = ":8080"
HEARTBEAT_INTERVAL = 60.0
HEARTBEAT_TIMEOUT = 10.0

WSGIApp = Callable[[dict, Callable[..., Any]], Iterable[bytes]]
Handler = Callable[[Request], Response]


def _text_error(message: str, status: int) -> Response:
    response = Response(message + "\n", status=status, content_type="text/plain; charset=utf-8")
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


def _json_response(value: Any) -> Response:
    body = json.dumps(value, separators=(",", ":")) + "\n"
    return Response(body, content_type="application/json")


def _read_json_object(request: Request) -> dict[str, Any]:
    """Decode the first JSON value of the request body, which must be an object."""
    text = request.get_data().decode("utf-8")
    value, _ = json.JSONDecoder().raw_decode(text.lstrip())
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"json: cannot unmarshal {type(value).__name__} into request body")
    return value


def _string_field(body: dict[str, Any], key: str) -> str:
    value = body.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"json: cannot unmarshal {type(value).__name__} into field {key} of type string")
    return value


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ValueError(f"address {address}: missing port in address")
    host = host.strip("[]") or "0.0.0.0"
    try:
        return host, int(port)
    except ValueError:
        raise ValueError(f"address {address}: invalid port") from None


def _wsgi(handler: Handler) -> WSGIApp:
    def app(environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        return handler(Request(environ))(environ, start_response)

    return app


class Gateway:
    """WSGI application routing gateway requests, plus its server lifecycle."""

    def __init__(self, address: str, registry_directory: str | os.PathLike[str]) -> None:
        self.address = address
        self.registry = ServiceRegistry(registry_directory)
        self.load_balancer = LoadBalancer(BalancerMode.ROUND_ROBIN, self.registry.services())
        self.heartbeat = HeartbeatManager(
            self.registry.services(), HEARTBEAT_INTERVAL, HEARTBEAT_TIMEOUT
        )
        self.server: BaseWSGIServer | None = None

        self._url_map = Map(
            [
                Rule("/healthz", methods=["GET"], endpoint="healthz"),
                Rule("/metrics", methods=["GET"], endpoint="metrics"),
                Rule("/login", methods=["POST"], endpoint="login"),
                Rule("/reload", methods=["GET"], endpoint="reload"),
                Rule("/services", methods=["GET"], endpoint="services"),
                Rule("/call", methods=["POST"], endpoint="call"),
            ],
            merge_slashes=False,
        )
        self._endpoints: dict[str, WSGIApp] = {
            "healthz": _wsgi(self._health_check),
            "metrics": _wsgi(self._metrics),
            "login": _wsgi(self._login),
            "reload": self._secure(self._reload),
            "services": self._secure(self._services),
            "call": self._secure(self._call),
        }
        self._app = use(self._dispatch, request_logger, rate_limiter)
        metrics.init()

    @classmethod
    def from_env(cls) -> "Gateway":
        """Build a gateway from ``GATEWAY_ADDRESS`` and ``REGISTRY_DIRECTORY``."""
        address = os.environ.get("GATEWAY_ADDRESS", "") or DEFAULT_ADDRESS
        return cls(address, os.environ.get("REGISTRY_DIRECTORY", ""))

    def __call__(self, environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        return self._app(environ, start_response)

    def start(self) -> None:
        """Start health checks and serve requests until :meth:`stop` is called."""
        host, port = _split_address(self.address)
        self.heartbeat.start()
        server = make_server(host, port, self, threaded=True)
        self.server = server
        server.serve_forever()

    def stop(self) -> None:
        """Stop health checks and shut the server down."""
        self.heartbeat.stop()
        server = self.server
        if server is not None:
            server.shutdown()
            server.server_close()

    @staticmethod
    def _secure(handler: Handler) -> WSGIApp:
        return use(_wsgi(handler), check_jwt_token)

    def _dispatch(self, environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        adapter = self._url_map.bind_to_environ(environ)
        try:
            endpoint, _ = adapter.match()
        except NotFound:
            response = _text_error("404 page not found", 404)
        except MethodNotAllowed as exc:
            response = _text_error("Method Not Allowed", 405)
            response.headers["Allow"] = ", ".join(sorted(exc.valid_methods or ()))
        except HTTPException as exc:
            return exc(environ, start_response)
        else:
            return self._endpoints[endpoint](environ, start_response)
        return response(environ, start_response)

    def _health_check(self, request: Request) -> Response:
        return Response(status=200)

    def _metrics(self, request: Request) -> Response:
        return Response(metrics.get_tracker().render(), content_type=metrics.CONTENT_TYPE)

    def _login(self, request: Request) -> Response:
        try:
            body = _read_json_object(request)
            username = _string_field(body, "username")
            given = _string_field(body, "password")
        except ValueError as exc:
            return _text_error(str(exc), 400)

        if username != os.environ.get("GATEWAY_USER", "") or given != os.environ.get(
            "GATEWAY_PASSWORD", ""
        ):
            return _text_error("unauthorized", 401)

        try:
            token = generate_jwt_token(username)
        except RuntimeError as exc:
            return _text_error(str(exc), 500)
        return _json_response({"token": token})

    def _reload(self, request: Request) -> Response:
        self.registry.reload()
        self.load_balancer = LoadBalancer(self.load_balancer.mode, self.registry.services())
        return Response(status=200)

    def _services(self, request: Request) -> Response:
        services = self.registry.services()
        return _json_response({name: services[name].to_json() for name in sorted(services)})

    def _call(self, request: Request) -> Response:
        try:
            body = _read_json_object(request)
            api_type = _string_field(body, "type")
            service_name = _string_field(body, "service")
            endpoint = _string_field(body, "endpoint")
            params = body.get("params")
            if params is not None and not isinstance(params, dict):
                raise ValueError("json: cannot unmarshal params into an object")
        except ValueError as exc:
            return _text_error(str(exc), 400)

        if api_type != APIType.REST.value:
            return _text_error("api type not yet supported", 400)

        service = self.registry.get(service_name)
        if service is None:
            return _text_error("service not found", 404)

        balancer = self.load_balancer
        try:
            client = RESTClient.from_service(service, balancer)
        except ServiceUnhealthyError as exc:
            return _text_error(str(exc), 404)

        started = time.perf_counter()
        try:
            result = client.call(endpoint, params)
        except (EndpointNotFoundError, requests.RequestException, ValueError) as exc:
            return _text_error(str(exc), 500)
        duration = time.perf_counter() - started

        try:
            balancer.record_response_time(service_name, client.address, duration)
        except (ServiceNotValidError, ValueError):
            pass

        response = _json_response(result)
        metrics.get_tracker().record_service_call(service_name)
        return response