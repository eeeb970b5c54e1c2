"""HTTP client for calling REST services registered with the gateway."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import requests

from .balancer import LoadBalancer, ServiceNotValidError
from .models import ServiceDefinition


class RESTMethod(str, Enum):
    """HTTP methods an endpoint may use."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


@dataclass(frozen=True)
class RESTEndpoint:
    """A path on a service and the method used to reach it."""

    path: str
    method: str


class EndpointNotFoundError(LookupError):
    """Raised when a call names an endpoint the service does not expose."""


class ServiceUnhealthyError(RuntimeError):
    """Raised when no healthy address can be reached for a service."""

    def __init__(self, message: str = "service not healthy") -> None:
        super().__init__(message)


def _method(name: str) -> str:
    try:
        return RESTMethod(name)
    except ValueError:
        return name


def build_endpoints(endpoints: Iterable[str]) -> dict[str, RESTEndpoint]:
    """Map ``"METHOD /path"`` names to endpoints.

    An entry that is not exactly ``METHOD PATH`` is exposed under every method.
    """
    result: dict[str, RESTEndpoint] = {}
    for endpoint in endpoints:
        parts = endpoint.split(" ")
        if len(parts) != 2:
            for method in RESTMethod:
                result[f"{method.value} {endpoint}"] = RESTEndpoint(endpoint, method)
        else:
            method_name, path = parts
            result[endpoint] = RESTEndpoint(path, _method(method_name))
    return result


class RESTClient:
    """Calls the endpoints of one service at one address."""

    def __init__(self, address: str, endpoints: dict[str, RESTEndpoint]) -> None:
        self.address = address
        self.endpoints = dict(endpoints)

    @classmethod
    def from_service(cls, service: ServiceDefinition, balancer: LoadBalancer) -> "RESTClient":
        """Pick an address for ``service`` and return a client if it is healthy."""
        endpoints = build_endpoints(service.endpoints)
        if len(service.addresses) == 1:
            address = service.addresses[0]
        else:
            try:
                address = balancer.select(service.name)
            except ServiceNotValidError as exc:
                raise ServiceUnhealthyError() from exc

        client = cls(address, endpoints)
        if not client.health_check():
            raise ServiceUnhealthyError()
        return client

    def health_check(self) -> bool:
        """Return whether ``/healthz`` answers with status 200."""
        try:
            response = requests.get(f"http://{self.address}/healthz")
        except requests.RequestException:
            return False
        with response:
            return response.status_code == 200

    def call(self, endpoint_name: str, params: dict[str, Any] | None = None) -> dict[str, Any] | None:
        """Call an endpoint and return its decoded JSON object."""
        address = self.address
        if not address.startswith("http://"):
            address = "http://" + address

        endpoint = self.endpoints.get(endpoint_name)
        if endpoint is None:
            raise EndpointNotFoundError(f"endpoint {endpoint_name} not found")

        url = address + endpoint.path
        if endpoint.method == RESTMethod.GET:
            response = requests.request(str(endpoint.method.value if isinstance(endpoint.method, RESTMethod) else endpoint.method), url)
        else:
            method = endpoint.method.value if isinstance(endpoint.method, RESTMethod) else endpoint.method
            response = requests.request(
                method,
                url,
                data=json.dumps(params).encode("utf-8"),
                headers={"Content-Type": "application/json"},
            )

        with response:
            result = json.loads(response.content)
        if result is not None and not isinstance(result, dict):
            raise ValueError("response body is not a JSON object")
        return result