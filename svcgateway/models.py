"""Service definitions as described by ``.svc`` files."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class APIType(str, Enum):
    """Kind of API a service exposes."""

    GRPC = "grpc"
    REST = "rest"


@dataclass
class ServiceDefinition:
    """A backend service known to the gateway."""

    name: str = ""
    replicas: int = 0
    addresses: list[str] = field(default_factory=list)
    api_type: APIType | None = None
    endpoints: list[str] = field(default_factory=list)
    health_endpoint: str = ""

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of this definition."""
        return {
            "Name": self.name,
            "Replicas": self.replicas,
            "Addresses": list(self.addresses) if self.addresses else None,
            "APIType": self.api_type.value if self.api_type is not None else "",
            "Endpoints": list(self.endpoints) if self.endpoints else None,
            "HealthEndpoint": self.health_endpoint,
        }