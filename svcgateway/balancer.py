"""Choosing a backend address for each service call."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from .models import ServiceDefinition

_DAY_SECONDS = 24 * 60 * 60.0


class BalancerMode(str, Enum):
    """Strategy used to pick an address."""

    ROUND_ROBIN = "round_robin"
    LEAST_RESPONSE_TIME = "least_response_time"


class ServiceNotValidError(LookupError):
    """Raised when a service is unknown or has no addresses."""

    def __init__(self, message: str = "service not valid") -> None:
        super().__init__(message)


@dataclass
class AddressUsage:
    """Last observed response time of an address, in seconds."""

    response_time: float = 0.0


@dataclass
class ServiceUsage:
    """Per-service balancing state."""

    addresses: list[str]
    address_usages: dict[str, AddressUsage] = field(default_factory=dict)
    count: int = 0


class LoadBalancer:
    """Selects service addresses by round robin or least response time."""

    def __init__(self, mode: BalancerMode, services: Mapping[str, ServiceDefinition]) -> None:
        self.mode = BalancerMode(mode)
        self.service_usages: dict[str, ServiceUsage] = {
            name: ServiceUsage(
                addresses=list(service.addresses),
                address_usages={address: AddressUsage() for address in service.addresses},
            )
            for name, service in services.items()
        }
        self._lock = threading.Lock()

    def select(self, service_name: str) -> str:
        """Return the address to use next for ``service_name``."""
        with self._lock:
            usage = self.service_usages.get(service_name)
            if usage is None or not usage.address_usages:
                raise ServiceNotValidError()

            if self.mode is BalancerMode.ROUND_ROBIN:
                address = usage.addresses[usage.count % len(usage.address_usages)]
                usage.count += 1
                return address

            address = ""
            lowest = _DAY_SECONDS
            for candidate, address_usage in usage.address_usages.items():
                if address_usage.response_time < lowest:
                    lowest = address_usage.response_time
                    address = candidate
            return address

    def record_response_time(self, service_name: str, address: str, duration: float) -> None:
        """Store the latest response time, in seconds, of an address."""
        with self._lock:
            usage = self.service_usages.get(service_name)
            if usage is None:
                raise ServiceNotValidError()
            try:
                usage.address_usages[address].response_time = duration
            except KeyError:
                raise ValueError(f"address {address} not known for {service_name}") from None