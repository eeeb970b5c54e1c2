"""Periodic health checks of every registered service address."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor

import requests

from .logs import get_logger
from .models import ServiceDefinition


class HeartbeatManager:
    """Checks the health endpoint of every service address every ``interval`` seconds."""

    def __init__(
        self,
        services: Mapping[str, ServiceDefinition],
        interval: float,
        timeout: float,
    ) -> None:
        self.services = services
        self.interval = interval
        self.timeout = timeout
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Begin checking in a background thread."""
        self._thread = threading.Thread(target=self._run, name="heartbeat", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the background checks."""
        self._stopped.set()

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            self.check_services()

    def check_services(self) -> dict[str, list[str]]:
        """Check all services concurrently; return unhealthy addresses by service."""
        services = list(self.services.values())
        if not services:
            return {}
        with ThreadPoolExecutor(max_workers=len(services)) as pool:
            results = list(pool.map(self.check_service, services))
        return {service.name: unhealthy for service, unhealthy in zip(services, results)}

    def check_service(self, service: ServiceDefinition) -> list[str]:
        """Check each address of ``service``; return those that are unhealthy."""
        unhealthy = []
        for address in service.addresses:
            if not self.check_address(address, service.health_endpoint):
                get_logger().warn("unhealthy address found for " + service.name)
                unhealthy.append(address)
        return unhealthy

    def check_address(self, address: str, health_endpoint: str) -> bool:
        """Return whether the health endpoint at ``address`` answers 200."""
        try:
            response = requests.get(f"http://{address}{health_endpoint}", timeout=self.timeout)
        except requests.RequestException:
            return False
        with response:
            return response.status_code == 200