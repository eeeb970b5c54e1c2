"""Registry of services loaded from a directory of ``.svc`` files."""

from __future__ import annotations

import os
import threading
from pathlib import Path

from .logs import get_logger
from .models import ServiceDefinition
from .parser import ParseError, parse_file


class ServiceRegistry:
    """Thread-safe mapping of service names to definitions."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self.directory = Path(directory)
        self._services: dict[str, ServiceDefinition] = {}
        self._lock = threading.RLock()
        self.reload()

    def reload(self) -> None:
        """Replace all services with those defined in the directory."""
        try:
            entries = sorted(self.directory.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            get_logger().error(f"error reading directory: {exc}")
            return

        services: dict[str, ServiceDefinition] = {}
        for entry in entries:
            if entry.is_dir() or not entry.name.endswith(".svc"):
                continue
            try:
                service = parse_file(entry)
            except (OSError, ParseError) as exc:
                get_logger().error(f"error parsing service definition file at {entry}: {exc}")
                continue
            services[service.name] = service

        with self._lock:
            self._services = services

    def register(self, service: ServiceDefinition) -> None:
        with self._lock:
            self._services[service.name] = service

    def get(self, service_name: str) -> ServiceDefinition | None:
        with self._lock:
            return self._services.get(service_name)

    def services(self) -> dict[str, ServiceDefinition]:
        """Return a snapshot of all registered services."""
        with self._lock:
            return dict(self._services)