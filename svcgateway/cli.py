"""Command that runs the gateway until interrupted."""

from __future__ import annotations

import signal
import threading
from collections.abc import Sequence

from .gateway import Gateway
from .logs import LoggerType, init


def main(argv: Sequence[str] | None = None) -> int:
    """Run the gateway until SIGINT; return the process exit status."""
    log = init(LoggerType.LOCAL, "gateway", "127.0.0.1")
    gateway = Gateway.from_env()

    done = threading.Event()
    failures: list[BaseException] = []

    def serve() -> None:
        log.info(f"gateway listening on {gateway.address}")
        try:
            gateway.start()
        except Exception as exc:  # reported by the main thread
            failures.append(exc)
        finally:
            done.set()

    interrupted = threading.Event()
    previous = signal.signal(signal.SIGINT, lambda signum, frame: interrupted.set())
    thread = threading.Thread(target=serve, name="gateway", daemon=True)
    try:
        thread.start()
        while not (interrupted.is_set() or done.is_set()):
            done.wait(0.2)
    finally:
        signal.signal(signal.SIGINT, previous)

    if failures:
        log.error(f"failed to start gateway: {failures[0]}")
        gateway.heartbeat.stop()
        return 1

    log.info("gateway shutting down")
    try:
        gateway.stop()
    except Exception as exc:
        log.error(f"failed to stop gateway: {exc}")
        return 1
    thread.join(5)
    return 0