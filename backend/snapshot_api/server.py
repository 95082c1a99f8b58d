"""Server Lifecycle — runs uvicorn on a background thread with bounded graceful shutdown.

Invariants:
    - States move STARTING → LISTENING → SHUTTING_DOWN → STOPPED, never backwards
    - LISTENING is reached only once uvicorn reports `started` (socket bound)
    - A server thread that dies during STARTING (bind failure) is fatal
    - Shutdown waits shutdown_timeout seconds (plus join_margin for uvicorn's
      own loop tick and lifespan shutdown) for in-flight requests; past that
      the shutdown counts as forced and the exit status is 1
    - A server thread that dies while LISTENING is never a clean exit
    - Missing or empty required configuration is fatal before anything binds

Design Decisions:
    - uvicorn in a daemon thread: the main thread owns signal handling, and a
      stuck drain cannot keep the process alive after a forced shutdown
    - uvicorn skips its own signal capture off the main thread; we set
      should_exit ourselves
"""

import logging
import signal
import sys
import threading
import time
from enum import Enum
from typing import Any

import uvicorn
from pydantic import ValidationError

from snapshot_api.config import REQUIRED_ENV_VARS, Settings, get_settings
from snapshot_api.core.errors import ServerStartupError
from snapshot_api.infrastructure.observability import setup_logging
from snapshot_api.main import create_app

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    STARTING = "starting"
    LISTENING = "listening"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


class ServerLifecycle:
    """Drives one uvicorn.Server (or anything with run/started/should_exit)."""

    def __init__(
        self,
        server: Any,
        shutdown_timeout: float = 5.0,
        startup_poll_interval: float = 0.05,
        join_margin: float = 1.0,
    ):
        self.server = server
        self.shutdown_timeout = shutdown_timeout
        self.join_margin = join_margin
        self.startup_poll_interval = startup_poll_interval
        self.state = LifecycleState.STARTING
        self._thread: threading.Thread | None = None
        self._stop_requested = threading.Event()
        self._server_died = False

    def _transition(self, state: LifecycleState) -> None:
        self.state = state
        logger.info(f"Server {state.value}", extra={"state": state.value})

    def start(self) -> None:
        """Launch the listener thread and block until it is bound."""
        self._thread = threading.Thread(
            target=self.server.run, name="uvicorn-server", daemon=True,
        )
        self._thread.start()
        while not self.server.started:
            if not self._thread.is_alive():
                self._transition(LifecycleState.STOPPED)
                raise ServerStartupError(
                    "Server stopped before it started listening",
                )
            time.sleep(self.startup_poll_interval)
        self._transition(LifecycleState.LISTENING)

    def request_shutdown(self, signum: int | None = None, frame=None) -> None:
        """Signal handler: wake the main thread to begin shutdown."""
        if signum is not None:
            logger.info(f"Received signal {signal.Signals(signum).name}")
        self._stop_requested.set()

    def wait_for_signal(self) -> bool:
        """Block the main thread until SIGINT/SIGTERM or the server dies.

        Returns False when the server thread exited on its own.
        """
        signal.signal(signal.SIGINT, self.request_shutdown)
        signal.signal(signal.SIGTERM, self.request_shutdown)
        while not self._stop_requested.wait(0.5):
            if self._thread is not None and not self._thread.is_alive():
                logger.error("Server thread exited unexpectedly")
                self._server_died = True
                return False
        return True

    def shutdown(self) -> bool:
        """Drain and stop. False when the deadline forced the stop or the
        server thread had already died on its own."""
        self._transition(LifecycleState.SHUTTING_DOWN)
        self.server.should_exit = True
        if self._thread is not None:
            self._thread.join(self.shutdown_timeout + self.join_margin)
        forced = self._thread is not None and self._thread.is_alive()
        self._transition(LifecycleState.STOPPED)
        if forced:
            logger.critical(
                f"Server forced to shutdown: requests still running after "
                f"{self.shutdown_timeout}s",
            )
            return False
        if self._server_died:
            logger.critical("Server stopped without a shutdown request")
            return False
        logger.info("Server exiting")
        return True


def _missing_settings(exc: ValidationError) -> list[str]:
    missing = [
        ".".join(str(loc) for loc in e["loc"])
        for e in exc.errors()
        if e["type"] in ("missing", "string_too_short")
    ]
    return missing or list(REQUIRED_ENV_VARS)


def build_server(settings: Settings) -> uvicorn.Server:
    config = uvicorn.Config(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        timeout_graceful_shutdown=settings.shutdown_timeout_seconds,
        log_config=None,
    )
    return uvicorn.Server(config)


def serve() -> int:
    """Run the API until a termination signal. Returns the exit status."""
    try:
        settings = get_settings()
    except ValidationError as e:
        setup_logging()
        logger.critical(
            f"Missing required configuration: {', '.join(_missing_settings(e))}",
        )
        return 1

    setup_logging(settings.log_level, settings.log_format)
    lifecycle = ServerLifecycle(
        build_server(settings), settings.shutdown_timeout_seconds,
    )
    logger.info(
        f"Starting server on port {settings.port}...",
        extra={"port": settings.port},
    )
    try:
        lifecycle.start()
    except ServerStartupError as e:
        logger.critical(f"listen: {e}", extra={"port": settings.port})
        return 1

    lifecycle.wait_for_signal()
    logger.info("Shutting down server...")
    return 0 if lifecycle.shutdown() else 1


def main() -> None:
    sys.exit(serve())


if __name__ == "__main__":
    main()
