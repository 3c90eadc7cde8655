"""
Transport session.

Owns the single serial connection and serializes every exchange on the
half-duplex link through one lock.
"""

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from .transport import SerialTransport, Transport
from ..exceptions import (
    DeviceDisconnectedError,
    NotOpenError,
    TransportError,
    TransportTimeoutError,
)
from ..types import Command, Response, SerialConfig, SessionStatus

logger = logging.getLogger(__name__)

TransportFactory = Callable[[SerialConfig], Transport]


class Session:
    """
    Serial session with a mutual-exclusion gate.

    ``open``, ``close`` and ``execute`` all take the same lock, so a close
    waits for an in-flight command and two commands never interleave on
    the wire. Waiting callers are served in no particular order.
    """

    def __init__(
        self,
        transport_factory: TransportFactory = SerialTransport,
        on_disconnect: Optional[Callable[[Exception], None]] = None
    ) -> None:
        """
        Initialize a closed session.

        Args:
            transport_factory: Callable opening a Transport for a SerialConfig
            on_disconnect: Optional callback for disconnection events.
                          Signature: callback(exception: Exception) -> None
        """
        self._transport_factory = transport_factory
        self._on_disconnect = on_disconnect
        self._transport: Optional[Transport] = None
        self._config: Optional[SerialConfig] = None
        self._gate = threading.Lock()
        self._last_activity: Optional[datetime] = None

        logger.debug("Initialized Session")

    def open(self, config: SerialConfig) -> None:
        """
        Open the port described by ``config``.

        An already open connection is closed first.

        Raises:
            TransportError: If the port cannot be opened (not retried)
        """
        with self._gate:
            if self._transport is not None:
                logger.info(f"Closing {self.port_name} before opening {config.port}")
                self._close_locked()

            logger.info(f"Opening {config.port} at {config.baudrate} baud")
            self._transport = self._transport_factory(config)
            self._config = config
            self._last_activity = datetime.now(timezone.utc)

    def close(self) -> None:
        """Close the connection. Safe to call when already closed."""
        with self._gate:
            self._close_locked()

    def _close_locked(self) -> None:
        if self._transport is None:
            return

        port = self.port_name
        try:
            self._transport.close()
        except TransportError as e:
            logger.warning(f"Error closing {port}: {e}")
        finally:
            self._transport = None
            self._config = None

        logger.info(f"Session on {port} closed")

    def execute(self, command: Command) -> Response:
        """
        Write a command and collect the reply.

        Timeouts and link failures are returned as a Response with
        ``success=False``; they are not raised.

        Args:
            command: Command to transmit

        Returns:
            Response stamped with timestamp and elapsed seconds

        Raises:
            NotOpenError: If the session is closed (nothing is written)
        """
        with self._gate:
            if self._transport is None or not self._transport.is_open():
                raise NotOpenError("Session is not open", command=command.payload)
            response, disconnected = self._execute_locked(command)

        # Outside the gate so the callback may close or reopen this session
        if disconnected is not None and self._on_disconnect:
            self._on_disconnect(disconnected)
        return response

    def _execute_locked(self, command: Command) -> tuple[Response, Optional[DeviceDisconnectedError]]:
        transport = self._transport
        started = time.monotonic()

        try:
            transport.reset_input_buffer()
            written = transport.write(command.payload)
            if written != len(command.payload):
                logger.error(f"Short write: {written}/{len(command.payload)} bytes")
                return self._finish(command, started, error=f"Short write ({written} bytes)"), None

            time.sleep(self._config.settle_delay)
            wait = command.timeout if command.requires_reply else 0.0
            raw = transport.read_available(timeout=wait)

        except TransportTimeoutError as e:
            logger.warning(f"Write timed out for {command.payload!r}: {e}")
            return self._finish(command, started, error=str(e), timed_out=True), None
        except DeviceDisconnectedError as e:
            logger.error(f"Device disconnected during {command.payload!r}, closing session")
            self._close_locked()
            return self._finish(command, started, error=str(e)), e
        except TransportError as e:
            logger.error(f"Transport failure during {command.payload!r}: {e}")
            return self._finish(command, started, error=str(e)), None

        if command.requires_reply and not raw:
            logger.debug(f"No reply to {command.payload!r} within {command.timeout}s")
            return self._finish(
                command, started,
                error=f"No reply within {command.timeout:g}s",
                timed_out=True
            ), None

        return self._finish(command, started, raw=raw, success=True), None

    def _finish(
        self,
        command: Command,
        started: float,
        raw: bytes = b"",
        success: bool = False,
        error: Optional[str] = None,
        timed_out: bool = False
    ) -> Response:
        self._last_activity = datetime.now(timezone.utc)
        response = Response(
            command=command,
            raw=raw,
            success=success,
            error=error,
            timed_out=timed_out,
            timestamp=self._last_activity,
            elapsed=time.monotonic() - started,
        )
        logger.debug(
            f"Executed {command.payload!r} -> {raw!r} "
            f"(success={success}, {response.elapsed * 1000:.1f} ms)"
        )
        return response

    @property
    def is_open(self) -> bool:
        """Check if the session has an open transport."""
        transport = self._transport
        return transport is not None and transport.is_open()

    @property
    def port_name(self) -> Optional[str]:
        """Name of the open port, or None."""
        config = self._config
        return config.port if config else None

    @property
    def config(self) -> Optional[SerialConfig]:
        """Settings of the open port, or None."""
        return self._config

    @property
    def last_activity(self) -> Optional[datetime]:
        """UTC time of the last open or executed command."""
        return self._last_activity

    def status(self) -> SessionStatus:
        """Snapshot of the session state (does not wait for the gate)."""
        is_open = self.is_open
        return SessionStatus(
            is_open=is_open,
            port_name=self.port_name if is_open else None,
            last_activity=self._last_activity,
        )

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *exc):
        """Context manager exit."""
        self.close()
