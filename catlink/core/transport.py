"""
Transport layer abstraction for radio communication.

Provides abstractions for serial communication with dependency injection support.
Transports move raw bytes only; they know nothing about CAT protocols.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional, Union

import serial
import serial.tools.list_ports
from serial import SerialException, SerialTimeoutException

from ..exceptions import (
    DeviceDisconnectedError,
    TransportError,
    TransportTimeoutError,
)
from ..types import FlowControl, Parity, SerialConfig, StopBits

logger = logging.getLogger(__name__)

_PARITY = {
    Parity.NONE: serial.PARITY_NONE,
    Parity.ODD: serial.PARITY_ODD,
    Parity.EVEN: serial.PARITY_EVEN,
    Parity.MARK: serial.PARITY_MARK,
    Parity.SPACE: serial.PARITY_SPACE,
}

_STOP_BITS = {
    StopBits.ONE: serial.STOPBITS_ONE,
    StopBits.ONE_POINT_FIVE: serial.STOPBITS_ONE_POINT_FIVE,
    StopBits.TWO: serial.STOPBITS_TWO,
}

_BYTE_SIZE = {
    7: serial.SEVENBITS,
    8: serial.EIGHTBITS,
}

# (rtscts, xonxoff)
_FLOW_CONTROL = {
    FlowControl.NONE: (False, False),
    FlowControl.RTS_CTS: (True, False),
    FlowControl.RTS_CTS_XON_XOFF: (True, True),
    FlowControl.XON_XOFF: (False, True),
}

_DISCONNECT_PHRASES = (
    "device disconnected",
    "device reports readiness to read but returned no data",
    "no such device",
    "device not configured",
    "input/output error",
)


def list_ports() -> list[str]:
    """
    List serial port device names present on this machine.

    Returns:
        Sorted device names (e.g. ["/dev/ttyUSB0", "COM3"])
    """
    ports = sorted(info.device for info in serial.tools.list_ports.comports())
    logger.info(f"Found {len(ports)} available serial ports")
    return ports


class Transport(ABC):
    """Abstract base class for radio transport."""

    port: Optional[str] = None

    @abstractmethod
    def write(self, data: bytes) -> int:
        """
        Write data to the transport.

        Args:
            data: Bytes to write

        Returns:
            Number of bytes written

        Raises:
            TransportTimeoutError: If the write deadline expires
            TransportError: If write fails
        """
        pass

    @abstractmethod
    def read_available(self, timeout: float = 0.0) -> bytes:
        """
        Drain whatever bytes are buffered.

        Waits up to ``timeout`` seconds for the first byte, then returns
        everything currently available without waiting further.

        Args:
            timeout: Seconds to wait for the first byte (0 = don't wait)

        Returns:
            Bytes read, or b"" if none arrived in time

        Raises:
            TransportError: If read fails
        """
        pass

    @abstractmethod
    def reset_input_buffer(self) -> None:
        """Discard unread input."""
        pass

    @abstractmethod
    def is_open(self) -> bool:
        """Check if transport is open."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the transport."""
        pass


def _translate(e: Union[SerialException, OSError], action: str) -> TransportError:
    """Map a pyserial error to the catlink hierarchy."""
    if isinstance(e, SerialTimeoutException):
        return TransportTimeoutError(f"Serial {action} timed out: {e}")

    error_str = str(e).lower()
    if any(phrase in error_str for phrase in _DISCONNECT_PHRASES):
        return DeviceDisconnectedError(f"Serial device disconnected: {e}")

    return TransportError(f"Serial {action} failed: {e}")


class SerialTransport(Transport):
    """Serial port transport implementation."""

    def __init__(self, config: SerialConfig) -> None:
        """
        Open a serial port.

        Args:
            config: Port name and line settings

        Raises:
            TransportError: If the port is missing, busy or not permitted
        """
        self.config = config
        self.port = config.port
        rtscts, xonxoff = _FLOW_CONTROL[config.flow_control]

        try:
            self._serial = serial.Serial(
                port=config.port,
                baudrate=config.baudrate,
                bytesize=_BYTE_SIZE[config.data_bits],
                parity=_PARITY[config.parity],
                stopbits=_STOP_BITS[config.stop_bits],
                rtscts=rtscts,
                xonxoff=xonxoff,
                timeout=config.read_timeout,
                write_timeout=config.write_timeout,
            )
            logger.info(f"Opened serial port {config.port} at {config.baudrate} baud")
        except (SerialException, OSError) as e:
            logger.error(f"Failed to open serial port {config.port}: {e}")
            raise TransportError(f"Failed to open serial port {config.port}: {e}") from e

    def write(self, data: bytes) -> int:
        """Write data to serial port."""
        try:
            written = self._serial.write(data)
            self._serial.flush()
            logger.debug(f"Wrote {written} bytes: {data!r}")
            return written
        except SerialException as e:
            logger.error(f"Serial write failed: {e}")
            raise _translate(e, "write") from e

    def read_available(self, timeout: float = 0.0) -> bytes:
        """Wait for the first byte, then drain the input buffer."""
        try:
            original_timeout = self._serial.timeout
            self._serial.timeout = timeout
            try:
                first = self._serial.read(1)
            finally:
                self._serial.timeout = original_timeout

            if not first:
                return b""

            waiting = self._serial.in_waiting
            data = first + (self._serial.read(waiting) if waiting else b"")
            logger.debug(f"Read {len(data)} bytes: {data!r}")
            return data
        except SerialException as e:
            logger.error(f"Serial read failed: {e}")
            raise _translate(e, "read") from e

    def reset_input_buffer(self) -> None:
        """Clear the serial input buffer."""
        try:
            self._serial.reset_input_buffer()
            logger.debug("Reset input buffer")
        except SerialException as e:
            logger.error(f"Failed to reset input buffer: {e}")
            raise _translate(e, "reset") from e

    def is_open(self) -> bool:
        """Check if serial port is open."""
        return bool(self._serial and self._serial.is_open)

    def close(self) -> None:
        """
        Close the serial port.

        Raises:
            TransportError: If the driver fails to release the port
        """
        if self._serial and self._serial.is_open:
            try:
                self._serial.close()
            except (SerialException, OSError) as e:
                logger.error(f"Failed to close serial port {self.port}: {e}")
                raise _translate(e, "close") from e
            logger.info(f"Closed serial port {self.port}")


class MockTransport(Transport):
    """
    Mock transport for testing.

    Simulates radio replies without requiring hardware. Every byte written
    is appended to ``written`` so tests can check ordering.
    """

    def __init__(
        self,
        responder: Optional[Callable[[bytes], Optional[bytes]]] = None,
        write_delay: float = 0.0,
        reply_delay: float = 0.0
    ) -> None:
        """
        Initialize mock transport.

        Args:
            responder: Optional callback producing a reply for each write
            write_delay: Seconds to sleep between written bytes
            reply_delay: Seconds to sleep before returning a reply
        """
        self.responder = responder
        self.write_delay = write_delay
        self.reply_delay = reply_delay
        self.writes: list[bytes] = []
        self.written = bytearray()
        self.config: Optional[SerialConfig] = None
        self.open_error: Optional[Exception] = None
        self.write_error: Optional[Exception] = None
        self.open_count = 0
        self.port: Optional[str] = None
        self._open = True
        self._input_buffer: list[bytes] = []
        self._response_queue: list[bytes] = []
        self._lock = threading.Lock()
        logger.info("Initialized MockTransport")

    def connect(self, config: SerialConfig) -> "MockTransport":
        """
        Transport factory: (re)open this mock with a config.

        Use as ``Session(transport_factory=mock.connect)``.
        """
        if self.open_error is not None:
            raise self.open_error

        self.config = config
        self.port = config.port
        self.open_count += 1
        self._open = True
        logger.info(f"MockTransport connected as {config.port}")
        return self

    def add_response(self, data: Union[bytes, str]) -> None:
        """
        Queue a reply to be returned by the next read.

        Args:
            data: Reply bytes (str is encoded as ASCII)
        """
        if isinstance(data, str):
            data = data.encode("ascii")
        with self._lock:
            self._response_queue.append(data)
            logger.debug(f"Added mock response: {data!r}")

    def inject(self, data: bytes) -> None:
        """Place stray bytes in the input buffer (cleared by reset_input_buffer)."""
        with self._lock:
            self._input_buffer.append(data)

    def write(self, data: bytes) -> int:
        """Simulate writing data."""
        if not self._open:
            raise DeviceDisconnectedError(
                "MockTransport is closed (simulating device disconnection)"
            )
        if self.write_error is not None:
            raise self.write_error

        for value in data:
            self.written.append(value)
            if self.write_delay:
                time.sleep(self.write_delay)

        self.writes.append(bytes(data))
        logger.debug(f"Mock write: {data!r}")

        if self.responder is not None:
            reply = self.responder(bytes(data))
            if reply:
                self.add_response(reply)

        return len(data)

    def read_available(self, timeout: float = 0.0) -> bytes:
        """
        Return stray input plus the next queued reply.

        With nothing queued, sleeps for ``timeout`` to simulate a silent radio.
        """
        if not self._open:
            raise DeviceDisconnectedError(
                "MockTransport is closed (simulating device disconnection)"
            )

        with self._lock:
            chunks = list(self._input_buffer)
            self._input_buffer.clear()
            if self._response_queue:
                chunks.append(self._response_queue.pop(0))

        if not chunks:
            if timeout:
                time.sleep(timeout)
            return b""

        if self.reply_delay:
            time.sleep(self.reply_delay)

        data = b"".join(chunks)
        logger.debug(f"Mock read: {data!r}")
        return data

    def reset_input_buffer(self) -> None:
        """Clear stray input (queued replies are kept)."""
        with self._lock:
            self._input_buffer.clear()
            logger.debug("Reset mock input buffer")

    def is_open(self) -> bool:
        """Check if mock transport is open."""
        return self._open

    def close(self) -> None:
        """Close mock transport."""
        self._open = False
        logger.info("Closed MockTransport")

    def clear_responses(self) -> None:
        """Clear all queued responses (useful for testing)."""
        with self._lock:
            self._response_queue.clear()
            logger.debug("Cleared mock response queue")
