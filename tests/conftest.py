"""
Pytest configuration and fixtures.

Provides shared test fixtures for catlink tests.
"""

import pytest
import logging

from catlink.core import MockTransport, Session
from catlink import RadioController, SerialConfig


# Enable logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

READ_TIMEOUT = 0.2


@pytest.fixture
def mock_transport():
    """
    Create a MockTransport instance for testing.

    Example:
        def test_something(mock_transport):
            mock_transport.add_response(b"FA00014074000;")
            # ... test code ...
    """
    transport = MockTransport()
    yield transport
    transport.close()


@pytest.fixture
def serial_config():
    """Serial settings with short timeouts and no settle delay."""
    return SerialConfig(
        port="COM3",
        baudrate=9600,
        read_timeout=READ_TIMEOUT,
        settle_delay=0.0
    )


@pytest.fixture
def session(mock_transport, serial_config):
    """
    Create an open Session backed by MockTransport.

    Example:
        def test_execute(session, mock_transport):
            mock_transport.add_response(b"FA00014074000;")
            response = session.execute(command)
    """
    sess = Session(transport_factory=mock_transport.connect)
    sess.open(serial_config)
    yield sess
    sess.close()


@pytest.fixture
def yaesu(mock_transport, serial_config):
    """
    Create an open RadioController for the Yaesu FT-991A (ASCII family).

    Example:
        def test_frequency(yaesu, mock_transport):
            mock_transport.add_response(b"FA00014074000;")
            assert yaesu.get_frequency_a() == 14074000
    """
    radio = RadioController("FT-991A", transport_factory=mock_transport.connect)
    radio.open(serial_config)
    yield radio
    radio.close()


@pytest.fixture
def icom(mock_transport, serial_config):
    """Create an open RadioController for the Icom IC-7300 (CI-V family)."""
    radio = RadioController("IC-7300", transport_factory=mock_transport.connect)
    radio.open(serial_config)
    yield radio
    radio.close()


@pytest.fixture
def civ_frame():
    """
    Build a CI-V frame sent by a radio to the controller.

    Example:
        civ_frame(b"\\xfb") -> FE FE E0 94 FB FD
    """
    def build(body: bytes, radio: int = 0x94, controller: int = 0xE0) -> bytes:
        return b"\xfe\xfe" + bytes([controller, radio]) + body + b"\xfd"
    return build
