"""
Tests for transport layer.
"""

import time
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import serial
from serial import SerialException, SerialTimeoutException

from catlink.core import MockTransport, SerialTransport, list_ports
from catlink.exceptions import (
    DeviceDisconnectedError,
    TransportError,
    TransportTimeoutError,
)
from catlink.types import FlowControl, Parity, SerialConfig, StopBits


def test_mock_transport_write():
    """Test MockTransport write operation."""
    transport = MockTransport()

    written = transport.write(b"FA;")
    assert written == 3
    assert transport.writes == [b"FA;"]
    assert bytes(transport.written) == b"FA;"

    transport.close()


def test_mock_transport_read():
    """Test MockTransport read returns queued reply."""
    transport = MockTransport()

    transport.add_response("FA00014074000;")

    assert transport.read_available() == b"FA00014074000;"

    transport.close()


def test_mock_transport_replies_in_order():
    """Test MockTransport returns one queued reply per read."""
    transport = MockTransport()

    transport.add_response(b"FA00014074000;")
    transport.add_response(b"FB00007074000;")

    assert transport.read_available() == b"FA00014074000;"
    assert transport.read_available() == b"FB00007074000;"

    transport.close()


def test_mock_transport_empty_read_waits_for_timeout():
    """Test MockTransport simulates a silent radio."""
    transport = MockTransport()

    start = time.monotonic()
    data = transport.read_available(timeout=0.1)

    assert data == b""
    assert time.monotonic() - start >= 0.1

    transport.close()


def test_mock_transport_is_open():
    """Test MockTransport is_open status."""
    transport = MockTransport()

    assert transport.is_open() is True

    transport.close()
    assert transport.is_open() is False


def test_mock_transport_write_when_closed():
    """Test MockTransport raises error when writing to closed transport."""
    transport = MockTransport()
    transport.close()

    with pytest.raises(DeviceDisconnectedError):
        transport.write(b"FA;")


def test_mock_transport_reset_keeps_queued_replies():
    """Test reset_input_buffer drops stray bytes but not scripted replies."""
    transport = MockTransport()

    transport.inject(b"stale;")
    transport.add_response(b"FA00014074000;")
    transport.reset_input_buffer()

    assert transport.read_available() == b"FA00014074000;"

    transport.close()


def test_mock_transport_clear_responses():
    """Test MockTransport clear_responses."""
    transport = MockTransport()

    transport.add_response(b"FA;")
    transport.add_response(b"FB;")
    transport.clear_responses()

    assert transport.read_available() == b""

    transport.close()


def test_mock_transport_responder():
    """Test responder callback queues a reply for each write."""
    transport = MockTransport(responder=lambda data: data.replace(b";", b"00014074000;"))

    transport.write(b"FA;")

    assert transport.read_available() == b"FA00014074000;"

    transport.close()


def test_mock_transport_connect_reopens():
    """Test connect() acts as a transport factory."""
    transport = MockTransport()
    transport.close()
    config = SerialConfig(port="COM7")

    result = transport.connect(config)

    assert result is transport
    assert transport.is_open() is True
    assert transport.port == "COM7"
    assert transport.open_count == 1


def test_mock_transport_open_error():
    """Test connect() raises the configured open error."""
    transport = MockTransport()
    transport.open_error = TransportError("Port busy")

    with pytest.raises(TransportError):
        transport.connect(SerialConfig(port="COM3"))


@patch("catlink.core.transport.serial.Serial")
def test_serial_transport_applies_config(mock_serial_cls):
    """Test SerialTransport passes line settings to pyserial."""
    config = SerialConfig(
        port="/dev/ttyUSB0",
        baudrate=38400,
        parity=Parity.EVEN,
        stop_bits=StopBits.TWO,
        data_bits=7,
        flow_control=FlowControl.RTS_CTS_XON_XOFF,
        read_timeout=0.5,
        write_timeout=0.25,
    )

    transport = SerialTransport(config)

    kwargs = mock_serial_cls.call_args.kwargs
    assert kwargs["port"] == "/dev/ttyUSB0"
    assert kwargs["baudrate"] == 38400
    assert kwargs["parity"] == serial.PARITY_EVEN
    assert kwargs["stopbits"] == serial.STOPBITS_TWO
    assert kwargs["bytesize"] == serial.SEVENBITS
    assert kwargs["rtscts"] is True
    assert kwargs["xonxoff"] is True
    assert kwargs["timeout"] == 0.5
    assert kwargs["write_timeout"] == 0.25
    assert transport.port == "/dev/ttyUSB0"


@patch("catlink.core.transport.serial.Serial")
def test_serial_transport_open_failure(mock_serial_cls):
    """Test a missing port raises TransportError immediately."""
    mock_serial_cls.side_effect = SerialException("could not open port 'COM99'")

    with pytest.raises(TransportError) as exc_info:
        SerialTransport(SerialConfig(port="COM99"))

    assert "COM99" in str(exc_info.value)
    assert mock_serial_cls.call_count == 1


@patch("catlink.core.transport.serial.Serial")
def test_serial_transport_read_available_drains_buffer(mock_serial_cls):
    """Test read_available waits for one byte then drains the rest."""
    port = MagicMock()
    port.timeout = 1.0
    port.read.side_effect = [b"F", b"A00014074000;"]
    port.in_waiting = 13
    mock_serial_cls.return_value = port

    transport = SerialTransport(SerialConfig(port="COM3"))
    data = transport.read_available(timeout=0.2)

    assert data == b"FA00014074000;"
    assert port.timeout == 1.0


@patch("catlink.core.transport.serial.Serial")
def test_serial_transport_read_available_silent(mock_serial_cls):
    """Test read_available returns b"" when nothing arrives."""
    port = MagicMock()
    port.read.return_value = b""
    mock_serial_cls.return_value = port

    transport = SerialTransport(SerialConfig(port="COM3"))

    assert transport.read_available(timeout=0.1) == b""


@patch("catlink.core.transport.serial.Serial")
def test_serial_transport_write_timeout(mock_serial_cls):
    """Test a pyserial write timeout becomes TransportTimeoutError."""
    port = MagicMock()
    port.write.side_effect = SerialTimeoutException("Write timeout")
    mock_serial_cls.return_value = port

    transport = SerialTransport(SerialConfig(port="COM3"))

    with pytest.raises(TransportTimeoutError):
        transport.write(b"FA;")


@patch("catlink.core.transport.serial.Serial")
def test_serial_transport_detects_disconnection(mock_serial_cls):
    """Test disconnection messages become DeviceDisconnectedError."""
    port = MagicMock()
    port.read.side_effect = SerialException(
        "device reports readiness to read but returned no data"
    )
    mock_serial_cls.return_value = port

    transport = SerialTransport(SerialConfig(port="COM3"))

    with pytest.raises(DeviceDisconnectedError):
        transport.read_available(timeout=0.1)


@patch("catlink.core.transport.serial.tools.list_ports.comports")
def test_list_ports(mock_comports):
    """Test list_ports returns sorted device names."""
    mock_comports.return_value = [
        SimpleNamespace(device="/dev/ttyUSB1"),
        SimpleNamespace(device="/dev/ttyUSB0"),
    ]

    assert list_ports() == ["/dev/ttyUSB0", "/dev/ttyUSB1"]


@patch("catlink.core.transport.serial.Serial")
def test_serial_transport_close_failure(mock_serial_cls):
    """Test a driver error on close becomes TransportError."""
    port = MagicMock()
    port.is_open = True
    port.close.side_effect = SerialException("could not release port")
    mock_serial_cls.return_value = port

    transport = SerialTransport(SerialConfig(port="COM3"))

    with pytest.raises(TransportError):
        transport.close()
