"""
Tests for serial configuration.
"""

import json

import pytest

from catlink import load_serial_config
from catlink.exceptions import ValidationError
from catlink.types import FlowControl, Parity, SerialConfig, StopBits


def test_serial_config_defaults():
    """Test default serial settings."""
    config = SerialConfig(port="COM3")

    assert config.baudrate == 9600
    assert config.parity == Parity.NONE
    assert config.stop_bits == StopBits.ONE
    assert config.data_bits == 8
    assert config.flow_control == FlowControl.NONE
    assert config.read_timeout == 1.0
    assert config.write_timeout == 1.0
    assert config.settle_delay == 0.1


@pytest.mark.parametrize("baudrate", [1200, 2400, 4800, 9600, 19200, 38400])
def test_serial_config_accepts_supported_baud_rates(baudrate):
    """Test every supported baud rate is accepted."""
    assert SerialConfig(port="COM3", baudrate=baudrate).baudrate == baudrate


@pytest.mark.parametrize("baudrate", [300, 57600, 115200])
def test_serial_config_rejects_unsupported_baud_rates(baudrate):
    """Test unsupported baud rates are rejected."""
    with pytest.raises(ValidationError):
        SerialConfig(port="COM3", baudrate=baudrate)


def test_serial_config_rejects_bad_data_bits():
    """Test only 7 and 8 data bits are allowed."""
    with pytest.raises(ValidationError):
        SerialConfig(port="COM3", data_bits=6)


def test_serial_config_rejects_stop_bits_none():
    """Test StopBits.NONE cannot be configured."""
    with pytest.raises(ValidationError):
        SerialConfig(port="COM3", stop_bits=StopBits.NONE)


def test_serial_config_rejects_empty_port():
    """Test a port name is required."""
    with pytest.raises(ValidationError):
        SerialConfig(port="")


def test_serial_config_rejects_negative_timeout():
    """Test timeouts must be non-negative."""
    with pytest.raises(ValidationError):
        SerialConfig(port="COM3", read_timeout=-1)


def test_serial_config_coerces_names():
    """Test enum fields accept names and values, case-insensitive."""
    config = SerialConfig(
        port="COM3",
        parity="even",
        stop_bits="OnePointFive",
        flow_control="RequestToSend"
    )

    assert config.parity == Parity.EVEN
    assert config.stop_bits == StopBits.ONE_POINT_FIVE
    assert config.flow_control == FlowControl.RTS_CTS


def test_serial_config_rejects_unknown_parity():
    """Test unknown enum names are rejected."""
    with pytest.raises(ValidationError) as exc_info:
        SerialConfig(port="COM3", parity="sideways")

    assert "Parity" in str(exc_info.value)


def test_from_dict_service_keys():
    """Test camelCase service keys and millisecond timeouts."""
    config = SerialConfig.from_dict({
        "portName": "/dev/ttyUSB0",
        "baudRate": 38400,
        "dataBits": 8,
        "stopBits": "Two",
        "parity": "None",
        "handshake": "XOnXOff",
        "readTimeoutMs": 500,
        "writeTimeoutMs": 250,
        "autoDetectPort": True,
    })

    assert config.port == "/dev/ttyUSB0"
    assert config.baudrate == 38400
    assert config.stop_bits == StopBits.TWO
    assert config.flow_control == FlowControl.XON_XOFF
    assert config.read_timeout == 0.5
    assert config.write_timeout == 0.25


def test_from_dict_overrides():
    """Test explicit overrides win over mapping values."""
    config = SerialConfig.from_dict({"port": "COM1", "baudrate": 4800}, port="COM3", baudrate=None)

    assert config.port == "COM3"
    assert config.baudrate == 4800


def test_from_dict_requires_port():
    """Test a mapping without a port is rejected."""
    with pytest.raises(ValidationError):
        SerialConfig.from_dict({"baudRate": 9600})


def test_with_overrides():
    """Test with_overrides ignores None values."""
    config = SerialConfig(port="COM3").with_overrides(baudrate=19200, parity=None)

    assert config.baudrate == 19200
    assert config.parity == Parity.NONE


def test_load_serial_config(tmp_path):
    """Test loading a nested service configuration file."""
    path = tmp_path / "server-config.json"
    path.write_text(json.dumps({
        "serialPort": {"portName": "COM4", "baudRate": 19200, "readTimeoutMs": 2000}
    }))

    config = load_serial_config(path)

    assert config.port == "COM4"
    assert config.baudrate == 19200
    assert config.read_timeout == 2.0


def test_load_serial_config_invalid_json(tmp_path):
    """Test a broken file raises ValidationError."""
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    with pytest.raises(ValidationError):
        load_serial_config(path)


def test_from_dict_null_values_use_defaults():
    """Test JSON nulls fall back to defaults."""
    config = SerialConfig.from_dict({
        "portName": "COM3",
        "baudRate": None,
        "readTimeoutMs": None,
    })

    assert config.baudrate == 9600
    assert config.read_timeout == 1.0


def test_from_dict_bad_millisecond_value():
    """Test a non-numeric timeout raises ValidationError."""
    with pytest.raises(ValidationError):
        SerialConfig.from_dict({"portName": "COM3", "readTimeoutMs": "fast"})


def test_load_serial_config_null_timeout(tmp_path):
    """Test a config file with a null timeout loads."""
    path = tmp_path / "server-config.json"
    path.write_text('{"serialPort": {"portName": "COM4", "readTimeoutMs": null}}')

    assert load_serial_config(path).read_timeout == 1.0
