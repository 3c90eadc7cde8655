"""
Data types and structures for catlink.

Provides type-safe representations of serial settings, radio operations,
and the command/response values exchanged with a radio.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

BAUD_RATES = (1200, 2400, 4800, 9600, 19200, 38400)
DATA_BITS = (7, 8)


class ProtocolFamily(Enum):
    """Wire protocol families."""
    ASCII = "ascii"            # 2-letter mnemonic + numeric field + ';'
    CIV_BINARY = "civ"         # FE FE <dst> <src> <cmd> <sub> <data> FD


class Operation(Enum):
    """Abstract radio operations."""
    POWER_ON = "power_on"
    POWER_OFF = "power_off"
    PTT_ON = "ptt_on"
    PTT_OFF = "ptt_off"
    LOCK_ON = "lock_on"
    LOCK_OFF = "lock_off"
    CLARIFIER_ON = "clarifier_on"
    CLARIFIER_OFF = "clarifier_off"
    SPLIT_ON = "split_on"
    SPLIT_OFF = "split_off"
    SET_TONE_MODE = "set_tone_mode"
    TOGGLE_VFO = "toggle_vfo"
    SET_MODE = "set_mode"
    GET_MODE = "get_mode"
    GET_FREQUENCY_A = "get_frequency_a"
    SET_FREQUENCY_A = "set_frequency_a"
    GET_FREQUENCY_B = "get_frequency_b"
    SET_FREQUENCY_B = "set_frequency_b"
    SET_CTCSS_TONE = "set_ctcss_tone"
    SET_DCS_CODE = "set_dcs_code"


class OperatingMode(Enum):
    """Operating (modulation) modes."""
    LSB = "LSB"
    USB = "USB"
    CW = "CW"
    CWR = "CWR"
    AM = "AM"
    FM = "FM"
    DIG = "DIG"
    PKT = "PKT"


class ToneMode(Enum):
    """Sub-audible tone modes."""
    OFF = "OFF"
    CTCSS = "CTCSS"
    DCS = "DCS"
    ENCODER = "ENCODER"


class Parity(Enum):
    """Serial parity settings."""
    NONE = "None"
    ODD = "Odd"
    EVEN = "Even"
    MARK = "Mark"
    SPACE = "Space"


class StopBits(Enum):
    """Serial stop bit settings."""
    NONE = "None"
    ONE = "One"
    ONE_POINT_FIVE = "OnePointFive"
    TWO = "Two"


class FlowControl(Enum):
    """Serial flow control (handshake) settings."""
    NONE = "None"
    RTS_CTS = "RequestToSend"
    RTS_CTS_XON_XOFF = "RequestToSendXOnXOff"
    XON_XOFF = "XOnXOff"


def coerce_enum(enum_cls: type[Enum], value: Any) -> Enum:
    """
    Convert a member, value or name (case-insensitive) to an enum member.

    Args:
        enum_cls: Target enum class
        value: Member, member value, or member name

    Returns:
        Matching enum member

    Raises:
        ValidationError: If nothing matches
    """
    if isinstance(value, enum_cls):
        return value

    if isinstance(value, str):
        wanted = value.strip().lower().replace("-", "_")
        for member in enum_cls:
            if wanted in (member.name.lower(), str(member.value).lower()):
                return member

    choices = ", ".join(str(m.value) for m in enum_cls)
    raise ValidationError(f"Invalid {enum_cls.__name__} '{value}' (expected one of: {choices})")


@dataclass
class SerialConfig:
    """
    Serial port settings for a CAT session.

    Timeouts and the settle delay are in seconds.
    """
    port: str
    baudrate: int = 9600
    parity: Parity = Parity.NONE
    stop_bits: StopBits = StopBits.ONE
    data_bits: int = 8
    flow_control: FlowControl = FlowControl.NONE
    read_timeout: float = 1.0
    write_timeout: float = 1.0
    settle_delay: float = 0.1

    def __post_init__(self) -> None:
        if not self.port or not str(self.port).strip():
            raise ValidationError("Port name cannot be empty")

        self.parity = coerce_enum(Parity, self.parity)
        self.stop_bits = coerce_enum(StopBits, self.stop_bits)
        self.flow_control = coerce_enum(FlowControl, self.flow_control)

        try:
            self.baudrate = int(self.baudrate)
            self.data_bits = int(self.data_bits)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Baud rate and data bits must be integers: {e}") from e

        if self.baudrate not in BAUD_RATES:
            raise ValidationError(
                f"Unsupported baud rate {self.baudrate} (expected one of {BAUD_RATES})"
            )
        if self.data_bits not in DATA_BITS:
            raise ValidationError(f"Unsupported data bits {self.data_bits} (expected 7 or 8)")
        if self.stop_bits is StopBits.NONE:
            raise ValidationError("Stop bits 'None' cannot be configured on a serial port")

        for name in ("read_timeout", "write_timeout", "settle_delay"):
            value = getattr(self, name)
            if value is None or value < 0:
                raise ValidationError(f"{name} must be a non-negative number of seconds")

    # Keys used by JSON configuration files of the HTTP service
    _ALIASES = {
        "portname": "port",
        "port_name": "port",
        "baudrate": "baudrate",
        "baud_rate": "baudrate",
        "parity": "parity",
        "stopbits": "stop_bits",
        "stop_bits": "stop_bits",
        "databits": "data_bits",
        "data_bits": "data_bits",
        "handshake": "flow_control",
        "flowcontrol": "flow_control",
        "flow_control": "flow_control",
        "read_timeout": "read_timeout",
        "write_timeout": "write_timeout",
        "settle_delay": "settle_delay",
    }
    _MS_ALIASES = {
        "readtimeoutms": "read_timeout",
        "writetimeoutms": "write_timeout",
        "settledelayms": "settle_delay",
    }

    @classmethod
    def from_dict(cls, data: dict[str, Any], **overrides: Any) -> "SerialConfig":
        """
        Build a config from a mapping.

        Accepts snake_case keys as well as the camelCase keys of the
        service configuration files (``portName``, ``baudRate``,
        ``handshake``, ``readTimeoutMs``...). Millisecond keys are
        converted to seconds. Unknown keys are ignored.

        Args:
            data: Configuration mapping
            **overrides: Values that take precedence over ``data``

        Returns:
            Validated SerialConfig

        Example:

        .. code-block:: python

            config = SerialConfig.from_dict(
                {"portName": "COM3", "baudRate": 38400, "handshake": "None"}
            )
        """
        kwargs: dict[str, Any] = {}

        for key, value in data.items():
            lowered = key.lower()
            if value is None:
                # null in JSON means "use the default"
                continue
            if lowered in cls._MS_ALIASES:
                try:
                    kwargs[cls._MS_ALIASES[lowered]] = float(value) / 1000.0
                except (TypeError, ValueError) as e:
                    raise ValidationError(f"{key} must be a number of milliseconds: {e}") from e
            elif lowered in cls._ALIASES:
                kwargs[cls._ALIASES[lowered]] = value
            else:
                logger.debug(f"Ignoring unknown serial config key: {key}")

        kwargs.update({k: v for k, v in overrides.items() if v is not None})

        if "port" not in kwargs:
            raise ValidationError("Serial configuration is missing a port name")

        return cls(**kwargs)

    def with_overrides(self, **overrides: Any) -> "SerialConfig":
        """Return a copy with the given non-None fields replaced."""
        known = {f.name for f in fields(self)}
        changes = {k: v for k, v in overrides.items() if v is not None and k in known}
        return replace(self, **changes)


@dataclass(frozen=True)
class Command:
    """
    A command ready for transmission.

    Built by a codec (or from a raw string) and never mutated afterwards.
    """
    operation: Optional[Operation]       # None for raw commands
    payload: bytes                       # Exact bytes written to the port
    parameter: Any = None                # Abstract parameter (Hz, mode...)
    expected_response: Optional[bytes] = None  # Prefix a matching reply starts with
    timeout: float = 1.0                 # Seconds to wait for a reply
    requires_reply: bool = True          # False for fire-and-forget sets

    def __post_init__(self) -> None:
        if not self.payload:
            raise ValidationError("Command payload cannot be empty")

    @property
    def text(self) -> str:
        """Payload rendered as text (ASCII family) for display."""
        return self.payload.decode("ascii", errors="replace")


@dataclass(frozen=True)
class Response:
    """
    Result of executing a command.

    ``value`` is None when the radio was silent or the reply did not
    parse; that is a normal outcome, not an error.
    """
    command: Command
    raw: bytes = b""
    success: bool = False
    value: Any = None
    error: Optional[str] = None
    timed_out: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    elapsed: float = 0.0                 # Seconds from write to end of read

    @property
    def text(self) -> str:
        """Raw reply decoded as ASCII with surrounding whitespace removed."""
        return self.raw.decode("ascii", errors="replace").strip()

    @property
    def hex(self) -> str:
        """Raw reply as space-separated hex (CI-V family)."""
        return self.raw.hex(" ").upper()


@dataclass
class SessionStatus:
    """Snapshot of a session's state."""
    is_open: bool
    port_name: Optional[str] = None
    radio: Optional[str] = None
    last_activity: Optional[datetime] = None
