"""
catlink - Python library for controlling amateur-radio transceivers over CAT.
"""

from .version import __version__
from .controller import RadioController
from .config import load_serial_config
from .core import MockTransport, Session, CommandDispatcher

from .types import (
    Command,
    Response,
    SerialConfig,
    SessionStatus,
    Operation,
    OperatingMode,
    ToneMode,
    ProtocolFamily,
    Parity,
    StopBits,
    FlowControl,
)

from .radios import (
    RadioModel,
    available_models,
    get_model,
    register_model,
)

from .exceptions import (
    CATError,
    TransportError,
    DeviceDisconnectedError,
    TransportTimeoutError,
    ProtocolError,
    ValidationError,
    OutOfRangeError,
    NotOpenError,
    UnsupportedOperationError,
    UnknownRadioError,
)

__all__ = [
    "__version__",
    "RadioController",
    "load_serial_config",
    "MockTransport",
    "Session",
    "CommandDispatcher",
    "Command",
    "Response",
    "SerialConfig",
    "SessionStatus",
    "Operation",
    "OperatingMode",
    "ToneMode",
    "ProtocolFamily",
    "Parity",
    "StopBits",
    "FlowControl",
    "RadioModel",
    "available_models",
    "get_model",
    "register_model",
    "CATError",
    "TransportError",
    "DeviceDisconnectedError",
    "TransportTimeoutError",
    "ProtocolError",
    "ValidationError",
    "OutOfRangeError",
    "NotOpenError",
    "UnsupportedOperationError",
    "UnknownRadioError",
]
