"""
Core radio control infrastructure.

Provides low-level building blocks for radio communication:
- Transport: Serial communication abstraction
- Session: Gated, half-duplex command execution
- CommandDispatcher: Operation lookup, encoding, execution and decoding
"""

from .transport import Transport, SerialTransport, MockTransport, list_ports
from .session import Session, TransportFactory
from .dispatcher import CommandDispatcher

__all__ = [
    "Transport",
    "SerialTransport",
    "MockTransport",
    "list_ports",
    "Session",
    "TransportFactory",
    "CommandDispatcher",
]
