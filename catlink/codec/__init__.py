"""
Command codecs.

Stateless translation between abstract operation values and wire bytes:
- AsciiCodec: Yaesu-style mnemonic commands
- CivCodec: Icom CI-V binary frames
"""

from ..exceptions import ValidationError
from ..types import ProtocolFamily
from .base import CommandCodec, validate_frequency, MIN_FREQUENCY_HZ, MAX_FREQUENCY_HZ
from .ascii import AsciiCodec
from .civ import CivCodec, to_bcd, from_bcd

_CODECS: dict[ProtocolFamily, CommandCodec] = {
    ProtocolFamily.ASCII: AsciiCodec(),
    ProtocolFamily.CIV_BINARY: CivCodec(),
}


def codec_for(family: ProtocolFamily) -> CommandCodec:
    """
    Get the codec for a protocol family.

    Raises:
        ValidationError: If no codec handles the family
    """
    try:
        return _CODECS[family]
    except KeyError:
        raise ValidationError(f"No codec for protocol family {family!r}") from None


__all__ = [
    "CommandCodec",
    "AsciiCodec",
    "CivCodec",
    "codec_for",
    "validate_frequency",
    "to_bcd",
    "from_bcd",
    "MIN_FREQUENCY_HZ",
    "MAX_FREQUENCY_HZ",
]
