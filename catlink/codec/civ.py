"""
CI-V binary addressed-frame codec.

Command: ``FE FE <radio> <controller> <cmd> <subcmd> <data...> FD``
Reply:   ``FE FE <controller> <radio> <cmd> <subcmd> <data...> FD``
Status:  ``FE FE <controller> <radio> FB FD`` (OK) or ``... FA FD`` (NG), one per frame

There is no checksum. On a shared bus the controller also sees its own
command echoed back; the address check skips it.
"""

import logging
from typing import Any, Optional

from ..exceptions import OutOfRangeError
from ..radios.base import FRAME_SEPARATOR, EncodingSpec, RadioModel, ValueKind
from ..types import Command, ProtocolFamily, Response
from .base import CommandCodec

logger = logging.getLogger(__name__)

PREAMBLE = b"\xfe\xfe"
TERMINATOR = 0xFD
OK = b"\xfb"
NG = b"\xfa"


def to_bcd(value: int, digits: int) -> bytes:
    """
    Encode an integer as little-endian packed BCD.

    Args:
        value: Non-negative integer
        digits: Number of decimal digits (even)

    Returns:
        digits // 2 bytes, least significant pair first

    Raises:
        OutOfRangeError: If value has more than ``digits`` digits

    Example:
        to_bcd(14074000, 10) -> b"\\x00\\x40\\x07\\x14\\x00"
    """
    text = f"{value:0{digits}d}"
    if len(text) > digits:
        raise OutOfRangeError(f"{value} does not fit in {digits} BCD digits")

    pairs = [text[i:i + 2] for i in range(0, digits, 2)]
    return bytes(int(pair, 16) for pair in reversed(pairs))


def from_bcd(data: bytes) -> Optional[int]:
    """Decode little-endian packed BCD; None if a nibble is not a decimal digit."""
    text = data[::-1].hex()
    if not text.isdigit():
        return None
    return int(text)


def split_frames(raw: bytes) -> list[bytes]:
    """
    Extract complete ``FE FE ... FD`` frames from a buffer.

    Bytes outside frames and a trailing partial frame are ignored. Extra
    leading FE bytes are collapsed to the two-byte preamble.
    """
    frames = []
    start = raw.find(PREAMBLE)
    while start != -1:
        while raw[start + 2:start + 3] == b"\xfe":
            start += 1
        end = raw.find(bytes([TERMINATOR]), start + 2)
        if end == -1:
            break
        frames.append(raw[start:end + 1])
        start = raw.find(PREAMBLE, end + 1)
    return frames


class CivCodec(CommandCodec):
    """Codec for Icom CI-V radios."""

    family = ProtocolFamily.CIV_BINARY

    def _payload(self, model: RadioModel, spec: EncodingSpec, argument: Optional[Any]) -> bytes:
        """One frame, or consecutive frames for a multi-part choice argument."""
        opcode = bytes.fromhex(spec.template)
        if spec.kind is ValueKind.FREQUENCY and argument is not None:
            bodies = [opcode + to_bcd(argument, model.padding_width)]
        elif argument is not None:
            bodies = [opcode + bytes.fromhex(part) for part in argument.split(FRAME_SEPARATOR)]
        else:
            bodies = [opcode]

        header = PREAMBLE + bytes([model.address, model.controller_address])
        return b"".join(header + body + bytes([TERMINATOR]) for body in bodies)

    def _expected_response(self, model: RadioModel, spec: EncodingSpec) -> Optional[bytes]:
        return PREAMBLE + bytes([model.controller_address, model.address])

    def _requires_reply(self, spec: EncodingSpec) -> bool:
        # Data replies for reads, FB/FA status for everything else
        return True

    def reply_bodies(self, model: RadioModel, raw: bytes) -> list[bytes]:
        """
        Bodies (between addresses and terminator) of frames sent to us.

        Frames with the wrong address pair, including our own echo, are skipped.
        """
        header = PREAMBLE + bytes([model.controller_address, model.address])
        return [frame[4:-1] for frame in split_frames(raw) if frame.startswith(header)]

    def decode(self, model: RadioModel, command: Command, raw: bytes) -> Any:
        if command.operation is None or not raw:
            return None

        spec = model.lookup(command.operation)
        bodies = self.reply_bodies(model, raw)

        if not spec.query:
            # Multi-frame sets are refused if any frame was
            statuses = [body for body in bodies if body in (OK, NG)]
            if NG in statuses:
                return False
            return True if statuses else None

        prefix = bytes.fromhex(spec.template)
        for body in bodies:
            if not body.startswith(prefix):
                continue

            data = body[len(prefix):]
            if spec.kind is ValueKind.FREQUENCY:
                width = model.padding_width // 2
                if len(data) >= width:
                    value = from_bcd(data[:width])
                    if value is not None:
                        return value
            elif spec.kind is ValueKind.CHOICE:
                for value, encoded in (spec.choices or {}).items():
                    if data.startswith(bytes.fromhex(encoded.split(FRAME_SEPARATOR)[0])):
                        return value

        logger.debug(f"No reply from {model.address:02X} matched in {raw.hex(' ')}")
        return None

    def accepted(self, model: RadioModel, response: Response) -> bool:
        if not response.success:
            return False

        status = self.decode(model, response.command, response.raw)
        if status is False:
            logger.warning(f"{model.name} answered NG to {response.command.payload.hex(' ')}")
        return status is True
