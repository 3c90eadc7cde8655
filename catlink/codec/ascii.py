"""
ASCII mnemonic-suffix codec.

Set: ``FA00014074000;`` (mnemonic, zero-padded field, terminator)
Get: ``FA;`` - the radio answers in the set form.
"""

import logging
from typing import Any, Optional

from ..radios.base import EncodingSpec, RadioModel, ValueKind
from ..types import Command, ProtocolFamily, Response
from .base import CommandCodec

logger = logging.getLogger(__name__)

TERMINATOR = ";"
ERROR_REPLY = "?"


def split_frames(raw: bytes) -> list[str]:
    """
    Split a reply buffer into terminated frames.

    An unterminated tail (truncated reply) is dropped.

    Example:
        split_frames(b"FA00014074000;FB0;MD") -> ["FA00014074000", "FB0"]
    """
    text = raw.decode("ascii", errors="ignore")
    return [frame.strip() for frame in text.split(TERMINATOR)[:-1]]


class AsciiCodec(CommandCodec):
    """Codec for Yaesu-style ASCII CAT radios."""

    family = ProtocolFamily.ASCII

    def _payload(self, model: RadioModel, spec: EncodingSpec, argument: Optional[Any]) -> bytes:
        text = spec.template
        if spec.kind is ValueKind.FREQUENCY and argument is not None:
            text += f"{argument:0{model.padding_width}d}"
        elif argument is not None:
            text += argument
        return (text + TERMINATOR).encode("ascii")

    def _expected_response(self, model: RadioModel, spec: EncodingSpec) -> Optional[bytes]:
        return spec.template.encode("ascii") if spec.query else None

    def _requires_reply(self, spec: EncodingSpec) -> bool:
        # Set commands are not acknowledged
        return spec.query

    def decode(self, model: RadioModel, command: Command, raw: bytes) -> Any:
        if command.operation is None or not raw:
            return None

        spec = model.lookup(command.operation)
        if not spec.query:
            return None

        prefix = spec.template
        for frame in split_frames(raw):
            if not frame.startswith(prefix):
                continue

            field = frame[len(prefix):]
            if spec.kind is ValueKind.FREQUENCY:
                if field and field.isascii() and field.isdigit():
                    return int(field)
            elif spec.kind is ValueKind.CHOICE:
                value = spec.value_for(field)
                if value is not None:
                    return value

        logger.debug(f"No {prefix} frame in reply {raw!r}")
        return None

    def accepted(self, model: RadioModel, response: Response) -> bool:
        if not response.success:
            return False

        if ERROR_REPLY in split_frames(response.raw):
            logger.warning(f"{model.name} rejected command {response.command.payload!r}")
            return False

        return True
