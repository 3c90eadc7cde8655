"""
Base codec classes and shared validation.

Codecs translate between abstract operation values and wire bytes for one
protocol family. They hold no state; the radio model is passed on every call.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..exceptions import OutOfRangeError, ProtocolError, ValidationError
from ..radios.base import EncodingSpec, RadioModel, ValueKind
from ..types import Command, Operation, ProtocolFamily, Response

logger = logging.getLogger(__name__)

MIN_FREQUENCY_HZ = 0
MAX_FREQUENCY_HZ = 999_999_999_999


def validate_frequency(hz: Any) -> int:
    """
    Check a frequency in whole Hz.

    Args:
        hz: Frequency value

    Returns:
        The frequency as int

    Raises:
        ValidationError: If the value is not an integer
        OutOfRangeError: If the value is outside [0, 999_999_999_999]
    """
    if isinstance(hz, bool) or not isinstance(hz, int):
        raise ValidationError(f"Frequency must be an integer number of Hz, got {hz!r}")

    if not MIN_FREQUENCY_HZ <= hz <= MAX_FREQUENCY_HZ:
        raise OutOfRangeError(
            f"Frequency {hz} Hz outside valid range "
            f"{MIN_FREQUENCY_HZ}-{MAX_FREQUENCY_HZ:,} Hz"
        )
    return hz


class CommandCodec(ABC):
    """
    Abstract base class for protocol codecs.

    Subclasses implement the wire format; this class resolves the table
    entry and validates parameters so nothing invalid reaches the transport.
    """

    family: ProtocolFamily

    def encode(
        self,
        model: RadioModel,
        operation: Operation,
        value: Any = None,
        timeout: float = 1.0
    ) -> Command:
        """
        Build a command for an operation.

        Args:
            model: Active radio model
            operation: Operation to encode
            value: Parameter (Hz for frequency sets, enum/table value for choices)
            timeout: Seconds to wait for a reply

        Returns:
            Immutable Command

        Raises:
            UnsupportedOperationError: If the model has no entry for the operation
            ValidationError: If the parameter is missing or invalid
            OutOfRangeError: If a frequency is out of range
        """
        if model.family is not self.family:
            raise ValidationError(
                f"{type(self).__name__} cannot encode for {model.name} ({model.family.value})"
            )

        spec = model.lookup(operation)
        argument = self._argument(model, spec, value)
        payload = self._payload(model, spec, argument)

        command = Command(
            operation=operation,
            payload=payload,
            parameter=value,
            expected_response=self._expected_response(model, spec),
            timeout=timeout,
            requires_reply=self._requires_reply(spec),
        )
        logger.debug(f"Encoded {operation.name} for {model.name}: {payload!r}")
        return command

    def _argument(self, model: RadioModel, spec: EncodingSpec, value: Any) -> Optional[Any]:
        """Validate the parameter and return what follows the template."""
        if spec.query or spec.kind is ValueKind.NONE:
            if value is not None:
                raise ValidationError(f"Operation {spec.template} takes no parameter")
            return None

        if value is None:
            raise ValidationError(f"Operation {spec.template} requires a parameter")

        if spec.kind is ValueKind.FREQUENCY:
            return validate_frequency(value)

        return spec.choice_for(value)

    @abstractmethod
    def _payload(self, model: RadioModel, spec: EncodingSpec, argument: Optional[Any]) -> bytes:
        """Render the full wire frame."""
        pass

    @abstractmethod
    def _expected_response(self, model: RadioModel, spec: EncodingSpec) -> Optional[bytes]:
        """Prefix a matching reply starts with, if a reply is expected."""
        pass

    @abstractmethod
    def _requires_reply(self, spec: EncodingSpec) -> bool:
        """Whether the radio answers this command."""
        pass

    @abstractmethod
    def decode(self, model: RadioModel, command: Command, raw: bytes) -> Any:
        """
        Decode the value carried by a reply.

        Args:
            model: Active radio model
            command: Command the reply answers
            raw: Bytes drained from the port (may be empty, partial or merged)

        Returns:
            Parsed value, or None if nothing in ``raw`` matches
        """
        pass

    @abstractmethod
    def accepted(self, model: RadioModel, response: Response) -> bool:
        """Whether a set command was written and its frame form accepted."""
        pass

    def decode_strict(self, model: RadioModel, command: Command, raw: bytes) -> Any:
        """
        Decode a reply, raising if nothing matches.

        Raises:
            ProtocolError: If ``raw`` holds no reply for ``command``
        """
        value = self.decode(model, command, raw)
        if value is None:
            raise ProtocolError(
                f"No {model.name} reply matched",
                command=command.payload,
                response=raw
            )
        return value
