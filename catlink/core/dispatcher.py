"""
Command dispatcher.

Resolves an operation through the active radio's table, encodes it,
executes it on the session, and decodes the reply.
"""

import logging
from dataclasses import replace
from typing import Any, Optional, Union

from .session import Session
from ..codec import CommandCodec, codec_for
from ..radios import RadioModel, get_model
from ..types import Command, Operation, Response

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 1.0


class CommandDispatcher:
    """
    Operation-level execution on one session for one radio model.

    Validation happens before the session is touched, so an invalid
    parameter never produces I/O.
    """

    def __init__(self, session: Session, radio: Union[str, RadioModel]) -> None:
        """
        Initialize dispatcher.

        Args:
            session: Session used for execution
            radio: Radio model or registered model name

        Raises:
            UnknownRadioError: If the name is not registered
        """
        self.session = session
        self._radio = get_model(radio)
        self._codec = codec_for(self._radio.family)
        logger.debug(f"Initialized CommandDispatcher for {self._radio.name}")

    @property
    def radio(self) -> RadioModel:
        """Active radio model."""
        return self._radio

    @radio.setter
    def radio(self, radio: Union[str, RadioModel]) -> None:
        model = get_model(radio)
        self._codec = codec_for(model.family)
        self._radio = model
        logger.info(f"Active radio model: {model.name}")

    @property
    def codec(self) -> CommandCodec:
        """Codec for the active radio's protocol family."""
        return self._codec

    def _timeout(self) -> float:
        config = self.session.config
        return config.read_timeout if config else DEFAULT_TIMEOUT

    def build(self, operation: Operation, value: Any = None) -> Command:
        """
        Encode an operation without executing it.

        Raises:
            UnsupportedOperationError: If the radio lacks the operation
            ValidationError: If the parameter is invalid
        """
        return self._codec.encode(self._radio, operation, value, timeout=self._timeout())

    def run(self, operation: Operation, value: Any = None) -> Response:
        """
        Execute an operation and decode its reply.

        Args:
            operation: Operation to run
            value: Operation parameter, if any

        Returns:
            Response whose ``value`` holds the decoded result (or None)

        Raises:
            UnsupportedOperationError: If the radio lacks the operation
            ValidationError: If the parameter is invalid (no I/O performed)
            NotOpenError: If the session is closed
        """
        command = self.build(operation, value)
        logger.info(f"Running {operation.name} on {self._radio.name}")
        response = self.session.execute(command)

        decoded = self._codec.decode(self._radio, command, response.raw)
        if decoded is None:
            return response
        return replace(response, value=decoded)

    def accepted(self, response: Response) -> bool:
        """Whether a set command was written and accepted by the radio."""
        return self._codec.accepted(self._radio, response)

    def send_raw(self, data: Union[str, bytes], timeout: Optional[float] = None) -> Response:
        """
        Send bytes verbatim and collect whatever the radio answers.

        Args:
            data: Raw command (str is encoded as ASCII)
            timeout: Seconds to wait for a reply (defaults to the read timeout)

        Returns:
            Response with the raw reply; ``success`` is False if nothing came back

        Raises:
            ValidationError: If ``data`` is empty
            NotOpenError: If the session is closed
        """
        payload = data.encode("ascii") if isinstance(data, str) else bytes(data)
        command = Command(
            operation=None,
            payload=payload,
            timeout=self._timeout() if timeout is None else timeout,
        )
        logger.info(f"Sending raw command {payload!r}")
        return self.session.execute(command)
