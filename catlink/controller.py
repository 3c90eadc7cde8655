"""
Main RadioController class.

User-facing API for controlling a transceiver over CAT.
"""

import logging
from typing import Any, Callable, Optional, Union

from .core import CommandDispatcher, Session, SerialTransport, TransportFactory, list_ports
from .exceptions import ValidationError
from .radios import RadioModel
from .types import (
    OperatingMode,
    Operation,
    Response,
    SerialConfig,
    SessionStatus,
    ToneMode,
)

logger = logging.getLogger(__name__)


class RadioController:
    """
    Main interface for transceiver control.

    Example usage with context manager:

    .. code-block:: python

        with RadioController("IC-7300", port="/dev/ttyUSB0", baudrate=19200) as radio:
            radio.set_frequency_a(14_074_000)
            print(radio.get_frequency_a())
            radio.set_mode(OperatingMode.USB)

    Example usage with manual lifecycle management:

    .. code-block:: python

        radio = RadioController("FT-991A")
        radio.open(SerialConfig(port="COM3", baudrate=38400))
        # ... use radio ...
        radio.close()
    """

    def __init__(
        self,
        radio: Union[str, RadioModel] = "Yaesu FT-991A",
        port: Optional[str] = None,
        config: Optional[SerialConfig] = None,
        transport_factory: Optional[TransportFactory] = None,
        on_disconnect: Optional[Callable[[Exception], None]] = None,
        **serial_options: Any
    ) -> None:
        """
        Initialize RadioController. The port is not opened until open().

        Args:
            radio: Radio model or registered name (e.g. "IC-7300")
            port: Serial port path (e.g. "/dev/ttyUSB0", "COM3")
            config: Full serial configuration; ``port`` and options override it
            transport_factory: Callable creating a Transport (for testing)
            on_disconnect: Optional callback for disconnection events.
                          Signature: callback(exception: Exception) -> None
            **serial_options: SerialConfig fields (baudrate, parity, read_timeout...)

        Raises:
            UnknownRadioError: If the radio name is not registered

        Example:

        .. code-block:: python

            # Using custom transport (for testing)
            from catlink.core import MockTransport
            mock = MockTransport()
            radio = RadioController("FT-991A", port="COM3", transport_factory=mock.connect)
        """
        self._session = Session(
            transport_factory=transport_factory or SerialTransport,
            on_disconnect=on_disconnect
        )
        self._dispatcher = CommandDispatcher(self._session, radio)
        self._pending_config = config
        self._pending_port = port
        self._pending_options = serial_options

        logger.info(f"Initialized RadioController for {self._dispatcher.radio.name}")

    # Lifecycle

    def open(self, config: Union[SerialConfig, str, None] = None, **serial_options: Any) -> bool:
        """
        Open the serial port.

        Args:
            config: SerialConfig, or a port name. Defaults to the settings
                    given to the constructor.
            **serial_options: SerialConfig fields overriding ``config``

        Returns:
            True once the port is open

        Raises:
            ValidationError: If the settings are invalid
            TransportError: If the port cannot be opened
        """
        resolved = self._resolve_config(config, serial_options)
        self._session.open(resolved)
        logger.info(f"Radio {self.radio.name} ready on {resolved.port}")
        return True

    def _resolve_config(self, config: Union[SerialConfig, str, None], options: dict) -> SerialConfig:
        if isinstance(config, SerialConfig):
            return config.with_overrides(**options)

        port = config or options.pop("port", None) or self._pending_port
        merged = {**self._pending_options, **options}

        if self._pending_config is not None:
            return self._pending_config.with_overrides(port=port, **merged)

        if not port:
            raise ValidationError("No serial port given")
        return SerialConfig(port=port, **merged)

    def close(self) -> None:
        """Close the serial port. Waits for an in-flight command."""
        self._session.close()
        logger.info("Radio connection closed")

    def status(self) -> SessionStatus:
        """
        Get connection status.

        Returns:
            SessionStatus with is_open, port_name, radio and last_activity
        """
        status = self._session.status()
        status.radio = self.radio.name
        return status

    @property
    def is_open(self) -> bool:
        """Check if the port is open."""
        return self._session.is_open

    @property
    def radio(self) -> RadioModel:
        """Active radio model."""
        return self._dispatcher.radio

    def use_radio(self, radio: Union[str, RadioModel]) -> RadioModel:
        """
        Switch to another radio model's command table.

        Raises:
            UnknownRadioError: If the name is not registered
        """
        self._dispatcher.radio = radio
        return self._dispatcher.radio

    @staticmethod
    def list_ports() -> list[str]:
        """List serial ports present on this machine."""
        return list_ports()

    # Raw access

    def send_raw(self, command: Union[str, bytes], timeout: Optional[float] = None) -> Response:
        """
        Send a raw CAT command.

        For commands not covered by the operation methods.

        Args:
            command: Command text (e.g. "FA;") or bytes (CI-V frame)
            timeout: Seconds to wait for a reply (defaults to the read timeout)

        Returns:
            Response; ``success`` is False if the radio stayed silent

        Raises:
            NotOpenError: If the port is not open

        Example:

        .. code-block:: python

            response = radio.send_raw("ID;")
            print(response.text)
        """
        return self._dispatcher.send_raw(command, timeout=timeout)

    def run(self, operation: Operation, value: Any = None) -> Response:
        """Execute any table operation and return the full Response."""
        return self._dispatcher.run(operation, value)

    def _set(self, operation: Operation, value: Any = None) -> bool:
        response = self._dispatcher.run(operation, value)
        accepted = self._dispatcher.accepted(response)
        if not accepted:
            logger.warning(f"{operation.name} not accepted: {response.error or response.raw!r}")
        return accepted

    def _switch(self, on: bool, on_op: Operation, off_op: Operation) -> bool:
        return self._set(on_op if on else off_op)

    # Frequency

    def get_frequency_a(self) -> Optional[int]:
        """
        Read VFO A frequency.

        Returns:
            Frequency in Hz, or None if the radio did not answer or the
            reply did not parse
        """
        return self._dispatcher.run(Operation.GET_FREQUENCY_A).value

    def get_frequency_b(self) -> Optional[int]:
        """Read VFO B frequency in Hz, or None."""
        return self._dispatcher.run(Operation.GET_FREQUENCY_B).value

    def set_frequency_a(self, hz: int) -> bool:
        """
        Tune VFO A.

        The radio's tuned frequency is not read back.

        Args:
            hz: Frequency in whole Hz, 0 to 999,999,999,999

        Returns:
            True if the command was written and accepted

        Raises:
            OutOfRangeError: If hz is out of range (nothing is written)
        """
        return self._set(Operation.SET_FREQUENCY_A, hz)

    def set_frequency_b(self, hz: int) -> bool:
        """Tune VFO B. See set_frequency_a()."""
        return self._set(Operation.SET_FREQUENCY_B, hz)

    # Mode and tones

    def get_mode(self) -> Optional[OperatingMode]:
        """Read the operating mode, or None."""
        return self._dispatcher.run(Operation.GET_MODE).value

    def set_mode(self, mode: Union[OperatingMode, str]) -> bool:
        """
        Set the operating mode.

        Args:
            mode: OperatingMode or its name ("USB", "cw"...)
        """
        return self._set(Operation.SET_MODE, mode)

    def set_tone_mode(self, mode: Union[ToneMode, str]) -> bool:
        """Set the tone mode (OFF, CTCSS, DCS, ENCODER)."""
        return self._set(Operation.SET_TONE_MODE, mode)

    def set_ctcss_tone(self, hz: float) -> bool:
        """Select a CTCSS tone from the standard table (e.g. 88.5)."""
        return self._set(Operation.SET_CTCSS_TONE, hz)

    def set_dcs_code(self, code: int) -> bool:
        """Select a DCS code from the standard table (e.g. 23 for 023)."""
        return self._set(Operation.SET_DCS_CODE, code)

    # Switches

    def set_power(self, on: bool) -> bool:
        """Turn the radio on or off."""
        return self._switch(on, Operation.POWER_ON, Operation.POWER_OFF)

    def set_ptt(self, on: bool) -> bool:
        """Key or unkey the transmitter."""
        return self._switch(on, Operation.PTT_ON, Operation.PTT_OFF)

    def set_lock(self, on: bool) -> bool:
        """Lock or unlock the dial."""
        return self._switch(on, Operation.LOCK_ON, Operation.LOCK_OFF)

    def set_clarifier(self, on: bool) -> bool:
        """Enable or disable the clarifier (RIT)."""
        return self._switch(on, Operation.CLARIFIER_ON, Operation.CLARIFIER_OFF)

    def set_split(self, on: bool) -> bool:
        """Enable or disable split operation."""
        return self._switch(on, Operation.SPLIT_ON, Operation.SPLIT_OFF)

    def toggle_vfo(self) -> bool:
        """Swap VFO A and VFO B."""
        return self._set(Operation.TOGGLE_VFO)

    def __enter__(self):
        """
        Context manager entry.

        Opens the port with the constructor settings if not already open.
        """
        if not self.is_open:
            self.open()
        return self

    def __exit__(self, *exc):
        """
        Context manager exit.

        Automatically closes the connection.
        """
        self.close()

    def __repr__(self) -> str:
        """String representation of controller."""
        status = f"open on {self._session.port_name}" if self.is_open else "closed"
        return f"<RadioController radio={self.radio.name} status={status}>"
