"""
Radio capability model.

A RadioModel is a static table mapping abstract operations to encoding
specs. Radios are added by registering a new table, not by subclassing.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Union

from ..exceptions import UnknownRadioError, UnsupportedOperationError, ValidationError
from ..types import Operation, ProtocolFamily, coerce_enum

logger = logging.getLogger(__name__)

# Standard CTCSS tones in Hz
CTCSS_TONES = (
    67.0, 69.3, 71.9, 74.4, 77.0, 79.7, 82.5, 85.4, 88.5,
    91.5, 94.8, 97.4, 100.0, 103.5, 107.2, 110.9, 114.8, 118.8, 123.0, 127.3, 131.8,
    136.5, 141.3, 146.2, 151.4, 156.7, 162.2, 167.9, 173.8, 179.9, 186.2, 192.8,
    203.5, 210.7, 218.1, 225.7, 233.6, 241.8, 250.3,
)

# Standard DCS codes (written as three octal digits, e.g. 23 -> "023")
DCS_CODES = (
    23, 25, 26, 31, 32, 36, 43, 47, 51, 53, 54, 65,
    71, 72, 73, 74, 114, 115, 116, 122, 125, 131, 132, 134, 143, 145, 152, 155,
    156, 162, 165, 172, 174, 205, 212, 223, 225, 226, 243, 244, 245, 246, 251, 252, 255,
    261, 263, 265, 266, 271, 274, 306, 311, 315, 325, 331, 332, 343, 346, 351, 356, 364,
    365, 371, 411, 412, 413, 423, 431, 432, 445, 446, 452, 454, 455, 462, 464, 465, 466,
    503, 506, 516, 523, 526, 532, 546, 565, 606, 612, 624, 627, 631, 632, 654, 662, 664,
    703, 712, 723, 731, 732, 734, 743, 754,
)

# Separates CI-V arguments that are sent as consecutive frames
FRAME_SEPARATOR = "|"

# Operations every built-in table provides
REQUIRED_OPERATIONS = frozenset({
    Operation.POWER_ON, Operation.POWER_OFF,
    Operation.PTT_ON, Operation.PTT_OFF,
    Operation.LOCK_ON, Operation.LOCK_OFF,
    Operation.CLARIFIER_ON, Operation.CLARIFIER_OFF,
    Operation.SPLIT_ON, Operation.SPLIT_OFF,
    Operation.SET_TONE_MODE,
    Operation.TOGGLE_VFO,
    Operation.SET_MODE,
    Operation.GET_FREQUENCY_A, Operation.SET_FREQUENCY_A,
    Operation.GET_FREQUENCY_B, Operation.SET_FREQUENCY_B,
})


class ValueKind(Enum):
    """What kind of value an operation sends or reads back."""
    NONE = "none"
    FREQUENCY = "frequency"
    CHOICE = "choice"


@dataclass(frozen=True)
class EncodingSpec:
    """
    How one operation is written on the wire.

    Attributes:
        opcode: ASCII mnemonic ("FA") or CI-V command/sub-command hex ("2500")
        argument: Fixed text (ASCII) or hex (CI-V) following the opcode
        kind: Value carried by the set form or read from the reply
        choices: Parameter value -> wire argument, for CHOICE operations.
                 CI-V arguments joined by FRAME_SEPARATOR become one frame each
        query: True if the operation reads a value back
    """
    opcode: str
    argument: str = ""
    kind: ValueKind = ValueKind.NONE
    choices: Optional[Mapping[Any, str]] = field(default=None, hash=False, compare=False)
    query: bool = False

    @property
    def template(self) -> str:
        """Opcode and fixed argument; the part every frame for this op starts with."""
        return self.opcode + self.argument

    def choice_for(self, value: Any) -> str:
        """
        Get the wire argument for a parameter value.

        Raises:
            ValidationError: If the value is not in the choice table
        """
        if not self.choices:
            raise ValidationError(f"Operation {self.template} takes no choice parameter")

        if value in self.choices:
            return self.choices[value]

        sample = next(iter(self.choices))
        if isinstance(sample, Enum) and isinstance(value, str):
            member = coerce_enum(type(sample), value)
            if member in self.choices:
                return self.choices[member]

        raise ValidationError(f"Value {value!r} is not supported by {self.template}")

    def value_for(self, wire: str) -> Any:
        """Reverse lookup of a wire argument; None if unknown."""
        for value, encoded in (self.choices or {}).items():
            if encoded.upper() == wire.upper():
                return value
        return None


def action(opcode: str, argument: str = "") -> EncodingSpec:
    """Spec for a parameterless set/toggle command."""
    return EncodingSpec(opcode=opcode, argument=argument)


def frequency_set(opcode: str, argument: str = "") -> EncodingSpec:
    """Spec for a command that writes a frequency."""
    return EncodingSpec(opcode=opcode, argument=argument, kind=ValueKind.FREQUENCY)


def frequency_get(opcode: str, argument: str = "") -> EncodingSpec:
    """Spec for a command that reads a frequency."""
    return EncodingSpec(opcode=opcode, argument=argument, kind=ValueKind.FREQUENCY, query=True)


def choice_set(opcode: str, choices: Mapping[Any, str], argument: str = "") -> EncodingSpec:
    """Spec for a command that selects one value from a table."""
    return EncodingSpec(opcode=opcode, argument=argument, kind=ValueKind.CHOICE,
                        choices=MappingProxyType(dict(choices)))


def choice_get(opcode: str, choices: Mapping[Any, str], argument: str = "") -> EncodingSpec:
    """Spec for a command that reads back one value from a table."""
    return EncodingSpec(opcode=opcode, argument=argument, kind=ValueKind.CHOICE,
                        choices=MappingProxyType(dict(choices)), query=True)


def build_table(
    entries: Iterable[tuple[Operation, EncodingSpec]]
) -> Mapping[Operation, EncodingSpec]:
    """
    Build an operation table, rejecting duplicate operations.

    Args:
        entries: (operation, spec) pairs

    Returns:
        Read-only mapping

    Raises:
        ValidationError: If an operation appears twice
    """
    table: dict[Operation, EncodingSpec] = {}
    for operation, spec in entries:
        if operation in table:
            raise ValidationError(f"Duplicate table entry for {operation.name}")
        table[operation] = spec
    return MappingProxyType(table)


def _is_hex(text: str) -> bool:
    try:
        for part in text.split(FRAME_SEPARATOR):
            bytes.fromhex(part)
    except ValueError:
        return False
    return True


@dataclass(frozen=True)
class RadioModel:
    """
    Identity, protocol family and command table of one radio model.

    Attributes:
        manufacturer: e.g. "Yaesu"
        model: e.g. "FT-991A"
        family: Wire protocol family
        commands: Operation -> EncodingSpec table
        padding_width: ASCII: minimum digits of a frequency field;
                       CI-V: BCD digits of a frequency field
        address: Radio CI-V address (binary family only)
        controller_address: Controller CI-V address (binary family only)
    """
    manufacturer: str
    model: str
    family: ProtocolFamily
    commands: Mapping[Operation, EncodingSpec] = field(hash=False, compare=False)
    padding_width: int = 11
    address: Optional[int] = None
    controller_address: int = 0xE0

    def __post_init__(self) -> None:
        object.__setattr__(self, "commands", MappingProxyType(dict(self.commands)))

        if self.padding_width <= 0:
            raise ValidationError(f"{self.name}: padding width must be positive")

        for operation, spec in self.commands.items():
            if not spec.template:
                raise ValidationError(f"{self.name}: empty template for {operation.name}")

            if self.family is ProtocolFamily.ASCII:
                if len(spec.opcode) != 2 or not spec.opcode.isalpha():
                    raise ValidationError(
                        f"{self.name}: ASCII opcode for {operation.name} must be a 2-letter mnemonic"
                    )
            else:
                encoded = [spec.opcode, spec.argument, *(spec.choices or {}).values()]
                if not all(_is_hex(part) for part in encoded):
                    raise ValidationError(
                        f"{self.name}: CI-V encoding for {operation.name} is not valid hex"
                    )

        if self.family is ProtocolFamily.CIV_BINARY:
            if self.address is None or not 0 <= self.address <= 0xFF:
                raise ValidationError(f"{self.name}: CI-V radios need an address in 0x00-0xFF")
            if self.padding_width % 2:
                raise ValidationError(f"{self.name}: CI-V frequency width must be whole BCD bytes")

    @property
    def name(self) -> str:
        """Full model name, e.g. "Icom IC-7300"."""
        return f"{self.manufacturer} {self.model}"

    @property
    def operations(self) -> frozenset[Operation]:
        """Operations this model can encode."""
        return frozenset(self.commands)

    def supports(self, operation: Operation) -> bool:
        """Check whether the table has an entry for an operation."""
        return operation in self.commands

    def lookup(self, operation: Operation) -> EncodingSpec:
        """
        Get the encoding spec for an operation.

        Raises:
            UnsupportedOperationError: If the model has no entry for it
        """
        try:
            return self.commands[operation]
        except KeyError:
            raise UnsupportedOperationError(
                f"{self.name} does not support {operation.name}"
            ) from None

    def __repr__(self) -> str:
        return f"<RadioModel {self.name} family={self.family.value}>"


_MODELS: dict[str, RadioModel] = {}


def register_model(model: RadioModel, replace: bool = False) -> RadioModel:
    """
    Add a radio model to the registry.

    Args:
        model: Model to register
        replace: Allow overwriting an existing model with the same name

    Returns:
        The registered model

    Raises:
        ValidationError: If the name is taken and replace is False

    Example:

    .. code-block:: python

        register_model(RadioModel(
            manufacturer="Icom", model="IC-705",
            family=ProtocolFamily.CIV_BINARY, address=0xA4,
            padding_width=10, commands=civ_table(),  # from catlink.radios.icom
        ))
    """
    key = model.name.lower()
    if key in _MODELS and not replace:
        raise ValidationError(f"Radio model {model.name} is already registered")

    _MODELS[key] = model
    logger.debug(f"Registered radio model {model.name}")
    return model


def get_model(name: Union[str, RadioModel]) -> RadioModel:
    """
    Look up a registered radio model.

    Args:
        name: "<manufacturer> <model>" or bare model name, case-insensitive.
              A RadioModel is returned unchanged.

    Raises:
        UnknownRadioError: If no model matches
    """
    if isinstance(name, RadioModel):
        return name

    key = name.strip().lower()
    if key in _MODELS:
        return _MODELS[key]

    for model in _MODELS.values():
        if model.model.lower() == key:
            return model

    raise UnknownRadioError(
        f"Unknown radio model '{name}' (available: {', '.join(available_models())})"
    )


def available_models() -> list[str]:
    """Names of all registered models, sorted."""
    return sorted(model.name for model in _MODELS.values())
