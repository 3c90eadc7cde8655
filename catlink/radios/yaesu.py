"""
Yaesu radios (ASCII mnemonic-suffix family).

Set commands are a 2-letter mnemonic, an argument and ';'. Get commands
are the mnemonic alone and the radio answers in the set form.
"""

from ..types import Operation, OperatingMode, ProtocolFamily, ToneMode
from .base import (
    CTCSS_TONES,
    DCS_CODES,
    RadioModel,
    action,
    build_table,
    choice_get,
    choice_set,
    frequency_get,
    frequency_set,
    register_model,
)

# MD0<n>; mode codes
MODES = {
    OperatingMode.LSB: "1",
    OperatingMode.USB: "2",
    OperatingMode.CW: "3",
    OperatingMode.FM: "4",
    OperatingMode.AM: "5",
    OperatingMode.CWR: "7",
    OperatingMode.PKT: "A",
    OperatingMode.DIG: "C",
}

# CT0<n>; tone modes
TONE_MODES = {
    ToneMode.OFF: "0",
    ToneMode.CTCSS: "1",
    ToneMode.ENCODER: "2",
    ToneMode.DCS: "3",
}


def ascii_table():
    """Command table shared by Yaesu ASCII CAT radios."""
    return build_table([
        (Operation.POWER_ON, action("PS", "1")),
        (Operation.POWER_OFF, action("PS", "0")),
        (Operation.PTT_ON, action("TX", "1")),
        (Operation.PTT_OFF, action("TX", "0")),
        (Operation.LOCK_ON, action("LK", "1")),
        (Operation.LOCK_OFF, action("LK", "0")),
        (Operation.CLARIFIER_ON, action("RT", "1")),
        (Operation.CLARIFIER_OFF, action("RT", "0")),
        (Operation.SPLIT_ON, action("ST", "1")),
        (Operation.SPLIT_OFF, action("ST", "0")),
        (Operation.SET_TONE_MODE, choice_set("CT", TONE_MODES, argument="0")),
        (Operation.TOGGLE_VFO, action("SV")),
        (Operation.SET_MODE, choice_set("MD", MODES, argument="0")),
        (Operation.GET_MODE, choice_get("MD", MODES, argument="0")),
        (Operation.GET_FREQUENCY_A, frequency_get("FA")),
        (Operation.SET_FREQUENCY_A, frequency_set("FA")),
        (Operation.GET_FREQUENCY_B, frequency_get("FB")),
        (Operation.SET_FREQUENCY_B, frequency_set("FB")),
        # CN00nnn; / CN01nnn; select tone / code by table index
        (Operation.SET_CTCSS_TONE, choice_set(
            "CN", {tone: f"{i:03d}" for i, tone in enumerate(CTCSS_TONES)}, argument="00")),
        (Operation.SET_DCS_CODE, choice_set(
            "CN", {code: f"{i:03d}" for i, code in enumerate(DCS_CODES)}, argument="01")),
    ])


FT991A = register_model(RadioModel(
    manufacturer="Yaesu",
    model="FT-991A",
    family=ProtocolFamily.ASCII,
    commands=ascii_table(),
    padding_width=11,
))
