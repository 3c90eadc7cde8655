"""
Icom radios (CI-V binary addressed-frame family).

Frames are ``FE FE <dst> <src> <cmd> <subcmd> <data...> FD``. Opcodes and
arguments below are hex strings; frequencies are little-endian BCD.
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

# Mode byte used by commands 0x04 and 0x06
MODES = {
    OperatingMode.LSB: "00",
    OperatingMode.USB: "01",
    OperatingMode.AM: "02",
    OperatingMode.CW: "03",
    OperatingMode.DIG: "04",    # RTTY
    OperatingMode.FM: "05",
    OperatingMode.CWR: "07",
    OperatingMode.PKT: "08",    # RTTY-R
}

# Command 0x16: sub-command + on/off byte. Repeater tone (42), TSQL (43) and
# DTCS (4B) are separate switches, so each mode clears the other two.
TONE_MODES = {
    ToneMode.OFF: "4200|4300|4B00",
    ToneMode.ENCODER: "4300|4B00|4201",
    ToneMode.CTCSS: "4200|4B00|4301",
    ToneMode.DCS: "4200|4300|4B01",
}


def civ_table():
    """Command table shared by Icom CI-V radios."""
    return build_table([
        (Operation.POWER_ON, action("18", "01")),
        (Operation.POWER_OFF, action("18", "00")),
        (Operation.PTT_ON, action("1C00", "01")),
        (Operation.PTT_OFF, action("1C00", "00")),
        (Operation.LOCK_ON, action("1650", "01")),
        (Operation.LOCK_OFF, action("1650", "00")),
        (Operation.CLARIFIER_ON, action("2101", "01")),
        (Operation.CLARIFIER_OFF, action("2101", "00")),
        (Operation.SPLIT_ON, action("0F", "01")),
        (Operation.SPLIT_OFF, action("0F", "00")),
        (Operation.SET_TONE_MODE, choice_set("16", TONE_MODES)),
        (Operation.TOGGLE_VFO, action("07B0")),
        (Operation.SET_MODE, choice_set("06", MODES)),
        (Operation.GET_MODE, choice_get("04", MODES)),
        (Operation.GET_FREQUENCY_A, frequency_get("2500")),
        (Operation.SET_FREQUENCY_A, frequency_set("2500")),
        (Operation.GET_FREQUENCY_B, frequency_get("2501")),
        (Operation.SET_FREQUENCY_B, frequency_set("2501")),
        # 88.5 Hz -> 00 08 85
        (Operation.SET_CTCSS_TONE, choice_set(
            "1B00", {tone: f"{round(tone * 10):06d}" for tone in CTCSS_TONES})),
        # polarity byte, then code 023 -> 00 00 23
        (Operation.SET_DCS_CODE, choice_set(
            "1B02", {code: f"00{code:04d}" for code in DCS_CODES})),
    ])


IC7300 = register_model(RadioModel(
    manufacturer="Icom",
    model="IC-7300",
    family=ProtocolFamily.CIV_BINARY,
    commands=civ_table(),
    padding_width=10,
    address=0x94,
))

IC905 = register_model(RadioModel(
    manufacturer="Icom",
    model="IC-905",
    family=ProtocolFamily.CIV_BINARY,
    commands=civ_table(),
    padding_width=12,
    address=0xAC,
))
