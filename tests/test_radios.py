"""
Tests for radio capability tables and the model registry.
"""

import pytest

from catlink.exceptions import UnknownRadioError, UnsupportedOperationError, ValidationError
from catlink.radios import (
    CTCSS_TONES,
    DCS_CODES,
    FT991A,
    IC7300,
    REQUIRED_OPERATIONS,
    RadioModel,
    action,
    available_models,
    build_table,
    frequency_get,
    get_model,
    register_model,
)
from catlink.radios.base import _MODELS
from catlink.types import OperatingMode, Operation, ProtocolFamily, ToneMode

BUILTIN = [get_model(name) for name in available_models()]


@pytest.fixture
def registry_snapshot():
    """Restore the registry after a test registers models."""
    saved = dict(_MODELS)
    yield
    _MODELS.clear()
    _MODELS.update(saved)


def test_builtin_models_registered():
    """Test built-in models are available by full name."""
    assert "Yaesu FT-991A" in available_models()
    assert "Icom IC-7300" in available_models()
    assert "Icom IC-905" in available_models()


@pytest.mark.parametrize("model", BUILTIN, ids=lambda m: m.name)
def test_table_covers_required_operations(model):
    """Test every built-in table defines the required operations."""
    assert REQUIRED_OPERATIONS <= model.operations


@pytest.mark.parametrize("model", BUILTIN, ids=lambda m: m.name)
def test_table_templates_non_empty(model):
    """Test every template is non-empty."""
    for operation, spec in model.commands.items():
        assert spec.template, operation


@pytest.mark.parametrize("model", BUILTIN, ids=lambda m: m.name)
def test_table_keys_unique(model):
    """Test rebuilding the table from its entries raises no duplicate error."""
    entries = list(model.commands.items())
    table = build_table(entries)

    assert len(table) == len(entries) == len(set(model.commands))


@pytest.mark.parametrize("model", BUILTIN, ids=lambda m: m.name)
def test_table_covers_all_modes_and_tone_modes(model):
    """Test mode and tone mode tables include every value."""
    assert set(model.lookup(Operation.SET_MODE).choices) == set(OperatingMode)
    assert set(model.lookup(Operation.SET_TONE_MODE).choices) == set(ToneMode)


@pytest.mark.parametrize("model", BUILTIN, ids=lambda m: m.name)
def test_table_covers_tone_tables(model):
    """Test CTCSS and DCS tables cover the standard values."""
    assert set(model.lookup(Operation.SET_CTCSS_TONE).choices) == set(CTCSS_TONES)
    assert set(model.lookup(Operation.SET_DCS_CODE).choices) == set(DCS_CODES)


def test_standard_tone_tables():
    """Test the standard tone and code counts."""
    assert len(CTCSS_TONES) == 39
    assert len(DCS_CODES) == 104


def test_build_table_rejects_duplicates():
    """Test duplicate operations are rejected."""
    with pytest.raises(ValidationError):
        build_table([
            (Operation.PTT_ON, action("TX", "1")),
            (Operation.PTT_ON, action("TX", "2")),
        ])


def test_get_model_by_short_name():
    """Test lookup by bare model name, case-insensitive."""
    assert get_model("ft-991a") is FT991A
    assert get_model("ICOM IC-7300") is IC7300


def test_get_model_passes_through_instances():
    """Test a RadioModel is returned unchanged."""
    assert get_model(IC7300) is IC7300


def test_get_model_unknown():
    """Test unknown names raise UnknownRadioError."""
    with pytest.raises(UnknownRadioError) as exc_info:
        get_model("TS-2000")

    assert "TS-2000" in str(exc_info.value)


def test_lookup_unsupported_operation():
    """Test a partial table reports missing operations explicitly."""
    partial = RadioModel(
        manufacturer="Test",
        model="Partial",
        family=ProtocolFamily.ASCII,
        commands=build_table([(Operation.GET_FREQUENCY_A, frequency_get("FA"))]),
    )

    assert partial.supports(Operation.GET_FREQUENCY_A)
    assert not partial.supports(Operation.PTT_ON)
    with pytest.raises(UnsupportedOperationError):
        partial.lookup(Operation.PTT_ON)


def test_ascii_model_rejects_long_mnemonic():
    """Test ASCII opcodes must be 2-letter mnemonics."""
    with pytest.raises(ValidationError):
        RadioModel(
            manufacturer="Test",
            model="Bad",
            family=ProtocolFamily.ASCII,
            commands={Operation.PTT_ON: action("TXX", "1")},
        )


def test_ascii_model_rejects_empty_template():
    """Test empty templates are rejected."""
    with pytest.raises(ValidationError):
        RadioModel(
            manufacturer="Test",
            model="Empty",
            family=ProtocolFamily.ASCII,
            commands={Operation.PTT_ON: action("")},
        )


def test_civ_model_requires_address():
    """Test CI-V models need a radio address."""
    with pytest.raises(ValidationError):
        RadioModel(
            manufacturer="Test",
            model="NoAddress",
            family=ProtocolFamily.CIV_BINARY,
            commands={Operation.PTT_ON: action("1C00", "01")},
            padding_width=10,
        )


def test_civ_model_rejects_non_hex_opcode():
    """Test CI-V opcodes must be hex."""
    with pytest.raises(ValidationError):
        RadioModel(
            manufacturer="Test",
            model="NotHex",
            family=ProtocolFamily.CIV_BINARY,
            commands={Operation.PTT_ON: action("TX", "01")},
            padding_width=10,
            address=0x94,
        )


def test_model_commands_are_read_only():
    """Test tables cannot be modified after construction."""
    with pytest.raises(TypeError):
        FT991A.commands[Operation.PTT_ON] = action("TX", "2")


def test_register_model(registry_snapshot):
    """Test registering a new table makes it available."""
    model = RadioModel(
        manufacturer="Icom",
        model="IC-705",
        family=ProtocolFamily.CIV_BINARY,
        commands=IC7300.commands,
        padding_width=10,
        address=0xA4,
    )

    register_model(model)

    assert get_model("IC-705") is model
    with pytest.raises(ValidationError):
        register_model(model)
    assert register_model(model, replace=True) is model
