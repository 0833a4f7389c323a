import pytest

from nodorf.core import UserVariables
from nodorf.otgw import (
    BOILER_WATER_PRESSURE,
    BOILER_WATER_TEMPERATURE,
    DHW_MODE,
    FLAME_STATUS,
    RELATIVE_MODULATION,
    RETURN_WATER_TEMPERATURE,
    ROOM_TEMPERATURE,
    THERMOSTAT_SETPOINT,
    OpenThermGateway,
    hex_byte,
)

BASE = 10


@pytest.fixture
def gateway():
    return OpenThermGateway(UserVariables(), BASE)


def test_hex_byte_reads_upper_case_digits():
    assert hex_byte("TA1", 1) == 0xA1
    assert hex_byte("B40000000", 1) == 0x40
    assert hex_byte("T00181480", 3) == 0x18


def test_room_temperature_line(gateway):
    readings = gateway.feed(b"T00181480\n")
    assert [r[0] for r in readings] == [BASE + ROOM_TEMPERATURE]
    assert gateway.variables.get(BASE + ROOM_TEMPERATURE) == 20.5


def test_split_input_matches_whole_input():
    whole = OpenThermGateway(UserVariables(), BASE)
    split = OpenThermGateway(UserVariables(), BASE)
    whole.feed("T00181480\nB00190000\n")
    split.feed("T0018")
    split.feed("1480\nB001")
    split.feed("90000\n")
    assert split.variables.values == whole.variables.values


def test_change_flag_follows_raw_data(gateway):
    first = gateway.feed("T00181480\n")
    second = gateway.feed("T00181480\n")
    third = gateway.feed("T00181500\n")
    assert first[0][2] is True
    assert second[0][2] is False
    assert third[0][2] is True


def test_all_zero_message_is_not_a_change(gateway):
    readings = gateway.feed("B00000000\n")
    assert [r[0] for r in readings] == [BASE + FLAME_STATUS, BASE + DHW_MODE]
    assert all(changed is False for _, _, changed in readings)
    assert gateway.variables.get(BASE + FLAME_STATUS) == 0.0


def test_boiler_status_bits(gateway):
    gateway.feed("B0000000C\n")
    assert gateway.variables.get(BASE + FLAME_STATUS) == 1.0
    assert gateway.variables.get(BASE + DHW_MODE) == 1.0


@pytest.mark.parametrize(
    "line, offset",
    [
        ("B00190000", BOILER_WATER_TEMPERATURE),
        ("B00110000", RELATIVE_MODULATION),
        ("B00120000", BOILER_WATER_PRESSURE),
        ("B001C0000", RETURN_WATER_TEMPERATURE),
        ("T00100000", THERMOSTAT_SETPOINT),
    ],
)
def test_message_ids_map_to_variables(gateway, line, offset):
    readings = gateway.handle_line(line)
    assert [r[0] for r in readings] == [BASE + offset]


def test_boiler_id_from_thermostat_is_ignored(gateway):
    assert gateway.handle_line("T00190000") == []
    assert gateway.variables.values == {}


def test_unknown_source_is_ignored(gateway):
    assert gateway.feed("A00181480\n") == []
    assert gateway.variables.values == {}


def test_noise_characters_are_dropped():
    clean = OpenThermGateway(UserVariables(), BASE)
    noisy = OpenThermGateway(UserVariables(), BASE)
    clean.feed("T00181480\n")
    noisy.feed("T00-18 1480\r\n")
    assert noisy.variables.values == clean.variables.values


def test_long_line_is_truncated_to_buffer():
    short = OpenThermGateway(UserVariables(), BASE)
    long_ = OpenThermGateway(UserVariables(), BASE)
    short.feed("T00181480\n")
    long_.feed("T00181480" + "0" * 60 + "\n")
    assert long_.variables.values == short.variables.values


def test_setpoint_command_whole_degrees(gateway):
    assert gateway.setpoint_command(21.0) == "TT=21"
    assert gateway.variables.get(BASE + THERMOSTAT_SETPOINT) == 21.0


def test_setpoint_command_fraction_becomes_half(gateway):
    assert gateway.setpoint_command(20.3) == "TT=20.5"


@pytest.mark.parametrize("temperature", [-1.0, 256.0])
def test_setpoint_out_of_range(gateway, temperature):
    with pytest.raises(ValueError):
        gateway.setpoint_command(temperature)


def test_base_variable_must_be_positive():
    with pytest.raises(ValueError):
        OpenThermGateway(UserVariables(), 0)