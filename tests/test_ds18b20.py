import pytest

from nodorf.core import EventType
from nodorf.ds18b20 import PLUGIN_ID, parse, scratchpad_temperature, to_text


def test_power_on_value():
    assert scratchpad_temperature([0x50, 0x05]) == 85.0


def test_negative_temperature():
    assert scratchpad_temperature(bytes([0x5E, 0xFF])) == -10.125


def test_fractional_temperature():
    assert scratchpad_temperature([0x91, 0x01, 0, 0, 0, 0, 0, 0, 0]) == 25.0625


def test_zero():
    assert scratchpad_temperature([0, 0]) == 0.0


def test_sign_symmetry():
    positive = scratchpad_temperature([0x10, 0x00])
    negative = scratchpad_temperature([0xF0, 0xFF])
    assert positive == -negative


def test_short_scratchpad():
    with pytest.raises(ValueError):
        scratchpad_temperature([0x50])


def test_parse_fields():
    event = parse("TempRead 2,7", wired_ports=8, max_variable=32)
    assert event.type is EventType.PLUGIN_COMMAND
    assert event.command == PLUGIN_ID
    assert (event.par1, event.par2) == (2, 7)


def test_round_trip():
    line = "TempRead 3,15"
    assert to_text(parse(line, wired_ports=8, max_variable=32)) == line


def test_parse_is_case_insensitive():
    event = parse("tempread 1,1", wired_ports=8, max_variable=32)
    assert (event.par1, event.par2) == (1, 1)


@pytest.mark.parametrize(
    "line",
    ["TempRead 0,1", "TempRead 9,1", "TempRead 1,0", "TempRead 1,33", "TempRead 1", "Other 1,1"],
)
def test_parse_rejects(line):
    with pytest.raises(ValueError):
        parse(line, wired_ports=8, max_variable=32)


def test_parse_accepts_limits():
    event = parse("TempRead 8,32", wired_ports=8, max_variable=32)
    assert (event.par1, event.par2) == (8, 32)