import pytest

from nodorf import fa20rf
from nodorf.core import DecodeError, Event, EventType, Port, RawSignal


def test_encode_layout():
    signal = fa20rf.encode(0x123456, 10)
    assert len(signal) == fa20rf.SIGNAL_LENGTH
    assert signal.pulses[0] == fa20rf.START
    assert signal.pulses[1] == fa20rf.SPACE
    assert signal.pulses[-2] == fa20rf.SPACE
    assert signal.pulses[-1] == 0
    assert signal.repeats == 10
    assert signal.delay == fa20rf.DELAY
    assert signal.multiply == fa20rf.MULTIPLY
    assert all(p == fa20rf.SPACE for p in signal.pulses[2:50:2])
    assert set(signal.pulses[3:50:2]) == {fa20rf.HIGH, fa20rf.LOW}


def test_encode_default_repeats():
    assert fa20rf.encode(1).repeats == fa20rf.DEFAULT_REPEATS
    assert fa20rf.encode(1, 0).repeats == fa20rf.DEFAULT_REPEATS


def test_first_data_space_is_most_significant_bit():
    signal = fa20rf.encode(0x800000)
    assert signal.pulses[3] == fa20rf.HIGH
    assert all(p == fa20rf.LOW for p in signal.pulses[5:50:2])


@pytest.mark.parametrize("device_id", [1, 0x800000, 0x123456, 0xFFFFFF, 0xA5A5A5])
def test_round_trip(device_id):
    event = fa20rf.decode(fa20rf.encode(device_id))
    assert event == Event(
        EventType.PLUGIN_EVENT,
        fa20rf.EVENT_PLUGIN_ID,
        0,
        device_id,
        source_unit=0,
        port=Port.RF,
    )


def test_round_trip_keeps_low_24_bits():
    event = fa20rf.decode(fa20rf.encode(0x7F123456))
    assert event.par2 == 0x7F123456 & 0xFFFFFF


def test_decode_zero_id_rejected():
    with pytest.raises(DecodeError):
        fa20rf.decode(fa20rf.encode(0))


def test_decode_wrong_length():
    with pytest.raises(DecodeError):
        fa20rf.decode(RawSignal([800] * 50))


def test_decode_long_pulse_rejected():
    pulses = list(fa20rf.encode(0x123456).pulses)
    pulses[10] = 1200
    with pytest.raises(DecodeError):
        fa20rf.decode(RawSignal(pulses))


@pytest.mark.parametrize("device_id, repeats", [(-1, 0), (1, -3)])
def test_encode_rejects_bad_arguments(device_id, repeats):
    with pytest.raises(ValueError):
        fa20rf.encode(device_id, repeats)


def test_parse_event():
    event = fa20rf.parse("SmokeAlert 0,4660")
    assert event == Event(EventType.PLUGIN_EVENT, fa20rf.EVENT_PLUGIN_ID, 0, 4660)


def test_parse_command_defaults():
    event = fa20rf.parse("smokealertsend")
    assert event.type is EventType.PLUGIN_COMMAND
    assert event.command == fa20rf.COMMAND_PLUGIN_ID
    assert (event.par1, event.par2) == (0, 0)


def test_parse_command_with_values():
    event = fa20rf.parse("SmokeAlertSend 20,0x1234")
    assert (event.par1, event.par2) == (20, 0x1234)


@pytest.mark.parametrize("line", ["SmokeAlert 0", "RFID 1,2", "", "SmokeAlert x,1"])
def test_parse_rejects(line):
    with pytest.raises(ValueError):
        fa20rf.parse(line)


@pytest.mark.parametrize("line", ["SmokeAlert 0,4660", "SmokeAlertSend 20,99"])
def test_text_round_trip(line):
    assert fa20rf.to_text(fa20rf.parse(line)) == line


def test_to_text_rejects_plain_event():
    with pytest.raises(ValueError):
        fa20rf.to_text(Event(EventType.EVENT, 13, 0, 1))