import pytest

from nodorf.core import DecodeError, EventType, Port, RawSignal, UserVariables
from nodorf.oregon import OregonDecoder

LONG = 1000
SHORT = 400

# THN132N: id nibbles E,C,4,0; channel 1; sensor 0x21; temperature 2,1,0; checksum 0x25
THN132N = [0xE, 0xC, 0x4, 0x0, 0x1, 0x1, 0x2, 0x0, 0x0, 0x1, 0x2, 0x0, 0x5, 0x2, 0x0, 0x0, 0x0]
# THGN123N: id nibbles 1,D,2,0; negative temperature; humidity 5,4; checksum 0x2D
THGN123N = [0x1, 0xD, 0x2, 0x0, 0x1, 0x1, 0x2, 0x0, 0x5, 0x2, 0x1, 0x8, 0x5, 0x4, 0x0, 0xD, 0x2]
SENSOR = 0x21


def _signal(nibbles, preamble=16, length=200):
    bits = [1] * preamble + [0, 1, 0, 1]
    bits += [(nibble >> k) & 1 for nibble in nibbles for k in range(4)]
    pulses = []
    current = 1
    for i, bit in enumerate(bits):
        if bit != current:
            pulses += [SHORT, 500 if bit else 300]
            current = bit
        elif i:
            pulses.append(LONG)
        pulses.append(LONG)
    pulses += [LONG] * (length - len(pulses))
    return RawSignal(pulses)


def test_thn132n_signal_length_is_in_range():
    assert 196 <= len(_signal(THN132N)) <= 206


def test_thn132n_temperature():
    variables = UserVariables()
    decoder = OregonDecoder(variables)
    assert decoder.register(SENSOR, 1)
    event = decoder.decode(_signal(THN132N))
    assert event.type is EventType.PLUGIN_EVENT
    assert event.command == 12
    assert event.par1 == SENSOR
    assert event.par2 == 1
    assert event.port is Port.RF
    assert variables.get(1) == pytest.approx(21.0)
    assert 2 not in variables.values


def test_thgn123n_negative_temperature_and_humidity():
    variables = UserVariables()
    decoder = OregonDecoder(variables)
    decoder.register(SENSOR, 4)
    signal = _signal(THGN123N, length=230)
    assert 225 <= len(signal) <= 240
    event = decoder.decode(signal)
    assert event.par2 == 4
    assert variables.get(4) == pytest.approx(-12.5)
    assert variables.get(5) == pytest.approx(45.0)


def test_unregistered_sensor_leaves_variables_alone():
    variables = UserVariables()
    event = OregonDecoder(variables).decode(_signal(THN132N))
    assert event.par1 == SENSOR
    assert event.par2 == 0
    assert variables.values == {}


def test_bad_checksum_is_rejected():
    corrupted = list(THN132N)
    corrupted[12] = 0x4
    with pytest.raises(DecodeError):
        OregonDecoder(UserVariables()).decode(_signal(corrupted))


def test_sync_too_early_is_rejected():
    signal = _signal(THN132N, preamble=14)
    assert 196 <= len(signal) <= 206
    with pytest.raises(DecodeError):
        OregonDecoder(UserVariables()).decode(signal)


def test_missing_sync_is_rejected():
    with pytest.raises(DecodeError):
        OregonDecoder(UserVariables()).decode(RawSignal([LONG] * 200))


@pytest.mark.parametrize("length", [0, 195, 207, 224, 241])
def test_wrong_length_is_rejected(length):
    with pytest.raises(DecodeError):
        OregonDecoder(UserVariables()).decode(RawSignal([LONG] * length))


def test_register_refuses_zero_base_and_duplicates():
    decoder = OregonDecoder(UserVariables())
    assert decoder.register(SENSOR, 0) is False
    assert decoder.register(SENSOR, 2) is True
    assert decoder.register(SENSOR, 3) is False


def test_register_accepts_when_full_but_does_not_store():
    decoder = OregonDecoder(UserVariables())
    for sensor in range(1, 6):
        assert decoder.register(sensor, sensor)
    assert decoder.register(SENSOR, 9) is True
    event = decoder.decode(_signal(THN132N))
    assert event.par2 == 0