"""Oregon Scientific outdoor sensors, protocol V2 (THN132N, THGN123N, THGR810)."""

from __future__ import annotations

from nodorf.core import (
    DecodeError,
    Event,
    EventType,
    Port,
    RawSignal,
    SensorRegistry,
    UserVariables,
)

PLUGIN_ID = 12

THN132N_ID = 1230
THGN123N_ID = 721
THGR810_ID = 17039

THN132N_MIN_PULSE_COUNT = 196
THN132N_MAX_PULSE_COUNT = 206
THGN123N_MIN_PULSE_COUNT = 225
THGN123N_MAX_PULSE_COUNT = 240

SHORT_PULSE = 600

_SYNC = 0xA
_MIN_SYNC_POSITION = 40
_NIBBLES = 17
_LAST_DATA_COUNTER = 70
_HUMIDITY_IDS = (THGN123N_ID, THGR810_ID)
_TEMPERATURE_IDS = (THGN123N_ID, THGR810_ID, THN132N_ID)


def _length_supported(count: int) -> bool:
    return (
        THN132N_MIN_PULSE_COUNT <= count <= THN132N_MAX_PULSE_COUNT
        or THGN123N_MIN_PULSE_COUNT <= count <= THGN123N_MAX_PULSE_COUNT
    )


class OregonDecoder:
    """Decoder for Oregon V2 messages of 18 or 21 nibbles."""

    plugin_id = PLUGIN_ID

    def __init__(self, variables: UserVariables) -> None:
        self.variables = variables
        self.sensors = SensorRegistry()

    def register(self, sensor_id: int, base_variable: int) -> bool:
        """Bind a sensor to its first user variable.

        Accepted (True) whenever the base is set and the sensor unknown, even
        if no slot was free to store it.
        """
        if base_variable <= 0 or self.sensors.lookup(sensor_id) != 0:
            return False
        self.sensors.register(sensor_id, base_variable)
        return True

    @staticmethod
    def _nibbles(signal: RawSignal) -> list:
        """Manchester-decode the pulse train into the message nibbles."""
        pulses = signal.pulses
        count = len(pulses)
        nibbles = [0] * _NIBBLES
        rfbit, phase, counter, sync = 1, 1, 1, 0

        stream = enumerate(pulses, start=1)
        for position, pulse in stream:
            if pulse < SHORT_PULSE:
                following = pulses[position] if position < count else 0
                rfbit = int(pulse < following)
                next(stream, None)
                position += 1
                phase = 2
            if phase % 2 == 1:
                if counter == 1:
                    # The preamble length differs per sensor; look for the sync nibble.
                    sync = ((sync >> 1) | (rfbit << 3)) & 0xF
                    if sync == _SYNC:
                        counter = 2
                        if position < _MIN_SYNC_POSITION:
                            raise DecodeError("Oregon sync found too early")
                else:
                    if counter < _LAST_DATA_COUNTER:
                        index = (counter - 2) // 4
                        nibbles[index] = (nibbles[index] >> 1) | (rfbit << 3)
                    counter += 1
            phase += 1

        if counter == 1:
            raise DecodeError("no Oregon sync pattern found")
        return nibbles

    def decode(self, signal: RawSignal) -> Event:
        """Decode an Oregon V2 message and update the sensor's variables."""
        count = len(signal.pulses)
        if not _length_supported(count):
            raise DecodeError(f"Oregon pulse count not supported: {count}")

        nibbles = self._nibbles(signal)
        device = (nibbles[3] << 16) | (nibbles[2] << 8) | (nibbles[1] << 4) | nibbles[0]
        humidity = device in _HUMIDITY_IDS

        if humidity:
            expected = sum(nibbles[:15]) & 0xFF
            checksum = (nibbles[16] << 4) | nibbles[15]
        else:
            expected = sum(nibbles[:12]) & 0xFF
            checksum = (nibbles[13] << 4) | nibbles[12]
        if checksum != expected:
            raise DecodeError("Oregon checksum mismatch")

        sensor_id = (nibbles[6] << 4) | nibbles[5]
        base = self.sensors.lookup(sensor_id)
        event = Event(
            EventType.PLUGIN_EVENT,
            self.plugin_id,
            sensor_id,
            base,
            source_unit=0,
            port=Port.RF,
        )
        if base == 0 or device not in _TEMPERATURE_IDS:
            return event

        temperature = 1000 * nibbles[10] + 100 * nibbles[9] + 10 * nibbles[8]
        if nibbles[11] & 0x8:
            temperature = -temperature
        self.variables.set(base, temperature / 100)
        if humidity:
            self.variables.set(base + 1, (1000 * nibbles[13] + 100 * nibbles[12]) / 100)
        return event