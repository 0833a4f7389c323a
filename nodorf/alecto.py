"""Alecto weather-station outdoor sensors, protocol versions 1 and 2."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from nodorf.core import (
    DecodeError,
    Event,
    EventType,
    Port,
    RawSignal,
    SensorRegistry,
    UserVariables,
)

V1_PLUGIN_ID = 8
V2_PLUGIN_ID = 9

V1_PULSE_COUNT = 74
V1_LONG_SPACE = 0xA00

V2_ACH2010_MIN_PULSE_COUNT = 160
V2_ACH2010_MAX_PULSE_COUNT = 160
V2_DKW2012_PULSE_COUNT = 176
V2_SHORT_PULSE = 0x300

V1_RAIN_STEP = 0.25
V1_WIND_FACTOR = 0.72
V2_RAIN_STEP = 0.30
V2_WIND_FACTOR = 1.08

_CRC_POLYNOMIAL = 0x31
_V1_VARIABLES = 5


def crc8(data: Iterable[int]) -> int:
    """CRC-8 with polynomial 0x31, zero initial value, most significant bit first."""
    crc = 0
    for byte in data:
        crc ^= byte & 0xFF
        for _ in range(8):
            crc = ((crc << 1) ^ _CRC_POLYNOMIAL) if crc & 0x80 else crc << 1
            crc &= 0xFF
    return crc


def _pack_msb(bits: Sequence[bool]) -> List[int]:
    """Pack bits, most significant first, into whole bytes."""
    return [
        sum(int(bit) << (7 - k) for k, bit in enumerate(bits[start:start + 8]))
        for start in range(0, len(bits), 8)
    ]


class _AlectoDecoder:
    """State shared by the Alecto decoders: known sensors and the rain counter."""

    plugin_id = 0

    def __init__(self, variables: UserVariables) -> None:
        self.variables = variables
        self.sensors = SensorRegistry()
        self._rain_base = 0

    def register(self, sensor_id: int, base_variable: int) -> bool:
        """Bind a sensor to its first user variable; False if refused."""
        return self.sensors.register(sensor_id, base_variable)

    def _event(self, sensor_id: int) -> Event:
        return Event(
            EventType.PLUGIN_EVENT,
            self.plugin_id,
            sensor_id,
            self.sensors.lookup(sensor_id),
            source_unit=0,
            port=Port.RF,
        )

    def _rain_increase(self, rain: int) -> Optional[int]:
        """Track the rain counter; the rise since the last reading, if known."""
        if rain < self._rain_base:
            self._rain_base = rain
        increase = rain - self._rain_base if self._rain_base > 0 else None
        self._rain_base = rain
        return increase


class AlectoV1Decoder(_AlectoDecoder):
    """Decoder for Alecto protocol V1 (WS3500 family, 74 pulses)."""

    plugin_id = V1_PLUGIN_ID

    def __init__(self, variables: UserVariables) -> None:
        super().__init__(variables)

    def register(self, sensor_id: int, base_variable: int) -> bool:
        """Bind a sensor and clear its five variables; False if refused."""
        if base_variable <= 0 or self.sensors.lookup(sensor_id) != 0:
            return False
        for offset in range(_V1_VARIABLES):
            self.variables.set(base_variable + offset, 0.0)
        return self.sensors.register(sensor_id, base_variable)

    def decode(self, signal: RawSignal) -> Event:
        """Decode a V1 message and update the sensor's variables."""
        pulses = signal.pulses
        if len(pulses) != V1_PULSE_COUNT:
            raise DecodeError(f"AlectoV1 needs {V1_PULSE_COUNT} pulses, got {len(pulses)}")

        bitstream = sum(
            1 << i for i, pulse in enumerate(pulses[1:64:2]) if pulse > V1_LONG_SPACE
        )
        checksum = sum(
            1 << i for i, pulse in enumerate(pulses[65:72:2]) if pulse > V1_LONG_SPACE
        )

        nibbles = [(bitstream >> (4 * i)) & 0xF for i in range(8)]
        total = sum(nibbles)
        climate = (nibbles[2] & 0x6) != 0x6
        if not climate and nibbles[3] == 3:
            expected = (0x7 + total) & 0xF
        else:
            expected = (0xF - total) & 0xF
        if checksum != expected:
            raise DecodeError("AlectoV1 checksum mismatch")

        event = self._event(bitstream & 0xFF)
        base = event.par2
        if base == 0:
            return event

        if climate:
            temperature = (bitstream >> 12) & 0xFFF
            if temperature & 0x800:
                temperature -= 0x1000
            self.variables.set(base, temperature / 10)
            self.variables.set(base + 1, 10 * nibbles[7] + nibbles[6])
        elif nibbles[3] == 3:
            increase = self._rain_increase((bitstream >> 16) & 0xFFFF)
            if increase is not None:
                self.variables.add(base + 2, increase * V1_RAIN_STEP)
        elif nibbles[3] == 1:
            self.variables.set(base + 3, ((bitstream >> 24) & 0xFF) * V1_WIND_FACTOR)
        elif nibbles[3] & 0x7 == 0x7:
            self.variables.set(base + 4, float(((bitstream >> 15) & 0x1FF) // 45))
            self.variables.set(base + 5, ((bitstream >> 24) & 0xFF) * V1_WIND_FACTOR)
        return event


class AlectoV2Decoder(_AlectoDecoder):
    """Decoder for Alecto protocol V2 (DKW2012, ACH2010 and WS3000)."""

    plugin_id = V2_PLUGIN_ID

    def __init__(self, variables: UserVariables) -> None:
        super().__init__(variables)

    def register(self, sensor_id: int, base_variable: int) -> bool:
        """Bind a sensor to its first user variable; False if refused."""
        return super().register(sensor_id, base_variable)

    def decode(self, signal: RawSignal) -> Event:
        """Decode a V2 message and update the sensor's variables."""
        pulses = signal.pulses
        count = len(pulses)
        ach2010 = V2_ACH2010_MIN_PULSE_COUNT <= count <= V2_ACH2010_MAX_PULSE_COUNT
        dkw2012 = count == V2_DKW2012_PULSE_COUNT
        if not (ach2010 or dkw2012):
            raise DecodeError(f"AlectoV2 pulse count not supported: {count}")

        size = 10 if count > V2_ACH2010_MAX_PULSE_COUNT else 9
        # The header is rarely received whole, so the message is read from its end.
        bits = [pulse < V2_SHORT_PULSE for pulse in pulses[0::2]][-8 * size:]
        data = _pack_msb(bits)

        if crc8(data[:-1]) != data[-1]:
            raise DecodeError("AlectoV2 checksum mismatch")

        message_type = (data[0] >> 4) & 0xF
        sensor_id = ((data[0] << 4) | (data[1] >> 4)) & 0xFF

        event = self._event(sensor_id)
        base = event.par2
        if base == 0 or message_type not in (10, 5):
            return event

        self.variables.set(base, (((data[1] & 0x3) * 256 + data[2]) - 400) / 10)
        self.variables.set(base + 1, data[3])

        increase = self._rain_increase(data[6] * 256 + data[7])
        if increase is not None:
            self.variables.add(base + 2, increase * V2_RAIN_STEP)

        self.variables.set(base + 3, data[4] * V2_WIND_FACTOR)
        self.variables.set(base + 4, data[5] * V2_WIND_FACTOR)
        if dkw2012:
            self.variables.set(base + 5, data[8] & 0xF)
        return event