"""Alecto weather-station outdoor sensors, protocol version 3 (WS1100 and WS1200)."""

from __future__ import annotations

from typing import Sequence

from nodorf.alecto import _AlectoDecoder, crc8
from nodorf.core import DecodeError, Event, RawSignal, UserVariables

PLUGIN_ID = 10

WS1100_PULSE_COUNT = 94
WS1200_PULSE_COUNT = 126
SHORT_PULSE = 0x300

RAIN_STEP = 0.30

_FIRST_BIT = 14  # pulse index of the first data bit, after the preamble
_WORD_BITS = 32


def _word(bits: Sequence[int]) -> int:
    """Pack bits, most significant first, into an integer."""
    value = 0
    for bit in bits:
        value = (value << 1) | bit
    return value


class AlectoV3Decoder(_AlectoDecoder):
    """Decoder for Alecto protocol V3 (WS1100: 94 pulses, WS1200: 126 pulses)."""

    plugin_id = PLUGIN_ID

    def __init__(self, variables: UserVariables) -> None:
        super().__init__(variables)

    def register(self, sensor_id: int, base_variable: int) -> bool:
        """Bind a sensor to its first user variable; False if refused."""
        return super().register(sensor_id, base_variable)

    def decode(self, signal: RawSignal) -> Event:
        """Decode a V3 message and update the sensor's variables."""
        pulses = signal.pulses
        count = len(pulses)
        if count not in (WS1100_PULSE_COUNT, WS1200_PULSE_COUNT):
            raise DecodeError(f"AlectoV3 pulse count not supported: {count}")
        ws1200 = count == WS1200_PULSE_COUNT

        end = _FIRST_BIT + 4 * _WORD_BITS
        bits = [int(pulse < SHORT_PULSE) for pulse in pulses[_FIRST_BIT:end:2]]
        bits += [0] * (2 * _WORD_BITS - len(bits))
        first = _word(bits[:_WORD_BITS])
        second = _word(bits[_WORD_BITS:])

        data = first.to_bytes(4, "big") + second.to_bytes(4, "big")[:2]
        if ws1200:
            checksum = (second >> 8) & 0xFF
            expected = crc8(data[:6])
        else:
            checksum = (second >> 24) & 0xFF
            expected = crc8(data[:4])
        if checksum != expected:
            raise DecodeError("AlectoV3 checksum mismatch")

        event = self._event((first >> 20) & 0xFF)
        base = event.par2
        if base == 0:
            return event

        temperature = ((first >> 8) & 0x3FF) - 400
        self.variables.set(base, temperature / 10)

        if ws1200:
            rain = ((second >> 24) & 0xFF) * 256 + (first & 0xFF)
            increase = self._rain_increase(rain)
            if increase is not None:
                self.variables.add(base + 1, increase * RAIN_STEP)
        else:
            self.variables.set(base + 1, (first & 0xFF) / 10)
        return event