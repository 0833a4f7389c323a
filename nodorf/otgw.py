"""OpenTherm Gateway (OTGW) serial line decoding into user variables."""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple, Union

from nodorf.core import UserVariables

PLUGIN_ID = 11
NAME = "OTGW"

BUFFER_SIZE = 40
LINE_END = 0x0A

SOURCE_THERMOSTAT = "T"
SOURCE_BOILER = "B"

# Offsets from the base variable.
SETPOINT = 0
ROOM_TEMPERATURE = 1
BOILER_WATER_TEMPERATURE = 2
RELATIVE_MODULATION = 3
BOILER_WATER_PRESSURE = 4
THERMOSTAT_SETPOINT = 5
FLAME_STATUS = 6
RETURN_WATER_TEMPERATURE = 7
DHW_MODE = 8

_THERMOSTAT_IDS = {0x18: ROOM_TEMPERATURE, 0x10: THERMOSTAT_SETPOINT}
_BOILER_IDS = {
    0x19: BOILER_WATER_TEMPERATURE,
    0x11: RELATIVE_MODULATION,
    0x12: BOILER_WATER_PRESSURE,
    0x1C: RETURN_WATER_TEMPERATURE,
}
_BOILER_STATUS_ID = 0x00

Reading = Tuple[int, float, bool]


def _hex_digit(char: str) -> int:
    value = (ord(char) - ord("0")) & 0xFF
    if value > 16:
        value = (value - 7) & 0xFF
    return value


def hex_byte(text: str, pos: int) -> int:
    """Read two upper-case hex digits at ``pos``; characters past the end count as NUL."""
    if pos < 0:
        raise ValueError(f"position must not be negative: {pos}")
    padded = text + "\0\0"
    high = _hex_digit(padded[pos]) if pos < len(text) else _hex_digit("\0")
    low = _hex_digit(padded[pos + 1]) if pos + 1 < len(text) else _hex_digit("\0")
    return (high * 16 + low) & 0xFF


def _accepted(code: int) -> bool:
    return code < 0x80 and chr(code).isalnum()


class OpenThermGateway:
    """Turns OTGW message lines into readings stored in user variables.

    Readings are ``(variable, value, changed)`` tuples; ``changed`` is True
    when the raw message differs from the one last seen for that variable.
    """

    def __init__(self, variables: UserVariables, base_variable: int) -> None:
        if base_variable < 1:
            raise ValueError(f"base variable must be at least 1, got {base_variable}")
        self.variables = variables
        self.base_variable = base_variable
        self._buffer: List[str] = []
        self._previous: Dict[int, int] = {}

    def feed(self, data: Union[bytes, str]) -> List[Reading]:
        """Accept serial input; returns the readings of every completed line."""
        codes: Iterable[int] = data if isinstance(data, (bytes, bytearray)) else map(ord, data)
        readings: List[Reading] = []
        for code in codes:
            if len(self._buffer) < BUFFER_SIZE and _accepted(code):
                self._buffer.append(chr(code))
            if code == LINE_END:
                line = "".join(self._buffer)
                self._buffer.clear()
                readings += self.handle_line(line)
        return readings

    def handle_line(self, line: str) -> List[Reading]:
        """Decode one message line such as 'T00181480'."""
        source = line[:1]
        b1, b2, b3, b4 = (hex_byte(line, pos) for pos in (1, 3, 5, 7))
        data = (b1 << 24) | (b2 << 16) | (b3 << 8) | b4
        value = b3 + b4 / 256

        readings: List[Reading] = []
        if source == SOURCE_THERMOSTAT and b2 in _THERMOSTAT_IDS:
            readings.append(self._store(_THERMOSTAT_IDS[b2], value, data))
        elif source == SOURCE_BOILER:
            if b2 in _BOILER_IDS:
                readings.append(self._store(_BOILER_IDS[b2], value, data))
            elif b2 == _BOILER_STATUS_ID:
                readings.append(self._store(FLAME_STATUS, float((b4 & 0x8) >> 3), data))
                readings.append(self._store(DHW_MODE, float((b4 & 0x4) >> 2), data))
        return readings

    def _store(self, offset: int, value: float, data: int) -> Reading:
        changed = self._previous.get(offset, 0) != data
        self._previous[offset] = data
        variable = self.base_variable + offset
        self.variables.set(variable, value)
        return (variable, value, changed)

    def setpoint_command(self, temperature: float) -> str:
        """Build the gateway command for a new room setpoint.

        Any fraction is sent as '.5'. The thermostat-setpoint variable is
        updated at once, since the gateway reports it only after a minute.
        """
        if not 0 <= temperature < 256:
            raise ValueError(f"setpoint out of range: {temperature}")
        whole = int(temperature)
        command = f"TT={whole}"
        if temperature - whole > 0:
            command += ".5"
        self.variables.set(self.base_variable + THERMOSTAT_SETPOINT, temperature)
        return command