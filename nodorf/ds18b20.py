"""Dallas DS18B20 temperature sensor: scratchpad decoding and the TempRead command."""

from __future__ import annotations

from typing import Sequence

from nodorf.core import Event, EventType, _parse_int, _split_args

PLUGIN_ID = 5
NAME = "TempRead"

RESOLUTION = 0.0625

SKIP_ROM = 0xCC
START_CONVERSION = 0x44
READ_SCRATCHPAD = 0xBE
SCRATCHPAD_SIZE = 9


def scratchpad_temperature(scratchpad: Sequence[int]) -> float:
    """Temperature in degrees Celsius from the first two scratchpad bytes."""
    if len(scratchpad) < 2:
        raise ValueError("scratchpad needs at least two bytes")
    raw = ((scratchpad[1] & 0xFF) << 8) | (scratchpad[0] & 0xFF)
    if raw & 0x8000:
        raw -= 0x10000
    return raw * RESOLUTION


def parse(text: str, wired_ports: int, max_variable: int) -> Event:
    """Parse 'TempRead <port>,<variable>' with both in their valid ranges."""
    args = _split_args(text)
    if not args or args[0].lower() != NAME.lower():
        raise ValueError(f"not a TempRead line: {text!r}")
    if len(args) < 3:
        raise ValueError(f"TempRead needs a port and a variable: {text!r}")
    port = _parse_int(args[1])
    variable = _parse_int(args[2])
    if not 0 < port <= wired_ports:
        raise ValueError(f"port must be 1..{wired_ports}, got {port}")
    if not 0 < variable <= max_variable:
        raise ValueError(f"variable must be 1..{max_variable}, got {variable}")
    return Event(EventType.PLUGIN_COMMAND, PLUGIN_ID, port, variable)


def to_text(event: Event) -> str:
    """Render a TempRead command as a text line."""
    return f"{NAME} {int(event.par1)},{event.par2}"