"""NewKAKU (HomeEasy automatic coding) RF protocol with dim support."""

from __future__ import annotations

from typing import List, Optional, Union

from nodorf.core import (
    DecodeError,
    Event,
    EventType,
    RawSignal,
    Switch,
    _parse_int,
    _split_args,
    format_switch,
    parse_switch,
)

PLUGIN_ID = 2
EVENT_NAME = "NewKAKU"
COMMAND_NAME = "NewKAKUSend"

PLAIN_LENGTH = 132
DIM_LENGTH = 148

T1 = 275
T_MID = 650
T4 = 1100
T8 = 2200

MULTIPLY = 25
REPEATS = 7
DELAY = 20

_MAX_DIM = 16
_DIM_MARKER_PULSE = 114  # 1-based position of the command bit's fourth pulse


def _quartet_bit(quartet: List[int], dim_allowed: bool) -> Optional[int]:
    """Classify four pulses as bit 0, bit 1 or the dim marker (None)."""
    short = [p < T_MID for p in quartet]
    long = [p > T_MID for p in quartet]
    if short[0] and short[1] and short[2] and long[3]:
        return 0
    if short[0] and long[1] and short[2] and short[3]:
        return 1
    if all(short):
        if not dim_allowed:
            raise DecodeError("dim marker in a signal without dim bits")
        return None
    raise DecodeError("pulse pattern is not NewKAKU")


def decode(signal: RawSignal) -> Event:
    """Decode a received NewKAKU pulse train into an event."""
    pulses = signal.pulses
    length = len(pulses)
    if length not in (PLAIN_LENGTH, DIM_LENGTH):
        raise DecodeError(f"NewKAKU needs {PLAIN_LENGTH} or {DIM_LENGTH} pulses, got {length}")
    dimmed = length == DIM_LENGTH

    bitstream = 0
    dim_bits = 0
    bit = 0
    for start in range(3, length - 2, 4):
        value = _quartet_bit(pulses[start - 1:start + 3], dimmed)
        if value is not None:
            bit = value
        if start < 130:
            bitstream = ((bitstream << 1) | bit) & 0xFFFFFFFF
        else:
            dim_bits = (dim_bits << 1) | bit

    if bitstream > 0xFFFF:
        address = bitstream & 0x0FFFFFCF
    else:
        address = (bitstream >> 6) & 0xFF

    command: Union[int, Switch]
    if dimmed:
        command = dim_bits + 1
    else:
        command = Switch.ON if (bitstream >> 4) & 1 else Switch.OFF

    return Event(EventType.PLUGIN_EVENT, PLUGIN_ID, command, address, source_unit=0)


def _quantise(duration: int) -> int:
    return duration // MULTIPLY * MULTIPLY


def encode(address: int, command: Union[Switch, int]) -> RawSignal:
    """Build the pulse train that switches or dims a NewKAKU receiver.

    Addresses up to 255 are short Nodo addresses; larger values are full
    NewKAKU addresses. A dim level 0 means off.
    """
    if not 0 <= address <= 0xFFFFFFFF:
        raise ValueError(f"address out of range: {address}")
    if not isinstance(command, Switch) and command == 0:
        command = Switch.OFF

    dim_level: Optional[int] = None
    if not isinstance(command, Switch):
        if not 1 <= command <= _MAX_DIM:
            raise ValueError(f"dim level must be 1..{_MAX_DIM}, got {command}")
        dim_level = command

    if address <= 255:
        bitstream = 1 | (address << 6)
    else:
        bitstream = address & 0xFFFFFFCF
    if command is Switch.ON:
        bitstream |= 1 << 4

    bits = [(bitstream >> shift) & 1 for shift in range(31, -1, -1)]
    if dim_level is not None:
        bits += [((dim_level - 1) >> shift) & 1 for shift in range(3, -1, -1)]

    short, long_, start_space = _quantise(T1), _quantise(T4), _quantise(T8)
    last = 3 + 4 * len(bits) - 1
    pulses = [short] * (last + 1)  # index 0 unused; positions are 1-based
    pulses[2] = start_space
    for n, bit in enumerate(bits):
        position = 3 + 4 * n
        pulses[position + 1 if bit else position + 3] = long_
    if dim_level is not None:
        pulses[_DIM_MARKER_PULSE] = short
    pulses += [short, 0]

    return RawSignal(pulses[1:], repeats=REPEATS, delay=DELAY, multiply=MULTIPLY)


def parse(text: str) -> Event:
    """Parse 'NewKAKU <address>,<On|Off|dim>' or the NewKAKUSend command."""
    args = _split_args(text)
    kinds = {
        EVENT_NAME.lower(): EventType.PLUGIN_EVENT,
        COMMAND_NAME.lower(): EventType.PLUGIN_COMMAND,
    }
    if not args or args[0].lower() not in kinds:
        raise ValueError(f"not a NewKAKU line: {text!r}")
    if len(args) < 3:
        raise ValueError(f"NewKAKU needs an address and a command: {text!r}")

    address = _parse_int(args[1])
    value: Union[int, Switch]
    try:
        value = parse_switch(args[2])
    except ValueError:
        value = _parse_int(args[2])
        if not 0 <= value <= _MAX_DIM:
            raise ValueError(f"dim level must be 0..{_MAX_DIM}, got {value}") from None
    return Event(kinds[args[0].lower()], PLUGIN_ID, value, address)


def to_text(event: Event) -> str:
    """Render a NewKAKU event or command as a text line."""
    if event.type is EventType.PLUGIN_EVENT:
        name = EVENT_NAME
    elif event.type is EventType.PLUGIN_COMMAND:
        name = COMMAND_NAME
    else:
        raise ValueError(f"not a NewKAKU event type: {event.type}")
    address = f"0x{event.par2:X}" if event.par2 >= 0xFF else str(event.par2)
    return f"{name} {address},{format_switch(event.par1)}"