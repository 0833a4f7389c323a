"""Flamingo FA20RF smoke detector RF protocol: alarm reception and transmission."""

from __future__ import annotations

from typing import List

from nodorf.core import DecodeError, Event, EventType, Port, RawSignal, _parse_int, _split_args

EVENT_PLUGIN_ID = 13
COMMAND_PLUGIN_ID = 14
EVENT_NAME = "SmokeAlert"
COMMAND_NAME = "SmokeAlertSend"

SIGNAL_LENGTH = 52
MAX_SHORT_PULSE = 1000
LONG_SPACE = 1800

START = 8000
SPACE = 800
LOW = 1300
HIGH = 2600

MULTIPLY = 50
DEFAULT_REPEATS = 50
DELAY = 20

_BITS = 24


def decode(signal: RawSignal) -> Event:
    """Decode a smoke alarm pulse train; the device id is 24 bits, MSB first."""
    pulses = signal.pulses
    if len(pulses) != SIGNAL_LENGTH:
        raise DecodeError(f"FA20RF needs {SIGNAL_LENGTH} pulses, got {len(pulses)}")

    device_id = 0
    for pulse, space in zip(pulses[2:49:2], pulses[3:50:2]):
        if pulse > MAX_SHORT_PULSE:
            raise DecodeError("FA20RF pulse too long")
        device_id = (device_id << 1) | int(space > LONG_SPACE)

    if device_id == 0:
        raise DecodeError("FA20RF signal carries no device id")

    return Event(
        EventType.PLUGIN_EVENT,
        EVENT_PLUGIN_ID,
        0,
        device_id,
        source_unit=0,
        port=Port.RF,
    )


def _quantise(duration: int) -> int:
    return duration // MULTIPLY * MULTIPLY


def encode(device_id: int, repeats: int = 0) -> RawSignal:
    """Build the pulse train that sets off detectors with this id.

    The alarm sounds for as long as the signal is repeated; 0 repeats
    means the default of 50.
    """
    if not 0 <= device_id <= 0xFFFFFFFF:
        raise ValueError(f"device id out of range: {device_id}")
    if repeats < 0:
        raise ValueError(f"repeats must not be negative: {repeats}")
    if repeats == 0:
        repeats = DEFAULT_REPEATS

    space = _quantise(SPACE)
    high = _quantise(HIGH)
    low = _quantise(LOW)

    pulses: List[int] = [_quantise(START), space]
    for shift in range(_BITS - 1, -1, -1):
        pulses += [space, high if (device_id >> shift) & 1 else low]
    pulses += [space, 0]

    return RawSignal(pulses, repeats=repeats, delay=DELAY, multiply=MULTIPLY)


def parse(text: str) -> Event:
    """Parse 'SmokeAlert <par1>,<id>' or 'SmokeAlertSend [<repeats>,<id>]'."""
    args = _split_args(text)
    if not args:
        raise ValueError("empty line")
    name = args[0].lower()
    if name == EVENT_NAME.lower():
        if len(args) < 3:
            raise ValueError(f"SmokeAlert needs two parameters: {text!r}")
        return Event(
            EventType.PLUGIN_EVENT, EVENT_PLUGIN_ID, _parse_int(args[1]), _parse_int(args[2])
        )
    if name == COMMAND_NAME.lower():
        numbers = [_parse_int(arg) for arg in args[1:3]]
        numbers += [0] * (2 - len(numbers))
        return Event(EventType.PLUGIN_COMMAND, COMMAND_PLUGIN_ID, numbers[0], numbers[1])
    raise ValueError(f"not a smoke alert line: {text!r}")


def to_text(event: Event) -> str:
    """Render a smoke alert event or command as a text line."""
    if event.type is EventType.PLUGIN_EVENT:
        name = EVENT_NAME
    elif event.type is EventType.PLUGIN_COMMAND:
        name = COMMAND_NAME
    else:
        raise ValueError(f"not a smoke alert event type: {event.type}")
    return f"{name} {int(event.par1)},{event.par2}"