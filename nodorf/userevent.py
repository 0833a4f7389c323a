"""Reception of user events in the legacy 32-bit Nodo signal format."""

from __future__ import annotations

from nodorf.core import DecodeError, Event, EventType, RawSignal, _parse_int, _split_args

PLUGIN_ID = 7
NAME = "UserEvent"

SIGNAL_LENGTH = 66
LONG_PULSE = 1000
USER_EVENT_CODE = 100


def decode(signal: RawSignal) -> Event:
    """Decode a legacy user-event pulse train; the LSB is sent first."""
    pulses = signal.pulses
    if len(pulses) != SIGNAL_LENGTH:
        raise DecodeError(f"legacy signal needs {SIGNAL_LENGTH} pulses, got {len(pulses)}")

    bitstream = 0
    for bit, pulse in enumerate(pulses[2::2]):
        if pulse > LONG_PULSE:
            bitstream |= 1 << bit

    if (bitstream >> 16) & 0xFF != USER_EVENT_CODE:
        raise DecodeError("legacy signal does not carry a user event")

    return Event(
        EventType.EVENT,
        PLUGIN_ID,
        par1=(bitstream >> 8) & 0xFF,
        par2=bitstream & 0xFF,
        source_unit=(bitstream >> 24) & 0xF,
        destination_unit=0,
    )


def parse(text: str) -> Event:
    """Parse 'UserEvent <par1>,<par2>'; missing parameters are 0."""
    args = _split_args(text)
    if not args or args[0].lower() != NAME.lower():
        raise ValueError(f"not a user event line: {text!r}")
    numbers = [_parse_int(arg) for arg in args[1:3]]
    numbers += [0] * (2 - len(numbers))
    return Event(EventType.EVENT, PLUGIN_ID, numbers[0], numbers[1])


def to_text(event: Event) -> str:
    """Render a user event as a text line."""
    return f"{NAME} {int(event.par1)},{event.par2}"