"""HomeEasy EU (automatic coding) RF protocol: reception and transmission."""

from __future__ import annotations

from typing import List, Tuple

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

EVENT_PLUGIN_ID = 15
COMMAND_PLUGIN_ID = 16
EVENT_NAME = "HomeEasy"
COMMAND_NAME = "HomeEasySend"

SIGNAL_LENGTH = 116
PULSE_THRESHOLD = 500

LONG_LOW = 0x490
SHORT_HIGH = 200
SHORT_LOW = 150

MULTIPLY = 50
REPEATS = 5
DELAY = 20

_START_BITS = 0x63C
_START_WIDTH = 11
_ADDRESS_BASE = 0xDAB8F56C
_ADDRESS_WIDTH = 32
_TRAILER_ON = 0x5C00
_TRAILER_OFF = 0x5A00
_TRAILER_WIDTH = 15

_CHANNEL_CODES = (
    0x8E, 0x96, 0x9A, 0x9C, 0xA6, 0xAA, 0xAC, 0xB2,
    0xB4, 0xB8, 0xC6, 0xCA, 0xCC, 0xD2, 0xD4, 0xD8,
)


def _bits_to_int(bits: List[int]) -> int:
    value = 0
    for bit in bits:
        value = ((value << 1) | bit) & 0xFFFFFFFF
    return value


def decode(signal: RawSignal) -> Event:
    """Decode a received HomeEasy EU pulse train into an on/off event."""
    pulses = signal.pulses
    if len(pulses) != SIGNAL_LENGTH:
        raise DecodeError(f"HomeEasy needs {SIGNAL_LENGTH} pulses, got {len(pulses)}")

    pairs: List[Tuple[int, int]] = list(zip(pulses[0::2], pulses[1::2]))
    bits = [int(high < PULSE_THRESHOLD and low > PULSE_THRESHOLD) for high, low in pairs]

    address = _bits_to_int(bits[11:43])
    bitstream = _bits_to_int(bits[43:57])

    state = Switch.OFF if (bitstream >> 8) & 0x3 == 1 else Switch.ON
    # The channel is shifted past bit 5 so it cannot clash with the command bits.
    channel = bitstream & 0x3F
    address = (address + (channel << 6)) & 0xFFFFFFFF

    return Event(
        EventType.PLUGIN_EVENT,
        EVENT_PLUGIN_ID,
        state,
        address & 0xFFFFFFCF,
        source_unit=0,
    )


def _quantise(duration: int) -> int:
    return duration // MULTIPLY * MULTIPLY


def encode(address: int, command: Switch) -> RawSignal:
    """Build the pulse train that switches a HomeEasy EU receiver on or off.

    Bits 4..6 of the address select the house address, bits 0..3 the channel.
    """
    if address < 0:
        raise ValueError(f"address must not be negative: {address}")
    if not isinstance(command, Switch):
        raise ValueError(f"HomeEasy command must be On or Off, got {command!r}")

    house = (address >> 4) & 0x7
    channel_code = _CHANNEL_CODES[address & 0xF]
    trailer = (_TRAILER_OFF if command is Switch.OFF else _TRAILER_ON) + channel_code

    high = _quantise(SHORT_HIGH)
    one = _quantise(LONG_LOW)
    zero = _quantise(SHORT_LOW)

    pulses: List[int] = []
    for value, width in (
        (_START_BITS, _START_WIDTH),
        (_ADDRESS_BASE + house, _ADDRESS_WIDTH),
        (trailer, _TRAILER_WIDTH),
    ):
        for shift in range(width - 1, -1, -1):
            pulses += [high, one if (value >> shift) & 1 else zero]
    pulses[-1] = 0

    return RawSignal(pulses, repeats=REPEATS, delay=DELAY, multiply=MULTIPLY)


def parse(text: str) -> Event:
    """Parse 'HomeEasy <address>,<On|Off>' or the HomeEasySend command."""
    args = _split_args(text)
    kinds = {
        EVENT_NAME.lower(): (EventType.PLUGIN_EVENT, EVENT_PLUGIN_ID),
        COMMAND_NAME.lower(): (EventType.PLUGIN_COMMAND, COMMAND_PLUGIN_ID),
    }
    if not args or args[0].lower() not in kinds:
        raise ValueError(f"not a HomeEasy line: {text!r}")
    if len(args) < 3:
        raise ValueError(f"HomeEasy needs an address and On/Off: {text!r}")
    event_type, plugin_id = kinds[args[0].lower()]
    address = _parse_int(args[1])
    state = parse_switch(args[2])
    return Event(event_type, plugin_id, state, address)


def to_text(event: Event) -> str:
    """Render a HomeEasy event or command as a text line."""
    if event.type is EventType.PLUGIN_EVENT:
        name = EVENT_NAME
    elif event.type is EventType.PLUGIN_COMMAND:
        name = COMMAND_NAME
    else:
        raise ValueError(f"not a HomeEasy event type: {event.type}")
    address = f"0x{event.par2:X}" if event.par2 >= 0xFF else str(event.par2)
    return f"{name} {address},{format_switch(event.par1)}"