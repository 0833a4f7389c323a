"""Shared event, signal, variable and sensor-registry types."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union


class DecodeError(ValueError):
    """Raised when a raw signal does not match a protocol."""


class EventType(Enum):
    """Kind of event carried through the system."""

    EVENT = "event"
    COMMAND = "command"
    PLUGIN_EVENT = "plugin_event"
    PLUGIN_COMMAND = "plugin_command"


class Port(Enum):
    """Transport an event travels over."""

    RF = "rf"
    IR = "ir"
    I2C = "i2c"
    ALL = "all"


class Switch(Enum):
    """On/off switch command."""

    ON = "On"
    OFF = "Off"


def parse_switch(text: str) -> Switch:
    """Parse 'On' or 'Off' (any case) into a Switch."""
    wanted = text.strip().lower()
    for state in Switch:
        if state.value.lower() == wanted:
            return state
    raise ValueError(f"not an on/off value: {text!r}")


def format_switch(value: Union[Switch, int]) -> str:
    """Render a switch state as 'On'/'Off' and anything else as a decimal number."""
    if isinstance(value, Switch):
        return value.value
    return str(int(value))


def _split_args(text: str) -> List[str]:
    """Split a command line on whitespace and commas."""
    return [part for part in re.split(r"[\s,]+", text.strip()) if part]


def _parse_int(text: str) -> int:
    """Parse a decimal or 0x-prefixed hexadecimal integer."""
    token = text.strip()
    try:
        if token.lower().startswith("0x"):
            return int(token[2:], 16)
        return int(token)
    except ValueError:
        raise ValueError(f"not a number: {text!r}") from None


@dataclass
class Event:
    """An event or command with its two parameters."""

    type: EventType
    command: int
    par1: Union[int, Switch] = 0
    par2: int = 0
    source_unit: int = 0
    destination_unit: int = 0
    port: Optional[Port] = None


@dataclass
class RawSignal:
    """A train of pulse and space durations in microseconds.

    ``pulses[0]`` is the first pulse of the train.
    """

    pulses: List[int]
    repeats: int = 0
    delay: int = 0
    multiply: int = 1

    def __len__(self) -> int:
        return len(self.pulses)


@dataclass
class UserVariables:
    """Numbered user variables holding floats; unset variables read as 0.0."""

    values: Dict[int, float] = field(default_factory=dict)

    @staticmethod
    def _check(number: int) -> None:
        if number < 1:
            raise ValueError(f"variable numbers start at 1, got {number}")

    def get(self, number: int) -> float:
        self._check(number)
        return self.values.get(number, 0.0)

    def set(self, number: int, value: float) -> None:
        self._check(number)
        self.values[number] = float(value)

    def add(self, number: int, delta: float) -> float:
        """Add to a variable and return its new value."""
        result = self.get(number) + delta
        self.set(number, result)
        return result


@dataclass
class SensorRegistry:
    """Maps sensor ids to the first user variable their readings go to."""

    capacity: int = 5
    _slots: Dict[int, int] = field(default_factory=dict)

    def lookup(self, sensor_id: int) -> int:
        """Return the base variable of a sensor, or 0 if it is unknown."""
        return self._slots.get(sensor_id, 0)

    def register(self, sensor_id: int, base_variable: int) -> bool:
        """Register a sensor; False if already known, no base or no free slot."""
        if base_variable <= 0 or self.lookup(sensor_id) != 0:
            return False
        if len(self._slots) >= self.capacity:
            return False
        self._slots[sensor_id] = base_variable
        return True