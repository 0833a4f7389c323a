"""DHT-11, DHT-22 and DHT-33 temperature and humidity sensors: frame decoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence, Union

from nodorf.core import DecodeError

PLUGIN_ID = 6
NAME = "DHTRead"

FRAME_SIZE = 5
TEMPERATURE_PAYLOAD = 0x0011
HUMIDITY_PAYLOAD = 0x00D1


class DhtModel(IntEnum):
    """Supported sensor models."""

    DHT11 = 11
    DHT22 = 22
    DHT33 = 33


@dataclass(frozen=True)
class DhtReading:
    """Temperature in degrees Celsius and relative humidity in percent."""

    temperature: float
    humidity: float


def _frame(data: Sequence[int]) -> list:
    if len(data) != FRAME_SIZE:
        raise ValueError(f"DHT frame needs {FRAME_SIZE} bytes, got {len(data)}")
    return [byte & 0xFF for byte in data]


def checksum_ok(data: Sequence[int]) -> bool:
    """True if the fifth byte is the rollover sum of the first four."""
    frame = _frame(data)
    return sum(frame[:4]) & 0xFF == frame[4]


def _word(high: int, low: int) -> int:
    return (high << 8) | low


def decode(data: Sequence[int], model: Union[DhtModel, int]) -> DhtReading:
    """Decode a five-byte sensor frame into a reading."""
    model = DhtModel(model)
    frame = _frame(data)
    if not checksum_ok(frame):
        raise DecodeError("DHT checksum mismatch")

    if model is DhtModel.DHT11:
        return DhtReading(float(frame[2]), float(frame[0]))

    if frame[2] & 0x80:
        temperature = -0.1 * _word(frame[2] & 0x7F, frame[3])
    else:
        temperature = 0.1 * _word(frame[2], frame[3])
    humidity = _word(frame[0], frame[1]) * 0.1
    return DhtReading(temperature, humidity)