"""Bosch BMP085 barometric pressure sensor: compensation of raw readings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

PLUGIN_ID = 20
NAME = "BMP085Read"

I2C_ADDRESS = 0x77
CHIP_ID_REGISTER = 0xD0
CHIP_ID = 0x55
CONTROL_REGISTER = 0xF4
DATA_REGISTER = 0xF6
READ_TEMPERATURE_COMMAND = 0x2E
READ_PRESSURE_COMMAND = 0x34

ULTRA_LOW_POWER = 0
STANDARD = 1
HIGH_RES = 2
ULTRA_HIGH_RES = 3

TEMPERATURE_PAYLOAD = 0x0011
PRESSURE_PAYLOAD = 0x00A1


def _s32(value: int) -> int:
    """Wrap to a signed 32-bit integer."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _u32(value: int) -> int:
    return value & 0xFFFFFFFF


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def _check_oversampling(oversampling: int) -> None:
    if not ULTRA_LOW_POWER <= oversampling <= ULTRA_HIGH_RES:
        raise ValueError(f"oversampling must be 0..3, got {oversampling}")


def raw_pressure(data: Sequence[int], oversampling: int = ULTRA_HIGH_RES) -> int:
    """Uncompensated pressure from the MSB, LSB and XLSB data registers."""
    _check_oversampling(oversampling)
    if len(data) != 3:
        raise ValueError(f"pressure data needs three bytes, got {len(data)}")
    msb, lsb, xlsb = (byte & 0xFF for byte in data)
    return ((msb << 16) | (lsb << 8) | xlsb) >> (8 - oversampling)


@dataclass(frozen=True)
class Calibration:
    """Factory calibration coefficients read from the sensor's EEPROM."""

    ac1: int
    ac2: int
    ac3: int
    ac4: int
    ac5: int
    ac6: int
    b1: int
    b2: int
    mb: int
    mc: int
    md: int

    def _b5(self, raw_temperature: int) -> int:
        x1 = _s32(int((raw_temperature - self.ac6) * self.ac5 / 2**15))
        divisor = x1 + self.md
        if divisor == 0:
            raise ValueError("calibration data gives a zero divisor")
        x2 = _s32(int(self.mc * 2.0**11 / divisor))
        return _s32(x1 + x2)

    def temperature(self, raw_temperature: int) -> float:
        """Temperature in degrees Celsius."""
        b5 = self._b5(raw_temperature)
        return (b5 + 8) / 2**4 / 10

    def pressure(
        self, raw_temperature: int, raw_pressure: int, oversampling: int = ULTRA_HIGH_RES
    ) -> int:
        """Pressure in pascal."""
        _check_oversampling(oversampling)
        b5 = self._b5(raw_temperature)

        b6 = _s32(b5 - 4000)
        x1 = _s32(self.b2 * (_s32(b6 * b6) >> 12)) >> 11
        x2 = _s32(self.ac2 * b6) >> 11
        x3 = _s32(x1 + x2)
        b3 = _s32(_tdiv(_s32((_s32(self.ac1 * 4 + x3) << oversampling) + 2), 4))

        x1 = _s32(self.ac3 * b6) >> 13
        x2 = _s32(self.b1 * (_s32(b6 * b6) >> 12)) >> 16
        x3 = _s32(x1 + x2 + 2) >> 2
        b4 = _u32(_u32(self.ac4) * _u32(x3 + 32768)) >> 15
        if b4 == 0:
            raise ValueError("calibration data gives a zero divisor")
        b7 = _u32(_u32(_u32(raw_pressure) - _u32(b3)) * (50000 >> oversampling))

        if b7 < 0x80000000:
            p = _s32(_u32(b7 * 2) // b4)
        else:
            p = _s32((b7 // b4) * 2)

        x1 = _s32((p >> 8) * (p >> 8))
        x1 = _s32(x1 * 3038) >> 16
        x2 = _s32(-7357 * p) >> 16
        return _s32(p + (_s32(x1 + x2 + 3791) >> 4))