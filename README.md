# nodorf

Pure-Python decoders and encoders for the radio protocols and sensor data
formats used by a home-automation controller. Covered are Klik-Aan-Klik-Uit
(NewKAKU), HomeEasy EU, Flamingo FA20RF smoke alarms, Alecto (V1, V2, V3)
and Oregon V2 weather stations, legacy 32-bit user events, an OpenTherm
gateway, and the DS18B20, DHT-11/22/33 and BMP085 sensors.

The package does no I/O of its own. Radio code works on `RawSignal` pulse
trains, and sensor code works on the bytes you read from the device. You
connect it to whatever receiver, serial port or bus driver you already use.

## Installation

```
pip install nodorf
```

To run the tests as well:

```
pip install "nodorf[test]"
pytest
```

## Building blocks

`nodorf.core` holds the shared types:

- `RawSignal`: a pulse train in microseconds, with `repeats`, `delay` and
  `multiply` for transmission. `len(signal)` is its pulse count.
- `Event`, `EventType`, `Port`: a decoded event or a command, and the
  transport it belongs to.
- `Switch`, `parse_switch`, `format_switch`: on/off values and their text
  forms. `format_switch` renders anything that is not a `Switch` as a
  decimal number.
- `UserVariables`: numbered user variables starting at 1. Unset variables
  read as 0.0. Use `get`, `set` and `add`.
- `SensorRegistry`: maps up to five sensor ids to the base variable their
  readings go to. `lookup` returns 0 for an unknown sensor.
- `DecodeError`: a `ValueError` raised when a signal does not match a
  protocol.

Text parsers raise `ValueError` for lines that do not belong to them.

## Switch protocols

`nodorf.newkaku` and `nodorf.homeeasy` each provide `decode(signal)`,
`encode(address, command)`, `parse(text)` and `to_text(event)`:

```python
from nodorf import newkaku
from nodorf.core import Switch

signal = newkaku.encode(12, Switch.ON)   # RawSignal ready to transmit
event = newkaku.decode(signal)           # back to an Event
print(newkaku.to_text(event))            # "NewKAKU 12,On"

event = newkaku.parse("NewKAKUSend 12,7")  # dim level 7
```

NewKAKU accepts dim levels 1 to 16 as well as `Switch.ON`/`Switch.OFF`. A
level of 0 means off. Addresses up to 255 are short addresses, and larger
values are used as full addresses. HomeEasy takes on/off only.

`nodorf.fa20rf` does the same for the FA20RF smoke alarm, with
`encode(device_id, repeats)`. A repeat count of 0 means the default of 50,
and the alarm sounds for as long as the signal is repeated.

`nodorf.userevent` decodes user events in the old 32-bit signal format and
has `parse` and `to_text` for the `UserEvent` text line.

## Weather stations

Each weather decoder writes its readings into a shared `UserVariables`. A
sensor yields readings only after it has been registered against a base
variable. Before that, `decode` still returns the event, carrying the sensor
id and a base of 0.

```python
from nodorf.core import UserVariables
from nodorf.alecto import AlectoV1Decoder

variables = UserVariables()
decoder = AlectoV1Decoder(variables)
decoder.register(sensor_id=42, base_variable=1)

event = decoder.decode(signal)           # raises DecodeError on a bad checksum
temperature = variables.get(1)
humidity = variables.get(2)
```

`AlectoV2Decoder` (in `nodorf.alecto`), `AlectoV3Decoder` (in
`nodorf.alectov3`) and `OregonDecoder` (in `nodorf.oregon`) work the same
way. Rain counters are accumulated from one reading to the next.
`nodorf.alecto.crc8` is the CRC-8 (polynomial 0x31) these stations use.

## OpenTherm gateway

`nodorf.otgw.OpenThermGateway(variables, base_variable)` reads the text
stream of an OpenTherm gateway. Pass it data with `feed(data)`, which takes
bytes or str, or pass single lines with `handle_line(line)`. Both return
`(variable, value, changed)` tuples.

Readings go into consecutive user variables starting at the base variable:

| Offset | Reading |
| --- | --- |
| 0 | setpoint |
| 1 | room temperature |
| 2 | boiler water temperature |
| 3 | modulation |
| 4 | water pressure |
| 5 | thermostat setpoint |
| 6 | flame status |
| 7 | return water temperature |
| 8 | hot-water mode |

`setpoint_command(temperature)` returns the `TT=` command string that sets
the room temperature. It also updates the thermostat-setpoint variable.

## Wired sensors

- `nodorf.ds18b20.scratchpad_temperature(scratchpad)` turns a DS18B20
  scratchpad into degrees Celsius. `parse(text, wired_ports, max_variable)`
  and `to_text(event)` handle the `TempRead` command line.
- `nodorf.dht.decode(data, model)` turns the five bytes a DHT-11, DHT-22 or
  DHT-33 sends into a `DhtReading`. It raises `DecodeError` on a bad
  checksum. `checksum_ok(data)` checks a frame without decoding it.
- `nodorf.bmp085.Calibration` holds a BMP085's calibration constants. Its
  `temperature(raw_temperature)` and
  `pressure(raw_temperature, raw_pressure, oversampling)` methods return the
  compensated values in °C and Pa. `raw_pressure(data, oversampling)`
  assembles the raw reading from the three data registers.

## What it does not do

The package does not talk to hardware:

- It has no radio receiver or transmitter.
- It has no serial, I²C or one-wire access.
- It has no timing-sensitive bit reading.

There is no command-line program, no event loop and no persistent storage.
Reading pulses or bytes and sending the generated pulse trains is left to
the caller.