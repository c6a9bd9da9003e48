# mbrtu

Modbus RTU tools for a small test bench made of four kinds of serial
devices: a temperature controller, a relay board, a power supply and a
15-channel voltage/current meter.

## Modules

- `mbrtu.protocol`: Modbus RTU frames (`Function`, `FunctionCode`), the
  CRC-16 (`calculate_crc`), and `Builder`, which sends a request over a
  serial port and parses the reply. `get_ports()` lists serial ports with
  known hardware, followed by the name `"test"`; `default_port_name()` is
  `COM1` on Windows and `/dev/ttyUSB0` elsewhere.
- `mbrtu.temperature`, `mbrtu.relay`, `mbrtu.power`, `mbrtu.voltage`:
  the commands each device understands (`TemperatureMode`, `RelayMode`,
  `PowerMode`, and `voltage.request`) and the readings it returns
  (`TemperatureData`, `RelayData`, `PowerData`, `VoltageData`).
- `mbrtu.mock`: simulated devices (`TempMock`, `RelayMock`, `PowerMock`,
  `VoltageMock`) that answer requests like the real ones;
  `mock_for_frame()` picks one by slave address.
- `mbrtu.mock_server` and `mbrtu.reader`: the two commands below.
- `mbrtu.errors`: `MbError` and its subclasses.
- `mbrtu.utils`: duration helpers and `format_hex` / `print_hex`.

## Installation

```
pip install .
```

## Building frames

```python
from mbrtu.temperature import TemperatureCommand, TemperatureMode, request

frame = request(0x01, TemperatureMode(TemperatureCommand.TEMP1))
print(frame.request_data().hex(" "))   # 01 03 00 0a 00 01 a4 08
```

Replies are parsed with `Function.parse_response` and turned into readings:

```python
from mbrtu.protocol import Function
from mbrtu.temperature import TemperatureData

reply = Function.parse_response(raw_bytes)
reading = TemperatureData.from_response(reply)
print(reading.value)   # degrees; the register holds tenths
```

Malformed frames raise subclasses of `mbrtu.errors.MbError`
(`DataShortError`, `DataLenError`, `DataNullError`, `ParseFailError`).

A meter reading can be judged against limits and stored as plain data:

```python
from mbrtu.voltage import VoltageData, Verify

data = VoltageData.from_response(reply)
data.update_channel_state(Verify())      # 1–25 V, 1–10 A by default
print(data.voltage(), data.current())    # means over the channels
plain = data.to_dict()                   # JSON-ready; VoltageData.from_dict reverses it
```

## Talking to hardware

```python
from mbrtu.protocol import Builder
from mbrtu.relay import RelayCommand, RelayData, RelayMode, request

builder = Builder("/dev/ttyUSB0", 9600)
reply = builder.call(request(0x02, RelayMode(RelayCommand.READ)))
print(RelayData.from_response(reply))
```

For write functions the device echoes the request, so `Builder.call`
returns the request itself without reading it back as a reply.

## Commands

Run simulated slaves on a serial port (default `/dev/ttyUSB1`, 9600 baud).
Requests for slave 1 are answered as a temperature controller, 2 as a relay
board, 3 and 4 as a power supply, and any other address as a voltage meter
with random readings. Frames no device expects are reported and ignored.

```
mbrtu-mock [--port PORT] [--baudrate BAUD]
```

Send one request to a device and print the decoded reply. `DEVICE` is one of
`voltage`, `temp`, `relay` (the default) or `power`; the default slave
addresses are 5, 1, 2 and 3. The `relay` request switches on relay 1.

```
mbrtu-read [DEVICE] [--port PORT] [--baudrate BAUD] [--slave N]
```

Both print every frame they send and receive as hex.

## What this package does not do

It speaks Modbus RTU over serial ports only. It has no graphical front end
and does not store readings anywhere; `VoltageData.to_dict()` is as far as it
goes toward saving data.