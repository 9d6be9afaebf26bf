# astrakit

A small toolkit for embedded scripting work, in five modules:

- **`astrakit.mathlib`** – numeric functions and constants. Integers stay
  integers where the operation allows it (`abs`, `sign`, `min`, `max`,
  `floor`, `ceil`, `round`, `trunc`, `clamp`); everything else works in
  floating point and follows IEEE rules, so a domain error gives NaN and an
  overflow gives an infinity instead of an exception.
- **`astrakit.runtime`** – a worker-thread `TaskScheduler`, an
  allocation-counting `MemoryManager`, a stopwatch `Timer`, a named-event
  `EventSystem`, and a `Runtime` that holds one of each.
- **`astrakit.hal`** – the hardware abstraction interface: the enums
  `PlatformType`, `PinMode` and `PinValue`, and the abstract classes
  `I2CDevice`, `SPIDevice`, `UARTDevice` and `HAL`.
- **`astrakit.raspberry_pi`** – an implementation of that interface for
  Raspberry Pi boards running Linux.
- **`astrakit.factory`** – `get_hal`, which picks the implementation that
  fits the board.

There are no dependencies outside the standard library. The hardware
modules use `fcntl` and `termios`, so they need a POSIX system.

## Math

```python
from astrakit import mathlib

mathlib.abs(-5)            # 5
mathlib.min(3, 5, 7)       # 3
mathlib.max(3, 5, 7)       # 7
mathlib.pow(2, 3)          # 8.0
mathlib.sqrt(-1)           # nan
mathlib.clamp(15, 0, 10)   # 10
mathlib.lerp(0, 10, 0.5)   # 5.0
mathlib.round(2.5)         # 3.0 (halves round away from zero)

mathlib.set_seed(42)
mathlib.random_int(1, 10)       # an integer from 1 to 10 inclusive
mathlib.random_float(5.0, 1.0)  # bounds may be given in either order
```

A non-numeric argument raises `TypeError` with a message naming the
function, for example `Math.sqrt expects numeric arguments`; `min()` and
`max()` with no arguments raise `TypeError` as well. `is_nan`,
`is_infinite` and `is_finite` accept any value and return `False` for
non-numbers (integers are always finite).

The constants `PI`, `E`, `SQRT2`, `INFINITY` and `NAN` are module
attributes. `build_namespace()` returns a dict of every constant and
function under its scripting name (`PI`, `randomInt`, `smoothStep`,
`isNaN`, ...), ready to be exposed to an embedded language.

## Runtime

```python
from astrakit.runtime import EventSystem, MemoryManager, Runtime, TaskScheduler, Timer

with TaskScheduler(num_threads=2) as scheduler:
    scheduler.enqueue(lambda: print("ran in a worker"))
# leaving the block runs every queued task and joins the workers

memory = MemoryManager()
block = memory.allocate(1024)   # a zeroed bytearray
memory.total_allocated()        # 1024
memory.deallocate(block)
memory.total_allocated()        # 0
memory.max_allocated()          # 1024

timer = Timer()
timer.start()
# ... work ...
timer.stop()
timer.elapsed_milliseconds()

events = EventSystem()
events.add_event_listener("ready", lambda data: print("got", data))
events.dispatch_event("ready", 42)
events.remove_event_listener("ready")   # drops every handler for "ready"
```

- `TaskScheduler()` starts one worker per CPU by default. An exception in
  a task is logged and the worker carries on. `enqueue` after `shutdown`
  raises `RuntimeError`.
- `MemoryManager.deallocate` raises `ValueError` for a buffer it did not
  hand out.
- `Timer.elapsed_milliseconds()` measures up to now while the timer runs
  and returns `0.0` before it has been started.
- `Runtime(num_threads=None)` has the attributes `scheduler`,
  `memory_manager`, `event_system` and `timer`; its timer starts when it
  is built. It is a context manager, and `close()` shuts the scheduler
  down.

## Hardware

```python
from astrakit.factory import get_hal
from astrakit.hal import PinMode, PinValue

hal = get_hal()   # reads /proc/device-tree/model by default
if hal is not None:
    hal.pin_mode(17, PinMode.OUTPUT)
    hal.digital_write(17, PinValue.HIGH)
    print(hal.platform_name(), hal.version_string())
    print(hal.cpu_temperature(), hal.free_memory())
```

`get_hal(model_path)` returns a `RaspberryPiHAL` when the device-tree model
string contains "Raspberry Pi", and `None` otherwise.

`RaspberryPiHAL` works as follows:

- **GPIO** goes through `/sys/class/gpio`, with kernel (BCM) pin numbers.
  The pull-up and pull-down modes set the pin as an input only.
- **PWM** goes through `/sys/class/pwm/pwmchip0` on pins 12, 13, 18 and
  19. `pwm_write` and `analog_write` take a 10-bit duty value (0–1023);
  `pwm_frequency` and the resolution setters only record what was asked.
- **Analog input**: the board has no ADC, so `analog_read` returns 0
  unless an `analog_reader` callable was passed to the constructor.
- **Buses**: `get_i2c`, `get_spi` and `get_uart` return
  `RaspberryPiI2CDevice` (`/dev/i2c-N`), `RaspberryPiSPIDevice`
  (`/dev/spidev0.N`) and `RaspberryPiUARTDevice` (`/dev/ttyAMAN`, raw
  8N1; rates other than 9600, 19200, 38400, 57600 and 115200 fall back to
  9600). Each is opened with `begin` and released with `end`; reads and
  writes take and return `bytes`.
- **System**: temperature comes from the thermal zone, free memory from
  `MemAvailable` in `/proc/meminfo`; `supply_voltage` is always 0.0.
  `reboot` runs `sudo reboot`.
- **Files** are ordinary local files; `read_file` raises `OSError` when
  the file cannot be read.
- **Network** uses shell commands: `wpa_passphrase` and `wpa_cli` for
  `connect_wifi`, `ifconfig` and `hostname -I` for the status and address,
  and `curl` for `http_get` and `http_post`, which raise `OSError` when
  there is no response.

Every system path, the command runner (`run_command`) and the Wi-Fi wait
(`wifi_settle_ms`) are keyword arguments of the constructor, so the class
can be pointed at a test directory or a fake shell.

## What it does not do

The package provides no scripting-language interpreter and installs no
command; `mathlib` and `runtime` are the building blocks one would embed in
such an interpreter. Only a Raspberry Pi implementation of the HAL is
included: on any other machine `get_hal` returns `None`.