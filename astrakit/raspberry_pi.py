"""Hardware abstraction for Raspberry Pi boards running Linux.

Buses go through the kernel's character devices (``/dev/i2c-N``,
``/dev/spidev0.N``, ``/dev/ttyAMAN``). GPIO and PWM go through the sysfs
interfaces, with pins numbered as the kernel numbers them (BCM). System
information comes from ``/proc`` and ``/sys``, and networking from
shell commands.
"""

from __future__ import annotations

import array
import fcntl
import os
import shlex
import struct
import subprocess
import termios
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from .hal import HAL, I2CDevice, PinMode, PinValue, PlatformType, SPIDevice, UARTDevice

I2C_SLAVE = 0x0703


def _iow(number: int, size: int) -> int:
    return (1 << 30) | (size << 16) | (ord("k") << 8) | number


_SPI_TRANSFER = struct.Struct("=QQIIHBBBBBB")
SPI_IOC_WR_MODE = _iow(1, 1)
SPI_IOC_WR_BITS_PER_WORD = _iow(3, 1)
SPI_IOC_WR_MAX_SPEED_HZ = _iow(4, 4)
SPI_IOC_MESSAGE_1 = _iow(0, _SPI_TRANSFER.size)

_CRTSCTS = getattr(termios, "CRTSCTS", 0)
_BAUD_RATES = {
    9600: termios.B9600,
    19200: termios.B19200,
    38400: termios.B38400,
    57600: termios.B57600,
    115200: termios.B115200,
}
_DEFAULT_BAUD = 9600

# PWM-capable BCM pins and the pwmchip0 channel each drives.
_PWM_CHANNELS = {12: 0, 18: 0, 13: 1, 19: 1}

WPA_SUPPLICANT_CONF = "/etc/wpa_supplicant/wpa_supplicant.conf"

BytesLike = Union[int, bytes, bytearray, memoryview]
CommandRunner = Callable[[str], str]
AnalogReader = Callable[[int], int]


def _as_bytes(data: BytesLike) -> bytes:
    if isinstance(data, int):
        return bytes([data & 0xFF])
    return bytes(data)


def _run_shell(command: str) -> str:
    """Run a shell command and return what it wrote to standard output."""
    try:
        completed = subprocess.run(
            command, shell=True, capture_output=True, text=True, check=False
        )
    except OSError:
        return ""
    return completed.stdout


class _FdDevice:
    """Shared handling of an open file descriptor."""

    _fd: Optional[int] = None

    @property
    def initialized(self) -> bool:
        return self._fd is not None

    def _close(self) -> None:
        if self._fd is not None:
            try:
                os.close(self._fd)
            except OSError:
                pass
            self._fd = None

    def __del__(self) -> None:
        self._close()


class RaspberryPiI2CDevice(_FdDevice, I2CDevice):
    """An I2C slave reached through ``/dev/i2c-<bus>``."""

    def __init__(self, bus_num: int = 1, device_path: Optional[str] = None) -> None:
        self.device_path = device_path or f"/dev/i2c-{bus_num}"
        self.address = 0
        self._fd = None

    def begin(self, address: int) -> bool:
        self._close()
        self.address = address
        try:
            fd = os.open(self.device_path, os.O_RDWR)
        except OSError:
            return False
        try:
            fcntl.ioctl(fd, I2C_SLAVE, address)
        except OSError:
            os.close(fd)
            return False
        self._fd = fd
        return True

    def end(self) -> None:
        self._close()

    def write(self, data: BytesLike) -> bool:
        if self._fd is None:
            return False
        payload = _as_bytes(data)
        try:
            return os.write(self._fd, payload) == len(payload)
        except OSError:
            return False

    def read(self, length: int = 1) -> bytes:
        if self._fd is None:
            raise OSError("I2C device is not open")
        data = os.read(self._fd, length)
        if length == 1 and len(data) != 1:
            raise OSError("I2C read returned no data")
        return data

    def write_register(self, reg: int, data: int) -> bool:
        if self._fd is None:
            return False
        try:
            return os.write(self._fd, bytes([reg & 0xFF, data & 0xFF])) == 2
        except OSError:
            return False

    def read_register(self, reg: int) -> int:
        if self._fd is None:
            raise OSError("I2C device is not open")
        if os.write(self._fd, bytes([reg & 0xFF])) != 1:
            raise OSError("I2C register select failed")
        data = os.read(self._fd, 1)
        if len(data) != 1:
            raise OSError("I2C register read returned no data")
        return data[0]


class RaspberryPiSPIDevice(_FdDevice, SPIDevice):
    """An SPI device reached through ``/dev/spidev0.<bus>``."""

    def __init__(self, bus_num: int = 0, device_path: Optional[str] = None) -> None:
        self.device_path = device_path or f"/dev/spidev0.{bus_num}"
        self.cs_pin = 0
        self.mode = 0
        self.bits_per_word = 8
        self.speed = 1_000_000
        self.msb_first = True
        self._fd = None

    def begin(self, cs_pin: int) -> bool:
        self._close()
        self.cs_pin = cs_pin
        try:
            fd = os.open(self.device_path, os.O_RDWR)
        except OSError:
            return False
        try:
            fcntl.ioctl(fd, SPI_IOC_WR_MODE, struct.pack("B", self.mode))
            fcntl.ioctl(fd, SPI_IOC_WR_BITS_PER_WORD, struct.pack("B", self.bits_per_word))
            fcntl.ioctl(fd, SPI_IOC_WR_MAX_SPEED_HZ, struct.pack("I", self.speed))
        except OSError:
            os.close(fd)
            return False
        self._fd = fd
        return True

    def end(self) -> None:
        self._close()

    def set_clock_divider(self, divider: int) -> None:
        """Set the bus speed to 16 MHz divided by ``divider``."""
        if self._fd is None:
            return
        if divider <= 0:
            raise ValueError("clock divider must be positive")
        self.speed = 16_000_000 // divider
        try:
            fcntl.ioctl(self._fd, SPI_IOC_WR_MAX_SPEED_HZ, struct.pack("I", self.speed))
        except OSError:
            pass

    def set_data_mode(self, mode: int) -> None:
        if self._fd is None:
            return
        self.mode = mode & 0xFF
        try:
            fcntl.ioctl(self._fd, SPI_IOC_WR_MODE, struct.pack("B", self.mode))
        except OSError:
            pass

    def set_bit_order(self, msb_first: bool) -> None:
        """Record the requested order; spidev always sends the MSB first."""
        self.msb_first = bool(msb_first)

    def transfer(self, data: BytesLike) -> bytes:
        """Full-duplex transfer; zeros come back when the bus is unusable."""
        payload = _as_bytes(data)
        if self._fd is None or not payload:
            return bytes(len(payload))
        tx = array.array("B", payload)
        rx = array.array("B", bytes(len(payload)))
        request = _SPI_TRANSFER.pack(
            tx.buffer_info()[0],
            rx.buffer_info()[0],
            len(payload),
            self.speed,
            0,
            self.bits_per_word,
            0, 0, 0, 0, 0,
        )
        try:
            fcntl.ioctl(self._fd, SPI_IOC_MESSAGE_1, request)
        except OSError:
            return bytes(len(payload))
        return rx.tobytes()


class RaspberryPiUARTDevice(_FdDevice, UARTDevice):
    """A serial port reached through ``/dev/ttyAMA<port>``, set to raw 8N1."""

    def __init__(self, port_num: int = 0, device_path: Optional[str] = None) -> None:
        self.device_path = device_path or f"/dev/ttyAMA{port_num}"
        self.baud_rate = _DEFAULT_BAUD
        self._fd = None

    def begin(self, baud_rate: int) -> bool:
        """Open the port; unsupported rates fall back to 9600 baud."""
        self._close()
        try:
            fd = os.open(self.device_path, os.O_RDWR | os.O_NOCTTY | os.O_NDELAY)
        except OSError:
            return False
        self.baud_rate = baud_rate if baud_rate in _BAUD_RATES else _DEFAULT_BAUD
        self._configure(fd, _BAUD_RATES[self.baud_rate])
        self._fd = fd
        return True

    @staticmethod
    def _configure(fd: int, speed: int) -> None:
        try:
            iflag, oflag, cflag, lflag, _, _, cc = termios.tcgetattr(fd)
        except termios.error:
            return
        cflag &= ~(termios.PARENB | termios.CSTOPB | termios.CSIZE | _CRTSCTS)
        cflag |= termios.CS8 | termios.CREAD | termios.CLOCAL
        lflag &= ~(termios.ICANON | termios.ECHO | termios.ECHOE | termios.ISIG)
        oflag &= ~termios.OPOST
        try:
            termios.tcsetattr(fd, termios.TCSANOW, [iflag, oflag, cflag, lflag, speed, speed, cc])
        except termios.error:
            pass

    def end(self) -> None:
        self._close()

    def available(self) -> int:
        if self._fd is None:
            return 0
        try:
            result = fcntl.ioctl(self._fd, termios.FIONREAD, struct.pack("i", 0))
        except OSError:
            return 0
        return struct.unpack("i", result)[0]

    def read(self, length: int = 1) -> bytes:
        if self._fd is None:
            return b""
        try:
            return os.read(self._fd, length)
        except OSError:
            return b""

    def write(self, data: BytesLike) -> int:
        if self._fd is None:
            return 0
        try:
            return os.write(self._fd, _as_bytes(data))
        except OSError:
            return 0

    def flush(self) -> None:
        if self._fd is None:
            return
        try:
            termios.tcdrain(self._fd)
        except termios.error:
            pass


class RaspberryPiHAL(HAL):
    """The HAL for a Raspberry Pi; every system path can be redirected."""

    def __init__(
        self,
        *,
        model_path: str = "/proc/device-tree/model",
        thermal_path: str = "/sys/class/thermal/thermal_zone0/temp",
        meminfo_path: str = "/proc/meminfo",
        gpio_root: str = "/sys/class/gpio",
        pwm_root: str = "/sys/class/pwm/pwmchip0",
        run_command: CommandRunner = _run_shell,
        wifi_settle_ms: int = 5000,
        analog_reader: Optional[AnalogReader] = None,
    ) -> None:
        self._model_path = Path(model_path)
        self._thermal_path = Path(thermal_path)
        self._meminfo_path = Path(meminfo_path)
        self._gpio_root = Path(gpio_root)
        self._pwm_root = Path(pwm_root)
        self._run = run_command
        self._wifi_settle_ms = wifi_settle_ms
        self._analog_reader = analog_reader
        self.analog_write_bits = 10
        self.analog_read_bits = 10
        self.pwm_frequencies: Dict[int, int] = {}
        self.i2c_device: I2CDevice = RaspberryPiI2CDevice()
        self.spi_device: SPIDevice = RaspberryPiSPIDevice()
        self.uart_device: UARTDevice = RaspberryPiUARTDevice()

    # Platform information

    def platform_type(self) -> PlatformType:
        return PlatformType.RASPBERRY_PI

    def platform_name(self) -> str:
        return "Raspberry Pi"

    def version_string(self) -> str:
        try:
            with self._model_path.open(encoding="utf-8", errors="replace") as handle:
                return handle.readline().rstrip("\n").rstrip("\x00")
        except OSError:
            return "Raspberry Pi (Unknown Model)"

    # Time

    def millis(self) -> int:
        return (time.monotonic_ns() // 1_000_000) & 0xFFFFFFFF

    def micros(self) -> int:
        return (time.monotonic_ns() // 1_000) & 0xFFFFFFFF

    def delay(self, ms: int) -> None:
        time.sleep(ms / 1000.0)

    def delay_microseconds(self, us: int) -> None:
        time.sleep(us / 1_000_000.0)

    # GPIO

    @staticmethod
    def _write(path: Path, text: str) -> bool:
        try:
            path.write_text(text)
            return True
        except OSError:
            return False

    def pin_mode(self, pin: int, mode: PinMode) -> None:
        """Configure a pin; the kernel interface has no pull resistor control."""
        if mode == PinMode.PWM_OUTPUT:
            self._enable_pwm(pin)
            return
        if not (self._gpio_root / f"gpio{pin}").exists():
            self._write(self._gpio_root / "export", str(pin))
        direction = "out" if mode == PinMode.OUTPUT else "in"
        self._write(self._gpio_root / f"gpio{pin}" / "direction", direction)

    def digital_write(self, pin: int, value: PinValue) -> None:
        text = "1" if value == PinValue.HIGH else "0"
        self._write(self._gpio_root / f"gpio{pin}" / "value", text)

    def digital_read(self, pin: int) -> PinValue:
        try:
            text = (self._gpio_root / f"gpio{pin}" / "value").read_text().strip()
        except OSError:
            return PinValue.LOW
        return PinValue.HIGH if text == "1" else PinValue.LOW

    def analog_read(self, pin: int) -> int:
        """Read through an external ADC reader if one was given, else 0.

        The board has no ADC of its own.
        """
        if self._analog_reader is None:
            return 0
        return int(self._analog_reader(pin)) & 0xFFFF

    def analog_write(self, pin: int, value: int) -> None:
        self.pwm_write(pin, value)

    def analog_write_resolution(self, bits: int) -> None:
        """Record the requested resolution; output stays 10-bit on this board."""
        self.analog_write_bits = bits

    def analog_read_resolution(self, bits: int) -> None:
        """Record the requested resolution; the board has no ADC to set."""
        self.analog_read_bits = bits

    # PWM

    def _enable_pwm(self, pin: int) -> None:
        channel = _PWM_CHANNELS.get(pin)
        if channel is None:
            return
        if not (self._pwm_root / f"pwm{channel}").exists():
            self._write(self._pwm_root / "export", str(channel))
        self._write(self._pwm_root / f"pwm{channel}" / "enable", "1")

    def pwm_write(self, pin: int, value: int) -> None:
        """Set the duty cycle from a 10-bit value (0-1023)."""
        channel = _PWM_CHANNELS.get(pin)
        if channel is None:
            return
        value &= 0x3FF
        channel_dir = self._pwm_root / f"pwm{channel}"
        try:
            period = int((channel_dir / "period").read_text().strip())
        except (OSError, ValueError):
            return
        self._write(channel_dir / "duty_cycle", str(period * value // 1024))

    def pwm_frequency(self, pin: int, frequency: int) -> None:
        """Record the requested frequency; the hardware period is left as is."""
        self.pwm_frequencies[pin] = frequency

    # Communication interfaces

    def get_i2c(self, bus_num: int = 0) -> I2CDevice:
        self.i2c_device = RaspberryPiI2CDevice(bus_num)
        return self.i2c_device

    def get_spi(self, bus_num: int = 0) -> SPIDevice:
        self.spi_device = RaspberryPiSPIDevice(bus_num)
        return self.spi_device

    def get_uart(self, port_num: int = 0) -> UARTDevice:
        self.uart_device = RaspberryPiUARTDevice(port_num)
        return self.uart_device

    # System

    def reboot(self) -> None:
        self._run("sudo reboot")

    def cpu_temperature(self) -> float:
        try:
            text = self._thermal_path.read_text().split()[0]
            return int(text) / 1000.0
        except (OSError, ValueError, IndexError):
            return 0.0

    def supply_voltage(self) -> float:
        return 0.0

    def free_memory(self) -> int:
        try:
            with self._meminfo_path.open() as handle:
                for line in handle:
                    if "MemAvailable:" in line:
                        return int(line.split()[1]) * 1024
        except (OSError, ValueError, IndexError):
            pass
        return 0

    # File system

    def has_file_system(self) -> bool:
        return True

    def file_exists(self, path: str) -> bool:
        return os.path.exists(path)

    def read_file(self, path: str) -> str:
        with open(path, encoding="utf-8") as handle:
            return handle.read()

    def write_file(self, path: str, data: str) -> bool:
        try:
            with open(path, "w", encoding="utf-8") as handle:
                handle.write(data)
            return True
        except OSError:
            return False

    def append_file(self, path: str, data: str) -> bool:
        try:
            with open(path, "a", encoding="utf-8") as handle:
                handle.write(data)
            return True
        except OSError:
            return False

    def remove_file(self, path: str) -> bool:
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                os.rmdir(path)
            else:
                os.remove(path)
            return True
        except OSError:
            return False

    def list_directory(self, path: str) -> List[str]:
        try:
            return os.listdir(path)
        except OSError:
            return []

    # Network

    def has_network(self) -> bool:
        return True

    def connect_wifi(self, ssid: str, password: str) -> bool:
        """Append a network to wpa_supplicant, reconfigure and wait for it."""
        self._run(
            f"wpa_passphrase {shlex.quote(ssid)} {shlex.quote(password)}"
            f" | sudo tee -a {WPA_SUPPLICANT_CONF} > /dev/null"
        )
        self._run("sudo wpa_cli -i wlan0 reconfigure")
        self.delay(self._wifi_settle_ms)
        return self.is_wifi_connected()

    def is_wifi_connected(self) -> bool:
        return bool(self._run("ifconfig wlan0 | grep 'inet '"))

    def ip_address(self) -> str:
        output = self._run("hostname -I | awk '{print $1}'")
        return output[:-1] if output.endswith("\n") else output

    def http_get(self, url: str) -> str:
        response = self._run(shlex.join(["curl", "-s", url]))
        if not response:
            raise OSError(f"GET {url} returned no response")
        return response

    def http_post(self, url: str, data: str) -> str:
        response = self._run(
            shlex.join(
                ["curl", "-s", "-X", "POST", "-H", "Content-Type: application/json", "-d", data, url]
            )
        )
        if not response:
            raise OSError(f"POST {url} returned no response")
        return response