"""The hardware abstraction layer: a common interface to GPIO, buses,
system information, storage and networking on every supported platform."""

from __future__ import annotations

import abc
import enum
from typing import List


class PlatformType(enum.IntEnum):
    UNKNOWN = 0
    ARDUINO = 1
    RASPBERRY_PI = 2
    ESP32 = 3
    STM32 = 4
    LINUX = 5
    WINDOWS = 6
    MACOS = 7


class PinMode(enum.IntEnum):
    INPUT = 0
    OUTPUT = 1
    INPUT_PULLUP = 2
    INPUT_PULLDOWN = 3
    ANALOG_INPUT = 4
    ANALOG_OUTPUT = 5
    PWM_OUTPUT = 6
    SERVO_OUTPUT = 7
    I2C_SDA = 8
    I2C_SCL = 9
    SPI_MOSI = 10
    SPI_MISO = 11
    SPI_SCK = 12
    SPI_CS = 13
    UART_TX = 14
    UART_RX = 15


class PinValue(enum.IntEnum):
    LOW = 0
    HIGH = 1


class I2CDevice(abc.ABC):
    """A device on an I2C bus addressed by a 7-bit address."""

    @abc.abstractmethod
    def begin(self, address: int) -> bool:
        """Open the bus for ``address``; True on success."""

    @abc.abstractmethod
    def end(self) -> None:
        """Release the bus."""

    @abc.abstractmethod
    def write(self, data: bytes) -> bool:
        """Send bytes; True when all were written."""

    @abc.abstractmethod
    def read(self, length: int = 1) -> bytes:
        """Read up to ``length`` bytes; raises OSError on failure."""

    @abc.abstractmethod
    def write_register(self, reg: int, data: int) -> bool:
        """Write one byte to a register; True on success."""

    @abc.abstractmethod
    def read_register(self, reg: int) -> int:
        """Read one byte from a register; raises OSError on failure."""


class SPIDevice(abc.ABC):
    """A device on an SPI bus selected by a chip-select pin."""

    @abc.abstractmethod
    def begin(self, cs_pin: int) -> bool:
        """Open the bus; True on success."""

    @abc.abstractmethod
    def end(self) -> None:
        """Release the bus."""

    @abc.abstractmethod
    def set_clock_divider(self, divider: int) -> None:
        """Set the bus clock as a divider of the platform base clock."""

    @abc.abstractmethod
    def set_data_mode(self, mode: int) -> None:
        """Set the SPI mode (0-3)."""

    @abc.abstractmethod
    def set_bit_order(self, msb_first: bool) -> None:
        """Choose most- or least-significant bit first."""

    @abc.abstractmethod
    def transfer(self, data: bytes) -> bytes:
        """Clock out ``data`` and return the bytes clocked in."""


class UARTDevice(abc.ABC):
    """A serial port."""

    @abc.abstractmethod
    def begin(self, baud_rate: int) -> bool:
        """Open the port at ``baud_rate``; True on success."""

    @abc.abstractmethod
    def end(self) -> None:
        """Close the port."""

    @abc.abstractmethod
    def available(self) -> int:
        """Number of bytes waiting to be read."""

    @abc.abstractmethod
    def read(self, length: int = 1) -> bytes:
        """Read up to ``length`` bytes."""

    @abc.abstractmethod
    def write(self, data: bytes) -> int:
        """Send bytes and return how many were written."""

    @abc.abstractmethod
    def flush(self) -> None:
        """Wait until all output has been sent."""


class HAL(abc.ABC):
    """The interface every platform implementation provides."""

    # Platform information
    @abc.abstractmethod
    def platform_type(self) -> PlatformType: ...

    @abc.abstractmethod
    def platform_name(self) -> str: ...

    @abc.abstractmethod
    def version_string(self) -> str: ...

    # Time
    @abc.abstractmethod
    def millis(self) -> int:
        """Milliseconds from a monotonic clock, wrapped to 32 bits."""

    @abc.abstractmethod
    def micros(self) -> int:
        """Microseconds from a monotonic clock, wrapped to 32 bits."""

    @abc.abstractmethod
    def delay(self, ms: int) -> None: ...

    @abc.abstractmethod
    def delay_microseconds(self, us: int) -> None: ...

    # GPIO
    @abc.abstractmethod
    def pin_mode(self, pin: int, mode: PinMode) -> None: ...

    @abc.abstractmethod
    def digital_write(self, pin: int, value: PinValue) -> None: ...

    @abc.abstractmethod
    def digital_read(self, pin: int) -> PinValue: ...

    @abc.abstractmethod
    def analog_read(self, pin: int) -> int: ...

    @abc.abstractmethod
    def analog_write(self, pin: int, value: int) -> None: ...

    @abc.abstractmethod
    def analog_write_resolution(self, bits: int) -> None: ...

    @abc.abstractmethod
    def analog_read_resolution(self, bits: int) -> None: ...

    # PWM
    @abc.abstractmethod
    def pwm_write(self, pin: int, value: int) -> None: ...

    @abc.abstractmethod
    def pwm_frequency(self, pin: int, frequency: int) -> None: ...

    # Communication interfaces
    @abc.abstractmethod
    def get_i2c(self, bus_num: int = 0) -> I2CDevice: ...

    @abc.abstractmethod
    def get_spi(self, bus_num: int = 0) -> SPIDevice: ...

    @abc.abstractmethod
    def get_uart(self, port_num: int = 0) -> UARTDevice: ...

    # System
    @abc.abstractmethod
    def reboot(self) -> None: ...

    @abc.abstractmethod
    def cpu_temperature(self) -> float:
        """CPU temperature in degrees Celsius, 0.0 when unknown."""

    @abc.abstractmethod
    def supply_voltage(self) -> float:
        """Supply voltage in volts, 0.0 when unknown."""

    @abc.abstractmethod
    def free_memory(self) -> int:
        """Free memory in bytes, 0 when unknown."""

    # File system
    @abc.abstractmethod
    def has_file_system(self) -> bool: ...

    @abc.abstractmethod
    def file_exists(self, path: str) -> bool: ...

    @abc.abstractmethod
    def read_file(self, path: str) -> str:
        """Contents of ``path``; raises OSError when it cannot be read."""

    @abc.abstractmethod
    def write_file(self, path: str, data: str) -> bool: ...

    @abc.abstractmethod
    def append_file(self, path: str, data: str) -> bool: ...

    @abc.abstractmethod
    def remove_file(self, path: str) -> bool: ...

    @abc.abstractmethod
    def list_directory(self, path: str) -> List[str]: ...

    # Network
    @abc.abstractmethod
    def has_network(self) -> bool: ...

    @abc.abstractmethod
    def connect_wifi(self, ssid: str, password: str) -> bool: ...

    @abc.abstractmethod
    def is_wifi_connected(self) -> bool: ...

    @abc.abstractmethod
    def ip_address(self) -> str:
        """The local IP address, empty when not connected."""

    @abc.abstractmethod
    def http_get(self, url: str) -> str:
        """Response body; raises OSError when the request fails."""

    @abc.abstractmethod
    def http_post(self, url: str, data: str) -> str:
        """Response body of a JSON POST; raises OSError when it fails."""