import pytest

from astrakit.hal import HAL, I2CDevice, PinMode, PinValue, PlatformType, SPIDevice, UARTDevice

HAL_METHODS = {
    "platform_type", "platform_name", "version_string", "millis", "micros",
    "delay", "delay_microseconds", "pin_mode", "digital_write", "digital_read",
    "analog_read", "analog_write", "analog_write_resolution",
    "analog_read_resolution", "pwm_write", "pwm_frequency", "get_i2c",
    "get_spi", "get_uart", "reboot", "cpu_temperature", "supply_voltage",
    "free_memory", "has_file_system", "file_exists", "read_file", "write_file",
    "append_file", "remove_file", "list_directory", "has_network",
    "connect_wifi", "is_wifi_connected", "ip_address", "http_get", "http_post",
}


@pytest.mark.parametrize("cls", [I2CDevice, SPIDevice, UARTDevice, HAL])
def test_interfaces_cannot_be_instantiated(cls):
    with pytest.raises(TypeError):
        cls()


def test_hal_abstract_methods():
    with pytest.raises(TypeError) as info:
        HAL()
    message = str(info.value)
    for name in HAL_METHODS:
        assert name in message


@pytest.mark.parametrize(
    ("cls", "names"),
    [
        (I2CDevice, {"begin", "end", "write", "read", "write_register", "read_register"}),
        (SPIDevice, {"begin", "end", "set_clock_divider", "set_data_mode",
                     "set_bit_order", "transfer"}),
        (UARTDevice, {"begin", "end", "available", "read", "write", "flush"}),
    ],
)
def test_device_abstract_methods(cls, names):
    with pytest.raises(TypeError) as info:
        cls()
    message = str(info.value)
    for name in names:
        assert name in message


def _complete_hal_class():
    namespace = {name: (lambda self, *a, _n=name: (_n, a)) for name in HAL_METHODS}
    return type("RecordingHAL", (HAL,), namespace)


def test_complete_subclass_instantiates():
    hal = _complete_hal_class()()
    mode = PinMode(PinMode.OUTPUT.value)
    assert hal.pin_mode(3, mode) == ("pin_mode", (3, PinMode.OUTPUT))
    value = PinValue(PinValue.HIGH.value)
    assert hal.digital_write(5, value) == ("digital_write", (5, PinValue.HIGH))


def test_partial_subclass_is_still_abstract():
    namespace = {name: (lambda self, *a: None) for name in HAL_METHODS - {"http_post"}}
    partial = type("PartialHAL", (HAL,), namespace)
    with pytest.raises(TypeError) as partial_info:
        partial()
    with pytest.raises(TypeError) as base_info:
        HAL()
    assert "http_post" in str(partial_info.value)
    assert "pin_mode" not in str(partial_info.value)
    assert "pin_mode" in str(base_info.value)


def test_enum_order_follows_declaration():
    assert list(PlatformType)[0] is PlatformType.UNKNOWN
    assert PlatformType(PlatformType.RASPBERRY_PI.value).name == "RASPBERRY_PI"
    assert [m.name for m in PinValue] == ["LOW", "HIGH"]
    assert PinValue.LOW < PinValue.HIGH
    assert len(PinMode) == 16
    assert list(PinMode)[-1] is PinMode.UART_RX