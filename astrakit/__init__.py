"""Math functions, runtime services and a hardware abstraction layer with a Raspberry Pi implementation."""

__version__ = "0.1.0"
__all__ = ["factory", "hal", "mathlib", "raspberry_pi", "runtime"]