"""Choose the HAL implementation for the machine the program runs on."""

from __future__ import annotations

from typing import Optional

from .hal import HAL
from .raspberry_pi import RaspberryPiHAL

DEFAULT_MODEL_PATH = "/proc/device-tree/model"


def get_hal(model_path: str = DEFAULT_MODEL_PATH) -> Optional[HAL]:
    """Return the HAL for this board, or None when no implementation fits.

    A Raspberry Pi is recognised by its device-tree model string.
    """
    try:
        with open(model_path, encoding="utf-8", errors="replace") as handle:
            model = handle.readline()
    except OSError:
        return None
    if "Raspberry Pi" in model:
        return RaspberryPiHAL(model_path=model_path)
    return None