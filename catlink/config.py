"""
Serial configuration loading.

Reads the JSON files used by the CAT service layer, e.g.::

    {"portName": "COM3", "baudRate": 38400, "parity": "None",
     "stopBits": "One", "handshake": "None", "readTimeoutMs": 1000}
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

from .exceptions import ValidationError
from .types import SerialConfig

logger = logging.getLogger(__name__)


def load_serial_config(path: Union[str, Path], **overrides: Any) -> SerialConfig:
    """
    Load a SerialConfig from a JSON file.

    A top-level ``"serialPort"`` (or ``"serial"``) object is used if present,
    otherwise the whole document.

    Args:
        path: JSON file path
        **overrides: Non-None values replacing those from the file

    Returns:
        Validated SerialConfig

    Raises:
        ValidationError: If the file is unreadable, not JSON, or invalid
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(f"Cannot read serial config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError(f"Serial config {path} must be a JSON object")

    for key in ("serialPort", "serial_port", "serial"):
        if isinstance(data.get(key), dict):
            data = data[key]
            break

    config = SerialConfig.from_dict(data, **overrides)
    logger.info(f"Loaded serial config for {config.port} from {path}")
    return config
