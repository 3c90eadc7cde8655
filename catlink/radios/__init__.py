"""
Radio capability tables.

Importing this package registers the built-in models:
- Yaesu FT-991A (ASCII)
- Icom IC-7300 (CI-V)
- Icom IC-905 (CI-V)
"""

from .base import (
    CTCSS_TONES,
    DCS_CODES,
    FRAME_SEPARATOR,
    REQUIRED_OPERATIONS,
    EncodingSpec,
    RadioModel,
    ValueKind,
    action,
    available_models,
    build_table,
    choice_get,
    choice_set,
    frequency_get,
    frequency_set,
    get_model,
    register_model,
)
from .yaesu import FT991A
from .icom import IC7300, IC905

__all__ = [
    "CTCSS_TONES",
    "DCS_CODES",
    "FRAME_SEPARATOR",
    "REQUIRED_OPERATIONS",
    "EncodingSpec",
    "RadioModel",
    "ValueKind",
    "action",
    "available_models",
    "build_table",
    "choice_get",
    "choice_set",
    "frequency_get",
    "frequency_set",
    "get_model",
    "register_model",
    "FT991A",
    "IC7300",
    "IC905",
]
