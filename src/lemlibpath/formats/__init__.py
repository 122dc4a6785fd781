"""Path file formats."""

from .base import Format, Host, convert_paths
from .lemlib_v0_4 import LemLibFormatV0_4
from .registry import get_all_formats, get_format, list_names, register_format

__all__ = [
    "Format",
    "Host",
    "LemLibFormatV0_4",
    "convert_paths",
    "get_all_formats",
    "get_format",
    "list_names",
    "register_format",
]
