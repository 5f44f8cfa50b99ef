"""
Type aliases shared by the listing components.

The loggers passed around are either plain loggers or adapters over them.
The adapters are generic in the type stubs only, not at runtime.
"""
import logging
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    LoggerAdapter = logging.LoggerAdapter[Any]
else:
    LoggerAdapter = logging.LoggerAdapter

Logger = Union[logging.Logger, LoggerAdapter]
