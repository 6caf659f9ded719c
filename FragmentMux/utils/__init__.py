# 29.09.26

from .config_json import config_manager
from .logger import Logger

__all__ = [
    "config_manager",
    "Logger"
]
