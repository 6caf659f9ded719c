# 29.09.26

import os
import logging


# External library
from rich.logging import RichHandler


# Internal utilities
from .config_json import config_manager


class Logger:
    _instance = None

    def __new__(cls):
        # Configure the root logger only once per process
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True

        self.debug_mode = config_manager.config.get_bool("DEFAULT", "debug")
        self.log_to_file = config_manager.config.get_bool("DEFAULT", "log_to_file")
        self.log_file = config_manager.config.get("DEFAULT", "log_file")

        self.logger = logging.getLogger("")
        self.logger.setLevel(logging.DEBUG if self.debug_mode else logging.INFO)

        console_handler = RichHandler(level=self.logger.level, show_path=self.debug_mode, markup=False, rich_tracebacks=True)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        self.logger.addHandler(console_handler)

        if self.log_to_file and self.log_file:
            self._configure_file_logging()

    def _configure_file_logging(self):
        """Append every record (DEBUG included) to the configured log file."""
        log_dir = os.path.dirname(os.path.abspath(self.log_file))
        os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        self.logger.addHandler(file_handler)
