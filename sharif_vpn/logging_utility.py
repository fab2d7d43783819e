import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional


class Logger:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._setup_logger()
        return cls._instance

    def _setup_logger(self):
        self.logger = logging.getLogger('SharifVPN')
        self.logger.setLevel(logging.INFO)
        self.logger.propagate = False
        self.file_handler: Optional[RotatingFileHandler] = None

        # Progress goes to stderr so stdout stays clean for callers
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(logging.Formatter('[%(asctime)s] %(message)s',
                                                      datefmt='%Y-%m-%d %H:%M:%S'))
        self.logger.addHandler(stream_handler)

    def add_file(self, log_file: str):
        """Also write detailed records to a size-limited log file."""
        if self.file_handler is not None:
            return
        log_dir = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(log_dir, exist_ok=True)

        # Use RotatingFileHandler to limit log file size
        self.file_handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024,
                                                backupCount=3)
        formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(name)s:%(lineno)d - %(pathname)s - %(message)s')
        self.file_handler.setFormatter(formatter)

        self.logger.addHandler(self.file_handler)

    def get_logger(self):
        return self.logger


logger = Logger().get_logger()
