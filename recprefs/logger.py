# recprefs/logger.py
from __future__ import annotations
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(lineno)4d | %(message)s"


class LogEmitter(QObject):
    message_written = pyqtSignal(str)


class QtHandler(logging.Handler):
    """Re-emits formatted records through a Qt signal for a log view."""

    def __init__(self):
        super().__init__()
        self.emitter = LogEmitter()

    def emit(self, record):
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        if message:
            self.emitter.message_written.emit(message)


qt_handler_instance = QtHandler()


def setup_logging(level: int = logging.INFO, log_dir: Optional[Path] = None):
    """Configure the root logger once. Later calls are no-ops."""
    root = logging.getLogger()
    if qt_handler_instance in root.handlers:
        return
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.handlers.RotatingFileHandler(
            log_dir / "recprefs.log", maxBytes=1024 * 1024, backupCount=3, encoding="utf-8"
        )
        fh.setFormatter(formatter)
        root.addHandler(fh)

    qt_handler_instance.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(qt_handler_instance)
