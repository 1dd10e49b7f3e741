# core/contact_log.py
"""
Best-effort diagnostic log for the contact relay.

When LOG_FILE is set in the mail configuration, each event is appended as
``[YYYY-MM-DD HH:MM:SS] <message>`` to that file, resolved against the
project root. Write failures never reach the request.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional, Union

logger = logging.getLogger(__name__)

LOG_LINE_FORMAT = '[%(asctime)s] %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class QuietFileHandler(logging.FileHandler):
    """Append-only file handler that reports write errors without raising"""

    def handleError(self, record):
        logger.debug(f"Could not append to contact log {self.baseFilename}")


class ContactLog:
    """Per-request writer for the LOG_FILE diagnostic log"""

    def __init__(self, env: Mapping[str, str], project_root: Union[str, Path]):
        log_file = env.get('LOG_FILE') or ''
        # always under the project root, even for a leading slash
        self.path: Optional[Path] = Path(project_root) / log_file.lstrip('/\\') if log_file else None

    @property
    def enabled(self) -> bool:
        return self.path is not None

    def write(self, message: str) -> None:
        """Record a diagnostic event"""
        logger.warning(message)

        if not self.enabled:
            return

        try:
            handler = QuietFileHandler(self.path, mode='a', encoding='utf-8')
        except (OSError, ValueError) as e:
            logger.debug(f"Contact log unavailable at {self.path}: {e}")
            return

        handler.setFormatter(logging.Formatter(fmt=LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT))

        record = logging.LogRecord(__name__, logging.INFO, __file__, 0, message, None, None)
        try:
            handler.handle(record)
        finally:
            handler.close()
