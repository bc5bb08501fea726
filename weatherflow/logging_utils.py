# weatherflow/logging_utils.py
import logging
import re

from .config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] - %(message)s"
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite", "asyncpg")


class OneLineFormatter(logging.Formatter):
    """Keeps each record, traceback included, on a single line."""

    _whitespace = re.compile(r"\s+")

    def __init__(self, max_len: int = 0):
        super().__init__(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
        self.max_len = max_len

    def format(self, record: logging.LogRecord) -> str:
        line = self._whitespace.sub(" ", super().format(record)).strip()
        if self.max_len and len(line) > self.max_len:
            return f"{line[: self.max_len]} ...(truncated)"
        return line


def setup_logging(settings: Settings) -> None:
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    # an application server or test runner may already own the root handlers
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(OneLineFormatter(max_len=settings.LOG_MAX_LEN))
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, level))
