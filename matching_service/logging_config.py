"""
Logging setup for the matching service.

Candidate reads run on worker threads, so every record is pushed onto a
queue and a single listener writes it out. Werkzeug access lines and other
chatty libraries are muted unless debug logging is on.
"""

import logging
import logging.handlers
import sys
from queue import Queue
from typing import IO, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"

QUIET_LOGGERS = ("werkzeug", "urllib3", "asyncio", "concurrent.futures")


class AccessLogFilter(logging.Filter):
    """Drops werkzeug's one-line-per-request access log."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not (record.name or "").startswith("werkzeug"):
            return True
        message = record.getMessage()
        return not ('"GET ' in message or '"POST ' in message)


class ThreadSafeLoggingConfig:
    """Owns the queue listener behind the root logger."""

    def __init__(self):
        self._listener: Optional[logging.handlers.QueueListener] = None

    @property
    def running(self) -> bool:
        return self._listener is not None

    def setup_logging(self, debug: bool = False, stream: Optional[IO[str]] = None) -> None:
        """
        Route the root logger through a queue.

        Args:
            debug: Log at DEBUG and keep third-party loggers untouched
            stream: Output stream, stdout when omitted
        """
        self.stop()

        log_queue: Queue = Queue()
        output = logging.StreamHandler(stream or sys.stdout)
        output.setFormatter(logging.Formatter(LOG_FORMAT))
        if not debug:
            output.addFilter(AccessLogFilter())

        self._listener = logging.handlers.QueueListener(log_queue, output, respect_handler_level=True)
        self._listener.start()

        root = logging.getLogger()
        root.handlers.clear()
        root.addHandler(logging.handlers.QueueHandler(log_queue))
        root.setLevel(logging.DEBUG if debug else logging.INFO)

        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.NOTSET if debug else logging.WARNING)

    def stop(self) -> None:
        """Flush pending records and detach the listener."""
        if self._listener is not None:
            self._listener.stop()
            self._listener = None


# Global logging configuration instance
logging_config = ThreadSafeLoggingConfig()


def setup_logging(debug: bool = False, stream: Optional[IO[str]] = None) -> None:
    logging_config.setup_logging(debug, stream)


def stop_logging() -> None:
    logging_config.stop()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
