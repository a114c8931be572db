"""
Logging do executor.

Os registros vão para <log_dir>/<prefix>.<YYYYMMDD>.log, no formato logfmt:

    time="2024-05-01T10:00:00+00:00" level=info msg="..." campo="valor"

O arquivo é resolvido pela data corrente a cada registro, sob o lock do handler
(um único escritor por processo). Se o arquivo não puder ser aberto, o handler
passa a escrever no stream de fallback (stderr) e o serviço continua atendendo;
uma nova tentativa é feita após LOG_RETRY_SECONDS ou na virada do dia.
"""
import logging
import os
import sys
import time
from datetime import datetime
from typing import Callable, Optional, TextIO

from .constants import LOG_FILE_PREFIX, LOG_RETRY_SECONDS
from .errors import LogSinkError

LOGGER_NAME = 'am_executor'

_LEVELS = {
    logging.DEBUG: 'debug',
    logging.INFO: 'info',
    logging.WARNING: 'warning',
    logging.ERROR: 'error',
    logging.CRITICAL: 'fatal',
}


def _quote(value) -> str:
    text = str(value).replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n')
    return f'"{text}"'


class LogfmtFormatter(logging.Formatter):
    """Campos extras via `extra={'fields': {...}}`, em ordem alfabética."""

    def format(self, record):
        created = datetime.fromtimestamp(record.created).astimezone()
        parts = [
            f"time={_quote(created.isoformat(timespec='seconds'))}",
            f"level={_LEVELS.get(record.levelno, record.levelname.lower())}",
            f"msg={_quote(record.getMessage())}",
        ]
        fields = getattr(record, 'fields', None) or {}
        for key in sorted(fields):
            parts.append(f"{key}={_quote(fields[key])}")
        if record.exc_info:
            parts.append(f"error={_quote(self.formatException(record.exc_info))}")
        return ' '.join(parts)


class DatedFileHandler(logging.Handler):
    def __init__(self, log_dir: str, prefix: str = LOG_FILE_PREFIX, fallback: Optional[TextIO] = None,
                 retry_seconds: int = LOG_RETRY_SECONDS, clock: Optional[Callable[[], datetime]] = None):
        super().__init__()
        self.log_dir = log_dir
        self.prefix = prefix
        self.fallback = fallback
        self.retry_seconds = retry_seconds
        self._clock = clock or datetime.now
        self._path: Optional[str] = None
        self._stream: Optional[TextIO] = None
        self._failed_path: Optional[str] = None
        self._failed_at = 0.0

    @property
    def current_path(self) -> Optional[str]:
        return self._path

    @property
    def using_fallback(self) -> bool:
        return self._failed_path is not None

    def path_for(self, now: datetime) -> str:
        return os.path.join(self.log_dir, f"{self.prefix}.{now.strftime('%Y%m%d')}.log")

    def _fallback_stream(self) -> TextIO:
        # stderr resolvido na hora (permite redirecionamento em testes)
        return self.fallback if self.fallback is not None else sys.stderr

    def _open(self, path: str) -> TextIO:
        try:
            os.makedirs(self.log_dir, exist_ok=True)
            return open(path, 'a', encoding='utf-8')
        except OSError as exc:
            raise LogSinkError(f"Failed to log to {path}: {exc}") from exc

    def _close_stream(self):
        if self._stream is not None:
            try:
                self._stream.close()
            finally:
                self._stream = None
                self._path = None

    def _resolve_stream(self) -> TextIO:
        path = self.path_for(self._clock())
        if path == self._path and self._stream is not None:
            return self._stream
        if path == self._failed_path and (time.monotonic() - self._failed_at) < self.retry_seconds:
            return self._fallback_stream()

        try:
            stream = self._open(path)
        except LogSinkError as exc:
            fallback = self._fallback_stream()
            if path != self._failed_path:
                fallback.write(f"{exc}; registrando em stderr\n")
            self._failed_path = path
            self._failed_at = time.monotonic()
            return fallback

        self._close_stream()
        self._path, self._stream = path, stream
        self._failed_path = None
        return stream

    def emit(self, record):
        # handle() já segura self.lock: rotação e escrita serializadas
        try:
            message = self.format(record)
            stream = self._resolve_stream()
            stream.write(message + '\n')
            stream.flush()
        except Exception:
            self.handleError(record)

    def close(self):
        self.acquire()
        try:
            self._close_stream()
        finally:
            self.release()
        super().close()


def configure_logging(log_dir: str, prefix: str = LOG_FILE_PREFIX, verbose: bool = False,
                      fallback: Optional[TextIO] = None) -> logging.Logger:
    """Instala (ou substitui) o DatedFileHandler no logger do pacote."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, DatedFileHandler):
            logger.removeHandler(handler)
            handler.close()

    handler = DatedFileHandler(log_dir, prefix=prefix, fallback=fallback)
    handler.setFormatter(LogfmtFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
