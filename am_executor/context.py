import logging
from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from prometheus_client import CollectorRegistry

from .constants import DEBUG_MODE, EXECUTOR_MAX_PROCESSES, LISTEN_ADDR, LOG_DIR, LOG_FILE_PREFIX
from .logsink import configure_logging
from .metrics import ExecutorMetrics
from .runner import ProcessRunner


@dataclass
class Settings:
    command: str
    args: List[str] = field(default_factory=list)
    listen_addr: str = LISTEN_ADDR
    verbose: bool = DEBUG_MODE
    log_dir: str = LOG_DIR
    log_prefix: str = LOG_FILE_PREFIX
    max_processes: int = EXECUTOR_MAX_PROCESSES


@dataclass
class ExecutorContext:
    """Estado do serviço, criado uma vez no startup e repassado ao app."""

    settings: Settings
    logger: logging.Logger
    metrics: ExecutorMetrics
    runner: ProcessRunner


def build_context(settings: Settings, registry: Optional[CollectorRegistry] = None,
                  log_fallback: Optional[TextIO] = None) -> ExecutorContext:
    logger = configure_logging(settings.log_dir, prefix=settings.log_prefix, verbose=settings.verbose,
                               fallback=log_fallback)
    metrics = ExecutorMetrics(registry)
    runner = ProcessRunner(settings.command, settings.args, metrics=metrics,
                           max_processes=settings.max_processes)
    return ExecutorContext(settings=settings, logger=logger, metrics=metrics, runner=runner)
