import logging
import os
import subprocess
import threading
import time
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from .errors import SpawnError
from .metrics import ExecutorMetrics

logger = logging.getLogger(__name__)
process_logger = logging.getLogger('am_executor.process')


class ExitOutcome(NamedTuple):
    returncode: int
    duration: float
    pid: int

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class ProcessRunner:
    """
    Executa o comando configurado uma vez por chamada de run().

    - O gauge de processos em execução sobe antes do spawn e desce exatamente
      uma vez ao final, com sucesso ou erro.
    - Código de saída diferente de zero não é erro do runner; só falhas ao
      iniciar/aguardar o processo viram SpawnError.
    - Sem timeout e sem retry. Com max_processes > 0, chamadas excedentes
      aguardam uma vaga (e não contam no gauge enquanto aguardam).
    """

    def __init__(self, command: str, args: Sequence[str] = (), metrics: Optional[ExecutorMetrics] = None,
                 max_processes: int = 0):
        self.command = command
        self.args: List[str] = list(args)
        self.metrics = metrics if metrics is not None else ExecutorMetrics()
        self.max_processes = max_processes
        self._slots = threading.BoundedSemaphore(max_processes) if max_processes > 0 else None

    @property
    def argv(self) -> List[str]:
        return [self.command] + self.args

    def build_environment(self, environment: Iterable[Tuple[str, str]]) -> Dict[str, str]:
        # Sobrepõe ao ambiente atual; chave repetida: a última vence
        env = dict(os.environ)
        for key, value in environment:
            env[key] = value
        return env

    def run(self, environment: Iterable[Tuple[str, str]]) -> ExitOutcome:
        if self._slots is None:
            return self._run(environment)
        with self._slots:
            return self._run(environment)

    def _run(self, environment: Iterable[Tuple[str, str]]) -> ExitOutcome:
        env = self.build_environment(environment)
        with self.metrics.processes_current.track_inprogress():
            started = time.monotonic()
            try:
                proc = subprocess.Popen(
                    self.argv,
                    env=env,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                )
            except (OSError, ValueError, subprocess.SubprocessError) as exc:
                raise SpawnError(f"falha ao iniciar '{self.command}': {exc}") from exc

            logger.debug("Processo iniciado", extra={'fields': {'command': self.command, 'pid': proc.pid}})
            try:
                with proc:
                    self._drain_output(proc)
                    returncode = proc.wait()
            except (OSError, ValueError, subprocess.SubprocessError) as exc:
                raise SpawnError(f"falha ao aguardar '{self.command}' (pid {proc.pid}): {exc}") from exc

            duration = time.monotonic() - started
            self.metrics.process_duration.observe(duration)

        logger.debug("Processo finalizado", extra={'fields': {
            'command': self.command, 'pid': proc.pid, 'returncode': returncode, 'duration': f"{duration:.3f}",
        }})
        return ExitOutcome(returncode, duration, proc.pid)

    def _drain_output(self, proc: subprocess.Popen):
        fields = {'command': self.command, 'pid': proc.pid}
        for raw in proc.stdout:
            line = raw.decode('utf-8', errors='replace').rstrip('\r\n')
            process_logger.info(line, extra={'fields': fields})
