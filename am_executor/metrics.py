from typing import Optional, Tuple

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Gauge, Histogram, generate_latest

from .constants import ERROR_STAGES, METRICS_NAMESPACE, PROCESS_DURATION_BUCKETS


class ExecutorMetrics:
    """
    Métricas do executor registradas num CollectorRegistry próprio.
    Cada instância tem seu registry (sem estado global entre testes).
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()

        self.process_duration = Histogram(
            'duration_seconds',
            'Time the processes handling alerts ran.',
            namespace=METRICS_NAMESPACE,
            subsystem='process',
            buckets=PROCESS_DURATION_BUCKETS,
            registry=self.registry,
        )
        self.processes_current = Gauge(
            'current',
            'Current number of processes running.',
            namespace=METRICS_NAMESPACE,
            subsystem='processes',
            registry=self.registry,
        )
        self.errors = Counter(
            'errors',
            'Total number of errors while processing alerts.',
            ['stage'],
            namespace=METRICS_NAMESPACE,
            registry=self.registry,
        )
        # Expõe as séries de erro zeradas desde o startup
        for stage in ERROR_STAGES:
            self.errors.labels(stage=stage)

    def record_error(self, stage: str):
        if stage not in ERROR_STAGES:
            raise ValueError(f"estágio de erro desconhecido: {stage!r}")
        self.errors.labels(stage=stage).inc()

    def error_count(self, stage: str) -> float:
        value = self.registry.get_sample_value(f'{METRICS_NAMESPACE}_errors_total', {'stage': stage})
        return value or 0.0

    def in_flight(self) -> float:
        return self.registry.get_sample_value(f'{METRICS_NAMESPACE}_processes_current') or 0.0

    def exposition(self) -> Tuple[bytes, str]:
        return generate_latest(self.registry), CONTENT_TYPE_LATEST
