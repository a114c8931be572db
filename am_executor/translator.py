from typing import Dict, Iterable, List, NamedTuple

from .constants import ENV_PREFIX
from .models import AlertGroup
from .utils import format_timestamp


class EnvironmentEntry(NamedTuple):
    key: str
    value: str

    def __str__(self):
        return f"{self.key}={self.value}"


def _mapping_block(prefix: str, mapping: Dict[str, str]) -> List[EnvironmentEntry]:
    # Ordem lexical das chaves: saída estável entre execuções
    return [EnvironmentEntry(f"{prefix}_{key}", mapping[key]) for key in sorted(mapping)]


def translate(group: AlertGroup) -> List[EnvironmentEntry]:
    """
    Achata o AlertGroup em variáveis AMX_*, na ordem:
    escalares do grupo, blocos LABEL/GLABEL/ANNOTATION, e um bloco por alerta
    (índice a partir de 1, na ordem de entrega).

    Os valores são repassados sem escape; chaves duplicadas não são possíveis
    porque as variáveis de cada alerta levam o índice no nome.
    """
    env = [
        EnvironmentEntry(f"{ENV_PREFIX}_RECEIVER", group.receiver),
        EnvironmentEntry(f"{ENV_PREFIX}_STATUS", group.status),
        EnvironmentEntry(f"{ENV_PREFIX}_EXTERNAL_URL", group.external_url),
        EnvironmentEntry(f"{ENV_PREFIX}_ALERT_LEN", str(len(group.alerts))),
    ]
    env.extend(_mapping_block(f"{ENV_PREFIX}_LABEL", group.common_labels))
    env.extend(_mapping_block(f"{ENV_PREFIX}_GLABEL", group.group_labels))
    env.extend(_mapping_block(f"{ENV_PREFIX}_ANNOTATION", group.common_annotations))

    for index, alert in enumerate(group.alerts, start=1):
        key = f"{ENV_PREFIX}_ALERT_{index}"
        env.extend([
            EnvironmentEntry(f"{key}_STATUS", alert.status),
            EnvironmentEntry(f"{key}_START", format_timestamp(alert.starts_at)),
            EnvironmentEntry(f"{key}_END", format_timestamp(alert.ends_at)),
            EnvironmentEntry(f"{key}_URL", alert.generator_url),
        ])
        env.extend(_mapping_block(f"{key}_LABEL", alert.labels))
        env.extend(_mapping_block(f"{key}_ANNOTATION", alert.annotations))
    return env


def format_environment(entries: Iterable[EnvironmentEntry]) -> List[str]:
    return [str(entry) for entry in entries]
