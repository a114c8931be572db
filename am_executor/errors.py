class ExecutorError(Exception):
    """Erro base do atendimento de um webhook. `stage` é o label do contador de erros."""

    stage = None


class IngressReadError(ExecutorError):
    stage = "read"


class DecodeError(ExecutorError):
    stage = "decode"


class SpawnError(ExecutorError):
    """Falha ao iniciar o processo externo ou ao aguardar seu término."""

    stage = "start"


class LogSinkError(Exception):
    """
    Destino de log indisponível. Nunca é fatal: o handler usa o fallback.
    Fica fora de ExecutorError porque não corresponde a nenhum estágio do webhook.
    """
