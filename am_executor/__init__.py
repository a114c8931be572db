"""Pacote do executor de alertas do Alertmanager -> comando externo.

Este pacote contém:
- constants: variáveis de ambiente e valores padrão de configuração
- errors: taxonomia de erros por estágio (read/decode/start)
- models: modelo do payload (AlertGroup/Alert) e decodificação do JSON
- translator: conversão do AlertGroup em variáveis de ambiente AMX_*
- runner: execução do comando externo com métricas de processo
- metrics: métricas Prometheus (registry explícito)
- logsink: logging em arquivo diário com fallback para stderr
- context: handle explícito com config, logger, métricas e runner
- controller: criação do Flask app e endpoints
- cli: parsing de argumentos e inicialização do servidor
"""

__version__ = "0.1.0"
