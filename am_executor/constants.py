import os

# Configurações globais de ambiente (apenas valores padrão; lidos uma vez no startup)
LISTEN_ADDR = os.getenv("LISTEN_ADDR", ":" + os.getenv("APP_PORT", "8080"))
DEBUG_MODE = os.getenv("DEBUG_MODE", "False").lower() == "true"

# Logging em arquivo diário: <LOG_DIR>/<LOG_FILE_PREFIX>.<YYYYMMDD>.log
LOG_DIR = os.getenv("LOG_DIR", "log")
LOG_FILE_PREFIX = os.getenv("LOG_FILE_PREFIX", "prometheus-am-executor")
LOG_RETRY_SECONDS = int(os.getenv("LOG_RETRY_SECONDS", "60"))

# Limite de processos simultâneos (0 = sem limite)
EXECUTOR_MAX_PROCESSES = int(os.getenv("EXECUTOR_MAX_PROCESSES", "0"))

# Métricas Prometheus
METRICS_NAMESPACE = "am_executor"
PROCESS_DURATION_BUCKETS = (1, 10, 60, 600, 900, 1800)
ERROR_STAGES = ("read", "decode", "start")

# Prefixo das variáveis de ambiente repassadas ao comando
ENV_PREFIX = "AMX"

HEALTH_MESSAGE = "All systems are functioning within normal specifications.\n"

# /_health e /metrics atendem qualquer método: nunca caem na rota do webhook
FIXED_ENDPOINT_METHODS = ['GET', 'HEAD', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']
