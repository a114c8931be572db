import argparse
import sys
from typing import List, Optional, Tuple

from .constants import DEBUG_MODE, EXECUTOR_MAX_PROCESSES, LISTEN_ADDR, LOG_DIR
from .context import Settings, build_context
from .controller import create_app


def parse_listen_addr(value: str) -> Tuple[str, int]:
    """Aceita ':8080', '127.0.0.1:8080' ou '8080'. Host vazio = todas as interfaces."""
    host, _, port = value.rpartition(':')
    host = host.strip('[]') or '0.0.0.0'
    try:
        return host, int(port)
    except ValueError:
        raise ValueError(f"endereço inválido: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='am-executor',
        usage='%(prog)s [options] script [args..]',
        description='Executa um comando a cada webhook do Alertmanager, com os dados do alerta em variáveis AMX_*.',
    )
    parser.add_argument('-p', '--listen', default=LISTEN_ADDR, help='HTTP Port to listen on')
    parser.add_argument('-v', '--verbose', action='store_true', default=DEBUG_MODE,
                        help='Enable verbose/debug logging')
    parser.add_argument('-l', '--log-dir', default=LOG_DIR, help='Log directory')
    parser.add_argument('--max-processes', type=int, default=EXECUTOR_MAX_PROCESSES,
                        help='Maximum concurrent processes (0 = unbounded)')
    parser.add_argument('command', nargs='?', help='Command run for each webhook')
    parser.add_argument('args', nargs=argparse.REMAINDER, help='Static arguments for the command')
    return parser


def parse_args(argv: Optional[List[str]] = None) -> Settings:
    parser = build_parser()
    ns = parser.parse_args(argv)
    if not ns.command:
        parser.error('Require command')
    try:
        parse_listen_addr(ns.listen)
    except ValueError as exc:
        parser.error(str(exc))
    if ns.max_processes < 0:
        parser.error('--max-processes must be >= 0')
    return Settings(
        command=ns.command,
        args=list(ns.args),
        listen_addr=ns.listen,
        verbose=ns.verbose,
        log_dir=ns.log_dir,
        max_processes=ns.max_processes,
    )


def main(argv: Optional[List[str]] = None) -> int:
    settings = parse_args(argv)
    context = build_context(settings)
    app = create_app(context)
    host, port = parse_listen_addr(settings.listen_addr)
    context.logger.debug("Listening", extra={'fields': {
        'listen': settings.listen_addr, 'command': ' '.join(context.runner.argv),
    }})
    # Uma thread por requisição; use_reloader=False evita dois processos
    app.run(host=host, port=port, threaded=True, use_reloader=False)
    return 0


if __name__ == '__main__':
    sys.exit(main())
