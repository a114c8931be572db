import logging

from flask import Flask, Response, request
from werkzeug.exceptions import ClientDisconnected

from .constants import ERROR_STAGES, FIXED_ENDPOINT_METHODS, HEALTH_MESSAGE
from .context import ExecutorContext
from .errors import ExecutorError, IngressReadError
from .models import AlertGroup
from .translator import translate

logger = logging.getLogger(__name__)


def create_app(context: ExecutorContext) -> Flask:
    app = Flask(__name__)
    app.extensions['am_executor'] = context
    verbose = context.settings.verbose

    def handle_error(err: ExecutorError):
        # Só estágios conhecidos viram série no contador
        if err.stage in ERROR_STAGES:
            context.metrics.record_error(err.stage)
        logger.error(str(err), extra={'fields': {'stage': err.stage}})
        return Response(f"{err}\n", status=500, mimetype='text/plain')

    def read_body() -> bytes:
        try:
            return request.get_data(cache=False)
        except (ClientDisconnected, OSError) as exc:
            raise IngressReadError(f"falha ao ler o corpo da requisição: {exc}") from exc

    @app.route('/_health', methods=FIXED_ENDPOINT_METHODS)
    def health():
        return Response(HEALTH_MESSAGE, mimetype='text/plain')

    @app.route('/metrics', methods=FIXED_ENDPOINT_METHODS)
    def metrics():
        body, content_type = context.metrics.exposition()
        return Response(body, content_type=content_type)

    # Qualquer outro caminho recebe o webhook, como no Alertmanager legado
    @app.route('/', methods=['POST'])
    @app.route('/<path:path>', methods=['POST'])
    def webhook(path=''):
        if verbose:
            logger.debug("Webhook triggered")
        try:
            data = read_body()
            if verbose:
                logger.debug("got data", extra={'fields': {'body': data.decode('utf-8', errors='replace')}})

            payload = AlertGroup.from_json(data)
            if verbose:
                logger.info("got payload", extra={'fields': {'body': repr(payload)}})

            outcome = context.runner.run(translate(payload))
        except ExecutorError as err:
            return handle_error(err)

        if not outcome.succeeded:
            logger.warning("Comando terminou com código diferente de zero", extra={'fields': {
                'command': context.runner.command, 'pid': outcome.pid, 'returncode': outcome.returncode,
            }})
        return '', 200

    return app
