import logging
import time

from flask import Flask, Response, request
from werkzeug.exceptions import ClientDisconnected

from . import __version__
from .config import Config
from .constants import SUCCESS_MESSAGE
from .errors import ConfigError, DeliveryError, MalformedPayload, PayloadValidationError
from .formatters import build_chat_message, get_alert_name
from .metrics import Metrics, PrometheusMetrics
from .models import decode_batch
from .services import GoogleChatProvider, Provider
from .utils import utc_now
from .validation import validate_batch

logger = logging.getLogger(__name__)

# Todos os métodos chegam ao handler para que a resposta 405 seja nossa
WEBHOOK_METHODS = ['GET', 'HEAD', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']


def new_request_id():
    return f"req-{time.time_ns()}"


def create_app(config: Config = None, provider: Provider = None, metrics: Metrics = None):
    app = Flask(__name__)

    if metrics is None:
        metrics = PrometheusMetrics()
    if provider is None:
        if config is None:
            raise ConfigError("create_app requires a config or a provider")
        provider = GoogleChatProvider(
            config.webhook_url,
            timeout=config.delivery_timeout,
            idle_timeout=config.idle_timeout,
            metrics=metrics,
        )
    provider_name = getattr(provider, 'name', type(provider).__name__)

    app.extensions['gchat_proxy'] = {'provider': provider, 'metrics': metrics}

    def reply(body, status_code, request_id):
        resp = Response(body, status=status_code, mimetype='text/plain')
        resp.headers['X-Request-ID'] = request_id
        return resp

    def process_webhook(request_id):
        logger.info("[%s] Requisição de webhook recebida de %s", request_id, request.remote_addr)

        if request.method != 'POST':
            logger.error("[%s] Método não permitido: %s", request_id, request.method)
            return "Method not allowed", 405

        if request.mimetype != 'application/json':
            logger.error("[%s] Content-Type inválido: %r", request_id, request.content_type)
            return "Content-Type must be application/json", 400

        try:
            raw = request.get_data(cache=False)
        except (ClientDisconnected, OSError) as exc:
            logger.error("[%s] Erro ao ler corpo da requisição: %s", request_id, exc)
            return "Error reading request body", 500

        if not raw:
            logger.error("[%s] Corpo da requisição vazio", request_id)
            return "Empty request body", 400

        logger.debug("[%s] Corpo recebido: %s", request_id, raw.decode('utf-8', errors='replace'))

        try:
            batch = decode_batch(raw)
        except MalformedPayload as exc:
            logger.error("[%s] Erro ao decodificar payload do AlertManager: %s", request_id, exc)
            return "Error parsing AlertManager payload", 400

        metrics.alert_received(batch.status)

        try:
            validate_batch(batch)
        except PayloadValidationError as exc:
            logger.error("[%s] Payload inválido: %s", request_id, exc)
            return f"Invalid payload: {exc}", 400

        logger.info(
            "[%s] Recebidos %d alertas com status: %s, alertname: %s",
            request_id, len(batch.alerts), batch.status, get_alert_name(batch),
        )

        message = build_chat_message(batch)

        logger.info("[%s] Enviando alerta para o Google Chat", request_id)
        try:
            provider.send(message, request_id)
        except DeliveryError as exc:
            metrics.provider_error(provider_name)
            logger.error("[%s] Erro ao enviar para o Google Chat: %s", request_id, exc)
            return "Error sending to Google Chat", 500

        metrics.alert_sent(batch.status)
        logger.info("[%s] Alerta processado com sucesso", request_id)
        return SUCCESS_MESSAGE, 200

    @app.route('/webhook', methods=WEBHOOK_METHODS, provide_automatic_options=False)
    def webhook():
        started = time.monotonic()
        request_id = request.headers.get('X-Request-ID') or new_request_id()
        try:
            body, status_code = process_webhook(request_id)
        except Exception:
            logger.exception("[%s] Erro inesperado ao processar webhook", request_id)
            body, status_code = "Internal server error", 500
        metrics.observe_processing(str(status_code), time.monotonic() - started)
        return reply(body, status_code, request_id)

    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok', 'timestamp': utc_now(), 'version': __version__}, 200

    @app.route('/metrics', methods=['GET'])
    def metrics_endpoint():
        data, content_type = metrics.render()
        return Response(data, status=200, content_type=content_type)

    return app
