"""Hierarquia de exceções do proxy."""

from typing import Optional


class ProxyError(Exception):
    """Base de todas as exceções do proxy."""


class ConfigError(ProxyError):
    """Configuração ausente ou inválida (fatal na inicialização)."""


class MalformedPayload(ProxyError):
    """Corpo da requisição não é JSON ou não tem o formato do Alertmanager."""


class PayloadValidationError(ProxyError):
    """Payload decodificado mas estruturalmente inválido."""


class MissingStatus(PayloadValidationError):
    def __init__(self):
        super().__init__("status is required")


class EmptyAlerts(PayloadValidationError):
    def __init__(self):
        super().__init__("at least one alert is required")


class AlertMissingStatus(PayloadValidationError):
    def __init__(self, index: int):
        self.index = index
        super().__init__(f"alert {index}: status is required")


class AlertMissingLabels(PayloadValidationError):
    def __init__(self, index: int):
        self.index = index
        super().__init__(f"alert {index}: labels are required")


class DeliveryError(ProxyError):
    """Falha ao entregar a mensagem ao webhook de destino."""


class TransportError(DeliveryError):
    """Erro de transporte: DNS, TLS, timeout, conexão recusada."""


class EncodeError(DeliveryError):
    """A mensagem não pôde ser serializada em JSON."""


class RemoteRejected(DeliveryError):
    """O webhook respondeu com status >= 300."""

    def __init__(self, status_code: int, body: Optional[str] = ""):
        self.status_code = status_code
        self.body = body or ""
        super().__init__(f"received non-success status code {status_code}: {self.body}")
