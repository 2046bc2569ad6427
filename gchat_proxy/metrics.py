"""Métricas do proxy.

``Metrics`` é a interface injetada no controller e no provider; a
implementação base não faz nada, o que permite testar sem backend de métricas.
``PrometheusMetrics`` registra tudo em um ``CollectorRegistry`` próprio,
exposto em ``GET /metrics``.
"""

from typing import Optional, Tuple

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest

_NAMESPACE = "alertmanager_gchat"


class Metrics:
    def alert_received(self, status: str) -> None:
        pass

    def alert_sent(self, status: str) -> None:
        pass

    def observe_processing(self, code: str, seconds: float) -> None:
        pass

    def observe_provider_request(self, provider: str, outcome: str, seconds: float) -> None:
        pass

    def provider_error(self, provider: str) -> None:
        pass

    def render(self) -> Tuple[bytes, str]:
        return b"", "text/plain; charset=utf-8"


class PrometheusMetrics(Metrics):
    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()

        self.alerts_received = Counter(
            f"{_NAMESPACE}_alerts_received_total",
            "The total number of alerts received",
            ["status"],
            registry=self.registry,
        )
        self.alerts_sent = Counter(
            f"{_NAMESPACE}_alerts_sent_total",
            "The total number of alerts sent to Google Chat",
            ["status"],
            registry=self.registry,
        )
        self.processing_duration = Histogram(
            f"{_NAMESPACE}_processing_duration_seconds",
            "Time spent processing alerts",
            ["status"],
            registry=self.registry,
        )
        self.provider_request_duration = Histogram(
            f"{_NAMESPACE}_provider_request_duration_seconds",
            "Time spent making requests to provider",
            ["provider", "status"],
            registry=self.registry,
        )
        self.provider_errors = Counter(
            f"{_NAMESPACE}_provider_errors_total",
            "The total number of provider errors",
            ["provider"],
            registry=self.registry,
        )

    def alert_received(self, status: str) -> None:
        self.alerts_received.labels(status=status).inc()

    def alert_sent(self, status: str) -> None:
        self.alerts_sent.labels(status=status).inc()

    def observe_processing(self, code: str, seconds: float) -> None:
        self.processing_duration.labels(status=code).observe(seconds)

    def observe_provider_request(self, provider: str, outcome: str, seconds: float) -> None:
        self.provider_request_duration.labels(provider=provider, status=outcome).observe(seconds)

    def provider_error(self, provider: str) -> None:
        self.provider_errors.labels(provider=provider).inc()

    def render(self) -> Tuple[bytes, str]:
        return generate_latest(self.registry), CONTENT_TYPE_LATEST
