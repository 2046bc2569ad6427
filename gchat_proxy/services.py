import json
import logging
import threading
import time
from typing import Callable, Optional, Protocol

import requests
from requests.adapters import HTTPAdapter

from .constants import DELIVERY_TIMEOUT_SECONDS, POOL_IDLE_TIMEOUT_SECONDS, POOL_MAXSIZE, PROVIDER_NAME
from .errors import EncodeError, RemoteRejected, TransportError
from .metrics import Metrics
from .models import ChatMessage

logger = logging.getLogger(__name__)


class Provider(Protocol):
    """Destino de entrega de uma mensagem; levanta DeliveryError em caso de falha."""

    name: str

    def send(self, message: ChatMessage, request_id: str) -> None:
        ...


def build_session(pool_maxsize: int = POOL_MAXSIZE) -> requests.Session:
    session = requests.Session()
    # max_retries=0: uma única tentativa por envio
    adapter = HTTPAdapter(pool_connections=pool_maxsize, pool_maxsize=pool_maxsize, max_retries=0)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _read_body(resp: requests.Response) -> str:
    # sem stream=True o corpo já foi lido dentro de post(); um corpo truncado
    # aparece lá como ChunkedEncodingError (TransportError). Aqui resta só a
    # decodificação, que usa substituição de caracteres.
    try:
        return resp.text
    except requests.RequestException:
        return ""


class GoogleChatProvider:
    """Envia mensagens para o webhook do Google Chat.

    Mantém um ``requests.Session`` compartilhado entre requisições (pool de
    conexões thread-safe). Quando o pool fica ocioso por mais de
    ``idle_timeout`` segundos a sessão é fechada e recriada no próximo envio.
    O descarte vale para a sessão inteira: sob tráfego contínuo sockets
    ociosos individuais não são reciclados, o limite para eles é apenas o
    ``pool_maxsize`` do adapter.
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        webhook_url: str,
        timeout: float = DELIVERY_TIMEOUT_SECONDS,
        idle_timeout: float = POOL_IDLE_TIMEOUT_SECONDS,
        metrics: Optional[Metrics] = None,
        session_factory: Callable[[], requests.Session] = build_session,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.idle_timeout = idle_timeout
        self.metrics = metrics or Metrics()
        self._session_factory = session_factory
        self._clock = clock
        self._lock = threading.Lock()
        self._session: Optional[requests.Session] = None
        self._last_used = 0.0
        self._in_flight = 0

    def _acquire_session(self) -> requests.Session:
        with self._lock:
            now = self._clock()
            if (
                self._session is not None
                and self._in_flight == 0
                and (now - self._last_used) > self.idle_timeout
            ):
                logger.debug("Pool ocioso há %.1fs, recriando sessão HTTP", now - self._last_used)
                self._session.close()
                self._session = None
            if self._session is None:
                self._session = self._session_factory()
            self._in_flight += 1
            self._last_used = now
            return self._session

    def _release_session(self) -> None:
        with self._lock:
            self._in_flight -= 1
            self._last_used = self._clock()

    def close(self) -> None:
        with self._lock:
            if self._session is not None:
                self._session.close()
                self._session = None

    def send(self, message: ChatMessage, request_id: str) -> None:
        started = time.monotonic()
        outcome = "error"
        try:
            try:
                payload = json.dumps(message.to_payload())
            except (TypeError, ValueError) as exc:
                raise EncodeError(f"error marshaling Google Chat message: {exc}") from exc

            logger.debug("[%s] Google Chat payload: %s", request_id, payload)

            session = self._acquire_session()
            try:
                resp = session.post(
                    self.webhook_url,
                    data=payload.encode("utf-8"),
                    headers={"Content-Type": "application/json"},
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                raise TransportError(f"error sending request: {exc}") from exc
            finally:
                self._release_session()

            outcome = str(resp.status_code)
            if resp.status_code >= 300:
                body = _read_body(resp)
                logger.error(
                    "[%s] Google Chat retornou status de erro: %d, resposta: %s",
                    request_id, resp.status_code, body,
                )
                raise RemoteRejected(resp.status_code, body)

            logger.info(
                "[%s] Mensagem enviada ao Google Chat (status: %d, tempo: %.3fs)",
                request_id, resp.status_code, time.monotonic() - started,
            )
        finally:
            self.metrics.observe_provider_request(self.name, outcome, time.monotonic() - started)
