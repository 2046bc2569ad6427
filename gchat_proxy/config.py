import os
import tomllib
from dataclasses import dataclass
from typing import Tuple
from urllib.parse import urlparse

from .constants import (
    DEFAULT_LISTEN_ADDR,
    DEFAULT_LOG_LEVEL,
    DELIVERY_TIMEOUT_SECONDS,
    LOG_LEVELS,
    POOL_IDLE_TIMEOUT_SECONDS,
)
from .errors import ConfigError


@dataclass
class Config:
    listen_addr: str = DEFAULT_LISTEN_ADDR
    webhook_url: str = ""
    log_level: str = DEFAULT_LOG_LEVEL
    delivery_timeout: float = DELIVERY_TIMEOUT_SECONDS
    idle_timeout: float = POOL_IDLE_TIMEOUT_SECONDS

    def validate(self) -> None:
        if not self.webhook_url:
            raise ConfigError("Google Chat webhook URL is required")

        parsed = urlparse(self.webhook_url)
        if parsed.scheme != "https" or not parsed.netloc:
            raise ConfigError("Google Chat webhook URL must be an absolute https:// URL")

        if not self.listen_addr:
            raise ConfigError("server listen address is required")
        parse_listen_addr(self.listen_addr)

        if self.log_level.lower() not in LOG_LEVELS:
            raise ConfigError(f"invalid log level: {self.log_level}")

        if self.delivery_timeout <= 0 or self.idle_timeout <= 0:
            raise ConfigError("delivery timeouts must be positive")


def load_config(path: str) -> Config:
    """Carrega o config.toml (se existir) e aplica as variáveis de ambiente por cima.

    Seções aceitas: ``[server] listen_addr``, ``[google_chat] webhook_url``,
    ``[logging] level`` e ``[delivery] timeout_seconds / idle_timeout_seconds``.
    Variáveis: LISTEN_ADDR, GOOGLE_CHAT_WEBHOOK_URL, LOG_LEVEL,
    DELIVERY_TIMEOUT_SECONDS, POOL_IDLE_TIMEOUT_SECONDS.
    """
    config = Config()

    if path and os.path.exists(path):
        try:
            with open(path, "rb") as fp:
                data = tomllib.load(fp)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"failed to decode config file: {exc}") from exc

        server = data.get("server", {})
        google_chat = data.get("google_chat", {})
        logging_section = data.get("logging", {})
        delivery = data.get("delivery", {})

        config.listen_addr = str(server.get("listen_addr", config.listen_addr))
        config.webhook_url = str(google_chat.get("webhook_url", config.webhook_url))
        config.log_level = str(logging_section.get("level", config.log_level))
        try:
            config.delivery_timeout = float(delivery.get("timeout_seconds", config.delivery_timeout))
            config.idle_timeout = float(delivery.get("idle_timeout_seconds", config.idle_timeout))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"invalid [delivery] value: {exc}") from exc

    if os.getenv("LISTEN_ADDR"):
        config.listen_addr = os.environ["LISTEN_ADDR"]
    if os.getenv("GOOGLE_CHAT_WEBHOOK_URL"):
        config.webhook_url = os.environ["GOOGLE_CHAT_WEBHOOK_URL"]
    if os.getenv("LOG_LEVEL"):
        config.log_level = os.environ["LOG_LEVEL"].lower()
    if os.getenv("DELIVERY_TIMEOUT_SECONDS"):
        config.delivery_timeout = _env_seconds("DELIVERY_TIMEOUT_SECONDS")
    if os.getenv("POOL_IDLE_TIMEOUT_SECONDS"):
        config.idle_timeout = _env_seconds("POOL_IDLE_TIMEOUT_SECONDS")

    return config


def _env_seconds(name: str) -> float:
    value = os.environ[name]
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(f"invalid {name}: {value!r}") from exc


def parse_listen_addr(addr: str) -> Tuple[str, int]:
    """``":7000"`` -> ``("0.0.0.0", 7000)``; ``"127.0.0.1:8080"`` -> ``("127.0.0.1", 8080)``."""
    host, sep, port = addr.rpartition(":")
    if not sep:
        raise ConfigError(f"invalid listen address: {addr}")
    try:
        port_number = int(port)
    except ValueError as exc:
        raise ConfigError(f"invalid listen port: {addr}") from exc
    if not 0 < port_number < 65536:
        raise ConfigError(f"invalid listen port: {addr}")
    return (host.strip("[]") or "0.0.0.0"), port_number
