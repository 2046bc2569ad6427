import logging
import sys
from datetime import datetime, timezone
from typing import Mapping, Optional

from .constants import DEFAULT_LOG_LEVEL, LOG_LEVELS, ZERO_TIMESTAMP

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = DEFAULT_LOG_LEVEL) -> str:
    """Configura o logging raiz em stdout e devolve o nível efetivo."""
    level = (level or "").strip().lower()
    if level not in LOG_LEVELS:
        level = DEFAULT_LOG_LEVEL

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper()))

    # werkzeug loga cada requisição em INFO; segue o nível do proxy
    logging.getLogger("werkzeug").setLevel(logging.INFO if level == "debug" else logging.WARNING)
    logging.getLogger(__name__).info("Logger inicializado com nível: %s", level)
    return level


def format_timestamp(value: Optional[datetime]) -> str:
    """RFC 3339 com precisão de segundos, preservando o offset original."""
    if value is None:
        return ZERO_TIMESTAMP
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    rendered = value.replace(microsecond=0).isoformat()
    if rendered.endswith("+00:00"):
        rendered = rendered[:-6] + "Z"
    return rendered


def format_bullets(values: Mapping[str, str]) -> str:
    # ordem lexicográfica por chave para saída reproduzível
    return "".join(f"• {key}: {values[key]}\n" for key in sorted(values))


def utc_now() -> str:
    return format_timestamp(datetime.now(timezone.utc))
