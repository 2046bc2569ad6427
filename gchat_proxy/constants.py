import os

# Configurações globais de ambiente
CONFIG_PATH = os.getenv("CONFIG_PATH", "config.toml")
DEFAULT_LISTEN_ADDR = ":7000"
DEFAULT_LOG_LEVEL = "info"

# Cliente HTTP de entrega (pool compartilhado)
# valores padrão; DELIVERY_TIMEOUT_SECONDS e POOL_IDLE_TIMEOUT_SECONDS do
# ambiente são lidos em config.load_config
DELIVERY_TIMEOUT_SECONDS = 10.0
POOL_IDLE_TIMEOUT_SECONDS = 90.0
POOL_MAXSIZE = 100

LOG_LEVELS = ("debug", "info", "error")

PROVIDER_NAME = "google_chat"

UNKNOWN_ALERT_NAME = "Unknown Alert"
ZERO_TIMESTAMP = "0001-01-01T00:00:00Z"

# Ícones nativos do Google Chat por status do grupo
STATUS_ICONS = {
    "firing": "STAR",
    "resolved": "CHECK",
}
DEFAULT_STATUS_ICON = "DESCRIPTION"

PROMETHEUS_BUTTON_TEXT = "View in Prometheus"
ALERTMANAGER_BUTTON_TEXT = "View in AlertManager"

SUCCESS_MESSAGE = "Alert processed successfully"
