"""Entrada WSGI (ex.: ``gunicorn wsgi:app``); lê CONFIG_PATH e variáveis de ambiente."""
from gchat_proxy.config import load_config  # noqa: E402
from gchat_proxy.constants import CONFIG_PATH  # noqa: E402
from gchat_proxy.controller import create_app  # noqa: E402
from gchat_proxy.utils import setup_logging  # noqa: E402

config = load_config(CONFIG_PATH)
config.validate()
setup_logging(config.log_level)

app = create_app(config)
