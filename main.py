import argparse
import logging
import sys

from gchat_proxy.config import load_config, parse_listen_addr
from gchat_proxy.constants import CONFIG_PATH
from gchat_proxy.controller import create_app
from gchat_proxy.errors import ConfigError
from gchat_proxy.utils import setup_logging

logger = logging.getLogger("gchat_proxy")


def main(argv=None):
    parser = argparse.ArgumentParser(description="AlertManager to Google Chat webhook proxy")
    parser.add_argument("--config", default=CONFIG_PATH, help="Path to configuration file")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        config.validate()
        host, port = parse_listen_addr(config.listen_addr)
    except ConfigError as exc:
        print(f"Failed to load config: {exc}", file=sys.stderr)
        return 1

    setup_logging(config.log_level)
    app = create_app(config)

    logger.info("Iniciando proxy AlertManager -> Google Chat em %s", config.listen_addr)
    # use_reloader=False evita dois processos (e dois pools HTTP) em modo debug
    app.run(host=host, port=port, threaded=True, use_reloader=False)
    return 0


if __name__ == '__main__':
    sys.exit(main())
