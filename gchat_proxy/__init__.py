"""Pacote do proxy Alertmanager -> Google Chat.

Este pacote contém:
- constants: variáveis de ambiente e valores padrão
- config: carregamento do config.toml com sobreposição por variáveis de ambiente
- errors: hierarquia de exceções do proxy
- models: modelos do payload do Alertmanager e da mensagem do Google Chat
- validation: validação estrutural do payload recebido
- formatters: conversão do payload em card do Google Chat
- services: envio para o webhook do Google Chat
- metrics: contadores e histogramas expostos em /metrics
- controller: criação do Flask app e endpoints
"""

__version__ = "1.1.0"
