"""App: composição do serviço de webhook.

Subpastas:
- bootstrap/: inicialização (logging, validação de settings)
- constants/: enums de tipos de mensagem
- observability/: correlation_id para logs
"""
