"""Payload builders: construção de payloads de envio para a Graph API.

Estrutura:
- whatsapp/: mensagens da WhatsApp Cloud API

Builders são funções puras; IO fica nos connectors.
"""

__all__: list[str] = []
