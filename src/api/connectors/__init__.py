"""Connectors: adapters de borda para APIs externas.

Estrutura:
- whatsapp/: WhatsApp Cloud API (Graph API da Meta)
"""

__all__: list[str] = []
