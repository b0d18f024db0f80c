"""API: camada de borda com a WhatsApp Cloud API.

Subpastas:
- connectors/: cliente HTTP, rate limiter, erros e webhook
- payload_builders/: construção de payloads de envio
- routes/: endpoints HTTP (verificação e recebimento de webhook)
"""
