"""Conector WhatsApp: adapter de borda para a Cloud API da Meta.

Este módulo é o único ponto de IO com a Graph API.
Responsabilidades:
- Controle de admissão (rate limit) e retry com backoff
- Classificação e enriquecimento de erros da Graph API
- Operações de envio, mídia, perfil, números e templates
- Gestão de Business Manager, WABAs e system users
- Webhook (verify, signature, receive, dispatch)
"""

from .business_api import WhatsAppBusinessApi
from .cloud_api import WhatsAppCloudApi
from .error_catalog import ERROR_CATALOG, ErrorHelp, classify, enrich
from .http_base import HttpClientConfig, HttpError
from .http_client import WhatsAppHttpClient, create_whatsapp_http_client
from .meta_errors import (
    WhatsAppApiError,
    is_permanent_error,
    is_rate_limit_error,
    parse_meta_error,
)
from .rate_limiter import RateLimiter, RateLimitPolicy, RetryState
from .signature import SignatureResult, validate_signature, verify_meta_signature

__all__ = [
    "ERROR_CATALOG",
    "ErrorHelp",
    "HttpClientConfig",
    "HttpError",
    "RateLimitPolicy",
    "RateLimiter",
    "RetryState",
    "SignatureResult",
    "WhatsAppApiError",
    "WhatsAppBusinessApi",
    "WhatsAppCloudApi",
    "WhatsAppHttpClient",
    "classify",
    "create_whatsapp_http_client",
    "enrich",
    "is_permanent_error",
    "is_rate_limit_error",
    "parse_meta_error",
    "validate_signature",
    "verify_meta_signature",
]
