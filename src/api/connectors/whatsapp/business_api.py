"""Operações de gestão do Business Manager (Graph API).

Empresa, ativos, contas WhatsApp Business (WABA) e system users. Usa o
mesmo WhatsAppHttpClient da Cloud API, portanto cada chamada passa pela
admissão e pelo retry do RateLimiter do cliente.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.constants.whatsapp import BusinessAssetType, BusinessRole, BusinessType

from .http_client import WhatsAppHttpClient, create_whatsapp_http_client

if TYPE_CHECKING:
    from collections.abc import Iterable

    from config.settings import WhatsAppSettings

logger = logging.getLogger(__name__)

BUSINESS_INFO_FIELDS = (
    "id",
    "name",
    "created_time",
    "primary_page",
    "profile_picture_uri",
    "verification_status",
    "vertical",
    "timezone_id",
)
DEFAULT_PAGE_LIMIT = 25


class WhatsAppBusinessApi:
    """Fachada das operações de gestão de empresa e WABAs.

    Args:
        http_client: Cliente com RateLimiter próprio
        business_id: Business Manager padrão; cada método aceita outro
    """

    def __init__(self, http_client: WhatsAppHttpClient, business_id: str | None = None) -> None:
        self._http = http_client
        self._business_id = business_id

    @classmethod
    def from_settings(cls, settings: WhatsAppSettings | None = None) -> WhatsAppBusinessApi:
        # Import local para evitar dependência circular
        from config.settings import get_whatsapp_settings

        whatsapp = settings or get_whatsapp_settings()
        return cls(
            http_client=create_whatsapp_http_client(whatsapp),
            business_id=whatsapp.business_id or None,
        )

    @property
    def http_client(self) -> WhatsAppHttpClient:
        return self._http

    # Empresa

    async def get_business_info(self, business_id: str | None = None) -> dict[str, Any]:
        return await self._http.send_request(
            "GET",
            self._require_business(business_id),
            params={"fields": ",".join(BUSINESS_INFO_FIELDS)},
        )

    async def create_business(
        self,
        name: str,
        primary_page_id: str | None = None,
        vertical: str | None = None,
        timezone_id: int | None = None,
        business_type: str | None = None,
    ) -> dict[str, Any]:
        """Cria um Business Manager para o usuário do token.

        Raises:
            ValueError: Nome vazio ou business_type fora de BusinessType
        """
        if not name:
            raise ValueError("name é obrigatório")
        payload: dict[str, Any] = {"name": name}
        if primary_page_id:
            payload["primary_page"] = primary_page_id
        if vertical:
            payload["vertical"] = vertical
        if timezone_id is not None:
            payload["timezone_id"] = timezone_id
        if business_type:
            payload["survey_business_type"] = _enum_value(
                BusinessType, business_type, "business_type"
            )

        response = await self._http.send_request("POST", "me/businesses", json=payload)
        logger.info("business_created", extra={"business_id": response.get("id")})
        return response

    async def get_business_assets(
        self,
        asset_type: str,
        limit: int = DEFAULT_PAGE_LIMIT,
        business_id: str | None = None,
    ) -> dict[str, Any]:
        asset = _enum_value(BusinessAssetType, asset_type, "asset_type")
        return await self._http.send_request(
            "GET",
            f"{self._require_business(business_id)}/owned_businesses",
            params={"type": asset, "limit": limit},
        )

    # Contas WhatsApp Business

    async def get_whatsapp_business_accounts(
        self,
        business_id: str | None = None,
    ) -> dict[str, Any]:
        return await self.get_business_assets(
            BusinessAssetType.WHATSAPP_BUSINESS_ACCOUNT,
            business_id=business_id,
        )

    async def get_whatsapp_business_account(self, waba_id: str) -> dict[str, Any]:
        return await self._http.send_request("GET", _required(waba_id, "waba_id"))

    async def update_whatsapp_business_account(self, waba_id: str, **fields: Any) -> dict[str, Any]:
        """Atualiza name, timezone_id ou message_template_namespace da WABA."""
        return await self._http.send_request("POST", _required(waba_id, "waba_id"), json=fields)

    async def create_whatsapp_business_account(
        self,
        name: str,
        business_id: str | None = None,
    ) -> str:
        """Cria uma WABA no Business Manager e devolve o ID criado."""
        response = await self._http.send_request(
            "POST",
            f"{self._require_business(business_id)}/whatsapp_business_accounts",
            json={"name": _required(name, "name")},
        )
        return str(response.get("id", ""))

    async def delete_whatsapp_business_account(self, waba_id: str) -> bool:
        response = await self._http.send_request("DELETE", _required(waba_id, "waba_id"))
        return response.get("success") is True

    async def assign_user_to_whatsapp_business(
        self,
        waba_id: str,
        user_id: str,
        roles: Iterable[str],
    ) -> bool:
        tasks = [_enum_value(BusinessRole, role, "roles") for role in roles]
        if not tasks:
            raise ValueError("roles não pode ser vazio")
        response = await self._http.send_request(
            "POST",
            f"{_required(waba_id, 'waba_id')}/assigned_users",
            json={"user": _required(user_id, "user_id"), "tasks": tasks},
        )
        return response.get("success") is True

    async def get_phone_numbers(
        self,
        waba_id: str,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> dict[str, Any]:
        return await self._http.send_request(
            "GET",
            f"{_required(waba_id, 'waba_id')}/phone_numbers",
            params={"limit": limit},
        )

    # System users

    async def get_system_users(self, business_id: str | None = None) -> dict[str, Any]:
        return await self._http.send_request(
            "GET",
            f"{self._require_business(business_id)}/system_users",
        )

    async def create_system_user(
        self,
        name: str,
        role: str,
        business_id: str | None = None,
    ) -> str:
        """Cria system user e devolve o ID criado."""
        response = await self._http.send_request(
            "POST",
            f"{self._require_business(business_id)}/system_users",
            json={"name": _required(name, "name"), "role": _enum_value(BusinessRole, role, "role")},
        )
        return str(response.get("id", ""))

    async def delete_system_user(self, system_user_id: str, business_id: str | None = None) -> bool:
        response = await self._http.send_request(
            "DELETE",
            f"{self._require_business(business_id)}/system_users",
            json={"user": _required(system_user_id, "system_user_id")},
        )
        return response.get("success") is True

    def update_access_token(self, access_token: str) -> None:
        self._http.update_access_token(access_token)

    def _require_business(self, business_id: str | None) -> str:
        resolved = business_id or self._business_id
        if not resolved:
            raise ValueError(
                "business_id é obrigatório para esta operação. "
                "Verifique se WHATSAPP_BUSINESS_ID está configurado."
            )
        return resolved


def _required(value: str, name: str) -> str:
    if not value:
        raise ValueError(f"{name} é obrigatório")
    return value


def _enum_value(enum_cls: type[Any], value: str, name: str) -> str:
    try:
        return enum_cls(str(value).upper()).value
    except ValueError as exc:
        valid = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"{name} inválido: {value!r}. Válidos: {valid}") from exc
