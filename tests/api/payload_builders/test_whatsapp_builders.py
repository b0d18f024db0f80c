"""Testes para api.payload_builders.whatsapp.

Cobre: base/context, text, reaction, read receipt, media, location,
address, template, interactive (botões, CTA URL, flow, location request)
e contatos.
"""

from __future__ import annotations

import pytest

from api.payload_builders.whatsapp import (
    build_address_request_payload,
    build_base_payload,
    build_body_parameters,
    build_contacts_payload,
    build_cta_url_payload,
    build_flow_payload,
    build_interactive_payload,
    build_location_payload,
    build_location_request_payload,
    build_media_payload,
    build_reaction_payload,
    build_read_receipt_payload,
    build_reply_buttons,
    build_template_definition,
    build_template_payload,
    build_text_payload,
    with_context,
)
from api.payload_builders.whatsapp.text import MAX_TEXT_LENGTH

TO = "5511999999999"


class TestBase:
    def test_base_payload(self) -> None:
        assert build_base_payload(TO, "text") == {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": TO,
            "type": "text",
        }

    @pytest.mark.parametrize("to", ["", "   "])
    def test_empty_recipient_raises(self, to: str) -> None:
        with pytest.raises(ValueError):
            build_base_payload(to, "text")

    def test_with_context_returns_copy(self) -> None:
        payload = build_text_payload(TO, "oi")

        replied = with_context(payload, "wamid.0")

        assert replied["context"] == {"message_id": "wamid.0"}
        assert "context" not in payload

    def test_with_context_none_is_identity(self) -> None:
        payload = build_text_payload(TO, "oi")
        assert with_context(payload, None) is payload


class TestText:
    def test_text_payload(self) -> None:
        payload = build_text_payload(TO, "Olá", preview_url=True)
        assert payload["type"] == "text"
        assert payload["text"] == {"preview_url": True, "body": "Olá"}

    def test_empty_text_raises(self) -> None:
        with pytest.raises(ValueError):
            build_text_payload(TO, "")

    def test_text_too_long_raises(self) -> None:
        with pytest.raises(ValueError):
            build_text_payload(TO, "x" * (MAX_TEXT_LENGTH + 1))

    def test_reaction_payload(self) -> None:
        payload = build_reaction_payload(TO, "wamid.1", "")
        assert payload["reaction"] == {"message_id": "wamid.1", "emoji": ""}

    def test_reaction_requires_message_id(self) -> None:
        with pytest.raises(ValueError):
            build_reaction_payload(TO, "", "👍")

    def test_read_receipt(self) -> None:
        assert build_read_receipt_payload("wamid.1") == {
            "messaging_product": "whatsapp",
            "status": "read",
            "message_id": "wamid.1",
        }


class TestMedia:
    def test_image_by_id_with_caption(self) -> None:
        payload = build_media_payload(TO, "image", media_id="m1", caption="legenda")
        assert payload["image"] == {"id": "m1", "caption": "legenda"}

    def test_id_takes_precedence_over_link(self) -> None:
        payload = build_media_payload(TO, "video", media_id="m1", media_url="https://x/v.mp4")
        assert payload["video"] == {"id": "m1"}

    def test_audio_ignores_caption_and_filename(self) -> None:
        payload = build_media_payload(
            TO, "audio", media_url="https://x/a.ogg", caption="c", filename="a.ogg"
        )
        assert payload["audio"] == {"link": "https://x/a.ogg"}

    def test_document_filename(self) -> None:
        payload = build_media_payload(TO, "document", media_id="d1", filename="nota.pdf")
        assert payload["document"]["filename"] == "nota.pdf"

    def test_requires_id_or_link(self) -> None:
        with pytest.raises(ValueError):
            build_media_payload(TO, "sticker")

    @pytest.mark.parametrize("media_type", ["text", "gif"])
    def test_non_media_type_raises(self, media_type: str) -> None:
        with pytest.raises(ValueError):
            build_media_payload(TO, media_type, media_id="m1")


class TestLocation:
    def test_location_payload(self) -> None:
        payload = build_location_payload(TO, -23.55, -46.63, name="Sede", address="Av. Paulista")
        assert payload["location"] == {
            "latitude": -23.55,
            "longitude": -46.63,
            "name": "Sede",
            "address": "Av. Paulista",
        }

    @pytest.mark.parametrize(("lat", "lng"), [(91, 0), (0, -181)])
    def test_invalid_coordinates(self, lat: float, lng: float) -> None:
        with pytest.raises(ValueError):
            build_location_payload(TO, lat, lng)

    def test_address_request(self) -> None:
        payload = build_address_request_payload(TO)
        assert payload["type"] == "address"
        assert payload["address"]["request_address"] == {
            "type": "HOME",
            "button_text": "Send Address",
        }


class TestTemplate:
    def test_template_minimal(self) -> None:
        payload = build_template_payload(TO, "boas_vindas")
        assert payload["template"] == {"name": "boas_vindas", "language": {"code": "pt_BR"}}
        assert "ttl" not in payload

    def test_template_components_and_ttl(self) -> None:
        components = [build_body_parameters(["Ana", 3])]  # type: ignore[list-item]

        payload = build_template_payload(TO, "pedido", "pt_BR", components, ttl="PT1H")

        assert payload["template"]["components"][0]["parameters"] == [
            {"type": "text", "text": "Ana"},
            {"type": "text", "text": "3"},
        ]
        assert payload["ttl"] == "PT1H"

    def test_template_requires_name(self) -> None:
        with pytest.raises(ValueError):
            build_template_payload(TO, "")

    def test_template_definition_normalizes_category(self) -> None:
        definition = build_template_definition("aviso_entrega", "utility", "en_US")

        assert definition == {
            "name": "aviso_entrega",
            "category": "UTILITY",
            "language": "en_US",
            "components": [],
        }

    @pytest.mark.parametrize(("name", "category"), [("", "UTILITY"), ("aviso", "PROMO")])
    def test_template_definition_rejects_invalid(self, name: str, category: str) -> None:
        with pytest.raises(ValueError):
            build_template_definition(name, category)


class TestInteractive:
    def test_unknown_interactive_type_raises(self) -> None:
        with pytest.raises(ValueError):
            build_interactive_payload(TO, {"type": "carousel"})

    def test_reply_buttons(self) -> None:
        payload = build_reply_buttons(TO, "Confirma?", [("sim", "Sim"), ("nao", "Não")], "rodapé")

        interactive = payload["interactive"]
        assert interactive["type"] == "button"
        assert interactive["action"]["buttons"][1] == {
            "type": "reply",
            "reply": {"id": "nao", "title": "Não"},
        }
        assert interactive["footer"] == {"text": "rodapé"}

    def test_reply_buttons_limit(self) -> None:
        with pytest.raises(ValueError):
            build_reply_buttons(TO, "?", [(str(i), str(i)) for i in range(4)])

    def test_cta_url(self) -> None:
        interactive = build_cta_url_payload(TO, "Acesse", "Abrir", "https://x")["interactive"]
        assert interactive["action"] == {
            "name": "cta_url",
            "parameters": {"display_text": "Abrir", "url": "https://x"},
        }
        assert "header" not in interactive

    def test_flow_without_screen(self) -> None:
        parameters = build_flow_payload(TO, "f1", flow_token="tok")["interactive"]["action"][
            "parameters"
        ]
        assert parameters == {
            "flow_message_version": "3",
            "flow_id": "f1",
            "flow_cta": "Start",
            "flow_token": "tok",
        }

    def test_flow_requires_id(self) -> None:
        with pytest.raises(ValueError):
            build_flow_payload(TO, "")

    def test_location_request(self) -> None:
        interactive = build_location_request_payload(TO, "Compartilhe", "obrigado")["interactive"]
        assert interactive["type"] == "location_request_message"
        assert interactive["footer"] == {"text": "obrigado"}


class TestContacts:
    def test_contacts_payload(self) -> None:
        contacts = [{"name": {"formatted_name": "Ana Souza"}, "phones": [{"phone": TO}]}]
        payload = build_contacts_payload(TO, contacts)
        assert payload["type"] == "contacts"
        assert payload["contacts"] == contacts

    @pytest.mark.parametrize("contacts", [[], [{"name": {}}], [{"phones": []}]])
    def test_invalid_contacts(self, contacts) -> None:
        with pytest.raises(ValueError):
            build_contacts_payload(TO, contacts)
