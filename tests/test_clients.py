"""Production collaborator tests — GeminiClient and EmailJSRelay.

Neither test touches the network: GeminiClient gets a fake ``genai.Client``
whose ``aio.models.generate_content`` is an AsyncMock, and EmailJSRelay
gets an ``httpx.MockTransport``.
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest

from leak_intake.errors import TransportError
from leak_intake.gemini import GeminiClient
from leak_intake.models.answers import EncodedImage
from leak_intake.models.report import RELEVANCE_RESPONSE_SCHEMA
from leak_intake.models.request import GenerationRequest, NotificationPayload
from leak_intake.relay import EMAILJS_SEND_URL, EmailJSRelay

from helpers.mocks import PNG_BYTES


# =====================================================================
# GeminiClient
# =====================================================================


def _fake_genai(reply_text=None, side_effect=None):
    generate_content = AsyncMock(
        return_value=SimpleNamespace(text=reply_text),
        side_effect=side_effect,
    )
    client = SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate_content)))
    return client, generate_content


def _request(schema=None) -> GenerationRequest:
    return GenerationRequest(
        prompt="Is this a leak?",
        images=(EncodedImage.from_bytes(PNG_BYTES, "image/png"),),
        response_schema=schema,
    )


class TestGeminiClient:

    @pytest.mark.asyncio
    async def test_sends_prompt_images_and_schema(self):
        fake, generate_content = _fake_genai('{"isRelevant": true}')
        client = GeminiClient(model="gemini-test", client=fake)

        reply = await client.generate(_request(RELEVANCE_RESPONSE_SCHEMA))

        assert json.loads(reply) == {"isRelevant": True}
        kwargs = generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"][0] == "Is this a leak?"
        assert len(kwargs["contents"]) == 2
        assert kwargs["config"].response_mime_type == "application/json"

    @pytest.mark.asyncio
    async def test_no_schema_no_config(self):
        fake, generate_content = _fake_genai("plain text")
        await GeminiClient(client=fake).generate(_request())
        assert generate_content.await_args.kwargs["config"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, "", "   "])
    async def test_empty_reply(self, text):
        fake, _ = _fake_genai(text)
        with pytest.raises(TransportError):
            await GeminiClient(client=fake).generate(_request())

    @pytest.mark.asyncio
    async def test_transport_failure_wrapped(self):
        fake, _ = _fake_genai(side_effect=httpx.ReadTimeout("timed out"))
        with pytest.raises(TransportError) as exc_info:
            await GeminiClient(client=fake).generate(_request())
        assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)


# =====================================================================
# EmailJSRelay
# =====================================================================


def _payload() -> NotificationPayload:
    return NotificationPayload(
        region="서울 송파구",
        phone="010-1234-5678",
        date="2026-10-19 09:30:00",
        message="새 상담 요청",
    )


class TestEmailJSRelay:

    @pytest.mark.asyncio
    async def test_posts_template_params(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="OK")

        relay = EmailJSRelay(
            service_id="svc",
            template_id="tpl",
            public_key="pk",
            transport=httpx.MockTransport(handler),
        )
        await relay.send(_payload())

        assert len(seen) == 1
        assert str(seen[0].url) == EMAILJS_SEND_URL
        body = json.loads(seen[0].content)
        assert body["service_id"] == "svc"
        assert body["template_id"] == "tpl"
        assert body["user_id"] == "pk"
        assert body["template_params"]["phone"] == "010-1234-5678"
        assert body["template_params"]["region"] == "서울 송파구"

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        relay = EmailJSRelay(
            service_id="svc",
            template_id="tpl",
            public_key="bad",
            transport=httpx.MockTransport(lambda request: httpx.Response(400, text="bad key")),
        )
        with pytest.raises(httpx.HTTPStatusError):
            await relay.send(_payload())
