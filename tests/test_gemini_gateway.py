"""
Tests for the Gemini gateway: addressing, success envelope and the
error taxonomy for every failure shape.
"""

import asyncio
import json

import httpx
import pytest
import respx

from invoice_assistant.core.errors import (
    BlockedContent,
    GatewayHTTPError,
    MalformedResponse,
    MissingCredential,
    TransportError,
)
from invoice_assistant.services.gemini import GeminiGateway
from invoice_assistant.services.prompts import build_category_request
from tests.helpers import gemini_reply

BASE_URL = "https://gemini.test/v1beta"
ENDPOINT = f"{BASE_URL}/models/gemini-2.0-flash:generateContent"


@pytest.fixture
def gateway():
    return GeminiGateway(base_url=BASE_URL, model="gemini-2.0-flash", timeout=5)


def invoke(gateway, credential="secret-key"):
    return asyncio.run(gateway.invoke(build_category_request("Laptop stand"), credential))


@respx.mock
def test_returns_first_candidate_text(gateway):
    respx.post(ENDPOINT).mock(return_value=httpx.Response(200, json=gemini_reply("Office Supplies")))

    assert invoke(gateway) == "Office Supplies"


@respx.mock
def test_credential_goes_in_query_not_body(gateway):
    route = respx.post(ENDPOINT).mock(return_value=httpx.Response(200, json=gemini_reply("Software")))

    invoke(gateway, credential="secret-key")

    request = route.calls.last.request
    assert request.url.params["key"] == "secret-key"
    body = json.loads(request.content)
    assert "secret-key" not in json.dumps(body)
    assert body["contents"][0]["role"] == "user"


@respx.mock
def test_missing_credential_makes_no_request(gateway):
    route = respx.post(ENDPOINT).mock(return_value=httpx.Response(200, json=gemini_reply("x")))

    with pytest.raises(MissingCredential):
        invoke(gateway, credential="")

    assert route.call_count == 0


@respx.mock
def test_rate_limited_status_keeps_status_and_body(gateway):
    respx.post(ENDPOINT).mock(return_value=httpx.Response(429, text="rate limited"))

    with pytest.raises(GatewayHTTPError) as exc_info:
        invoke(gateway)

    assert exc_info.value.status == 429
    assert exc_info.value.body == "rate limited"
    assert "429" in str(exc_info.value)
    assert "rate limited" in str(exc_info.value)


@respx.mock
def test_blocked_prompt_raises_blocked_content(gateway):
    respx.post(ENDPOINT).mock(return_value=httpx.Response(200, json={
        "promptFeedback": {"blockReason": "SAFETY", "blockReasonMessage": "Unsafe content"},
    }))

    with pytest.raises(BlockedContent) as exc_info:
        invoke(gateway)

    assert exc_info.value.reason == "SAFETY"
    assert "Unsafe content" in str(exc_info.value)


@respx.mock
@pytest.mark.parametrize("payload", [
    {},
    {"candidates": []},
    {"candidates": [{"content": {"parts": []}}]},
    {"candidates": [{"finishReason": "MAX_TOKENS"}]},
    {"candidates": {"a": 1}},
    {"candidates": [{"content": "oops"}]},
    {"candidates": [{"content": {"parts": {"text": "x"}}}]},
    {"candidates": [{"content": {"parts": [{"text": 42}]}}]},
])
def test_envelope_without_text_is_malformed(gateway, payload):
    respx.post(ENDPOINT).mock(return_value=httpx.Response(200, json=payload))

    with pytest.raises(MalformedResponse):
        invoke(gateway)


@respx.mock
def test_non_json_success_body_is_malformed(gateway):
    respx.post(ENDPOINT).mock(return_value=httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(MalformedResponse):
        invoke(gateway)


@respx.mock
def test_network_failure_is_transport_error_without_key(gateway):
    respx.post(ENDPOINT).mock(side_effect=httpx.ConnectError("connection refused"))

    with pytest.raises(TransportError) as exc_info:
        invoke(gateway, credential="secret-key")

    assert "secret-key" not in str(exc_info.value)
