"""Tests for the chat-completion client and connectivity probe."""

import json

import httpx
import pytest

from pdf_summarizer.core.config import LLMSettings
from pdf_summarizer.core.exceptions import UpstreamError, UpstreamUnavailableError
from pdf_summarizer.core.llm_client import ChatCompletionClient
from pdf_summarizer.services.summarization import ConnectivityProbe


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def make_client(handler, **overrides) -> ChatCompletionClient:
    settings = LLMSettings(api_key="sk-test-key", **overrides)
    return ChatCompletionClient(settings, transport=httpx.MockTransport(handler))


class TestChatCompletionClient:
    @pytest.mark.asyncio
    async def test_sends_single_user_message(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion("  Resumo.  "))

        client = make_client(handler)
        result = await client.invoke("Summarize this", model="gpt-4o", max_output_tokens=500)

        assert result.text == "  Resumo.  "
        assert result.model == "gpt-4o"
        assert captured["url"] == "https://api.openai.com/v1/chat/completions"
        assert captured["auth"] == "Bearer sk-test-key"
        assert captured["body"] == {
            "model": "gpt-4o",
            "messages": [{"role": "user", "content": "Summarize this"}],
            "temperature": 0.3,
            "max_tokens": 500,
        }

    @pytest.mark.asyncio
    async def test_defaults_from_settings(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion("ok"))

        client = make_client(handler, default_model="gpt-4o-mini", temperature=0.7)
        await client.invoke("Hello")

        assert captured["body"]["model"] == "gpt-4o-mini"
        assert captured["body"]["temperature"] == 0.7
        assert captured["body"]["max_tokens"] == 2000

    @pytest.mark.asyncio
    async def test_null_content_is_empty_text(self):
        client = make_client(lambda request: httpx.Response(200, json=completion(None)))
        result = await client.invoke("Hello")
        assert result.text == ""

    @pytest.mark.asyncio
    async def test_unconfigured_raises_before_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=completion("ok"))

        client = ChatCompletionClient(LLMSettings(api_key=""), transport=httpx.MockTransport(handler))

        with pytest.raises(UpstreamUnavailableError):
            await client.invoke("Hello")
        assert calls == []

    @pytest.mark.asyncio
    async def test_placeholder_key_is_not_configured(self):
        settings = LLMSettings(api_key="sk-your-openai-api-key-here")
        assert not ChatCompletionClient(settings).is_configured

    @pytest.mark.asyncio
    async def test_server_error_maps_to_upstream_error(self):
        client = make_client(
            lambda request: httpx.Response(500, json={"error": {"message": "The server had an error"}})
        )

        with pytest.raises(UpstreamError) as exc_info:
            await client.invoke("Hello")
        assert "The server had an error" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_rejected_credentials_map_to_unavailable(self):
        client = make_client(
            lambda request: httpx.Response(401, json={"error": {"message": "Incorrect API key provided"}})
        )

        with pytest.raises(UpstreamUnavailableError):
            await client.invoke("Hello")

    @pytest.mark.asyncio
    async def test_malformed_response(self):
        client = make_client(lambda request: httpx.Response(200, json={"unexpected": True}))

        with pytest.raises(UpstreamError):
            await client.invoke("Hello")

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError):
            await make_client(handler).invoke("Hello")

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(UpstreamError) as exc_info:
            await make_client(handler).invoke("Hello")
        assert "timed out" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_malformed_api_url(self):
        def handler(request):
            raise AssertionError("request should not be sent")

        client = make_client(handler, api_url="https://api.example.com/v1/\x01chat")

        with pytest.raises(UpstreamError) as exc_info:
            await client.invoke("Hello")
        assert "Invalid model API URL" in str(exc_info.value)


class TestConnectivityProbe:
    @pytest.mark.asyncio
    async def test_success_returns_preview(self, make_invoker, llm_settings):
        invoker = make_invoker(reply="x" * 80)
        status = await ConnectivityProbe(invoker, llm_settings).test_connection()

        assert status.success is True
        assert status.model == "gpt-3.5-turbo"
        assert status.response_preview == "x" * 50
        assert invoker.prompts == ["Hello"]
        assert invoker.calls[0]["max_output_tokens"] == 10

    @pytest.mark.asyncio
    async def test_failure_is_reported_not_raised(self, make_invoker, llm_settings):
        invoker = make_invoker(fail_when=lambda prompt: True)
        status = await ConnectivityProbe(invoker, llm_settings).test_connection()

        assert status.success is False
        assert "boom" in status.error

    @pytest.mark.asyncio
    async def test_unconfigured(self, make_invoker):
        invoker = make_invoker()
        status = await ConnectivityProbe(invoker, LLMSettings(api_key="")).test_connection()

        assert status.success is False
        assert status.error == "API key not configured"
        assert invoker.prompts == []

    @pytest.mark.asyncio
    async def test_malformed_api_url_is_reported(self):
        settings = LLMSettings(api_key="sk-test-key", api_url="https://api.example.com/v1/\x01chat")
        client = ChatCompletionClient(settings)

        status = await ConnectivityProbe(client, settings).test_connection()

        assert status.success is False
        assert "Invalid model API URL" in status.error
