"""Tests for provider adapters and the provider registry."""

import json
from types import SimpleNamespace

import anthropic
import httpx
import pytest

from ai_assistant.config import Settings
from ai_assistant.dependencies import build_provider_registry
from ai_assistant.services import claude_provider as claude_module
from ai_assistant.services.claude_provider import ClaudeProvider
from ai_assistant.services.huggingface_provider import HuggingFaceProvider
from ai_assistant.services.providers import (
    SYSTEM_CONTEXTS,
    ProviderAuthError,
    ProviderError,
    ProviderMalformedResponse,
    ProviderPort,
    ProviderRateLimited,
    ProviderRegistry,
    ProviderUnavailable,
)

HF_URL = "https://router.example.test/v1/chat/completions"


def make_settings(**overrides) -> Settings:
    values = {
        "anthropic_api_key": "test-anthropic-key",
        "huggingface_api_key": "test-huggingface-key",
        "huggingface_url": HF_URL,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestProviderRegistry:
    """Name based provider resolution."""

    def test_resolves_registered_names_case_insensitively(self, fake_provider, make_registry):
        claude = fake_provider("Claude")
        huggingface = fake_provider("HuggingFace")
        registry = make_registry(claude, huggingface)

        assert registry.resolve("claude") is claude
        assert registry.resolve(" HuggingFace ") is huggingface
        assert "HUGGINGFACE" in registry
        assert registry.names == ["Claude", "HuggingFace"]
        assert len(registry) == 2

    def test_unknown_and_missing_names_resolve_to_first_provider(self, fake_provider, make_registry):
        claude = fake_provider("Claude")
        registry = make_registry(claude, fake_provider("HuggingFace"))

        assert registry.resolve("GoogleGemini") is claude
        assert registry.resolve(None) is claude
        assert registry.resolve("") is claude

    def test_default_provider_used_without_name(self, fake_provider, make_registry):
        huggingface = fake_provider("HuggingFace")
        registry = make_registry(fake_provider("Claude"), huggingface, default="huggingface")

        assert registry.resolve() is huggingface

    @pytest.mark.parametrize("name", [" ", "\t", ""])
    def test_blank_name_uses_default_provider(self, fake_provider, make_registry, name):
        huggingface = fake_provider("HuggingFace")
        registry = make_registry(fake_provider("Claude"), huggingface, default="HuggingFace")

        assert registry.resolve(name) is huggingface

    @pytest.mark.asyncio
    async def test_aclose_closes_adapter_clients(self, fake_provider):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        registry = ProviderRegistry()
        registry.register(fake_provider("Claude"))
        registry.register(HuggingFaceProvider(make_settings(), client=client))

        await registry.aclose()

        assert client.is_closed

    def test_empty_registry_raises(self):
        with pytest.raises(LookupError):
            ProviderRegistry().resolve("Claude")

    def test_duplicate_registration_raises(self, fake_provider, make_registry):
        registry = make_registry(fake_provider("Claude"))

        with pytest.raises(ValueError):
            registry.register(fake_provider("claude"))

    def test_build_provider_registry(self):
        registry = build_provider_registry(make_settings(default_provider="HuggingFace"))

        assert registry.names == ["Claude", "HuggingFace"]
        assert registry.resolve().name == "HuggingFace"
        assert isinstance(registry.resolve("Claude"), ProviderPort)


class TestHuggingFaceProvider:
    """HTTP adapter exercised through an httpx mock transport."""

    @staticmethod
    def build(handler) -> HuggingFaceProvider:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return HuggingFaceProvider(make_settings(), client=client)

    @pytest.mark.asyncio
    async def test_returns_stripped_message_content(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["payload"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "  Keep pushing!  "}}]})

        provider = self.build(handler)
        text = await provider.get_motivation_text("Motivate me")
        await provider.aclose()

        assert text == "Keep pushing!"
        assert captured["url"] == HF_URL
        payload = captured["payload"]
        assert payload["model"] == "Meta-Llama-3.1-8B-Instruct"
        assert payload["stream"] is False
        assert payload["max_tokens"] == 1000
        assert payload["messages"][0]["content"] == f"{SYSTEM_CONTEXTS['motivation']}\n\nMotivate me"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "error_type"),
        [(401, ProviderAuthError), (403, ProviderAuthError), (429, ProviderRateLimited)],
    )
    async def test_maps_error_statuses(self, status, error_type):
        provider = self.build(lambda request: httpx.Response(status, text="nope"))

        with pytest.raises(error_type) as excinfo:
            await provider.get_fitness_text("Analyze")

        assert excinfo.value.status_code == status
        assert excinfo.value.provider == "HuggingFace"

    @pytest.mark.asyncio
    async def test_server_error_is_generic_provider_error(self):
        provider = self.build(lambda request: httpx.Response(500, text="internal"))

        with pytest.raises(ProviderError) as excinfo:
            await provider.get_health_text("Analyze")

        assert type(excinfo.value) is ProviderError
        assert excinfo.value.status_code == 500

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="not json"),
            httpx.Response(200, json={"choices": []}),
            httpx.Response(200, json={"error": "overloaded"}),
            httpx.Response(200, json={"choices": [{"message": {"content": None}}]}),
        ],
    )
    async def test_malformed_payloads(self, response):
        provider = self.build(lambda request: response)

        with pytest.raises(ProviderMalformedResponse):
            await provider.get_fitness_text("Analyze")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("exc_type", [httpx.ReadTimeout, httpx.ConnectError])
    async def test_transport_failures_are_unavailable(self, exc_type):
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc_type("failed", request=request)

        provider = self.build(handler)

        with pytest.raises(ProviderUnavailable):
            await provider.get_fitness_text("Analyze")

    def test_default_client_sends_bearer_token(self):
        provider = HuggingFaceProvider(make_settings())

        assert provider.client.headers["Authorization"] == "Bearer test-huggingface-key"


class FakeMessages:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.response


def _status_response(status: int) -> httpx.Response:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    return httpx.Response(status, request=request)


class TestClaudeProvider:
    """Anthropic adapter with the SDK client replaced by a fake."""

    @staticmethod
    def build(monkeypatch, messages: FakeMessages, **overrides) -> ClaudeProvider:
        monkeypatch.setattr(
            claude_module,
            "AsyncAnthropic",
            lambda **kwargs: SimpleNamespace(messages=messages, options=kwargs),
        )
        return ClaudeProvider(make_settings(**overrides))

    @pytest.mark.asyncio
    async def test_returns_first_text_block(self, monkeypatch):
        response = SimpleNamespace(content=[SimpleNamespace(type="text", text="\nANALYSIS: Solid week.\n")])
        messages = FakeMessages(response=response)
        provider = self.build(monkeypatch, messages)

        text = await provider.get_health_text("Analyze my week")

        assert text == "ANALYSIS: Solid week."
        assert messages.kwargs["system"] == SYSTEM_CONTEXTS["health"]
        assert messages.kwargs["messages"] == [{"role": "user", "content": "Analyze my week"}]
        assert messages.kwargs["model"] == "claude-sonnet-4-5-20250929"
        assert provider.client.options["api_key"] == "test-anthropic-key"

    @pytest.mark.asyncio
    async def test_aclose_closes_sdk_client(self, monkeypatch):
        closed = []

        async def close():
            closed.append(True)

        monkeypatch.setattr(
            claude_module,
            "AsyncAnthropic",
            lambda **kwargs: SimpleNamespace(messages=FakeMessages(), close=close),
        )
        provider = ClaudeProvider(make_settings())

        await provider.aclose()

        assert closed == [True]

    @pytest.mark.asyncio
    async def test_missing_api_key_raises_auth_error(self, monkeypatch):
        provider = self.build(monkeypatch, FakeMessages(), anthropic_api_key=None)

        assert provider.client is None
        with pytest.raises(ProviderAuthError):
            await provider.get_fitness_text("Analyze")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [SimpleNamespace(content=[]), SimpleNamespace(content=[SimpleNamespace(type="tool_use")])],
    )
    async def test_malformed_content(self, monkeypatch, response):
        provider = self.build(monkeypatch, FakeMessages(response=response))

        with pytest.raises(ProviderMalformedResponse):
            await provider.get_motivation_text("Motivate me")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (
                anthropic.RateLimitError("slow down", response=_status_response(429), body=None),
                ProviderRateLimited,
            ),
            (
                anthropic.AuthenticationError("bad key", response=_status_response(401), body=None),
                ProviderAuthError,
            ),
            (
                anthropic.APITimeoutError(request=httpx.Request("POST", "https://api.anthropic.com")),
                ProviderUnavailable,
            ),
            (
                anthropic.APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com")),
                ProviderUnavailable,
            ),
            (
                anthropic.InternalServerError("boom", response=_status_response(500), body=None),
                ProviderError,
            ),
        ],
    )
    async def test_maps_sdk_errors(self, monkeypatch, error, expected):
        provider = self.build(monkeypatch, FakeMessages(error=error))

        with pytest.raises(expected) as excinfo:
            await provider.get_fitness_text("Analyze")

        assert type(excinfo.value) is expected
        assert excinfo.value.__cause__ is error
