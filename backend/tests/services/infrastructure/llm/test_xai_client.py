"""
Tests for roastcast.services.infrastructure.llm.xai.client

The HTTP layer is exercised against an ``httpx.MockTransport``.
"""

import json

import httpx
import pytest

from roastcast.core.exceptions import TransportError
from roastcast.services.infrastructure.llm import LLMConfig, ProviderType, XAIClient
from roastcast.services.infrastructure.polling import PollState

BASE_URL = "https://api.x.ai/v1"


def make_client(handler, api_key="test-key"):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    return XAIClient(api_key=api_key, http_client=http)


class TestChatCompletion:
    """Test text generation."""

    @pytest.mark.asyncio
    async def test_generate_builds_messages_and_parses_reply(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "model": "grok-4-fast-reasoning",
                "choices": [{"message": {"content": "  no_slop \n"}}],
                "usage": {"prompt_tokens": 12, "completion_tokens": 2, "total_tokens": 14},
            })

        client = make_client(handler)
        response = await client.generate(
            "Classify this",
            LLMConfig(model="grok-4-fast-reasoning", temperature=0.0, max_tokens=10, system_instruction="sys"),
        )

        assert seen["url"] == f"{BASE_URL}/chat/completions"
        assert seen["auth"] == "Bearer test-key"
        assert seen["body"]["messages"] == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "Classify this"},
        ]
        assert seen["body"]["temperature"] == 0.0
        assert seen["body"]["max_tokens"] == 10
        assert response.text == "no_slop"
        assert response.provider is ProviderType.XAI
        assert response.usage.total_tokens == 14

    @pytest.mark.asyncio
    async def test_generate_without_system_or_temperature(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "hi"}}]})

        response = await make_client(handler).generate("hello", LLMConfig(model="m"))

        assert seen["body"] == {"model": "m", "messages": [{"role": "user", "content": "hello"}]}
        assert response.usage is None

    @pytest.mark.asyncio
    async def test_empty_choices_give_empty_text(self):
        client = make_client(lambda request: httpx.Response(200, json={"choices": []}))
        response = await client.generate("x", LLMConfig(model="m"))
        assert response.text == ""

    @pytest.mark.asyncio
    async def test_non_object_body_raises_transport_error(self):
        client = make_client(lambda request: httpx.Response(200, json=["hello"]))
        with pytest.raises(TransportError, match="not an object"):
            await client.generate("x", LLMConfig(model="m"))

    @pytest.mark.asyncio
    async def test_malformed_choice_gives_empty_text(self):
        client = make_client(lambda request: httpx.Response(200, json={"choices": ["oops"]}))
        response = await client.generate("x", LLMConfig(model="m"))
        assert response.text == ""

    @pytest.mark.asyncio
    async def test_error_status_raises_transport_error(self):
        client = make_client(lambda request: httpx.Response(500, text="model overloaded"))

        with pytest.raises(TransportError, match="model overloaded") as exc_info:
            await client.generate("x", LLMConfig(model="m"))
        assert exc_info.value.status_code == 500


class TestVideoJobs:
    """Test video submission and status checks."""

    @pytest.mark.asyncio
    async def test_submit_video_returns_request_id(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"request_id": "vid-123"})

        job_id = await make_client(handler).submit_video("grok-imagine-video-a2", "a prompt")

        assert job_id == "vid-123"
        assert seen["path"] == "/v1/videos/generations"
        assert seen["body"] == {"model": "grok-imagine-video-a2", "prompt": "a prompt"}

    @pytest.mark.asyncio
    async def test_submit_video_from_image_sends_image_url(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "vid-9"})

        job_id = await make_client(handler).submit_video("m", "p", image_url="https://img/1.png")

        assert job_id == "vid-9"
        assert seen["body"]["image_url"] == "https://img/1.png"

    @pytest.mark.asyncio
    async def test_submit_without_id_raises(self):
        client = make_client(lambda request: httpx.Response(200, json={}))
        with pytest.raises(TransportError, match="no request id"):
            await client.submit_video("m", "p")

    @pytest.mark.asyncio
    async def test_submit_non_object_body_raises(self):
        client = make_client(lambda request: httpx.Response(200, json=["job-1"]))
        with pytest.raises(TransportError, match="no request id"):
            await client.submit_video("m", "p")

    @pytest.mark.asyncio
    async def test_submit_rejected(self):
        client = make_client(lambda request: httpx.Response(400, text="prompt rejected"))
        with pytest.raises(TransportError, match="Video generation failed: prompt rejected"):
            await client.submit_video("m", "p")

    @pytest.mark.asyncio
    async def test_submit_video_edit(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"request_id": "edit-1"})

        job_id = await make_client(handler).submit_video_edit("grok-imagine-video-beta", "https://v/1.mp4", "extend")

        assert job_id == "edit-1"
        assert seen["path"] == "/v1/videos/edits"
        assert seen["body"] == {
            "model": "grok-imagine-video-beta",
            "video_url": "https://v/1.mp4",
            "prompt": "extend",
        }

    @pytest.mark.asyncio
    async def test_fetch_video_status_completed(self):
        def handler(request):
            assert request.method == "GET"
            assert request.url.path == "/v1/videos/vid-123"
            return httpx.Response(200, json={"video": {"url": "https://v/done.mp4", "duration": 5}})

        outcome = await make_client(handler).fetch_video_status("vid-123")
        assert outcome.state is PollState.COMPLETED
        assert outcome.url == "https://v/done.mp4"

    @pytest.mark.asyncio
    async def test_fetch_video_status_rate_limited(self):
        client = make_client(lambda request: httpx.Response(429, text="slow down"))
        outcome = await client.fetch_video_status("vid-1")
        assert outcome.state is PollState.RATE_LIMITED

    @pytest.mark.asyncio
    async def test_fetch_video_status_bad_json_raises_value_error(self):
        client = make_client(lambda request: httpx.Response(200, text="not json"))
        with pytest.raises(ValueError):
            await client.fetch_video_status("vid-1")


class TestImages:
    """Test image generation."""

    @pytest.mark.asyncio
    async def test_generate_image_returns_url(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": [{"url": "https://img/thumb.png"}]})

        url = await make_client(handler).generate_image("grok-imagine-image-a1", "thumb")

        assert url == "https://img/thumb.png"
        assert seen["body"] == {
            "model": "grok-imagine-image-a1",
            "prompt": "thumb",
            "n": 1,
            "response_format": "url",
        }

    @pytest.mark.asyncio
    async def test_generate_image_empty_data(self):
        client = make_client(lambda request: httpx.Response(200, json={"data": []}))
        assert await client.generate_image("m", "p") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"data": ["not-a-dict"]},
        {"data": "https://img/thumb.png"},
        {"data": [{"url": 42}]},
        ["https://img/thumb.png"],
    ])
    async def test_generate_image_malformed_body(self, body):
        client = make_client(lambda request: httpx.Response(200, json=body))
        assert await client.generate_image("m", "p") is None


class TestAvailability:
    """Test key handling."""

    def test_is_available_with_key(self):
        assert make_client(lambda r: httpx.Response(200), api_key="k").is_available()

    def test_no_auth_header_without_key(self, monkeypatch):
        monkeypatch.setattr("roastcast.services.infrastructure.llm.xai.client.XAI_API_KEY", None)
        client = make_client(lambda r: httpx.Response(200), api_key=None)
        assert not client.is_available()
        assert "Authorization" not in client._auth_headers()
