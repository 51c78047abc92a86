"""
xAI API Client

Thin async transport over the xAI REST API:

    - POST /chat/completions      text completion (classification, storylines)
    - POST /videos/generations    submit a text- or image-to-video job
    - POST /videos/edits          submit an edit/extend job on an existing clip
    - GET  /videos/{request_id}   poll a video job
    - POST /images/generations    generate an image (thumbnails, seed frames)

This layer only speaks HTTP. Prompt building, template selection and the
polling loop live in the media client and the poller.
"""

from typing import Any, Dict, List, Optional

import httpx

from roastcast.config import XAI_API_KEY, XAI_BASE_URL, XAI_TIMEOUT_SECONDS
from roastcast.core.exceptions import TransportError
from roastcast.core.logging import get_logger
from roastcast.services.infrastructure.polling import PollOutcome, normalize_poll_response

from ..base import LLMConfig, LLMProvider, LLMResponse, ProviderType, UsageStats

logger = get_logger(__name__, component="xai_client")


class XAIClient(LLMProvider):
    """Async client for the xAI chat, video and image endpoints"""

    provider_type = ProviderType.XAI

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = XAI_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the client

        Args:
            api_key: xAI API key. Defaults to the XAI_API_KEY env var
            base_url: API root. Defaults to XAI_BASE_URL (https://api.x.ai/v1)
            timeout: Per-request timeout in seconds
            http_client: Pre-built client (tests pass one with a MockTransport)
        """
        self.api_key = api_key or XAI_API_KEY
        self.base_url = (base_url or XAI_BASE_URL).rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
        )

    def _auth_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def is_available(self) -> bool:
        return bool(self.api_key)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _post(self, path: str, payload: Dict[str, Any], action: str) -> Dict[str, Any]:
        logger.debug(f"POST {path}", extra={"model": payload.get("model")})
        response = await self._http.post(path, json=payload, headers=self._auth_headers())
        if response.status_code >= 400:
            raise TransportError(
                f"{action} failed: {response.text}",
                status_code=response.status_code,
            )
        return response.json()

    # ------------------------------------------------------------------
    # Text completion
    # ------------------------------------------------------------------

    async def generate(self, prompt: str, config: LLMConfig) -> LLMResponse:
        messages: List[Dict[str, str]] = []
        if config.system_instruction:
            messages.append({"role": "system", "content": config.system_instruction})
        messages.append({"role": "user", "content": prompt})

        payload: Dict[str, Any] = {"model": config.model, "messages": messages}
        if config.temperature is not None:
            payload["temperature"] = config.temperature
        if config.max_tokens:
            payload["max_tokens"] = config.max_tokens
        payload.update(config.extra_options)

        data = await self._post("/chat/completions", payload, action="Chat completion")
        return self._parse_chat_response(data, config.model)

    def _parse_chat_response(self, data: Dict[str, Any], model: str) -> LLMResponse:
        if not isinstance(data, dict):
            raise TransportError("Chat completion failed: response body is not an object")
        choices = data.get("choices")
        first = choices[0] if isinstance(choices, list) and choices else None
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        text = content if isinstance(content, str) else ""

        usage = None
        raw_usage = data.get("usage")
        if isinstance(raw_usage, dict):
            usage = UsageStats(
                input_tokens=raw_usage.get("prompt_tokens", 0),
                output_tokens=raw_usage.get("completion_tokens", 0),
                total_tokens=raw_usage.get("total_tokens", 0),
            )

        return LLMResponse(
            text=text.strip(),
            model=data.get("model", model),
            provider=self.provider_type,
            usage=usage,
            raw_response=data,
        )

    # ------------------------------------------------------------------
    # Video jobs
    # ------------------------------------------------------------------

    async def submit_video(
        self,
        model: str,
        prompt: str,
        image_url: Optional[str] = None,
    ) -> str:
        """Submit a generation job and return its request id"""
        payload: Dict[str, Any] = {"model": model, "prompt": prompt}
        if image_url:
            payload["image_url"] = image_url
        action = "Image-to-video generation" if image_url else "Video generation"
        data = await self._post("/videos/generations", payload, action=action)
        return self._job_id(data, action)

    async def submit_video_edit(self, model: str, video_url: str, prompt: str) -> str:
        """Submit an edit job on an existing clip and return its request id"""
        payload = {"model": model, "video_url": video_url, "prompt": prompt}
        data = await self._post("/videos/edits", payload, action="Video editing")
        return self._job_id(data, "Video editing")

    @staticmethod
    def _job_id(data: Dict[str, Any], action: str) -> str:
        job_id = (data.get("request_id") or data.get("id")) if isinstance(data, dict) else None
        if not job_id:
            raise TransportError(f"{action} failed: response carried no request id")
        return str(job_id)

    async def fetch_video_status(self, job_id: str) -> PollOutcome:
        """Check a video job once.

        Transport errors and undecodable bodies propagate so the poller can
        treat them as transient.
        """
        response = await self._http.get(f"/videos/{job_id}", headers=self._auth_headers())
        payload = response.json() if 200 <= response.status_code < 300 else None
        return normalize_poll_response(response.status_code, payload)

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def generate_image(self, model: str, prompt: str) -> Optional[str]:
        """Generate one image and return its url (None if the body had none)"""
        payload = {"model": model, "prompt": prompt, "n": 1, "response_format": "url"}
        data = await self._post("/images/generations", payload, action="Image generation")
        images = data.get("data") if isinstance(data, dict) else None
        if not isinstance(images, list) or not images or not isinstance(images[0], dict):
            return None
        url = images[0].get("url")
        return url if isinstance(url, str) and url else None
