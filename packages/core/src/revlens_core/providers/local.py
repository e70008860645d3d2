"""Reviewer for self-hosted servers speaking the OpenAI chat-completion schema.

Ollama and LM Studio both expose ``POST /v1/chat/completions``; the only
differences are the default URL and the display name, so one class serves both.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from revlens_core.errors import (
    IncompleteConfigurationError,
    MalformedResponseError,
    ProviderHTTPError,
    UnreachableProviderError,
)
from revlens_core.models import LocalProviderConfig, ProviderConfig, ProviderId, ReviewInput
from revlens_core.prompts import build_system_prompt, build_user_message
from revlens_core.providers.base import ReviewBackend

logger = logging.getLogger(__name__)


def build_request_body(review_input: ReviewInput, model: str) -> dict:
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": build_system_prompt(review_input.mode, review_input.language)},
            {"role": "user", "content": build_user_message(review_input)},
        ],
        "stream": False,
    }


def decode_chat_completion(data: Any, provider: str) -> str:
    """Extract ``choices[0].message.content`` or fail with MalformedResponseError.

    Shape: ``{"choices": [{"message": {"content": "<str>"}}]}``. Anything else,
    including an empty content string, is rejected.
    """
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise MalformedResponseError(provider)
    if not isinstance(content, str) or not content:
        raise MalformedResponseError(provider)
    return content


class LocalReviewer(ReviewBackend):
    def __init__(self, provider_id: ProviderId, transport: httpx.BaseTransport | None = None):
        if not provider_id.is_local:
            raise ValueError(f"{provider_id.value!r} is not a local provider.")
        self.provider_id = provider_id
        self.name = provider_id.display_name
        # Injected in tests (httpx.MockTransport); None means real network I/O.
        self._transport = transport

    def select_config(self, config: ProviderConfig) -> LocalProviderConfig:
        return config.ollama if self.provider_id is ProviderId.OLLAMA else config.lmstudio

    def _check_config(self, config: LocalProviderConfig) -> None:
        if not config.url or not config.model:
            raise IncompleteConfigurationError(self.name)

    def _call_api(self, review_input: ReviewInput, config: LocalProviderConfig) -> str:
        body = build_request_body(review_input, config.model)
        try:
            with httpx.Client(transport=self._transport, timeout=config.timeout) as client:
                response = client.post(config.url, json=body)
        except httpx.TransportError as e:
            logger.error("Could not connect to %s at %s: %s", self.name, config.url, e)
            raise UnreachableProviderError(self.name, config.url) from e

        if not response.is_success:
            logger.error("%s at %s returned HTTP %d", self.name, config.url, response.status_code)
            raise ProviderHTTPError(self.name, response.status_code, config.url, response.text)

        try:
            data = response.json()
        except ValueError:
            raise MalformedResponseError(self.name)
        return decode_chat_completion(data, self.name)
