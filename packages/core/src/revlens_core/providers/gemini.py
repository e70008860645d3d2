from __future__ import annotations

import logging

try:
    from openai import AuthenticationError as _AuthenticationError
    from openai import OpenAI as _OpenAI
except ImportError:
    _OpenAI = None  # type: ignore[assignment,misc]
    _AuthenticationError = None  # type: ignore[assignment,misc]

from revlens_core.errors import (
    InvalidCredentialError,
    MalformedResponseError,
    MissingCredentialError,
    ProviderCommunicationError,
    ReviewError,
    UnknownReviewError,
)
from revlens_core.models import ProviderConfig, ReviewInput
from revlens_core.prompts import build_prompt
from revlens_core.providers.base import ReviewBackend

logger = logging.getLogger(__name__)

# Gemini exposes an OpenAI-compatible surface, so the openai SDK is enough.
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"

_INVALID_KEY_MARKER = "API key not valid"


class GeminiReviewer(ReviewBackend):
    name = "Gemini"

    def __init__(self, base_url: str = GEMINI_BASE_URL):
        if _OpenAI is None:
            raise ImportError(
                "The 'openai' package is required for the Gemini provider. Install it with: pip install openai"
            )
        self.base_url = base_url

    def select_config(self, config: ProviderConfig) -> ProviderConfig:
        # The cloud call needs both the key and the model name, so it keeps the whole snapshot.
        return config

    def _check_config(self, config: ProviderConfig) -> None:
        if not config.gemini_api_key:
            raise MissingCredentialError(
                "Gemini API key is not configured. "
                "Please add it with `revlens settings --gemini-api-key <key>` or set GEMINI_API_KEY."
            )

    def _build_client(self, config: ProviderConfig):
        # max_retries=0: one attempt per review, failures are surfaced immediately.
        return _OpenAI(
            api_key=config.gemini_api_key,
            base_url=self.base_url,
            max_retries=0,
            timeout=config.request_timeout,
        )

    def _call_api(self, review_input: ReviewInput, config: ProviderConfig) -> str:
        client = self._build_client(config)
        response = client.chat.completions.create(
            model=config.gemini_model,
            messages=[{"role": "user", "content": build_prompt(review_input)}],
        )
        # Blocked or empty completions come back without content.
        if not response.choices or not response.choices[0].message.content:
            raise MalformedResponseError(self.name)
        return response.choices[0].message.content

    def _map_error(self, error: Exception) -> ReviewError:
        message = str(error)
        if _INVALID_KEY_MARKER in message or (
            _AuthenticationError is not None and isinstance(error, _AuthenticationError)
        ):
            return InvalidCredentialError(
                "The provided Gemini API key is not valid. Please check it with `revlens settings`."
            )
        if not message:
            return UnknownReviewError("An unexpected error occurred during the code review with Gemini.")
        return ProviderCommunicationError(self.name, message)
