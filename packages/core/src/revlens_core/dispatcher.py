"""Provider dispatch: a lookup table from ProviderId to ReviewBackend."""

from __future__ import annotations

import logging
from typing import Mapping

from revlens_core.errors import UnsupportedProviderError
from revlens_core.models import ProviderConfig, ProviderId, ReviewInput
from revlens_core.providers.base import ReviewBackend

logger = logging.getLogger(__name__)


def default_backends() -> dict[ProviderId, ReviewBackend]:
    # Imported here so a missing optional SDK only fails when the table is built.
    from revlens_core.providers.gemini import GeminiReviewer
    from revlens_core.providers.local import LocalReviewer

    return {
        ProviderId.GEMINI: GeminiReviewer(),
        ProviderId.OLLAMA: LocalReviewer(ProviderId.OLLAMA),
        ProviderId.LMSTUDIO: LocalReviewer(ProviderId.LMSTUDIO),
    }


class Dispatcher:
    def __init__(self, backends: Mapping[ProviderId, ReviewBackend] | None = None):
        self._backends: dict[ProviderId, ReviewBackend] = dict(backends) if backends is not None else default_backends()

    def register(self, provider_id: ProviderId, backend: ReviewBackend) -> None:
        self._backends[provider_id] = backend

    def backend_for(self, provider_id: ProviderId | str) -> ReviewBackend:
        try:
            return self._backends[ProviderId(provider_id)]
        except (KeyError, ValueError):
            raise UnsupportedProviderError(getattr(provider_id, "value", provider_id))

    def dispatch(self, review_input: ReviewInput, provider_id: ProviderId | str, config: ProviderConfig) -> str:
        """Run the review on the selected backend.

        Failures propagate unchanged; retrying or wrapping is the caller's call.
        """
        backend = self.backend_for(provider_id)
        logger.debug("Dispatching %s review to %s", review_input.mode.value, backend.name)
        return backend.review(review_input, backend.select_config(config))
