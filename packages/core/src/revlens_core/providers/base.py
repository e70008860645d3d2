"""Base reviewer implementing the Template Method pattern.

All backends share the same review algorithm:
    review() → select_config() → _check_config()
             → _call_api()   ← only this differs per provider
             → _map_error()  ← turns provider exceptions into ReviewErrors

Subclasses implement:
  - select_config: pick their slice of ProviderConfig
  - _check_config: fail fast on missing settings, before any network traffic
  - _call_api: make exactly one request and return the review text

There is no retry loop: a failed request is surfaced to the
session immediately so the user sees the real reason.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from revlens_core.errors import ReviewError, UnknownReviewError

if TYPE_CHECKING:
    from revlens_core.models import ProviderConfig, ReviewInput

logger = logging.getLogger(__name__)


class ReviewBackend(ABC):
    #: Human-readable provider name used in every error message.
    name: str = ""

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def review(self, review_input: ReviewInput, config: Any) -> str:
        """Run a single review against this backend and return Markdown.

        ``config`` is the provider's own sub-config as returned by
        select_config(); the dispatcher never hands a backend settings that
        belong to another provider.
        """
        self._check_config(config)
        try:
            return self._call_api(review_input, config)
        except ReviewError:
            raise
        except Exception as e:
            logger.error("%s review failed: %s", self.name, e)
            raise self._map_error(e) from e

    # ------------------------------------------------------------------ #
    # Abstract — implement in each provider                               #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def select_config(self, config: ProviderConfig) -> Any:
        """Return the part of ProviderConfig this backend needs."""

    @abstractmethod
    def _check_config(self, config: Any) -> None:
        """Raise a ConfigurationError if the sub-config cannot be used."""

    @abstractmethod
    def _call_api(self, review_input: ReviewInput, config: Any) -> str:
        """Make a single API call and return the raw review text.

        May raise ReviewError subclasses directly; anything else is passed
        through _map_error().
        """

    # ------------------------------------------------------------------ #
    # Shared implementations                                               #
    # ------------------------------------------------------------------ #

    def _map_error(self, error: Exception) -> ReviewError:
        """Wrap an unexpected exception. Subclasses refine this per provider."""
        detail = str(error)
        if not detail:
            return UnknownReviewError(f"An unexpected error occurred during the code review with {self.name}.")
        return UnknownReviewError(detail)
