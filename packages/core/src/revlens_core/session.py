"""Review session controller.

State machine::

    IDLE / SUCCESS / FAILED ──submit──▶ LOADING ──▶ SUCCESS | FAILED
              ▲                                         │
              └──────────────── reset ◀─────────────────┘

Only one review may be in flight per session: submitting while LOADING raises
ReviewInProgressError and leaves the running review untouched. Every submit
and reset bumps a generation counter; a dispatch result is written back only
if its generation is still current, so a response that arrives after reset()
can never overwrite newer state.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum

from revlens_core.dispatcher import Dispatcher
from revlens_core.errors import ReviewInProgressError, ValidationError
from revlens_core.models import Project, ProviderConfig, ProviderId, ReviewInput

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class SessionState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


def validate_input(review_input: ReviewInput) -> None:
    if isinstance(review_input, Project):
        if not review_input.files:
            raise ValidationError("Please upload a project to review.")
    elif not review_input.code.strip():
        raise ValidationError("Please enter some code to review.")


def error_message(error: BaseException) -> str:
    return str(error) or UNKNOWN_ERROR_MESSAGE


class ReviewSession:
    def __init__(self, dispatcher: Dispatcher | None = None):
        self.dispatcher = dispatcher if dispatcher is not None else Dispatcher()
        self.state = SessionState.IDLE
        self.result: str | None = None
        self.error: str | None = None
        self.generation = 0
        self._lock = threading.Lock()

    def submit(self, review_input: ReviewInput, provider_id: ProviderId | str, config: ProviderConfig) -> str:
        """Run one review and record its outcome on the session.

        Returns the review Markdown. On failure the session moves to FAILED
        with a display message and the original exception is re-raised.
        """
        with self._lock:
            if self.state is SessionState.LOADING:
                raise ReviewInProgressError()
            self.result = None
            self.error = None
            try:
                validate_input(review_input)
            except ValidationError as e:
                self.state = SessionState.FAILED
                self.error = error_message(e)
                raise
            self.generation += 1
            generation = self.generation
            self.state = SessionState.LOADING
        logger.debug("Review #%d started", generation)

        try:
            text = self.dispatcher.dispatch(review_input, provider_id, config)
        except BaseException as e:
            # Interrupts must not leave the session stuck in LOADING.
            self._finish(generation, SessionState.FAILED, error=error_message(e))
            raise
        self._finish(generation, SessionState.SUCCESS, result=text)
        return text

    def reset(self) -> None:
        """Return to IDLE. An in-flight request keeps running but its result is discarded."""
        with self._lock:
            self.generation += 1
            self.state = SessionState.IDLE
            self.result = None
            self.error = None

    def _finish(self, generation: int, state: SessionState, result: str | None = None, error: str | None = None):
        with self._lock:
            if generation != self.generation:
                logger.debug("Discarding stale result of review #%d", generation)
                return
            self.state = state
            self.result = result
            self.error = error
        logger.debug("Review #%d finished: %s", generation, state.value)
