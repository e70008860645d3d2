"""Tests for the review session state machine."""

import threading
from unittest.mock import MagicMock, patch

import httpx
import pytest

from revlens_core.dispatcher import Dispatcher
from revlens_core.errors import (
    MissingCredentialError,
    ReviewInProgressError,
    UnreachableProviderError,
    ValidationError,
)
from revlens_core.models import LocalProviderConfig, Project, ProjectFile, ProviderConfig, ProviderId, Snippet
from revlens_core.providers.gemini import GeminiReviewer
from revlens_core.providers.local import LocalReviewer
from revlens_core.session import UNKNOWN_ERROR_MESSAGE, ReviewSession, SessionState

SNIPPET = Snippet(code="let a = 1;", language="javascript")
CONFIG = ProviderConfig(
    gemini_api_key="",
    ollama=LocalProviderConfig(url="http://localhost:11434/v1/chat/completions", model="llama3"),
)


class StubDispatcher:
    def __init__(self, result="## Review", error=None):
        self.result = result
        self.error = error
        self.calls = 0

    def dispatch(self, review_input, provider_id, config):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


class TestSubmit:
    def test_success_stores_result(self):
        session = ReviewSession(StubDispatcher(result="## Looks good"))
        assert session.submit(SNIPPET, ProviderId.OLLAMA, CONFIG) == "## Looks good"
        assert session.state is SessionState.SUCCESS
        assert session.result == "## Looks good"
        assert session.error is None

    def test_failure_stores_message_and_reraises(self):
        session = ReviewSession(StubDispatcher(error=RuntimeError("server exploded")))
        with pytest.raises(RuntimeError):
            session.submit(SNIPPET, ProviderId.OLLAMA, CONFIG)
        assert session.state is SessionState.FAILED
        assert session.error == "server exploded"
        assert session.result is None

    def test_failure_without_message_uses_generic_text(self):
        session = ReviewSession(StubDispatcher(error=RuntimeError()))
        with pytest.raises(RuntimeError):
            session.submit(SNIPPET, ProviderId.OLLAMA, CONFIG)
        assert session.error == UNKNOWN_ERROR_MESSAGE

    def test_new_submit_clears_previous_error(self):
        dispatcher = StubDispatcher(error=RuntimeError("first"))
        session = ReviewSession(dispatcher)
        with pytest.raises(RuntimeError):
            session.submit(SNIPPET, ProviderId.OLLAMA, CONFIG)
        dispatcher.error = None
        session.submit(SNIPPET, ProviderId.OLLAMA, CONFIG)
        assert session.state is SessionState.SUCCESS
        assert session.error is None

    @pytest.mark.parametrize(
        "review_input",
        [Snippet(code="   \n\t", language="python"), Project(files=[], language="python")],
    )
    def test_empty_input_rejected_without_dispatch(self, review_input):
        dispatcher = StubDispatcher()
        session = ReviewSession(dispatcher)
        session.result = "stale"
        with pytest.raises(ValidationError):
            session.submit(review_input, ProviderId.OLLAMA, CONFIG)
        assert dispatcher.calls == 0
        assert session.state is SessionState.FAILED
        assert session.result is None
        assert session.generation == 0

    def test_project_input_accepted(self):
        project = Project(files=[ProjectFile("main.py", "print(1)")], language="python")
        session = ReviewSession(StubDispatcher())
        session.submit(project, ProviderId.OLLAMA, CONFIG)
        assert session.state is SessionState.SUCCESS

    def test_submit_while_loading_rejected(self):
        session = ReviewSession(StubDispatcher())
        session.state = SessionState.LOADING
        with pytest.raises(ReviewInProgressError):
            session.submit(SNIPPET, ProviderId.OLLAMA, CONFIG)
        assert session.state is SessionState.LOADING

    def test_interrupt_during_dispatch_does_not_leave_session_loading(self):
        dispatcher = StubDispatcher(error=KeyboardInterrupt())
        session = ReviewSession(dispatcher)
        with pytest.raises(KeyboardInterrupt):
            session.submit(SNIPPET, ProviderId.OLLAMA, CONFIG)
        assert session.state is SessionState.FAILED
        assert session.error == UNKNOWN_ERROR_MESSAGE

        dispatcher.error = None
        assert session.submit(SNIPPET, ProviderId.OLLAMA, CONFIG) == "## Review"
        assert session.state is SessionState.SUCCESS


class TestReset:
    def test_reset_returns_to_idle(self):
        session = ReviewSession(StubDispatcher())
        session.submit(SNIPPET, ProviderId.OLLAMA, CONFIG)
        session.reset()
        assert session.state is SessionState.IDLE
        assert session.result is None
        assert session.error is None

    def test_stale_result_after_reset_is_discarded(self):
        """A response that lands after reset() must not overwrite the idle state."""
        started = threading.Event()
        release = threading.Event()

        class SlowDispatcher:
            def dispatch(self, review_input, provider_id, config):
                started.set()
                release.wait(timeout=5)
                return "## Stale"

        session = ReviewSession(SlowDispatcher())
        results = []
        worker = threading.Thread(target=lambda: results.append(session.submit(SNIPPET, ProviderId.OLLAMA, CONFIG)))
        worker.start()
        assert started.wait(timeout=5)
        assert session.state is SessionState.LOADING

        session.reset()
        release.set()
        worker.join(timeout=5)

        assert results == ["## Stale"]
        assert session.state is SessionState.IDLE
        assert session.result is None


class TestEndToEnd:
    def test_cloud_without_key_fails_and_never_stays_loading(self):
        with patch("revlens_core.providers.gemini._OpenAI") as mock_openai:
            session = ReviewSession(Dispatcher({ProviderId.GEMINI: GeminiReviewer()}))
            with pytest.raises(MissingCredentialError):
                session.submit(SNIPPET, ProviderId.GEMINI, ProviderConfig(gemini_api_key=""))
        mock_openai.assert_not_called()
        assert session.state is SessionState.FAILED
        assert "API key" in session.error

    def test_unreachable_local_server_transitions_to_failed_once(self):
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        backend = LocalReviewer(ProviderId.OLLAMA, transport=httpx.MockTransport(refuse))
        session = ReviewSession(Dispatcher({ProviderId.OLLAMA: backend}))
        transitions = []
        original_finish = session._finish

        def recording_finish(generation, state, **kwargs):
            transitions.append(state)
            original_finish(generation, state, **kwargs)

        session._finish = MagicMock(side_effect=recording_finish)

        with pytest.raises(UnreachableProviderError):
            session.submit(SNIPPET, ProviderId.OLLAMA, CONFIG)

        assert transitions == [SessionState.FAILED]
        assert session.state is SessionState.FAILED
        assert "Could not connect to Ollama" in session.error

    def test_local_success_end_to_end(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"choices": [{"message": {"content": "X"}}]})
        )
        session = ReviewSession(Dispatcher({ProviderId.OLLAMA: LocalReviewer(ProviderId.OLLAMA, transport=transport)}))
        assert session.submit(SNIPPET, ProviderId.OLLAMA, CONFIG) == "X"
        assert session.result == "X"
