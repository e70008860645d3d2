"""Review error taxonomy.

Every failure the orchestration layer can surface derives from ReviewError and
carries a message that is already suitable for display. Structured details
(status codes, URLs, response bodies) are kept as attributes so callers and
tests don't have to parse the message.
"""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for all review failures."""


class ValidationError(ReviewError):
    """The review input is empty or otherwise unusable."""


class ReviewInProgressError(ReviewError):
    """A review was submitted while the session was still loading."""

    def __init__(self):
        super().__init__("A review is already in progress. Wait for it to finish or reset the session.")


class UnsupportedProviderError(ReviewError):
    def __init__(self, provider_id):
        self.provider_id = provider_id
        super().__init__(f"Unsupported AI provider: {provider_id}")


class ConfigurationError(ReviewError):
    """A provider is missing settings the user can fix with `revlens settings`."""


class MissingCredentialError(ConfigurationError):
    pass


class IncompleteConfigurationError(ConfigurationError):
    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(
            f"Configuration for {provider} is incomplete. "
            "Please configure the URL and model name with `revlens settings`."
        )


class InvalidCredentialError(ReviewError):
    pass


class ProviderError(ReviewError):
    """The provider was reached (or tried) but did not produce a usable review."""


class ProviderHTTPError(ProviderError):
    def __init__(self, provider: str, status_code: int, url: str, body: str):
        self.provider = provider
        self.status_code = status_code
        self.url = url
        self.body = body
        super().__init__(f"{provider} server at {url} responded with status: {status_code}. Details: {body}")


class MalformedResponseError(ProviderError):
    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Received an unexpected response structure from {provider}.")


class UnreachableProviderError(ProviderError):
    def __init__(self, provider: str, url: str):
        self.provider = provider
        self.url = url
        super().__init__(
            f"Could not connect to {provider} at {url}.\n\n"
            "Common reasons for this error include:\n"
            "1. The local AI server is not running.\n"
            "2. The URL in the settings is incorrect.\n"
            "3. The server is not accepting requests from this machine (CORS or network policy). "
            "You may need to start your server with a CORS-enabled flag (e.g., --cors) "
            "or bind it to a reachable address."
        )


class ProviderCommunicationError(ProviderError):
    def __init__(self, provider: str, detail: str):
        self.provider = provider
        self.detail = detail
        super().__init__(f"An error occurred while communicating with the {provider} API: {detail}")


class UnknownReviewError(ReviewError):
    pass
