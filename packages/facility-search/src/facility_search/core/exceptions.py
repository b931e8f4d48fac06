class SearchError(Exception):
    """Base facility search exception."""


class ProviderRequestError(SearchError):
    """Raised when a provider request failed after retries."""


class ProviderTemporaryError(ProviderRequestError):
    """Raised when a provider request can be retried (5xx, 429, timeout)."""


class ProviderClientError(ProviderRequestError):
    """Raised when the provider rejected the request (4xx); never retried."""


class ProviderNormalizationError(ProviderRequestError):
    """Raised when a provider payload does not match its response schema."""


class SearchFailedError(SearchError):
    """Raised when every provider query of a search failed."""

    def __init__(self, reason: str, failed_tokens: list[str] | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.failed_tokens = failed_tokens or []
