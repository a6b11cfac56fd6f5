"""Custom exception hierarchy for tastegraph.

All application exceptions inherit from :class:`TasteProfileError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "spotify", "memory_cache") caused the failure.

The hierarchy is organized by where in the profile pipeline it surfaces:

    TasteProfileError  (base -- catch-all for any tastegraph error)
    +-- ProfileGenerationError   (fatal: profile could not be built)
    +-- CatalogError             (catalog API returned an unusable response)
    +-- AuthenticationError      (access token rejected by the catalog)
    +-- RateLimitError           (catalog rate-limit exceeded)
    +-- ProviderUnavailableError (catalog unreachable / access forbidden)
    +-- ConfigurationError       (startup / missing config)

Only :class:`ProfileGenerationError` is ever shown to a user.  Everything
else is raised by provider adapters and caught by the services at the
boundaries where the pipeline degrades gracefully (optional listening
sources, individual search queries).
"""


class TasteProfileError(Exception):
    """Base exception for all tastegraph errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  ``__str__`` prefixes the provider name in brackets for
    structured log output, e.g. ``[spotify] Rate limit exceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Pipeline errors
# ---------------------------------------------------------------------------

class ProfileGenerationError(TasteProfileError):
    """Raised when a profile cannot be generated at all.

    The only user-visible failure: a required listening sample (top tracks)
    could not be fetched.
    """

    def __init__(
        self,
        message: str = "Unable to analyze your music preferences",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External catalog errors
# ---------------------------------------------------------------------------

class CatalogError(TasteProfileError):
    """Raised when the catalog API answers with an unexpected error status."""

    def __init__(
        self,
        message: str = "Catalog request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class AuthenticationError(TasteProfileError):
    """Raised when the catalog rejects the access token (HTTP 401)."""

    def __init__(
        self,
        message: str = "Authentication failed. Please log in again.",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RateLimitError(TasteProfileError):
    """Raised when the catalog rate limit is exceeded (HTTP 429).

    Backoff is the caller's concern; the core never retries.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded. Please try again later.",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProviderUnavailableError(TasteProfileError):
    """Raised when the catalog is unreachable or forbids access."""

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(TasteProfileError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
