"""Custom exception hierarchy for feedpulse.

All application exceptions inherit from :class:`FeedbackPulseError`, which
carries an optional ``provider_name`` so error handlers can identify which
storage backend (e.g. "upstash_redis", "sqlite_feedback") caused the failure,
and an HTTP ``status_code`` used by the API layer when rendering the error.

    FeedbackPulseError  (base -- catch-all for any feedpulse error)
    +-- ValidationError          (missing/empty field, rejected upload -> 400)
    +-- NotFoundError            (delete target absent -> 404)
    +-- BackendUnavailableError  (persistence adapter unreachable -> 503)
    +-- ConfigurationError       (startup / missing config -> 500)
    +-- InternalError            (unexpected failure -> 500)

``BackendUnavailableError`` is normally caught by the fallback store and
never reaches a client; it is only surfaced when no local tier exists.
"""


class FeedbackPulseError(Exception):
    """Base exception for all feedpulse errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[upstash_redis] Connection refused``.
    """

    status_code: int = 500

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
# Client errors
# ---------------------------------------------------------------------------

class ValidationError(FeedbackPulseError):
    """Raised when a request is missing a required field or fails an allow-list."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid request",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NotFoundError(FeedbackPulseError):
    """Raised when a feedback record with the requested id does not exist."""

    status_code = 404

    def __init__(
        self,
        message: str = "Feedback not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Storage / configuration errors
# ---------------------------------------------------------------------------

class BackendUnavailableError(FeedbackPulseError):
    """Raised when a persistence backend is unreachable or answers with an error.

    The fallback store catches this to serve the call from its local tier.
    """

    status_code = 503

    def __init__(
        self,
        message: str = "Storage backend is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(FeedbackPulseError):
    """Raised when configuration is invalid or missing at startup."""

    status_code = 500

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)



class InternalError(FeedbackPulseError):
    """Raised for unexpected failures that have no recovery path."""

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
