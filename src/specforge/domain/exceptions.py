"""
Domain exceptions for the code-generation pipeline.

Every error raised by specforge derives from SpecforgeError.
"""


class SpecforgeError(Exception):
    """Base class for specforge errors."""


class ConfigurationError(SpecforgeError):
    """Raised when settings or required inputs are invalid or missing."""


class NoProvidersError(ConfigurationError):
    """Raised when an operation needs providers and none are registered."""


class ProviderInitializationError(SpecforgeError):
    """Raised by initialize() when a provider cannot be used."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ProviderError(SpecforgeError):
    """
    Raised when a vendor call fails.

    The message is the vendor's error.message when the API returned one.
    """

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class InvalidResponseError(SpecforgeError):
    """Raised when validate_response() rejects a provider's output."""

    def __init__(self, provider: str):
        super().__init__(f"{provider} returned invalid response format")
        self.provider = provider


class ValidationFailedError(SpecforgeError):
    """Raised when a phase's custom validation fails and retries remain."""

    def __init__(self, errors: tuple[str, ...]):
        super().__init__(f"Validation failed: {', '.join(errors)}")
        self.errors = errors


class PhaseFailedError(SpecforgeError):
    """Raised when every provider failed on every retry without an error to re-raise."""

    def __init__(self, phase_name: str):
        super().__init__(f"All providers failed for phase {phase_name}")
        self.phase_name = phase_name


class CircuitOpenError(SpecforgeError):
    """
    Raised when a call is rejected because its circuit is open.

    The wrapped operation is not invoked.
    """

    def __init__(self, name: str, retry_after: float):
        super().__init__(
            f"Circuit '{name}' is open; retry after {retry_after:.1f}s"
        )
        self.name = name
        self.retry_after = retry_after


class TemplateNotFoundError(SpecforgeError, KeyError):
    """Raised when no prompt template exists for a stage key."""

    def __init__(self, key: str):
        super().__init__(f"No template found for stage: {key}")
        self.key = key

    def __str__(self) -> str:
        return str(self.args[0])


class UnsafePathError(SpecforgeError):
    """Raised when a generated file key escapes the output directory or names a reserved file."""

    def __init__(self, path: str, reason: str = "outside the output directory"):
        super().__init__(f"Refusing to write {reason}: {path}")
        self.path = path
