from __future__ import annotations


class PrepError(RuntimeError):
    """Base class for failures surfaced to API callers."""

    code = "prep_error"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        if code:
            self.code = code


class ValidationError(PrepError):
    """Missing or empty required input. User-correctable."""

    code = "validation_error"


class ConfigurationError(PrepError):
    """Server misconfiguration, e.g. no upstream credential."""

    code = "configuration_error"


class UpstreamError(PrepError):
    """Network, timeout or non-2xx failure talking to the model provider."""

    code = "upstream_error"


class UpstreamFormatError(PrepError):
    """The provider answered, but with empty or unusable content."""

    code = "upstream_format_error"


class ExtractionError(PrepError):
    code = "extraction_error"


class LocalDecodeError(PrepError):
    """Persisted collection could not be decoded. Recovered by the store."""

    code = "local_decode_error"
