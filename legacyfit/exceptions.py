"""
Custom exception hierarchy for legacyfit.

All exceptions inherit from :class:`LegacyFitError` and carry optional
structured metadata via the ``details`` attribute for diagnostics and
logging.

Classification results are never errors: "no compatible application found"
is an ordinary :class:`~legacyfit.models.outcome.ClassificationOutcome`.
Exceptions are reserved for infrastructure problems (configuration, I/O,
network) and for rejecting malformed catalog documents.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class LegacyFitError(Exception):
    """Base exception for all legacyfit errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class ConfigError(LegacyFitError):
    """Raised when a configuration file is missing, unreadable or invalid.

    Args:
        message: Error description.
        config_path: Path of the offending configuration file.
        option: Name of the offending option, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class CatalogError(LegacyFitError):
    """Raised when a catalog document is malformed.

    A catalog refresh that raises this error is rejected as a whole; the
    previously installed catalog stays in effect.

    Args:
        message: Error description.
        target: Key of the target entry that failed validation.
        field_name: Offending field inside that entry.
        source: Where the document came from (URL or path).
    """

    __slots__ = ("target", "field_name", "source")

    def __init__(
        self,
        message: str,
        *,
        target: Optional[str] = None,
        field_name: Optional[str] = None,
        source: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "target", target)
        _add_if(details, "field", field_name)
        _add_if(details, "source", source)

        super().__init__(message, details)

        self.target = target
        self.field_name = field_name
        self.source = source


class UnknownTargetError(LegacyFitError):
    """Raised when a target key is not present in the catalog."""

    __slots__ = ("target",)

    def __init__(self, target: str) -> None:
        super().__init__(f"Unknown target: {target}", {"target": target})
        self.target = target


class BundleReadError(LegacyFitError):
    """Raised when an application bundle's metadata cannot be read.

    Args:
        message: Error description.
        bundle_path: Path to the bundle involved.
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("bundle_path", "original_error")

    def __init__(
        self,
        message: str,
        *,
        bundle_path: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", bundle_path)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.bundle_path = bundle_path
        self.original_error = original_error


class NetworkError(LegacyFitError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body
