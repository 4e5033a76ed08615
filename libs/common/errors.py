from __future__ import annotations


class DomainError(Exception):
    def __init__(self, error_code: str, message: str, retryable: bool = False) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.retryable = retryable


class ValidationError(DomainError):
    def __init__(self, message: str = "Validation failed.") -> None:
        super().__init__("VALIDATION_FAILED", message, retryable=False)


class NotFoundError(DomainError):
    def __init__(self, message: str = "Target not found.") -> None:
        super().__init__("NOT_FOUND", message, retryable=False)


class AmbiguousMatchError(DomainError):
    def __init__(self, candidates: list[str], message: str = "") -> None:
        self.candidates = list(candidates)
        super().__init__(
            "AMBIGUOUS_MATCH",
            message or f"Multiple matches: {', '.join(self.candidates)}",
            retryable=False,
        )


class UpstreamTransientError(DomainError):
    def __init__(self, message: str = "A temporary problem occurred in an external system.") -> None:
        super().__init__("UPSTREAM_TRANSIENT", message, retryable=True)


class ConfigurationError(DomainError):
    def __init__(self, message: str = "Invalid configuration.") -> None:
        super().__init__("CONFIGURATION_ERROR", message, retryable=False)
