from app.domain.entities import RateLimitDecision


class DomainError(Exception):
    """Base class for all domain-level errors."""

    pass


class SubmissionInvalid(DomainError):
    """One or more submission fields are missing, oversized or malformed."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class PayloadTooLarge(DomainError):
    """Request body exceeds the configured size limit."""

    pass


class RateLimitExceeded(DomainError):
    """Too many requests from one client address in the current window."""

    def __init__(self, decision: RateLimitDecision) -> None:
        super().__init__(f"rate limit exceeded, retry in {decision.reset_after}s")
        self.decision = decision

    @property
    def retry_after(self) -> int:
        return self.decision.reset_after


class EmailNotConfigured(DomainError):
    """Dispatch is required but no provider credential is configured."""

    pass


class EmailDispatchError(DomainError):
    """The email provider rejected the message or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def provider_responded(self) -> bool:
        return self.status_code is not None
