"""Exceptions raised by the message generation pipeline."""


class OutreachError(Exception):
    """Base class for errors surfaced to callers of the generator."""


class ValidationError(OutreachError):
    """The generation request is missing required fields."""


class QuotaExceededError(OutreachError):
    """The user has no remaining generation quota for this period."""

    def __init__(self, user_id: str, resource_kind: str, used: int = 0, limit: int = 0):
        self.user_id = user_id
        self.resource_kind = resource_kind
        self.used = used
        self.limit = limit
        super().__init__(
            f"Monthly {resource_kind} limit reached ({used}/{limit}) for user {user_id}"
        )


class BackendError(OutreachError):
    """The generation backend could not be reached or rejected the request."""


class GenerationTimeoutError(BackendError):
    """Enrichment and generation did not finish within the allotted time."""


class ParseError(OutreachError):
    """The backend answered, but its output could not be turned into variants."""

    def __init__(self, message: str, raw_output: str = ""):
        self.raw_output = raw_output
        super().__init__(message)


class ContactNotFoundError(OutreachError):
    """The requested contact does not exist for this user."""


class EnrichmentError(OutreachError):
    """A website could not be fetched for analysis."""
