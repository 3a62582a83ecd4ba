# exceptions.py
from typing import List, Optional


class LeadScoringError(Exception):
    """Base class for errors reported to callers."""

    def __init__(self, message: str, details: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class ValidationError(LeadScoringError):
    """Bad input; nothing was stored or scored."""


class OfferValidationError(ValidationError):
    pass


class LeadParseError(ValidationError):
    pass


class UploadError(ValidationError):
    pass


class PreconditionError(LeadScoringError):
    """Scoring was requested before its inputs exist."""


class MissingOfferError(PreconditionError):
    def __init__(self):
        super().__init__("No offer found. POST /offer before scoring.")


class MissingLeadsError(PreconditionError):
    def __init__(self):
        super().__init__("No leads found. POST /leads/upload before scoring.")


class NotFoundError(LeadScoringError):
    pass


class ProviderConfigurationError(LeadScoringError):
    """The selected AI provider cannot be used as configured."""
