from __future__ import annotations
from typing import Dict, Mapping, Optional


class FlowStateError(RuntimeError):
    """A wizard operation was invoked from a state that does not allow it."""


# -- Uploads -------------------------------------------------------------------

class UploadError(ValueError):
    message_key = "err_upload"

    def __init__(self, name: str, detail: str) -> None:
        super().__init__(f"{name}: {detail}")
        self.name = name


class UnsupportedType(UploadError):
    message_key = "err_unsupported_type"


class TooLarge(UploadError):
    message_key = "err_too_large"


# -- Collaborators ---------------------------------------------------------------

class ApiError(Exception):
    """A backend collaborator call failed. Always retryable."""
    retryable = True
    message_key = "err_submission"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SubmissionRejected(ApiError):
    """The backend answered but refused the request (duplicate, malformed, ...)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        field_errors: Optional[Mapping[str, str]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.field_errors: Dict[str, str] = dict(field_errors or {})


class NumberNotRegistered(SubmissionRejected):
    """The verification service has no application for this mobile number."""
    message_key = "err_not_registered"

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=404)


class TransportFailure(ApiError):
    """The backend could not be reached or timed out."""
    message_key = "err_network"


class ReceiptError(Exception):
    """Receipt generation failed. Never affects the submission it belongs to."""
