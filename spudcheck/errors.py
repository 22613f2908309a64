# spudcheck/errors.py
# Error taxonomy shared by the handler and the boundary decoders.

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    METHOD_NOT_ALLOWED = "MethodNotAllowed"
    CONFIG_MISSING = "ConfigMissing"
    BAD_REQUEST = "BadRequest"
    DOWNSTREAM_ERROR = "DownstreamError"
    INTERNAL_ERROR = "InternalError"


class RelayError(Exception):
    """Base class for failures the handler knows how to turn into a response."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR
    status_code: int = 500
    # Fixed text sent to the caller; None means the exception message is sent.
    public_message: Optional[str] = None


class BadRequestError(RelayError):
    """The inbound body is missing, not JSON, or has no usable imageData."""

    kind = ErrorKind.BAD_REQUEST
    status_code = 400
    public_message = "No image data provided."


class ProviderResponseError(RelayError):
    """The provider answered 2xx but the body is not a generateContent envelope."""
