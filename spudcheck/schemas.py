# spudcheck/schemas.py
# Pydantic models for both boundaries: the caller's upload and the provider's reply.

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import BadRequestError, ErrorKind, ProviderResponseError

logger = logging.getLogger(__name__)

VERDICTS = ("Safe to Eat", "Use with Caution", "Do Not Eat")


# -----------------------------------------------------------------------------
# Inbound
# -----------------------------------------------------------------------------
class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    imageData: str = Field(..., min_length=1, description="Base64-encoded image bytes.")


def decode_request(body: Optional[str]) -> AnalyzeRequest:
    """
    Parse the raw request body into an AnalyzeRequest.
    Raises BadRequestError for anything that is not {"imageData": "<non-empty string>"}.
    """
    if not body:
        raise BadRequestError("Request body is empty")
    try:
        return AnalyzeRequest.model_validate_json(body)
    except ValidationError as e:
        raise BadRequestError(f"Invalid request body: {e.error_count()} error(s)") from e


# -----------------------------------------------------------------------------
# Provider (generateContent)
# -----------------------------------------------------------------------------
class Part(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: Optional[str] = None


class Content(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: Optional[str] = None
    parts: List[Part] = Field(default_factory=list)


class Candidate(BaseModel):
    model_config = ConfigDict(extra="allow")

    content: Optional[Content] = None
    finishReason: Optional[str] = None


class GenerateContentResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    candidates: List[Candidate] = Field(default_factory=list)
    promptFeedback: Optional[Dict[str, Any]] = None


class Verdict(BaseModel):
    """The object the model is asked to produce inside the first candidate's text part."""

    verdict: str = Field(..., json_schema_extra={"example": "Safe to Eat"})
    explanation: str
    signs: List[str] = Field(default_factory=list)

    @property
    def is_known(self) -> bool:
        return self.verdict in VERDICTS


def decode_provider_response(text: str) -> Dict[str, Any]:
    """
    Parse a 2xx provider body and check it looks like a generateContent envelope.
    Returns the parsed dict untouched so the caller can pass it through verbatim.
    """
    result = json.loads(text)
    try:
        GenerateContentResponse.model_validate(result)
    except ValidationError as e:
        raise ProviderResponseError(f"Unexpected provider response shape: {e.error_count()} error(s)") from e
    return result


def extract_verdict(result: Dict[str, Any]) -> Optional[Verdict]:
    """Best-effort read of the verdict; None when the model did not follow the schema."""
    envelope = GenerateContentResponse.model_validate(result)
    for candidate in envelope.candidates:
        if candidate.content is None:
            continue
        for part in candidate.content.parts:
            if part.text:
                try:
                    return Verdict.model_validate_json(part.text)
                except ValidationError:
                    logger.debug("First text part is not a verdict object")
                    return None
    return None


# -----------------------------------------------------------------------------
# Outbound
# -----------------------------------------------------------------------------
class ErrorResponse(BaseModel):
    kind: ErrorKind
    error: str


class HealthResponse(BaseModel):
    status: str = Field(..., json_schema_extra={"example": "ok"})
    has_api_key: bool
    model: str
