# spudcheck/handler.py
# The request handler: method check → key check → decode → provider call → response.

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .errors import ErrorKind, RelayError
from .pipeline import build_payload, generate_content
from .schemas import ErrorResponse, decode_provider_response, decode_request, extract_verdict
from .settings import Settings

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


@dataclass(frozen=True)
class InboundRequest:
    http_method: str
    body: Optional[str] = None


@dataclass(frozen=True)
class OutboundResponse:
    status_code: int
    body: str
    content_type: str = JSON_CONTENT_TYPE


class AnalyzeHandler:
    """
    Turns one InboundRequest into exactly one OutboundResponse.

    Outcomes:
      405 wrong method, 500 missing key, 400 bad body,
      200 provider JSON passed through unmodified,
      <provider status> when the provider answers non-2xx,
      500 for anything raised along the way (transport failure, bad provider JSON).

    Every Exception is absorbed here. Task cancellation is not, so a caller that
    goes away can abort the provider call.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    async def handle(self, event: InboundRequest) -> OutboundResponse:
        if event.http_method != "POST":
            return self._error(ErrorKind.METHOD_NOT_ALLOWED, 405, "Method Not Allowed")

        if not self.settings.has_api_key:
            logger.error("GOOGLE_API_KEY is not configured")
            return self._error(ErrorKind.CONFIG_MISSING, 500, "API key not found.")

        try:
            request = decode_request(event.body)

            response = await generate_content(
                build_payload(request.imageData), self.settings, transport=self.transport
            )

            if not response.is_success:
                error_body = response.text
                logger.error("Google AI API Error (%s): %s", response.status_code, error_body)
                return self._error(
                    ErrorKind.DOWNSTREAM_ERROR,
                    response.status_code,
                    f"Google AI API Error: {error_body}",
                )

            result = decode_provider_response(response.text)

            verdict = extract_verdict(result)
            if verdict is None:
                logger.warning("Provider response carried no parseable verdict")
            elif not verdict.is_known:
                logger.warning("Unknown verdict label: %r", verdict.verdict)
            else:
                logger.info("Verdict: %s (%d sign(s))", verdict.verdict, len(verdict.signs))

            return OutboundResponse(200, json.dumps(result))

        except RelayError as e:
            level = logging.INFO if e.status_code < 500 else logging.ERROR
            logger.log(level, "%s: %s", e.__class__.__name__, e)
            return self._error(e.kind, e.status_code, e.public_message or str(e))

        except Exception as e:
            logger.exception("Error in analyze handler")
            return self._error(ErrorKind.INTERNAL_ERROR, 500, str(e) or e.__class__.__name__)

    def _error(self, kind: ErrorKind, status_code: int, message: str) -> OutboundResponse:
        if self.settings.LEGACY_ERROR_BODIES:
            if kind is ErrorKind.INTERNAL_ERROR:
                return OutboundResponse(status_code, json.dumps({"error": message}))
            return OutboundResponse(status_code, message, TEXT_CONTENT_TYPE)
        body = ErrorResponse(kind=kind, error=message).model_dump_json()
        return OutboundResponse(status_code, body)
