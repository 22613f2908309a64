# spudcheck/pipeline.py
# Prompt, output schema and the single generateContent call used by the handler.

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .settings import Settings

logger = logging.getLogger(__name__)

# httpx logs the full request URL at INFO, and the URL carries the `key` query parameter.
TRANSPORT_LOGGERS = ("httpx", "httpcore")


def quiet_transport_logging() -> None:
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


quiet_transport_logging()

IMAGE_MIME_TYPE = "image/png"

PROMPT = """
Analyze the provided image of a potato and determine if it is safe to eat.
Look for these specific signs: greening, sprouting, rot/blight, and major blemishes.
Based on your findings, provide a clear verdict: "Safe to Eat", "Use with Caution", or "Do Not Eat".
Provide a concise explanation for your verdict.
List the specific warning signs you detected. If no signs are found, the list should be empty.
"""

# Structured output contract asserted to the model (Gemini schema dialect).
RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "verdict": {"type": "STRING"},
        "explanation": {"type": "STRING"},
        "signs": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
        },
    },
    "required": ["verdict", "explanation", "signs"],
}


def build_payload(image_data: str) -> Dict[str, Any]:
    """
    Compose the generateContent body: prompt text first, then the image as inline data.
    """
    return {
        "contents": [
            {
                "role": "user",
                "parts": [
                    {"text": PROMPT},
                    {"inlineData": {"mimeType": IMAGE_MIME_TYPE, "data": image_data}},
                ],
            }
        ],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }


async def generate_content(
    payload: Dict[str, Any],
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.Response:
    """
    One POST to the provider. No retries; the caller decides what a non-2xx means.
    Cancelling the awaiting task aborts the request.
    """
    logger.debug("POST %s (timeout=%ss)", settings.generate_content_url, settings.PROVIDER_TIMEOUT)

    async with httpx.AsyncClient(timeout=settings.PROVIDER_TIMEOUT, transport=transport) as client:
        return await client.post(
            settings.generate_content_url,
            params={"key": settings.GOOGLE_API_KEY},
            headers={"Content-Type": "application/json"},
            json=payload,
        )
