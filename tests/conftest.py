# tests/conftest.py
# Shared fixtures: settings with a key, and a recording stand-in for the provider.

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from spudcheck.settings import Settings

VERDICT_TEXT = json.dumps({"verdict": "Safe to Eat", "explanation": "ok", "signs": []})

PROVIDER_OK: Dict[str, Any] = {
    "candidates": [{"content": {"parts": [{"text": VERDICT_TEXT}]}}]
}


class Provider:
    """Records every request and answers with a fixed response (or raises)."""

    def __init__(
        self,
        status_code: int = 200,
        json_body: Optional[Any] = None,
        text: Optional[str] = None,
        exc: Optional[Exception] = None,
    ):
        self.status_code = status_code
        self.json_body = PROVIDER_OK if json_body is None and text is None else json_body
        self.text = text
        self.exc = exc
        self.requests: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self._respond)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def _respond(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json_body)


@pytest.fixture
def settings() -> Settings:
    return Settings(GOOGLE_API_KEY="test-key")


@pytest.fixture
def provider() -> Callable[..., Provider]:
    return Provider
