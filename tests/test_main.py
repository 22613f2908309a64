# tests/test_main.py

from __future__ import annotations

import asyncio
import base64
import json
import logging

import pytest

from main import analyze_file, render, run
from spudcheck.handler import OutboundResponse
from tests.conftest import PROVIDER_OK, Provider

PNG_BYTES = b"\x89PNG\r\n\x1a\nnot-really-a-png"


@pytest.fixture
def image(tmp_path):
    path = tmp_path / "spud.png"
    path.write_bytes(PNG_BYTES)
    return path


def test_analyze_file_sends_base64(settings, image):
    p = Provider()
    resp = asyncio.run(analyze_file(str(image), settings, transport=p.transport))

    assert resp.status_code == 200
    sent = json.loads(p.requests[0].content)
    inline = sent["contents"][0]["parts"][1]["inlineData"]
    assert base64.b64decode(inline["data"]) == PNG_BYTES


def test_render_verdict():
    text = render(OutboundResponse(200, json.dumps(PROVIDER_OK)))
    assert text.splitlines()[0] == "Verdict: Safe to Eat"
    assert "Signs:   none" in text


def test_render_signs():
    verdict = {"verdict": "Do Not Eat", "explanation": "green", "signs": ["greening", "sprouting"]}
    result = {"candidates": [{"content": {"parts": [{"text": json.dumps(verdict)}]}}]}
    text = render(OutboundResponse(200, json.dumps(result)))

    assert "  - greening" in text
    assert "  - sprouting" in text


def test_render_raw_and_errors():
    body = json.dumps(PROVIDER_OK)
    assert render(OutboundResponse(200, body), raw=True) == body
    assert render(OutboundResponse(503, "quota exceeded")) == "quota exceeded"


def test_run_success(settings, image, capsys):
    code = run([str(image)], settings=settings, transport=Provider().transport)

    assert code == 0
    assert "Verdict: Safe to Eat" in capsys.readouterr().out


def test_run_downstream_failure(settings, image, capsys):
    p = Provider(status_code=503, text="quota exceeded")
    code = run([str(image)], settings=settings, transport=p.transport)

    assert code == 1
    assert "quota exceeded" in capsys.readouterr().err


def test_run_missing_file(settings, tmp_path):
    with pytest.raises(SystemExit):
        run([str(tmp_path / "missing.png")], settings=settings)


def test_run_does_not_log_key(settings, image, caplog):
    caplog.set_level(logging.DEBUG)
    run([str(image)], settings=settings, transport=Provider().transport)

    assert all("test-key" not in r.getMessage() for r in caplog.records)
