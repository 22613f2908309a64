# main.py
# Command-line entrypoint: run a local image through the same handler the API uses.
# Exposes: analyze_file(path, settings, transport=None) -> OutboundResponse

from __future__ import annotations

import asyncio
import base64
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import httpx
from dotenv import load_dotenv

from spudcheck.handler import AnalyzeHandler, InboundRequest, OutboundResponse
from spudcheck.pipeline import quiet_transport_logging
from spudcheck.schemas import extract_verdict
from spudcheck.settings import Settings, get_settings


async def analyze_file(
    path: str,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> OutboundResponse:
    """
    Base64-encode the file and hand it to AnalyzeHandler as a POST.
    """
    image_data = base64.b64encode(Path(path).read_bytes()).decode("ascii")
    event = InboundRequest(http_method="POST", body=json.dumps({"imageData": image_data}))
    return await AnalyzeHandler(settings, transport=transport).handle(event)


def render(response: OutboundResponse, raw: bool = False) -> str:
    if response.status_code != 200 or raw:
        return response.body

    verdict = extract_verdict(json.loads(response.body))
    if verdict is None:
        return response.body

    lines = [f"Verdict: {verdict.verdict}", f"Why:     {verdict.explanation}"]
    if verdict.signs:
        lines.append("Signs:")
        lines.extend(f"  - {s}" for s in verdict.signs)
    else:
        lines.append("Signs:   none")
    return "\n".join(lines)


def run(
    argv: Optional[List[str]] = None,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="Ask the model whether a potato is safe to eat.")
    parser.add_argument("image", type=str, help="Path to the potato photo")
    parser.add_argument("--raw", action="store_true", help="Print the provider JSON unmodified")
    args = parser.parse_args(argv)

    if not Path(args.image).is_file():
        parser.error(f"no such file: {args.image}")

    load_dotenv()
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s: %(message)s")
    quiet_transport_logging()

    response = asyncio.run(analyze_file(args.image, settings, transport=transport))
    out = sys.stdout if response.status_code == 200 else sys.stderr
    print(render(response, raw=args.raw), file=out)
    return 0 if response.status_code == 200 else 1


# -----------------------------------------------------------------------------
# CLI
# -----------------------------------------------------------------------------
if __name__ == "__main__":
    sys.exit(run())
