from __future__ import annotations

import json
from typing import Any, AsyncIterator

from fastapi import Request
from starlette.formparsers import FormParser, MultiPartException, MultiPartParser

from app.domain.errors import PayloadTooLarge, SubmissionInvalid

URLENCODED = "application/x-www-form-urlencoded"
MULTIPART = "multipart/form-data"


async def read_limited_body(request: Request, max_body_bytes: int) -> bytes:
    """
    Read the body, stopping as soon as it grows past `max_body_bytes`.

    Chunked uploads carry no Content-Length, so the running total is the
    only reliable bound.
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_body_bytes:
        raise PayloadTooLarge()

    chunks: list[bytes] = []
    total = 0
    async for chunk in request.stream():
        total += len(chunk)
        if total > max_body_bytes:
            raise PayloadTooLarge()
        chunks.append(chunk)
    return b"".join(chunks)


async def _replay(body: bytes) -> AsyncIterator[bytes]:
    yield body


async def read_submission_fields(
    request: Request, max_body_bytes: int
) -> dict[str, Any]:
    """
    Read a JSON or form-encoded body into a plain dict.

    An empty body yields {} so that validation reports every missing field.
    """
    body = await read_limited_body(request, max_body_bytes)
    if not body.strip():
        return {}

    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()

    if content_type in (URLENCODED, MULTIPART):
        # the request stream is spent; parse the bytes already read
        if content_type == URLENCODED:
            parser = FormParser(request.headers, _replay(body))
        else:
            parser = MultiPartParser(request.headers, _replay(body))
        try:
            form = await parser.parse()
        except MultiPartException:
            raise SubmissionInvalid(["Malformed form body"]) from None
        return {k: v for k, v in form.items() if isinstance(v, str)}

    if content_type == "application/json" or content_type.endswith("+json"):
        try:
            data = json.loads(body)
        except ValueError:
            raise SubmissionInvalid(["Malformed JSON body"]) from None
        if not isinstance(data, dict):
            raise SubmissionInvalid(["Request body must be a JSON object"])
        return data

    raise SubmissionInvalid(["Unsupported content type"])
