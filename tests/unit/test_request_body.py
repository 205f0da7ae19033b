import json

import pytest
from fastapi import Request

from app.domain.errors import PayloadTooLarge
from app.presentation.request_body import read_submission_fields


class ChunkedReceive:
    """ASGI receive() that hands out body chunks one message at a time."""

    def __init__(self, chunks: list[bytes]):
        self.chunks = chunks
        self.consumed = 0

    async def __call__(self):
        if self.consumed < len(self.chunks):
            chunk = self.chunks[self.consumed]
            self.consumed += 1
            more = self.consumed < len(self.chunks)
            return {"type": "http.request", "body": chunk, "more_body": more}
        return {"type": "http.request", "body": b"", "more_body": False}


def _request(receive: ChunkedReceive, content_type: str) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/send",
        "query_string": b"",
        # chunked upload: no content-length header
        "headers": [
            (b"content-type", content_type.encode()),
            (b"transfer-encoding", b"chunked"),
        ],
    }
    return Request(scope, receive)


@pytest.mark.asyncio
async def test_chunked_upload_is_cut_off_at_the_limit():
    receive = ChunkedReceive([b"x" * 1024 for _ in range(1000)])

    with pytest.raises(PayloadTooLarge):
        await read_submission_fields(_request(receive, "application/json"), 64)

    assert receive.consumed == 1


@pytest.mark.asyncio
async def test_chunked_json_within_limit_is_parsed():
    body = json.dumps({"name": "Ann", "email": "ann@x.com", "message": "Hi"}).encode()
    receive = ChunkedReceive([body[:10], body[10:30], body[30:]])

    fields = await read_submission_fields(_request(receive, "application/json"), 1024)

    assert fields == {"name": "Ann", "email": "ann@x.com", "message": "Hi"}
    assert receive.consumed == 3


@pytest.mark.asyncio
async def test_chunked_form_within_limit_is_parsed():
    receive = ChunkedReceive([b"name=Ann&email=ann%40x.com", b"&message=Hi+there"])

    fields = await read_submission_fields(
        _request(receive, "application/x-www-form-urlencoded"), 1024
    )

    assert fields == {"name": "Ann", "email": "ann@x.com", "message": "Hi there"}


@pytest.mark.asyncio
async def test_declared_length_over_limit_is_rejected_before_reading():
    receive = ChunkedReceive([b"{}"])
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/send",
        "query_string": b"",
        "headers": [
            (b"content-type", b"application/json"),
            (b"content-length", b"5000"),
        ],
    }

    with pytest.raises(PayloadTooLarge):
        await read_submission_fields(Request(scope, receive), 64)

    assert receive.consumed == 0

