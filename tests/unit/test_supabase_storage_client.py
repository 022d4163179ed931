from __future__ import annotations

import json
from dataclasses import dataclass

import pytest

from style_api.application.ports.object_storage_port import ObjectStorageError
from style_api.infrastructure.storage.supabase_storage import (
    StorageHttpResponse,
    SupabaseStorageClient,
)

PROJECT_URL = "https://project.supabase.co/"


@dataclass
class _QueuedTransport:
    responses: list[StorageHttpResponse]
    error: Exception | None = None

    def __post_init__(self) -> None:
        self.calls: list[dict[str, object]] = []

    async def request(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout_seconds: float,
    ) -> StorageHttpResponse:
        self.calls.append(
            {
                "method": method,
                "url": url,
                "headers": headers,
                "body": body,
                "timeout_seconds": timeout_seconds,
            }
        )
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


def _client(transport: _QueuedTransport) -> SupabaseStorageClient:
    return SupabaseStorageClient(
        project_url=PROJECT_URL,
        service_key="service-key",
        transport=transport,
        timeout_seconds=12.5,
    )


@pytest.mark.asyncio
async def test_put_object_uploads_with_upsert_and_returns_public_url() -> None:
    transport = _QueuedTransport(
        responses=[StorageHttpResponse(status_code=200, body_bytes=b'{"Key":"k"}')]
    )
    client = _client(transport)

    url = await client.put_object(
        bucket="clothing-images",
        key="abc-upper-1-deadbeef.png",
        body=b"\x89PNG",
        content_type="image/png",
    )

    assert url == (
        "https://project.supabase.co/storage/v1/object/public/"
        "clothing-images/abc-upper-1-deadbeef.png"
    )
    call = transport.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == (
        "https://project.supabase.co/storage/v1/object/clothing-images/abc-upper-1-deadbeef.png"
    )
    assert call["body"] == b"\x89PNG"
    assert call["timeout_seconds"] == 12.5
    headers = call["headers"]
    assert isinstance(headers, dict)
    assert headers["Authorization"] == "Bearer service-key"
    assert headers["apikey"] == "service-key"
    assert headers["Content-Type"] == "image/png"
    assert headers["x-upsert"] == "true"


@pytest.mark.asyncio
async def test_delete_object_sends_prefix_list() -> None:
    transport = _QueuedTransport(responses=[StorageHttpResponse(status_code=200, body_bytes=b"[]")])
    client = _client(transport)

    await client.delete_object(bucket="profile-images", key="old.png")

    call = transport.calls[0]
    assert call["method"] == "DELETE"
    assert call["url"] == "https://project.supabase.co/storage/v1/object/profile-images"
    payload = json.loads((call["body"] or b"").decode("utf-8"))
    assert payload == {"prefixes": ["old.png"]}


@pytest.mark.asyncio
async def test_list_buckets_returns_bucket_names() -> None:
    transport = _QueuedTransport(
        responses=[
            StorageHttpResponse(
                status_code=200,
                body_bytes=b'[{"id":"a","name":"profile-images"},{"id":"b","name":"misc"}]',
            )
        ]
    )
    client = _client(transport)

    assert await client.list_buckets() == ["profile-images", "misc"]
    assert transport.calls[0]["url"] == "https://project.supabase.co/storage/v1/bucket"


@pytest.mark.asyncio
async def test_list_buckets_invalid_payload_raises_storage_error() -> None:
    transport = _QueuedTransport(
        responses=[StorageHttpResponse(status_code=200, body_bytes=b'{"name":"x"}')]
    )

    with pytest.raises(ObjectStorageError):
        await _client(transport).list_buckets()


@pytest.mark.asyncio
async def test_non_success_status_raises_storage_error_with_details() -> None:
    transport = _QueuedTransport(
        responses=[StorageHttpResponse(status_code=403, body_bytes=b'{"error":"Unauthorized"}')]
    )

    with pytest.raises(ObjectStorageError, match="put_object failed with status 403"):
        await _client(transport).put_object(
            bucket="clothing-images",
            key="k.png",
            body=b"x",
            content_type="image/png",
        )


@pytest.mark.asyncio
async def test_transport_failure_raises_storage_error() -> None:
    transport = _QueuedTransport(responses=[], error=OSError("connection reset"))

    with pytest.raises(ObjectStorageError, match="delete_object transport failure"):
        await _client(transport).delete_object(bucket="clothing-images", key="k.png")
