"""Supabase Storage REST adapter for image objects."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from style_api.application.ports.object_storage_port import ObjectStorageError, ObjectStoragePort


@dataclass(frozen=True)
class StorageHttpResponse:
    """Normalized HTTP response data returned by transport implementations."""

    status_code: int
    body_bytes: bytes


class StorageHttpTransportPort(Protocol):
    """Transport protocol used by the storage adapter."""

    async def request(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout_seconds: float,
    ) -> StorageHttpResponse:
        """Execute one HTTP request and return normalized response data."""


class UrllibStorageHttpTransport:
    """urllib-based async transport implementation for storage HTTP calls."""

    async def request(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout_seconds: float,
    ) -> StorageHttpResponse:
        """Execute HTTP request in a worker thread and normalize HTTP errors."""

        return await asyncio.to_thread(
            self._request_sync,
            method=method,
            url=url,
            headers=headers,
            body=body,
            timeout_seconds=timeout_seconds,
        )

    def _request_sync(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout_seconds: float,
    ) -> StorageHttpResponse:
        request = Request(url=url, data=body, headers=headers, method=method)
        try:
            with urlopen(request, timeout=timeout_seconds) as response:
                return StorageHttpResponse(
                    status_code=int(response.getcode()),
                    body_bytes=response.read(),
                )
        except HTTPError as error:
            return StorageHttpResponse(status_code=int(error.code), body_bytes=error.read())
        except URLError as error:
            raise ObjectStorageError(f"transport connection failure: {error}") from error


class SupabaseStorageClient(ObjectStoragePort):
    """Object storage adapter for the Supabase Storage API."""

    def __init__(
        self,
        *,
        project_url: str,
        service_key: str,
        transport: StorageHttpTransportPort | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._project_url = project_url.rstrip("/")
        self._service_key = service_key
        self._transport = transport or UrllibStorageHttpTransport()
        self._timeout_seconds = timeout_seconds

    def public_url(self, *, bucket: str, key: str) -> str:
        """Return the public URL of one object in a public bucket."""

        return (
            f"{self._project_url}/storage/v1/object/public/"
            f"{quote(bucket, safe='')}/{quote(key, safe='')}"
        )

    async def put_object(
        self,
        *,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
    ) -> str:
        """Upload one object (upsert) and return its public URL."""

        path = f"/storage/v1/object/{quote(bucket, safe='')}/{quote(key, safe='')}"
        await self._request(
            operation="put_object",
            method="POST",
            path=path,
            body=body,
            extra_headers={"Content-Type": content_type, "x-upsert": "true"},
        )
        return self.public_url(bucket=bucket, key=key)

    async def delete_object(self, *, bucket: str, key: str) -> None:
        """Remove one object from a bucket."""

        path = f"/storage/v1/object/{quote(bucket, safe='')}"
        await self._request(
            operation="delete_object",
            method="DELETE",
            path=path,
            body=json.dumps({"prefixes": [key]}).encode("utf-8"),
            extra_headers={"Content-Type": "application/json"},
        )

    async def list_buckets(self) -> list[str]:
        """Return the names of buckets visible to the configured key."""

        response = await self._request(
            operation="list_buckets",
            method="GET",
            path="/storage/v1/bucket",
            body=None,
            extra_headers={},
        )
        try:
            decoded = json.loads(response.body_bytes.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as error:
            raise ObjectStorageError("list_buckets returned invalid JSON payload") from error
        if not isinstance(decoded, list):
            raise ObjectStorageError("list_buckets returned non-list JSON payload")
        return [
            str(bucket["name"])
            for bucket in decoded
            if isinstance(bucket, dict) and "name" in bucket
        ]

    async def _request(
        self,
        *,
        operation: str,
        method: str,
        path: str,
        body: bytes | None,
        extra_headers: dict[str, str],
    ) -> StorageHttpResponse:
        headers = {
            "Authorization": f"Bearer {self._service_key}",
            "apikey": self._service_key,
            **extra_headers,
        }
        url = f"{self._project_url}{path}"
        try:
            response = await self._transport.request(
                method=method,
                url=url,
                headers=headers,
                body=body,
                timeout_seconds=self._timeout_seconds,
            )
        except Exception as error:  # noqa: BLE001
            raise ObjectStorageError(f"{operation} transport failure") from error

        if response.status_code < 200 or response.status_code >= 300:
            details = _decode_error_payload(response.body_bytes)
            raise ObjectStorageError(
                f"{operation} failed with status {response.status_code}: {details}"
            )

        return response


def _decode_error_payload(payload: bytes) -> str:
    if not payload:
        return "empty response body"
    try:
        decoded = payload.decode("utf-8")
    except UnicodeDecodeError:
        return "<binary>"
    return decoded[:200]
