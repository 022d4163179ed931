"""Storage connectivity check: list buckets and flag missing image buckets."""

from __future__ import annotations

import asyncio
import logging

from style_api.application.ports.object_storage_port import ObjectStorageError
from style_api.config.settings import load_settings
from style_api.domain.images import ImageBucket
from style_api.infrastructure.logging import configure_logging
from style_api.infrastructure.storage.supabase_storage import SupabaseStorageClient

logger = logging.getLogger(__name__)


async def check_storage(client: SupabaseStorageClient) -> list[str]:
    """Return required bucket names that the storage project does not expose."""

    buckets = await client.list_buckets()
    logger.info("storage_check_buckets count=%s names=%s", len(buckets), ",".join(buckets))
    missing = [bucket.value for bucket in ImageBucket if bucket.value not in buckets]
    for name in missing:
        logger.warning("storage_check_bucket_missing bucket=%s", name)
    return missing


async def _run_check() -> int:
    settings = load_settings()
    configure_logging(level=settings.log_level)
    client = SupabaseStorageClient(
        project_url=str(settings.supabase_url),
        service_key=settings.supabase_key,
        timeout_seconds=settings.storage_timeout_seconds,
    )
    try:
        missing = await check_storage(client)
    except ObjectStorageError as error:
        logger.error("storage_check_failed error=%s", error)
        return 1
    return 1 if missing else 0


def main() -> None:
    """Run the storage connectivity check and exit non-zero on problems."""

    raise SystemExit(asyncio.run(_run_check()))


if __name__ == "__main__":
    main()
