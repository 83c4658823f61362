"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation and run cancellation.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from fastapi import File, HTTPException, Request, UploadFile, status

from app.config import get_aggregation_settings
from app.domain.cancellation import CancellationToken

logger = logging.getLogger(__name__)

CSV_CONTENT_TYPES = {
    "text/csv",
    "text/plain",
    "application/csv",
    "application/vnd.ms-excel",
    "application/octet-stream",
}
DISCONNECT_POLL_SECONDS = 0.5


def get_csv_upload(csv: UploadFile | None = File(default=None)) -> UploadFile:
    """
    Require the multipart ``csv`` field and check it looks like a CSV file.
    """

    if csv is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No CSV file uploaded",
        )

    filename = (csv.filename or "").strip().lower()
    content_type = (csv.content_type or "").strip().lower()

    is_csv_filename = filename.endswith((".csv", ".txt"))
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    return csv


async def cancel_on_disconnect(
    request: Request,
    token: CancellationToken,
    *,
    poll_interval_seconds: float = DISCONNECT_POLL_SECONDS,
) -> None:
    """
    Cancel ``token`` once the client goes away.
    """

    while not token.cancelled:
        if await request.is_disconnected():
            logger.info("Client disconnected; cancelling search run path=%s", request.url.path)
            token.cancel()
            return
        await asyncio.sleep(poll_interval_seconds)


async def get_cancellation_token(request: Request) -> AsyncIterator[CancellationToken]:
    """
    Per-request cancellation token bounded by the configured run timeout.

    The token is also cancelled when the client disconnects, so upstream
    calls stop once nobody is waiting for the answer.
    """

    token = CancellationToken(timeout_seconds=get_aggregation_settings().run_timeout_seconds)
    watcher = asyncio.create_task(cancel_on_disconnect(request, token))
    try:
        yield token
    finally:
        watcher.cancel()
