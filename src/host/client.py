"""
Host Record Export Client

Responsibilities:
1. Fetch record snapshots from the host's export endpoint
2. Map HTTP failures onto the record source error taxonomy
3. Expose the result as a RecordHandle
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional
from urllib.parse import quote

import httpx

from src.exceptions import (
    HostConnectionError,
    RecordAccessError,
    RecordNotFoundError,
    RecordSourceError,
)
from src.host.snapshot import SnapshotRecord

if TYPE_CHECKING:
    from src.config import HostConfig

logger = logging.getLogger(__name__)


class HttpRecordSource:
    """RecordSource over ``GET {base_url}/records/{type}/{id}``."""

    def __init__(self, config: "HostConfig", transport: Optional[httpx.BaseTransport] = None):
        self.config = config
        headers = {"Accept": "application/json"}
        if config.api_token:
            headers["Authorization"] = f"Bearer {config.api_token}"
        self._client = httpx.Client(
            base_url=config.base_url,
            headers=headers,
            timeout=float(config.timeout_seconds),
            transport=transport,
        )

    def load(self, record_type: str, record_id: str) -> SnapshotRecord:
        """
        Fetch one record snapshot.

        Raises:
            RecordNotFoundError: Host answered 404
            RecordAccessError: Host answered 401/403
            RecordSourceError: Any other error status or an unreadable body
            HostConnectionError: Host unreachable or timed out
        """
        path = f"/records/{quote(record_type, safe='')}/{quote(str(record_id), safe='')}"
        try:
            response = self._client.get(path)
        except httpx.RequestError as exc:
            logger.error("Host request failed: %s %s, error: %s", record_type, record_id, exc)
            raise HostConnectionError(f"Host unavailable: {exc}") from exc

        if response.status_code == 404:
            raise RecordNotFoundError(f"Record {record_type} #{record_id} does not exist")
        if response.status_code in (401, 403):
            raise RecordAccessError(f"Not permitted to read {record_type} #{record_id}")

        try:
            response.raise_for_status()
            snapshot = response.json()
        except httpx.HTTPStatusError as exc:
            raise RecordSourceError(
                f"Host returned {exc.response.status_code} for {record_type} #{record_id}"
            ) from exc
        except ValueError as exc:
            raise RecordSourceError(f"Host returned invalid JSON for {record_type} #{record_id}") from exc

        if not isinstance(snapshot, dict):
            raise RecordSourceError(f"Unexpected snapshot shape for {record_type} #{record_id}")

        return SnapshotRecord(snapshot, record_type, record_id)

    def current_user_id(self) -> Optional[str]:
        return self.config.user_id or None

    def close(self) -> None:
        """Shutdown the underlying httpx client."""
        self._client.close()
