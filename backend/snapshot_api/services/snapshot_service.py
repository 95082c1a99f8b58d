"""Snapshot Service — the four snapshot operations behind the HTTP routes.

Invariants:
    - Every Azure call runs in the thread pool (SDK is blocking)
    - create/delete return only after the long-running operation is terminal
    - list_older_than captures `now` once before the first page is fetched
    - A page failure aborts the listing; no partial results are returned
    - No retries: the first upstream error is final for the request

Design Decisions:
    - Service takes an already-built AzureSnapshotsClient so routes can inject
      fakes via FastAPI dependency_overrides
"""

import logging
from datetime import datetime, timezone

from fastapi.concurrency import run_in_threadpool

from snapshot_api.core.errors import ErrorContext, UpstreamStage
from snapshot_api.core.snapshot_age import filter_older_than
from snapshot_api.infrastructure.azure_compute import AzureSnapshotsClient, poll_result
from snapshot_api.schemas.snapshot import (
    CreateSnapshotRequest, DeleteSnapshotRequest, SnapshotSummary,
)
from snapshot_api.services.long_running import DisconnectCheck, wait_until_done

logger = logging.getLogger(__name__)


class SnapshotService:
    """Snapshot lifecycle operations for one authenticated request."""

    def __init__(
        self, client: AzureSnapshotsClient, poll_interval: float = 1.0,
    ):
        self.client = client
        self.poll_interval = poll_interval

    async def create_snapshot(
        self,
        body: CreateSnapshotRequest,
        is_disconnected: DisconnectCheck | None = None,
    ) -> None:
        context = ErrorContext(
            resource_group=body.resource_group_name,
            snapshot_name=body.snapshot_name,
        )
        poller = await run_in_threadpool(
            self.client.begin_create_snapshot,
            body.resource_group_name, body.snapshot_name,
            body.disk_id, body.location,
        )
        await wait_until_done(
            poller, "snapshot creation", is_disconnected,
            self.poll_interval, context,
        )
        poll_result(poller, UpstreamStage.CREATE_POLL, context)
        logger.info(
            "Snapshot created",
            extra={
                "resource_group": body.resource_group_name,
                "snapshot_name": body.snapshot_name,
            },
        )

    async def delete_snapshot(
        self,
        body: DeleteSnapshotRequest,
        is_disconnected: DisconnectCheck | None = None,
    ) -> None:
        context = ErrorContext(
            resource_group=body.resource_group_name,
            snapshot_name=body.snapshot_name,
        )
        poller = await run_in_threadpool(
            self.client.begin_delete_snapshot,
            body.resource_group_name, body.snapshot_name,
        )
        await wait_until_done(
            poller, "snapshot deletion", is_disconnected,
            self.poll_interval, context,
        )
        poll_result(poller, UpstreamStage.DELETE_POLL, context)
        logger.info(
            "Snapshot deleted",
            extra={
                "resource_group": body.resource_group_name,
                "snapshot_name": body.snapshot_name,
            },
        )

    async def validate_snapshot(
        self, resource_group_name: str, snapshot_name: str,
    ) -> None:
        """Raise SnapshotNotFoundError unless the snapshot can be fetched."""
        await run_in_threadpool(
            self.client.get_snapshot, resource_group_name, snapshot_name,
        )

    async def list_older_than(self, days: int) -> list[SnapshotSummary]:
        return await run_in_threadpool(self._collect_older_than, days)

    def _collect_older_than(self, days: int) -> list[SnapshotSummary]:
        now = datetime.now(timezone.utc)
        summaries: list[SnapshotSummary] = []
        for page in self.client.iter_snapshot_pages():
            for snapshot in filter_older_than(page, days, now):
                summaries.append(SnapshotSummary(
                    name=snapshot.name,
                    # full resource id, kept for web-client compatibility
                    resource_group=snapshot.id,
                    creation_time=snapshot.time_created,
                ))
        logger.info(
            f"Found {len(summaries)} snapshot(s) older than {days} day(s)",
            extra={"days": days, "count": len(summaries)},
        )
        return summaries
