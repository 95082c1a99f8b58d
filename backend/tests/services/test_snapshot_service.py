"""Snapshot Service — operation orchestration against a fake Azure client.

Tests cover:
    - create/delete read the result only after the operation is terminal
    - Poll failures map to the CREATE_POLL / DELETE_POLL stages
    - by-age listing uses a single `now` across all pages
    - Page failure propagates without partial results
"""

from datetime import datetime, timedelta, timezone

import pytest
from azure.core.exceptions import HttpResponseError

from snapshot_api.core.errors import (
    AzureUpstreamError, RequestCancelledError, SnapshotNotFoundError, UpstreamStage,
)
from snapshot_api.schemas.snapshot import CreateSnapshotRequest, DeleteSnapshotRequest
from snapshot_api.services import snapshot_service as service_module
from snapshot_api.services.snapshot_service import SnapshotService

from tests.mock_azure import FakePoller, FakeSnapshot, FakeSnapshotsClient


def _create_body():
    return CreateSnapshotRequest(
        resource_group_name="rg", snapshot_name="snap",
        disk_id="/disks/os", location="eastus",
    )


async def test_create_waits_for_terminal_state():
    poller = FakePoller(pending_polls=2)
    service = SnapshotService(FakeSnapshotsClient(create_poller=poller), 0)

    await service.create_snapshot(_create_body())

    assert poller.wait_calls == 2
    assert poller.result_calls == 1


async def test_create_poll_failure_maps_to_create_stage():
    poller = FakePoller(error=HttpResponseError(message="OperationNotAllowed"))
    service = SnapshotService(FakeSnapshotsClient(create_poller=poller), 0)

    with pytest.raises(AzureUpstreamError) as exc_info:
        await service.create_snapshot(_create_body())

    assert exc_info.value.stage == UpstreamStage.CREATE_POLL
    assert exc_info.value.context.snapshot_name == "snap"


async def test_delete_poll_failure_maps_to_delete_stage():
    poller = FakePoller(error=HttpResponseError(message="Conflict"))
    service = SnapshotService(FakeSnapshotsClient(delete_poller=poller), 0)

    with pytest.raises(AzureUpstreamError) as exc_info:
        await service.delete_snapshot(
            DeleteSnapshotRequest(resource_group_name="rg", snapshot_name="snap"),
        )

    assert exc_info.value.stage == UpstreamStage.DELETE_POLL


async def test_create_disconnect_skips_result():
    poller = FakePoller(pending_polls=5)
    service = SnapshotService(FakeSnapshotsClient(create_poller=poller), 0)

    async def _gone():
        return True

    with pytest.raises(RequestCancelledError):
        await service.create_snapshot(_create_body(), _gone)
    assert poller.result_calls == 0


async def test_validate_propagates_not_found():
    client = FakeSnapshotsClient(get_error=SnapshotNotFoundError("gone"))
    with pytest.raises(SnapshotNotFoundError):
        await SnapshotService(client).validate_snapshot("rg", "snap")


async def test_listing_captures_now_once(monkeypatch):
    frozen = datetime(2024, 6, 1, tzinfo=timezone.utc)
    calls = []

    class _Clock(datetime):
        @classmethod
        def now(cls, tz=None):
            calls.append(tz)
            return frozen

    monkeypatch.setattr(service_module, "datetime", _Clock)
    client = FakeSnapshotsClient(pages=[
        [FakeSnapshot("a", time_created=frozen - timedelta(days=3))],
        [FakeSnapshot("b", time_created=frozen - timedelta(days=1))],
        [FakeSnapshot("c", time_created=frozen - timedelta(days=5))],
    ])

    result = await SnapshotService(client).list_older_than(2)

    assert [s.name for s in result] == ["a", "c"]
    assert len(calls) == 1


async def test_listing_summary_uses_full_resource_id():
    snap = FakeSnapshot(
        "a", resource_group="rg-x",
        time_created=datetime.now(timezone.utc) - timedelta(days=9),
    )
    result = await SnapshotService(
        FakeSnapshotsClient(pages=[[snap]]),
    ).list_older_than(1)
    assert result[0].resource_group == snap.id
    assert result[0].resource_group.endswith("/snapshots/a")


async def test_listing_page_failure_raises():
    client = FakeSnapshotsClient(
        pages=[[FakeSnapshot("a", time_created=datetime(2020, 1, 1, tzinfo=timezone.utc))], []],
        list_error=AzureUpstreamError(UpstreamStage.LIST_PAGE, "boom"),
        list_error_at_page=1,
    )
    with pytest.raises(AzureUpstreamError):
        await SnapshotService(client).list_older_than(1)
