"""Azure Compute Adapter — request shaping and SDK error mapping.

Tests cover:
    - Copy-from-disk Snapshot model passed to begin_create_or_update
    - Submission errors map to *_SUBMIT stages, poll errors to *_POLL stages
    - get() failures of any kind become SnapshotNotFoundError
    - Paging yields one list per page and maps page failures to LIST_PAGE
"""

import pytest
from azure.core.exceptions import (
    HttpResponseError, ResourceNotFoundError, ServiceRequestError,
)
from azure.mgmt.compute.models import DiskCreateOption

from snapshot_api.core.errors import (
    AzureUpstreamError, SnapshotNotFoundError, UpstreamStage,
)
from snapshot_api.infrastructure import azure_compute
from snapshot_api.infrastructure.azure_compute import AzureSnapshotsClient, poll_result

from tests.mock_azure import (
    FakeComputeManagementClient, FakePoller, FakeSnapshot, FakeSnapshotsOperations,
)


@pytest.fixture
def operations(monkeypatch):
    ops = FakeSnapshotsOperations()
    FakeComputeManagementClient.operations = ops
    monkeypatch.setattr(
        azure_compute, "ComputeManagementClient", FakeComputeManagementClient,
    )
    return ops


def test_client_uses_credential_and_subscription(operations):
    credential = object()
    client = AzureSnapshotsClient(credential, "sub-123")
    assert client._compute.credential is credential
    assert client._compute.subscription_id == "sub-123"


def test_client_construction_failure_maps_to_client_init(monkeypatch):
    def _broken(credential, subscription_id):
        raise ValueError("Parameter 'subscription_id' must not be None.")

    monkeypatch.setattr(azure_compute, "ComputeManagementClient", _broken)
    with pytest.raises(AzureUpstreamError) as exc_info:
        AzureSnapshotsClient(object(), None)
    assert exc_info.value.stage == UpstreamStage.CLIENT_INIT


def test_create_builds_copy_snapshot(operations):
    poller = AzureSnapshotsClient(object(), "sub").begin_create_snapshot(
        "rg", "snap", "/disks/os", "westeurope",
    )
    assert poller is operations.poller
    _, rg, name, snapshot = operations.calls[0]
    assert (rg, name) == ("rg", "snap")
    assert snapshot.location == "westeurope"
    assert snapshot.creation_data.create_option == DiskCreateOption.COPY
    assert snapshot.creation_data.source_uri == "/disks/os"


def test_create_submit_failure(operations):
    operations.errors["begin_create_or_update"] = HttpResponseError(
        message="InvalidParameter",
    )
    with pytest.raises(AzureUpstreamError) as exc_info:
        AzureSnapshotsClient(object(), "sub").begin_create_snapshot(
            "rg", "snap", "", "",
        )
    assert exc_info.value.stage == UpstreamStage.CREATE_SUBMIT
    assert exc_info.value.message == (
        "Failed to initiate snapshot creation: InvalidParameter"
    )


def test_delete_submit_failure(operations):
    operations.errors["begin_delete"] = HttpResponseError(message="Locked")
    with pytest.raises(AzureUpstreamError) as exc_info:
        AzureSnapshotsClient(object(), "sub").begin_delete_snapshot("rg", "s")
    assert exc_info.value.stage == UpstreamStage.DELETE_SUBMIT


@pytest.mark.parametrize("error", [
    ResourceNotFoundError(message="ResourceNotFound"),
    ServiceRequestError(message="connection reset"),
    HttpResponseError(message="AuthorizationFailed"),
])
def test_get_collapses_all_failures_to_not_found(operations, error):
    operations.errors["get"] = error
    with pytest.raises(SnapshotNotFoundError) as exc_info:
        AzureSnapshotsClient(object(), "sub").get_snapshot("rg", "snap")
    assert exc_info.value.http_status == 404


def test_get_returns_snapshot(operations):
    snapshot = AzureSnapshotsClient(object(), "sub").get_snapshot("rg", "snap")
    assert snapshot.name == "snap"


def test_pages_yielded_in_order(operations):
    operations.pages = [[FakeSnapshot("a"), FakeSnapshot("b")], [FakeSnapshot("c")]]
    pages = list(AzureSnapshotsClient(object(), "sub").iter_snapshot_pages())
    assert [[s.name for s in page] for page in pages] == [["a", "b"], ["c"]]


def test_page_failure_maps_to_list_stage(operations):
    operations.pages = [[FakeSnapshot("a")], [FakeSnapshot("b")]]
    operations.error_at_page = 1
    operations.errors["page"] = HttpResponseError(message="TooManyRequests")

    pages = AzureSnapshotsClient(object(), "sub").iter_snapshot_pages()
    assert [s.name for s in next(pages)] == ["a"]
    with pytest.raises(AzureUpstreamError) as exc_info:
        next(pages)
    assert exc_info.value.stage == UpstreamStage.LIST_PAGE


def test_poll_result_maps_failure():
    poller = FakePoller(error=HttpResponseError(message="Timeout"))
    poller.done()
    with pytest.raises(AzureUpstreamError) as exc_info:
        poll_result(poller, UpstreamStage.DELETE_POLL)
    assert exc_info.value.message == "Failed to delete snapshot: Timeout"


def test_poll_result_returns_value():
    poller = FakePoller(result="done")
    poller.done()
    assert poll_result(poller, UpstreamStage.CREATE_POLL) == "done"
