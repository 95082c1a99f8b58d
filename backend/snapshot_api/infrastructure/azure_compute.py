"""Azure Compute Adapter — thin wrapper over ComputeManagementClient.snapshots.

Invariants:
    - One adapter per request, built from that request's AuthContext
    - Submission failures and polling failures raise distinct AzureUpstreamError stages
    - get_snapshot() raises SnapshotNotFoundError for ANY lookup failure
    - iter_snapshot_pages() yields one list per provider page; a page failure
      raises and nothing further is yielded
    - No retries beyond the SDK's own transport policy

Design Decisions:
    - begin_* return the SDK LROPoller untouched; waiting is services/long_running.py
    - Poll failures are mapped in poll_result() so the waiter stays SDK-agnostic
"""

import logging
from collections.abc import Iterator
from typing import Any, NoReturn

from azure.core.exceptions import AzureError
from azure.core.polling import LROPoller
from azure.mgmt.compute import ComputeManagementClient
from azure.mgmt.compute.models import CreationData, DiskCreateOption, Snapshot

from snapshot_api.core.errors import (
    AzureUpstreamError, ErrorContext, SnapshotNotFoundError, UpstreamStage,
)

logger = logging.getLogger(__name__)


def _raise_upstream(
    stage: UpstreamStage, e: Exception, context: ErrorContext | None = None,
) -> NoReturn:
    if not isinstance(e, AzureError):
        logger.error(f"Unexpected Azure SDK error: {e}", exc_info=True)
    raise AzureUpstreamError(stage, str(e), context=context) from e


class AzureSnapshotsClient:
    """Snapshot operations for one subscription and credential."""

    def __init__(self, credential: Any, subscription_id: str):
        try:
            self._compute = ComputeManagementClient(credential, subscription_id)
        except Exception as e:
            _raise_upstream(UpstreamStage.CLIENT_INIT, e)
        self.subscription_id = subscription_id

    def begin_create_snapshot(
        self,
        resource_group_name: str,
        snapshot_name: str,
        disk_id: str,
        location: str,
    ) -> LROPoller:
        """Submit a Copy-from-disk snapshot creation."""
        snapshot = Snapshot(
            location=location,
            creation_data=CreationData(
                create_option=DiskCreateOption.COPY,
                source_uri=disk_id,
            ),
        )
        try:
            return self._compute.snapshots.begin_create_or_update(
                resource_group_name, snapshot_name, snapshot,
            )
        except Exception as e:
            _raise_upstream(
                UpstreamStage.CREATE_SUBMIT, e,
                ErrorContext(
                    resource_group=resource_group_name,
                    snapshot_name=snapshot_name,
                ),
            )

    def begin_delete_snapshot(
        self, resource_group_name: str, snapshot_name: str,
    ) -> LROPoller:
        try:
            return self._compute.snapshots.begin_delete(
                resource_group_name, snapshot_name,
            )
        except Exception as e:
            _raise_upstream(
                UpstreamStage.DELETE_SUBMIT, e,
                ErrorContext(
                    resource_group=resource_group_name,
                    snapshot_name=snapshot_name,
                ),
            )

    def get_snapshot(self, resource_group_name: str, snapshot_name: str):
        """Single lookup; not-found and transport errors both become 404."""
        context = ErrorContext(
            resource_group=resource_group_name, snapshot_name=snapshot_name,
        )
        try:
            return self._compute.snapshots.get(
                resource_group_name, snapshot_name,
            )
        except Exception as e:
            raise SnapshotNotFoundError(str(e), context=context) from e

    def iter_snapshot_pages(self) -> Iterator[list]:
        """Yield the subscription's snapshots page by page."""
        try:
            for page in self._compute.snapshots.list().by_page():
                yield list(page)
        except Exception as e:
            _raise_upstream(UpstreamStage.LIST_PAGE, e)


def poll_result(
    poller: LROPoller, stage: UpstreamStage, context: ErrorContext | None = None,
):
    """Return the terminal result of a finished poller, mapping failures."""
    try:
        return poller.result()
    except Exception as e:
        _raise_upstream(stage, e, context)
