"""Snapshot Routes — create, delete, validate and list-by-age endpoints.

Invariants:
    - Every route depends on get_snapshot_service, which requires a stored
      AuthContext (401 otherwise) before any Azure call
    - Malformed JSON / missing fields / bad query params → 400 via the
      RequestValidationError handler, with no Azure call
    - create/delete respond only after the Azure operation is terminal

Design Decisions:
    - Paths kept flat (/create-snapshot, ...) for the existing web client
    - request.is_disconnected passed to the service so an abandoned request
      stops waiting on its long-running operation
"""

import logging

from fastapi import APIRouter, Depends, Query, Request

from snapshot_api.api.dependencies import get_snapshot_service
from snapshot_api.schemas.snapshot import (
    CreateSnapshotRequest,
    DeleteSnapshotRequest,
    MessageResponse,
    SnapshotsByAgeResponse,
)
from snapshot_api.services.snapshot_service import SnapshotService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["snapshots"])


@router.post("/create-snapshot", response_model=MessageResponse)
async def create_snapshot(
    body: CreateSnapshotRequest,
    request: Request,
    service: SnapshotService = Depends(get_snapshot_service),
):
    """Copy a managed disk into a new snapshot and wait for completion."""
    await service.create_snapshot(body, request.is_disconnected)
    return MessageResponse(message="Snapshot created successfully.")


@router.post("/delete-snapshot", response_model=MessageResponse)
async def delete_snapshot(
    body: DeleteSnapshotRequest,
    request: Request,
    service: SnapshotService = Depends(get_snapshot_service),
):
    """Delete a snapshot and wait for completion."""
    await service.delete_snapshot(body, request.is_disconnected)
    return MessageResponse(message="Snapshot deleted successfully.")


@router.get("/validate-snapshot", response_model=MessageResponse)
async def validate_snapshot(
    resource_group_name: str = Query(alias="resourceGroupName", min_length=1),
    snapshot_name: str = Query(alias="snapshotName", min_length=1),
    service: SnapshotService = Depends(get_snapshot_service),
):
    """Check that a snapshot exists (404 on any lookup failure)."""
    await service.validate_snapshot(resource_group_name, snapshot_name)
    return MessageResponse(message="Snapshot is valid and exists.")


@router.get("/snapshots-by-age", response_model=SnapshotsByAgeResponse)
async def snapshots_by_age(
    days: int = Query(),
    service: SnapshotService = Depends(get_snapshot_service),
):
    """List snapshots created strictly more than `days` days ago."""
    snapshots = await service.list_older_than(days)
    return SnapshotsByAgeResponse(snapshots=snapshots)
