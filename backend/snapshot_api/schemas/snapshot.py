"""Snapshot Schemas — Pydantic models for the snapshot endpoints.

Invariants:
    - Wire names are camelCase (resourceGroupName, diskId, ...) to match the web client
    - Every body field is required; empty strings are accepted and forwarded as-is
    - SnapshotSummary.resource_group carries the full ARM resource id, not the
      resource-group name (preserved from the original service)

Design Decisions:
    - alias + populate_by_name: snake_case in Python, camelCase on the wire
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CreateSnapshotRequest(_CamelModel):
    """Create a snapshot by copying a managed disk."""
    resource_group_name: str = Field(alias="resourceGroupName")
    snapshot_name: str = Field(alias="snapshotName")
    disk_id: str = Field(alias="diskId")
    location: str


class DeleteSnapshotRequest(_CamelModel):
    resource_group_name: str = Field(alias="resourceGroupName")
    snapshot_name: str = Field(alias="snapshotName")


class SnapshotSummary(_CamelModel):
    """Read-only projection of one snapshot in the by-age listing."""
    name: str
    resource_group: str = Field(alias="resourceGroup")
    creation_time: datetime = Field(alias="creationTime")


class SnapshotsByAgeResponse(BaseModel):
    snapshots: list[SnapshotSummary]


class MessageResponse(BaseModel):
    """Plain confirmation message."""
    message: str
