"""Route Dependencies — credential gate and per-request Azure adapters.

Invariants:
    - require_auth_context raises NotLoggedInError (401) before any Azure object exists
    - The AuthContext is read once per request; the same context feeds every
      adapter that request builds
    - Tests swap Azure collaborators through app.dependency_overrides
"""

from fastapi import Depends

from snapshot_api.config import Settings, get_settings
from snapshot_api.core.credential_store import (
    AuthContext, CredentialStore, credential_store,
)
from snapshot_api.core.errors import NotLoggedInError
from snapshot_api.infrastructure.azure_compute import AzureSnapshotsClient
from snapshot_api.infrastructure.azure_identity import DeviceCodeAuthenticator
from snapshot_api.services.snapshot_service import SnapshotService


def get_credential_store() -> CredentialStore:
    return credential_store


def require_auth_context(
    store: CredentialStore = Depends(get_credential_store),
) -> AuthContext:
    """Current AuthContext, or 401 when nobody has logged in yet."""
    context = store.get()
    if context is None:
        raise NotLoggedInError()
    return context


def get_snapshots_client(
    auth: AuthContext = Depends(require_auth_context),
    settings: Settings = Depends(get_settings),
) -> AzureSnapshotsClient:
    return AzureSnapshotsClient(auth.credential, settings.azure_subscription_id)


def get_snapshot_service(
    client: AzureSnapshotsClient = Depends(get_snapshots_client),
    settings: Settings = Depends(get_settings),
) -> SnapshotService:
    return SnapshotService(client, settings.lro_poll_interval_seconds)


def get_authenticator(
    settings: Settings = Depends(get_settings),
) -> DeviceCodeAuthenticator:
    return DeviceCodeAuthenticator(
        tenant_id=settings.azure_tenant_id,
        client_id=settings.azure_client_id,
        scope=settings.azure_management_scope,
    )
