"""API test fixtures — FastAPI app, fresh credential store, fake Azure client.

Invariants:
    - Every test gets its own CredentialStore (get_credential_store overridden)
    - AzureSnapshotsClient is patched in api.dependencies, so the real
      credential gate and service wiring run unchanged
    - `azure` records every client construction; an empty `built` list means
      no Azure object was created for the request
"""

import pytest
from httpx import ASGITransport, AsyncClient

from snapshot_api.api.dependencies import get_credential_store
from snapshot_api.core.credential_store import AuthContext, CredentialStore
from snapshot_api.main import create_app

from tests.mock_azure import FakeSnapshotsClient


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def store(app):
    store = CredentialStore()
    app.dependency_overrides[get_credential_store] = lambda: store
    yield store
    app.dependency_overrides.clear()


@pytest.fixture
def logged_in(store):
    """Store an AuthContext with a sentinel credential."""
    context = AuthContext(
        credential=object(), tenant_id="tenant-test", client_id="client-test",
    )
    store.set(context)
    return context


@pytest.fixture
def azure(monkeypatch):
    """Patch AzureSnapshotsClient with a controllable FakeSnapshotsClient.

    Returns dict with:
      - fake: the FakeSnapshotsClient handed to every request
      - built: list of (credential, subscription_id) per construction
    """
    state = {"fake": FakeSnapshotsClient(), "built": []}

    def _factory(credential, subscription_id):
        state["built"].append((credential, subscription_id))
        return state["fake"]

    monkeypatch.setattr(
        "snapshot_api.api.dependencies.AzureSnapshotsClient", _factory,
    )
    return state


@pytest.fixture
async def client(app, store):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
