"""Auth Routes — device-code login and session status.

Invariants:
    - GET /login blocks until the device-code flow finishes, then stores the credential
    - GET /session never calls Azure and has no preconditions
"""

import logging

from fastapi import APIRouter, Depends

from snapshot_api.api.dependencies import get_authenticator, get_credential_store
from snapshot_api.core.credential_store import CredentialStore
from snapshot_api.infrastructure.azure_identity import DeviceCodeAuthenticator
from snapshot_api.schemas.auth import SessionStatus
from snapshot_api.schemas.snapshot import MessageResponse
from snapshot_api.services.login_service import login

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])


@router.get("/login", response_model=MessageResponse)
async def azure_login(
    authenticator: DeviceCodeAuthenticator = Depends(get_authenticator),
    store: CredentialStore = Depends(get_credential_store),
):
    """Run the interactive device-code login against Azure AD."""
    await login(authenticator, store)
    return MessageResponse(message="Logged in to Azure successfully.")


@router.get("/session", response_model=SessionStatus)
async def session_status(
    store: CredentialStore = Depends(get_credential_store),
):
    """Report whether a credential is held and any pending device code."""
    context = store.get()
    return SessionStatus(
        authenticated=context is not None,
        authenticated_at=context.authenticated_at if context else None,
        tenant_id=context.tenant_id if context else None,
        pending_prompt=store.pending_prompt,
    )
