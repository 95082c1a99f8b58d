"""Login Service — runs the device-code flow and stores the resulting AuthContext.

Invariants:
    - A successful login overwrites any stored context unconditionally
    - A failed login leaves the previous context (if any) in place
    - pending_prompt is cleared whether the flow succeeds or fails
"""

import logging

from fastapi.concurrency import run_in_threadpool

from snapshot_api.core.credential_store import AuthContext, CredentialStore
from snapshot_api.infrastructure.azure_identity import DeviceCodeAuthenticator

logger = logging.getLogger(__name__)


async def login(
    authenticator: DeviceCodeAuthenticator, store: CredentialStore,
) -> AuthContext:
    if store.is_authenticated:
        logger.info("Replacing existing Azure credential with a new login")
    try:
        context = await run_in_threadpool(
            authenticator.login, store.begin_login,
        )
    except Exception:
        store.fail_login()
        raise
    store.set(context)
    return context
