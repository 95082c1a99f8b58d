"""Azure Identity Adapter — interactive device-code login via azure-identity.

Invariants:
    - login() blocks until the user finishes the out-of-band flow (or it fails)
    - The device-code instructions are logged and handed to on_prompt
    - Every login failure is mapped to AzureLoginError carrying the provider text

Design Decisions:
    - authenticate() is called eagerly so /login reports the real outcome,
      instead of deferring the flow to the first management call
"""

import logging
from collections.abc import Callable
from datetime import datetime

from azure.core.exceptions import AzureError
from azure.identity import DeviceCodeCredential

from snapshot_api.core.credential_store import AuthContext
from snapshot_api.core.errors import AzureLoginError

logger = logging.getLogger(__name__)

PromptCallback = Callable[[str], None]


def format_device_code_prompt(verification_uri: str, user_code: str) -> str:
    return (
        f"To sign in, use a web browser to open the page {verification_uri} "
        f"and enter the code {user_code} to authenticate."
    )


class DeviceCodeAuthenticator:
    """Runs the device-code flow for one tenant/client pair."""

    def __init__(self, tenant_id: str, client_id: str, scope: str):
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.scope = scope

    def login(self, on_prompt: PromptCallback | None = None) -> AuthContext:
        """Authenticate interactively and return a fresh AuthContext."""

        def prompt_callback(
            verification_uri: str, user_code: str, expires_on: datetime,
        ) -> None:
            message = format_device_code_prompt(verification_uri, user_code)
            logger.warning(message)
            if on_prompt is not None:
                on_prompt(message)

        try:
            credential = DeviceCodeCredential(
                client_id=self.client_id,
                tenant_id=self.tenant_id,
                prompt_callback=prompt_callback,
            )
            credential.authenticate(scopes=[self.scope])
        except Exception as e:
            if isinstance(e, AzureError):
                logger.error(f"Device-code login failed: {e}")
            else:
                logger.error(f"Unexpected login error: {e}", exc_info=True)
            raise AzureLoginError(str(e)) from e

        logger.info("Logged in to Azure", extra={"tenant_id": self.tenant_id})
        return AuthContext(
            credential=credential,
            tenant_id=self.tenant_id,
            client_id=self.client_id,
        )
