"""Credential Store — process-wide holder of the current Azure authentication context.

Invariants:
    - Empty until the first successful login; there is no logout
    - AuthContext is immutable; set() replaces it atomically under a lock
    - Readers get a consistent snapshot: a request captures the context once
      and keeps using it even if a concurrent login replaces it
    - pending_prompt is only non-None while a device-code login is in progress

Design Decisions:
    - threading.Lock over asyncio.Lock: login completes in a worker thread
    - Credential typed as Any: core/ stays free of Azure SDK imports
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class AuthContext:
    """Authenticated identity used for every Azure Compute call."""
    credential: Any
    tenant_id: str
    client_id: str
    authenticated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class CredentialStore:
    """Lock-protected slot for the current AuthContext."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._context: AuthContext | None = None
        self._pending_prompt: str | None = None

    def get(self) -> AuthContext | None:
        with self._lock:
            return self._context

    def set(self, context: AuthContext) -> None:
        """Store a new context, overwriting any previous one unconditionally."""
        with self._lock:
            self._context = context
            self._pending_prompt = None

    @property
    def is_authenticated(self) -> bool:
        return self.get() is not None

    @property
    def pending_prompt(self) -> str | None:
        with self._lock:
            return self._pending_prompt

    def begin_login(self, prompt: str) -> None:
        """Record the device-code instructions shown to the user."""
        with self._lock:
            self._pending_prompt = prompt

    def fail_login(self) -> None:
        with self._lock:
            self._pending_prompt = None


# ADR: single process-wide store, one uvicorn worker, one operator
credential_store = CredentialStore()
