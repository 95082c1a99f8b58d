"""Auth Schemas — login session status exposed to the web client."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SessionStatus(BaseModel):
    """Whether the service holds an Azure credential, and the pending device code."""
    model_config = ConfigDict(populate_by_name=True)

    authenticated: bool
    authenticated_at: datetime | None = Field(None, alias="authenticatedAt")
    tenant_id: str | None = Field(None, alias="tenantId")
    pending_prompt: str | None = Field(None, alias="pendingPrompt")
