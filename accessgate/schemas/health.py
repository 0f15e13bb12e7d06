"""Liveness payload for the accessgate service."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok"] = Field(default="ok", description="accessgate process is serving requests")
    version: str = Field(description="Installed accessgate version")
    environment: str = Field(description="APP_ENV the service was started with")
    database: Literal["connected", "disconnected"] = Field(
        description="Whether the credential database answered a trivial query",
    )
    roles_seeded: bool = Field(
        default=False,
        description="True once the role bootstrap has stored at least one role; registration fails until then",
    )
