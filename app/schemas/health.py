"""Pydantic schema for the health check response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus database reachability, for load balancers and monitoring."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: str = Field(description="APP_ENV the process runs with (dev or prod)")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Result of a SELECT 1 against the users database",
    )
