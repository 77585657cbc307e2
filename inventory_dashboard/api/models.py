"""Pydantic request bodies for the inventory API."""

from pydantic import BaseModel, Field


class ResolveAlertBody(BaseModel):
    """Body of PATCH /api/alerts."""

    alert_id: int | None = Field(None, alias="alertId")
    resolved_by_user_id: int | None = Field(None, alias="resolvedByUserId")

    model_config = {"populate_by_name": True, "extra": "ignore"}
