from datetime import datetime
from typing import Any
from pydantic import BaseModel, Field


class WidgetCreate(BaseModel):
    # Left untyped so a missing or non-string location reaches the endpoint,
    # which answers 400 rather than a schema 422.
    location: Any = None


class WidgetResponse(BaseModel):
    id: int
    location: str
    created_at: datetime = Field(serialization_alias="createdAt")

    model_config = {"from_attributes": True}
