from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator


class ResendEmailEventData(BaseModel):
    email_id: str | None = None
    to: list[str] = []
    subject: str | None = None
    bounce: dict[str, Any] | None = None


class ResendWebhookEvent(BaseModel):
    type: str
    created_at: datetime | None = None
    data: ResendEmailEventData

    @field_validator("created_at", mode="before")
    @classmethod
    def normalize_timezone(cls, v: str) -> str:
        if isinstance(v, str) and v.endswith("+00"):
            return v + ":00"
        return v
