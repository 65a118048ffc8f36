from datetime import datetime
from typing import Any

from pydantic import BaseModel


class AuditOut(BaseModel):
    id: int
    created_at: datetime
    username: str
    action: str
    entity_type: str
    entity_id: int | None
    details: dict[str, Any] | None

    class Config:
        from_attributes = True
