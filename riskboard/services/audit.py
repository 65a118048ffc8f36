from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy.orm import Session
from riskboard.models.audit_log import AuditLog


def _jsonable(v):
    if isinstance(v, Enum):
        return v.value
    if isinstance(v, Decimal):
        return str(v)
    if isinstance(v, (date, datetime)):
        return v.isoformat()
    return v


def log_event(
    s: Session,
    username: str,
    action: str,
    entity_type: str,
    entity_id: int | None = None,
    details: dict | None = None,
):
    row = AuditLog(
        username=username,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details={k: _jsonable(v) for k, v in details.items()} if details else None,
    )
    s.add(row)
    s.commit()
    return row
