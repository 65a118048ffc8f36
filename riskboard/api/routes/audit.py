from datetime import date, datetime, time, timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from riskboard.api.deps import Paging, db, require_admin
from riskboard.models.audit_log import AuditLog
from riskboard.schemas.audit import AuditOut
from riskboard.schemas.common import ApiResponse, PageMeta, ok

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("", response_model=ApiResponse[list[AuditOut]])
def list_audit(
    paging: Paging = Depends(),
    username: str | None = Query(default=None),
    entity_type: str | None = Query(default=None),
    entity_id: int | None = Query(default=None),
    action: str | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    s: Session = Depends(db),
    admin=Depends(require_admin),
):
    conds = []
    if username:
        conds.append(AuditLog.username == username)
    if entity_type:
        conds.append(AuditLog.entity_type == entity_type)
    if entity_id is not None:
        conds.append(AuditLog.entity_id == entity_id)
    if action:
        conds.append(AuditLog.action == action)
    if date_from:
        conds.append(AuditLog.created_at >= datetime.combine(date_from, time.min))
    if date_to:
        conds.append(AuditLog.created_at < datetime.combine(date_to + timedelta(days=1), time.min))

    total = s.execute(select(func.count(AuditLog.id)).where(*conds)).scalar_one()
    rows = s.execute(
        select(AuditLog)
        .where(*conds)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .offset((paging.page - 1) * paging.limit)
        .limit(paging.limit)
    ).scalars().all()
    return ok(rows, pagination=PageMeta.build(paging.page, paging.limit, total))
