from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from riskboard.api.deps import current_user, db, today
from riskboard.core.config import settings
from riskboard.core.errors import NotFound
from riskboard.schemas.common import ApiResponse, ok
from riskboard.schemas.dashboard import DashboardOut
from riskboard.services.dashboard import SECTIONS, build_dashboard, build_section

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=ApiResponse[DashboardOut])
def dashboard(s: Session = Depends(db), as_of: date = Depends(today), u=Depends(current_user)):
    return ok(build_dashboard(s, as_of, min_group_size=settings.dashboard_min_group_size))


@router.get("/{section}")
def dashboard_section(section: str, s: Session = Depends(db), as_of: date = Depends(today), u=Depends(current_user)):
    if section not in SECTIONS:
        raise NotFound(f"Unknown dashboard section '{section}'", code="section_not_found", details={"sections": list(SECTIONS)})
    return ok(build_section(s, section, as_of, min_group_size=settings.dashboard_min_group_size))
