from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import DashboardSummary
from ..services import dashboard as dashboard_service

router = APIRouter()


@router.get("/dashboard/summary", response_model=DashboardSummary)
def dashboard_summary(company_id: int, db: Session = Depends(get_db)) -> dict:
    return dashboard_service.company_summary(db, company_id)
