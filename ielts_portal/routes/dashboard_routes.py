from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ielts_portal.database import get_db
from ielts_portal.dependencies import get_current_principal
from ielts_portal.models.principal import Principal
from ielts_portal.services.dashboard_service import DashboardService
from ielts_portal.schemas.dashboard_schemas import DashboardResponse

router = APIRouter()


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Headline numbers and recent activity (every authenticated role)"""
    service = DashboardService(db)
    return service.summary()
