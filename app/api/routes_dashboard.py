import datetime as dt

from fastapi import APIRouter

from app.api.dependencies import RepoDep, VerifiedUserDep
from app.models import schemas
from app.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("", response_model=schemas.DashboardOut)
def dashboard(_user: VerifiedUserDep, repo: RepoDep, today: dt.date | None = None):
    """Dashboard cards; ``today`` defaults to the current business date."""
    return DashboardService(repo).build(today)
