"""
后台管理路由（需要登录）
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.ontology import AdminUser
from app.models.schemas import DashboardResponse
from app.security.auth import get_current_admin
from app.services.report_service import ReportService

router = APIRouter(prefix="/api/admin", tags=["后台管理"])


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin)
):
    """仪表盘统计"""
    return DashboardResponse(data=ReportService(db).get_dashboard_stats())
