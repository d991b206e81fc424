"""
认证路由
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.ontology import AdminUser
from app.models.schemas import LoginRequest, Token
from app.security.auth import authenticate_admin, create_access_token, get_current_admin

router = APIRouter(prefix="/api/auth", tags=["认证"])


@router.post("/login", response_model=Token)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """管理员登录"""
    admin = authenticate_admin(db, data.username, data.password)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )
    return Token(access_token=create_access_token(admin.id, admin.username))


@router.get("/me")
def get_current_admin_info(current_admin: AdminUser = Depends(get_current_admin)):
    """获取当前管理员信息"""
    return {
        'id': current_admin.id,
        'username': current_admin.username,
        'is_active': current_admin.is_active
    }
