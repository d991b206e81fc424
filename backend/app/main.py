"""
Luxury Hotel 前台主应用入口
客房预订、餐饮订单与水疗预约
"""
import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import init_db
from app.exception_handlers import setup_exception_handlers
from app.routers import rooms, bookings, meals, spa, auth, admin

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    init_db()
    logger.info(f"{settings.APP_NAME} started")
    yield


# 创建应用
app = FastAPI(
    title=settings.APP_NAME,
    description="酒店前台：客房预订、餐饮订单、水疗预约",
    version="1.0.0",
    lifespan=lifespan
)

# CORS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """请求日志"""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)")
    return response


setup_exception_handlers(app)

# 注册路由
app.include_router(rooms.router)
app.include_router(bookings.router)
app.include_router(meals.router)
app.include_router(spa.router)
app.include_router(auth.router)
app.include_router(admin.router)


@app.get("/")
def root():
    """根路径"""
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
        "description": "Room booking, dining and spa front desk"
    }


@app.get("/health")
def health_check():
    """健康检查"""
    return {"status": "healthy"}
