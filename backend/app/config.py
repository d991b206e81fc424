"""
应用配置
从环境变量和 .env 读取配置
"""
from typing import List
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """应用设置"""

    # 应用基础配置
    APP_NAME: str = "Luxury Hotel Front Desk"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 数据库配置
    DATABASE_URL: str = "sqlite:///./luxury_hotel.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30          # 获取连接的最长等待秒数
    DB_BUSY_TIMEOUT: int = 15          # SQLite 写锁等待秒数

    # JWT 配置
    SECRET_KEY: str = "luxury-hotel-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # 初始管理员（仅 init_data.py 使用）
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # 预订业务参数
    BOOKING_REFERENCE_PREFIX: str = "BK"
    BOOKING_REFERENCE_MAX_ATTEMPTS: int = 5
    DISCOUNT_RATE: float = 0.10
    MAX_GUESTS: int = 8

    model_config = ConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


# 全局设置实例
settings = Settings()
