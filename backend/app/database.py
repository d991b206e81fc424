"""
数据库配置 - 持久化层
连接池由 engine 统一管理，每个请求通过 get_db 获取独立会话
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from app.config import settings

logger = logging.getLogger(__name__)

# 连接执行选项：SQLite 上以 BEGIN IMMEDIATE 开启事务
WRITE_INTENT_OPTION = "sqlite_begin_immediate"


def _engine_options(url: str) -> dict:
    """根据数据库类型生成连接池参数"""
    if url.startswith("sqlite"):
        return {
            "connect_args": {
                "check_same_thread": False,
                "timeout": settings.DB_BUSY_TIMEOUT,
            }
        }
    return {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
    }


def build_engine(url: str, **overrides):
    """
    创建引擎
    SQLite: 打开外键约束，并由 SQLAlchemy 显式发出 BEGIN，
    否则 pysqlite 的隐式事务会让 SAVEPOINT 提前提交
    """
    options = _engine_options(url)
    options.update(overrides)
    engine = create_engine(url, **options)
    if url.startswith("sqlite"):
        event.listen(engine, "connect", _on_sqlite_connect)
        event.listen(engine, "begin", _on_sqlite_begin)
    return engine


def _on_sqlite_connect(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _on_sqlite_begin(conn):
    # 写事务一开始就取 RESERVED 锁：并发写者在 busy timeout 内排队，
    # 而不是各持 SHARED 锁后在升级时直接报 database is locked
    if conn.get_execution_options().get(WRITE_INTENT_OPTION):
        conn.exec_driver_sql("BEGIN IMMEDIATE")
    else:
        conn.exec_driver_sql("BEGIN")


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """依赖注入：获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    原子工作单元
    正常退出时提交，任何异常都整体回滚后再抛出
    会话尚未开启事务时以写意图开启（SQLite 为 BEGIN IMMEDIATE）

    用法:
        with unit_of_work(db):
            db.add(order)
            db.flush()
            db.add_all(items)
    """
    try:
        if not db.in_transaction():
            db.connection(execution_options={WRITE_INTENT_OPTION: True})
        yield db
        db.commit()
    except BaseException:
        db.rollback()
        logger.warning("Unit of work rolled back")
        raise


def init_db():
    """初始化数据库表"""
    from app.models import ontology  # noqa
    Base.metadata.create_all(bind=engine)
