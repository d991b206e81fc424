"""
业务失败类型
服务层抛出，由 app.exception_handlers 统一渲染为 JSON
"""
from typing import List, Optional


class ServiceError(Exception):
    """服务层异常基类"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailure(ServiceError):
    """输入校验失败，携带全部违反的字段规则"""

    status_code = 400

    def __init__(self, errors: List[str], message: str = "Validation failed"):
        super().__init__(message)
        self.errors = list(errors)


class ConflictFailure(ServiceError):
    """与现有数据冲突（重复预订、日期不可用、时段被占），应换参数重试"""

    status_code = 409


class NotFoundFailure(ServiceError):
    """引用的房间/服务不存在或不可预订"""

    status_code = 404


class PersistenceFailure(ServiceError):
    """存储不可用或写入被拒绝，可重试"""

    status_code = 500

    def __init__(self, message: str = "Database error", detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail
