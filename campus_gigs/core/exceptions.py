# campus_gigs/core/exceptions.py
# 業務錯誤分類：每一種錯誤都有固定的 HTTP 狀態碼與機器可讀的 error_code。
#
# Unauthorized (401) 不在此處，由 core/security.py 的身分驗證依賴產生。
from typing import Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse


class AppException(HTTPException):
    """所有業務錯誤的基底類別"""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "internal_error"
    default_detail: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=self.http_status, detail=detail or self.default_detail)


class NotFoundError(AppException):
    """引用的資料不存在"""
    http_status = status.HTTP_404_NOT_FOUND
    error_code = "not_found"
    default_detail = "Not found"


class ForbiddenError(AppException):
    """已登入，但對此資料沒有權限"""
    http_status = status.HTTP_403_FORBIDDEN
    error_code = "forbidden"
    default_detail = "Forbidden"


class PrivateProfileError(ForbiddenError):
    """Profile 為私人，且檢視者與對方沒有任何關聯"""
    error_code = "private"
    default_detail = "This profile is private."


class ConflictError(AppException):
    """違反唯一性或狀態限制"""
    http_status = status.HTTP_409_CONFLICT
    error_code = "conflict"
    default_detail = "Conflict"


class InvalidArgumentError(AppException):
    """輸入格式錯誤 (在存取資料庫之前就能判斷)"""
    http_status = status.HTTP_400_BAD_REQUEST
    error_code = "invalid_argument"
    default_detail = "Invalid request"


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """將業務錯誤轉成 {"error": <error_code>, "detail": <訊息>}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error_code, "detail": exc.detail},
    )
