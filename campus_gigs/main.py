import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campus_gigs.core.config import settings
from campus_gigs.core.exceptions import AppException, app_exception_handler
from campus_gigs.routers import (
    auth_router, user_router, people_router,
    gig_router, application_router, project_router,
    message_router, notification_router, rating_router,
    stats_router
)

# --- 匯入所有 Model 檔案 ---
# 都在應用程式啟動時被 SQLAlchemy 註冊。
from campus_gigs.models import user
from campus_gigs.models import gig
from campus_gigs.models import application
from campus_gigs.models import project
from campus_gigs.models import message
from campus_gigs.models import notification
from campus_gigs.models import rating


# 設定基礎日誌
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__) # 建立一個 logger 實例

app = FastAPI(title="Campus Gigs")

# --- 設定 CORS (跨來源資源共用) ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS, # 正式環境應指定前端網域 (e.g. 'http://localhost:5173')
    allow_credentials=True,
    allow_methods=["*"], # 允許所有 HTTP 方法
    allow_headers=["*"], # 允許所有 HTTP 標頭
)

# --- 業務錯誤 -> {"error": ..., "detail": ...} ---
app.add_exception_handler(AppException, app_exception_handler)

# --- 根路徑 ---
@app.get("/")
def read_root():
    return {"status": "success", "message": "Backend is running!"}

# --- 載入 API 路由 ---
app.include_router(auth_router.router)
app.include_router(user_router.router)
app.include_router(people_router.router)
app.include_router(gig_router.router)
app.include_router(application_router.router)
app.include_router(project_router.router)
app.include_router(message_router.router)
app.include_router(notification_router.router)
app.include_router(rating_router.router)
app.include_router(stats_router.router)
