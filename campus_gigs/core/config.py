# campus_gigs/core/config.py
# 應用程式設定 (資料庫連線字串、JWT 秘鑰、列表上限等)
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # 資料庫設定 (正式環境: mysql+aiomysql://..., 測試: sqlite+aiosqlite://)
    DATABASE_URL: str
    # 設為 True 會在 console 印出 SQL 語句
    DB_ECHO: bool = False

    # JWT 設定
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    # 存取令牌過期時間（分鐘）
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # 業務參數
    MESSAGE_MAX_LENGTH: int = 2000
    NOTIFICATION_LIST_LIMIT: int = 50
    LIST_PAGE_SIZE_DEFAULT: int = 20
    PEOPLE_PAGE_SIZE_MAX: int = 50
    PROJECT_DEFAULT_MAX_MEMBERS: int = 5
    # 技能模糊比對的相似度門檻 (0.0 ~ 1.0)
    SKILL_MATCH_THRESHOLD: float = 0.7

    # 環境變數檔案
    class Config:
        env_file = ".env"


# 建立設定實例
settings = Settings()
