from sqlalchemy import TIMESTAMP
from sqlalchemy.dialects import mysql
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from campus_gigs.core.config import settings

# 建立非同步引擎
engine = create_async_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True, # 每次從連線池取連線前，先 PING 一次，確保連線有效
    echo=settings.DB_ECHO,
)

# 建立非同步 Session
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# 建立 ORM Model 基底類別
Base = declarative_base()

# MySQL 的 TIMESTAMP 預設只精確到秒，用來排序的時間欄位要保留微秒
PreciseTimestamp = TIMESTAMP().with_variant(mysql.TIMESTAMP(fsp=6), "mysql")

# (重要) 取得 DB Session 的 Dependency
async def get_db() -> AsyncSession:
    """FastAPI Dependency: 取得非同步資料庫 session (每個請求一個)"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
