# campus_gigs/core/security.py
# 負責密碼雜湊與 JWT 權杖的產生與驗證 (系統的 Identity Provider)
from datetime import datetime, timedelta, timezone
from typing import Optional

from passlib.context import CryptContext
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.config import settings
from campus_gigs.core.database import get_db
from campus_gigs.schemas.user_schema import TokenData
from campus_gigs.repositories.user_repo import UserRepository
from campus_gigs.models.user import User

# 1. 密碼雜湊設定 (Bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# 2. 定義 Token 從哪裡來 (Authorization Header)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")
# 允許匿名的版本：沒有 Header 時回傳 None 而不是 401
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """驗證明文密碼是否與雜湊值相符"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """產生密碼的雜湊值"""
    return pwd_context.hash(password)


def create_access_token(data: dict) -> str:
    """
    根據傳入的 data (e.g., user_id) 產生 JWT access token
    """
    to_encode = data.copy() # 避免修改原始資料
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def verify_access_token(token: str) -> TokenData | None:
    """
    驗證 JWT，回傳 TokenData (Pydantic Model) 或 None
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
        user_id = payload.get("user_id")
        if user_id is None:
            return None
        return TokenData(user_id=user_id)

    except JWTError:
        return None


async def _resolve_user(token: str, db: AsyncSession) -> User | None:
    token_data = verify_access_token(token)
    if token_data is None:
        return None
    return await UserRepository(db).get_user_by_id(token_data.user_id)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    FastAPI 依賴項：驗證 Token 並回傳 User Model
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user = await _resolve_user(token, db)
    if user is None:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is deactivated")

    return user


async def get_optional_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> User | None:
    """
    允許匿名瀏覽的 API 使用：沒有 Token 回傳 None。
    帶了 Token 但無效時，仍然視為 401，避免前端誤以為自己是匿名。
    """
    if token is None:
        return None
    return await get_current_user(token=token, db=db)
