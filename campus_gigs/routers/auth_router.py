# campus_gigs/routers/auth_router.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.database import get_db
from campus_gigs.services.auth_service import AuthService
from campus_gigs.schemas.user_schema import Token, UserCreate, UserOut


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth", # 路由前綴
    tags=["Auth"]    # API 文件分類標籤
)


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register_new_user(
    user_data: UserCreate, # Request Body 會被 Pydantic 驗證
    db: AsyncSession = Depends(get_db)
):
    """
    註冊新使用者

    - 密碼需至少8碼，且包含英文和數字。
    - Email 已存在時回傳 409。
    """
    auth_service = AuthService(db)
    return await auth_service.register_user(user_data)


@router.post("/token", response_model=Token)
async def login_for_access_token(
    # (重要) 使用 OAuth2PasswordRequestForm 會強制 API 只接受 form-data
    # 格式為 username=...&password=...
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db)
):
    """
    提供帳號 (username 欄位傳 email) 和密碼以取得 Access Token
    """
    auth_service = AuthService(db)

    # form_data.username 欄位就是我們的 email
    user = await auth_service.authenticate_user(
        email=form_data.username,
        password=form_data.password
    )

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info(f"User logged in: {user.user_id}")

    access_token = auth_service.create_login_token(user)

    return {"access_token": access_token, "token_type": "bearer"}
