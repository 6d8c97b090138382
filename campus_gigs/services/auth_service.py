# campus_gigs/services/auth_service.py
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.exceptions import ConflictError
from campus_gigs.core.security import verify_password, create_access_token, get_password_hash
from campus_gigs.models.user import User
from campus_gigs.repositories.user_repo import UserRepository
from campus_gigs.schemas.user_schema import UserCreate


class AuthService:
    def __init__(self, db: AsyncSession):
        self.user_repo = UserRepository(db)

    async def authenticate_user(self, email: str, password: str) -> User | None:
        """
        驗證使用者帳號密碼。
        成功回傳 User 物件，失敗回傳 None。
        """
        user = await self.user_repo.get_user_by_email(email)

        # 1. 檢查使用者是否存在
        if not user:
            return None

        # 2. 檢查是否被停權
        if not user.is_active:
            return None

        # 3. 檢查密碼是否正確
        if not verify_password(plain_password=password, hashed_password=user.password_hash):
            return None

        return user

    async def register_user(self, user_create: UserCreate) -> User:
        """
        處理使用者註冊
        """
        # 1. 檢查 Email 是否已被註冊
        existing_user = await self.user_repo.get_user_by_email(user_create.email)
        if existing_user:
            raise ConflictError("Email is already registered")

        # 2. 雜湊密碼並建立 User ORM 模型
        new_user = User(
            email=user_create.email,
            name=user_create.name,
            password_hash=get_password_hash(user_create.password),
        )

        # 3. 呼叫 Repository 儲存到資料庫
        return await self.user_repo.create_user(new_user)

    def create_login_token(self, user: User) -> str:
        """
        為登入成功的使用者產生 JWT
        """
        return create_access_token(data={"user_id": user.user_id})
