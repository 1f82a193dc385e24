# marketplace/services/auth_service.py
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status
from marketplace.repositories.user_repo import UserRepository
from marketplace.core.security import verify_password, create_access_token, get_password_hash
from marketplace.models.user import User
from marketplace.schemas.user_schema import UserCreate

class AuthService:
    def __init__(self, db: AsyncSession):
        self.user_repo = UserRepository(db)

    async def authenticate_user(self, login: str, password: str) -> User | None:
        """
        驗證帳號密碼 (login 可以是 username 或 email)。
        成功回傳 User 物件，失敗回傳 None。
        """
        user = await self.user_repo.get_user_by_username(login)
        if user is None and "@" in login:
            user = await self.user_repo.get_user_by_email(login)

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
        # 1. 檢查帳號 / Email 是否已被註冊
        if await self.user_repo.get_user_by_username(user_create.username):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="此帳號已經被註冊",
            )
        if await self.user_repo.get_user_by_email(user_create.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="此 Email 已經被註冊",
            )

        # 2. 雜湊密碼後建立 User
        new_user = User(
            username=user_create.username,
            name=user_create.name,
            email=user_create.email,
            password_hash=get_password_hash(user_create.password),
            user_type=user_create.user_type,
        )

        # 3. 呼叫 Repository 儲存到資料庫
        return await self.user_repo.create_user(new_user)

    def create_login_token(self, user: User) -> str:
        """
        為指定使用者建立 access token
        """
        return create_access_token(
            data={
                "sub": user.username,
                "user_id": str(user.user_id),
                "user_type": user.user_type.value # 確保存入的是字串
            }
        )
