from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from marketplace.core.config import settings

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

# (重要) 取得 DB Session 的 Dependency：每個 request 一個 session
async def get_db() -> AsyncSession:
    """FastAPI Dependency: 取得非同步資料庫 session，request 中途出錯時 rollback"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

async def init_models() -> None:
    """建立所有資料表 (僅供開發環境使用，正式環境請用 migration)"""
    # 匯入所有 Model，確保都已註冊到 Base.metadata
    from marketplace.models import (  # noqa: F401
        user, freelancer_profile, service, review,
        appointment, job, proposal, message
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
