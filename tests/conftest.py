import json
import os

# 必須在匯入 marketplace 之前設定 (Settings 在匯入時讀取環境變數)
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace.core.database import Base
from marketplace.core.websocket_manager import ConnectionManager
from marketplace.models import (  # noqa: F401
    user, freelancer_profile, service, review,
    appointment, job, proposal, message
)
from marketplace.models.user import User, UserTypeEnum
from marketplace.models.freelancer_profile import FreelancerProfile
from marketplace.services.notification_service import NotificationService


class FakeWebSocket:
    """只實作 send_text / close 的假 WebSocket，記錄送出的 JSON 與關閉代碼"""

    def __init__(self, fail: bool = False):
        self.sent = []
        self.fail = fail
        self.close_code = None

    async def send_text(self, data: str):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(json.loads(data))

    async def close(self, code: int = 1000):
        self.close_code = code


@pytest.fixture
async def engine():
    # 單一連線的 in-memory SQLite，整個測試共用同一個資料庫
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def manager():
    manager = ConnectionManager(max_pending=100)
    yield manager
    await manager.close_all()


@pytest.fixture
def notifier(manager):
    return NotificationService(manager)


@pytest.fixture
def make_user(db):
    async def _make_user(username, user_type=UserTypeEnum.client, **kwargs):
        new_user = User(
            username=username,
            name=kwargs.pop("name", username.capitalize()),
            email=kwargs.pop("email", f"{username}@example.com"),
            password_hash="not-a-real-hash",
            user_type=user_type,
            **kwargs,
        )
        db.add(new_user)
        await db.commit()
        await db.refresh(new_user)
        return new_user
    return _make_user


@pytest.fixture
def make_freelancer(db, make_user):
    """建立工作者使用者 + Profile，回傳 (user, profile)"""
    async def _make_freelancer(username, category="design", hourly_rate=50, **kwargs):
        profile_fields = {
            "title": kwargs.pop("title", "Freelancer"),
            "skills": kwargs.pop("skills", []),
        }
        new_user = await make_user(username, UserTypeEnum.freelancer, **kwargs)
        profile = FreelancerProfile(
            user_id=new_user.user_id,
            category=category,
            hourly_rate=hourly_rate,
            **profile_fields,
        )
        db.add(profile)
        await db.commit()
        await db.refresh(profile)
        return new_user, profile
    return _make_freelancer
