import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketplace.core.config import settings
from marketplace.core.database import init_models
from marketplace.core.websocket_manager import ConnectionManager
from marketplace.routers import (
    auth_router, user_router,
    freelancer_router, profile_router,
    service_router, review_router,
    job_router, message_router, notification_router
)

# 單獨匯入 "proposal_router.py" / "appointment_router.py" 檔案中的 *兩個* router
from marketplace.routers.proposal_router import (
    router as proposal_main_router,
    job_proposal_router
)
from marketplace.routers.appointment_router import (
    router as appointment_main_router,
    slot_router as appointment_slot_router
)


# 設定基礎日誌
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__) # 建立一個 logger 實例


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.CREATE_TABLES:
        logger.info("Creating database tables")
        await init_models()
    yield
    # 關閉所有通知連線
    await app.state.notification_manager.close_all()


def create_app() -> FastAPI:
    app = FastAPI(title="Freelancer Marketplace", lifespan=lifespan)

    # 通知連線管理器 (整個 process 共用一個，透過 Depends 注入)
    app.state.notification_manager = ConnectionManager(max_pending=settings.NOTIFICATION_QUEUE_SIZE)

    # --- 設定 CORS (跨來源資源共用) ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"], # 允許所有 HTTP 方法
        allow_headers=["*"], # 允許所有 HTTP 標頭
    )

    # --- 根路徑 ---
    @app.get("/")
    def read_root():
        return {"status": "success", "message": "Backend is running!"}

    # --- 載入 API 路由 ---
    app.include_router(auth_router.router)
    app.include_router(user_router.router)
    app.include_router(freelancer_router.router)
    app.include_router(profile_router.router)
    app.include_router(service_router.router)
    app.include_router(review_router.router)
    app.include_router(appointment_main_router)
    app.include_router(appointment_slot_router)
    app.include_router(job_router.router)
    app.include_router(job_proposal_router)
    app.include_router(proposal_main_router)
    app.include_router(message_router.router)
    app.include_router(notification_router.router)

    return app


app = create_app()
