# marketplace/routers/notification_router.py

import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.database import get_db
from marketplace.core.security import get_user_from_token
from marketplace.core.websocket_manager import ConnectionManager, get_notification_manager
from marketplace.schemas.notification_schema import WebSocketAuthIn
from marketplace.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notifications"])


@router.websocket("/ws")
async def notification_endpoint(
    websocket: WebSocket,
    db: AsyncSession = Depends(get_db),
    manager: ConnectionManager = Depends(get_notification_manager)
):
    """
    即時通知通道。
    連線後第一個訊息必須是 {"type": "auth", "token": "<JWT_TOKEN>"}，
    驗證失敗以 1008 關閉連線。
    """
    await websocket.accept()

    # 1. 握手驗證
    try:
        frame = WebSocketAuthIn.model_validate_json(await websocket.receive_text())
    except WebSocketDisconnect:
        return
    except ValidationError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Invalid auth frame")
        return

    user = await get_user_from_token(frame.token, db) if frame.type == "auth" else None
    # 連線期間不需要佔用資料庫連線
    await db.close()
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Not authorized")
        return

    # 2. 登記連線並送出連線成功通知
    connection = manager.register(user.user_id, websocket)
    NotificationService(manager).notify_connected(user.user_id)

    try:
        while True:
            # client 端送來的訊息 (e.g. ping) 不需處理
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"Unexpected error in notification socket for user {user.user_id}: {e}")
    finally:
        manager.disconnect(connection)
