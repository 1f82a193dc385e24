# marketplace/core/websocket_manager.py

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

from fastapi import WebSocket, status
from starlette.requests import HTTPConnection

from marketplace.schemas.notification_schema import NotificationEvent

logger = logging.getLogger(__name__)


class NotificationConnection:
    """
    單一 WebSocket 連線。
    送出改走「有上限的佇列 + 背景寫出 task」，呼叫端只做 put_nowait，
    不會被慢速或已斷線的 client 卡住。
    """

    def __init__(
        self,
        user_id: str,
        websocket: WebSocket,
        max_pending: int,
        on_failure: Callable[["NotificationConnection"], None],
    ):
        self.user_id = user_id
        self.websocket = websocket
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=max_pending)
        self._on_failure = on_failure
        self._writer: Optional[asyncio.Task] = None

    def start(self) -> None:
        self._writer = asyncio.create_task(self._pump())

    def stop(self) -> None:
        if self._writer and not self._writer.done() and self._writer is not asyncio.current_task():
            self._writer.cancel()

    def offer(self, payload: str) -> bool:
        """排入一則通知；佇列已滿時直接丟棄並回傳 False"""
        try:
            self.queue.put_nowait(payload)
            return True
        except asyncio.QueueFull:
            logger.warning(f"Notification queue full for user {self.user_id}, dropping event")
            return False

    async def _pump(self) -> None:
        while True:
            payload = await self.queue.get()
            try:
                await self.websocket.send_text(payload)
            except Exception as e:
                logger.warning(f"Failed to push notification to user {self.user_id}: {e}")
                self._discard_pending()
                self._on_failure(self)
                return
            finally:
                self.queue.task_done()

    def _discard_pending(self) -> None:
        while not self.queue.empty():
            self.queue.get_nowait()
            self.queue.task_done()


# 連線管理器：維護 'user_id' -> List[NotificationConnection] 的映射
class ConnectionManager:
    """管理通知用的 WebSocket 連線：同一使用者可同時有多條連線 (多分頁 / 多裝置)。"""

    def __init__(self, max_pending: int = 100):
        # 結構: {user_id: [NotificationConnection, ...]}
        self.active_connections: Dict[str, List[NotificationConnection]] = {}
        self.max_pending = max_pending

    def register(self, user_id: str, websocket: WebSocket) -> NotificationConnection:
        """握手驗證成功後登記連線 (websocket 需已 accept)"""
        connection = NotificationConnection(
            user_id=user_id,
            websocket=websocket,
            max_pending=self.max_pending,
            on_failure=self.disconnect,
        )
        self.active_connections.setdefault(user_id, []).append(connection)
        connection.start()
        logger.info(f"User {user_id} connected to notifications. Total connections: {len(self.active_connections[user_id])}")
        return connection

    def disconnect(self, connection: NotificationConnection) -> None:
        connection.stop()
        connections = self.active_connections.get(connection.user_id)
        if not connections or connection not in connections:
            return # 可能是重複斷開
        connections.remove(connection)
        # (重要) 沒有連線的使用者要整個移除，避免留下空的 list
        if not connections:
            del self.active_connections[connection.user_id]
        logger.info(f"User {connection.user_id} disconnected from notifications. Remaining connections: {len(connections)}")

    def connection_count(self, user_id: str) -> int:
        return len(self.active_connections.get(user_id, []))

    def is_online(self, user_id: str) -> bool:
        return user_id in self.active_connections

    def send(self, user_id: str, event: NotificationEvent) -> bool:
        """
        將事件推送給使用者的所有連線 (盡力而為，最多送一次)。
        使用者不在線上時回傳 False，事件直接丟棄，不重試也不保存。
        """
        connections = self.active_connections.get(user_id)
        if not connections:
            logger.info(f"User {user_id} is offline, dropping '{event.type}' notification")
            return False

        stamped = event.model_copy(update={"timestamp": datetime.now(timezone.utc)})
        payload = stamped.model_dump_json(exclude_none=True)

        delivered = False
        # 複製一份 list，寫出失敗時 disconnect 會修改原本的 list
        for connection in list(connections):
            if connection.offer(payload):
                delivered = True
        return delivered

    def broadcast(self, user_ids: Iterable[str], event: NotificationEvent) -> None:
        """對每個 user_id 各自 send；部分使用者離線是正常情況，不回報"""
        for user_id in user_ids:
            self.send(user_id, event)

    async def flush(self) -> None:
        """等待所有已排入的通知送出 (關閉服務前或測試使用)"""
        for connections in list(self.active_connections.values()):
            for connection in list(connections):
                await connection.queue.join()

    async def close_all(self) -> None:
        """關閉服務時：停止所有寫出 task，並以 1001 (going away) 關閉 socket"""
        for connections in list(self.active_connections.values()):
            for connection in list(connections):
                self.disconnect(connection)
                try:
                    await connection.websocket.close(code=status.WS_1001_GOING_AWAY)
                except Exception as e:
                    # client 可能已先斷線
                    logger.debug(f"Socket of user {connection.user_id} already closed: {e}")


def get_notification_manager(connection: HTTPConnection) -> ConnectionManager:
    """FastAPI Dependency: 取得 app 啟動時建立的 ConnectionManager (REST 與 WebSocket 皆可用)"""
    return connection.app.state.notification_manager
