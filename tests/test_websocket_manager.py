import asyncio

from marketplace.core.websocket_manager import ConnectionManager
from marketplace.schemas.notification_schema import NotificationEvent, NotificationType

from conftest import FakeWebSocket


def make_event(title="hello", **kwargs):
    return NotificationEvent(type=NotificationType.system, title=title, message="msg", **kwargs)


class BlockingWebSocket(FakeWebSocket):
    """send_text 會卡住直到 release 被設定"""

    def __init__(self):
        super().__init__()
        self.release = asyncio.Event()

    async def send_text(self, data: str):
        await self.release.wait()
        await super().send_text(data)


async def test_send_to_offline_user_returns_false(manager):
    assert manager.send("nobody", make_event()) is False


async def test_send_stamps_timestamp_and_omits_empty_fields(manager):
    ws = FakeWebSocket()
    manager.register("u1", ws)

    assert manager.send("u1", make_event(receiver_id="u1")) is True
    await manager.flush()

    assert len(ws.sent) == 1
    payload = ws.sent[0]
    assert payload["type"] == "system"
    assert payload["receiver_id"] == "u1"
    assert "timestamp" in payload
    assert "sender_id" not in payload
    assert "data" not in payload


async def test_every_connection_of_a_user_receives_the_event(manager):
    tab1, tab2, other = FakeWebSocket(), FakeWebSocket(), FakeWebSocket()
    manager.register("u1", tab1)
    manager.register("u1", tab2)
    manager.register("u2", other)

    manager.send("u1", make_event())
    await manager.flush()

    assert len(tab1.sent) == 1
    assert len(tab2.sent) == 1
    assert other.sent == []


async def test_order_is_preserved_per_connection(manager):
    ws = FakeWebSocket()
    manager.register("u1", ws)
    for i in range(5):
        manager.send("u1", make_event(title=str(i)))
    await manager.flush()
    assert [p["title"] for p in ws.sent] == ["0", "1", "2", "3", "4"]


async def test_failing_socket_is_removed_without_affecting_others(manager):
    broken, healthy = FakeWebSocket(fail=True), FakeWebSocket()
    manager.register("u1", broken)
    manager.register("u1", healthy)

    manager.send("u1", make_event())
    await manager.flush()

    assert manager.connection_count("u1") == 1
    assert len(healthy.sent) == 1

    manager.send("u1", make_event(title="second"))
    await manager.flush()
    assert [p["title"] for p in healthy.sent] == ["hello", "second"]


async def test_only_failing_socket_removes_user_entry(manager):
    manager.register("u1", FakeWebSocket(fail=True))
    manager.send("u1", make_event())
    await manager.flush()
    assert not manager.is_online("u1")
    assert "u1" not in manager.active_connections
    assert manager.send("u1", make_event()) is False


async def test_full_queue_drops_new_events():
    manager = ConnectionManager(max_pending=1)
    ws = BlockingWebSocket()
    manager.register("u1", ws)

    # writer task 尚未執行，第一則佔滿佇列
    assert manager.send("u1", make_event(title="first")) is True
    assert manager.send("u1", make_event(title="dropped")) is False

    ws.release.set()
    await manager.flush()
    assert [p["title"] for p in ws.sent] == ["first"]
    await manager.close_all()


async def test_disconnect_prunes_empty_entries(manager):
    conn1 = manager.register("u1", FakeWebSocket())
    conn2 = manager.register("u1", FakeWebSocket())

    manager.disconnect(conn1)
    assert manager.connection_count("u1") == 1
    manager.disconnect(conn2)
    assert "u1" not in manager.active_connections

    # 重複斷開不會出錯
    manager.disconnect(conn2)


async def test_broadcast_sends_to_each_user(manager):
    a, b = FakeWebSocket(), FakeWebSocket()
    manager.register("a", a)
    manager.register("b", b)

    manager.broadcast(["a", "b", "offline"], make_event())
    await manager.flush()

    assert len(a.sent) == 1
    assert len(b.sent) == 1


async def test_close_all_closes_every_socket(manager):
    ws1, ws2, ws3 = FakeWebSocket(), FakeWebSocket(), FakeWebSocket()
    manager.register("u1", ws1)
    manager.register("u1", ws2)
    manager.register("u2", ws3)

    await manager.close_all()

    assert manager.active_connections == {}
    assert [ws.close_code for ws in (ws1, ws2, ws3)] == [1001, 1001, 1001]
