# marketplace/services/notification_service.py

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import Depends

from marketplace.core.websocket_manager import ConnectionManager, get_notification_manager
from marketplace.schemas.notification_schema import NotificationEvent, NotificationType

logger = logging.getLogger(__name__)

# 訊息預覽長度
MESSAGE_PREVIEW_LENGTH = 50

PROPOSAL_STATUS_TEXT = {
    "accepted": "接受了",
    "rejected": "拒絕了",
}

APPOINTMENT_STATUS_TEXT = {
    "confirmed": "確認了",
    "canceled": "取消了",
    "completed": "完成了",
}

JOB_STATUS_TEXT = {
    "in_progress": "開始進行",
    "completed": "已完成",
    "closed": "已關閉",
    "open": "重新開放",
}


def _preview(content: str) -> str:
    if len(content) > MESSAGE_PREVIEW_LENGTH:
        return content[:MESSAGE_PREVIEW_LENGTH] + "..."
    return content


def _value(status: Any) -> str:
    return getattr(status, "value", status)


class NotificationService:
    """
    即時通知的建構與推送。
    每個 notify_* 只負責組出事件並交給 ConnectionManager，
    回傳值代表是否有送進對方的連線 (對方離線 = False，不是錯誤)。
    """

    def __init__(self, manager: ConnectionManager):
        self.manager = manager

    def _send(
        self,
        receiver_id: str,
        type: NotificationType,
        title: str,
        message: str,
        sender_id: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> bool:
        event = NotificationEvent(
            type=type,
            title=title,
            message=message,
            sender_id=sender_id,
            receiver_id=receiver_id,
            data=data,
        )
        logger.info(f"建立通知 for User ID: {receiver_id}, Type: {type.value}, Title: {title}")
        return self.manager.send(receiver_id, event)

    def notify_new_message(self, receiver_id: str, sender_id: str, sender_name: str, content: str) -> bool:
        return self._send(
            receiver_id,
            NotificationType.message,
            title="新訊息",
            message=f"{sender_name}: {_preview(content)}",
            sender_id=sender_id,
            data={"sender_id": sender_id},
        )

    def notify_new_proposal(
        self, client_id: str, freelancer_id: str, freelancer_name: str, job_id: str, job_title: str
    ) -> bool:
        return self._send(
            client_id,
            NotificationType.proposal,
            title="新提案",
            message=f"{freelancer_name} 對「{job_title}」提出了提案",
            sender_id=freelancer_id,
            data={"job_id": job_id, "job_title": job_title, "freelancer_id": freelancer_id},
        )

    def notify_proposal_status_change(
        self, freelancer_id: str, client_name: str, job_id: str, job_title: str, status: Any
    ) -> bool:
        status = _value(status)
        status_text = PROPOSAL_STATUS_TEXT.get(status, "更新了")
        return self._send(
            freelancer_id,
            NotificationType.proposal,
            title="提案狀態更新",
            message=f"{client_name} {status_text}你對「{job_title}」的提案",
            data={"job_id": job_id, "job_title": job_title, "status": status},
        )

    def notify_new_appointment(
        self,
        freelancer_id: str,
        client_id: str,
        client_name: str,
        service_title: str,
        appointment_date: datetime,
    ) -> bool:
        when = appointment_date.strftime("%Y-%m-%d %H:%M")
        return self._send(
            freelancer_id,
            NotificationType.appointment,
            title="新預約",
            message=f"{client_name} 預約了「{service_title}」，時間 {when}",
            sender_id=client_id,
            data={"service_title": service_title, "appointment_date": appointment_date.isoformat()},
        )

    def notify_appointment_status_change(
        self, user_id: str, other_user_name: str, service_title: str, status: Any
    ) -> bool:
        status = _value(status)
        status_text = APPOINTMENT_STATUS_TEXT.get(status, "更新了")
        return self._send(
            user_id,
            NotificationType.appointment,
            title="預約狀態更新",
            message=f"{other_user_name} {status_text}「{service_title}」的預約",
            data={"service_title": service_title, "status": status},
        )

    def notify_new_review(self, freelancer_id: str, client_id: str, client_name: str, rating: int) -> bool:
        return self._send(
            freelancer_id,
            NotificationType.review,
            title="新評價",
            message=f"{client_name} 給了你 {rating} 顆星的評價",
            sender_id=client_id,
            data={"rating": rating},
        )

    def notify_payment_received(
        self, freelancer_id: str, client_name: str, amount: float, service_title: str
    ) -> bool:
        return self._send(
            freelancer_id,
            NotificationType.payment,
            title="收到付款",
            message=f"{client_name} 支付了 ${amount:.2f}，服務「{service_title}」",
            data={"amount": amount, "service_title": service_title},
        )

    def notify_job_status_change(self, freelancer_id: str, client_name: str, job_id: str, job_title: str, status: Any) -> bool:
        status = _value(status)
        status_text = JOB_STATUS_TEXT.get(status, "狀態已更新")
        return self._send(
            freelancer_id,
            NotificationType.job,
            title="案件狀態更新",
            message=f"{client_name} 的案件「{job_title}」{status_text}",
            data={"job_id": job_id, "job_title": job_title, "status": status},
        )

    def notify_connected(self, user_id: str) -> bool:
        return self._send(
            user_id,
            NotificationType.system,
            title="連線成功",
            message="你已連線到即時通知",
        )


def get_notification_service(
    manager: ConnectionManager = Depends(get_notification_manager),
) -> NotificationService:
    """FastAPI Dependency"""
    return NotificationService(manager)
