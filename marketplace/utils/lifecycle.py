# marketplace/utils/lifecycle.py
# 案件 / 提案 / 預約 的狀態轉換規則 (純資料，不碰資料庫)
from typing import Dict, Optional, Set

from marketplace.models.job import JobStatusEnum
from marketplace.models.proposal import ProposalStatusEnum
from marketplace.models.appointment import AppointmentStatusEnum

# 案件：open -> in_progress -> completed；open -> closed
JOB_TRANSITIONS: Dict[JobStatusEnum, Set[JobStatusEnum]] = {
    JobStatusEnum.open: {JobStatusEnum.in_progress, JobStatusEnum.closed},
    JobStatusEnum.in_progress: {JobStatusEnum.completed},
    JobStatusEnum.closed: set(),
    JobStatusEnum.completed: set(),
}

# 提案：pending -> accepted / rejected
PROPOSAL_TRANSITIONS: Dict[ProposalStatusEnum, Set[ProposalStatusEnum]] = {
    ProposalStatusEnum.pending: {ProposalStatusEnum.accepted, ProposalStatusEnum.rejected},
    ProposalStatusEnum.accepted: set(),
    ProposalStatusEnum.rejected: set(),
}

# 預約：pending -> confirmed -> completed；未結束前都可以取消
APPOINTMENT_TRANSITIONS: Dict[AppointmentStatusEnum, Set[AppointmentStatusEnum]] = {
    AppointmentStatusEnum.pending: {AppointmentStatusEnum.confirmed, AppointmentStatusEnum.canceled},
    AppointmentStatusEnum.confirmed: {AppointmentStatusEnum.completed, AppointmentStatusEnum.canceled},
    AppointmentStatusEnum.canceled: set(),
    AppointmentStatusEnum.completed: set(),
}

# 各角色可以把預約改成哪些狀態
CLIENT_APPOINTMENT_STATUSES = {AppointmentStatusEnum.canceled}
FREELANCER_APPOINTMENT_STATUSES = {
    AppointmentStatusEnum.confirmed,
    AppointmentStatusEnum.canceled,
    AppointmentStatusEnum.completed,
}


def can_transition_job(current: str, new: str) -> bool:
    return JobStatusEnum(new) in JOB_TRANSITIONS[JobStatusEnum(current)]


def can_transition_proposal(current: str, new: str) -> bool:
    return ProposalStatusEnum(new) in PROPOSAL_TRANSITIONS[ProposalStatusEnum(current)]


def can_transition_appointment(current: str, new: str) -> bool:
    return AppointmentStatusEnum(new) in APPOINTMENT_TRANSITIONS[AppointmentStatusEnum(current)]


def allowed_appointment_statuses(is_client: bool, is_service_owner: bool) -> Optional[Set[AppointmentStatusEnum]]:
    """
    回傳操作者可設定的狀態；None 表示既不是預約的客戶也不是服務擁有者。
    """
    if is_client:
        return CLIENT_APPOINTMENT_STATUSES
    if is_service_owner:
        return FREELANCER_APPOINTMENT_STATUSES
    return None
