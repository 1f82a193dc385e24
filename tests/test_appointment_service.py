from datetime import date, datetime

import pytest
from fastapi import HTTPException

from marketplace.models.appointment import Appointment, AppointmentStatusEnum
from marketplace.models.service import Service
from marketplace.models.user import UserTypeEnum
from marketplace.schemas.appointment_schema import AppointmentCreate
from marketplace.services.appointment_service import AppointmentService

from conftest import FakeWebSocket

DAY = date(2026, 10, 20)


def at(hour, minute=0, day=20):
    return datetime(2026, 10, day, hour, minute)


@pytest.fixture
async def owner_and_service(db, make_freelancer):
    owner, profile = await make_freelancer("fiona", name="Fiona")
    offering = Service(profile_id=profile.profile_id, title="Portrait session", description="1h shoot", price=100)
    db.add(offering)
    await db.commit()
    await db.refresh(offering)
    return owner, offering


@pytest.fixture
async def client_user(make_user):
    return await make_user("carol", UserTypeEnum.client, name="Carol")


def booking(service_id, start, end):
    return AppointmentCreate(service_id=service_id, appointment_date=start, end_time=end)


async def test_booked_slot_disappears_and_returns_after_cancel(db, notifier, owner_and_service, client_user):
    owner, offering = owner_and_service
    service = AppointmentService(db, notifier)

    appointment = await service.create_appointment(client_user, booking(offering.service_id, at(10), at(11)))
    appointment.status = AppointmentStatusEnum.confirmed
    await db.commit()

    slots = await service.get_available_slots(offering.service_id, DAY)
    assert len(slots) == 9
    assert at(10) not in [s["start_time"] for s in slots]

    await service.update_appointment_status(appointment.appointment_id, AppointmentStatusEnum.canceled, client_user)

    slots = await service.get_available_slots(offering.service_id, DAY)
    assert len(slots) == 10
    assert at(10) in [s["start_time"] for s in slots]


async def test_appointments_on_other_days_do_not_block(db, notifier, owner_and_service, client_user):
    _, offering = owner_and_service
    service = AppointmentService(db, notifier)
    await service.create_appointment(client_user, booking(offering.service_id, at(10, day=21), at(11, day=21)))

    assert len(await service.get_available_slots(offering.service_id, DAY)) == 10


async def test_slots_for_unknown_service_not_found(db, notifier):
    with pytest.raises(HTTPException) as exc:
        await AppointmentService(db, notifier).get_available_slots("missing", DAY)
    assert exc.value.status_code == 404


async def test_overlapping_booking_is_rejected(db, notifier, owner_and_service, client_user, make_user):
    _, offering = owner_and_service
    service = AppointmentService(db, notifier)
    await service.create_appointment(client_user, booking(offering.service_id, at(10), at(11)))

    other_client = await make_user("dan", UserTypeEnum.client)
    with pytest.raises(HTTPException) as exc:
        await service.create_appointment(other_client, booking(offering.service_id, at(10, 30), at(11, 30)))
    assert exc.value.status_code == 400

    # 端點相接不算衝突
    await service.create_appointment(other_client, booking(offering.service_id, at(11), at(12)))


async def test_cannot_book_own_service(db, notifier, owner_and_service):
    owner, offering = owner_and_service
    with pytest.raises(HTTPException) as exc:
        await AppointmentService(db, notifier).create_appointment(owner, booking(offering.service_id, at(9), at(10)))
    assert exc.value.status_code == 400


async def test_new_booking_notifies_service_owner(db, manager, notifier, owner_and_service, client_user):
    owner, offering = owner_and_service
    owner_ws = FakeWebSocket()
    manager.register(owner.user_id, owner_ws)

    await AppointmentService(db, notifier).create_appointment(client_user, booking(offering.service_id, at(14), at(15)))

    await manager.flush()
    [event] = owner_ws.sent
    assert event["type"] == "appointment"
    assert event["sender_id"] == client_user.user_id
    assert "Portrait session" in event["message"]


async def test_client_may_only_cancel(db, notifier, owner_and_service, client_user):
    _, offering = owner_and_service
    service = AppointmentService(db, notifier)
    appointment = await service.create_appointment(client_user, booking(offering.service_id, at(9), at(10)))

    with pytest.raises(HTTPException) as exc:
        await service.update_appointment_status(appointment.appointment_id, AppointmentStatusEnum.confirmed, client_user)
    assert exc.value.status_code == 403

    updated = await service.update_appointment_status(
        appointment.appointment_id, AppointmentStatusEnum.canceled, client_user
    )
    assert updated.status == AppointmentStatusEnum.canceled


async def test_owner_confirms_then_completes_and_client_is_notified(
    db, manager, notifier, owner_and_service, client_user
):
    owner, offering = owner_and_service
    service = AppointmentService(db, notifier)
    appointment = await service.create_appointment(client_user, booking(offering.service_id, at(9), at(10)))

    client_ws, owner_ws = FakeWebSocket(), FakeWebSocket()
    manager.register(client_user.user_id, client_ws)
    manager.register(owner.user_id, owner_ws)

    await service.update_appointment_status(appointment.appointment_id, AppointmentStatusEnum.confirmed, owner)
    done = await service.update_appointment_status(appointment.appointment_id, AppointmentStatusEnum.completed, owner)
    assert done.status == AppointmentStatusEnum.completed

    await manager.flush()
    assert [e["data"]["status"] for e in client_ws.sent] == ["confirmed", "completed"]
    assert owner_ws.sent == []

    # completed 為終態
    with pytest.raises(HTTPException) as exc:
        await service.update_appointment_status(appointment.appointment_id, AppointmentStatusEnum.canceled, owner)
    assert exc.value.status_code == 400


async def test_pending_cannot_jump_to_completed(db, notifier, owner_and_service, client_user):
    owner, offering = owner_and_service
    service = AppointmentService(db, notifier)
    appointment = await service.create_appointment(client_user, booking(offering.service_id, at(9), at(10)))

    with pytest.raises(HTTPException) as exc:
        await service.update_appointment_status(appointment.appointment_id, AppointmentStatusEnum.completed, owner)
    assert exc.value.status_code == 400


async def test_strangers_cannot_touch_appointment(db, notifier, owner_and_service, client_user, make_user):
    _, offering = owner_and_service
    service = AppointmentService(db, notifier)
    appointment = await service.create_appointment(client_user, booking(offering.service_id, at(9), at(10)))
    stranger = await make_user("eve", UserTypeEnum.client)

    with pytest.raises(HTTPException) as exc:
        await service.update_appointment_status(appointment.appointment_id, AppointmentStatusEnum.canceled, stranger)
    assert exc.value.status_code == 403

    with pytest.raises(HTTPException) as exc:
        await service.get_appointment(appointment.appointment_id, stranger)
    assert exc.value.status_code == 403


async def test_list_appointments_by_role(db, notifier, owner_and_service, client_user):
    owner, offering = owner_and_service
    service = AppointmentService(db, notifier)
    appointment = await service.create_appointment(client_user, booking(offering.service_id, at(9), at(10)))

    [as_client] = await service.list_my_appointments(client_user)
    [as_owner] = await service.list_my_appointments(owner)
    assert as_client.appointment_id == as_owner.appointment_id == appointment.appointment_id

    assert await service.list_my_appointments(owner, status_filter=AppointmentStatusEnum.confirmed) == []
    assert len(await service.list_service_appointments(offering.service_id, owner)) == 1
