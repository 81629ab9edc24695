# appointments router — requests from clients, decisions from the lawyer
# an appointment lives in its own collection and as a copy inside its case.
# the two are written one after the other without a transaction.

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from avocatconnect.errors import NotFound
from avocatconnect.models.appointment import (
    NOTIFIED_STATUSES,
    PENDING_STATUS,
    RESCHEDULED_STATUS,
    AppointmentRequest,
    AppointmentReschedule,
    AppointmentResponse,
    AppointmentStatusUpdate,
    appointment_from_doc,
)
from avocatconnect.services.notification_service import (
    NotificationEmitter,
    appointment_rescheduled_message,
    appointment_status_message,
)
from avocatconnect.services.store import DocumentStore
from avocatconnect.dependencies import get_notifier, get_store, require_role

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])

EMBEDDED_FIELDS = ("id", "date", "time", "notes", "status")


def _embedded_copy(appointment: dict) -> dict:
    return {k: appointment.get(k, "") for k in EMBEDDED_FIELDS}


async def _sync_case_copy(store: DocumentStore, appointment: dict) -> dict | None:
    """rewrite the case's embedded copy of an appointment, returns the case.
    idempotent: replaying it with the same appointment gives the same case."""
    case = await store.get("cases", appointment.get("case_id", ""))
    if case is None:
        logger.warning(f"Case {appointment.get('case_id')} missing for appointment {appointment['id']}")
        return None

    embedded = case.get("appointments", [])
    copy = _embedded_copy(appointment)
    if any(a.get("id") == appointment["id"] for a in embedded):
        embedded = [copy if a.get("id") == appointment["id"] else a for a in embedded]
    else:
        embedded = embedded + [copy]
    await store.update("cases", case["id"], {"appointments": embedded})
    return case


@router.get("", response_model=list[AppointmentResponse])
async def list_appointments(
    current_user: dict = Depends(require_role("lawyer")),
    store: DocumentStore = Depends(get_store),
):
    """lawyer calendar"""
    docs = await store.query("appointments", sort=[("date", 1), ("time", 1)])
    return [appointment_from_doc(d) for d in docs]


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def request_appointment(
    body: AppointmentRequest,
    current_user: dict = Depends(require_role("client")),
    store: DocumentStore = Depends(get_store),
):
    """client asks for an appointment on one of their cases"""
    case = await store.get("cases", body.case_id)
    if case is None:
        raise NotFound("Affaire non trouvée")
    if case.get("client_id") != current_user["id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this case",
        )

    doc = {
        "case_id": case["id"],
        "client_id": case["client_id"],
        "client_name": case.get("client_name", ""),
        "date": body.date,
        "time": body.time,
        "notes": body.notes,
        "status": PENDING_STATUS,
    }
    appointment_id = await store.create("appointments", doc)
    appointment = {**doc, "id": appointment_id}
    await _sync_case_copy(store, appointment)

    logger.info(f"Appointment {appointment_id} requested for case {case.get('case_number')}")
    return appointment_from_doc(appointment)


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: str,
    body: AppointmentStatusUpdate,
    current_user: dict = Depends(require_role("lawyer")),
    store: DocumentStore = Depends(get_store),
    notifier: NotificationEmitter = Depends(get_notifier),
):
    """confirm or cancel; the client is told about either"""
    if not await store.update("appointments", appointment_id, {"status": body.status}):
        raise NotFound("Appointment not found.")
    appointment = await store.get("appointments", appointment_id)
    if appointment is None:
        raise NotFound("Appointment not found.")

    await _sync_case_copy(store, appointment)
    if body.status in NOTIFIED_STATUSES:
        await notifier.notify(appointment.get("client_id"), appointment_status_message(appointment, body.status))

    logger.info(f"Appointment {appointment_id} status -> {body.status}")
    return appointment_from_doc(appointment)


@router.patch("/{appointment_id}/reschedule", response_model=AppointmentResponse)
async def reschedule_appointment(
    appointment_id: str,
    body: AppointmentReschedule,
    current_user: dict = Depends(require_role("lawyer")),
    store: DocumentStore = Depends(get_store),
    notifier: NotificationEmitter = Depends(get_notifier),
):
    """move an appointment to a new slot and mark it rescheduled"""
    changes = {"date": body.new_date, "time": body.new_time, "status": RESCHEDULED_STATUS}
    if not await store.update("appointments", appointment_id, changes):
        raise NotFound("Appointment not found.")
    appointment = await store.get("appointments", appointment_id)
    if appointment is None:
        raise NotFound("Appointment not found.")

    await _sync_case_copy(store, appointment)
    await notifier.notify(
        appointment.get("client_id"),
        appointment_rescheduled_message(body.new_date, body.new_time),
    )

    logger.info(f"Appointment {appointment_id} rescheduled to {body.new_date} {body.new_time}")
    return appointment_from_doc(appointment)
