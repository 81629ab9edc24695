# notification service — best-effort side effects of case, appointment, and invoice changes
# a failed notification write is logged and never undoes the change it describes

import logging
from datetime import datetime, timezone
from typing import Optional

from avocatconnect.errors import PartialSideEffectFailure, StoreError
from avocatconnect.services.store import DocumentStore

logger = logging.getLogger(__name__)


def format_date_fr(value: str) -> str:
    """render an iso date the way the portal shows it (dd/mm/yyyy)"""
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).strftime("%d/%m/%Y")
    except ValueError:
        return str(value)


def case_closed_message(case: dict) -> str:
    return f"Votre affaire {case.get('case_number', '')} a été clôturée."


def appointment_status_message(appointment: dict, status: str) -> str:
    return (
        f"Votre rendez-vous du {format_date_fr(appointment.get('date', ''))} "
        f"à {appointment.get('time', '')} a été {status.lower()}."
    )


def appointment_rescheduled_message(new_date: str, new_time: str) -> str:
    return f"Votre rendez-vous a été reporté au {format_date_fr(new_date)} à {new_time}."


def invoice_created_message(invoice: dict) -> str:
    return (
        f"Nouvelle facture {invoice.get('number', '')} de {invoice.get('amount', 0):.2f}€ "
        f"pour l'affaire {invoice.get('case_number', '')}."
    )


def payment_received_message(invoice: dict) -> str:
    return (
        f"Paiement de {invoice.get('amount', 0):.2f}€ reçu pour la facture "
        f"{invoice.get('number', '')} ({invoice.get('case_number', '')})."
    )


class NotificationEmitter:
    """appends notification records for the counterpart of a state change"""

    def __init__(self, store: DocumentStore):
        self._store = store

    async def notify(self, user_id: Optional[str], message: str) -> None:
        """always best-effort: swallows store failures after logging them"""
        if not user_id:
            logger.warning(f"Notification dropped, no recipient: {message}")
            return
        doc = {
            "user_id": user_id,
            "message": message,
            "read": False,
            "date": datetime.now(timezone.utc).isoformat(),
        }
        try:
            notification_id = await self._store.create("notifications", doc)
        except StoreError as e:
            failure = PartialSideEffectFailure(f"notification for {user_id} not written: {e}")
            logger.warning(f"{failure.error_code}: {failure.message}")
            return
        logger.info(f"Notification {notification_id} sent to {user_id}")

    async def list_for_user(self, user_id: str) -> list[dict]:
        if not user_id:
            return []
        return await self._store.query("notifications", {"user_id": user_id}, sort=[("date", -1)])

    async def mark_read(self, notification_id: str, user_id: str) -> bool:
        """mark one notification read, only the recipient may do it"""
        notification = await self._store.get("notifications", notification_id)
        if notification is None or notification.get("user_id") != user_id:
            return False
        return await self._store.update("notifications", notification_id, {"read": True})

    async def mark_all_read(self, user_id: str) -> int:
        return await self._store.update_many(
            "notifications",
            {"user_id": user_id, "read": False},
            {"read": True},
        )
