# invoices router — the lawyer bills a case, the client pays it
# both steps leave a notification for the other party

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from avocatconnect.config import settings
from avocatconnect.errors import NotFound
from avocatconnect.models.invoice import (
    PAID_STATUS,
    UNPAID_STATUS,
    InvoiceCreate,
    InvoiceResponse,
    invoice_from_doc,
)
from avocatconnect.services.notification_service import (
    NotificationEmitter,
    invoice_created_message,
    payment_received_message,
)
from avocatconnect.services.store import DocumentStore
from avocatconnect.dependencies import get_current_user, get_notifier, get_store, require_role

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/invoices", tags=["invoices"])


async def _next_invoice_number(store: DocumentStore, year: int) -> str:
    count = await store.count("invoices", {"number": {"$regex": f"^INV-{year}-"}})
    return f"INV-{year}-{count + 1:03d}"


@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    """lawyer sees every invoice, clients their own. newest first."""
    query = {} if current_user.get("role") == "lawyer" else {"client_id": current_user["id"]}
    docs = await store.query("invoices", query, sort=[("date", -1)])
    return [invoice_from_doc(d) for d in docs]


@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    body: InvoiceCreate,
    current_user: dict = Depends(require_role("lawyer")),
    store: DocumentStore = Depends(get_store),
    notifier: NotificationEmitter = Depends(get_notifier),
):
    """bill a case; the client is notified"""
    case = await store.get("cases", body.case_id)
    if case is None:
        raise NotFound("Affaire non trouvée.")

    now = datetime.now(timezone.utc)
    doc = {
        "number": await _next_invoice_number(store, now.year),
        "case_id": case["id"],
        "case_number": case.get("case_number", ""),
        "client_id": case.get("client_id", ""),
        "lawyer_id": settings.LAWYER_ID or current_user["id"],
        "date": now.isoformat(),
        "amount": round(body.amount, 2),
        "status": UNPAID_STATUS,
    }
    invoice_id = await store.create("invoices", doc)
    invoice = {**doc, "id": invoice_id}
    logger.info(f"Invoice {doc['number']} created for case {doc['case_number']}")

    await notifier.notify(invoice["client_id"], invoice_created_message(invoice))
    return invoice_from_doc(invoice)


@router.post("/{invoice_id}/pay", response_model=InvoiceResponse)
async def pay_invoice(
    invoice_id: str,
    current_user: dict = Depends(require_role("client")),
    store: DocumentStore = Depends(get_store),
    notifier: NotificationEmitter = Depends(get_notifier),
):
    """client settles one of their invoices; paying twice is a no-op"""
    invoice = await store.get("invoices", invoice_id)
    if invoice is None:
        raise NotFound("Facture non trouvée.")
    if invoice.get("client_id") != current_user["id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this invoice",
        )
    if invoice.get("status") == PAID_STATUS:
        return invoice_from_doc(invoice)

    await store.update("invoices", invoice_id, {"status": PAID_STATUS})
    invoice["status"] = PAID_STATUS
    logger.info(f"Invoice {invoice.get('number')} paid by client {current_user['id']}")

    await notifier.notify(
        invoice.get("lawyer_id") or settings.LAWYER_ID,
        payment_received_message(invoice),
    )
    return invoice_from_doc(invoice)
