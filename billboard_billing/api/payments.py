# billboard_billing/api/payments.py

from datetime import date

from fastapi import APIRouter, Depends, Response

from billboard_billing import workflows
from billboard_billing.api.deps import customer_ref, get_repository, get_today
from billboard_billing.db.repository import Repository
from billboard_billing.engine.types import PaymentPatch
from billboard_billing.models.payments import (
    PaymentCreate,
    PaymentOut,
    PaymentUpdate,
    ReceiptOut,
)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/", response_model=ReceiptOut, status_code=201)
def create_payment(
    body: PaymentCreate,
    repo: Repository = Depends(get_repository),
    today: date = Depends(get_today),
) -> ReceiptOut:
    """
    Record a receipt against a contract, a prior debt, or an account payment.

    The response carries what the printed receipt shows: the customer's
    balance and what remains once this payment is taken off it.
    """
    payment = workflows.record_payment(
        repo,
        customer_ref(body.customer_id, body.customer_name),
        body.amount,
        body.entry_type,
        contract_number=body.contract_number,
        method=body.method,
        reference=body.reference,
        notes=body.notes,
        paid_at=body.paid_at,
        today=today,
    )
    billing = workflows.customer_billing(repo, payment.customer)
    return ReceiptOut(
        payment=PaymentOut.model_validate(payment),
        customer_balance=billing.balances.customer_balance,
        remaining_after_payment=workflows.receipt_remaining(billing, payment),
    )


@router.patch("/{payment_id}", response_model=PaymentOut)
def update_payment(
    payment_id: int,
    body: PaymentUpdate,
    repo: Repository = Depends(get_repository),
) -> PaymentOut:
    patch = PaymentPatch(**body.model_dump())
    return PaymentOut.model_validate(workflows.edit_payment(repo, payment_id, patch))


@router.delete("/{payment_id}", status_code=204)
def delete_payment(payment_id: int, repo: Repository = Depends(get_repository)) -> Response:
    workflows.remove_payment(repo, payment_id)
    return Response(status_code=204)
