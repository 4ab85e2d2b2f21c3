"""Mock payment flow.

No payment provider is contacted. ``initiate`` fabricates an intent id from the
current time and stores nothing; ``confirm`` marks the caller's order as paid
with whatever intent id it is given.
"""

import logging
import time

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ecohub.auth.dependencies import get_current_user
from ecohub.core.errors import ValidationError
from ecohub.database import get_db
from ecohub.models.order import Order
from ecohub.models.user import User

router = APIRouter(tags=['payment'])

logger = logging.getLogger(__name__)

MOCK_INTENT_PREFIX = 'pi_mock_'
PAID = 'paid'


class InitiatePaymentRequest(BaseModel):
    amount: float | None = None
    order_id: int | None = None


class ConfirmPaymentRequest(BaseModel):
    payment_intent_id: str | None = None
    order_id: int | None = None


def mock_intent_id() -> str:
    return f'{MOCK_INTENT_PREFIX}{time.time_ns() // 1_000_000}'


@router.post('/initiate')
def initiate_payment(data: InitiatePaymentRequest, current_user: User = Depends(get_current_user)):
    if not data.amount or not data.order_id:
        raise ValidationError('Amount and order ID are required')

    payment_intent = {
        'id': mock_intent_id(),
        'amount': data.amount,
        'order_id': data.order_id,
        'status': 'pending',
    }
    return {'message': 'Payment initiated', 'paymentIntent': payment_intent}


@router.post('/confirm')
def confirm_payment(
    data: ConfirmPaymentRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not data.payment_intent_id or not data.order_id:
        raise ValidationError('Payment intent ID and order ID are required')

    updated = db.query(Order).filter(
        Order.id == data.order_id,
        Order.user_id == current_user.id,
    ).update(
        {Order.status: PAID, Order.payment_intent_id: data.payment_intent_id},
        synchronize_session=False,
    )
    db.commit()

    logger.info('Confirmed payment %s for order id=%s (rows=%s)', data.payment_intent_id, data.order_id, updated)
    return {'message': 'Payment confirmed', 'status': PAID}
