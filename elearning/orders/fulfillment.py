"""
Fulfillment Engine
==================

Converts a completed payment into enrollments, exactly once per order.

Every path that completes an order ends in ``FulfillmentEngine.fulfill_order``:

- the gateway webhook (``checkout.session.completed``)
- the buyer's manual confirmation in the mock flow (``confirm_payment``)
- the administrative override (``force_fulfill``, admin action, management command)

Algorithm (one transaction)
---------------------------
1. Load the order by id or gateway session id with ``SELECT ... FOR UPDATE``.
2. Not pending → return the current state unchanged. No enrollment, no
   counter increment, no cart mutation.
3. pending → completed, stamp ``paid_at``.
4. Per order item: enroll unless an enrollment for (user, course) already
   exists (e.g. an earlier admin grant). Only a new enrollment increments
   ``Course.students_count``.
5. Delete the buyer's residual cart items for the purchased courses.

Concurrent callers for the same order are serialized by the row lock: the
first sees ``pending`` and mutates, the others see ``completed`` and return.
On backends without ``FOR UPDATE`` (SQLite) the status change is
additionally a conditional update, and the unique constraint on
(user, course) holds regardless.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from django.db import transaction
from django.utils import timezone

from core.payments.exceptions import OrderNotFound, PaymentNotConfirmed
from core.payments.gateways import PaymentGateway

from ..cart.models import CartItem
from ..enrollments.models import Enrollment
from ..enrollments.services import grant_enrollment
from .models import Order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderRef:
    """
    Reference to an order, either by primary key or by gateway session id.
    Exactly one of both is set.
    """

    order_id: Optional[int] = None
    session_id: Optional[str] = None

    def __post_init__(self):
        if (self.order_id is None) == (self.session_id is None):
            raise ValueError("OrderRef needs exactly one of order_id or session_id.")

    def lookup(self) -> dict:
        if self.order_id is not None:
            return {"pk": self.order_id}
        return {"external_session_id": self.session_id}

    def __str__(self) -> str:
        if self.order_id is not None:
            return f"order:{self.order_id}"
        return f"session:{self.session_id}"


@dataclass
class OrderOutcome:
    """
    Result of a fulfillment attempt.

    Attributes:
        order: The order in its state after the call
        transitioned: True only for the call that moved pending → completed
        enrollments_created: Enrollments inserted by this call
        enrollments_skipped: Course ids the user was already enrolled in
    """

    order: Order
    transitioned: bool
    enrollments_created: List[Enrollment] = field(default_factory=list)
    enrollments_skipped: List[int] = field(default_factory=list)

    @property
    def already_processed(self) -> bool:
        return not self.transitioned


class FulfillmentEngine:
    """
    Idempotent order completion.

    The gateway is only consulted by the entry points that must confirm a
    payment before completing (``confirm_payment``, ``force_fulfill``).
    ``fulfill_order`` itself trusts its caller.
    """

    def __init__(self, gateway: PaymentGateway):
        self.gateway = gateway

    def fulfill_order(
        self,
        ref: OrderRef,
        *,
        payment_intent_id: Optional[str] = None,
        user=None,
    ) -> OrderOutcome:
        """
        Complete the referenced order and grant its enrollments exactly once.

        Args:
            ref: Order id or gateway session id
            payment_intent_id: Gateway payment reference to store on the order
            user: Restrict the lookup to orders of this user

        Returns:
            OrderOutcome; ``already_processed`` is True for every call after the first

        Raises:
            OrderNotFound: the reference resolves to no order (of ``user``)
        """
        with transaction.atomic():
            queryset = Order.objects.select_for_update()
            if user is not None:
                queryset = queryset.filter(user=user)
            try:
                order = queryset.get(**ref.lookup())
            except Order.DoesNotExist:
                raise OrderNotFound(reference=str(ref))

            if order.status != Order.Status.PENDING:
                logger.info("Order %s is already %s, nothing to fulfil.", order.pk, order.status)
                return OrderOutcome(order=order, transitioned=False)

            now = timezone.now()
            changes = {"status": Order.Status.COMPLETED, "paid_at": now}
            if payment_intent_id:
                changes["payment_intent_id"] = payment_intent_id

            updated = Order.objects.filter(pk=order.pk, status=Order.Status.PENDING).update(**changes)
            if not updated:
                order.refresh_from_db()
                logger.info("Order %s was completed concurrently, nothing to fulfil.", order.pk)
                return OrderOutcome(order=order, transitioned=False)

            for name, value in changes.items():
                setattr(order, name, value)

            outcome = OrderOutcome(order=order, transitioned=True)
            buyer = order.user
            course_ids = []
            for item in order.items.select_related("course"):
                course_ids.append(item.course_id)
                enrollment, created = grant_enrollment(
                    buyer,
                    item.course,
                    order=order,
                    source=Enrollment.Source.ORDER,
                    started_at=now,
                )
                if created:
                    outcome.enrollments_created.append(enrollment)
                else:
                    outcome.enrollments_skipped.append(item.course_id)

            CartItem.objects.filter(user=buyer, course_id__in=course_ids).delete()

        logger.info(
            "Order %s fulfilled: %s enrollment(s) created, %s already present.",
            order.pk, len(outcome.enrollments_created), len(outcome.enrollments_skipped),
        )
        return outcome

    def confirm_payment(self, order_id: int, user) -> OrderOutcome:
        """
        Buyer-initiated "I paid" confirmation.

        The order must belong to ``user``. If it carries a gateway session and
        is still pending, the gateway must report that session as paid. The
        mock gateway reports every session it issued as paid.

        Raises:
            OrderNotFound: unknown order or order of another user
            PaymentNotConfirmed: gateway does not report the session as paid
            GatewayUnavailable: status lookup failed
        """
        order = Order.objects.filter(pk=order_id, user=user).first()
        if order is None:
            raise OrderNotFound(reference=f"order:{order_id}")

        if not order.is_pending:
            return OrderOutcome(order=order, transitioned=False)

        if order.external_session_id:
            self._require_paid(order)
        return self.fulfill_order(OrderRef(order_id=order.pk), user=user)

    def force_fulfill(self, ref: OrderRef, *, verify_payment: bool = True) -> OrderOutcome:
        """
        Administrative override.

        With ``verify_payment`` the gateway must report the session as paid
        first. Without it the order is completed unconditionally; the
        fulfillment itself is the same idempotent path.
        """
        order = Order.objects.filter(**ref.lookup()).first()
        if order is None:
            raise OrderNotFound(reference=str(ref))

        if verify_payment and order.is_pending:
            self._require_paid(order)

        logger.info("Administrative fulfillment requested for %s (verify_payment=%s).", ref, verify_payment)
        return self.fulfill_order(OrderRef(order_id=order.pk))

    def force_fulfill_session(self, session_id: str) -> OrderOutcome:
        """Admin tool: fulfil by gateway session once the gateway reports it paid."""
        return self.force_fulfill(OrderRef(session_id=session_id), verify_payment=True)

    def _require_paid(self, order: Order) -> None:
        if not order.external_session_id:
            raise PaymentNotConfirmed(details={"order_id": order.pk})

        status = self.gateway.retrieve_session_status(order.external_session_id)
        if not status.paid:
            logger.info("Gateway reports session %s of order %s as unpaid.", order.external_session_id, order.pk)
            raise PaymentNotConfirmed(details={"order_id": order.pk})
