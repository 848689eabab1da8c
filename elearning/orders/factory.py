"""
Order Factory

Turns a buyer's cart (or an explicit list of courses for the single-course
"buy now" checkout) into an immutable ``Order`` with ``OrderItem`` price
snapshots, and opens a checkout session at the payment gateway.

Everything happens in one transaction:
    1. read purchasable lines (unpublished courses are dropped)
    2. insert Order(status=pending, expires_at=now + ORDER_EXPIRATION_HOURS)
    3. insert one OrderItem per line
    4. delete the purchased CartItems
    5. ensure the gateway customer and create the checkout session
    6. store session id + payment URL on the order
A failure at any step, gateway errors included, rolls back the whole unit:
no order, cart untouched.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Iterable, List, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.payments.exceptions import AlreadyEnrolled, EmptyCart
from core.payments.gateways import PaymentGateway

from ..cart.models import CartItem
from ..courses.models import Course
from ..enrollments.models import Enrollment
from .models import Order, OrderItem

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PricedLine:
    """A course quoted at its current catalog price."""

    course: Course
    price: Decimal
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class CreatedOrder:
    """Result of ``OrderFactory.create_order``."""

    order: Order
    payment_url: str


class OrderFactory:
    """
    Builds orders from carts.

    The gateway is injected so that the same factory serves the mock and the
    Stripe flow.
    """

    def __init__(self, gateway: PaymentGateway):
        self.gateway = gateway

    def create_order(self, user, course_ids: Optional[Iterable[int]] = None) -> CreatedOrder:
        """
        Create a pending order for ``user``.

        Args:
            user: Buyer
            course_ids: Buy exactly these courses (one unit each) instead of the cart

        Returns:
            CreatedOrder with the persisted order and the gateway payment URL

        Raises:
            EmptyCart: nothing purchasable remains
            AlreadyEnrolled: a directly purchased course is already owned
            GatewayUnavailable: customer or checkout creation failed
        """
        with transaction.atomic():
            if course_ids is None:
                lines = self._lines_from_cart(user)
            else:
                lines = self._lines_from_catalog(user, course_ids)

            if not lines:
                raise EmptyCart()

            total = sum((line.line_total for line in lines), Decimal("0.00")).quantize(CENTS)

            order = Order.objects.create(
                user=user,
                total_amount=total,
                currency=settings.DEFAULT_CURRENCY,
                status=Order.Status.PENDING,
                payment_method=self.gateway.name,
                expires_at=timezone.now() + timedelta(hours=settings.ORDER_EXPIRATION_HOURS),
            )
            OrderItem.objects.bulk_create(
                [
                    OrderItem(order=order, course=line.course, price=line.price, quantity=line.quantity)
                    for line in lines
                ]
            )
            CartItem.objects.filter(
                user=user, course_id__in=[line.course.pk for line in lines]
            ).delete()

            customer_id = self.gateway.ensure_customer(user)
            session = self.gateway.create_checkout_session(order, customer_id)

            order.external_session_id = session.session_id
            order.payment_url = session.redirect_url
            order.save(update_fields=["external_session_id", "payment_url"])

        logger.info(
            "Order %s created for user %s: %s items, total %s %s (gateway=%s, session=%s).",
            order.pk, user.pk, len(lines), order.total_amount, order.currency,
            self.gateway.name, order.external_session_id,
        )
        return CreatedOrder(order=order, payment_url=order.payment_url)

    # ---------- helpers ----------

    def _lines_from_cart(self, user) -> List[PricedLine]:
        cart_items = list(CartItem.objects.select_related("course").filter(user=user))
        lines = [
            PricedLine(course=item.course, price=item.course.price, quantity=item.quantity)
            for item in cart_items
            if item.course.is_purchasable
        ]

        dropped = len(cart_items) - len(lines)
        if dropped:
            logger.info("Dropped %s unavailable cart item(s) of user %s at checkout.", dropped, user.pk)
        return lines

    def _lines_from_catalog(self, user, course_ids: Iterable[int]) -> List[PricedLine]:
        wanted = sorted(set(course_ids))
        owned = list(
            Enrollment.objects.filter(user=user, course_id__in=wanted).values_list("course_id", flat=True)
        )
        if owned:
            raise AlreadyEnrolled(course_ids=sorted(owned))

        return [
            PricedLine(course=course, price=course.price, quantity=1)
            for course in Course.purchasable().filter(pk__in=wanted).order_by("pk")
        ]
