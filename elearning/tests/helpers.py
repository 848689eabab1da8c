"""
Shared fixtures for the shop tests.
"""

from decimal import Decimal

from django.apps import apps
from django.contrib.auth.models import User

from core.payments.gateways import MockPaymentGateway, SessionStatus
from elearning.models import CartItem, Course

FRONTEND_URL = "http://frontend.test"
WEBHOOK_SECRET = "whsec_test_secret"


def make_user(username="max", **extra):
    return User.objects.create_user(
        username=username,
        password="Musterpassword",
        email=f"{username}@test.com",
        **extra,
    )


def make_course(title, price, status=Course.Status.PUBLISHED):
    return Course.objects.create(title=title, price=Decimal(price), status=status)


def add_to_cart(user, *courses):
    for course in courses:
        CartItem.objects.create(user=user, course=course)


class UnpaidMockGateway(MockPaymentGateway):
    """Mock gateway whose sessions are never paid."""

    def retrieve_session_status(self, session_id):
        return SessionStatus(session_id=session_id, paid=False)


class GatewayOverrideMixin:
    """
    Swap the process wide gateway for the duration of a test.

    Subclasses may override ``build_gateway``.
    """

    def build_gateway(self):
        return MockPaymentGateway(frontend_url=FRONTEND_URL, webhook_secret=WEBHOOK_SECRET)

    def setUp(self):
        super().setUp()
        config = apps.get_app_config("payments")
        original = config.gateway
        self.gateway = self.build_gateway()
        config.gateway = self.gateway
        self.addCleanup(setattr, config, "gateway", original)
