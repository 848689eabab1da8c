"""
Tests for the payment gateway adapters.

The Stripe SDK is never called over the network: outbound calls are patched
with unittest.mock, inbound signatures are built the way Stripe builds them.
"""

import hashlib
import hmac
import json
import time
from decimal import Decimal
from unittest import mock

import stripe
from django.core.exceptions import ImproperlyConfigured
from django.test import TestCase, override_settings

from core.payments.exceptions import GatewayUnavailable, InvalidSignature
from core.payments.gateways import (
    CHECKOUT_COMPLETED,
    MockPaymentGateway,
    StripePaymentGateway,
    build_gateway,
    sign_payload,
)
from core.payments.gateways.stripe_gateway import to_minor_units
from core.payments.models import ExternalCustomerRecord
from elearning.orders.factory import OrderFactory
from elearning.tests.helpers import FRONTEND_URL, WEBHOOK_SECRET, add_to_cart, make_course, make_user


def checkout_event(session_id, payment_intent="pi_test_1"):
    return json.dumps(
        {
            "id": "evt_test_1",
            "object": "event",
            "type": CHECKOUT_COMPLETED,
            "data": {"object": {"id": session_id, "object": "checkout.session", "payment_intent": payment_intent}},
        }
    ).encode("utf-8")


def stripe_signature(payload, secret, timestamp=None):
    timestamp = int(timestamp or time.time())
    signed = f"{timestamp}.{payload.decode('utf-8')}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


class MockGatewayTests(TestCase):
    def setUp(self):
        self.gateway = MockPaymentGateway(frontend_url=FRONTEND_URL, webhook_secret=WEBHOOK_SECRET)

    def test_signed_signal_is_trusted(self):
        payload = checkout_event("mock_session_1")

        event = self.gateway.verify_signal(payload, sign_payload(payload, WEBHOOK_SECRET))

        self.assertTrue(event.trusted)
        self.assertEqual(event.type, CHECKOUT_COMPLETED)
        self.assertEqual(event.data["id"], "mock_session_1")

    def test_tampered_signal_is_rejected(self):
        payload = checkout_event("mock_session_1")
        signature = sign_payload(payload, WEBHOOK_SECRET)

        with self.assertRaises(InvalidSignature):
            self.gateway.verify_signal(checkout_event("mock_session_2"), signature)
        with self.assertRaises(InvalidSignature):
            self.gateway.verify_signal(payload, None)

    def test_unsigned_signal_without_secret_has_reduced_trust(self):
        gateway = MockPaymentGateway(frontend_url=FRONTEND_URL)

        event = gateway.verify_signal(checkout_event("mock_session_1"), None)

        self.assertFalse(event.trusted)

    def test_malformed_payload_is_rejected(self):
        gateway = MockPaymentGateway(frontend_url=FRONTEND_URL)

        for payload in (b"not json", b"[1, 2]", b'{"data": {}}'):
            with self.subTest(payload=payload):
                with self.assertRaises(InvalidSignature):
                    gateway.verify_signal(payload, None)

    def test_session_status(self):
        user = make_user("max")
        add_to_cart(user, make_course("SQL Basics", "30.00"))
        order = OrderFactory(self.gateway).create_order(user).order

        status = self.gateway.retrieve_session_status(order.external_session_id)

        self.assertTrue(status.paid)
        self.assertEqual(status.amount, Decimal("30.00"))
        self.assertEqual(status.payer_email, "max@test.com")
        self.assertFalse(self.gateway.retrieve_session_status("mock_session_unknown").paid)


class EnsureCustomerTests(TestCase):
    def setUp(self):
        self.user = make_user("max")

    def test_customer_is_reused(self):
        gateway = MockPaymentGateway(frontend_url=FRONTEND_URL)

        first = gateway.ensure_customer(self.user)
        second = gateway.ensure_customer(self.user)

        self.assertEqual(first, second)
        self.assertEqual(ExternalCustomerRecord.objects.filter(user=self.user).count(), 1)

    def test_customer_of_other_gateway_is_replaced(self):
        MockPaymentGateway(frontend_url=FRONTEND_URL).ensure_customer(self.user)
        gateway = StripePaymentGateway(api_key="sk_test_123", frontend_url=FRONTEND_URL)

        with mock.patch("stripe.Customer.create", return_value={"id": "cus_123"}) as create:
            customer_id = gateway.ensure_customer(self.user)
            gateway.ensure_customer(self.user)

        self.assertEqual(customer_id, "cus_123")
        create.assert_called_once()
        self.assertEqual(create.call_args.kwargs["email"], "max@test.com")
        record = ExternalCustomerRecord.objects.get(user=self.user)
        self.assertEqual((record.gateway, record.external_customer_id), ("stripe", "cus_123"))


class StripeGatewayTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user("max")
        cls.sql = make_course("SQL Basics", "29.90")

    def setUp(self):
        self.gateway = StripePaymentGateway(
            api_key="sk_test_123",
            frontend_url=FRONTEND_URL + "/",
            webhook_secret="whsec_stripe",
            api_version="2024-06-20",
            publishable_key="pk_test_123",
        )

    def _order(self):
        add_to_cart(self.user, self.sql)
        with mock.patch("stripe.Customer.create", return_value={"id": "cus_123"}), mock.patch(
            "stripe.checkout.Session.create",
            return_value={"id": "cs_test_1", "url": "https://checkout.stripe.test/cs_test_1"},
        ) as create:
            order = OrderFactory(self.gateway).create_order(self.user).order
        return order, create

    def test_minor_units(self):
        self.assertEqual(to_minor_units(Decimal("29.90")), 2990)
        self.assertEqual(to_minor_units(Decimal("0.005")), 1)

    def test_checkout_session_parameters(self):
        order, create = self._order()

        self.assertEqual(order.external_session_id, "cs_test_1")
        self.assertEqual(order.payment_url, "https://checkout.stripe.test/cs_test_1")
        params = create.call_args.kwargs
        self.assertEqual(params["mode"], "payment")
        self.assertEqual(params["customer"], "cus_123")
        self.assertEqual(params["api_key"], "sk_test_123")
        self.assertEqual(params["stripe_version"], "2024-06-20")
        self.assertEqual(params["metadata"], {"order_id": str(order.pk), "user_id": str(self.user.pk)})
        line = params["line_items"][0]
        self.assertEqual(line["price_data"]["unit_amount"], 2990)
        self.assertEqual(line["price_data"]["currency"], order.currency)
        self.assertTrue(params["success_url"].startswith(f"{FRONTEND_URL}/payment/success?"))

    def test_checkout_failure_is_unavailable(self):
        add_to_cart(self.user, self.sql)
        with mock.patch("stripe.Customer.create", return_value={"id": "cus_123"}), mock.patch(
            "stripe.checkout.Session.create", side_effect=stripe.StripeError("boom")
        ):
            with self.assertRaises(GatewayUnavailable):
                OrderFactory(self.gateway).create_order(self.user)

    def test_valid_stripe_signature(self):
        payload = checkout_event("cs_test_1")

        event = self.gateway.verify_signal(payload, stripe_signature(payload, "whsec_stripe"))

        self.assertTrue(event.trusted)
        self.assertEqual(event.data["payment_intent"], "pi_test_1")

    def test_invalid_stripe_signature(self):
        payload = checkout_event("cs_test_1")

        with self.assertRaises(InvalidSignature):
            self.gateway.verify_signal(payload, stripe_signature(payload, "whsec_other"))
        with self.assertRaises(InvalidSignature):
            self.gateway.verify_signal(payload, None)

    def test_session_status(self):
        session = {
            "id": "cs_test_1",
            "payment_status": "paid",
            "amount_total": 2990,
            "currency": "brl",
            "customer_details": {"email": "max@test.com"},
        }
        with mock.patch("stripe.checkout.Session.retrieve", return_value=session):
            status = self.gateway.retrieve_session_status("cs_test_1")

        self.assertTrue(status.paid)
        self.assertEqual(status.amount, Decimal("29.90"))
        self.assertEqual(status.currency, "brl")

    def test_session_status_failure(self):
        with mock.patch("stripe.checkout.Session.retrieve", side_effect=stripe.StripeError("boom")):
            with self.assertRaises(GatewayUnavailable):
                self.gateway.retrieve_session_status("cs_test_1")

    def test_publishable_config(self):
        self.assertEqual(self.gateway.publishable_config(), {"gateway": "stripe", "publishableKey": "pk_test_123"})


class BuildGatewayTests(TestCase):
    @override_settings(PAYMENT_GATEWAY="mock", FRONTEND_URL=FRONTEND_URL, PAYMENT_WEBHOOK_SECRET="s3cret")
    def test_mock(self):
        gateway = build_gateway()
        self.assertIsInstance(gateway, MockPaymentGateway)
        self.assertEqual(gateway.webhook_secret, "s3cret")

    @override_settings(STRIPE_SECRET_KEY="")
    def test_stripe_without_key(self):
        with self.assertRaises(ImproperlyConfigured):
            build_gateway("stripe")

    @override_settings(STRIPE_SECRET_KEY="sk_test_123")
    def test_stripe(self):
        self.assertIsInstance(build_gateway("stripe"), StripePaymentGateway)

    def test_unknown(self):
        with self.assertRaises(ImproperlyConfigured):
            build_gateway("paypal")
