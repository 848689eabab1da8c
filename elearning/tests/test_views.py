"""
API tests for orders, cart, enrollments and the administrative grant.

Routes are checked as mounted in backend/urls combined with elearning/urls.
"""

from decimal import Decimal

from rest_framework import status
from rest_framework.test import APITestCase

from core.payments.gateways import MockPaymentGateway
from elearning.enrollments.services import grant_enrollment
from elearning.models import CartItem, Course, Enrollment, Order
from elearning.orders.factory import OrderFactory

from .helpers import FRONTEND_URL, GatewayOverrideMixin, UnpaidMockGateway, add_to_cart, make_course, make_user


class OrderApiTests(GatewayOverrideMixin, APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user("max")
        cls.other = make_user("erika")
        cls.sql = make_course("SQL Basics", "30.00")
        cls.python = make_course("Python Basics", "20.00")

    def setUp(self):
        super().setUp()
        self.client.force_authenticate(self.user)

    def _create_order(self, user=None):
        user = user or self.user
        add_to_cart(user, self.sql, self.python)
        return OrderFactory(MockPaymentGateway(frontend_url=FRONTEND_URL)).create_order(user).order

    def test_requires_authentication(self):
        self.client.force_authenticate(None)
        response = self.client.get("/api/elearning/orders/")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_checkout_from_cart(self):
        add_to_cart(self.user, self.sql, self.python)

        response = self.client.post("/api/elearning/orders/", {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        body = response.json()["order"]
        self.assertEqual(Decimal(body["total_amount"]), Decimal("50.00"))
        self.assertEqual(body["status"], "pending")
        self.assertIn("/payment/mock?", body["payment_url"])
        self.assertFalse(CartItem.objects.filter(user=self.user).exists())

    def test_checkout_of_single_course(self):
        response = self.client.post("/api/elearning/orders/", {"course_ids": [self.sql.pk]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = Order.objects.get(pk=response.json()["order"]["id"])
        self.assertEqual(order.total_amount, Decimal("30.00"))

    def test_checkout_with_empty_cart(self):
        response = self.client.post("/api/elearning/orders/", {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["error_code"], "EmptyCart")
        self.assertFalse(Order.objects.exists())

    def test_checkout_of_owned_course(self):
        grant_enrollment(self.user, self.sql)

        response = self.client.post("/api/elearning/orders/", {"course_ids": [self.sql.pk]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["error_code"], "AlreadyEnrolled")

    def test_list_shows_only_own_orders(self):
        own = self._create_order()
        self._create_order(self.other)

        response = self.client.get("/api/elearning/orders/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([o["id"] for o in response.json()], [own.pk])
        self.assertEqual(len(response.json()[0]["items"]), 2)

    def test_detail_of_foreign_order(self):
        foreign = self._create_order(self.other)

        response = self.client.get(f"/api/elearning/orders/{foreign.pk}/")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_confirm_is_idempotent(self):
        order = self._create_order()

        first = self.client.post(f"/api/elearning/orders/{order.pk}/confirm/")
        second = self.client.post(f"/api/elearning/orders/{order.pk}/confirm/")

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertFalse(first.json()["already_processed"])
        self.assertEqual(len(first.json()["enrollments"]), 2)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertTrue(second.json()["already_processed"])
        self.assertEqual(Enrollment.objects.filter(user=self.user).count(), 2)
        self.assertEqual(Course.objects.get(pk=self.sql.pk).students_count, 1)

    def test_confirm_foreign_order(self):
        foreign = self._create_order(self.other)

        response = self.client.post(f"/api/elearning/orders/{foreign.pk}/confirm/")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()["error_code"], "OrderNotFound")


class UnpaidConfirmApiTests(GatewayOverrideMixin, APITestCase):
    def build_gateway(self):
        return UnpaidMockGateway(frontend_url=FRONTEND_URL)

    def test_confirm_without_payment(self):
        user = make_user("max")
        add_to_cart(user, make_course("SQL Basics", "30.00"))
        order = OrderFactory(self.gateway).create_order(user).order
        self.client.force_authenticate(user)

        response = self.client.post(f"/api/elearning/orders/{order.pk}/confirm/")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["error_code"], "PaymentNotConfirmed")
        self.assertEqual(Order.objects.get(pk=order.pk).status, Order.Status.PENDING)


class CartApiTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user("max")
        cls.sql = make_course("SQL Basics", "30.00")
        cls.python = make_course("Python Basics", "20.00")
        cls.archived = make_course("Old Course", "10.00", status=Course.Status.ARCHIVED)

    def setUp(self):
        self.client.force_authenticate(self.user)

    def test_add_and_list(self):
        response = self.client.post("/api/elearning/cart/", {"course_id": self.sql.pk}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.get("/api/elearning/cart/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([line["course"] for line in response.json()], [self.sql.pk])
        self.assertEqual(response.json()[0]["price"], "30.00")

    def test_add_twice(self):
        self.client.post("/api/elearning/cart/", {"course_id": self.sql.pk}, format="json")
        response = self.client.post("/api/elearning/cart/", {"course_id": self.sql.pk}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(CartItem.objects.filter(user=self.user).count(), 1)

    def test_add_unavailable_course(self):
        response = self.client.post("/api/elearning/cart/", {"course_id": self.archived.pk}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()["detail"], "Course not found or not available.")

        response = self.client.post("/api/elearning/cart/", {"course_id": 999999}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_add_owned_course(self):
        grant_enrollment(self.user, self.sql)

        response = self.client.post("/api/elearning/cart/", {"course_id": self.sql.pk}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_remove_line(self):
        add_to_cart(self.user, self.sql)

        response = self.client.delete(f"/api/elearning/cart/{self.sql.pk}/")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        response = self.client.delete(f"/api/elearning/cart/{self.sql.pk}/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_clear_cart(self):
        add_to_cart(self.user, self.sql, self.python)

        response = self.client.delete("/api/elearning/cart/")

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(CartItem.objects.filter(user=self.user).exists())

    def test_total_ignores_unavailable_courses(self):
        add_to_cart(self.user, self.sql, self.python, self.archived)

        response = self.client.get("/api/elearning/cart/total/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {"item_count": 2, "total": "50.00"})


class EnrollmentApiTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user("max")
        cls.admin = make_user("admin", is_staff=True)
        cls.sql = make_course("SQL Basics", "30.00")

    def test_my_enrollments(self):
        grant_enrollment(self.user, self.sql)
        self.client.force_authenticate(self.user)

        response = self.client.get("/api/elearning/enrollments/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()[0]["course_title"], "SQL Basics")

    def test_grant_requires_staff(self):
        self.client.force_authenticate(self.user)

        response = self.client.post(
            "/api/elearning/admin/grant/", {"user_id": self.user.pk, "course_id": self.sql.pk}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Enrollment.objects.exists())

    def test_grant_is_idempotent(self):
        self.client.force_authenticate(self.admin)
        payload = {"user_id": self.user.pk, "course_id": self.sql.pk}

        first = self.client.post("/api/elearning/admin/grant/", payload, format="json")
        second = self.client.post("/api/elearning/admin/grant/", payload, format="json")

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(first.json()["enrollment"]["source"], "admin_grant")
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertFalse(second.json()["created"])
        self.assertEqual(Course.objects.get(pk=self.sql.pk).students_count, 1)

    def test_grant_unknown_course(self):
        self.client.force_authenticate(self.admin)

        response = self.client.post(
            "/api/elearning/admin/grant/", {"user_id": self.user.pk, "course_id": 999999}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class EnrollmentProgressApiTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user("max")
        cls.other = make_user("erika")
        cls.sql = make_course("SQL Basics", "30.00")

    def setUp(self):
        self.enrollment, _created = grant_enrollment(self.user, self.sql)
        self.url = f"/api/elearning/enrollments/{self.sql.pk}/progress/"
        self.client.force_authenticate(self.user)

    def test_get_progress(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["progress_percentage"], 0)
        self.assertEqual(response.json()["status"], "active")

    def test_progress_of_course_without_enrollment(self):
        self.client.force_authenticate(self.other)

        get_response = self.client.get(self.url)
        put_response = self.client.put(self.url, {"progress_percentage": 10}, format="json")

        self.assertEqual(get_response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(put_response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_progress(self):
        response = self.client.put(self.url, {"progress_percentage": 40}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        enrollment = Enrollment.objects.get(pk=self.enrollment.pk)
        self.assertEqual(enrollment.progress_percentage, 40)
        self.assertEqual(enrollment.status, Enrollment.Status.ACTIVE)
        self.assertIsNone(enrollment.completed_at)

    def test_progress_out_of_range(self):
        for value in (-1, 101, "viel"):
            response = self.client.put(self.url, {"progress_percentage": value}, format="json")
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, value)

        self.assertEqual(Enrollment.objects.get(pk=self.enrollment.pk).progress_percentage, 0)

    def test_full_progress_completes_enrollment(self):
        response = self.client.put(self.url, {"progress_percentage": 100}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["status"], "completed")
        enrollment = Enrollment.objects.get(pk=self.enrollment.pk)
        self.assertEqual(enrollment.status, Enrollment.Status.COMPLETED)
        self.assertIsNotNone(enrollment.completed_at)

    def test_completion_is_kept(self):
        self.client.put(self.url, {"progress_percentage": 100}, format="json")
        completed_at = Enrollment.objects.get(pk=self.enrollment.pk).completed_at

        self.client.put(self.url, {"progress_percentage": 100}, format="json")
        self.client.put(self.url, {"progress_percentage": 80}, format="json")

        enrollment = Enrollment.objects.get(pk=self.enrollment.pk)
        self.assertEqual(enrollment.status, Enrollment.Status.COMPLETED)
        self.assertEqual(enrollment.completed_at, completed_at)
        self.assertEqual(enrollment.progress_percentage, 80)
