"""
E-Learning Application URL Configuration

This module defines the URL routing structure of the E-Learning checkout.
Each functional area (orders, cart, enrollments) has its own URL namespace.

URL Structure (mounted at /api/elearning/):
- orders/: Checkout, own orders and manual payment confirmation
- cart/: Per-user cart
- enrollments/: Own course access and learning progress
- admin/grant/: Administrative direct grant

JWT token endpoints live in backend/urls.py (/api/token/).

Author: DSP Development Team
Version: 1.0.0
"""

from typing import List

from django.urls import URLPattern, include, path

from .cart import views as cart_views
from .enrollments import views as enrollment_views
from .orders import views as order_views

app_name = 'elearning'

# --- Orders URL Patterns ---

orders_urlpatterns: List[URLPattern] = [
    # Checkout (POST) and own order history (GET)
    path('', order_views.OrderListCreateView.as_view(), name='list'),
    path('<int:pk>/', order_views.OrderDetailView.as_view(), name='detail'),

    # Buyer-initiated confirmation (mock flow)
    path('<int:pk>/confirm/', order_views.ConfirmOrderView.as_view(), name='confirm'),
]

# --- Cart URL Patterns ---

cart_urlpatterns: List[URLPattern] = [
    path('', cart_views.CartView.as_view(), name='cart'),
    path('total/', cart_views.CartTotalView.as_view(), name='total'),
    path('<int:course_id>/', cart_views.CartItemDeleteView.as_view(), name='item'),
]

# --- Main URL Configuration for E-Learning Application ---

urlpatterns: List[URLPattern] = [
    path('orders/', include((orders_urlpatterns, 'orders'))),
    path('cart/', include((cart_urlpatterns, 'cart'))),
    path('enrollments/', enrollment_views.MyEnrollmentsView.as_view(), name='my-enrollments'),
    path(
        'enrollments/<int:course_id>/progress/',
        enrollment_views.EnrollmentProgressView.as_view(),
        name='enrollment-progress',
    ),

    # Administration (requires staff privileges)
    path('admin/grant/', enrollment_views.AdminGrantView.as_view(), name='admin-grant'),
]
