"""
Checkout and Payment Exceptions

This module provides the exception classes raised by the order factory, the
fulfillment engine and the payment gateway adapters. They follow a single
hierarchy so that views can translate every checkout failure into a response
with one ``except CheckoutError`` clause.

Taxonomy:
- EmptyCart: nothing purchasable in the cart (user-correctable)
- AlreadyEnrolled: direct checkout of a course the buyer already owns
- OrderNotFound: bad order or session reference (client error)
- InvalidSignature: inbound gateway signal failed verification (reject outright)
- PaymentNotConfirmed: gateway does not report the session as paid
- GatewayUnavailable: transient upstream failure (safe to retry)

An order that has already been processed is *not* an error. The fulfillment
engine reports it through ``OrderOutcome.already_processed``.

Author: DSP Development Team
Version: 1.0.0
"""

from typing import Any, Dict, Optional


class CheckoutError(Exception):
    """
    Base exception class for all checkout and payment related errors.

    Attributes:
        message (str): Human-readable error message, safe to show to the buyer
        status_code (int): HTTP status code the API answers with
        error_code (str): Stable machine-readable identifier
        details (Dict[str, Any]): Additional error context

    Example:
        >>> try:
        ...     factory.create_order(user)
        ... except CheckoutError as e:
        ...     return Response(e.to_dict(), status=e.status_code)
    """

    default_message = "The checkout could not be completed."
    default_status_code = 400
    default_error_code = "CheckoutError"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.status_code = status_code or self.default_status_code
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class EmptyCart(CheckoutError):
    """Raised when no purchasable course remains after filtering the cart."""

    default_message = "Your cart is empty or its courses are no longer available."
    default_error_code = "EmptyCart"


class AlreadyEnrolled(CheckoutError):
    """Raised when a direct checkout targets a course the buyer already owns."""

    default_message = "You already own this course."
    default_error_code = "AlreadyEnrolled"

    def __init__(self, course_ids=None, message: Optional[str] = None) -> None:
        details = {}
        if course_ids:
            details["course_ids"] = list(course_ids)
        super().__init__(message=message, details=details)


class OrderNotFound(CheckoutError):
    """Raised when an order reference (id or gateway session) resolves to nothing."""

    default_message = "Order not found."
    default_status_code = 404
    default_error_code = "OrderNotFound"

    def __init__(self, reference: Optional[str] = None, message: Optional[str] = None) -> None:
        details = {"reference": reference} if reference else {}
        super().__init__(message=message, details=details)


class InvalidSignature(CheckoutError):
    """
    Raised when an inbound gateway signal fails verification.

    Security sensitive: callers must reject the signal before touching any
    state, and the message deliberately carries no verification internals.
    """

    default_message = "Invalid webhook signature."
    default_error_code = "InvalidSignature"


class PaymentNotConfirmed(CheckoutError):
    """Raised when the gateway does not (yet) report a session as paid."""

    default_message = "The payment has not been confirmed by the payment provider."
    default_error_code = "PaymentNotConfirmed"


class GatewayUnavailable(CheckoutError):
    """
    Raised on transport or authentication failures of the payment gateway.

    The buyer gets a generic retryable message. The original gateway error is
    chained (``raise ... from exc``) and logged by the caller.
    """

    default_message = "The payment provider is currently unavailable. Please try again."
    default_status_code = 503
    default_error_code = "GatewayUnavailable"
