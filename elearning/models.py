"""
E-Learning Application Models Registry

This module serves as the central models registry for the E-Learning application.
It imports and exposes all models from the logical submodules (courses, cart,
orders, enrollments) to ensure they are properly registered with Django's ORM system.

Architecture:
- courses/: Course catalog (price, availability, enrollment counter)
- cart/: Per-user cart
- orders/: Orders and order item price snapshots
- enrollments/: Durable course access

Author: DSP Development Team
Version: 1.0.0
"""

# Import all catalog models for registration with Django ORM
from .courses.models import *

# Import all cart models for registration with Django ORM
from .cart.models import *

# Import all order models for registration with Django ORM
from .orders.models import *

# Import all enrollment models for registration with Django ORM
from .enrollments.models import *
