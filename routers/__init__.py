# routers/__init__.py
from . import auth, properties, rental_requests, bookings, tenants, notifications, maintenance

__all__ = ["auth", "properties", "rental_requests", "bookings", "tenants", "notifications", "maintenance"]
