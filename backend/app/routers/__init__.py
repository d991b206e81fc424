# API Routers
from app.routers import rooms, bookings, meals, spa, auth, admin

__all__ = ['rooms', 'bookings', 'meals', 'spa', 'auth', 'admin']
