# Ontology Models
from app.models.ontology import (
    Room, Booking, Meal, MealOrder, OrderItem,
    SpaService, SpaAppointment, AdminUser
)

__all__ = [
    'Room', 'Booking', 'Meal', 'MealOrder', 'OrderItem',
    'SpaService', 'SpaAppointment', 'AdminUser'
]
