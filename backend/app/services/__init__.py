# Business Services
from app.services.availability_service import AvailabilityService
from app.services.duplicate_guard import DuplicateGuard
from app.services.price_service import PriceService
from app.services.booking_service import BookingService
from app.services.order_service import OrderService
from app.services.spa_service import AppointmentService
from app.services.catalog_service import CatalogService
from app.services.report_service import ReportService

__all__ = [
    'AvailabilityService', 'DuplicateGuard', 'PriceService',
    'BookingService', 'OrderService', 'AppointmentService',
    'CatalogService', 'ReportService'
]
