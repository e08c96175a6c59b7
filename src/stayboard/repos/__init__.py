"""
Entity repositories.

Components:
- base.py: shared load/mutate/persist/publish machinery
- tasks.py: per-identity task list (create/update/toggle/delete, search, stats)
- properties.py: listings (owner create, admin approve, filter/search)
- bookings.py: booking requests (create, confirm/reject/cancel, renter/owner views)
- validation.py: field checks applied at the repository boundary
"""

from .bookings import BookingRepository
from .properties import PropertyRepository
from .tasks import TaskRepository, TaskStats

__all__ = ["BookingRepository", "PropertyRepository", "TaskRepository", "TaskStats"]
