# src/stayboard/repos/bookings.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any

from ..core.errors import StorageError, ValidationError
from ..core.models import Booking, BookingStatus, Identity, from_iso, new_id, utcnow
from ..core.results import AccessResult, Denied, Granted
from .base import Repository

if TYPE_CHECKING:
    from .properties import PropertyRepository

logger = logging.getLogger(__name__)

BOOKINGS_KEY = "bookings"

_DECISIONS = (BookingStatus.CONFIRMED, BookingStatus.REJECTED)


def _as_datetime(name: str, raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day, tzinfo=timezone.utc)
    try:
        return from_iso(raw)
    except StorageError as e:
        raise ValidationError(name, f"{name} must be a date") from e


def _pick(fields: Mapping[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    if snake in fields:
        return fields[snake]
    return fields.get(camel, default)


class BookingRepository(Repository[Booking]):
    """
    Booking requests, one shared collection for every identity.

    When a PropertyRepository is supplied, requests against unknown or not yet
    approved listings are refused.
    """

    entity = "booking"
    entity_plural = "bookings"

    def __init__(self, *args: Any, properties: PropertyRepository | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._properties = properties

    def _storage_key(self, identity: Identity) -> str:
        return BOOKINGS_KEY

    def _decode(self, rec: dict[str, Any]) -> Booking:
        return Booking.from_record(rec)

    def _encode(self, item: Booking) -> dict[str, Any]:
        return item.to_record()

    # ---- mutators ----

    def _build_booking(self, identity: Identity, fields: Mapping[str, Any]) -> Booking:
        property_id = str(_pick(fields, "property_id", "propertyId") or "").strip()
        if not property_id:
            raise ValidationError("property_id", "property_id is required")

        property_title = _pick(fields, "property_title", "propertyTitle")
        if self._properties is not None:
            prop = self._properties.get(property_id)
            if prop is None or not prop.is_approved:
                raise ValidationError("property_id", "This property is not available for booking")
            property_title = property_title or prop.title

        check_in = _as_datetime("check_in", _pick(fields, "check_in", "checkIn"))
        check_out = _as_datetime("check_out", _pick(fields, "check_out", "checkOut"))
        if check_out <= check_in:
            raise ValidationError("check_out", "Check-out must be after check-in")

        try:
            total = float(_pick(fields, "total_price", "totalPrice", 0) or 0)
        except (TypeError, ValueError) as e:
            raise ValidationError("total_price", "total_price must be a number") from e
        if total < 0:
            raise ValidationError("total_price", "total_price cannot be negative")

        message = fields.get("message")
        return Booking(
            id=new_id(),
            property_id=property_id,
            property_title=str(property_title or ""),
            renter_id=str(_pick(fields, "renter_id", "renterId") or identity.id),
            renter_name=str(_pick(fields, "renter_name", "renterName") or identity.name),
            renter_email=str(_pick(fields, "renter_email", "renterEmail") or identity.email),
            check_in=check_in,
            check_out=check_out,
            total_price=total,
            status=BookingStatus.PENDING,
            created_at=utcnow(),
            message=None if message is None else str(message),
        )

    async def create(self, fields: Mapping[str, Any] | None = None, **extra: Any) -> AccessResult[Booking]:
        identity = self._session.identity
        if identity is None:
            reason = "Sign in to request a booking"
            self._report_denied("Error creating booking", reason)
            return Denied(reason)

        try:
            booking = self._build_booking(identity, {**(fields or {}), **extra})
        except ValidationError as e:
            self._report_denied("Error creating booking", e.message)
            return Denied(e.message)

        ok = await self._mutate(
            lambda items: [*items, booking],
            action="create",
            success=("Booking request sent", "Your booking request has been sent to the property owner"),
            failure=("Error creating booking", "Failed to create booking request"),
        )
        return Granted(booking) if ok else Denied("Failed to create booking request")

    async def _transition(self, booking_id: str, status: BookingStatus, *, title: str) -> None:
        current = self.get(booking_id)
        if current is not None and current.status is not BookingStatus.PENDING:
            self._report_denied(title, f"Booking is already {current.status.value}")
            return

        def build(items: list[Booking]) -> list[Booking] | None:
            target = next((b for b in items if b.id == booking_id), None)
            if target is None or target.status is not BookingStatus.PENDING:
                return None
            return [replace(b, status=status) if b.id == booking_id else b for b in items]

        await self._mutate(
            build,
            action=status.value,
            success=("Booking updated", f"Booking has been {status.value}"),
            failure=("Error updating booking", "Failed to update booking status"),
        )

    async def set_status(self, booking_id: str, status: BookingStatus | str) -> None:
        """
        Confirm or reject a pending request.

        Any signed-in identity may decide; ownership of the listing is not checked.
        """
        try:
            decision = BookingStatus(status)
        except ValueError:
            decision = None
        if decision not in _DECISIONS:
            self._report_denied("Error updating booking", f"Unsupported booking status {status!r}")
            return
        await self._transition(booking_id, decision, title="Error updating booking")

    async def cancel(self, booking_id: str) -> None:
        await self._transition(booking_id, BookingStatus.CANCELLED, title="Error cancelling booking")

    # ---- derived queries ----

    def list_for_renter(self) -> list[Booking]:
        identity = self._session.identity
        if identity is None:
            return []
        return [b for b in self._items if b.renter_id == identity.id]

    def list_for_owner(self) -> list[Booking]:
        # Not scoped to the owner's listings: every booking is returned.
        if self._session.identity is None:
            return []
        return list(self._items)
