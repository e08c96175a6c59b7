# src/stayboard/core/models.py

"""
Domain records and their local-storage wire format.

Stored records use the camelCase field names of the JSON snapshots
(`createdAt`, `ownerId`, ...). Dates are ISO-8601 strings on disk and
timezone-aware `datetime` values in memory; the store itself never sees them.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from .errors import StorageError


class Role(StrEnum):
    ADMIN = "admin"
    OWNER = "owner"
    RENTER = "renter"


class TaskStatus(StrEnum):
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"

    def flipped(self) -> TaskStatus:
        return TaskStatus.INCOMPLETE if self is TaskStatus.COMPLETED else TaskStatus.COMPLETED


class PropertyType(StrEnum):
    APARTMENT = "apartment"
    HOUSE = "house"
    VILLA = "villa"
    STUDIO = "studio"


class BookingStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


# ---- ids / timestamps ----

_id_lock = threading.Lock()
_last_id = 0


def new_id() -> str:
    """Millisecond timestamp id, bumped so two calls in the same ms never collide."""
    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        _last_id = max(candidate, _last_id + 1)
        return str(_last_id)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def from_iso(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str) and raw.strip():
        try:
            value = datetime.fromisoformat(raw.strip())
        except ValueError as e:
            raise StorageError(f"bad date value: {raw!r}") from e
    else:
        raise StorageError(f"missing date value: {raw!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _require(rec: dict[str, Any], key: str) -> Any:
    if key not in rec or rec[key] is None:
        raise StorageError(f"record is missing {key!r}")
    return rec[key]


def _str_list(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [str(x) for x in raw if x is not None]


# ---- records ----


@dataclass(slots=True)
class Identity:
    id: str
    email: str
    name: str
    role: Role
    created_at: datetime
    is_approved: bool | None = None

    def to_record(self) -> dict[str, Any]:
        rec: dict[str, Any] = {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "createdAt": to_iso(self.created_at),
        }
        if self.is_approved is not None:
            rec["isApproved"] = self.is_approved
        return rec

    @classmethod
    def from_record(cls, rec: dict[str, Any]) -> Identity:
        try:
            role = Role(str(_require(rec, "role")))
        except ValueError as e:
            raise StorageError(f"unknown role: {rec.get('role')!r}") from e
        approved = rec.get("isApproved")
        return cls(
            id=str(_require(rec, "id")),
            email=str(_require(rec, "email")),
            name=str(rec.get("name") or ""),
            role=role,
            created_at=from_iso(rec.get("createdAt")),
            is_approved=None if approved is None else bool(approved),
        )


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
        }

    @classmethod
    def from_record(cls, rec: dict[str, Any]) -> Task:
        try:
            status = TaskStatus(str(rec.get("status") or TaskStatus.INCOMPLETE.value))
        except ValueError:
            status = TaskStatus.INCOMPLETE
        return cls(
            id=str(_require(rec, "id")),
            title=str(rec.get("title") or ""),
            description=str(rec.get("description") or ""),
            status=status,
            created_at=from_iso(rec.get("createdAt")),
            updated_at=from_iso(rec.get("updatedAt") or rec.get("createdAt")),
        )


@dataclass(slots=True)
class Property:
    id: str
    title: str
    description: str
    price: float
    location: str
    bedrooms: int
    bathrooms: int
    area: float
    type: PropertyType
    owner_id: str
    owner_name: str
    is_approved: bool
    created_at: datetime
    updated_at: datetime
    amenities: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "location": self.location,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "area": self.area,
            "type": self.type.value,
            "amenities": list(self.amenities),
            "images": list(self.images),
            "ownerId": self.owner_id,
            "ownerName": self.owner_name,
            "isApproved": self.is_approved,
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
        }

    @classmethod
    def from_record(cls, rec: dict[str, Any]) -> Property:
        try:
            ptype = PropertyType(str(_require(rec, "type")))
        except ValueError as e:
            raise StorageError(f"unknown property type: {rec.get('type')!r}") from e
        try:
            return cls(
                id=str(_require(rec, "id")),
                title=str(rec.get("title") or ""),
                description=str(rec.get("description") or ""),
                price=float(rec.get("price") or 0),
                location=str(rec.get("location") or ""),
                bedrooms=int(rec.get("bedrooms") or 0),
                bathrooms=int(rec.get("bathrooms") or 0),
                area=float(rec.get("area") or 0),
                type=ptype,
                amenities=_str_list(rec.get("amenities")),
                images=_str_list(rec.get("images")),
                owner_id=str(_require(rec, "ownerId")),
                owner_name=str(rec.get("ownerName") or ""),
                is_approved=bool(rec.get("isApproved", False)),
                created_at=from_iso(rec.get("createdAt")),
                updated_at=from_iso(rec.get("updatedAt") or rec.get("createdAt")),
            )
        except (TypeError, ValueError) as e:
            raise StorageError(f"bad property record id={rec.get('id')!r}") from e


@dataclass(slots=True)
class Booking:
    id: str
    property_id: str
    property_title: str
    renter_id: str
    renter_name: str
    renter_email: str
    check_in: datetime
    check_out: datetime
    total_price: float
    status: BookingStatus
    created_at: datetime
    message: str | None = None

    def to_record(self) -> dict[str, Any]:
        rec: dict[str, Any] = {
            "id": self.id,
            "propertyId": self.property_id,
            "propertyTitle": self.property_title,
            "renterId": self.renter_id,
            "renterName": self.renter_name,
            "renterEmail": self.renter_email,
            "checkIn": to_iso(self.check_in),
            "checkOut": to_iso(self.check_out),
            "totalPrice": self.total_price,
            "status": self.status.value,
            "createdAt": to_iso(self.created_at),
        }
        if self.message is not None:
            rec["message"] = self.message
        return rec

    @classmethod
    def from_record(cls, rec: dict[str, Any]) -> Booking:
        try:
            status = BookingStatus(str(rec.get("status") or BookingStatus.PENDING.value))
        except ValueError as e:
            raise StorageError(f"unknown booking status: {rec.get('status')!r}") from e
        try:
            total = float(rec.get("totalPrice") or 0)
        except (TypeError, ValueError) as e:
            raise StorageError(f"bad totalPrice in booking id={rec.get('id')!r}") from e
        message = rec.get("message")
        return cls(
            id=str(_require(rec, "id")),
            property_id=str(_require(rec, "propertyId")),
            property_title=str(rec.get("propertyTitle") or ""),
            renter_id=str(_require(rec, "renterId")),
            renter_name=str(rec.get("renterName") or ""),
            renter_email=str(rec.get("renterEmail") or ""),
            check_in=from_iso(rec.get("checkIn")),
            check_out=from_iso(rec.get("checkOut")),
            total_price=total,
            status=status,
            created_at=from_iso(rec.get("createdAt")),
            message=None if message is None else str(message),
        )


@dataclass(frozen=True, slots=True)
class PropertyFilters:
    """Search criteria; None means "no constraint"."""

    location: str | None = None
    price_min: float | None = None
    price_max: float | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    type: PropertyType | None = None
    amenities: tuple[str, ...] = ()

    def matches(self, prop: Property) -> bool:
        if self.location and self.location.lower() not in prop.location.lower():
            return False
        if self.price_min is not None and prop.price < self.price_min:
            return False
        if self.price_max is not None and prop.price > self.price_max:
            return False
        if self.bedrooms is not None and prop.bedrooms < self.bedrooms:
            return False
        if self.bathrooms is not None and prop.bathrooms < self.bathrooms:
            return False
        if self.type is not None and prop.type != self.type:
            return False
        if self.amenities:
            have = {a.lower() for a in prop.amenities}
            if any(a.lower() not in have for a in self.amenities):
                return False
        return True


