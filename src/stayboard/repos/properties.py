# src/stayboard/repos/properties.py

"""
Property listings.

Owners add listings (unapproved), admins approve them, everyone signed in can
browse the approved ones. Role-gated mutators return Granted/Denied instead of
silently dropping the call.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from ..core.errors import AuthorizationError, ValidationError
from ..core.models import Identity, Property, PropertyFilters, PropertyType, Role, new_id, utcnow
from ..core.results import AccessResult, Denied, Granted
from .base import Repository
from .validation import validate_property_fields

logger = logging.getLogger(__name__)

PROPERTIES_KEY = "properties"

_EDITABLE = (
    "title",
    "description",
    "price",
    "location",
    "bedrooms",
    "bathrooms",
    "area",
    "type",
    "amenities",
    "images",
)


def _editable_subset(fields: Mapping[str, Any]) -> dict[str, Any]:
    ignored = sorted(set(fields) - set(_EDITABLE))
    if ignored:
        # ownership/approval lineage and timestamps are never taken from input
        logger.warning("Ignoring non-editable property fields: %s", ", ".join(ignored))
    return {k: fields[k] for k in _EDITABLE if k in fields}


_CRITERIA_KEYS = {
    "location": "location",
    "price_min": "price_min",
    "priceMin": "price_min",
    "price_max": "price_max",
    "priceMax": "price_max",
    "bedrooms": "bedrooms",
    "bathrooms": "bathrooms",
    "type": "type",
    "amenities": "amenities",
}


def _criteria_from(fields: Mapping[str, Any]) -> PropertyFilters:
    opts: dict[str, Any] = {}
    for key, value in fields.items():
        name = _CRITERIA_KEYS.get(key)
        if name is None:
            logger.warning("Ignoring unknown property filter: %s", key)
            continue
        if value is None or value == "":
            continue
        if name == "amenities":
            value = (value,) if isinstance(value, str) else tuple(value)
        opts[name] = value
    return PropertyFilters(**opts)


class PropertyRepository(Repository[Property]):
    entity = "property"
    entity_plural = "properties"

    def _storage_key(self, identity: Identity) -> str:
        return PROPERTIES_KEY

    def _decode(self, rec: dict[str, Any]) -> Property:
        return Property.from_record(rec)

    def _encode(self, item: Property) -> dict[str, Any]:
        return item.to_record()

    def _demo_items(self, identity: Identity) -> list[Property]:
        now = utcnow()
        return [
            Property(
                id="1",
                title="Modern Downtown Apartment",
                description="Beautiful 2-bedroom apartment in the heart of the city with stunning views.",
                price=2500,
                location="Downtown",
                bedrooms=2,
                bathrooms=2,
                area=1200,
                type=PropertyType.APARTMENT,
                amenities=["WiFi", "Parking", "Gym", "Pool"],
                images=["https://images.unsplash.com/photo-1522708323590-d24dbb6b0267?w=800"],
                owner_id="2",
                owner_name="Property Owner",
                is_approved=True,
                created_at=now,
                updated_at=now,
            ),
            Property(
                id="2",
                title="Cozy Suburban House",
                description="Family-friendly house with garden and quiet neighborhood.",
                price=1800,
                location="Suburbs",
                bedrooms=3,
                bathrooms=2,
                area=1800,
                type=PropertyType.HOUSE,
                amenities=["WiFi", "Parking", "Garden", "Pet-friendly"],
                images=["https://images.unsplash.com/photo-1564013799919-ab600027ffc6?w=800"],
                owner_id="2",
                owner_name="Property Owner",
                is_approved=True,
                created_at=now,
                updated_at=now,
            ),
        ]

    # ---- permissions ----

    def _authorize(self, reason: str, *roles: Role) -> Identity:
        identity = self._session.identity
        if identity is None or identity.role not in roles:
            raise AuthorizationError(reason)
        return identity

    def _authorize_manage(self, prop: Property | None, reason: str) -> None:
        identity = self._session.identity
        if identity is None:
            raise AuthorizationError("Sign in to manage listings")
        if prop is not None and identity.role is not Role.ADMIN and prop.owner_id != identity.id:
            raise AuthorizationError(reason)

    def _deny(self, title: str, reason: str) -> Denied:
        self._report_denied(title, reason)
        return Denied(reason)

    # ---- mutators ----

    async def create(self, fields: Mapping[str, Any] | None = None, **extra: Any) -> AccessResult[Property]:
        """
        Submit a new listing for review.

        Only owners may list; the listing always starts unapproved and is
        attributed to the acting identity whatever the input says.
        """
        data = _editable_subset({**(fields or {}), **extra})
        try:
            identity = self._authorize("Only property owners can add listings", Role.OWNER)
            validate_property_fields(data)
        except AuthorizationError as e:
            return self._deny("Error adding property", str(e))
        except ValidationError as e:
            return self._deny("Error adding property", e.message)

        now = utcnow()
        prop = Property(
            id=new_id(),
            title=data["title"],
            description=data.get("description", ""),
            price=data["price"],
            location=data["location"],
            bedrooms=data.get("bedrooms", 0),
            bathrooms=data.get("bathrooms", 0),
            area=data.get("area", 0.0),
            type=data["type"],
            amenities=data.get("amenities", []),
            images=data.get("images", []),
            owner_id=identity.id,
            owner_name=identity.name,
            is_approved=False,
            created_at=now,
            updated_at=now,
        )
        ok = await self._mutate(
            lambda items: [*items, prop],
            action="create",
            success=("Property added", "Your property has been submitted for approval"),
            failure=("Error adding property", "Failed to add property"),
        )
        return Granted(prop) if ok else Denied("Failed to add property")

    async def _apply(
        self,
        prop_id: str,
        changes: dict[str, Any],
        *,
        action: str,
        success: tuple[str, str],
        failure: tuple[str, str],
    ) -> AccessResult[Property | None]:
        result: list[Property] = []

        def build(items: list[Property]) -> list[Property] | None:
            if not any(p.id == prop_id for p in items):
                return None
            now = utcnow()
            out: list[Property] = []
            for p in items:
                if p.id == prop_id:
                    p = replace(p, **changes, updated_at=now)
                    result.append(p)
                out.append(p)
            return out

        committed = await self._mutate(build, action=action, success=success, failure=failure)
        if committed:
            return Granted(result[0])
        if result:
            # build ran but the write failed
            return Denied(failure[1])
        return Granted(None)

    async def update(self, prop_id: str, **fields: Any) -> AccessResult[Property | None]:
        """Edit a listing (owner or admin). Unknown ids are a no-op: Granted(None)."""
        changes = _editable_subset(fields)
        try:
            self._authorize_manage(self.get(prop_id), "Only the owner or an admin can edit this listing")
            validate_property_fields(changes, partial=True)
        except AuthorizationError as e:
            return self._deny("Error updating property", str(e))
        except ValidationError as e:
            return self._deny("Error updating property", e.message)

        return await self._apply(
            prop_id,
            changes,
            action="update",
            success=("Property updated", "Property has been updated successfully"),
            failure=("Error updating property", "Failed to update property"),
        )

    async def delete(self, prop_id: str) -> AccessResult[None]:
        try:
            self._authorize_manage(self.get(prop_id), "Only the owner or an admin can delete this listing")
        except AuthorizationError as e:
            return self._deny("Error deleting property", str(e))

        def build(items: list[Property]) -> list[Property] | None:
            if not any(p.id == prop_id for p in items):
                return None
            return [p for p in items if p.id != prop_id]

        ok = await self._mutate(
            build,
            action="delete",
            success=("Property deleted", "Property has been deleted successfully"),
            failure=("Error deleting property", "Failed to delete property"),
        )
        if not ok and self.get(prop_id) is not None:
            return Denied("Failed to delete property")
        return Granted(None)

    async def approve(self, prop_id: str) -> AccessResult[Property | None]:
        """Admin-only; idempotent."""
        try:
            self._authorize("Only admins can approve listings", Role.ADMIN)
        except AuthorizationError as e:
            return self._deny("Error approving property", str(e))
        return await self._apply(
            prop_id,
            {"is_approved": True},
            action="approve",
            success=("Property approved", "The listing is now visible to renters"),
            failure=("Error approving property", "Failed to approve property"),
        )

    # ---- derived queries ----

    def filter(
        self, criteria: PropertyFilters | Mapping[str, Any] | None = None, **kwargs: Any
    ) -> list[Property]:
        """
        Approved listings matching every supplied criterion, in insertion order.

        criteria may be a PropertyFilters, a mapping (snake_case or camelCase
        keys) or omitted in favour of keyword arguments; `{}` means no filter.
        """
        if not isinstance(criteria, PropertyFilters):
            criteria = _criteria_from({**(criteria or {}), **kwargs})
        return [p for p in self._items if p.is_approved and criteria.matches(p)]

    def search(self, term: str = "") -> list[Property]:
        needle = (term or "").strip().lower()
        return [
            p
            for p in self._items
            if p.is_approved and (not needle or needle in p.title.lower() or needle in p.location.lower())
        ]

    def pending(self) -> list[Property]:
        return [p for p in self._items if not p.is_approved]

    def owned_by(self, owner_id: str) -> list[Property]:
        return [p for p in self._items if p.owner_id == owner_id]
