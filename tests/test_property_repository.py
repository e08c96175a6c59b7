# tests/test_property_repository.py

from __future__ import annotations

import pytest

from stayboard.core.models import Property, PropertyFilters, PropertyType
from stayboard.core.results import Denied, Granted
from stayboard.core.state import AppState

from .conftest import DEMO_PASSWORD

LOFT = {
    "title": "Riverside Loft",
    "description": "Open-plan loft overlooking the river",
    "price": 2100,
    "location": "Old Town",
    "bedrooms": 1,
    "bathrooms": 1,
    "area": 850,
    "type": "apartment",
    "amenities": ["WiFi", "Elevator"],
}

COTTAGE = {
    "title": "Garden Cottage",
    "description": "Small house with a big garden",
    "price": 1400,
    "location": "Suburbs",
    "bedrooms": 3,
    "bathrooms": 2,
    "type": "house",
    "amenities": ["Garden", "Parking", "WiFi"],
}


async def _login(state: AppState, who: str) -> None:
    assert await state.session.login(f"{who}@mail.com", DEMO_PASSWORD)


async def _listed(state: AppState, *payloads: dict) -> list[Property]:
    """Create listings as the owner, approve them as admin, return them approved."""
    await _login(state, "owner")
    created = []
    for payload in payloads:
        res = await state.properties.create(payload)
        assert isinstance(res, Granted)
        created.append(res.value)

    await _login(state, "admin")
    out = []
    for prop in created:
        res = await state.properties.approve(prop.id)
        assert isinstance(res, Granted) and res.value is not None
        out.append(res.value)
    return out


@pytest.mark.asyncio
async def test_owner_listing_needs_admin_approval_before_it_is_visible(state: AppState) -> None:
    await _login(state, "owner")
    res = await state.properties.create(LOFT)

    assert isinstance(res, Granted)
    p1 = res.value
    assert p1.is_approved is False
    assert p1.owner_id == "2"
    assert p1.owner_name == "Property Owner"
    assert p1.type is PropertyType.APARTMENT
    assert state.properties.filter() == []
    assert [p.id for p in state.properties.pending()] == [p1.id]

    # a renter cannot approve
    await _login(state, "renter")
    denied = await state.properties.approve(p1.id)
    assert isinstance(denied, Denied)
    assert state.properties.get(p1.id).is_approved is False

    await _login(state, "admin")
    approved = await state.properties.approve(p1.id)
    assert isinstance(approved, Granted)
    assert approved.value is not None and approved.value.is_approved is True
    assert [p.id for p in state.properties.filter()] == [p1.id]


@pytest.mark.asyncio
async def test_approve_is_idempotent(state: AppState) -> None:
    (loft,) = await _listed(state, LOFT)

    again = await state.properties.approve(loft.id)
    assert isinstance(again, Granted)
    assert [p.id for p in state.properties.filter()] == [loft.id]
    assert state.properties.get(loft.id).is_approved is True


@pytest.mark.asyncio
async def test_approve_unknown_id_is_a_noop(state: AppState) -> None:
    await _login(state, "admin")
    res = await state.properties.approve("nope")
    assert isinstance(res, Granted) and res.value is None
    assert state.properties.list() == []


@pytest.mark.asyncio
@pytest.mark.parametrize("who", ["renter", "admin"])
async def test_only_owners_can_create(state: AppState, who: str) -> None:
    await _login(state, who)
    res = await state.properties.create(LOFT)

    assert isinstance(res, Denied)
    assert state.properties.list() == []
    assert state.store.load("properties") is None


@pytest.mark.asyncio
async def test_create_ignores_approval_and_lineage_from_input(state: AppState) -> None:
    await _login(state, "owner")
    res = await state.properties.create(LOFT, is_approved=True, owner_id="99", owner_name="Someone Else")

    assert isinstance(res, Granted)
    assert res.value.is_approved is False
    assert res.value.owner_id == "2"
    assert res.value.owner_name == "Property Owner"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "broken",
    [
        {"title": ""},
        {"price": -1},
        {"bedrooms": -2},
        {"type": "castle"},
        {"location": "   "},
    ],
)
async def test_create_rejects_invalid_fields(state: AppState, broken: dict) -> None:
    await _login(state, "owner")
    res = await state.properties.create({**LOFT, **broken})

    assert isinstance(res, Denied)
    assert state.properties.list() == []


@pytest.mark.asyncio
async def test_update_ignores_lineage_fields(state: AppState) -> None:
    await _login(state, "owner")
    created = await state.properties.create(LOFT)
    assert isinstance(created, Granted)
    original = created.value

    res = await state.properties.update(
        original.id, price=2300, owner_id="1", is_approved=True, created_at="2000-01-01T00:00:00Z"
    )

    assert isinstance(res, Granted)
    updated = state.properties.get(original.id)
    assert updated.price == 2300
    assert updated.owner_id == original.owner_id
    assert updated.is_approved is False
    assert updated.created_at == original.created_at
    assert updated.updated_at >= original.updated_at


@pytest.mark.asyncio
async def test_only_owner_or_admin_can_edit_or_delete(state: AppState) -> None:
    (loft,) = await _listed(state, LOFT)

    await _login(state, "renter")
    assert isinstance(await state.properties.update(loft.id, price=1), Denied)
    assert isinstance(await state.properties.delete(loft.id), Denied)
    assert state.properties.get(loft.id).price == loft.price

    await _login(state, "admin")
    assert isinstance(await state.properties.update(loft.id, title="Riverside Loft XL"), Granted)
    assert isinstance(await state.properties.delete(loft.id), Granted)
    assert state.properties.get(loft.id) is None


@pytest.mark.asyncio
async def test_filter_returns_approved_subset_in_order(state: AppState) -> None:
    loft, cottage = await _listed(state, LOFT, COTTAGE)

    await _login(state, "owner")
    draft = await state.properties.create({**LOFT, "title": "Unreviewed Loft"})
    assert isinstance(draft, Granted)

    assert [p.id for p in state.properties.filter()] == [loft.id, cottage.id]
    assert [p.id for p in state.properties.filter(PropertyFilters())] == [loft.id, cottage.id]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("criteria", "expected"),
    [
        ({"location": "old"}, ["Riverside Loft"]),
        ({"location": "SUBURBS"}, ["Garden Cottage"]),
        ({"price_min": 1500}, ["Riverside Loft"]),
        ({"price_max": 1500}, ["Garden Cottage"]),
        ({"price_min": 1400, "price_max": 2100}, ["Riverside Loft", "Garden Cottage"]),
        ({"bedrooms": 2}, ["Garden Cottage"]),
        ({"bathrooms": 1}, ["Riverside Loft", "Garden Cottage"]),
        ({"type": PropertyType.HOUSE}, ["Garden Cottage"]),
        ({"amenities": ("wifi",)}, ["Riverside Loft", "Garden Cottage"]),
        ({"amenities": ("WiFi", "Parking")}, ["Garden Cottage"]),
        ({"amenities": ("Pool",)}, []),
    ],
)
async def test_filter_criteria(state: AppState, criteria: dict, expected: list[str]) -> None:
    await _listed(state, LOFT, COTTAGE)
    assert [p.title for p in state.properties.filter(**criteria)] == expected


@pytest.mark.asyncio
async def test_search_matches_title_or_location(state: AppState) -> None:
    await _listed(state, LOFT, COTTAGE)

    assert [p.title for p in state.properties.search("garden")] == ["Garden Cottage"]
    assert [p.title for p in state.properties.search("old town")] == ["Riverside Loft"]
    assert len(state.properties.search("")) == 2


@pytest.mark.asyncio
async def test_owned_by_includes_unapproved(state: AppState) -> None:
    await _login(state, "owner")
    await state.properties.create(LOFT)
    await state.properties.create(COTTAGE)

    assert [p.title for p in state.properties.owned_by("2")] == ["Riverside Loft", "Garden Cottage"]
    assert state.properties.owned_by("3") == []


@pytest.mark.asyncio
async def test_properties_are_shared_between_identities(state: AppState) -> None:
    (loft,) = await _listed(state, LOFT)

    await _login(state, "renter")
    assert [p.id for p in state.properties.filter()] == [loft.id]


@pytest.mark.asyncio
async def test_signed_out_edits_are_denied(state: AppState) -> None:
    for res in (
        await state.properties.update("1", price=10),
        await state.properties.delete("1"),
        await state.properties.approve("1"),
    ):
        assert isinstance(res, Denied)
    assert (await state.properties.update("1", price=10)).reason == "Sign in to manage listings"


@pytest.mark.asyncio
async def test_filter_accepts_criteria_mappings(state: AppState) -> None:
    loft, cottage = await _listed(state, LOFT, COTTAGE)

    assert [p.id for p in state.properties.filter({})] == [loft.id, cottage.id]
    assert [p.id for p in state.properties.filter({"location": "old town"})] == [loft.id]
    assert [p.id for p in state.properties.filter({"priceMin": 1000, "priceMax": 1500})] == [cottage.id]
    assert [p.id for p in state.properties.filter({"type": "house", "amenities": ["parking"]})] == [cottage.id]
    # empty values and unknown keys impose no constraint
    assert [p.id for p in state.properties.filter({"location": "", "bedrooms": None, "sort": "price"})] == [
        loft.id,
        cottage.id,
    ]


@pytest.mark.asyncio
async def test_results_expose_ok_flag(state: AppState) -> None:
    await _login(state, "renter")
    denied = await state.properties.create(LOFT)
    assert denied.ok is False

    await _login(state, "owner")
    granted = await state.properties.create(LOFT)
    assert granted.ok is True
