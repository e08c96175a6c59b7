# tests/test_commands.py

from __future__ import annotations

import pytest

from stayboard.cli.commands import CommandRegistry, registry
from stayboard.core.state import AppState

from .conftest import DEMO_PASSWORD


@pytest.mark.asyncio
async def test_command_registry_routes_2_and_3_params(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    async def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    async def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a", aliases=["alpha"])
    reg.register("b", h3, "b")

    assert await reg.handle(state, '/a x "y z"') == "h2:x,y z"
    assert await reg.handle(state, "/ALPHA") == "h2:"
    assert await reg.handle(state, "/b", emit=notes.append) == "h3"
    assert called == {"h2": 2, "h3": 1}
    assert notes == ["note"]
    assert "/a - a" in reg.build_help()


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")
    assert "Could not parse" in (await reg.handle(state, '/a "unterminated') or "")


@pytest.mark.asyncio
async def test_login_and_task_flow(state: AppState) -> None:
    notes: list[str] = []
    assert "Not signed in" in await registry.handle(state, "/status")
    assert await registry.handle(state, "/tasks") == "Sign in to see your tasks."

    reply = await registry.handle(state, f"/login owner@mail.com {DEMO_PASSWORD}", emit=notes.append)
    assert reply == "Welcome back, Property Owner!"
    assert notes == ["Signing in..."]

    reply = await registry.handle(state, '/task add "Fix the gate" "The latch on the back gate is loose"')
    assert reply.startswith("Created task ")
    task_id = reply.removeprefix("Created task ").rstrip(".")

    assert await registry.handle(state, f"/task toggle {task_id}") == "Done."
    listing = await registry.handle(state, "/tasks completed")
    assert f"[x] {task_id}  Fix the gate" in listing
    assert await registry.handle(state, "/tasks incomplete") == "No tasks found."

    assert await registry.handle(state, '/task add "No" "short"') == "Task was not created."
    assert "Tasks: 1 total, 1 completed, 0 pending" in await registry.handle(state, "/status")

    assert await registry.handle(state, "/logout") == "Logged out."
    assert await registry.handle(state, "/logout") == "Not signed in."


@pytest.mark.asyncio
async def test_failed_login_reply(state: AppState) -> None:
    assert await registry.handle(state, "/login owner@mail.com nope") == "Login failed. Use demo credentials."
    assert "Usage" in await registry.handle(state, "/login only-one-arg")


@pytest.mark.asyncio
async def test_property_and_booking_flow(state: AppState) -> None:
    await registry.handle(state, f"/login owner@mail.com {DEMO_PASSWORD}")
    reply = await registry.handle(
        state, '/prop add "title=Harbor Studio" location=Harbor price=950 type=studio beds=1 amenities=WiFi,Heating'
    )
    assert reply.startswith("Submitted property ")
    prop_id = reply.removeprefix("Submitted property ").removesuffix(" for approval.")
    assert "(pending approval)" in await registry.handle(state, "/props mine")
    assert await registry.handle(state, "/props") == "No properties found."
    assert (await registry.handle(state, f"/prop approve {prop_id}")).startswith("Denied: ")

    await registry.handle(state, f"/login admin@mail.com {DEMO_PASSWORD}")
    assert await registry.handle(state, f"/prop approve {prop_id}") == "Done."
    assert "Harbor Studio" in await registry.handle(state, "/props location=harbor amenities=wifi")
    assert (await registry.handle(state, "/props type=castle")).startswith("Bad filter")

    await registry.handle(state, f"/login renter@mail.com {DEMO_PASSWORD}")
    assert (await registry.handle(state, "/prop add title=X location=Y price=1 type=house")).startswith("Denied: ")

    reply = await registry.handle(state, f'/book {prop_id} 2025-09-01 2025-09-05 3800 "Two guests"')
    assert reply.startswith("Booking ") and reply.endswith(" is pending.")
    booking_id = reply.split()[1]
    assert "Harbor Studio [pending]" in await registry.handle(state, "/bookings")

    await registry.handle(state, f"/login owner@mail.com {DEMO_PASSWORD}")
    assert await registry.handle(state, f"/booking confirm {booking_id}") == f"Booking {booking_id} is confirmed."
    assert await registry.handle(state, "/booking cancel missing") == "No booking missing."


@pytest.mark.asyncio
async def test_notices_collects_recent_notifications(state: AppState) -> None:
    assert await registry.handle(state, "/notices") == "No notifications."
    await registry.handle(state, f"/login renter@mail.com {DEMO_PASSWORD}")
    assert "[default] Login successful" in await registry.handle(state, "/notices")


@pytest.mark.asyncio
async def test_notices_can_be_cleared(state: AppState) -> None:
    await registry.handle(state, f"/login renter@mail.com {DEMO_PASSWORD}")
    assert await registry.handle(state, "/notices clear") == "Notifications cleared."
    assert await registry.handle(state, "/notices") == "No notifications."
