# src/stayboard/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import shlex
from collections.abc import Awaitable, Callable
from typing import Any, cast

from ..core.models import Booking, Property, PropertyFilters, PropertyType, Role, Task, TaskStatus
from ..core.results import AccessResult, Denied
from ..core.state import AppState

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], Awaitable[str]]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /login, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return await h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return await h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting / parsing helpers ----


def _kv(args: list[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for a in args:
        if "=" in a:
            k, v = a.split("=", 1)
            out[k.strip().lower()] = v.strip()
    return out


def _csv(raw: str | None) -> list[str]:
    return [p.strip() for p in (raw or "").split(",") if p.strip()]


def _fmt_task(t: Task) -> str:
    mark = "x" if t.status is TaskStatus.COMPLETED else " "
    return f"[{mark}] {t.id}  {t.title} - {t.description}"


def _fmt_property(p: Property) -> str:
    flag = "" if p.is_approved else " (pending approval)"
    return (
        f"{p.id}  {p.title}{flag}\n"
        f"      {p.type.value}, {p.location}, {p.bedrooms} bd / {p.bathrooms} ba, "
        f"{p.area:g} sqft, ${p.price:,.0f} - by {p.owner_name}"
    )


def _fmt_booking(b: Booking) -> str:
    return (
        f"{b.id}  {b.property_title} [{b.status.value}] "
        f"{b.check_in.date()} -> {b.check_out.date()} ${b.total_price:,.2f} ({b.renter_name})"
    )


def _denied(result: AccessResult[Any]) -> str | None:
    if not result.ok:
        return f"Denied: {cast(Denied, result).reason}"
    return None


# ---- session ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str]) -> str:
    who = state.session.identity
    if who is None:
        return "Not signed in. Demo accounts: admin@mail.com, owner@mail.com, renter@mail.com."
    stats = state.tasks.stats()
    return (
        "Status:\n"
        f"  Signed in as: {who.name} <{who.email}> ({who.role.value})\n"
        f"  Tasks: {stats.total} total, {stats.completed} completed, {stats.incomplete} pending\n"
        f"  Properties: {len(state.properties.list())} ({len(state.properties.pending())} awaiting approval)\n"
        f"  Bookings: {len(state.bookings.list())}"
    )


async def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) != 2:
        return "Usage: /login <email> <password>"
    if emit:
        with contextlib.suppress(Exception):
            emit("Signing in...")
    ok = await state.session.login(args[0], args[1])
    if not ok:
        return "Login failed. Use demo credentials."
    who = state.session.identity
    return f"Welcome back, {who.name}!" if who else "Signed in."


async def cmd_register(state: AppState, args: list[str]) -> str:
    """/register <owner|renter> <name> <email> <password>"""
    if len(args) != 4:
        return 'Usage: /register <owner|renter> "<name>" <email> <password>'
    role, name, email, password = args
    ok = await state.session.register(name, email, password, role.lower())
    return "Account created." if ok else "Registration failed."


async def cmd_logout(state: AppState, args: list[str]) -> str:
    if state.session.identity is None:
        return "Not signed in."
    await state.session.logout()
    return "Logged out."


async def cmd_notices(state: AppState, args: list[str]) -> str:
    """/notices [clear]"""
    if args and args[0].lower() == "clear":
        state.notices.clear()
        return "Notifications cleared."
    items = state.notices.recent(10)
    if not items:
        return "No notifications."
    return "\n".join(f"[{n.variant.value}] {n.title}: {n.description}" for n in items)


# ---- tasks ----


async def cmd_tasks(state: AppState, args: list[str]) -> str:
    """
    /tasks                     -> all tasks
    /tasks completed|incomplete -> status filter
    /tasks all <words>         -> search title/description
    """
    if state.session.identity is None:
        return "Sign in to see your tasks."
    status: str | None = None
    words = list(args)
    if words and words[0].lower() in ("all", "completed", "incomplete"):
        first = words.pop(0).lower()
        status = None if first == "all" else first
    found = state.tasks.search(" ".join(words), status)
    if not found:
        return "No tasks found." if (words or status) else "No tasks yet. Create one with /task add."
    return "\n".join(_fmt_task(t) for t in found)


async def cmd_task(state: AppState, args: list[str]) -> str:
    """
    /task add "<title>" "<description>"
    /task edit <id> title=... description=...
    /task toggle <id>
    /task rm <id>
    """
    usage = (
        "Usage:\n"
        '  /task add "<title>" "<description>"\n'
        "  /task edit <id> title=... description=...\n"
        "  /task toggle <id>\n"
        "  /task rm <id>"
    )
    if not args:
        return usage
    sub, rest = args[0].lower(), args[1:]

    if sub == "add" and len(rest) == 2:
        task = await state.tasks.create(rest[0], rest[1])
        return f"Created task {task.id}." if task else "Task was not created."
    if sub == "edit" and len(rest) >= 2:
        fields = {k: v for k, v in _kv(rest[1:]).items() if k in ("title", "description")}
        if not fields:
            return usage
        await state.tasks.update(rest[0], **fields)
        return "Done."
    if sub == "toggle" and len(rest) == 1:
        await state.tasks.toggle(rest[0])
        return "Done."
    if sub in ("rm", "delete") and len(rest) == 1:
        await state.tasks.delete(rest[0])
        return "Done."
    return usage


# ---- properties ----


def _filters_from(kv: dict[str, str]) -> PropertyFilters:
    def num(key: str) -> float | None:
        raw = kv.get(key)
        return float(raw) if raw else None

    def whole(key: str) -> int | None:
        raw = kv.get(key)
        return int(raw) if raw else None

    return PropertyFilters(
        location=kv.get("location") or None,
        price_min=num("min"),
        price_max=num("max"),
        bedrooms=whole("beds"),
        bathrooms=whole("baths"),
        type=PropertyType(kv["type"]) if kv.get("type") else None,
        amenities=tuple(_csv(kv.get("amenities"))),
    )


async def cmd_props(state: AppState, args: list[str]) -> str:
    """
    /props                                  -> approved listings
    /props location=.. min=.. max=.. beds=.. baths=.. type=.. amenities=a,b
    /props pending                          -> awaiting approval
    /props mine                             -> listings you own
    """
    who = state.session.identity
    if who is None:
        return "Sign in to browse properties."

    if args and args[0].lower() == "pending":
        found = state.properties.pending()
    elif args and args[0].lower() == "mine":
        found = state.properties.owned_by(who.id)
    else:
        try:
            found = state.properties.filter(_filters_from(_kv(args)))
        except ValueError as e:
            return f"Bad filter: {e}"

    if not found:
        return "No properties found."
    return "\n".join(_fmt_property(p) for p in found)


async def cmd_prop(state: AppState, args: list[str]) -> str:
    """
    /prop add title=.. location=.. price=.. type=.. [beds=.. baths=.. area=.. amenities=a,b images=u1,u2 description=..]
    /prop edit <id> key=value ...
    /prop approve <id>
    /prop rm <id>
    """
    usage = (
        "Usage:\n"
        "  /prop add title=.. location=.. price=.. type=.. [beds=.. baths=.. area=.. amenities=a,b]\n"
        "  /prop edit <id> key=value ...\n"
        "  /prop approve <id>\n"
        "  /prop rm <id>"
    )
    if not args:
        return usage
    sub, rest = args[0].lower(), args[1:]

    def fields_from(kv: dict[str, str]) -> dict[str, Any]:
        renames = {"beds": "bedrooms", "baths": "bathrooms"}
        out: dict[str, Any] = {}
        for k, v in kv.items():
            k = renames.get(k, k)
            out[k] = _csv(v) if k in ("amenities", "images") else v
        return out

    if sub == "add":
        result = await state.properties.create(fields_from(_kv(rest)))
        return _denied(result) or f"Submitted property {result.value.id} for approval."
    if sub == "edit" and len(rest) >= 2:
        result = await state.properties.update(rest[0], **fields_from(_kv(rest[1:])))
        return _denied(result) or "Done."
    if sub == "approve" and len(rest) == 1:
        result = await state.properties.approve(rest[0])
        return _denied(result) or "Done."
    if sub in ("rm", "delete") and len(rest) == 1:
        result = await state.properties.delete(rest[0])
        return _denied(result) or "Done."
    return usage


# ---- bookings ----


async def cmd_bookings(state: AppState, args: list[str]) -> str:
    who = state.session.identity
    if who is None:
        return "Sign in to see bookings."
    if state.session.has_role(Role.RENTER):
        found = state.bookings.list_for_renter()
    else:
        found = state.bookings.list_for_owner()
    if not found:
        return "No bookings."
    return "\n".join(_fmt_booking(b) for b in found)


async def cmd_book(state: AppState, args: list[str]) -> str:
    """/book <property_id> <check_in> <check_out> <total_price> ["message"]"""
    if len(args) not in (4, 5):
        return 'Usage: /book <property_id> <YYYY-MM-DD> <YYYY-MM-DD> <total_price> ["message"]'
    fields: dict[str, Any] = {
        "property_id": args[0],
        "check_in": args[1],
        "check_out": args[2],
        "total_price": args[3],
    }
    if len(args) == 5:
        fields["message"] = args[4]
    result = await state.bookings.create(fields)
    return _denied(result) or f"Booking {result.value.id} is pending."


async def cmd_booking(state: AppState, args: list[str]) -> str:
    """/booking confirm|reject|cancel <id>"""
    if len(args) != 2:
        return "Usage: /booking confirm|reject|cancel <id>"
    action, booking_id = args[0].lower(), args[1]
    if action == "confirm":
        await state.bookings.set_status(booking_id, "confirmed")
    elif action == "reject":
        await state.bookings.set_status(booking_id, "rejected")
    elif action == "cancel":
        await state.bookings.cancel(booking_id)
    else:
        return "Usage: /booking confirm|reject|cancel <id>"
    b = state.bookings.get(booking_id)
    return f"Booking {booking_id} is {b.status.value}." if b else f"No booking {booking_id}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show the signed-in identity and counters.")
registry.register("login", cmd_login, help_text="Sign in: /login <email> <password>.")
registry.register("register", cmd_register, help_text="Create an owner or renter account.")
registry.register("logout", cmd_logout, help_text="Sign out.")
registry.register("notices", cmd_notices, help_text="Show recent notifications: /notices [clear].")
registry.register("tasks", cmd_tasks, help_text="List/search tasks: /tasks [all|completed|incomplete] [words].")
registry.register("task", cmd_task, help_text="Manage tasks: /task add | edit | toggle | rm.")
registry.register("props", cmd_props, help_text="Browse properties: /props [filters] | pending | mine.")
registry.register("prop", cmd_prop, help_text="Manage properties: /prop add | edit | approve | rm.")
registry.register("bookings", cmd_bookings, help_text="List bookings (yours as renter, all otherwise).")
registry.register("book", cmd_book, help_text="Request a booking for an approved property.")
registry.register("booking", cmd_booking, help_text="Decide on a booking: /booking confirm|reject|cancel <id>.")
