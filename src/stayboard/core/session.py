# src/stayboard/core/session.py

"""
Session context.

Holds the current Identity (or none) and tells subscribed repositories when it
changes. Repositories receive the Session at construction; nothing reads a
module-level "current user".

Authentication is a demo check: a fixed allow-list of identities sharing one
password. A successful login/registration stores a placeholder token and the
identity record so the session survives a restart (see restore()).
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Iterable

from .errors import StorageError
from .models import Identity, Role, new_id, utcnow
from .ports import KeyValueStore, Notifier, SessionListener

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"
DEMO_TOKEN = "demo-jwt-token"


def demo_identities() -> list[Identity]:
    now = utcnow()
    return [
        Identity(id="1", email="admin@mail.com", name="Admin User", role=Role.ADMIN, created_at=now),
        Identity(
            id="2",
            email="owner@mail.com",
            name="Property Owner",
            role=Role.OWNER,
            created_at=now,
            is_approved=True,
        ),
        Identity(id="3", email="renter@mail.com", name="Property Renter", role=Role.RENTER, created_at=now),
    ]


class Session:
    def __init__(
        self,
        store: KeyValueStore,
        notifier: Notifier,
        *,
        password: str = "123456",
        login_delay: float = 1.0,
        identities: Iterable[Identity] | None = None,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._password = password
        self._login_delay = max(0.0, float(login_delay))
        self._known = list(identities) if identities is not None else demo_identities()
        self._identity: Identity | None = None
        self._listeners: list[SessionListener] = []
        self.is_loading = False

    # ---- state ----

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def role(self) -> Role | None:
        return self._identity.role if self._identity is not None else None

    def has_role(self, *roles: Role) -> bool:
        return self._identity is not None and self._identity.role in roles

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register an async listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def _set_identity(self, identity: Identity | None) -> None:
        self._identity = identity
        if not self._listeners:
            return
        results = await asyncio.gather(
            *(listener(identity) for listener in list(self._listeners)),
            return_exceptions=True,
        )
        for res in results:
            if isinstance(res, BaseException):
                logger.error("Session listener failed", exc_info=res)

    def _persist(self, identity: Identity) -> None:
        self._store.set_item(TOKEN_KEY, DEMO_TOKEN)
        self._store.set_item(USER_KEY, json.dumps(identity.to_record(), ensure_ascii=False))

    # ---- operations ----

    async def restore(self) -> Identity | None:
        """Pick up a previously stored session; drop both keys if the record is unusable."""
        token = self._store.get_item(TOKEN_KEY)
        raw = self._store.get_item(USER_KEY)
        if not token or not raw:
            return None

        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise StorageError("stored identity is not an object")
            identity = Identity.from_record(data)
        except (ValueError, StorageError):
            logger.warning("Stored session is unreadable; clearing it", exc_info=True)
            self._store.remove_item(TOKEN_KEY)
            self._store.remove_item(USER_KEY)
            return None

        logger.info("Session restored id=%s role=%s", identity.id, identity.role.value)
        await self._set_identity(identity)
        return identity

    async def login(self, email: str, password: str) -> bool:
        self.is_loading = True
        try:
            await asyncio.sleep(self._login_delay)

            needle = (email or "").strip().lower()
            found = next((u for u in self._known if u.email.lower() == needle), None)

            if found is None or password != self._password:
                logger.info("Login rejected email=%s", email)
                self._notifier.notify(
                    "Login failed",
                    "Invalid email or password. Use demo credentials.",
                    variant="destructive",
                )
                return False

            self._persist(found)
            logger.info("Login ok id=%s role=%s", found.id, found.role.value)
            self._notifier.notify("Login successful", f"Welcome back, {found.name}!")
            await self._set_identity(found)
            return True
        except Exception:
            logger.exception("Login crashed email=%s", email)
            self._notifier.notify("Login failed", "An error occurred during login", variant="destructive")
            return False
        finally:
            self.is_loading = False

    async def register(self, name: str, email: str, password: str, role: Role | str) -> bool:
        """
        Create a fresh identity and sign it in.

        No uniqueness check against existing emails; only owner and renter can
        self-register. Owners start unapproved.
        """
        try:
            parsed: Role | None = Role(role)
        except ValueError:
            parsed = None
        if parsed is None or parsed is Role.ADMIN:
            self._notifier.notify(
                "Registration failed",
                "Only owner and renter accounts can be registered",
                variant="destructive",
            )
            return False

        self.is_loading = True
        try:
            await asyncio.sleep(self._login_delay)

            identity = Identity(
                id=new_id(),
                email=email,
                name=name,
                role=parsed,
                created_at=utcnow(),
                is_approved=parsed is Role.RENTER,
            )
            self._persist(identity)
            logger.info("Registered id=%s role=%s", identity.id, parsed.value)
            self._notifier.notify(
                "Registration successful",
                "Account created! Please wait for admin approval to list properties."
                if parsed is Role.OWNER
                else "Account created successfully!",
            )
            await self._set_identity(identity)
            return True
        except Exception:
            logger.exception("Registration crashed email=%s", email)
            self._notifier.notify(
                "Registration failed", "An error occurred during registration", variant="destructive"
            )
            return False
        finally:
            self.is_loading = False

    async def logout(self) -> None:
        """Clear the session; the in-memory identity is dropped even if storage fails."""
        prev = self._identity
        try:
            self._store.remove_item(TOKEN_KEY)
            self._store.remove_item(USER_KEY)
        except Exception:
            logger.exception("Failed to clear stored session id=%s", prev.id if prev else None)
            self._notifier.notify(
                "Logout incomplete",
                "Signed out, but stored credentials could not be removed",
                variant="destructive",
            )
        else:
            logger.info("Logout id=%s", prev.id if prev else None)
            self._notifier.notify("Logged out", "You have been logged out successfully")
        await self._set_identity(None)
