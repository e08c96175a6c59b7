# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from stayboard.cli.bootstrap import create_initial_state
from stayboard.core.session import Session
from stayboard.core.state import AppState
from stayboard.storage.local_store import LocalStore

from .fakes import FakeNotifier

DEMO_PASSWORD = "123456"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the repositories.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic. All simulated latencies are
    zero and demo seeding is off unless a test asks for it.
    """
    return SimpleNamespace(
        app_name="stayboard-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        storage_path=tmp_path / "local_storage.json",
        load_delay=0.0,
        mutation_delay=0.0,
        booking_load_delay=0.0,
        login_delay=0.0,
        seed_demo_data=False,
        demo_password=DEMO_PASSWORD,
    )


@pytest.fixture()
def store() -> LocalStore:
    return LocalStore()


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def session(store: LocalStore, notifier: FakeNotifier) -> Session:
    return Session(store, notifier, password=DEMO_PASSWORD, login_delay=0.0)


@pytest.fixture()
def state(settings: SimpleNamespace, store: LocalStore) -> AppState:
    """
    AppState wired through the real bootstrap.

    NOTE: the store is an in-memory LocalStore; file persistence has its own tests.
    """
    return create_initial_state(settings=settings, store=store)
