# src/stayboard/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.notify import Notice, Variant
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _print_notice(notice: Notice) -> None:
    tag = "!!" if notice.variant is Variant.DESTRUCTIVE else "--"
    _print_ts(f"{tag} {notice.title}: {notice.description}")


def _prompt(state: AppState) -> str:
    who = state.session.identity
    return f"{who.email}> " if who else "guest> "


async def run_console_loop(state: AppState) -> None:
    """
    Interactive REPL over the slash-command registry.

    Input is read in a worker thread so pending loads and mutations keep
    running on the event loop while the prompt waits.
    """
    logger.info("Console connector started.")
    state.notices.set_sink(_print_notice)
    _print_ts("[CONSOLE] Type /help for commands, /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    try:
        while True:
            try:
                line = (await asyncio.to_thread(input, _prompt(state))).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not line:
                continue

            if line.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            if not line.startswith("/"):
                _print_ts("Commands start with '/'. Use /help to list them.")
                continue

            try:
                reply = await command_registry.handle(state, line, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply is not None:
                print(f"[{_ts_local()}] {reply}")
    finally:
        state.notices.set_sink(None)
        logger.info("Console connector finished.")
