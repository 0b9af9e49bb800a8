"""Application entry point for the ticketscope watcher."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import re
import signal
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

import settings as settings_module
from adapters.slack_events import SlackEventSource
from adapters.slack_notifier import SlackNotifier
from client import build_jira_client, build_slack_client
from core.directory import load_projects
from core.errors import TicketscopeError
from core.event_loop import EventLoop, LoopExit
from core.matcher import build_matcher
from core.processor import MessageProcessor, ProcessingContext
from core.resolver import IssueResolver
from settings import Settings, load_settings

NAME = "TICKETSCOPE"
FONT = "tarty-1"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_FILE = "logs/ticketscope.log"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _SecretMaskingFormatter(logging.Formatter):
    """Replaces token and password values with `***` in formatted records."""

    def __init__(
        self,
        secrets: list[str],
        fmt: str = LOG_FORMAT,
        datefmt: Optional[str] = LOG_DATEFMT,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        # Longest first so a secret containing another is masked whole.
        values = sorted({secret for secret in secrets if secret}, key=len, reverse=True)
        self._pattern = re.compile("|".join(map(re.escape, values))) if values else None

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if self._pattern is None:
            return message
        return self._pattern.sub("***", message)


def _secret_values(config: dict) -> list[str]:
    """Values of the environment variables named under `logging.redact`."""

    redact = config.get("redact") or {}
    if not redact.get("enabled", True):
        return []
    names = redact.get("patterns") or settings_module.DEFAULT_REDACTED_ENV
    return [value for value in (os.getenv(name) for name in names) if value]


def _log_file_handler(file_cfg: dict) -> logging.Handler:
    path = file_cfg.get("path") or DEFAULT_LOG_FILE
    if not os.path.isabs(path):
        path = os.path.join(settings_module.PROJECT_ROOT, path)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
        backupCount=int(file_cfg.get("backup_count", 5)),
        encoding="utf-8",
    )


def _configure_logging(config: dict) -> None:
    config = config or {}
    if not config.get("enabled", True):
        return

    level = getattr(logging, str(config.get("level", "INFO")).upper(), logging.INFO)
    handlers: list[logging.Handler] = []
    if config.get("console", True):
        handlers.append(logging.StreamHandler())
    file_cfg = config.get("file") or {}
    if file_cfg.get("enabled", False):
        handlers.append(_log_file_handler(file_cfg))
    if not handlers:
        return

    formatter = _SecretMaskingFormatter(_secret_values(config))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers, force=True)
    # slack_sdk logs every envelope at DEBUG; keep it quieter than ours.
    logging.getLogger("slack_sdk").setLevel(max(level, logging.INFO))


def _install_signal_handlers(shutdown: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown.set)
        except NotImplementedError:
            # Windows event loops have no signal handler support.
            logging.getLogger(__name__).debug("Signal handler for %s unavailable", sig)


async def _serve(settings: Settings) -> LoopExit:
    logger = logging.getLogger(__name__)

    async with build_jira_client(settings) as jira:
        # Project keys are fetched once; new projects need a restart.
        matcher = build_matcher(await load_projects(jira))
        logger.info("Reference pattern: %s", matcher.pattern)

        socket_client = build_slack_client(settings)
        source = SlackEventSource(socket_client)
        context = ProcessingContext(
            matcher=matcher,
            resolver=IssueResolver(jira),
            notifier=SlackNotifier(socket_client.web_client),
            render_options=settings.render_options(),
        )
        shutdown = asyncio.Event()
        _install_signal_handlers(shutdown)
        loop = EventLoop(MessageProcessor(context), source.stream, shutdown)

        try:
            await source.start()
            logger.info("Client connected. Listening for incoming messages...")
            return await loop.run()
        finally:
            await source.close()


def _run(config_path: Optional[str]) -> None:
    _print_banner()
    settings = load_settings(config_path)
    _configure_logging(settings.logging)
    logger = logging.getLogger(__name__)

    logger.info("Starting ticketscope")
    exit_reason = asyncio.run(_serve(settings))
    logger.info("Event loop stopped: %s", exit_reason.value)
    if exit_reason is LoopExit.AUTH_INVALIDATED:
        raise SystemExit(1)


async def _list_projects(settings: Settings) -> None:
    async with build_jira_client(settings) as jira:
        keys = await load_projects(jira)
    matcher = build_matcher(keys)
    for index, key in enumerate(keys, start=1):
        print(f"{index}. {key}")
    print(f"Pattern: {matcher.pattern or '(matches nothing)'}")


def _projects(config_path: Optional[str]) -> None:
    _print_banner()
    settings = load_settings(config_path, require_slack=False)
    _configure_logging(settings.logging)
    asyncio.run(_list_projects(settings))


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="ticketscope")
    parser.add_argument("--config", help="Path to a JSON config file")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the watcher")
    subparsers.add_parser(
        "projects",
        help="List the tracker project keys and the reference pattern built from them.",
    )

    args = parser.parse_args(argv)
    try:
        if args.command == "projects":
            _projects(args.config)
            return
        _run(args.config)
    except TicketscopeError as exc:
        logging.getLogger(__name__).error("%s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
