"""autocenter-events developer CLI.

Usage:
    autocenter-events replay --category service --before old.json --after new.json
    autocenter-events tokens add TOKEN --role mecanico --username maria
    autocenter-events tokens list
    autocenter-events tokens remove TOKEN

``replay`` runs one change event through the engine against the configured
token registry. Delivery is logged instead of sent unless ``--live`` is given.
``tokens`` manages the local SQLite registry.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

from autocenter_events.config import ConfigError, EngineConfig, load_config
from autocenter_events.delivery.dry_run import LoggingPushGateway
from autocenter_events.envelope import Category, RecipientToken
from autocenter_events.logging_config import setup_logging
from autocenter_events.processor import NotificationEngine
from autocenter_events.registry.sqlite import SqliteTokenRegistry
from autocenter_events.runtime import build_gateway, build_registry, init_firebase_app


def _read_document(path: Optional[str]) -> Optional[dict[str, Any]]:
    if path is None:
        return None
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object or null")
    return data


async def _replay(args: argparse.Namespace, config: EngineConfig) -> int:
    before = _read_document(args.before)
    after = _read_document(args.after)
    if before is None and after is None:
        print("ERROR: provide --before and/or --after", file=sys.stderr)
        return 2

    app = None
    if config.registry.backend == "firestore" or (args.live and config.gateway.backend == "fcm"):
        app = init_firebase_app(config.firebase)
    registry = await build_registry(config, app)
    gateway = build_gateway(config, app) if args.live else LoggingPushGateway()
    engine = NotificationEngine.from_config(config, registry, gateway)
    try:
        result = await engine.handle_documents(args.category, before, after, args.document_id)
    finally:
        if isinstance(registry, SqliteTokenRegistry):
            await registry.close()

    summary: dict[str, Any] = {"dispatched": result is not None}
    if result is not None:
        summary.update(
            {
                "recipients": result.tokens,
                "title": result.message.title if result.message else None,
                "body": result.message.body if result.message else None,
                "success_count": result.report.success_count if result.report else 0,
                "failure_count": result.report.failure_count if result.report else 0,
                "pruned": result.pruned,
            }
        )
    print(json.dumps(summary, ensure_ascii=False))
    return 0


async def _tokens(args: argparse.Namespace, config: EngineConfig) -> int:
    registry = SqliteTokenRegistry(args.db or config.registry.sqlite_path)
    await registry.init()
    try:
        if args.tokens_command == "add":
            await registry.upsert(
                RecipientToken(token=args.token, role=args.role, username=args.username, platform=args.platform)
            )
        elif args.tokens_command == "remove":
            await registry.delete(args.token)
        else:
            for row in await registry.list_all():
                print(json.dumps(row, ensure_ascii=False))
    finally:
        await registry.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="autocenter-events", description="Work-queue push notification tools.")
    parser.add_argument("--config", help="Path to autocenter.yml")
    parser.add_argument("--log-level", help="Override AUTOCENTER_LOG_LEVEL")
    commands = parser.add_subparsers(dest="command", required=True)

    replay = commands.add_parser("replay", help="Run one change event through the engine")
    replay.add_argument("--category", required=True, choices=[c.value for c in Category])
    replay.add_argument("--before", help="JSON file with the document before the write")
    replay.add_argument("--after", help="JSON file with the document after the write")
    replay.add_argument("--document-id", help="Document id for log context")
    replay.add_argument("--live", action="store_true", help="Deliver through the configured gateway")

    tokens = commands.add_parser("tokens", help="Manage the local SQLite token registry")
    tokens.add_argument("--db", help="SQLite path (defaults to registry.sqlite_path)")
    token_commands = tokens.add_subparsers(dest="tokens_command", required=True)
    token_commands.add_parser("list", help="List registered tokens")
    add = token_commands.add_parser("add", help="Register or refresh a token")
    add.add_argument("token")
    add.add_argument("--role", required=True)
    add.add_argument("--username")
    add.add_argument("--platform", default="web_pwa")
    remove = token_commands.add_parser("remove", help="Delete a token")
    remove.add_argument("token")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(Path(args.config) if args.config else None)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    setup_logging(args.log_level or config.log_level)

    if args.command == "replay":
        return asyncio.run(_replay(args, config))
    return asyncio.run(_tokens(args, config))


if __name__ == "__main__":
    raise SystemExit(main())
