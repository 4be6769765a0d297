from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Callable

from marathon_adapter.client import MarathonClient, build_client
from marathon_adapter.config import Settings
from marathon_adapter.errors import MarathonError
from marathon_adapter.models import to_wire
from marathon_adapter.observability import request_context

EXIT_UNHEALTHY = 2


def _print_json(value: Any) -> None:
    if hasattr(value, "model_dump"):
        value = to_wire(value)
    print(json.dumps(value, indent=2, sort_keys=True))


def _list(client: MarathonClient, args: argparse.Namespace) -> int:
    _print_json(client.applications.list_applications())
    return 0


def _get(client: MarathonClient, args: argparse.Namespace) -> int:
    _print_json(client.applications.get_application(args.app_id))
    return 0


def _exists(client: MarathonClient, args: argparse.Namespace) -> int:
    _print_json({"id": args.app_id, "exists": client.applications.has_application(args.app_id)})
    return 0


def _healthy(client: MarathonClient, args: argparse.Namespace) -> int:
    healthy = client.health.is_healthy(args.app_id)
    _print_json({"id": args.app_id, "healthy": healthy})
    return 0 if healthy else EXIT_UNHEALTHY


def _versions(client: MarathonClient, args: argparse.Namespace) -> int:
    _print_json(client.versions.list_versions(args.app_id))
    return 0


def _scale(client: MarathonClient, args: argparse.Namespace) -> int:
    _print_json(client.applications.scale_application(args.app_id, args.instances, force=args.force))
    return 0


def _restart(client: MarathonClient, args: argparse.Namespace) -> int:
    _print_json(client.applications.restart_application(args.app_id, force=args.force))
    return 0


def _change_version(client: MarathonClient, args: argparse.Namespace) -> int:
    _print_json(client.versions.change_version(args.app_id, args.version))
    return 0


def _rollback(client: MarathonClient, args: argparse.Namespace) -> int:
    _print_json(client.versions.rollback(args.app_id, steps=args.steps))
    return 0


def _delete(client: MarathonClient, args: argparse.Namespace) -> int:
    _print_json({"id": args.app_id, "deleted": client.applications.delete_application(args.app_id)})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="marathon-adapter",
        description="Inspect and manage Marathon applications. Connection settings come from MARATHON_* env vars.",
    )
    parser.add_argument("--url", help="Marathon base URL (overrides MARATHON_URL)")
    commands = parser.add_subparsers(dest="command", required=True)

    def add(name: str, handler: Callable[[MarathonClient, argparse.Namespace], int], help_text: str):
        command = commands.add_parser(name, help=help_text)
        command.set_defaults(handler=handler)
        if name != "list":
            command.add_argument("app_id")
        return command

    add("list", _list, "List application ids")
    add("get", _get, "Show an application")
    add("exists", _exists, "Report whether an application exists")
    add("healthy", _healthy, "Evaluate application health (exit 2 when unhealthy)")
    add("versions", _versions, "List recorded configuration versions")
    scale = add("scale", _scale, "Change the instance count")
    scale.add_argument("instances", type=int)
    scale.add_argument("--force", action="store_true")
    restart = add("restart", _restart, "Restart all tasks")
    restart.add_argument("--force", action="store_true")
    change = add("change-version", _change_version, "Switch to a recorded version")
    change.add_argument("version")
    rollback = add("rollback", _rollback, "Switch to an earlier recorded version")
    rollback.add_argument("--steps", type=int, default=1)
    add("delete", _delete, "Delete an application")
    return parser


def main(
    argv: list[str] | None = None,
    client_factory: Callable[[Settings], MarathonClient] = build_client,
) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    if args.url:
        settings.base_url = args.url
    level = logging.getLevelName(settings.log_level)
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    with client_factory(settings) as client, request_context():
        try:
            return args.handler(client, args)
        except MarathonError as exc:
            print(f"{exc.code}: {exc.message}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    raise SystemExit(main())
