"""
Command-line entry point.

Loads configuration, configures logging, then either runs one query against
the backend and prints the results as JSON lines, or performs one write
(recording hours, joining or leaving an event) and prints its outcome.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Optional, TextIO

import structlog
from pydantic import BaseModel, ValidationError

from hive_shared.schemas.hours import HoursCreate

from .config import ClientSettings, LoggingConfig, load_settings
from .hours import add_hours, organization_hours_query, user_hours_query
from .http import ApiError, ConfigurationError, HttpClient, MalformedResponseError
from .listings import (
    audit_log_query,
    event_detail_query,
    events_query,
    members_query,
    organization_detail_query,
    resources_query,
)
from .pagination import DetailQuery, PaginatedQuery
from .signups import join_event, leave_event


def configure_logging(config: LoggingConfig, stream: TextIO | None = None) -> None:
    """Route structlog output to ``stream`` (stderr by default).

    stdout is reserved for command results, so logs never go there.
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if config.format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(config.level),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Volunteer Hive API client")
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to a YAML configuration file (default: environment only)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def list_command(name: str, help_text: str, *, org_required: bool = True) -> argparse.ArgumentParser:
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--org", required=org_required, help="Organization id")
        p.add_argument(
            "--pages", type=int, default=1,
            help="Number of pages to follow (0 = all, default: 1)",
        )
        return p

    events = list_command("events", "List events")
    events.add_argument("--event", help="Restrict to one event id")
    events.add_argument("--status", help="Event status, e.g. upcoming or completed")

    members = list_command("members", "List members")
    members.add_argument("--role", help="Membership role")
    members.add_argument("-q", "--search", help="Free-text search on name/email")

    resources = list_command("resources", "List resources")
    resources.add_argument("--type", help="Resource type")
    resources.add_argument("--category", help="Resource category")

    audit = list_command("audit-log", "List audit log entries")
    audit.add_argument("--limit", type=int, help="Page size")
    audit.add_argument("--from", dest="from_", help="Earliest timestamp (ISO 8601)")
    audit.add_argument("--to", help="Latest timestamp (ISO 8601)")
    audit.add_argument("--action", help="Action name")
    audit.add_argument("--actor", help="Actor id or email")

    hours = list_command("hours", "List recorded volunteer hours", org_required=False)
    hours.add_argument("--user", help="Volunteer id (instead of --org)")

    event = sub.add_parser("event", help="Show one event")
    event.add_argument("--org", required=True, help="Organization id")
    event.add_argument("--event", required=True, help="Event id")

    organization = sub.add_parser("organization", help="Show one organization")
    organization.add_argument("--org", required=True, help="Organization id")

    log_hours = sub.add_parser("log-hours", help="Record volunteer hours")
    log_hours.add_argument("--user", required=True, help="Volunteer id")
    log_hours.add_argument("--date", required=True, help="Day worked (YYYY-MM-DD)")
    log_hours.add_argument("--hours", type=float, required=True, help="Hours worked")
    log_hours.add_argument("--org", help="Organization id")
    log_hours.add_argument("--event", help="Event id")
    log_hours.add_argument("--notes", help="Free-text notes")

    for name, help_text in (("join", "Sign up for an event"), ("leave", "Withdraw from an event")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--org", required=True, help="Organization id")
        p.add_argument("--event", required=True, help="Event id")

    return parser


def _to_json(item: Any) -> str:
    if isinstance(item, BaseModel):
        item = item.model_dump(mode="json")
    return json.dumps(item, default=str)


def _make_client(settings: ClientSettings, *, audit: bool = False) -> HttpClient:
    api = settings.api
    return HttpClient(
        settings.audit.base_url if audit else api.base_url,
        bearer_token=settings.audit.read_token if audit else api.bearer_token,
        request_timeout=api.request_timeout_seconds,
        verify_tls=api.verify_tls,
    )


def _build_query(
    args: argparse.Namespace,
    settings: ClientSettings,
    client: HttpClient,
) -> PaginatedQuery | DetailQuery:
    if args.command == "events":
        return events_query(client, args.org, event=args.event, status=args.status)
    if args.command == "members":
        return members_query(client, args.org, role=args.role, search=args.search)
    if args.command == "resources":
        return resources_query(client, args.org, type=args.type, category=args.category)
    if args.command == "audit-log":
        return audit_log_query(
            client,
            settings.audit,
            args.org,
            limit=args.limit,
            from_=args.from_,
            to=args.to,
            action=args.action,
            actor=args.actor,
        )
    if args.command == "hours":
        if args.user:
            return user_hours_query(client, args.user)
        if args.org:
            return organization_hours_query(client, args.org)
        raise ConfigurationError("hours needs --user or --org")
    if args.command == "event":
        return event_detail_query(client, args.org, args.event)
    if args.command == "organization":
        return organization_detail_query(client, args.org)
    raise ValueError(f"Unknown command: {args.command}")


# Commands that change state, with the action named in their failure message
WRITE_COMMANDS = {
    "log-hours": "record hours",
    "join": "join event",
    "leave": "leave event",
}


async def _run_write(args: argparse.Namespace, client: HttpClient) -> int:
    if args.command == "log-hours":
        entry = HoursCreate(
            user_id=args.user,
            date=args.date,
            hours=args.hours,
            organization_id=args.org,
            event_id=args.event,
            notes=args.notes,
        )
        print(_to_json(await add_hours(client, entry)))
    elif args.command == "join":
        joined = await join_event(client, args.org, args.event)
        print(_to_json({"event": args.event, "joined": joined}))
    elif args.command == "leave":
        await leave_event(client, args.org, args.event)
        print(_to_json({"event": args.event, "left": True}))
    return 0


async def run_command(
    args: argparse.Namespace,
    settings: ClientSettings,
    client: Optional[HttpClient] = None,
) -> int:
    """Run one CLI command. Returns the process exit code."""
    if not structlog.is_configured():
        configure_logging(settings.logging)
    log = structlog.get_logger()

    if args.command == "audit-log" and not settings.audit.configured:
        raise ConfigurationError(
            "Audit API base URL is not configured (set audit.base_url / HIVE_AUDIT__BASE_URL)"
        )
    client = client or _make_client(settings, audit=args.command == "audit-log")

    async with client:
        if args.command in WRITE_COMMANDS:
            try:
                return await _run_write(args, client)
            except (ApiError, MalformedResponseError) as exc:
                log.warning("cli.write_failed", command=args.command, error=str(exc))
                print(f"Failed to {WRITE_COMMANDS[args.command]}.", file=sys.stderr)
                return 1

        query = _build_query(args, settings, client)

        if isinstance(query, DetailQuery):
            item = await query.load()
            if query.error:
                print(query.error, file=sys.stderr)
                return 1
            if item is not None:
                print(_to_json(item))
            return 0

        max_pages = args.pages if args.pages > 0 else None
        items = await query.load_all(max_pages=max_pages)
        for item in items:
            print(_to_json(item))
        if query.error:
            print(query.error, file=sys.stderr)
            return 1
        log.info(
            "cli.listed",
            command=args.command,
            count=len(items),
            next_cursor=query.next_cursor,
        )
        return 0


def run() -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    try:
        settings = load_settings(args.config)
    except (ConfigurationError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except ValidationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.logging)

    try:
        code = asyncio.run(run_command(args, settings))
    except (ConfigurationError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    run()
